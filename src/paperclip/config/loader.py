"""Read session configuration from YAML.

With no path, the ``defaults.yaml`` shipped inside this package is used, so
an installed ``paperclip`` works without any file on disk next to it.
"""

import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .schema import Config

logger = logging.getLogger(__name__)

DEFAULTS_FILE = "defaults.yaml"


def _read_yaml(yaml_path: Optional[Union[str, Path]]) -> Dict[str, Any]:
    if yaml_path is None:
        text = resources.files(__package__).joinpath(DEFAULTS_FILE).read_text()
    else:
        text = Path(yaml_path).read_text()
    return yaml.safe_load(text) or {}


def config_from_dict(data: Optional[Dict[str, Any]]) -> Config:
    """
    Build a validated config; missing sections and keys take their defaults.

    Raises:
        pydantic.ValidationError: on out-of-range or inconsistent values
    """
    return Config.from_dict(data)


def load_config(yaml_path: Optional[Union[str, Path]] = None) -> Config:
    """
    Load a session configuration.

    Args:
        yaml_path: YAML file to read (the packaged defaults when omitted)

    Returns:
        Validated Config
    """
    config = config_from_dict(_read_yaml(yaml_path))
    logger.debug("Loaded config %s from %s", config.compute_hash(), yaml_path or DEFAULTS_FILE)
    return config
