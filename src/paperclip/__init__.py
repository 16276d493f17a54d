"""Paperclip factory simulation: economy engine and command console."""

from .config.loader import load_config
from .session import Session

__version__ = "1.0.0"

__all__ = ["Session", "load_config", "__version__"]
