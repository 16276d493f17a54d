"""Command line entry point.

    paperclip play [--config PATH] [--seed N]
    paperclip run --ticks N [--script PATH] [--csv PATH] [--json PATH] [--html PATH] [--seed N]

Running ``paperclip`` with no subcommand starts ``play``.
"""

import argparse
import logging
import readline
import sys
import time
from typing import Callable, List, Optional, TextIO

from .config.loader import load_config
from .engine.randomness import make_rng
from .notify.renderer import format_panel
from .notify.sink import ConsoleSink
from .reporting.charts import create_trajectory_charts
from .reporting.export import export_csv, export_html_report, export_json
from .session import Session
from .simulation.runner import SessionRunner, load_script

logger = logging.getLogger(__name__)

PROMPT = "> "

META_HELP = [
    ":tab <text>   show what autocomplete makes of <text>",
    ":older        recall an older command",
    ":newer        recall a newer command",
    ":actions      list quick actions",
    ":panel        show automation and current prices",
    ":tick [n]     advance n ticks now (default 1)",
    ":quit         leave the session",
]


class TickClock:
    """Converts monotonic wall time into due ticks.

    The interactive loop is single-threaded: it asks the clock how many ticks
    fell due since the last call and runs them before handling input.
    """

    def __init__(self, period: float, max_catchup: int, now: Callable[[], float] = time.monotonic):
        self.period = period
        self.max_catchup = max_catchup
        self.now = now
        self.last = now()

    def due(self) -> int:
        elapsed = self.now() - self.last
        count = int(elapsed // self.period)
        if count <= 0:
            return 0
        self.last += count * self.period
        if count > self.max_catchup:
            logger.info("Dropping %d overdue ticks", count - self.max_catchup)
            count = self.max_catchup
        return count


class LineEditor:
    """Wires readline to a session: Tab completes the whole input line,
    Up/Down walk the submitted commands.
    """

    def __init__(self, session: Session, backend=readline):
        self.session = session
        self.backend = backend

    def install(self) -> None:
        # The whole buffer is one "word" so completions may replace it entirely
        self.backend.set_completer_delims("")
        self.backend.set_completer(self.complete)
        self.backend.parse_and_bind("tab: complete")
        self.backend.set_auto_history(False)

    def complete(self, text: str, state: int) -> Optional[str]:
        if state > 0:
            return None
        return self.session.autocomplete(text)

    def remember(self, line: str) -> None:
        self.backend.add_history(line)


def _handle_meta(session: Session, line: str, out: TextIO) -> bool:
    """Run a ``:`` command. Returns False when the session should end."""
    name, _, arg = line[1:].partition(" ")
    name = name.lower()

    if name in ("quit", "exit"):
        return False
    if name == "tab":
        out.write(repr(session.autocomplete(arg)) + "\n")
    elif name == "older":
        out.write(session.history_older() + "\n")
    elif name == "newer":
        out.write(session.history_newer() + "\n")
    elif name == "actions":
        for action in session.quick_actions():
            state = "ready" if action.enabled else "disabled"
            out.write(f"  {action.label:<20} [{state}]  {action.command}\n")
    elif name == "panel":
        out.write(format_panel(session.view()) + "\n")
    elif name == "tick":
        count = int(arg) if arg.strip().isdigit() else 1
        session.run_ticks(count)
    else:
        out.write("\n".join(META_HELP) + "\n")
    return True


def run_repl(
    session: Session,
    clock: TickClock,
    input_fn: Callable[[str], str] = input,
    out: Optional[TextIO] = None,
    editor: Optional[LineEditor] = None,
) -> None:
    """Interactive loop; returns on ``:quit`` or end of input.

    With an ``editor``, submitted commands feed its recall history and Tab
    completes through the session.
    """
    out = out or sys.stdout
    if editor is not None:
        editor.install()
    session.boot()
    while True:
        try:
            line = input_fn(PROMPT)
        except (EOFError, KeyboardInterrupt):
            out.write("\n")
            break

        session.run_ticks(clock.due())

        stripped = line.strip()
        if stripped.startswith(":"):
            if not _handle_meta(session, stripped, out):
                break
            continue
        if stripped and editor is not None:
            editor.remember(stripped)
        session.execute(line)


def _print_summary(result, out: TextIO) -> None:
    metrics = result.final_metrics
    out.write(f"Config hash:    {result.config.compute_hash()}\n")
    out.write(f"Ticks:          {metrics['ticks']:,}\n")
    out.write(f"Clips made:     {metrics['clips_made']:,}\n")
    out.write(f"Total sold:     {metrics['total_sold']:,}\n")
    out.write(f"Funds:          {metrics['funds']:,.2f}\n")
    out.write(f"Autoclippers:   {metrics['autoclippers']}\n")
    out.write(f"Factories:      {metrics['factories']}\n")
    out.write(f"Violations:     {len(result.invariant_violations)}\n")


def cmd_play(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    seed = args.seed if args.seed is not None else config.session.random_seed
    sink = ConsoleSink()
    session = Session(config, sink=sink, rng=make_rng(seed))
    sink.clock = session.elapsed_seconds
    clock = TickClock(config.session.tick_seconds, config.session.max_catchup_ticks)
    run_repl(session, clock, editor=LineEditor(session))
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    script = load_script(args.script) if args.script else None
    result = SessionRunner(config).run(args.ticks, script=script, random_seed=args.seed)

    if args.csv:
        export_csv(result, args.csv)
    if args.json:
        export_json(result, args.json)
    if args.html:
        export_html_report(result, args.html, charts=create_trajectory_charts(result.states))

    _print_summary(result, sys.stdout)
    return 1 if result.invariant_violations else 0


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=None, help="YAML config (defaults to the packaged defaults)")
    common.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    common.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Diagnostic log level",
    )

    parser = argparse.ArgumentParser(prog="paperclip", description="Paperclip factory command console")
    parser.set_defaults(command="play", config=None, seed=None, log_level="WARNING")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("play", parents=[common], help="Interactive session (default)")

    run = sub.add_parser("run", parents=[common], help="Headless run for a fixed number of ticks")
    run.add_argument("--ticks", type=int, required=True, help="Ticks to simulate")
    run.add_argument("--script", default=None, help="YAML command script keyed by tick")
    run.add_argument("--csv", default=None, help="Write the trajectory to CSV")
    run.add_argument("--json", default=None, help="Write the full result to JSON")
    run.add_argument("--html", default=None, help="Write an HTML report with charts")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.command == "run":
        return cmd_run(args)
    return cmd_play(args)


if __name__ == "__main__":
    sys.exit(main())
