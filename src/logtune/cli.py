"""Command-line entry point.

Examples::

    logtune parse train.log
    logtune edit train.log --metric ACC --tool generate --from 3 --to 8 \\
        --start-value 0.30 --end-value 0.55 --easing ease_out_quad -o out.log
    logtune edit train.log --metric L_total --tool jitter --seed 7 \\
        --amplitude 0.2 --correlation 0.8 -o out.log
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from logtune.config import LogTuneConfig, resolve_config
from logtune.exceptions import EditOperationError, LogTuneError
from logtune.parsing.parser import LogParser
from logtune.rewriting.summary import summarize
from logtune.session import EditSession, SessionSettings
from logtune.signal.easing import EasingRegistry
from logtune.signal.registry import OperationRegistry

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger("logtune")


def _overrides(pairs: Sequence[str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise LogTuneError(f"Expected KEY=VALUE, got {pair!r}")
        overrides[f"logtune_{key.strip()}"] = value.strip()
    return overrides


def _cmd_parse(args: argparse.Namespace, config: LogTuneConfig) -> int:
    text = Path(args.log).read_text(encoding="utf-8")
    parsed = LogParser(config).parse(text).require_data()
    footer = summarize(parsed.data, config)
    summary = {
        "epochs": len(parsed.data),
        "first_epoch": parsed.epochs[0],
        "last_epoch": parsed.epochs[-1],
        "metrics": parsed.keys,
        "args": parsed.args,
        "best_epoch": footer.best["epoch"] if footer.best else None,
        "best_metric": footer.target_metric,
        "averages": footer.averages,
    }
    if args.records:
        summary["records"] = parsed.data
    json.dump(summary, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def _cmd_edit(args: argparse.Namespace, config: LogTuneConfig) -> int:
    text = Path(args.log).read_text(encoding="utf-8")
    session = EditSession(text, config)

    settings = session.settings.model_copy(
        update={
            "metric": args.metric,
            "range_start": args.range_from if args.range_from is not None else session.settings.range_start,
            "range_end": args.range_to if args.range_to is not None else session.settings.range_end,
        }
    )
    session.settings = settings
    session.sync_generation_bounds()

    params = {
        name: getattr(args, name)
        for name in ("start_value", "end_value", "easing", "seed", "amplitude", "correlation", "offset")
        if getattr(args, name) is not None
    }
    params["tool"] = args.tool
    # Revalidate: model_copy(update=...) skips validation.
    try:
        settings = SessionSettings.model_validate({**session.settings.model_dump(), **params})
    except ValidationError as exc:
        raise EditOperationError(f"Invalid edit settings: {exc}") from exc

    result = session.apply(settings)
    if not result.points:
        logger.warning("Operation touched no points; window %s", session.window(settings))
    rewrite = session.save()

    output = Path(args.output) if args.output else None
    if output is None:
        sys.stdout.write(rewrite.text)
    else:
        output.write_text(rewrite.text, encoding="utf-8")
        logger.info("Wrote %s (%d epochs updated)", output, len(rewrite.modified_epochs))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logtune",
        description="Parse, edit and rewrite training-run logs.",
    )
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override an editing config field (e.g. round_digits=4).",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    parse_cmd = commands.add_parser("parse", help="Print a JSON summary of a log.")
    parse_cmd.add_argument("log", help="Path to the log file.")
    parse_cmd.add_argument(
        "--records",
        action="store_true",
        help="Include every parsed record in the output.",
    )
    parse_cmd.set_defaults(handler=_cmd_parse)

    edit_cmd = commands.add_parser("edit", help="Apply one operation and rewrite the log.")
    edit_cmd.add_argument("log", help="Path to the log file.")
    edit_cmd.add_argument("--metric", required=True, help="Metric to edit.")
    edit_cmd.add_argument(
        "--tool",
        choices=OperationRegistry.list_registered(),
        default="generate",
        help="Edit operation (default: generate).",
    )
    edit_cmd.add_argument("--from", dest="range_from", type=int, help="First epoch (default: first).")
    edit_cmd.add_argument("--to", dest="range_to", type=int, help="Last epoch (default: last).")
    edit_cmd.add_argument("--start-value", type=float, help="generate: value at the first epoch.")
    edit_cmd.add_argument("--end-value", type=float, help="generate: value at the last epoch.")
    edit_cmd.add_argument("--easing", choices=EasingRegistry.list_registered(), help="generate: easing.")
    edit_cmd.add_argument("--seed", type=int, help="jitter: RNG seed (default: 12345).")
    edit_cmd.add_argument("--amplitude", type=float, help="jitter: noise amplitude (default: 0.05).")
    edit_cmd.add_argument("--correlation", type=float, help="jitter: 0 white .. 0.99 smooth.")
    edit_cmd.add_argument("--offset", type=float, help="offset: constant to add.")
    edit_cmd.add_argument("--output", "-o", help="Output path (default: stdout).")
    edit_cmd.set_defaults(handler=_cmd_edit)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = resolve_config(LogTuneConfig(), _overrides(args.set))
        return int(args.handler(args, config))
    except LogTuneError as exc:
        logger.error("%s", exc)
        return 1
    except OSError as exc:
        logger.error("Cannot read or write file: %s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
