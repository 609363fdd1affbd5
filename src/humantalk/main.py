#!/usr/bin/env python3
"""humantalk command line: emit messages from shell scripts"""

import argparse
import logging
import sys
from dataclasses import replace

from . import __version__
from .adapters.config_env import load_debug_config
from .api import FATAL_EXIT_CODE, configure
from .core.errors import HumantalkError
from .core.models import EmitStatus
from .core.severity import Severity
from .platform_utils import machine_info


def _parse_meta(values: list[str]) -> dict[str, str]:
    meta = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"metadata must look like key=value, got {item!r}")
        meta[key] = value
    return meta


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="humantalk", description=__doc__)
    parser.add_argument("--version", action="version", version=f"humantalk {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="log humantalk internals")
    sub = parser.add_subparsers(dest="command", required=True)

    emit_p = sub.add_parser("emit", help="show a message")
    emit_p.add_argument("severity", type=str.lower, choices=[s.value for s in Severity])
    emit_p.add_argument("text", nargs="?", default="")
    emit_p.add_argument("--meta", action="append", default=[], metavar="KEY=VALUE")
    emit_p.add_argument("--frame", action="append", default=[], metavar="'FUNC at LOCATION'")
    emit_p.add_argument("--debug", action="store_true", help="render debug messages")
    emit_p.add_argument("--report-sink", help="where crash reports are written")
    emit_p.add_argument("--report-url", help="where users should file bug reports")

    sub.add_parser("info", help="print machine info")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "info":
        print(machine_info())
        return 0

    try:
        meta = _parse_meta(args.meta)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    debug_config = load_debug_config()
    if args.debug:
        debug_config = replace(debug_config, debug_enabled=True)
    if args.report_sink:
        debug_config = replace(debug_config, report_sink=args.report_sink)
    if args.report_url:
        debug_config = replace(debug_config, bug_report=replace(debug_config.bug_report, url=args.report_url))

    router = configure(debug_config)
    try:
        result = router.emit(args.severity, args.text, metadata=meta, stack_context=args.frame)
    except HumantalkError as e:
        print(e.user_message, file=sys.stderr)
        return FATAL_EXIT_CODE if getattr(e, "capture", None) else 1

    if result.status is EmitStatus.FATAL_HANDLED:
        return FATAL_EXIT_CODE
    return 0


if __name__ == "__main__":
    sys.exit(main())
