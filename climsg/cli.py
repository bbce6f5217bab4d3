"""Command line demo for climsg."""

from __future__ import annotations

import argparse
import sys

from climsg.chain import wrap
from climsg.colour import ColourMode
from climsg.msg import Printer


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    parser = argparse.ArgumentParser(prog="climsg")
    parser.add_argument(
        "--colour",
        type=_colour_mode,
        default=ColourMode.AUTO,
        metavar="{auto,always,never}",
        help="Colour output (default: auto-detect from NO_COLOR/FORCE_COLOR/terminal).",
    )
    parser.add_argument(
        "--structured",
        action="store_true",
        help="Render error causes from the exception chain instead of splitting the message.",
    )

    sub = parser.add_subparsers(dest="cmd")
    sub.add_parser("demo", help="Print one message of every kind (default).")
    error_cmd = sub.add_parser("error", help="Wrap messages into an error chain and render it.")
    error_cmd.add_argument(
        "messages",
        nargs="+",
        help="Messages from outermost context to innermost cause.",
    )

    args = parser.parse_args(argv)
    printer = Printer(mode=args.colour)

    try:
        try:
            if args.cmd == "error":
                _cmd_error(printer, args.messages, structured=args.structured)
            else:
                _cmd_demo(printer, structured=args.structured)
        except BrokenPipeError:
            # * Reader went away (e.g. `climsg demo | head -1`); nothing left to report to.
            return 1
        except OSError as exc:
            printer.error("%s", exc)
            return 1
        return 0
    except KeyboardInterrupt:
        print(file=sys.stderr, flush=True)
        Printer(stdout=sys.stderr, mode=args.colour).warn("Interrupted by user (Ctrl+C).")
        return 130


def _colour_mode(raw: str) -> ColourMode:
    try:
        return ColourMode.parse(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _cmd_demo(printer: Printer, *, structured: bool) -> None:
    printer.title("Your CLI output:")
    printer.success("compiled %d packages", 42)
    printer.warn("directory is empty, skipping")
    printer.info("using value from config file")
    printer.text("")

    # * Simulate errors wrapped on their way up through an application.
    err = wrap(PermissionError("bad file permissions"), "could not read DB config")
    err = wrap(err, "failed to insert new record")
    err = wrap(err, "could not complete transaction")
    printer.err(err, structured=structured)


def _cmd_error(printer: Printer, messages: list[str], *, structured: bool) -> None:
    innermost, *contexts = reversed(messages)
    err: BaseException = RuntimeError(innermost)
    for context in contexts:
        err = wrap(err, context)
    printer.err(err, structured=structured)
