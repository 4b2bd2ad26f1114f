"""shellcomp command line interface."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field

from .ansi import paint, report_style
from .constants import SUPPORTED_SHELLS, VERSION
from .handlers import handle_generate, handle_validate
from .logging_setup import get_logger, init_logger
from .models import ExitCode

COMMANDS = ("generate", "validate", "install")


@dataclass
class Args:
    """Parsed command line arguments."""

    command: str | None = None
    params: list[str] = field(default_factory=list)
    debug: bool = False
    help: bool = False
    version: bool = False
    log_file: str | None = None


def parse_args(argv: list[str]) -> Args:
    """Parse command line arguments.

    Args:
        argv: Command line arguments (without program name)

    Returns:
        Parsed arguments
    """
    args = Args()
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in ("--help", "-h"):
            args.help = True
            i += 1
        elif arg in ("--version", "-V"):
            args.version = True
            i += 1
        elif arg == "--debug":
            args.debug = True
            i += 1
        elif arg == "--log-file" and i + 1 < len(argv):
            args.log_file = argv[i + 1]
            i += 2
        elif args.command is None:
            args.command = arg
            i += 1
        else:
            args.params.append(arg)
            i += 1
    return args


def print_help() -> None:
    """Print the help message."""
    shells = "|".join(SUPPORTED_SHELLS)
    print("Usage: shellcomp [OPTIONS] COMMAND [ARGS]")
    print()
    print("Generate shell completion scripts from a CLI description.")
    print()
    print("Commands:")
    print(f"  generate <{shells}> <source> [default|PATH]")
    print("                      Print the script, or write it to the default location or PATH")
    print("  validate <source>   Check a schema document and report errors and warnings")
    print("  install [<source>]  Interactive installation")
    print()
    print("A source is a .json or .toml schema document, or module:attribute naming an")
    print("argparse.ArgumentParser (or a callable returning one).")
    print()
    print("Options:")
    print("  --debug             Verbose logging")
    print("  --log-file PATH     Also log to PATH")
    print("  --version           Show the version")
    print("  --help              Show this message")


def print_report(report: str, code: ExitCode) -> None:
    """Print a validation report, colored when the output is a terminal.

    Args:
        report: The report lines
        code: Exit code of the validation
    """
    valid = code == ExitCode.SUCCESS
    stream = sys.stdout if valid else sys.stderr
    for line in report.splitlines():
        print(paint(line, report_style(line, valid), stream), file=stream)


def _fail(message: str, code: ExitCode) -> None:
    print(message, file=sys.stderr)
    sys.exit(code)


def run(args: Args) -> ExitCode:
    """Run a parsed command line.

    Args:
        args: Parsed arguments

    Returns:
        The exit code
    """
    init_logger(args.log_file, force_debug=args.debug)
    log = get_logger()
    log.debug("Running %s %s", args.command, args.params)

    if args.command == "generate":
        code, result = handle_generate(args.params, log)
        if code != ExitCode.SUCCESS:
            _fail(result, code)
        print(result, end="" if result.endswith("\n") else "\n")
        return code

    if args.command == "validate":
        if len(args.params) != 1:
            _fail("Usage: validate <source>", ExitCode.USAGE_ERROR)
        code, report = handle_validate(args.params[0], log)
        print_report(report, code)
        return code

    if args.command == "install":
        from .wizard import run_wizard  # noqa: PLC0415  # pylint: disable=import-outside-toplevel

        try:
            installed = run_wizard(args.params[0] if args.params else None, log)
        except KeyboardInterrupt:
            print("\n\nInstallation cancelled.")
            return ExitCode.USAGE_ERROR
        return ExitCode.SUCCESS if installed else ExitCode.USAGE_ERROR

    _fail(f"Unknown command: {args.command}. Available: {', '.join(COMMANDS)}", ExitCode.USAGE_ERROR)
    return ExitCode.USAGE_ERROR


def main() -> None:
    """Entry point for the shellcomp command."""
    args = parse_args(sys.argv[1:])

    if args.version:
        print(VERSION)
        sys.exit(ExitCode.SUCCESS)

    # Handle --help early
    if args.help or args.command is None:
        print_help()
        sys.exit(ExitCode.SUCCESS if args.help else ExitCode.USAGE_ERROR)

    sys.exit(run(args))


if __name__ == "__main__":
    main()
