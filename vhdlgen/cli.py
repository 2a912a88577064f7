"""CLI entrypoints for vhdlgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .assembler import DocumentAssembler
from .config import load_config
from .errors import VhdlGenError
from .loader import load_module
from .logging import configure_logging, get_logger

logger = get_logger("cli")


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    def default(value: object) -> object:
        return argparse.SUPPRESS if suppress_default else value

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default(False),
        help="Increase log verbosity for troubleshooting.",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default(False),
        help="Only report warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        default=default(None),
        help="Also write a full debug log to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vhdlgen",
        description="Generate documented VHDL source files from module descriptions.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate the VHDL file for a YAML module description.",
    )
    _add_logging_options(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "module",
        help="Path to the YAML module description.",
    )
    generate_parser.add_argument(
        "--config",
        default=None,
        help="Path to .vhdlgen.yml or the directory holding it "
        "(defaults to the module's directory).",
    )
    generate_parser.add_argument(
        "--output",
        default=".",
        help="Directory receiving the generated file (defaults to current directory).",
    )
    generate_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the generated file instead of writing it.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for vhdlgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    if args.command == "generate":
        module_path = Path(args.module)
        config_path = Path(args.config) if args.config else module_path.parent
        logger.debug("Using configuration from %s", config_path)
        try:
            config = load_config(config_path)
            module = load_module(module_path)
            assembler = DocumentAssembler(config)
            if args.stdout:
                sys.stdout.write(assembler.generate(module))
                return
            written = assembler.write(module, Path(args.output))
        except VhdlGenError as exc:
            parser.exit(1, f"vhdlgen generate failed: {exc}\n")
        print(f"VHDL written to {_relativize(written)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
