"""Command-line argument handling for parsing a COBOL file with copybooks."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from cobolcopy.copybook import CopybookConfig

_EXTRA_SEARCH_PATHS = (Path("sources/cpy"), Path("sources/copy"))


class UsageError(Exception):
    """The command line could not be accepted.

    ``show_usage`` tells the caller to print the usage text as well.
    """

    def __init__(self, message: str, show_usage: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.show_usage = show_usage


@dataclass
class CliOptions:
    """What the command line asked for."""

    file_path: Path | None = None
    copybook_paths: list[Path] = field(default_factory=list)
    resolve_copybooks: bool = True
    pretty: bool = False
    show_help: bool = False


def usage() -> str:
    """Return the usage text."""
    return "\n".join(
        [
            "Usage: cobol_parse <file.cob> [--copybook-path <path>]...",
            "",
            "Options:",
            "  --copybook-path <path>  Add copybook search path (can be repeated)",
            "  --no-copybooks          Don't resolve copybooks",
            "  --pretty                Pretty-print JSON output",
            "  --help                  Show this help",
        ]
    )


def parse_arguments(argv: Sequence[str] | None = None) -> CliOptions:
    """Turn command-line arguments (without the program name) into options.

    Raises UsageError for anything the command does not accept, including an
    input file that does not exist. ``--help`` stops processing at once and
    returns options with ``show_help`` set.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        raise UsageError("No input file specified", show_usage=True)

    options = CliOptions()
    remaining = iter(args)
    for arg in remaining:
        if arg in ("--help", "-h"):
            options.show_help = True
            return options
        if arg == "--copybook-path":
            value = next(remaining, None)
            if value is None:
                raise UsageError("--copybook-path requires a path argument")
            options.copybook_paths.append(Path(value))
        elif arg == "--no-copybooks":
            options.resolve_copybooks = False
        elif arg == "--pretty":
            options.pretty = True
        elif arg.startswith("-"):
            raise UsageError(f"Unknown option: {arg}")
        else:
            if options.file_path is not None:
                raise UsageError("Multiple input files not supported")
            options.file_path = Path(arg)

    if options.file_path is None:
        raise UsageError("No input file specified", show_usage=True)
    if not options.file_path.exists():
        raise UsageError(f"File not found: {options.file_path}")
    return options


def build_copybook_config(options: CliOptions) -> CopybookConfig:
    """Build the copybook search configuration for the given options.

    The search order is: the defaults, the input file's directory, every
    ``--copybook-path`` in the order given, then the common relative paths.
    """
    config = CopybookConfig()
    if options.file_path is not None:
        config.search_paths.append(options.file_path.parent)
    config.search_paths.extend(options.copybook_paths)
    config.search_paths.extend(_EXTRA_SEARCH_PATHS)
    return config