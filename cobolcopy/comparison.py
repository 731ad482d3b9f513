"""Side-by-side comparison of two parser runs over the same program."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterable

from cobolcopy.copybook import ResolvedCopybook


class ParserType(enum.Enum):
    """The parser back ends whose results can be compared."""

    TREE_SITTER = "tree-sitter-cobol"
    ALEPH = "cobolparser-aleph"

    def display_name(self) -> str:
        """Return the name the back end is known by."""
        return self.value


def merge_copybooks(
    copybooks: Iterable[str], resolved: Iterable[ResolvedCopybook]
) -> list[str]:
    """Append the names of inlined copybooks that are not already listed.

    The input list is left untouched; a new list is returned.
    """
    merged = list(copybooks)
    for copybook in resolved:
        if copybook.name not in merged:
            merged.append(copybook.name)
    return merged


def _row(label: str, *cells: Any) -> str:
    return "| " + " | ".join([label, *(str(cell) for cell in cells)]) + " |\n"


def _names(items: Iterable[Any]) -> str:
    return ", ".join(item.base.name for item in items)


@dataclass
class ParserComparison:
    """Results of both parsers for one file.

    Each result is expected to expose ``parse_time_ms``, ``program`` (with
    ``base.name``, ``data_definitions``, ``calls`` and ``copybooks``),
    ``procedures`` (each with ``base.name``), ``errors`` and ``warnings``.
    """

    tree_sitter: Any
    aleph: Any
    copybooks_resolved: bool = False

    def report(self) -> str:
        """Render the comparison as a Markdown report."""
        ts, al = self.tree_sitter, self.aleph
        parts: list[str] = ["# Parser Comparison Report\n\n"]

        if self.copybooks_resolved:
            parts.append("**Copybooks: RESOLVED (inlined before parsing)**\n\n")
        else:
            parts.append("**Copybooks: NOT resolved**\n\n")

        parts.append("## Performance\n")
        parts.append("| Parser | Parse Time (ms) |\n|--------|----------------|\n")
        parts.append(_row("Tree-sitter", ts.parse_time_ms))
        parts.append(_row("Cobolparser", al.parse_time_ms) + "\n")

        parts.append("## Program ID\n")
        parts.append("| Parser | Program ID |\n|--------|------------|\n")
        parts.append(_row("Tree-sitter", ts.program.base.name))
        parts.append(_row("Cobolparser", al.program.base.name) + "\n")

        parts.append("## Procedures Found\n")
        parts.append("| Parser | Count | Names |\n|--------|-------|-------|\n")
        parts.append(_row("Tree-sitter", len(ts.procedures), _names(ts.procedures)))
        parts.append(
            _row("Cobolparser", len(al.procedures), _names(al.procedures)) + "\n"
        )

        parts.append("## Data Definitions\n")
        parts.append("| Parser | Count |\n|--------|-------|\n")
        parts.append(_row("Tree-sitter", len(ts.program.data_definitions)))
        parts.append(_row("Cobolparser", len(al.program.data_definitions)) + "\n")

        parts.append("## External Calls\n")
        parts.append("| Parser | Count | Targets |\n|--------|-------|--------|\n")
        parts.append(
            _row("Tree-sitter", len(ts.program.calls), ", ".join(ts.program.calls))
        )
        parts.append(
            _row("Cobolparser", len(al.program.calls), ", ".join(al.program.calls))
            + "\n"
        )

        parts.append("## Copybooks\n")
        parts.append("| Parser | Count | Names |\n|--------|-------|-------|\n")
        parts.append(
            _row(
                "Tree-sitter",
                len(ts.program.copybooks),
                ", ".join(ts.program.copybooks),
            )
        )
        parts.append(
            _row(
                "Cobolparser",
                len(al.program.copybooks),
                ", ".join(al.program.copybooks),
            )
            + "\n"
        )

        parts.append("## Parse Errors\n")
        parts.append(
            "| Parser | Error Count | Warning Count |\n"
            "|--------|-------------|---------------|\n"
        )
        parts.append(_row("Tree-sitter", len(ts.errors), len(ts.warnings)))
        parts.append(_row("Cobolparser", len(al.errors), len(al.warnings)))

        return "".join(parts)