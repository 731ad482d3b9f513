"""Helpers for classifying parse errors and showing source context."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence


def categorize_error(message: str) -> str:
    """Put a parse error message into a coarse category."""
    upper = message.upper()
    if "EXEC SQL" in upper or "END-EXEC" in upper:
        return "EXEC SQL"
    if "LINKAGE SECTION" in upper:
        return "LINKAGE SECTION"
    if "EJECT" in upper:
        return "EJECT"
    return "Parse error"


@dataclass
class ErrorTally:
    """Counts of parse errors per category."""

    counts: Counter = field(default_factory=Counter)

    @property
    def total(self) -> int:
        """Number of errors added so far."""
        return sum(self.counts.values())

    def add(self, message: str) -> str:
        """Count one error message and return its category."""
        category = categorize_error(message)
        self.counts[category] += 1
        return category

    def summary(self) -> list[tuple[str, int]]:
        """Categories with their counts, most frequent first."""
        return self.counts.most_common()


def format_context(lines: Sequence[str], center_line: int, context: int) -> str:
    """Show ``context`` lines either side of 1-based ``center_line``, marked."""
    start = max(center_line - context - 1, 0)
    end = min(center_line + context, len(lines))
    rows = []
    for number, line in enumerate(lines[start:end], start=start + 1):
        marker = ">>>" if number == center_line else "   "
        rows.append(f"{marker} {number:4}: |{line}|")
    return "\n".join(rows)