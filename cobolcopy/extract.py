"""Collect program facts (calls, paragraphs, sections, copybooks, files)."""

from __future__ import annotations

from dataclasses import dataclass, field


def clean_call_target(text: str) -> str | None:
    """Reduce a CALL target literal to its upper-cased program name."""
    cleaned = "".join(c for c in text if c.isalnum() or c in "-_")
    return cleaned.upper() if cleaned else None


def clean_paragraph_name(text: str) -> str | None:
    """Return the paragraph name from a header, ignoring names of 3 chars or fewer."""
    cleaned = text.strip().replace(".", "").upper()
    return cleaned if len(cleaned) > 3 else None


def clean_section_name(text: str) -> str | None:
    """Return the section name from a ``NAME SECTION.`` header."""
    cleaned = text.strip().replace(".", "").replace(" SECTION", "").upper()
    return cleaned or None


def copybook_name(text: str) -> str | None:
    """Return the copybook named by a COPY statement."""
    parts = text.upper().split()
    if len(parts) < 2:
        return None
    return parts[1].strip(".'\"")


def selected_file(text: str) -> str | None:
    """Return the file named by a SELECT clause."""
    parts = text.upper().split()
    if len(parts) >= 2 and parts[0] == "SELECT":
        return parts[1]
    return None


_HANDLERS = {
    "call_statement": ("calls", clean_call_target),
    "paragraph_header": ("paragraphs", clean_paragraph_name),
    "section_header": ("sections", clean_section_name),
    "copy_statement": ("copybooks", copybook_name),
    "select_statement": ("files", selected_file),
}


@dataclass
class ExtractionSummary:
    """Unique names found in a program, grouped by kind."""

    calls: set[str] = field(default_factory=set)
    paragraphs: set[str] = field(default_factory=set)
    sections: set[str] = field(default_factory=set)
    copybooks: set[str] = field(default_factory=set)
    files: set[str] = field(default_factory=set)
    errors: int = 0

    def add(self, kind: str, text: str) -> str | None:
        """Record the name carried by a syntax node of ``kind``.

        Returns the name recorded, or None if the kind is not of interest or
        no name could be extracted.
        """
        handler = _HANDLERS.get(kind)
        if handler is None:
            return None
        attribute, extract = handler
        name = extract(text)
        if name is not None:
            getattr(self, attribute).add(name)
        return name

    def render(self) -> str:
        """Render the summary as a sorted text listing."""
        lines = ["=== Extraction Output ===", f"Parse Errors: {self.errors}"]
        for title, names in (
            ("Files", self.files),
            ("Calls (unique)", self.calls),
            ("Paragraphs", self.paragraphs),
            ("Sections", self.sections),
            ("Copybooks", self.copybooks),
        ):
            lines.append("")
            lines.append(f"{title}: {len(names)}")
            lines.extend(f"  - {name}" for name in sorted(names))
        return "\n".join(lines) + "\n"