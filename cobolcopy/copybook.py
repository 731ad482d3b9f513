"""Inline COPY statements in COBOL source before parsing.

Supported forms::

    COPY copybook-name.
    COPY copybook-name OF library-name.
    COPY DDS-ALL-FORMATS OF file-name.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

_COPY_PATTERN = re.compile(
    r"(.{0,6})\s*COPY\s+([A-Z0-9_-]+)(?:\s+OF\s+([A-Z0-9_-]+))?\s*\.\s*",
    re.IGNORECASE,
)


class CopybookError(Exception):
    """Base class for copybook resolution failures."""


class CopybookNotFoundError(CopybookError):
    """No candidate file exists for a copybook."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Copybook not found: {name}")
        self.name = name


class CopybookIOError(CopybookError):
    """A copybook or directory exists but could not be read."""

    def __init__(self, name: str, cause: BaseException) -> None:
        super().__init__(f"IO error reading copybook {name}: {cause}")
        self.name = name
        self.cause = cause


class MaxRecursionDepthError(CopybookError):
    """Nested COPY statements went deeper than allowed."""

    def __init__(self, max_depth: int) -> None:
        super().__init__(
            f"Maximum recursion depth ({max_depth}) exceeded while resolving copybooks"
        )
        self.max_depth = max_depth


class CircularDependencyError(CopybookError):
    """A copybook (directly or indirectly) copies itself."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Circular dependency detected: {name}")
        self.name = name


def _default_extensions() -> list[str]:
    return ["cpy", "CPY", "cbl", "CBL", ""]


@dataclass
class CopybookConfig:
    """Settings that control how copybooks are located and inlined."""

    search_paths: list[Path] = field(default_factory=lambda: [Path("sources/cpy")])
    extensions: list[str] = field(default_factory=_default_extensions)
    max_depth: int = 10
    mark_inlined: bool = True
    preserve_original: bool = True


@dataclass
class ResolvedCopybook:
    """A copybook that was inlined into the source."""

    name: str
    library: str | None
    original_line: int
    inserted_lines: int


@dataclass
class ResolvedSource:
    """Source text with COPY statements inlined, plus what was inlined."""

    source: str
    copybooks: list[ResolvedCopybook] = field(default_factory=list)


def _split_lines(text: str) -> list[str]:
    """Split on newlines, dropping one trailing empty line and any CR."""
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def is_copy_statement(line: str) -> bool:
    """Return True if the line is a COPY statement the resolver would inline."""
    return _COPY_PATTERN.fullmatch(line) is not None


def _read_text(path: Path) -> str:
    with open(path, encoding="utf-8", newline="") as handle:
        return handle.read()


class CopybookResolver:
    """Replaces COPY statements with the contents of the named copybooks."""

    def __init__(self, config: CopybookConfig | None = None) -> None:
        config = config if config is not None else CopybookConfig()
        self.config = CopybookConfig(
            search_paths=[Path(p) for p in config.search_paths],
            extensions=list(config.extensions),
            max_depth=config.max_depth,
            mark_inlined=config.mark_inlined,
            preserve_original=config.preserve_original,
        )
        self._cache: dict[str, str] = {}

    @classmethod
    def with_paths(cls, paths: Iterable[Path | str]) -> "CopybookResolver":
        """Build a resolver with the default config plus extra search paths."""
        config = CopybookConfig()
        config.search_paths.extend(Path(p) for p in paths)
        return cls(config)

    def resolve(self, source: str) -> ResolvedSource:
        """Inline every COPY statement in ``source``, recursively."""
        copybooks: list[ResolvedCopybook] = []
        text = self._resolve_recursive(source, 0, copybooks, set())
        return ResolvedSource(source=text, copybooks=copybooks)

    def _resolve_recursive(
        self,
        source: str,
        depth: int,
        resolved: list[ResolvedCopybook],
        visiting: set[str],
    ) -> str:
        if depth > self.config.max_depth:
            raise MaxRecursionDepthError(self.config.max_depth)

        out: list[str] = []
        for line_number, line in enumerate(_split_lines(source), start=1):
            match = _COPY_PATTERN.fullmatch(line)
            if match is None:
                out.append(line + "\n")
                continue

            prefix = match.group(1) or ""
            name = match.group(2)
            library = match.group(3)

            key = name.upper()
            if key in visiting:
                raise CircularDependencyError(key)

            try:
                content = self._load_copybook(name, library)
            except (CopybookNotFoundError, CopybookIOError) as exc:
                out.append(f"{prefix}*>>> WARNING: {exc} <<<\n")
                out.append(line + "\n")
                continue

            visiting.add(key)
            nested = self._resolve_recursive(content, depth + 1, resolved, visiting)
            visiting.discard(key)

            resolved.append(
                ResolvedCopybook(
                    name=name.upper(),
                    library=library.upper() if library is not None else None,
                    original_line=line_number,
                    inserted_lines=len(_split_lines(nested)),
                )
            )

            if self.config.preserve_original:
                of_clause = f" OF {library}" if library is not None else ""
                out.append(f"{prefix}*>>> COPY {name}{of_clause} - ORIGINAL <<<\n")
            if self.config.mark_inlined:
                out.append(f"{prefix}*>>> BEGIN INLINED COPY {name} <<<\n")
            out.append(nested)
            if self.config.mark_inlined:
                if not nested.endswith("\n"):
                    out.append("\n")
                out.append(f"{prefix}*>>> END INLINED COPY {name} <<<\n")

        return "".join(out)

    def _load_copybook(self, name: str, library: str | None) -> str:
        if library is not None:
            key = f"{library.upper()}:{name.upper()}"
        else:
            key = name.upper()
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        content = self._find_and_read(name, library)
        self._cache[key] = content
        return content

    def _candidates(self, name: str, library: str | None) -> list[Path]:
        def filename(ext: str) -> str:
            return f"{name}.{ext}" if ext else name

        candidates: list[Path] = []
        for base in self.config.search_paths:
            if library is not None:
                for ext in self.config.extensions:
                    fname = filename(ext)
                    candidates.append(base / library / fname)
                    candidates.append(base / f"{library}-{fname}")
            for ext in self.config.extensions:
                fname = filename(ext)
                candidates.append(base / fname)
                candidates.append(base / fname.upper())
                candidates.append(base / fname.lower())
        return candidates

    def _find_and_read(self, name: str, library: str | None) -> str:
        for path in self._candidates(name, library):
            if path.exists():
                try:
                    return _read_text(path)
                except (OSError, UnicodeDecodeError) as exc:
                    raise CopybookIOError(name, exc) from exc
        raise CopybookNotFoundError(name)

    def clear_cache(self) -> None:
        """Forget every copybook loaded so far."""
        self._cache.clear()

    def add_search_path(self, path: Path | str) -> None:
        """Append a search directory unless it is already present."""
        path = Path(path)
        if path not in self.config.search_paths:
            self.config.search_paths.append(path)

    def preload_directory(self, directory: Path | str) -> int:
        """Cache every readable file in ``directory`` under its upper-cased stem.

        Returns the number of files cached; a missing directory yields 0.
        """
        directory = Path(directory)
        if not directory.exists():
            return 0
        try:
            entries = list(directory.iterdir())
        except OSError as exc:
            raise CopybookIOError(str(directory), exc) from exc

        count = 0
        for entry in entries:
            if not entry.is_file():
                continue
            try:
                content = _read_text(entry)
            except (OSError, UnicodeDecodeError):
                continue
            self._cache[entry.stem.upper()] = content
            count += 1
        return count