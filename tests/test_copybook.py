from pathlib import Path

import pytest

from cobolcopy.copybook import (
    CircularDependencyError,
    CopybookConfig,
    CopybookError,
    CopybookIOError,
    CopybookNotFoundError,
    CopybookResolver,
    MaxRecursionDepthError,
    ResolvedCopybook,
    is_copy_statement,
)


def _resolver(path: Path, **kwargs) -> CopybookResolver:
    return CopybookResolver(CopybookConfig(search_paths=[path], **kwargs))


@pytest.mark.parametrize(
    "line",
    [
        "       COPY MYBOOK.",
        "      COPY MYBOOK.",
        "       COPY MYBOOK OF MYLIB.",
        "       COPY DDS-ALL-FORMATS OF TFSBNKAC.",
        "       copy mybook.",
    ],
)
def test_copy_pattern_matches(line):
    assert is_copy_statement(line) is True


@pytest.mark.parametrize(
    "line",
    [
        "      * COPY MYBOOK.",
        "       MOVE X TO COPY.",
    ],
)
def test_copy_pattern_rejects(line):
    assert is_copy_statement(line) is False


def test_default_config_values():
    config = CopybookConfig()
    assert config.search_paths == [Path("sources/cpy")]
    assert config.extensions == ["cpy", "CPY", "cbl", "CBL", ""]
    assert config.max_depth == 10
    assert config.mark_inlined and config.preserve_original


def test_resolve_inlines_with_markers(tmp_path):
    (tmp_path / "MYBOOK.cpy").write_text("       01 A PIC X.\n")
    result = _resolver(tmp_path).resolve("       COPY MYBOOK.\n")
    assert result.source == (
        "      *>>> COPY MYBOOK - ORIGINAL <<<\n"
        "      *>>> BEGIN INLINED COPY MYBOOK <<<\n"
        "       01 A PIC X.\n"
        "      *>>> END INLINED COPY MYBOOK <<<\n"
    )
    assert result.copybooks == [
        ResolvedCopybook(name="MYBOOK", library=None, original_line=1, inserted_lines=1)
    ]


def test_resolve_without_markers(tmp_path):
    (tmp_path / "MYBOOK.cpy").write_text("       01 A PIC X.\n       01 B PIC X.")
    resolver = _resolver(tmp_path, mark_inlined=False, preserve_original=False)
    result = resolver.resolve("       PROCEDURE DIVISION.\r\n       COPY MYBOOK.\n")
    assert result.source == (
        "       PROCEDURE DIVISION.\n"
        "       01 A PIC X.\n"
        "       01 B PIC X.\n"
    )
    assert result.copybooks[0].original_line == 2
    assert result.copybooks[0].inserted_lines == 2


def test_missing_copybook_leaves_warning(tmp_path):
    result = _resolver(tmp_path).resolve("       COPY NOPE.\n")
    assert result.source == (
        "      *>>> WARNING: Copybook not found: NOPE <<<\n"
        "       COPY NOPE.\n"
    )
    assert result.copybooks == []


def test_library_subdirectory(tmp_path):
    (tmp_path / "MYLIB").mkdir()
    (tmp_path / "MYLIB" / "MYBOOK.cpy").write_text("       01 X PIC 9.\n")
    result = _resolver(tmp_path).resolve("       COPY MYBOOK OF MYLIB.\n")
    assert "      *>>> COPY MYBOOK OF MYLIB - ORIGINAL <<<\n" in result.source
    assert "       01 X PIC 9.\n" in result.source
    assert result.copybooks[0].library == "MYLIB"


def test_library_prefixed_filename(tmp_path):
    (tmp_path / "LIB-BOOK.cbl").write_text("       01 Y PIC 9.\n")
    result = _resolver(tmp_path).resolve("       COPY BOOK OF LIB.\n")
    assert "       01 Y PIC 9.\n" in result.source
    assert result.copybooks[0].name == "BOOK"


def test_extensionless_file(tmp_path):
    (tmp_path / "PLAIN").write_text("       01 P PIC X.\n")
    result = _resolver(tmp_path).resolve("       COPY PLAIN.\n")
    assert "       01 P PIC X.\n" in result.source


def test_nested_copybooks_recorded_inner_first(tmp_path):
    (tmp_path / "OUTER.cpy").write_text("       COPY INNER.\n")
    (tmp_path / "INNER.cpy").write_text("       01 I PIC X.\n")
    result = _resolver(tmp_path, mark_inlined=False, preserve_original=False).resolve(
        "       COPY OUTER.\n"
    )
    assert result.source == "       01 I PIC X.\n"
    assert [cb.name for cb in result.copybooks] == ["INNER", "OUTER"]


def test_empty_copybook_gets_blank_line_before_end_marker(tmp_path):
    (tmp_path / "EMPTY.cpy").write_text("")
    result = _resolver(tmp_path, preserve_original=False).resolve("       COPY EMPTY.\n")
    assert result.source == (
        "      *>>> BEGIN INLINED COPY EMPTY <<<\n"
        "\n"
        "      *>>> END INLINED COPY EMPTY <<<\n"
    )
    assert result.copybooks[0].inserted_lines == 0


def test_circular_dependency(tmp_path):
    (tmp_path / "A.cpy").write_text("       COPY B.\n")
    (tmp_path / "B.cpy").write_text("       COPY A.\n")
    with pytest.raises(CircularDependencyError) as info:
        _resolver(tmp_path).resolve("       COPY A.\n")
    assert str(info.value) == "Circular dependency detected: A"


def test_max_recursion_depth(tmp_path):
    (tmp_path / "A.cpy").write_text("       01 A PIC X.\n")
    with pytest.raises(MaxRecursionDepthError) as info:
        _resolver(tmp_path, max_depth=0).resolve("       COPY A.\n")
    assert str(info.value) == (
        "Maximum recursion depth (0) exceeded while resolving copybooks"
    )
    assert isinstance(info.value, CopybookError)


def test_cache_and_clear(tmp_path):
    book = tmp_path / "C.cpy"
    book.write_text("       01 C PIC X.\n")
    resolver = _resolver(tmp_path)
    resolver.resolve("       COPY C.\n")
    book.unlink()
    assert "       01 C PIC X.\n" in resolver.resolve("       COPY C.\n").source
    resolver.clear_cache()
    assert "WARNING: Copybook not found: C" in resolver.resolve("       COPY C.\n").source


def test_directory_candidate_reports_io_error(tmp_path):
    (tmp_path / "D.cpy").mkdir()
    result = _resolver(tmp_path).resolve("       COPY D.\n")
    assert "*>>> WARNING: IO error reading copybook D:" in result.source


def test_add_search_path_deduplicates(tmp_path):
    resolver = CopybookResolver(CopybookConfig(search_paths=[]))
    resolver.add_search_path(tmp_path)
    resolver.add_search_path(tmp_path)
    assert resolver.config.search_paths == [tmp_path]


def test_with_paths_extends_defaults(tmp_path):
    resolver = CopybookResolver.with_paths([tmp_path])
    assert resolver.config.search_paths == [Path("sources/cpy"), tmp_path]


def test_preload_directory(tmp_path):
    lib = tmp_path / "lib"
    lib.mkdir()
    (lib / "abc.cpy").write_text("       01 Z PIC X.\n")
    (lib / "sub").mkdir()
    resolver = CopybookResolver(CopybookConfig(search_paths=[]))
    assert resolver.preload_directory(lib) == 1
    assert "       01 Z PIC X.\n" in resolver.resolve("       COPY ABC.\n").source


def test_preload_missing_directory(tmp_path):
    resolver = CopybookResolver(CopybookConfig(search_paths=[]))
    assert resolver.preload_directory(tmp_path / "absent") == 0


def test_preload_file_is_error(tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("x")
    resolver = CopybookResolver(CopybookConfig(search_paths=[]))
    with pytest.raises(CopybookIOError):
        resolver.preload_directory(target)


def test_not_found_error_message():
    assert str(CopybookNotFoundError("XYZ")) == "Copybook not found: XYZ"