# cobolcopy

Tools for preparing legacy COBOL sources for analysis.

The core of the package inlines `COPY` statements before a program is
handed to a parser. It recognises these forms, in any letter case:

- `COPY copybook-name.`
- `COPY copybook-name OF library-name.`
- `COPY DDS-ALL-FORMATS OF file-name.`

Up to six characters (such as a sequence area) may precede `COPY`; a line
with anything else on it, including a comment line, is left alone.

## Resolving copybooks

```python
from pathlib import Path

from cobolcopy.copybook import CopybookResolver, is_copy_statement

resolver = CopybookResolver.with_paths([Path("sources/copy")])
resolved = resolver.resolve(Path("PROGRAM.cob").read_text())

print(resolved.source)
for book in resolved.copybooks:
    print(book.name, book.library, book.original_line, book.inserted_lines)

is_copy_statement("       COPY MYBOOK OF MYLIB.")   # True
is_copy_statement("      * COPY MYBOOK.")          # False
```

`CopybookConfig` holds the settings:

- `search_paths` – directories to search, by default `sources/cpy`
  (`CopybookResolver.with_paths()` adds to this default);
- `extensions` – tried in order: `cpy`, `CPY`, `cbl`, `CBL`, then no
  extension; each file name is also tried upper- and lower-cased, and for
  `COPY name OF lib` the files `lib/name.ext` and `lib-name.ext` are tried
  first in each directory;
- `max_depth` – how deep nested `COPY` statements may go (default 10);
- `mark_inlined` – surround inlined text with `*>>> BEGIN INLINED COPY` /
  `*>>> END INLINED COPY` comment lines (default on);
- `preserve_original` – keep the `COPY` statement as a
  `*>>> COPY ... - ORIGINAL <<<` comment line (default on).

A copybook that cannot be found or read does not stop resolution: the
`COPY` statement stays in place, preceded by a `*>>> WARNING: ... <<<`
comment line. Going deeper than `max_depth` raises
`MaxRecursionDepthError`, and a copybook that copies itself, directly or
through others, raises `CircularDependencyError`. All of these derive from
`CopybookError`, alongside `CopybookNotFoundError` and `CopybookIOError`.

Loaded copybooks are cached by name (and library, when given).
`clear_cache()` empties the cache, `add_search_path()` appends a directory
not already listed, and `preload_directory()` caches every readable file in
a directory under its upper-cased file stem and returns how many it cached.

## Other modules

- `cobolcopy.comparison` – `ParserType` (with `display_name()`),
  `merge_copybooks()` to add the names of inlined copybooks to a list without
  duplicates, and `ParserComparison`, whose `report()` renders two parse
  results side by side as Markdown tables. The results are any objects with
  `parse_time_ms`, `program` (`base.name`, `data_definitions`, `calls`,
  `copybooks`), `procedures`, `errors` and `warnings`.
- `cobolcopy.extract` – `clean_call_target()`, `clean_paragraph_name()`,
  `clean_section_name()`, `copybook_name()` and `selected_file()` pull names
  out of statement text; `ExtractionSummary.add(kind, text)` files them by
  syntax node kind (`call_statement`, `paragraph_header`, `section_header`,
  `copy_statement`, `select_statement`) and `render()` lists them sorted.
- `cobolcopy.diagnostics` – `categorize_error()` sorts error messages into
  `EXEC SQL`, `LINKAGE SECTION`, `EJECT` or `Parse error`; `ErrorTally`
  counts them (`add()`, `total`, `summary()` most frequent first); and
  `format_context()` shows numbered lines around a line of interest, marking
  it with `>>>`.
- `cobolcopy.cli` – argument handling for a command-line front end:
  `parse_arguments()` (options `--copybook-path <path>`, `--no-copybooks`,
  `--pretty`, `--help`/`-h`; raises `UsageError`), `build_copybook_config()`
  and `usage()`.

## What it does not do

The package does not parse COBOL itself: it builds no syntax tree, finds no
divisions, procedures or data definitions, and writes no JSON. The
comparison, extraction and diagnostics helpers work on results and node text
that a separate parser supplies. `cobolcopy.cli` only reads and checks
arguments; no command is installed.