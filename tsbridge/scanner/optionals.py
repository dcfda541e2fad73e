"""Rewrite ``field: T | undefined`` into ``field?: T``.

ts-rs renders ``Option<T>`` fields as a union with ``undefined``.  The
destination project prefers optional properties, so every occurrence is
rewritten across the full text of each file.  Replacement is by exact
substring, so identical occurrences are all rewritten at once.
"""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from tsbridge.utils import console, list_files, read_text, write_text

from .models import StageReport
from .patterns import find_optional_field_occurrences


def rewrite_optionals(text: str) -> str:
    """Return *text* with every nullable-union field made optional.

    Applying this twice gives the same result as applying it once.
    """
    rewritten = text
    for occurrence in find_optional_field_occurrences(text):
        rewritten = rewritten.replace(occurrence.full_match, occurrence.replacement)
    return rewritten


def process_optionals(ts_src: str | Path) -> StageReport:
    """Rewrite optional fields in every ``.ts`` file under *ts_src*.

    Every file is written back, changed or not; unchanged files get their
    original bytes.
    """
    console.print(f"  Processing optional fields in: [bold]{escape(str(ts_src))}[/bold]")
    report = StageReport(stage="optionals")

    for path in list_files(ts_src, "ts"):
        text = read_text(path)
        occurrences = find_optional_field_occurrences(text)
        rewritten = rewrite_optionals(text)

        write_text(path, rewritten)
        report.files_scanned += 1
        report.items_found += len(occurrences)
        if rewritten != text:
            report.files_changed += 1

    console.print(
        f"  Rewrote {report.items_found} optional fields in {report.files_changed} files"
    )
    return report
