"""Mirror public Rust string constants into a TypeScript ``const.ts``.

Rust source is scanned line by line with an accumulation buffer so that a
declaration whose literal was wrapped onto the next line by rustfmt, e.g.::

    pub const LONG_NAME: &str =
        "some-long-value";

is still recognised.  Only ``pub const NAME: &str = "...";`` is mirrored;
every other item (including numeric constants) is skipped without comment.
"""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from tsbridge.errors import MalformedDeclarationError
from tsbridge.templates import get_renderer
from tsbridge.utils import console, list_files, read_text, write_text

from .models import ConstantDeclaration, StageReport
from .patterns import (
    CONSTANT_PREFIX,
    CONSTANT_TERMINATOR,
    matches_constant_declaration,
    require_constant,
)


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


def _scan(text: str) -> tuple[list[ConstantDeclaration], list[str], str]:
    """Scan *text* and return ``(constants, warnings, leftover_buffer)``.

    A non-empty leftover buffer means the file ended in the middle of a
    declaration.  That declaration is dropped, as is one interrupted by the
    start of the next ``pub const``.
    """
    constants: list[ConstantDeclaration] = []
    warnings: list[str] = []
    buffer = ""

    for line in text.split("\n"):
        line = line.rstrip("\r")
        if buffer and line.strip(" \t").startswith(CONSTANT_PREFIX):
            warnings.append(f"Unterminated constant dropped: {buffer.strip()!r}")
            buffer = ""
        buffer += line

        if not buffer.strip(" \t").startswith(CONSTANT_PREFIX):
            buffer = ""
            continue

        if not buffer.rstrip().endswith(CONSTANT_TERMINATOR):
            continue

        buffer = buffer.strip()
        if matches_constant_declaration(buffer):
            try:
                constants.append(require_constant(buffer))
            except MalformedDeclarationError as exc:
                warnings.append(str(exc))
        buffer = ""

    return constants, warnings, buffer


def extract_constants(text: str) -> list[ConstantDeclaration]:
    """Return every ``pub const NAME: &str`` declaration in *text*, in order.

    An unterminated declaration at end of file is dropped silently and never
    bleeds into the declarations before it.
    """
    constants, _, _ = _scan(text)
    return constants


def find_all_public_constants(
    rust_src: str | Path,
) -> tuple[list[ConstantDeclaration], StageReport]:
    """Scan every ``.rs`` file under *rust_src* in traversal order."""
    report = StageReport(stage="constants")
    constants: list[ConstantDeclaration] = []

    for path in list_files(rust_src, "rs"):
        found, warnings, leftover = _scan(read_text(path))
        report.files_scanned += 1
        constants.extend(found)
        report.warnings.extend(f"{path}: {warning}" for warning in warnings)
        if leftover:
            report.warnings.append(f"{path}: unterminated constant dropped at end of file")

    report.items_found = len(constants)
    return constants, report


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render_constants(constants: list[ConstantDeclaration]) -> str:
    """Render ``export const NAME: string = "value";`` lines, one per constant."""
    return get_renderer().render("const.ts.j2", {"constants": constants})


def write_constants(constants: list[ConstantDeclaration], path: str | Path) -> Path:
    """Overwrite *path* with the rendered constants module."""
    return write_text(path, render_constants(constants))


def process_constants(
    rust_src: str | Path,
    ts_src: str | Path,
    constants_file: str = "const.ts",
) -> StageReport:
    """Extract constants from *rust_src* and write ``<ts_src>/<constants_file>``."""
    console.print(f"  Processing constants in: [bold]{escape(str(rust_src))}[/bold]")
    constants, report = find_all_public_constants(rust_src)
    console.print(f"  Found {len(constants)} constants")

    write_constants(constants, Path(ts_src) / constants_file)
    report.files_changed = 1
    return report
