"""Turn ts-rs string-literal unions into TypeScript enums.

ts-rs exports a fieldless Rust enum as a union type alias::

    export type Color = "red" | "green" | "blue";

This module rewrites such a file into::

    export enum Color {
        red = "red",
        green = "green",
        blue = "blue",
    }

Materialising replaces the **whole** file, which is safe for ts-rs output
(one exported type per file) and destructive for anything else.  When a file
holds several matching unions each one overwrites the previous, so only the
last survives.  That case is reported as a warning, not rejected.
"""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from tsbridge.errors import MalformedDeclarationError
from tsbridge.templates import get_renderer
from tsbridge.utils import console, list_files, print_warning, read_text, write_text

from .models import StageReport, UnionTypeDeclaration
from .patterns import matches_union_type, require_union_type


def _scan(text: str, path: Path) -> tuple[list[UnionTypeDeclaration], list[str]]:
    declarations: list[UnionTypeDeclaration] = []
    warnings: list[str] = []

    for line in text.split("\n"):
        line = line.strip()
        if not matches_union_type(line):
            continue
        try:
            name, values = require_union_type(line)
        except MalformedDeclarationError as exc:
            warnings.append(str(exc))
            continue
        declarations.append(
            UnionTypeDeclaration(name=name, source_file=path, values=values)
        )

    return declarations, warnings


def synthesize(text: str, path: str | Path) -> list[UnionTypeDeclaration]:
    """Return every union type declared in *text*, bound to *path*, in file order."""
    declarations, _ = _scan(text, Path(path))
    return declarations


def render_enum(declaration: UnionTypeDeclaration) -> str:
    """Render the ``export enum`` replacing *declaration*.

    Each value is used both as member name and as its string value.  Values
    that are not valid identifiers produce invalid TypeScript.
    """
    return get_renderer().render(
        "enum.ts.j2",
        {"name": declaration.name, "values": declaration.values},
    )


def materialize(declaration: UnionTypeDeclaration) -> Path:
    """Overwrite ``declaration.source_file`` with the rendered enum."""
    return write_text(declaration.source_file, render_enum(declaration))


def find_all_enum_types(
    ts_dir: str | Path,
) -> tuple[list[UnionTypeDeclaration], StageReport]:
    """Scan every ``.ts`` file under *ts_dir* for union type declarations."""
    report = StageReport(stage="enums")
    declarations: list[UnionTypeDeclaration] = []

    for path in list_files(ts_dir, "ts"):
        found, warnings = _scan(read_text(path), path)
        report.files_scanned += 1
        report.warnings.extend(f"{path}: {warning}" for warning in warnings)
        if len(found) > 1:
            names = ", ".join(d.name for d in found)
            report.warnings.append(
                f"{path}: {len(found)} union types ({names}); only {found[-1].name} is kept"
            )
        declarations.extend(found)

    report.items_found = len(declarations)
    return declarations, report


def process_enums(ts_dir: str | Path) -> StageReport:
    """Rewrite every union type under *ts_dir* into an enum, in place."""
    console.print(f"  Processing enums in: [bold]{escape(str(ts_dir))}[/bold]")
    declarations, report = find_all_enum_types(ts_dir)

    changed: set[Path] = set()
    for declaration in declarations:
        console.print(f"  Processing enum: {declaration.name}")
        materialize(declaration)
        changed.add(declaration.source_file)

    for warning in report.warnings:
        print_warning(f"  {warning}")

    report.files_changed = len(changed)
    return report
