"""Synthesise the destination project's ``index.ts`` barrel file."""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from tsbridge.templates import get_renderer
from tsbridge.utils import console, list_files, write_text


def collect_modules(ts_src: str | Path, structs_dir: str | Path) -> list[str]:
    """Return generated struct modules as ``./``-less import specifiers.

    Each path is made relative to *ts_src*, uses forward slashes and loses its
    ``.ts`` suffix, e.g. ``generated-structs/User``.  A missing *structs_dir*
    yields no modules.
    """
    structs_path = Path(structs_dir)
    if not structs_path.is_dir():
        return []

    src_path = Path(ts_src)
    return [
        path.relative_to(src_path).with_suffix("").as_posix()
        for path in list_files(structs_path, "ts")
    ]


def render_index(modules: list[str], constants_module: str = "const") -> str:
    return get_renderer().render(
        "index.ts.j2",
        {"constants_module": constants_module, "modules": modules},
    )


def generate_index(
    ts_src: str | Path,
    structs_dir_name: str = "generated-structs",
    index_file: str = "index.ts",
    constants_file: str = "const.ts",
) -> tuple[Path, int]:
    """Write ``<ts_src>/<index_file>`` re-exporting constants and every struct.

    Returns:
        The written path and the number of struct modules re-exported.
    """
    src_path = Path(ts_src)
    modules = collect_modules(src_path, src_path / structs_dir_name)
    constants_module = Path(constants_file).with_suffix("").as_posix()

    index_path = write_text(src_path / index_file, render_index(modules, constants_module))
    console.print(f"  Wrote [bold]{escape(str(index_path))}[/bold] ({len(modules)} struct modules)")
    return index_path, len(modules)
