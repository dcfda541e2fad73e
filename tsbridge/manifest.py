"""Copy the crate version from ``Cargo.toml`` into ``package.json``."""

from __future__ import annotations

import json
import tomllib
from pathlib import Path

from rich.markup import escape

from tsbridge.errors import ManifestError
from tsbridge.utils import console, read_text, write_text


def read_crate_version(cargo_toml: str | Path) -> str:
    """Return ``[package].version`` from a Cargo manifest.

    Raises:
        SourceIOError: If the manifest cannot be read.
        ManifestError: If it is not valid TOML or has no string version
            (a workspace-inherited ``version.workspace = true`` included).
    """
    path = Path(cargo_toml)
    try:
        manifest = tomllib.loads(read_text(path))
    except tomllib.TOMLDecodeError as exc:
        raise ManifestError(path, f"invalid TOML ({exc})") from exc

    package = manifest.get("package")
    version = package.get("version") if isinstance(package, dict) else None
    if not isinstance(version, str) or not version:
        raise ManifestError(path, "Version not found in [package]")
    return version


def write_package_version(package_json: str | Path, version: str) -> None:
    """Set ``"version"`` in *package_json*, keeping every other key and its order.

    The document is re-serialised with two-space indentation.
    """
    path = Path(package_json)
    try:
        data = json.loads(read_text(path))
    except json.JSONDecodeError as exc:
        raise ManifestError(path, f"invalid JSON ({exc.msg})") from exc
    if not isinstance(data, dict):
        raise ManifestError(path, "top-level value must be a JSON object")

    data["version"] = version
    write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")


def sync_project_version(cargo_toml: str | Path, package_json: str | Path) -> str:
    """Copy the crate version into the package manifest and return it."""
    version = read_crate_version(cargo_toml)
    write_package_version(package_json, version)
    console.print(f"  Version updated to [bold]{escape(version)}[/bold]")
    return version
