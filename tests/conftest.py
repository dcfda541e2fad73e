"""Shared pytest fixtures for the tsbridge test suite.

Provides reusable fixtures for:
- A temporary Rust crate with string constants and a Cargo manifest
- A temporary TypeScript package with ts-rs style generated bindings
- Mock subprocess helpers
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest


# ---------------------------------------------------------------------------
# Source text samples
# ---------------------------------------------------------------------------

RUST_LIB = textwrap.dedent("""\
    pub mod nested;

    pub const API_URL: &str = "https://api.example.com";
    pub const DEFAULT_LOCALE: &str = "en-US";
    const PRIVATE_KEY: &str = "hidden";
    pub const MAX_RETRIES: u32 = 3;

    pub fn version() -> &'static str {
        "1.2.3"
    }
""")

RUST_NESTED = textwrap.dedent("""\
    pub const VERY_LONG_CONSTANT_NAME_THAT_RUSTFMT_WRAPS: &str =
        "wrapped-value";
    \tpub const TABBED: &str = "tabbed";
""")

COLOR_TS = textwrap.dedent("""\
    // This file was generated by [ts-rs](https://github.com/Aleph-Alpha/ts-rs). Do not edit this file manually.

    export type Color = "red" | "green" | "blue";
""")

USER_TS = textwrap.dedent("""\
    // This file was generated by [ts-rs](https://github.com/Aleph-Alpha/ts-rs). Do not edit this file manually.
    import type { Color } from "./Color";

    export interface User { name: string, email: string | undefined, favorite: Color, age: number | undefined, }
""")


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

@pytest.fixture
def rust_project(tmp_path: Path) -> Path:
    """A minimal crate: Cargo.toml plus ``src/lib.rs`` and ``src/nested/mod.rs``."""
    root = tmp_path / "rust-crate"
    (root / "src" / "nested").mkdir(parents=True)
    (root / "Cargo.toml").write_text(
        textwrap.dedent("""\
            [package]
            name = "demo"
            version = "1.2.3"
            edition = "2021"

            [dependencies]
            ts-rs = "7"
        """),
        encoding="utf-8",
    )
    (root / "src" / "lib.rs").write_text(RUST_LIB, encoding="utf-8")
    (root / "src" / "nested" / "mod.rs").write_text(RUST_NESTED, encoding="utf-8")
    (root / "README.md").write_text("pub const IGNORED: &str = \"md\";\n", encoding="utf-8")
    yield root


@pytest.fixture
def ts_project(tmp_path: Path) -> Path:
    """A TypeScript package with ``package.json`` and an empty ``src/``."""
    root = tmp_path / "ts-package"
    (root / "src").mkdir(parents=True)
    (root / "package.json").write_text(
        json.dumps(
            {
                "name": "demo-ts",
                "version": "0.0.1",
                "main": "dist/index.js",
                "devDependencies": {"typescript": "^5.4.0"},
            },
            indent=2,
        ),
        encoding="utf-8",
    )
    yield root


@pytest.fixture
def generated_structs(ts_project: Path) -> Path:
    """Populate ``src/generated-structs`` the way ts-rs would."""
    structs = ts_project / "src" / "generated-structs"
    (structs / "models").mkdir(parents=True)
    (structs / "Color.ts").write_text(COLOR_TS, encoding="utf-8")
    (structs / "models" / "User.ts").write_text(USER_TS, encoding="utf-8")
    yield structs


# ---------------------------------------------------------------------------
# Subprocess mocking
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
