"""tsbridge configuration.

Typed settings for a single bridge run.  The two project roots come from the
command line; everything else has a sensible default and can be overridden
through ``TSBRIDGE_*`` environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


_TRUE_VALUES = {"1", "true", "yes", "on"}


class CommandConfig(BaseModel):
    """External tools invoked by the pipeline."""

    cargo: str = Field(default="cargo")
    npm: str = Field(default="npm")
    npx: str = Field(default="npx")
    export_env_var: str = Field(
        default="TS_RS_EXPORT_DIR",
        description="Environment variable telling ts-rs where to export bindings",
    )
    generate_timeout: int = Field(
        default=1800, ge=10, description="Timeout for `cargo test` in seconds"
    )
    build_timeout: int = Field(
        default=900, ge=10, description="Timeout for each npm/tsc step in seconds"
    )


class Config(BaseModel):
    """Settings for one Rust -> TypeScript bridge run.

    Instances are created by the CLI entry point and handed to ``Pipeline``.
    All derived paths are computed from the two project roots so that they
    never drift apart.
    """

    rust_project: Path
    ts_project: Path
    structs_dir_name: str = Field(default="generated-structs")
    constants_file: str = Field(default="const.ts")
    index_file: str = Field(default="index.ts")
    commands: CommandConfig = Field(default_factory=CommandConfig)

    skip_generate: bool = Field(
        default=False, description="Skip removing and regenerating ts-rs bindings"
    )
    skip_build: bool = Field(
        default=False, description="Skip `npm i` and `npx tsc` on the destination"
    )

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    @property
    def rust_src(self) -> Path:
        """The crate's ``src/`` directory, scanned for constants."""
        return self.rust_project / "src"

    @property
    def ts_src(self) -> Path:
        """The TypeScript package's ``src/`` directory."""
        return self.ts_project / "src"

    @property
    def structs_path(self) -> Path:
        """Where ts-rs exports the generated struct bindings."""
        return self.ts_src / self.structs_dir_name

    @property
    def constants_path(self) -> Path:
        return self.ts_src / self.constants_file

    @property
    def index_path(self) -> Path:
        return self.ts_src / self.index_file

    @property
    def cargo_manifest_path(self) -> Path:
        return self.rust_project / "Cargo.toml"

    @property
    def package_json_path(self) -> Path:
        return self.ts_project / "package.json"

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, rust_project: str | Path, ts_project: str | Path) -> "Config":
        """Build a ``Config`` for the given roots, applying environment overrides.

        Recognised variables (all optional):
            TSBRIDGE_CARGO, TSBRIDGE_NPM, TSBRIDGE_NPX,
            TSBRIDGE_GENERATE_TIMEOUT, TSBRIDGE_BUILD_TIMEOUT,
            TSBRIDGE_SKIP_GENERATE, TSBRIDGE_SKIP_BUILD.
        """
        command_kwargs: dict[str, Any] = {}
        if os.environ.get("TSBRIDGE_CARGO"):
            command_kwargs["cargo"] = os.environ["TSBRIDGE_CARGO"]
        if os.environ.get("TSBRIDGE_NPM"):
            command_kwargs["npm"] = os.environ["TSBRIDGE_NPM"]
        if os.environ.get("TSBRIDGE_NPX"):
            command_kwargs["npx"] = os.environ["TSBRIDGE_NPX"]
        if os.environ.get("TSBRIDGE_GENERATE_TIMEOUT"):
            command_kwargs["generate_timeout"] = int(os.environ["TSBRIDGE_GENERATE_TIMEOUT"])
        if os.environ.get("TSBRIDGE_BUILD_TIMEOUT"):
            command_kwargs["build_timeout"] = int(os.environ["TSBRIDGE_BUILD_TIMEOUT"])

        return cls(
            rust_project=Path(rust_project),
            ts_project=Path(ts_project),
            commands=CommandConfig(**command_kwargs),
            skip_generate=_env_flag("TSBRIDGE_SKIP_GENERATE"),
            skip_build=_env_flag("TSBRIDGE_SKIP_BUILD"),
        )


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUE_VALUES
