"""tsbridge Pipeline Orchestrator.

Keeps a TypeScript package in sync with a Rust crate in eight stages:

Stage 1: RESET     -- Remove the previous ``generated-structs`` directory.
Stage 2: GENERATE  -- ``cargo test --all-features`` so ts-rs exports bindings.
Stage 3: CONSTANTS -- Mirror ``pub const X: &str`` into ``const.ts``.
Stage 4: ENUMS     -- Rewrite string-literal unions into enums.
Stage 5: OPTIONALS -- Rewrite ``field: T | undefined`` into ``field?: T``.
Stage 6: INDEX     -- Write the ``index.ts`` barrel.
Stage 7: VERSION   -- Copy the crate version into ``package.json``.
Stage 8: BUILD     -- ``npm i`` then ``npx tsc`` on the TypeScript package.

Every stage relies on the files written by the ones before it, so the first
failure stops the run.  Nothing is rolled back.

Usage::

    python -m tsbridge path/to/rust-crate path/to/ts-package
    tsbridge path/to/rust-crate path/to/ts-package --skip-build
"""

from __future__ import annotations

import asyncio
import sys
import time
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.markup import escape
from rich.panel import Panel

from tsbridge.config import Config
from tsbridge.errors import BridgeError
from tsbridge.index_gen import generate_index
from tsbridge.manifest import sync_project_version
from tsbridge.scanner import process_constants, process_enums, process_optionals
from tsbridge.scanner.models import StageReport
from tsbridge.utils import (
    STAGE_NAMES,
    console,
    format_duration,
    print_error,
    print_stage_header,
    print_success,
    print_summary_table,
    print_warning,
    remove_tree,
    run_checked,
)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class PipelineError(Exception):
    """Raised when a pipeline stage fails irrecoverably."""

    def __init__(self, stage: int, message: str) -> None:
        self.stage = stage
        super().__init__(f"Stage {stage} ({STAGE_NAMES.get(stage, '?')}): {message}")


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Drives the Rust -> TypeScript bridge stages in a fixed order.

    Attributes:
        config: Settings for this run.
        state: Accumulates each stage's result; returned by ``run``.
        verbose: Print tracebacks for unexpected failures.
    """

    _STAGE_METHODS: dict[int, str] = {
        1: "stage1_reset",
        2: "stage2_generate",
        3: "stage3_constants",
        4: "stage4_enums",
        5: "stage5_optionals",
        6: "stage6_index",
        7: "stage7_version",
        8: "stage8_build",
    }

    def __init__(self, config: Config, verbose: bool = False) -> None:
        self.config = config
        self.verbose = verbose
        self.state: dict[str, Any] = {
            "started_at": datetime.now(timezone.utc).isoformat(),
            "stages_completed": [],
            "stages_failed": [],
            "stages_skipped": [],
            "success": False,
        }

    def selected_stages(self) -> list[int]:
        """Stage numbers to execute, honouring the skip flags."""
        skipped: set[int] = set()
        if self.config.skip_generate:
            skipped.update({1, 2})
        if self.config.skip_build:
            skipped.add(8)
        return [stage for stage in sorted(self._STAGE_METHODS) if stage not in skipped]

    async def run(self) -> dict[str, Any]:
        """Execute the selected stages and return the final state.

        The returned dictionary has a top-level ``success`` boolean and a
        ``stage<N>`` entry per completed stage.
        """
        pipeline_start = time.monotonic()

        console.print(
            Panel(
                f"[bold bright_cyan]tsbridge[/bold bright_cyan]\n"
                f"Rust project       : {escape(str(self.config.rust_project))}\n"
                f"Typescript project : {escape(str(self.config.ts_project))}",
                title="[bold]Pipeline Start[/bold]",
                border_style="bright_cyan",
            )
        )

        selected = self.selected_stages()
        self.state["stages_skipped"] = [s for s in self._STAGE_METHODS if s not in selected]
        all_success = True

        for stage_num in selected:
            stage_name = STAGE_NAMES.get(stage_num, "UNKNOWN")
            print_stage_header(stage_num, stage_name)

            stage_start = time.monotonic()
            try:
                try:
                    method = getattr(self, self._STAGE_METHODS[stage_num])
                    result = await method()
                except BridgeError as exc:
                    raise PipelineError(stage_num, str(exc)) from exc

                self.state[f"stage{stage_num}"] = result
                self.state["stages_completed"].append(stage_num)
                print_success(
                    f"Stage {stage_num} ({stage_name}) completed in "
                    f"{format_duration(time.monotonic() - stage_start)}"
                )

            except PipelineError as exc:
                all_success = False
                self.state["stages_failed"].append(stage_num)
                self.state[f"stage{stage_num}_error"] = str(exc)
                print_error(
                    f"Stage {stage_num} ({stage_name}) FAILED after "
                    f"{format_duration(time.monotonic() - stage_start)}: {exc}"
                )
                break

            except Exception as exc:
                all_success = False
                self.state["stages_failed"].append(stage_num)
                self.state[f"stage{stage_num}_error"] = traceback.format_exc()
                print_error(
                    f"Stage {stage_num} ({stage_name}) FAILED after "
                    f"{format_duration(time.monotonic() - stage_start)}: {exc}"
                )
                if self.verbose:
                    console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")
                break

        total_elapsed = time.monotonic() - pipeline_start
        self.state["success"] = all_success
        self.state["total_duration"] = format_duration(total_elapsed)
        self.state["finished_at"] = datetime.now(timezone.utc).isoformat()

        self._print_final_summary(total_elapsed)
        return self.state

    # ------------------------------------------------------------------
    # Stages 1-2: generated structs
    # ------------------------------------------------------------------

    async def stage1_reset(self) -> dict[str, Any]:
        """Remove the previous ts-rs export directory."""
        removed = remove_tree(self.config.structs_path)
        if removed:
            console.print(f"  Removed [bold]{escape(str(self.config.structs_path))}[/bold]")
        return {"removed": removed}

    async def stage2_generate(self) -> dict[str, Any]:
        """Run the crate's tests with ts-rs exporting into the TS package."""
        commands = self.config.commands
        cmd = [commands.cargo, "test", "--all-features"]
        console.print(
            f"  Running [bold]{escape(' '.join(cmd))}[/bold] "
            f"in {escape(str(self.config.rust_project))}"
        )
        await run_checked(
            cmd,
            cwd=self.config.rust_project,
            timeout=commands.generate_timeout,
            env={commands.export_env_var: str(self.config.structs_path)},
            capture=False,
        )
        return {"export_dir": str(self.config.structs_path)}

    # ------------------------------------------------------------------
    # Stages 3-5: text transforms
    # ------------------------------------------------------------------

    async def stage3_constants(self) -> dict[str, Any]:
        report = process_constants(
            self.config.rust_src, self.config.ts_src, self.config.constants_file
        )
        return self._report(report)

    async def stage4_enums(self) -> dict[str, Any]:
        if not self.config.structs_path.is_dir():
            print_warning(f"  No generated structs at {self.config.structs_path}; skipping")
            return self._report(StageReport(stage="enums"))
        return self._report(process_enums(self.config.structs_path))

    async def stage5_optionals(self) -> dict[str, Any]:
        return self._report(process_optionals(self.config.ts_src))

    # ------------------------------------------------------------------
    # Stages 6-8: publish and validate
    # ------------------------------------------------------------------

    async def stage6_index(self) -> dict[str, Any]:
        index_path, module_count = generate_index(
            self.config.ts_src,
            structs_dir_name=self.config.structs_dir_name,
            index_file=self.config.index_file,
            constants_file=self.config.constants_file,
        )
        return {"path": str(index_path), "modules": module_count}

    async def stage7_version(self) -> dict[str, Any]:
        version = sync_project_version(
            self.config.cargo_manifest_path, self.config.package_json_path
        )
        return {"version": version}

    async def stage8_build(self) -> dict[str, Any]:
        """Install dependencies and type-check the TypeScript package."""
        commands = self.config.commands
        steps = [[commands.npm, "i"], [commands.npx, "tsc"]]
        for cmd in steps:
            console.print(
                f"  Running [bold]{escape(' '.join(cmd))}[/bold] "
                f"in {escape(str(self.config.ts_project))}"
            )
            await run_checked(
                cmd,
                cwd=self.config.ts_project,
                timeout=commands.build_timeout,
                capture=False,
            )
        return {"commands": [" ".join(cmd) for cmd in steps]}

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    @staticmethod
    def _report(report: StageReport) -> dict[str, Any]:
        print_summary_table(
            {
                "Files scanned": str(report.files_scanned),
                "Files changed": str(report.files_changed),
                "Items found": str(report.items_found),
                "Warnings": str(len(report.warnings)),
            },
            title=report.stage.capitalize(),
        )
        return report.model_dump()

    def _print_final_summary(self, total_elapsed: float) -> None:
        """Print the final pipeline summary panel."""
        stages_ok = self.state.get("stages_completed", [])
        stages_fail = self.state.get("stages_failed", [])
        stages_skipped = self.state.get("stages_skipped", [])

        if self.state.get("success"):
            border_style = "bold green"
            status_text = "[bold green]BRIDGE SUCCEEDED[/bold green]"
        else:
            border_style = "bold red"
            status_text = "[bold red]BRIDGE FAILED[/bold red]"

        detail_lines = [
            status_text,
            "",
            f"Duration  : {format_duration(total_elapsed)}",
            f"Completed : {', '.join(str(s) for s in stages_ok) or 'none'}",
        ]
        if stages_skipped:
            detail_lines.append(f"Skipped   : {', '.join(str(s) for s in stages_skipped)}")
        if stages_fail:
            detail_lines.append(f"Failed    : {', '.join(str(s) for s in stages_fail)}")

        console.print()
        console.print(
            Panel(
                "\n".join(detail_lines),
                title="[bold]Pipeline Complete[/bold]",
                border_style=border_style,
            )
        )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

_USAGE_HINT = (
    "Please provide a rust project path and a typescript project path as arguments"
)


def _build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        prog="tsbridge",
        description="Mirror Rust constants and ts-rs bindings into a TypeScript package",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  tsbridge ../my-crate ../my-crate-ts\n"
            "  tsbridge ../my-crate ../my-crate-ts --skip-build\n"
        ),
    )
    parser.add_argument("rust_project", nargs="?", help="Path to the Rust project (crate root)")
    parser.add_argument("ts_project", nargs="?", help="Path to the TypeScript project root")
    # Anything after the two project paths is ignored.
    parser.add_argument("extra", nargs="*", help=argparse.SUPPRESS)
    parser.add_argument(
        "--skip-generate",
        action="store_true",
        help="Keep the existing generated-structs instead of re-running cargo test",
    )
    parser.add_argument(
        "--skip-build",
        action="store_true",
        help="Do not run npm i / npx tsc after generating",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print tracebacks for unexpected failures",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``tsbridge`` and ``python -m tsbridge``."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.rust_project is None or args.ts_project is None:
        console.print(escape(_USAGE_HINT))
        console.print(escape(parser.format_usage().strip()))
        return

    rust_path = Path(args.rust_project).resolve()
    ts_path = Path(args.ts_project).resolve()
    for label, path in (("Rust project", rust_path), ("Typescript project", ts_path)):
        if not path.is_dir():
            console.print(f"[bold red]Error:[/bold red] {label} not found: {escape(str(path))}")
            sys.exit(1)

    try:
        config = Config.from_env(rust_path, ts_path)
    except ValueError as exc:
        console.print(f"[bold red]Error:[/bold red] Invalid configuration: {escape(str(exc))}")
        sys.exit(1)
    if args.skip_generate:
        config.skip_generate = True
    if args.skip_build:
        config.skip_build = True

    pipeline = Pipeline(config, verbose=args.verbose)
    result = asyncio.run(pipeline.run())

    if result.get("success"):
        console.print("[bold green]Done![/bold green]")
    else:
        sys.exit(1)


if __name__ == "__main__":
    main()
