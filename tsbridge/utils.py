"""Shared utility functions for tsbridge.

Provides async command execution, source discovery, UTF-8 file I/O that
raises typed errors, and Rich-based progress reporting.  Nothing in here
changes process-wide state: commands receive an explicit working directory
and environment instead of relying on ``os.chdir``.
"""

from __future__ import annotations

import asyncio
import os
import shutil
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

from tsbridge.errors import ExternalProcessError, SourceIOError

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path,
    timeout: int = 120,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run an external command asynchronously.

    Args:
        cmd: Program and arguments.
        cwd: Working directory for the child process.  Required so that no
            caller ever depends on the parent's current directory.
        timeout: Maximum wall-clock seconds before the process is killed.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams).
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.

    Raises:
        ExternalProcessError: If the program cannot be started at all.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=stdout_pipe,
            stderr=stderr_pipe,
            cwd=str(cwd),
            env=merged_env,
        )
    except OSError as exc:
        raise ExternalProcessError(cmd, -1, f"Could not start process: {exc}") from exc

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


async def run_checked(
    cmd: list[str],
    cwd: str | Path,
    timeout: int = 120,
    env: dict[str, str] | None = None,
    capture: bool = True,
) -> str:
    """Run *cmd* and raise ``ExternalProcessError`` unless it exits with 0.

    With ``capture=False`` the child writes straight to the terminal, so the
    raised error carries only the exit code.

    Returns:
        The captured stdout (empty when not capturing).
    """
    returncode, stdout, stderr = await run_command(
        cmd, cwd=cwd, timeout=timeout, capture=capture, env=env
    )
    if returncode != 0:
        raise ExternalProcessError(cmd, returncode, stderr or stdout)
    return stdout


# ---------------------------------------------------------------------------
# Source discovery
# ---------------------------------------------------------------------------


def list_files(root: str | Path, extension: str | None = None) -> list[Path]:
    """Return every file under *root*, recursively, in traversal order.

    Entries of each directory are visited in sorted name order so that the
    result is stable between runs.  When *extension* is given (without the
    leading dot), only files with exactly that suffix are returned.

    Raises:
        SourceIOError: If *root* or any subdirectory cannot be listed.
    """
    root_path = Path(root)
    try:
        entries = sorted(root_path.iterdir())
    except OSError as exc:
        raise SourceIOError(root_path, f"cannot list directory ({exc.strerror or exc})") from exc

    files: list[Path] = []
    for entry in entries:
        if entry.is_dir():
            files.extend(list_files(entry, extension))
        elif extension is None or entry.suffix == f".{extension}":
            files.append(entry)
    return files


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def read_text(path: str | Path) -> str:
    """Read a UTF-8 text file, raising ``SourceIOError`` on failure.

    Line endings are returned untranslated so that writing the text back
    reproduces the original bytes.
    """
    file_path = Path(path)
    try:
        with open(file_path, "r", encoding="utf-8", newline="") as handle:
            return handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceIOError(file_path, f"cannot read file ({exc})") from exc


def write_text(path: str | Path, content: str) -> Path:
    """Overwrite *path* with *content* encoded as UTF-8.

    Parent directories are created automatically.  Newlines are written
    verbatim so the generated bytes do not depend on the host platform.
    """
    file_path = Path(path)
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as exc:
        raise SourceIOError(file_path, f"cannot write file ({exc})") from exc
    return file_path


def remove_tree(path: str | Path) -> bool:
    """Delete a directory tree if it exists.

    Returns:
        ``True`` if something was removed.
    """
    dir_path = Path(path)
    if not dir_path.exists():
        return False
    try:
        shutil.rmtree(dir_path)
    except OSError as exc:
        raise SourceIOError(dir_path, f"cannot remove directory ({exc})") from exc
    return True


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
        format_duration(3661.0) -> "1h 1m 1s"
    """
    if seconds < 0:
        return "0.0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    if hours > 0 or minutes > 0:
        parts.append(f"{int(secs)}s")
    else:
        parts.append(f"{secs:.1f}s")

    return " ".join(parts)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


STAGE_NAMES: dict[int, str] = {
    1: "RESET",
    2: "GENERATE",
    3: "CONSTANTS",
    4: "ENUMS",
    5: "OPTIONALS",
    6: "INDEX",
    7: "VERSION",
    8: "BUILD",
}

STAGE_COLORS: dict[int, str] = {
    1: "bright_black",
    2: "bright_cyan",
    3: "bright_green",
    4: "bright_yellow",
    5: "bright_magenta",
    6: "bright_blue",
    7: "bright_white",
    8: "bright_red",
}


def print_stage_header(stage: int, name: str) -> None:
    """Print a full-width rule announcing a pipeline stage."""
    color = STAGE_COLORS.get(stage, "white")
    console.print()
    console.print(
        Rule(
            f"[bold {color}] Stage {stage}: {name.upper()} [/bold {color}]",
            style=color,
        )
    )


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(escape(key), escape(str(value)))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
