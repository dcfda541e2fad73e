"""Recognised error kinds raised by tsbridge.

Every fallible operation in the bridge (file I/O, directory listing,
declaration extraction, manifest parsing, external commands) raises one of
the exceptions below.  The pipeline orchestrator catches ``BridgeError`` and
turns it into a stage failure; nothing below is expected to escape to the
user as a raw traceback.
"""

from __future__ import annotations

from pathlib import Path


class BridgeError(Exception):
    """Base class for every error tsbridge raises on purpose."""


class SourceIOError(BridgeError):
    """A file or directory could not be read, listed, created or written."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class MalformedDeclarationError(BridgeError):
    """Text passed the declaration heuristics but could not be extracted."""

    def __init__(self, text: str, kind: str = "declaration") -> None:
        self.text = text
        self.kind = kind
        preview = text if len(text) <= 80 else text[:77] + "..."
        super().__init__(f"Malformed {kind}: {preview!r}")


class ExternalProcessError(BridgeError):
    """An external command exited non-zero, timed out, or could not start."""

    def __init__(
        self,
        command: list[str],
        returncode: int,
        stderr: str = "",
    ) -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        message = f"`{' '.join(self.command)}` failed with exit code {returncode}"
        if stderr:
            tail = "\n".join(stderr.splitlines()[-10:])
            message = f"{message}\n{tail}"
        super().__init__(message)


class ManifestError(BridgeError):
    """A project manifest is missing, unparsable, or lacks a required field."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{self.path}: {message}")
