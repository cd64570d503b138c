# File: entitygen/utils.py
"""
EntityGen - Utility Functions & Helpers
========================================
Text-assembly, file I/O and timing helpers shared by the emitter, the
exporter and the pipeline.

- ``IndentedStringBuilder`` is the per-call text accumulator handed from
  phase to phase during class emission.  It follows the
  ``List[str]`` + ``"\\n".join()`` pattern; no repeated concatenation.
- File writes go to a temporary sibling first and are renamed into place.
- No external dependencies beyond the Python standard library.
"""

from __future__ import annotations

import contextlib
import hashlib
import logging
import os
import shutil
import tempfile
import time
from pathlib import Path
from typing import Iterator, List, Optional

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("entitygen.utils")


# ---------------------------------------------------------------------------
# Indented text builder
# ---------------------------------------------------------------------------


class IndentedStringBuilder:
    """
    Line-oriented text accumulator with a current indentation level.

    Usage:
        sb = IndentedStringBuilder()
        sb.append_line("namespace Demo")
        sb.append_line("{")
        with sb.indent():
            sb.append_line("public class Foo { }")
        sb.append_line("}")
        text = sb.build()

    Empty lines are written without indentation.  One builder belongs to
    one generation call; it is not meant to be shared.
    """

    __slots__ = ("_lines", "_level", "_unit")

    def __init__(self, indent_size: int = 4) -> None:
        if indent_size < 0:
            raise ValueError(f"indent_size must be >= 0, got {indent_size}.")
        self._lines: List[str] = []
        self._level: int = 0
        self._unit: str = " " * indent_size

    @property
    def level(self) -> int:
        return self._level

    def append_line(self, text: str = "") -> "IndentedStringBuilder":
        if text:
            self._lines.append(f"{self._unit * self._level}{text}")
        else:
            self._lines.append("")
        return self

    def append_lines(self, lines: List[str]) -> "IndentedStringBuilder":
        for line in lines:
            self.append_line(line)
        return self

    @contextlib.contextmanager
    def indent(self) -> Iterator["IndentedStringBuilder"]:
        self._level += 1
        try:
            yield self
        finally:
            self._level -= 1

    def build(self) -> str:
        """Return the accumulated text, terminated by a newline."""
        if not self._lines:
            return ""
        return "\n".join(self._lines) + "\n"

    def __len__(self) -> int:
        return len(self._lines)

    def __str__(self) -> str:
        return self.build()

    def __repr__(self) -> str:
        return f"<IndentedStringBuilder {len(self._lines)} lines, level={self._level}>"


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)


def write_file(path: Path, content: str) -> int:
    """
    Write *content* to *path* atomically.

    The data goes to a temporary file in the same directory, which is then
    moved over the target, so a crash never leaves a half-written file.

    Returns the number of bytes written.
    """
    ensure_directory(path.parent)

    encoded: bytes = content.encode("utf-8")
    fd: int
    tmp_path: str
    fd, tmp_path = tempfile.mkstemp(
        dir=str(path.parent),
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(encoded)
        shutil.move(tmp_path, str(path))
    except OSError:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise

    logger.debug("Wrote %d bytes to %s", len(encoded), path)
    return len(encoded)


# ---------------------------------------------------------------------------
# Checksum & metrics
# ---------------------------------------------------------------------------


def sha256_hex(content: str) -> str:
    """Return SHA-256 hex digest of a string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    """Count the number of lines in a string."""
    if not content:
        return 0
    return content.count("\n") + (1 if not content.endswith("\n") else 0)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Simple context-manager timer for profiling pipeline steps.

    Usage:
        with Timer("render") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "IndentedStringBuilder",
    "ensure_directory",
    "write_file",
    "sha256_hex",
    "count_lines",
    "Timer",
]

logger.debug("entitygen.utils loaded — %d public symbols.", len(__all__))
