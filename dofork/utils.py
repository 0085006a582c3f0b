"""
Utility functions for the dofork library.
"""

from __future__ import annotations

import linecache
import os
import sys
from dataclasses import dataclass


def _is_site_package(path: str) -> bool:
    normalized = path.replace("\\", "/").lower()
    return "/site-packages/" in normalized


_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__)) + os.sep


def _is_dofork_internal(path: str) -> bool:
    return os.path.abspath(path).startswith(_PACKAGE_DIR)


def _is_user_frame(path: str) -> bool:
    if path.startswith("<"):
        return True
    return not (_is_site_package(path) or _is_dofork_internal(path))


# Environment variable to control debug mode
DEBUG_FORK = os.environ.get("DOFORK_DEBUG", "").lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class CreationContext:
    """Where a leaf computation was constructed."""

    filename: str
    line: int
    function: str
    code: str | None = None

    def format(self) -> str:
        """Format as 'filename:line in function'."""
        return f"{self.filename}:{self.line} in {self.function}"


def capture_creation_context(skip_frames: int = 2) -> CreationContext | None:
    """
    Capture the first user frame above the caller.

    Args:
        skip_frames: Number of frames to skip (default 2 to skip this function and caller)

    Returns:
        CreationContext for the nearest frame outside dofork, or None when
        frame introspection is unavailable.
    """
    try:
        frame = sys._getframe(skip_frames)
    except ValueError:
        return None

    while frame is not None and not _is_user_frame(frame.f_code.co_filename):
        frame = frame.f_back
    if frame is None:
        return None

    filename = frame.f_code.co_filename
    line = frame.f_lineno
    code = linecache.getline(filename, line).strip() or None
    return CreationContext(
        filename=filename,
        line=line,
        function=frame.f_code.co_name,
        code=code,
    )


__all__ = [
    "DEBUG_FORK",
    "CreationContext",
    "capture_creation_context",
]
