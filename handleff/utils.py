"""
Utility functions for the handleff library.
"""

from __future__ import annotations

import linecache
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from handleff.invocation import CreationContext


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


# Environment variable to control debug mode
DEBUG_EFFECTS = _env_flag("HANDLEFF_DEBUG")


def capture_creation_context(skip_frames: int = 2) -> CreationContext | None:
    """
    Capture the caller's location for debugging effect creation.

    Args:
        skip_frames: Number of frames to skip (default 2 to skip this function and caller)

    Returns:
        CreationContext for the frame, or None when the stack is shallower than requested
    """
    from handleff.invocation import CreationContext

    try:
        frame = sys._getframe(skip_frames)
    except ValueError:
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


__all__ = ["DEBUG_EFFECTS", "capture_creation_context"]
