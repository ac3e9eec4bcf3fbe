"""
Path helpers for user-supplied file paths.
"""

import os
import re

_QUOTED = re.compile(r"""^['"]?(.*?)['"]?$""", re.DOTALL)


def clean_user_path(raw: str) -> str:
    """
    Normalize a path typed or pasted into a prompt.

    Drag-and-drop into a terminal often wraps the path in quotes; those and
    surrounding whitespace are removed.

    Example:
        >>> clean_user_path(" '/tmp/a b.png' ")
        '/tmp/a b.png'
    """
    match = _QUOTED.match(raw.strip())
    return (match.group(1) if match else raw).strip()


def has_extension(path: str) -> bool:
    """True when the basename has at least one character after its last dot."""
    return len(os.path.splitext(path)[1]) >= 2
