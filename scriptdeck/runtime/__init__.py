"""Public runtime entry points.

The navigation controller (``Model``), the program loop, and the outer
driver. Imports are lazy because pages depend on ``runtime.messages`` and
``runtime.actions`` while the controller depends on pages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .model import Model
    from .relay import RemoteRelay


def draw(*args, **kwargs):
    """Lazily import the driver to avoid package-import cycles."""
    from .app import draw as _draw

    return _draw(*args, **kwargs)


def run_program(*args, **kwargs):
    """Lazily import the loop runner to avoid package-import cycles."""
    from .loop import run_program as _run_program

    return _run_program(*args, **kwargs)


def __getattr__(name: str):
    if name == "Model":
        from .model import Model as _Model

        return _Model
    if name == "RemoteRelay":
        from .relay import RemoteRelay as _RemoteRelay

        return _RemoteRelay
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Model",
    "RemoteRelay",
    "draw",
    "run_program",
]
