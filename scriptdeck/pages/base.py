"""Page protocol shared by every stackable screen."""

from __future__ import annotations

from typing import Any, Protocol

from ..runtime.messages import Cmd


class Page(Protocol):
    """Polymorphic UI unit held by the navigation stack.

    ``update`` may return a different page to take this one's slot; the stack
    stores whatever it returns.
    """

    def init(self) -> Cmd | None: ...

    def update(self, msg: Any) -> tuple[Page, Cmd | None]: ...

    def view(self) -> str: ...

    def set_size(self, width: int, height: int) -> None: ...
