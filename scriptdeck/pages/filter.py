"""Filterable, scrollable item list shared by list pages and the action palette."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from ..ansi import display_width
from ..fuzzy import rank_labels
from ..highlight import sanitize_terminal_text
from ..ui_theme import DEFAULT_THEME, UITheme
from .items import ListItem


class Filter:
    """Items filtered by a query with a clamped cursor and scroll window.

    ``sort_key`` orders items while the query is empty; with a query, fuzzy
    ranking decides.
    """

    def __init__(self, sort_key: Callable[[ListItem], object] | None = None) -> None:
        self.items: list[ListItem] = []
        self.filtered: list[ListItem] = []
        self.sort_key = sort_key
        self.cursor = 0
        self.min_index = 0
        self.width = 0
        self.height = 0
        self.query = ""

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = max(0, height)
        self._scroll_to_cursor()

    def set_items(self, items: Sequence[ListItem]) -> None:
        self.items = list(items)

    def filter_items(self, query: str) -> None:
        """Refilter, keeping the cursor on the same item id when it survives."""
        selected = self.selection()
        self.query = query
        if not query:
            self.filtered = list(self.items)
            if self.sort_key is not None:
                self.filtered.sort(key=self.sort_key)
        else:
            labels = [item.filter_value for item in self.items]
            self.filtered = [self.items[match.index] for match in rank_labels(query, labels)]

        self.cursor = 0
        if selected is not None and query == "":
            for index, item in enumerate(self.filtered):
                if item.id == selected.id:
                    self.cursor = index
                    break
        self.min_index = min(self.min_index, self.cursor)
        self._scroll_to_cursor()

    def selection(self) -> ListItem | None:
        if 0 <= self.cursor < len(self.filtered):
            return self.filtered[self.cursor]
        return None

    def cursor_up(self) -> None:
        if self.filtered:
            self.cursor = max(0, self.cursor - 1)
            self._scroll_to_cursor()

    def cursor_down(self) -> None:
        if self.filtered:
            self.cursor = min(len(self.filtered) - 1, self.cursor + 1)
            self._scroll_to_cursor()

    def _scroll_to_cursor(self) -> None:
        rows = max(1, self.height)
        if self.cursor < self.min_index:
            self.min_index = self.cursor
        elif self.cursor >= self.min_index + rows:
            self.min_index = self.cursor - rows + 1
        self.min_index = max(0, min(self.min_index, max(0, len(self.filtered) - rows)))

    def _row(self, item: ListItem, selected: bool, theme: UITheme) -> str:
        marker = f"{theme.selected_marker}│{theme.reset} " if selected else "  "
        title = sanitize_terminal_text(item.title)
        title = f"{theme.bold}{title}{theme.reset}" if selected else title
        subtitle = sanitize_terminal_text(item.subtitle)
        left = f"{marker}{title}"
        if subtitle:
            left += f" {theme.subtitle}{subtitle}{theme.reset}"
        if not item.accessories:
            return left
        right = "  ".join(sanitize_terminal_text(accessory) for accessory in item.accessories)
        gap = self.width - display_width(left) - display_width(right) - 1
        if gap < 2:
            return left
        return f"{left}{' ' * gap}{theme.accessory}{right}{theme.reset}"

    def view(self, theme: UITheme = DEFAULT_THEME) -> list[str]:
        rows = self.filtered[self.min_index : self.min_index + self.height]
        lines = [
            self._row(item, self.min_index + offset == self.cursor, theme)
            for offset, item in enumerate(rows)
        ]
        if not self.filtered and self.height > 0:
            lines.append(f"  {theme.help_dim}No matches{theme.reset}")
        return lines
