from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ViewCursor:
    """Selection and scroll position of one list view.

    Invariants, for a list of ``length`` items drawn in ``height`` rows:
    - ``selected_index`` is within ``[0, length - 1]`` (0 for an empty list)
    - ``scroll_offset <= selected_index < scroll_offset + height``
    - ``scroll_offset <= max(0, length - height)``
    """

    selected_index: int = 0
    scroll_offset: int = 0

    def reset(self) -> None:
        self.selected_index = 0
        self.scroll_offset = 0

    def move(self, delta: int, length: int, height: int) -> bool:
        """Move selection by one step in the direction of ``delta``.

        Returns True if the selection changed. Scroll follows by exactly one
        line when the selection would leave the window.
        """
        height = max(1, height)
        if length <= 0 or delta == 0:
            return False
        step = 1 if delta > 0 else -1
        target = self.selected_index + step
        if target < 0 or target > length - 1:
            return False
        self.selected_index = target
        if self.selected_index < self.scroll_offset:
            self.scroll_offset -= 1
        elif self.selected_index > self.scroll_offset + height - 1:
            self.scroll_offset += 1
        return True

    def clamp(self, length: int, height: int) -> None:
        """Restore the invariants after the list or the window changed size."""
        height = max(1, height)
        if length <= 0:
            self.reset()
            return
        self.selected_index = min(max(self.selected_index, 0), length - 1)
        max_scroll = max(0, length - height)
        scroll = min(max(self.scroll_offset, 0), max_scroll)
        if self.selected_index < scroll:
            scroll = self.selected_index
        elif self.selected_index > scroll + height - 1:
            scroll = self.selected_index - height + 1
        self.scroll_offset = scroll

    def window(self, length: int, height: int) -> range:
        """Indices of the rows the renderer should draw."""
        return range(self.scroll_offset, min(length, self.scroll_offset + max(1, height)))
