import curses
from typing import List, Optional, Tuple

from syncast.controllers import navigation as nav


KEY_TAB = 9
KEY_ENTER_CODES = (10, 13, curses.KEY_ENTER)

KEYMAP = {
    ord('j'): nav.MoveDown(),
    curses.KEY_DOWN: nav.MoveDown(),
    ord('k'): nav.MoveUp(),
    curses.KEY_UP: nav.MoveUp(),
    KEY_TAB: nav.CycleView(),
    ord('h'): nav.ToggleHistory(),
    ord('F'): nav.ToggleFavorites(),
    ord('f'): nav.PromoteToFavorite(),
    ord(']'): nav.NextFeed(),
    ord('['): nav.PrevFeed(),
    ord('q'): nav.Quit(),
}
for _code in KEY_ENTER_CODES:
    KEYMAP[_code] = nav.Activate()

HELP_KEYBINDINGS: List[Tuple[str, str]] = [
    ('q', 'quit'),
    ('k/↑ j/↓', 'navigate'),
    ('tab', 'switch view'),
    ('h', 'history'),
    ('F', 'favorites'),
    ('f', 'add favorite'),
    ('[ ]', 'feed'),
    ('enter', 'play'),
]


def event_for_key(key: int) -> Optional[object]:
    """Translate a curses key code into a navigation event, or None."""
    if key == -1:
        return None
    return KEYMAP.get(key)


def footer_text() -> str:
    return ' • '.join(f"{keys} {desc}" for keys, desc in HELP_KEYBINDINGS)
