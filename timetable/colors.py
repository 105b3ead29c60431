"""Deterministic color assignment for session titles."""

import logging
from typing import Iterable, Optional, Sequence

from .models import Session

logger = logging.getLogger(__name__)

GRADIENT_PALETTE = [
    "radial-gradient(circle farthest-corner at 50% 0%,#ffe000 0,#ffa000 100%)",
    "radial-gradient(circle farthest-corner at 50% 0%,#dcb6ee 0,#ce7cf4 100%)",
    "radial-gradient(circle farthest-corner at 50% 0%,#ff9600 0,#ff5349 100%)",
    "radial-gradient(circle at 50% 0%, rgb(51 229 213) 0px, #06aa9b 100%)",
    "linear-gradient(90deg,#ff953f,#ffb449)",
    "radial-gradient(circle at 50% 0%, rgb(246 197 197) 0px, rgb(255 153 153) 100%)",
    "radial-gradient(circle farthest-corner at 50% 0%,#76baff 0,#1f8bff 100%)",
    "radial-gradient(circle at 50% 0%, rgb(244 107 154) 0px, #E91E63 100%)",
    "radial-gradient(circle at 50% 0%, rgb(195 152 136) 0px, #795548 100%)",
    "radial-gradient(circle at 50% 0%, rgb(97 112 197) 0px, #3F51B5 100%)",
    "radial-gradient(circle farthest-corner at 50% 0%,#b9df64 0,#61be33 100%)",
    "radial-gradient(circle at 50% 0%, rgb(218 226 138) 0px, #CDDC39 100%)",
    "radial-gradient(circle at 50% 0%, rgb(227 219 219) 0px, #9E9E9E 100%)",
]

FLAT_PALETTE = [
    "#99CCFF", "#FFCC99", "#CCCCFF", "#99CCCC", "#A1D699",
    "#7397db", "#ff9983", "#87D7EB", "#99CC99",
]

PALETTES: list[list[str]] = [GRADIENT_PALETTE, FLAT_PALETTE]


def palette_at(index: int) -> list[str]:
    """Palette for a selection index; out-of-range indices wrap around."""
    return PALETTES[index % len(PALETTES)]


class ColorMemo:
    """Title to color cache, ordered by first sight of each title."""

    def __init__(self) -> None:
        self._colors: dict[str, str] = {}

    def get(self, title: str) -> Optional[str]:
        return self._colors.get(title)

    def put(self, title: str, color: str) -> None:
        self._colors[title] = color

    def invalidate(self) -> None:
        if self._colors:
            logger.debug("Clearing color memo (%d titles)", len(self._colors))
        self._colors.clear()

    def __len__(self) -> int:
        return len(self._colors)

    def __contains__(self, title: object) -> bool:
        return title in self._colors


class ColorAssigner:
    """Assigns palette colors to titles in first-seen order.

    The n-th distinct title seen since the last invalidation gets
    ``palette[n % len(palette)]``. The mapping depends only on the order in
    which titles are seen, never on the title text itself.
    """

    def __init__(self, memo: ColorMemo, palette: Sequence[str]) -> None:
        """Initialize the assigner.

        Args:
            memo: Cache shared with the owning store.
            palette: Colors to cycle through.
        """
        self._memo = memo
        self._palette = list(palette)

    @property
    def palette(self) -> list[str]:
        return list(self._palette)

    def set_palette(self, palette: Sequence[str]) -> None:
        """Switch palettes; assignment order restarts from scratch."""
        self._palette = list(palette)
        self._memo.invalidate()

    def color_for(self, session: Session) -> str:
        """Return the color of a session's title, assigning one on first sight."""
        color = self._memo.get(session.title)
        if color is None:
            color = self._palette[len(self._memo) % len(self._palette)]
            self._memo.put(session.title, color)
        return color

    def assign(self, sessions: Iterable[Session]) -> None:
        """Clear the memo and stamp every session with its color, in order."""
        self._memo.invalidate()
        for session in sessions:
            session.color = self.color_for(session)
