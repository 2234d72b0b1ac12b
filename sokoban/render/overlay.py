"""Help, About and message overlays shown on top of the board."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rich.align import Align
from rich.console import RenderableType
from rich.panel import Panel
from rich.text import Text


class OverlayKind(str, Enum):
    NONE = "NONE"
    HELP = "HELP"
    ABOUT = "ABOUT"
    MESSAGE = "MESSAGE"


HELP_TEXT = (
    "CONTROLS\n\n"
    "Arrow keys - Move\n"
    "R - Restart the level\n"
    "H - Help\n"
    "A - About (rules)\n"
    "ESC - Exit\n\n"
    "Press any key to continue"
)

ABOUT_TEXT = (
    "SOKOBAN\n\n"
    "A classic puzzle game.\n"
    "Push every block onto the goal of its colour.\n"
    "A row of blocks can be pushed as long as\n"
    "nothing solid is in front of it.\n\n"
    "Press any key to continue"
)

FINISHED_TEXT = (
    "WELL DONE!\n\n"
    "You have finished every level.\n\n"
    "Press any key to quit"
)


@dataclass
class Overlay:
    kind: OverlayKind = OverlayKind.NONE
    message: str = ""

    @property
    def visible(self) -> bool:
        return self.kind != OverlayKind.NONE

    def show_help(self) -> None:
        self.kind = OverlayKind.HELP
        self.message = HELP_TEXT

    def show_about(self) -> None:
        self.kind = OverlayKind.ABOUT
        self.message = ABOUT_TEXT

    def show_message(self, text: str) -> None:
        self.kind = OverlayKind.MESSAGE
        self.message = text

    def hide(self) -> None:
        self.kind = OverlayKind.NONE
        self.message = ""

    def render(self) -> RenderableType:
        return Panel(
            Align.center(Text(self.message, justify="center")),
            title=self.kind.value.title(),
            border_style="bright_white",
        )
