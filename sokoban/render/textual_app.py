"""Textual application hosting a game session."""

from __future__ import annotations

from textual.app import App
from textual.screen import Screen

from sokoban.db.replay_log import ReplayRecorder
from sokoban.render.game_screen import GameScreen
from sokoban.sim.session import GameSession


class SokobanApp(App[None]):
    """One session, one board screen. The sub-title tracks the level."""

    TITLE = "Sokoban"

    def __init__(
        self,
        session: GameSession,
        *,
        recorder: ReplayRecorder | None = None,
        show_help: bool = True,
    ) -> None:
        super().__init__()
        self.game_screen = GameScreen(
            session, recorder=recorder, show_help=show_help
        )

    def get_default_screen(self) -> Screen:
        return self.game_screen


def run_app(
    session: GameSession,
    *,
    recorder: ReplayRecorder | None = None,
    show_help: bool = True,
) -> None:
    SokobanApp(session, recorder=recorder, show_help=show_help).run()
