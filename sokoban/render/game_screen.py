"""Interactive Textual screen: keys in, board and overlays out."""

from __future__ import annotations

from typing import Callable

from rich.panel import Panel
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.events import Key
from textual.screen import Screen
from textual.widgets import Static

from sokoban.db.replay_log import ReplayRecorder
from sokoban.render.overlay import FINISHED_TEXT, Overlay
from sokoban.render.viewer import render_board
from sokoban.sim.contracts import Command, Event, EventKind
from sokoban.sim.session import GameSession, SessionState

KEY_COMMANDS: dict[str, Command] = {
    "up": Command.UP,
    "down": Command.DOWN,
    "left": Command.LEFT,
    "right": Command.RIGHT,
    "r": Command.RESTART,
    "h": Command.SHOW_HELP,
    "a": Command.SHOW_ABOUT,
    "escape": Command.QUIT,
}


class GameScreen(Screen):
    CSS = """
    Screen {
        layout: vertical;
    }
    #board {
        height: 1fr;
    }
    #status-bar {
        height: 3;
    }
    """

    def __init__(
        self,
        session: GameSession,
        *,
        recorder: ReplayRecorder | None = None,
        show_help: bool = True,
    ) -> None:
        super().__init__()
        self.session = session
        self.recorder = recorder
        self.text_overlay = Overlay()
        self._show_help = show_help
        self._finished = False
        self._board: Static | None = None
        self._status_bar: Static | None = None
        self._unsubscribe: Callable[[], None] | None = None

    def compose(self) -> ComposeResult:
        with Vertical(id="root"):
            yield Static(id="board")
            yield Static(id="status-bar")

    def on_mount(self) -> None:
        self._board = self.query_one("#board", Static)
        self._status_bar = self.query_one("#status-bar", Static)
        self._unsubscribe = self.session.bus.subscribe(self._on_session_event)
        if self._show_help:
            self._show_overlay(Overlay.show_help)
        self._refresh_ui()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def on_key(self, event: Key) -> None:
        if self.text_overlay.visible:
            self.dismiss_overlay()
            event.stop()
            return
        command = KEY_COMMANDS.get(event.key)
        if command is None:
            return
        self.dispatch_command(command)
        event.stop()

    def dismiss_overlay(self) -> None:
        self.text_overlay.hide()
        self.session.close_modal()
        if self._finished:
            self.app.exit()
            return
        self._refresh_ui()

    def dispatch_command(self, command: Command) -> None:
        if command == Command.QUIT:
            self.app.exit()
            return
        if command == Command.DISMISS:
            self.dismiss_overlay()
            return
        if command == Command.SHOW_HELP:
            self._show_overlay(Overlay.show_help)
        elif command == Command.SHOW_ABOUT:
            self._show_overlay(Overlay.show_about)
        else:
            result = self.session.handle(command)
            if self.recorder is not None:
                self.recorder.record(self.session, command=command, result=result)
        self._refresh_ui()

    def _show_overlay(self, show: Callable[[Overlay], None]) -> None:
        show(self.text_overlay)
        self.session.open_modal()

    def _on_session_event(self, event: Event) -> None:
        if event.kind == EventKind.BLOCK_PLACED:
            self.app.bell()
        elif event.kind == EventKind.LEVEL_LOAD_FAILED:
            self.text_overlay.show_message(
                f"Could not load level {event.payload.get('level_id')}\n\n"
                f"{event.payload.get('error', '')}"
            )
            self.session.open_modal()
        elif event.kind == EventKind.ALL_LEVELS_COMPLETED:
            self._finished = True
            self.text_overlay.show_message(FINISHED_TEXT)
            self.session.open_modal()

    def _refresh_ui(self) -> None:
        if self._board:
            if self.text_overlay.visible:
                self._board.update(self.text_overlay.render())
            else:
                level = self.session.current_level_id or "-"
                self.app.sub_title = f"Level: {level}"
                board = render_board(self.session.snapshot(), rules=self.session.rules)
                self._board.update(Panel(board, title=f"Level: {level}"))
        if self._status_bar:
            self._status_bar.update(Panel(Text(self._status_text()), padding=(0, 1)))

    def _status_text(self) -> str:
        snapshot = self.session.snapshot()
        moves = snapshot.moves if snapshot else 0
        state = self.session.state
        label = "finished" if state == SessionState.FINISHED else state.value.lower()
        return (
            "Controls: arrows=move | r=restart | h=help | a=about | esc=quit | "
            f"moves={moves} | status={label}"
        )
