import json
from pathlib import Path

from sokoban.db.replay_log import (
    RUN_LOG_NAME,
    ReplayRecorder,
    create_run_folder,
    write_header,
)
from sokoban.render.replay_reader import read_header, read_step_payloads
from sokoban.sim.contracts import (
    Command,
    EventKind,
    LevelDescription,
    MoveOutcome,
    Placement,
)
from sokoban.sim.events import EventBus
from sokoban.sim.session import GameSession
from sokoban.sim.world_loader import StaticLevelLoader


def test_run_log_header_and_steps(tmp_path: Path) -> None:
    run_dir, log_path = create_run_folder(tmp_path, timestamp="2026-10-19T10-00-00Z")
    write_header(log_path, metadata={"run_id": run_dir.name})
    session, recorder = _recorded_session(log_path)

    session.start("a")
    recorder.record(session)
    result = session.handle(Command.RIGHT)
    recorder.record(session, command=Command.RIGHT, result=result)

    with log_path.open("r", encoding="utf-8") as handle:
        records = [json.loads(line) for line in handle]

    assert log_path.name == RUN_LOG_NAME
    assert records[0]["type"] == "header"
    assert records[0]["metadata"]["run_id"] == "2026-10-19T10-00-00Z"
    assert [record["type"] for record in records[1:]] == ["step", "step"]
    assert records[2]["payload"]["command"] == "RIGHT"
    assert records[2]["payload"]["outcome"] == "PUSHED"


def test_reader_round_trips_steps(tmp_path: Path) -> None:
    _, log_path = create_run_folder(tmp_path, timestamp="2026-10-19T10-01-00Z")
    write_header(log_path, metadata={"run_id": "run"})
    session, recorder = _recorded_session(log_path)

    session.start("a")
    first = recorder.record(session)
    result = session.handle(Command.RIGHT)
    second = recorder.record(session, command=Command.RIGHT, result=result)

    payloads = list(read_step_payloads(log_path))

    assert payloads == [first, second]
    assert read_header(log_path) == {"run_id": "run"}
    assert payloads[0].events is not None
    assert payloads[0].events[0].kind == EventKind.LEVEL_LOADED
    assert payloads[1].outcome == MoveOutcome.PUSHED
    assert [event.kind for event in payloads[1].events or []] == [
        EventKind.BLOCK_PLACED,
        EventKind.LEVEL_COMPLETED,
        EventKind.ALL_LEVELS_COMPLETED,
    ]
    assert payloads[1].session_state == "FINISHED"
    assert payloads[1].snapshot is not None
    assert payloads[1].snapshot.moves == 1


def test_reader_skips_garbage_lines(tmp_path: Path) -> None:
    log_path = tmp_path / RUN_LOG_NAME
    log_path.write_text(
        '{"type":"header","schema_version":1,"metadata":{}}\n'
        "not json\n"
        "[1, 2]\n"
        '{"type":"step","schema_version":1,"payload":{"step":0,'
        '"session_state":"LOADING"}}\n',
        encoding="utf-8",
    )

    payloads = list(read_step_payloads(log_path))

    assert len(payloads) == 1
    assert payloads[0].snapshot is None


def _recorded_session(log_path: Path) -> tuple[GameSession, ReplayRecorder]:
    bus = EventBus()
    recorder = ReplayRecorder(log_path)
    bus.subscribe(recorder.on_event)
    description = LevelDescription(
        level_id="a",
        width=3,
        height=1,
        goals=[Placement(x=2, y=0, kind_id=26)],
        blocks=[Placement(x=1, y=0, kind_id=2)],
        agent=Placement(x=0, y=0, kind_id=1),
    )
    return GameSession(StaticLevelLoader({"a": description}), bus=bus), recorder
