from __future__ import annotations

import pytest

from factoryfloor.core import Action, CommandParseError, ErrorCode, FactoryFloor, FloorError
from factoryfloor.session import FloorSession, parse_command
from factoryfloor.utils.logger import ExperimentLogger


CLASSIC_SCRIPT = [
    "move 9 onto 1",
    "move 8 over 1",
    "move 7 over 1",
    "move 6 over 1",
    "pile 8 over 6",
    "pile 8 over 5",
    "move 2 over 1",
    "move 4 over 9",
    "quit",
]

CLASSIC_RESULT = "0: 0 | 1: 1 9 2 4 | 2: | 3: 3 | 4: | 5: 5 8 7 6 | 6: | 7: | 8: | 9:"


def test_parse_command() -> None:
    assert parse_command("move 1 onto 2") == Action(
        action_type="move_onto", parameters={"block_from": 1, "block_to": 2}
    )
    assert parse_command("  PILE 3 Over 0 \n").action_type == "pile_over"
    assert parse_command("move 4 over 9").action_type == "move_over"
    assert parse_command("pile 8 onto 6").parameters == {"block_from": 8, "block_to": 6}
    assert parse_command("quit").action_type == "quit"


def test_parse_command_skips_blank_and_comments() -> None:
    assert parse_command("") is None
    assert parse_command("   \n") is None
    assert parse_command("# move 1 onto 2") is None


@pytest.mark.parametrize("line", ["jump 1 onto 2", "move a onto b", "move 1 under 2", "move 1 onto"])
def test_parse_command_rejects_malformed(line: str) -> None:
    with pytest.raises(CommandParseError):
        parse_command(line)


def test_classic_script() -> None:
    session = FloorSession(FactoryFloor.new_instance(10))
    results = session.run_script(CLASSIC_SCRIPT)

    assert str(session.floor) == CLASSIC_RESULT
    assert session.stopped
    # "pile 8 over 6" is a no-op: both blocks share position 1 at that point
    assert results[4].error is ErrorCode.NOOP
    assert results[-1].action.action_type == "quit"


def test_lines_after_quit_are_ignored() -> None:
    session = FloorSession(FactoryFloor.new_instance(4))
    results = session.run_script(["move 1 onto 2", "quit", "move 3 onto 0"])

    assert len(results) == 2
    assert str(session.floor) == "0: 0 | 1: | 2: 2 1 | 3: 3"
    assert session.run_line("move 3 onto 0") is None


def test_bad_lines_do_not_stop_script() -> None:
    session = FloorSession(FactoryFloor.new_instance(4))
    results = session.run_script(["move 1 onto 2", "bogus", "move 3 over 2", "move 7 onto 1"])

    assert [r.error for r in results] == [
        ErrorCode.OK,
        ErrorCode.PARSE_ERROR,
        ErrorCode.OK,
        ErrorCode.NOT_FOUND,
    ]
    assert session.floor.get_blocks_at(2) == (2, 1, 3)

    summary = session.summary()
    assert summary["commands"] == 4
    assert summary["moves"] == 2
    assert summary["noops"] == 0
    assert summary["errors"] == 2
    assert summary["final_floor"] == "0: 0 | 1: | 2: 2 1 3 | 3:"


def test_execute_tool_call_move() -> None:
    session = FloorSession(FactoryFloor.new_instance(4))

    result = session.execute_tool_call("move_onto", {"block_from": 1, "block_to": 2})
    assert result["status"] == "success"
    assert result["message"] == "move 1 onto 2: moved"
    assert result["floor"] == "0: 0 | 1: | 2: 2 1 | 3: 3"

    result = session.execute_tool_call("pile_over", {"block_from": "2", "block_to": "1"})
    assert result["status"] == "noop"


def test_execute_tool_call_errors() -> None:
    session = FloorSession(FactoryFloor.new_instance(4))

    result = session.execute_tool_call("teleport", {})
    assert result["status"] == "error"
    assert result["error"] == ErrorCode.UNKNOWN_COMMAND.value

    result = session.execute_tool_call("move_over", {"block_from": 1, "block_to": 9})
    assert result["status"] == "error"
    assert result["error"] == ErrorCode.NOT_FOUND.value

    result = session.execute_tool_call("move_over", {"block_from": 1})
    assert result["error"] == ErrorCode.INVALID_ARGUMENT.value

    result = session.execute_tool_call("move_over", {"block_from": "one", "block_to": 2})
    assert result["error"] == ErrorCode.INVALID_ARGUMENT.value

    for bad in (1.9, 2.0, True, "1.5", None):
        result = session.execute_tool_call("move_onto", {"block_from": bad, "block_to": 3})
        assert result["status"] == "error"
        assert result["error"] == ErrorCode.INVALID_ARGUMENT.value

    assert str(session.floor) == "0: 0 | 1: 1 | 2: 2 | 3: 3"


def test_execute_tool_call_reports_generic_floor_error(monkeypatch) -> None:
    session = FloorSession(FactoryFloor.new_instance(4))

    def broken_move(block_from, block_to, mode):
        raise FloorError("floor jammed")

    monkeypatch.setattr(session.floor, "move", broken_move)
    result = session.execute_tool_call("move_onto", {"block_from": 1, "block_to": 2})

    assert result == {"status": "error", "message": "floor jammed", "error": ErrorCode.FLOOR_ERROR.value}


def test_state_tool() -> None:
    session = FloorSession(FactoryFloor.new_instance(3))
    session.execute_tool_call("move_onto", {"block_from": 0, "block_to": 2})

    result = session.execute_tool_call("state")
    assert result["status"] == "success"
    assert result["positions"] == {0: [], 1: [1], 2: [2, 0]}


def test_tool_schemas() -> None:
    session = FloorSession(FactoryFloor.new_instance(3))
    schemas = {s["function"]["name"]: s for s in session.get_tool_schemas()}

    assert set(schemas) == {"state", "move_onto", "move_over", "pile_onto", "pile_over"}
    assert schemas["pile_onto"]["function"]["parameters"]["required"] == ["block_from", "block_to"]
    assert schemas["state"]["function"]["parameters"]["required"] == []


def test_session_logs_steps(tmp_path) -> None:
    logger = ExperimentLogger(str(tmp_path), "session")
    session = FloorSession(FactoryFloor.new_instance(4), logger=logger)

    session.start()
    session.run_script(["move 1 onto 2", "nonsense", "move 2 onto 2"])

    step_types = [log["step_type"] for log in logger.logs]
    assert step_types == ["initial", "action", "error", "action"]
    assert logger.logs[0]["floor"] == "0: 0 | 1: 1 | 2: 2 | 3: 3"
    assert logger.logs[3]["tool_result"]["status"] == "noop"


def test_session_logs_images(tmp_path) -> None:
    logger = ExperimentLogger(str(tmp_path), "images")
    session = FloorSession(FactoryFloor.new_instance(3), logger=logger, save_images=True)

    session.start()
    session.run_line("move 1 onto 0")

    assert all("image_path" in log for log in logger.logs)
    assert (tmp_path / logger.experiment_name / "images" / "step_1.png").exists()
