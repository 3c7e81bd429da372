from __future__ import annotations

import glob
import io
import os

from factoryfloor.cli import main


CLASSIC_SCRIPT = """\
move 9 onto 1
move 8 over 1
move 7 over 1
move 6 over 1
pile 8 over 6
pile 8 over 5
move 2 over 1
move 4 over 9
quit
"""

CLASSIC_OUTPUT = """\
0: 0
1: 1 9 2 4
2:
3: 3
4:
5: 5 8 7 6
6:
7:
8:
9:
"""


def write_script(tmp_path, text: str = CLASSIC_SCRIPT) -> str:
    path = tmp_path / "moves.txt"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_no_arguments_prints_help(capsys) -> None:
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_show(capsys) -> None:
    assert main(["show", "--positions", "3", "--divider", " | "]) == 0
    assert capsys.readouterr().out == "0: 0 | 1: 1 | 2: 2\n"


def test_show_non_ascii_divider(capsys) -> None:
    assert main(["show", "--positions", "2", "--divider", " → "]) == 0
    assert capsys.readouterr().out == "0: 0 → 1: 1\n"


def test_show_divider_mixes_escapes_and_non_ascii(capsys) -> None:
    assert main(["show", "--positions", "2", "--divider", " →\\n"]) == 0
    assert capsys.readouterr().out == "0: 0 →\n1: 1\n"


def test_show_default_divider(capsys) -> None:
    assert main(["show", "--positions", "2"]) == 0
    assert capsys.readouterr().out == "0: 0\n1: 1\n"


def test_show_negative_positions(capsys) -> None:
    assert main(["show", "--positions", "-1"]) == 1


def test_run_script(tmp_path, capsys) -> None:
    assert main(["run", "--positions", "10", "--script", write_script(tmp_path)]) == 0
    assert capsys.readouterr().out == CLASSIC_OUTPUT


def test_run_script_from_stdin(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("move 1 onto 2\n"))

    assert main(["run", "--positions", "4", "--script", "-"]) == 0
    assert capsys.readouterr().out == "0: 0\n1:\n2: 2 1\n3: 3\n"


def test_run_without_script() -> None:
    assert main(["run", "--positions", "4"]) == 1


def test_run_missing_script(tmp_path) -> None:
    assert main(["run", "--script", str(tmp_path / "missing.txt")]) == 1


def test_run_missing_config(tmp_path) -> None:
    assert main(["run", "--config", str(tmp_path / "missing.yaml"), "--script", "-"]) == 1


def test_run_undecodable_script(tmp_path, capsys) -> None:
    path = tmp_path / "moves.txt"
    path.write_bytes(b"move 1 onto 2\n\xff\xfe\n")

    assert main(["run", "--positions", "4", "--script", str(path)]) == 1
    assert "Failed to run script" in capsys.readouterr().out


def test_run_verbose_prints_steps(tmp_path, capsys) -> None:
    script = write_script(tmp_path, "move 1 onto 2\nmove 1 onto 2\nmove 9 onto 1\n")

    assert main(["run", "--positions", "4", "--script", script, "--verbose"]) == 0
    out = capsys.readouterr().out
    assert "Step  1: ✅ OK" in out
    assert "Step  2: ➖ NoOp" in out
    assert "Step  3: ❌ NotFound" in out
    assert "0: 0\n1:\n2: 2 1\n3: 3\n" in out


def test_run_negative_positions(tmp_path) -> None:
    assert main(["run", "--positions", "-2", "--script", write_script(tmp_path)]) == 1


def test_create_validate_and_run_config(tmp_path, capsys) -> None:
    config_path = str(tmp_path / "config.yaml")

    assert main(["create-config", "--output", config_path, "--positions", "10"]) == 0
    assert os.path.exists(config_path)
    assert main(["validate-config", config_path]) == 0
    capsys.readouterr()

    assert main(["run", "--config", config_path, "--script", write_script(tmp_path)]) == 0
    assert capsys.readouterr().out == CLASSIC_OUTPUT


def test_validate_config_strict(tmp_path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "floor:\n  position_count: 0\n",
        encoding="utf-8",
    )

    assert main(["validate-config", str(config_path)]) == 0
    assert main(["validate-config", str(config_path), "--strict"]) == 1


def test_run_with_logs(tmp_path) -> None:
    log_dir = tmp_path / "logs"
    args = [
        "run",
        "--positions", "10",
        "--script", write_script(tmp_path),
        "--save-logs",
        "--output-dir", str(log_dir),
    ]

    assert main(args) == 0
    log_files = glob.glob(str(log_dir / "*" / "experiment_log.json"))
    assert len(log_files) == 1
    assert os.path.exists(os.path.join(os.path.dirname(log_files[0]), "summary.txt"))
