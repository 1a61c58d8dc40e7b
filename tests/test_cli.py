"""
Unit tests for the command-line front end.
"""

import pytest

import picker.cli as cli
from picker.cli import build_parser, main
from picker.config import PickerConfig


def _write_table(tmp_path, text: str = "a = 1; b = 2; c = 3; d = 4\n"):
    path = tmp_path / "table.txt"
    path.write_text(text, encoding="utf-8")
    return path


def _scripted_input(answers):
    it = iter(answers)

    def fake_input(prompt: str = "") -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError
    return fake_input


class TestParser:
    """Test suite for argument parsing."""

    def test_defaults(self, tmp_path) -> None:
        args = build_parser().parse_args(["pick", str(tmp_path / "t.txt")])
        assert args.operation == "pick"
        assert args.amount == 1
        assert not args.fast and not args.know_nonuniform

    def test_operation_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestCommands:
    """Test suite for each operation."""

    def test_pick(self, tmp_path, capsys) -> None:
        path = _write_table(tmp_path)
        assert main(["pick", str(path), "2", "-f"]) == 0
        out = capsys.readouterr().out.split()
        assert out[-1] == "(nonuniform)"
        assert len(set(out[:-1])) == 2

    def test_pick_uniform_has_no_warning(self, tmp_path, capsys) -> None:
        path = _write_table(tmp_path, "a = 1; b = 1\n")
        assert main(["pick", str(path), "1"]) == 0
        assert "(nonuniform)" not in capsys.readouterr().out

    def test_pick_amount_too_large(self, tmp_path, capsys) -> None:
        path = _write_table(tmp_path)
        assert main(["pick", str(path), "5"]) == 1
        assert "Error" in capsys.readouterr().err

    def test_calc(self, tmp_path, capsys) -> None:
        path = _write_table(tmp_path)
        assert main(["calc", str(path), "2", "--workers", "2"]) == 0
        out = capsys.readouterr().out
        assert "Time passed" in out
        rows = [line for line in out.splitlines() if " = " in line]
        assert len(rows) == 4
        assert sum(float(r.split("=")[1]) for r in rows) == pytest.approx(200.0)

    def test_test_with_trials(self, tmp_path, capsys) -> None:
        path = _write_table(tmp_path)
        assert main(["test", str(path), "2", "--trials", "500", "-f"]) == 0
        out = capsys.readouterr().out
        assert "Testing for 500 times" in out

    def test_test_prompts_for_trials(self, tmp_path, capsys) -> None:
        path = _write_table(tmp_path)
        assert main(["test", str(path), "1", "-f"], input_fn=_scripted_input(["200"])) == 0
        assert "Testing for 200 times" in capsys.readouterr().out

    @pytest.mark.parametrize("answer", ["-5", "0", "many"])
    def test_test_bad_prompt_answer_uses_default(self, tmp_path, capsys, monkeypatch: pytest.MonkeyPatch, answer) -> None:
        """Test that a non-positive or non-numeric answer falls back to the default."""
        monkeypatch.setattr(cli, "DEFAULT_TRIALS", 300)
        path = _write_table(tmp_path)
        assert main(["test", str(path), "1", "-f"], input_fn=_scripted_input([answer])) == 0
        assert "Testing for 300 times" in capsys.readouterr().out

    @pytest.mark.parametrize("trials", ["0", "-3"])
    def test_test_rejects_non_positive_trials(self, tmp_path, capsys, trials) -> None:
        path = _write_table(tmp_path)
        with pytest.raises(SystemExit) as info:
            main(["test", str(path), "1", "--trials", trials])
        assert info.value.code == 2
        assert "positive integer" in capsys.readouterr().err

    def test_missing_table(self, tmp_path, capsys) -> None:
        assert main(["calc", str(tmp_path / "missing.txt")]) == 1
        assert "not found" in capsys.readouterr().err

    def test_invalid_table(self, tmp_path, capsys) -> None:
        path = _write_table(tmp_path, "a = -1\n")
        assert main(["pick", str(path)]) == 1

    def test_conf_creates_file(self, tmp_path) -> None:
        path = tmp_path / "new.txt"
        answers = ["y", "n", "a = 1", "b 2; c=3", "delete c", "end"]
        assert main(["conf", str(path)], input_fn=_scripted_input(answers)) == 0
        conf = PickerConfig.from_file(path)
        assert conf.repetitive is True
        assert conf.inversed is False
        assert conf.table == {"a": 1.0, "b": 2.0}

    def test_conf_rejects_invalid(self, tmp_path) -> None:
        path = tmp_path / "bad.txt"
        assert main(["conf", str(path)], input_fn=_scripted_input(["", "", "a = 0"])) == 1
        assert not path.exists()
