"""Tests for the logtune command-line entry point."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from logtune.cli import build_parser, main


@pytest.fixture()
def log_path(tmp_path: Path, sample_log: str) -> Path:
    path = tmp_path / "train.log"
    path.write_text(sample_log, encoding="utf-8")
    return path


class TestParseCommand:
    """logtune parse."""

    def test_summary(self, log_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["parse", str(log_path)]) == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["epochs"] == 3
        assert summary["first_epoch"] == 1
        assert summary["last_epoch"] == 3
        assert summary["metrics"][0] == "ACC"
        assert summary["args"]["dataset"] == "RGB-D"
        assert summary["best_epoch"] == 1
        assert summary["best_metric"] == "ACC"
        assert summary["averages"]["ACC"] == pytest.approx(0.303667, abs=1e-6)
        assert "records" not in summary

    def test_records_flag(self, log_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["parse", str(log_path), "--records"]) == 0
        summary = json.loads(capsys.readouterr().out)
        assert [r["epoch"] for r in summary["records"]] == [1, 2, 3]

    def test_empty_log(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.log"
        path.write_text("starting\n", encoding="utf-8")
        assert main(["parse", str(path)]) == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        assert main(["parse", str(tmp_path / "missing.log")]) == 2


class TestEditCommand:
    """logtune edit."""

    def test_offset_to_file(self, log_path: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.log"
        code = main(
            [
                "edit", str(log_path),
                "--metric", "ACC",
                "--tool", "offset",
                "--from", "2", "--to", "2",
                "--offset", "0.1",
                "-o", str(out),
            ]
        )
        assert code == 0
        lines = out.read_text(encoding="utf-8").split("\n")
        assert "ACC=0.3899" in lines[5]
        assert "ACC=0.3478" in lines[2]

    def test_generate_to_stdout(self, log_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(
            [
                "edit", str(log_path),
                "--metric", "ACC",
                "--start-value", "0.3",
                "--end-value", "0.5",
            ]
        )
        assert code == 0
        lines = capsys.readouterr().out.split("\n")
        assert "ACC=0.3000" in lines[2]
        assert "ACC=0.4000" in lines[5]
        assert "ACC=0.5000" in lines[8]

    def test_invalid_correlation(self, log_path: Path) -> None:
        code = main(
            ["edit", str(log_path), "--metric", "ACC", "--tool", "jitter", "--correlation", "1.5"]
        )
        assert code == 1

    def test_unknown_tool_rejected_by_argparse(self, log_path: Path) -> None:
        with pytest.raises(SystemExit):
            main(["edit", str(log_path), "--metric", "ACC", "--tool", "smooth"])


class TestConfigOverrides:
    """--set KEY=VALUE."""

    def test_round_digits_override(self, log_path: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.log"
        code = main(
            [
                "--set", "round_digits=2",
                "edit", str(log_path),
                "--metric", "L_total",
                "--tool", "offset",
                "--from", "1", "--to", "1",
                "--offset", "0.004",
                "-o", str(out),
            ]
        )
        assert code == 0
        assert "L_total=18.930000" in out.read_text(encoding="utf-8").split("\n")[2]

    def test_invalid_override(self, log_path: Path) -> None:
        assert main(["--set", "round_digits=-1", "parse", str(log_path)]) == 1

    def test_format_field_override_rejected(self, log_path: Path) -> None:
        assert main(["--set", "metric_tag=STATS:", "parse", str(log_path)]) == 1

    def test_malformed_pair(self, log_path: Path) -> None:
        assert main(["--set", "round_digits", "parse", str(log_path)]) == 1

    def test_help_lists_commands(self) -> None:
        help_text = build_parser().format_help()
        assert "edit" in help_text
        assert "parse" in help_text
