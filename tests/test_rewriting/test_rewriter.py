"""Tests for the format-preserving rewriter."""

from __future__ import annotations

import logging

import pytest

from logtune.config import LogTuneConfig
from logtune.parsing.parser import parse_log
from logtune.parsing.types import LogRecord, ParsedLog
from logtune.rewriting.rewriter import LogRewriter, update_log_content


def _edited(parsed: ParsedLog, epoch: int, **fields: object) -> list[LogRecord]:
    """Copy of the parsed records with *fields* overwritten at *epoch*."""
    return [
        {**record, **fields} if record["epoch"] == epoch else dict(record)
        for record in parsed.data
    ]


@pytest.fixture()
def rewriter(config: LogTuneConfig) -> LogRewriter:
    return LogRewriter(config)


class TestIdentity:
    """Rewrites that change nothing leave every byte in place."""

    def test_empty_allow_list(self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog) -> None:
        edited = _edited(parsed, 2, ACC=0.99)
        result = rewriter.rewrite(sample_log, edited, [])
        assert result.text == sample_log
        assert result.modified_epochs == []

    def test_reserved_keys_only(self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog) -> None:
        result = rewriter.rewrite(sample_log, parsed.data, ["epoch", "step"])
        assert result.text == sample_log

    def test_unchanged_values_all_keys(
        self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog
    ) -> None:
        """Same values, full allow-list: per-epoch lines and footers reproduce exactly."""
        result = rewriter.rewrite(sample_log, parsed.data, parsed.keys)
        assert result.text == sample_log
        assert result.modified_epochs == [1, 2, 3]


class TestPerEpochLines:
    """Substitution on tagged lines."""

    def test_decimal_format_preserved(
        self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog
    ) -> None:
        result = rewriter.rewrite(sample_log, _edited(parsed, 2, gate=0.5), ["gate"])
        lines = result.text.split("\n")
        assert "gate=0.5000 L_total=18.509275" in lines[5]
        assert lines[5] == sample_log.split("\n")[5].replace("gate=0.0101", "gate=0.5000")

    def test_only_allowed_keys_change(
        self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog
    ) -> None:
        edited = _edited(parsed, 2, gate=0.5, ACC=0.99)
        lines = rewriter.rewrite(sample_log, edited, ["gate"]).text.split("\n")
        assert "ACC=0.2899" in lines[5]
        assert "gate=0.5000" in lines[5]

    def test_exponent_format_preserved(
        self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog
    ) -> None:
        lines = rewriter.rewrite(sample_log, _edited(parsed, 1, lr=0.0002), ["lr"]).text.split("\n")
        assert lines[2].endswith("lr=2.000000e-04")
        assert lines[0] == sample_log.split("\n")[0]

    def test_integer_format_preserved(
        self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog
    ) -> None:
        lines = rewriter.rewrite(sample_log, _edited(parsed, 1, U_size=50.4), ["U_size"]).text.split("\n")
        assert "U_size=50 " in lines[3]
        assert "U_size=49 " in lines[6]

    def test_non_numeric_value_left_alone(
        self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog
    ) -> None:
        result = rewriter.rewrite(sample_log, _edited(parsed, 2, gate="n/a"), ["gate"])
        assert "gate=0.0101" in result.text.split("\n")[5]

    def test_epoch_missing_from_text(self, rewriter: LogRewriter) -> None:
        text = "METRIC: epoch=1 ACC=0.5000"
        result = rewriter.rewrite(text, [{"epoch": 2, "ACC": 0.9}], ["ACC"])
        assert result.text == text
        assert result.modified_epochs == []

    def test_modified_keys_reported(
        self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog
    ) -> None:
        result = rewriter.rewrite(sample_log, parsed.data, ["gate", "epoch", "ACC"])
        assert result.modified_keys == ["ACC", "gate"]

    def test_line_count_and_trailing_newline_kept(
        self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog
    ) -> None:
        result = rewriter.rewrite(sample_log, _edited(parsed, 3, ACC=0.1), ["ACC"])
        assert result.text.count("\n") == sample_log.count("\n")
        assert result.text.endswith("\n")


class TestLookBack:
    """The untagged summary line right before a metric line."""

    def test_summary_line_rewritten(
        self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog
    ) -> None:
        lines = rewriter.rewrite(sample_log, _edited(parsed, 2, ACC=0.9), ["ACC"]).text.split("\n")
        assert lines[4].startswith("2026-02-14 12:27:36.304: ACC=0.9000 NMI=0.2587")
        assert "ACC=0.9000" in lines[5]

    def test_args_line_before_metric_line_rewritten(self, rewriter: LogRewriter) -> None:
        text = "Args: Namespace(lr=0.0001)\nMETRIC: epoch=1 lr=0.0001"
        result = rewriter.rewrite(text, [{"epoch": 1, "lr": 0.0005}], ["lr"])
        assert result.text == "Args: Namespace(lr=0.0005)\nMETRIC: epoch=1 lr=0.0005"

    def test_route_line_has_no_look_back(self, rewriter: LogRewriter) -> None:
        text = "METRIC: epoch=1 x=1.0\nsched: x=1.0\nROUTE: epoch=1 x=1.0"
        result = rewriter.rewrite(text, [{"epoch": 1, "x": 5.0}], ["x"])
        assert result.text == "METRIC: epoch=1 x=5.0\nsched: x=1.0\nROUTE: epoch=1 x=5.0"

    def test_tagged_previous_line_not_treated_as_summary(self, rewriter: LogRewriter) -> None:
        text = "METRIC: epoch=1 x=1.0\nROUTE: epoch=2 x=2.0"
        result = rewriter.rewrite(text, [{"epoch": 2, "x": 5.0}], ["x"])
        assert result.text == "METRIC: epoch=1 x=1.0\nROUTE: epoch=2 x=5.0"

    def test_only_immediately_preceding_line(self, rewriter: LogRewriter) -> None:
        text = "ACC=0.1\nplain text\nMETRIC: epoch=1 ACC=0.1"
        result = rewriter.rewrite(text, [{"epoch": 1, "ACC": 0.9}], ["ACC"])
        assert result.text == "ACC=0.1\nplain text\nMETRIC: epoch=1 ACC=0.9"


class TestFooters:
    """Average / final / best blocks follow the edited data."""

    def test_average_recomputed(
        self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog
    ) -> None:
        lines = rewriter.rewrite(sample_log, _edited(parsed, 2, ACC=0.9), ["ACC"]).text.split("\n")
        assert lines[12].endswith("ACC=0.5070 NMI=0.2826 PUR=0.4716 ARI=0.1566 F1=0.2535")

    def test_average_counts_missing_epochs_as_zero(self, rewriter: LogRewriter) -> None:
        text = "METRIC: epoch=1 ACC=0.2000\nROUTE: epoch=2 U_size=49\nAverage over all epochs::\nACC=0.3000"
        records = [{"epoch": 1, "ACC": 0.4}, {"epoch": 2, "U_size": 49}]
        lines = rewriter.rewrite(text, records, ["ACC"]).text.split("\n")
        assert lines[0] == "METRIC: epoch=1 ACC=0.4000"
        assert lines[3] == "ACC=0.2000"

    def test_final_follows_last_epoch(
        self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog
    ) -> None:
        lines = rewriter.rewrite(sample_log, _edited(parsed, 3, NMI=0.5), ["NMI"]).text.split("\n")
        assert "NMI=0.5000" in lines[14]
        assert "ACC=0.2733" in lines[14]

    def test_best_epoch_header_and_values(
        self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog
    ) -> None:
        lines = rewriter.rewrite(sample_log, _edited(parsed, 2, ACC=0.9), ["ACC"]).text.split("\n")
        assert lines[15].endswith("Best Evaluation (Epoch 2):")
        assert lines[16].endswith("ACC=0.9000 NMI=0.3323 PUR=0.5210 ARI=0.1940 F1=0.2873")

    def test_best_epoch_unchanged_when_still_best(
        self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog
    ) -> None:
        lines = rewriter.rewrite(sample_log, _edited(parsed, 2, ACC=0.3), ["ACC"]).text.split("\n")
        assert lines[15].endswith("Best Evaluation (Epoch 1):")

    def test_best_header_needs_target_in_allow_list(
        self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog
    ) -> None:
        edited = _edited(parsed, 2, ACC=0.9, gate=0.5)
        lines = rewriter.rewrite(sample_log, edited, ["gate"]).text.split("\n")
        assert lines[15].endswith("Best Evaluation (Epoch 1):")

    def test_marker_on_last_line(self, rewriter: LogRewriter) -> None:
        text = "METRIC: epoch=1 ACC=0.5\nAverage over all epochs::"
        result = rewriter.rewrite(text, [{"epoch": 1, "ACC": 0.7}], ["ACC"])
        assert result.text == "METRIC: epoch=1 ACC=0.7\nAverage over all epochs::"


class TestReparse:
    """Parsing the rewritten text yields the edited records."""

    def test_edited_values_reparse(
        self, rewriter: LogRewriter, sample_log: str, parsed: ParsedLog, config: LogTuneConfig
    ) -> None:
        edited = _edited(parsed, 2, ACC=0.9, L_total=12.5)
        result = rewriter.rewrite(sample_log, edited, ["ACC", "L_total"])
        reparsed = parse_log(result.text, config)
        assert reparsed.data == edited
        assert reparsed.args == parsed.args
        assert reparsed.keys == parsed.keys


class TestModuleFunction:
    """update_log_content() and logging."""

    def test_matches_rewriter(self, sample_log: str, parsed: ParsedLog, config: LogTuneConfig) -> None:
        edited = _edited(parsed, 1, gate=0.25)
        expected = LogRewriter(config).rewrite(sample_log, edited, ["gate"])
        assert update_log_content(sample_log, edited, ["gate"], config) == expected

    def test_summary_logged(
        self,
        rewriter: LogRewriter,
        sample_log: str,
        parsed: ParsedLog,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.INFO, logger="logtune"):
            rewriter.rewrite(sample_log, parsed.data, ["ACC"])
        assert any("Rewrote 3 epochs for fields: ACC" in r.message for r in caplog.records)
