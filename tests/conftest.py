"""Shared pytest fixtures for logtune tests.

Provides a config isolated from the environment and a small but complete
training log: args line, plain summary lines, METRIC/ROUTE/DISTR lines
and the three footer blocks.
"""

from __future__ import annotations

import pytest

from logtune.config import LogTuneConfig
from logtune.parsing.parser import parse_log
from logtune.parsing.types import ParsedLog

SAMPLE_LOG = """\
2026-02-14 12:26:13.980: Args: Namespace(dataset='RGB-D', batch_size=256, lr=0.0001)
2026-02-14 12:27:30.391: ACC=0.3478 NMI=0.3323 PUR=0.5210 ARI=0.1940 F1=0.2873
2026-02-14 12:27:30.391: METRIC: epoch=1 step=1 ACC=0.3478 NMI=0.3323 PUR=0.5210 ARI=0.1940 F1=0.2873 gate=0.0000 L_total=18.923725 lr=1.000000e-04
2026-02-14 12:27:30.391: ROUTE: epoch=1 neg_mode=batch U_size=49 neg_per_anchor=221.13 FN_ratio=0.0000
2026-02-14 12:27:36.304: ACC=0.2899 NMI=0.2587 PUR=0.4341 ARI=0.1351 F1=0.2346
2026-02-14 12:27:36.304: METRIC: epoch=2 step=2 ACC=0.2899 NMI=0.2587 PUR=0.4341 ARI=0.1351 F1=0.2346 gate=0.0101 L_total=18.509275 lr=9.500000e-05
2026-02-14 12:27:36.304: ROUTE: epoch=2 neg_mode=batch U_size=49 neg_per_anchor=221.67 FN_ratio=0.0000
2026-02-14 12:27:42.217: ACC=0.2733 NMI=0.2569 PUR=0.4596 ARI=0.1406 F1=0.2386
2026-02-14 12:27:42.218: METRIC: epoch=3 step=3 ACC=0.2733 NMI=0.2569 PUR=0.4596 ARI=0.1406 F1=0.2386 gate=0.0202 L_total=17.673055 lr=9.000000e-05
2026-02-14 12:27:42.218: ROUTE: epoch=3 neg_mode=batch U_size=49 neg_per_anchor=219.86 FN_ratio=0.0000
2026-02-14 12:27:42.218: DISTR: epoch=3 u_mean=0.4120 u_p50=0.3900 gamma_mean=1.2500
2026-02-14 12:27:42.300: Average over all epochs::
2026-02-14 12:27:42.300: ACC=0.3037 NMI=0.2826 PUR=0.4716 ARI=0.1566 F1=0.2535
2026-02-14 12:27:42.300: Final Evaluation (Last Epoch):
2026-02-14 12:27:42.300: ACC=0.2733 NMI=0.2569 PUR=0.4596 ARI=0.1406 F1=0.2386
2026-02-14 12:27:42.300: Best Evaluation (Epoch 1):
2026-02-14 12:27:42.300: ACC=0.3478 NMI=0.3323 PUR=0.5210 ARI=0.1940 F1=0.2873
"""


@pytest.fixture()
def config() -> LogTuneConfig:
    """Default config, ignoring any .env file."""
    return LogTuneConfig(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture()
def sample_log() -> str:
    """The shared three-epoch training log."""
    return SAMPLE_LOG


@pytest.fixture()
def parsed(sample_log: str, config: LogTuneConfig) -> ParsedLog:
    """SAMPLE_LOG parsed with the default config."""
    return parse_log(sample_log, config)
