"""Configuration system for logtune.

Uses pydantic-settings for declarative, layered configuration:
init kwargs -> environment variables (LOGTUNE_*) -> .env file -> field defaults.

Overrides are applied via resolve_config() which creates a new config
instance without mutating the defaults. Format fields (markers, tags) are
protected from override because the parser and rewriter must agree on them
for the lifetime of a log buffer.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from logtune.exceptions import ConfigValidationError

# Fields that can be overridden per invocation (CLI flags, session calls).
_OVERRIDABLE_FIELDS: frozenset[str] = frozenset(
    {
        "round_digits",
        "exponent_digits",
        "history_capacity",
        "log_level",
        "diagnostic_mode",
    }
)

# All known config field names (populated after class definition).
_ALL_FIELDS: frozenset[str] = frozenset()

_OVERRIDE_PREFIX = "logtune_"


class LogTuneConfig(BaseSettings):
    """Configuration for logtune.

    Resolution order: init kwargs -> env vars (LOGTUNE_*) -> .env file -> defaults.

    Fields are divided into two groups:
    - **Log format**: Tag markers, args marker, footer markers and the
      best-epoch policy. NOT overridable via resolve_config().
    - **Editing**: Rounding, history capacity, logging. Overridable.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOGTUNE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Log format (NOT overridable) ---

    metric_tag: str = Field(
        default="METRIC:",
        description="Marker of per-epoch metric lines",
    )
    route_tag: str = Field(
        default="ROUTE:",
        description="Marker of per-epoch routing lines",
    )
    distribution_tag: str = Field(
        default="DISTR:",
        description="Marker of per-epoch distribution lines",
    )
    args_marker: str = Field(
        default="Args: Namespace",
        description="Marker of the one-time argument dump line",
    )
    average_marker: str = Field(
        default="Average over all epochs",
        description="Footer marker preceding the average metrics line",
    )
    final_marker: str = Field(
        default="Final Evaluation (Last Epoch)",
        description="Footer marker preceding the last-epoch metrics line",
    )
    best_marker: str = Field(
        default="Best Evaluation (Epoch",
        description="Footer marker preceding the best-epoch metrics line",
    )
    accuracy_metrics: tuple[str, ...] = Field(
        default=("ACC", "NMI", "F1", "ARI", "PUR"),
        description="Preferred best-epoch targets, in priority order",
    )
    loss_prefix: str = Field(
        default="L_",
        description="Metric-name prefix marking a loss term (minimized)",
    )

    # --- Editing (overridable) ---

    round_digits: int = Field(
        default=6,
        ge=0,
        description="Decimal digits kept on every edited value",
    )
    exponent_digits: int = Field(
        default=6,
        ge=0,
        description="Mantissa digits when re-rendering exponent notation",
    )
    history_capacity: int = Field(
        default=20,
        ge=1,
        description="Maximum snapshots kept by an editing session",
    )

    # --- Logging (overridable) ---

    log_level: str = Field(
        default="summary",
        description="Edit logging verbosity: 'none', 'summary', 'full'",
    )
    diagnostic_mode: bool = Field(
        default=False,
        description="Store all edit records in memory for analysis",
    )

    @property
    def tags(self) -> tuple[str, str, str]:
        """The three line tags that mark per-epoch data lines."""
        return (self.metric_tag, self.route_tag, self.distribution_tag)


# Populate _ALL_FIELDS now that the class is defined.
_ALL_FIELDS = frozenset(LogTuneConfig.model_fields.keys())


def _strip_prefix(key: str) -> str:
    """Strip the 'logtune_' prefix from an override key.

    Args:
        key: The key with or without 'logtune_' prefix.

    Returns:
        The key with the prefix removed if present.
    """
    if key.startswith(_OVERRIDE_PREFIX):
        return key[len(_OVERRIDE_PREFIX) :]
    return key


def validate_overrides(overrides: dict[str, Any]) -> None:
    """Validate all logtune_* keys in *overrides* without creating a config.

    Args:
        overrides: Dictionary of overrides, potentially with logtune_ prefix.

    Raises:
        ConfigValidationError: If any logtune_* key is unknown or non-overridable.
    """
    for key in overrides:
        if not key.startswith(_OVERRIDE_PREFIX):
            continue
        field_name = _strip_prefix(key)
        if field_name not in _ALL_FIELDS:
            raise ConfigValidationError(
                f"Unknown config field: '{key}' (no field '{field_name}' exists)"
            )
        if field_name not in _OVERRIDABLE_FIELDS:
            raise ConfigValidationError(
                f"Field '{field_name}' is a log format field and cannot be overridden"
            )


def resolve_config(
    defaults: LogTuneConfig,
    overrides: dict[str, Any] | None,
) -> LogTuneConfig:
    """Create a new config instance merging defaults with overrides.

    Override keys use the 'logtune_' prefix (e.g., 'logtune_round_digits': 4).
    Keys without the prefix are silently ignored.

    Args:
        defaults: The base configuration loaded from environment.
        overrides: Per-invocation overrides.

    Returns:
        A new LogTuneConfig with overrides applied, or *defaults* itself
        when there is nothing to apply.

    Raises:
        ConfigValidationError: If any key is unknown, non-overridable, or
            its value fails validation.
    """
    if not overrides:
        return defaults

    validate_overrides(overrides)

    applied: dict[str, Any] = {}
    for key, value in overrides.items():
        if not key.startswith(_OVERRIDE_PREFIX):
            continue
        applied[_strip_prefix(key)] = value

    if not applied:
        return defaults

    # model_validate on the merged dict so strings from the CLI are coerced.
    merged = defaults.model_dump()
    merged.update(applied)
    try:
        return LogTuneConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
