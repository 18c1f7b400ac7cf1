"""Built-in edit operations: generate, jitter, offset."""

from __future__ import annotations

from pydantic import Field, field_validator

from logtune.signal.base import EditOperation
from logtune.signal.easing import EasingRegistry
from logtune.signal.registry import OperationRegistry
from logtune.signal.rng import SeededRandom


@OperationRegistry.register("generate")
class GenerateOperation(EditOperation):
    """Interpolate from ``start_value`` to ``end_value`` across the window.

    Formula::

        t     = i / (end_idx - start_idx)      for i in 0..end_idx-start_idx
        value = start_value + (end_value - start_value) * easing(t)

    Prior values are ignored. A window of a single point has no direction
    to interpolate in and is left untouched.
    """

    min_span = 1

    start_value: float = 0.0
    end_value: float = 1.0
    easing: str = "linear"

    @field_validator("easing")
    @classmethod
    def _known_easing(cls, value: str) -> str:
        try:
            EasingRegistry.get(value)
        except KeyError as exc:
            raise ValueError(exc.args[0]) from exc
        return value

    def transform(self, originals: list[float]) -> list[float]:
        ease = EasingRegistry.get(self.easing)
        steps = len(originals) - 1
        span = self.end_value - self.start_value
        return [self.start_value + span * ease(i / steps) for i in range(steps + 1)]


@OperationRegistry.register("jitter")
class JitterOperation(EditOperation):
    """Add seeded, optionally correlated Gaussian noise.

    Formula::

        noise_i = correlation * noise_{i-1} + (1 - correlation) * gauss_i
        value_i = original_i + noise_i * amplitude

    ``noise_{-1}`` is 0 for every call. ``correlation=0`` is white noise;
    values toward 0.99 give a slow drift. The same seed, correlation,
    amplitude and input always produce the same output.
    """

    seed: int = 12345
    amplitude: float = 0.05
    correlation: float = Field(default=0.0, ge=0.0, le=0.99)

    def transform(self, originals: list[float]) -> list[float]:
        rng = SeededRandom(self.seed)
        corr = self.correlation
        prev_noise = 0.0
        values: list[float] = []
        for original in originals:
            white = rng.next_gaussian()
            noise = corr * prev_noise + (1 - corr) * white
            prev_noise = noise
            values.append(original + noise * self.amplitude)
        return values


@OperationRegistry.register("offset")
class OffsetOperation(EditOperation):
    """Shift every value in the window by a constant."""

    offset: float = 0.0

    def transform(self, originals: list[float]) -> list[float]:
        return [original + self.offset for original in originals]
