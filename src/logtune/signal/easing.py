"""Easing functions for interpolated generation.

Each easing maps normalized progress ``t`` in [0, 1] to shaped progress.
The quadratic and cubic in-out shapes are piecewise; they meet at t=0.5
and hit exactly 0 and 1 at the ends.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Callable

    EasingFn = Callable[[float], float]


class EasingRegistry:
    """Registry mapping string names to easing functions.

    Built-in easings register via the ``@EasingRegistry.register()``
    decorator at import time.
    """

    _registry: ClassVar[dict[str, EasingFn]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[EasingFn], EasingFn]:
        """Decorator that registers an easing function under *name*.

        Args:
            name: Identifier used by generate operations.

        Returns:
            Decorator that registers the function and returns it unchanged.

        Raises:
            ValueError: If *name* is already registered.
        """

        def decorator(fn: EasingFn) -> EasingFn:
            if name in cls._registry:
                raise ValueError(f"Easing '{name}' is already registered")
            cls._registry[name] = fn
            return fn

        return decorator

    @classmethod
    def get(cls, name: str) -> EasingFn:
        """Return the easing function registered under *name*.

        Raises:
            KeyError: If *name* is not registered.
        """
        if name not in cls._registry:
            available = ", ".join(sorted(cls._registry)) or "(none)"
            raise KeyError(f"Unknown easing '{name}'. Available: {available}")
        return cls._registry[name]

    @classmethod
    def list_registered(cls) -> list[str]:
        """Return sorted list of registered easing names."""
        return sorted(cls._registry)


@EasingRegistry.register("linear")
def linear(t: float) -> float:
    return t


@EasingRegistry.register("ease_in_quad")
def ease_in_quad(t: float) -> float:
    return t * t


@EasingRegistry.register("ease_out_quad")
def ease_out_quad(t: float) -> float:
    return t * (2 - t)


@EasingRegistry.register("ease_in_out_quad")
def ease_in_out_quad(t: float) -> float:
    if t < 0.5:
        return 2 * t * t
    return -1 + (4 - 2 * t) * t


@EasingRegistry.register("ease_in_out_cubic")
def ease_in_out_cubic(t: float) -> float:
    if t < 0.5:
        return 4 * t * t * t
    return (t - 1) * (2 * t - 2) * (2 * t - 2) + 1
