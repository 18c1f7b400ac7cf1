"""Registry for edit operation implementations.

Uses a decorator pattern for registration, mirroring the easing registry.
The ``build()`` method validates parameters and wraps pydantic errors in
EditOperationError so callers see one exception type.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import ValidationError

from logtune.exceptions import EditOperationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from logtune.signal.base import EditOperation


class OperationRegistry:
    """Registry mapping operation kinds to EditOperation classes.

    Built-in operations register via the ``@OperationRegistry.register()``
    decorator. ``build()`` instantiates one from keyword parameters.
    """

    _registry: ClassVar[dict[str, type[EditOperation]]] = {}

    @classmethod
    def register(cls, kind: str) -> Callable[[type[EditOperation]], type[EditOperation]]:
        """Decorator that registers an EditOperation class under *kind*.

        Args:
            kind: Identifier used as the session's active tool.

        Returns:
            Decorator that registers the class and returns it unchanged.

        Raises:
            ValueError: If *kind* is already registered.
        """

        def decorator(klass: type[EditOperation]) -> type[EditOperation]:
            if kind in cls._registry:
                raise ValueError(f"Operation '{kind}' is already registered")
            klass.kind = kind
            cls._registry[kind] = klass
            return klass

        return decorator

    @classmethod
    def get(cls, kind: str) -> type[EditOperation]:
        """Return the operation class registered under *kind*.

        Raises:
            KeyError: If *kind* is not registered.
        """
        if kind not in cls._registry:
            available = ", ".join(sorted(cls._registry)) or "(none)"
            raise KeyError(f"Unknown edit operation '{kind}'. Available: {available}")
        return cls._registry[kind]

    @classmethod
    def build(cls, kind: str, **params: Any) -> EditOperation:
        """Instantiate the operation registered under *kind*.

        Args:
            kind: Registered operation identifier.
            **params: Operation fields (metric, start_idx, end_idx, ...).

        Returns:
            A validated, immutable EditOperation.

        Raises:
            KeyError: If *kind* is not registered.
            EditOperationError: If the parameters fail validation.
        """
        klass = cls.get(kind)
        try:
            return klass(**params)
        except ValidationError as exc:
            raise EditOperationError(f"Invalid parameters for '{kind}': {exc}") from exc

    @classmethod
    def list_registered(cls) -> list[str]:
        """Return sorted list of registered operation kinds."""
        return sorted(cls._registry)
