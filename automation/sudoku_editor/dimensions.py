"""Holder for the current box-dimension configuration."""

from __future__ import annotations

from typing import Any, Callable

from .models import BoxDimensions

DimensionsListener = Callable[[BoxDimensions], None]


class DimensionsFrozenError(RuntimeError):
    """Raised when the configuration is changed after a solve."""


class DimensionsState:
    """Owns the ``BoxDimensions`` and tells subscribers when they change.

    Frozen once a solve starts; a frozen holder refuses further updates.
    """

    def __init__(self, initial: BoxDimensions | None = None) -> None:
        self._dimensions = initial or BoxDimensions()
        self._listeners: list[DimensionsListener] = []
        self._frozen = False

    @property
    def dimensions(self) -> BoxDimensions:
        return self._dimensions

    @property
    def grid_size(self) -> int:
        return self._dimensions.grid_size

    @property
    def frozen(self) -> bool:
        return self._frozen

    def subscribe(self, listener: DimensionsListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that removes it again."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_dimensions(self, per_row: Any, per_column: Any) -> bool:
        """Replace both dimensions at once.

        A falsy value on either side (``None``, ``0``, ``""``) leaves the
        current configuration untouched and returns ``False``.  No range
        check is made: negative counts go through as given.
        """
        if not per_row or not per_column:
            return False
        if self._frozen:
            raise DimensionsFrozenError("Box dimensions are frozen after solving")

        new = BoxDimensions(per_row=per_row, per_column=per_column)
        self._dimensions = new
        for listener in list(self._listeners):
            listener(new)
        return True

    def freeze(self) -> None:
        self._frozen = True

    def unfreeze(self) -> None:
        """Roll back a freeze after a submission that did not succeed."""
        self._frozen = False
