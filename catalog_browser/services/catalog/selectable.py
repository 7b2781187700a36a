"""Single-select option control used by the category and sort pickers."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

ChangeListener = Callable[[V], None]


class SelectableOptions(Generic[V]):
    """Holds the chosen value of a fixed option list plus its overlay state."""

    def __init__(
        self,
        value: V,
        options: Sequence[tuple[V, str]],
        *,
        placeholder: str,
    ) -> None:
        self._value = value
        self._options: list[tuple[V, str]] = list(options)
        self.placeholder = placeholder
        self.is_open = False
        self._listeners: list[ChangeListener[V]] = []

    @property
    def value(self) -> V:
        return self._value

    @property
    def options(self) -> list[tuple[V, str]]:
        return list(self._options)

    @property
    def display_label(self) -> str:
        """Label of the selected option, or the placeholder when none matches."""

        for value, label in self._options:
            if value == self._value:
                return label
        return self.placeholder

    def is_selected(self, value: V) -> bool:
        return value == self._value

    def subscribe(self, listener: ChangeListener[V]) -> Callable[[], None]:
        """Register a change listener and return a callable that removes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def replace_options(self, options: Sequence[tuple[V, str]]) -> None:
        """Swap the option list without touching the chosen value."""

        self._options = list(options)

    def toggle(self) -> None:
        self.is_open = not self.is_open

    def dismiss(self) -> None:
        """Close the overlay after an interaction outside the control."""

        self.is_open = False

    def select(self, value: V) -> None:
        """Choose ``value``, close the overlay and notify listeners."""

        if not any(option == value for option, _ in self._options):
            raise ValueError(f"Unknown option: {value!r}")

        self.is_open = False
        self._value = value
        logger.debug("Option selected: %s", value)
        for listener in list(self._listeners):
            listener(value)

    def set_value(self, value: V) -> None:
        """Reflect an externally driven value without notifying listeners."""

        self._value = value
