"""Small finite state machine for UI state.

Explicit states instead of boolean flags: ``idle``, ``loading``,
``success``, ``failure`` rather than ``is_loading``. Transitions are
declared up front, so impossible states cannot be reached.

Usage::

    machine = StateMachine(
        initial="idle",
        states={
            "idle": {"on": {"FETCH": "loading"}},
            "loading": {"on": {"OK": "success", "FAIL": "failure"}},
            "success": {},
            "failure": {"on": {"RETRY": "loading"}},
        },
    )
    machine.send("FETCH")
    machine.state  # "loading"
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from folio.errors import FolioError

logger = logging.getLogger("folio.machine")

# A transition target: a state name, or a function choosing one from
# the machine context and the event payload.
type Target = str | Callable[[dict[str, Any], dict[str, Any]], str]


class MachineError(FolioError):
    """Raised when a machine references a state it does not define."""


@dataclass(frozen=True, slots=True)
class Transition:
    """What ``on_transition`` callbacks receive after a state change."""

    from_state: str
    to_state: str
    event: str
    payload: dict[str, Any]
    context: dict[str, Any]


class StateMachine:
    """A declarative state machine with a mutable context dict."""

    __slots__ = ("_context", "_current", "_on_transition", "_states")

    def __init__(
        self,
        initial: str,
        states: Mapping[str, Mapping[str, Any]],
        on_transition: Callable[[Transition], None] | None = None,
    ) -> None:
        if initial not in states:
            msg = f'Initial state "{initial}" not defined in states'
            raise MachineError(msg)
        self._states = states
        self._current = initial
        self._on_transition = on_transition
        self._context: dict[str, Any] = {}

    @property
    def state(self) -> str:
        return self._current

    @property
    def context(self) -> dict[str, Any]:
        return self._context

    def set_context(self, **updates: Any) -> None:
        """Merge *updates* into the context."""
        self._context = {**self._context, **updates}

    def _target(self, event: str) -> Target | None:
        return self._states[self._current].get("on", {}).get(event)

    def send(self, event: str, payload: dict[str, Any] | None = None) -> bool:
        """Fire *event*. Returns False (and warns) when the current state ignores it.

        Raises ``MachineError`` if the transition leads to an undefined state.
        """
        payload = payload or {}
        target = self._target(event)
        if target is None:
            logger.warning('No transition for event "%s" in state "%s"', event, self._current)
            return False

        next_state = target(self._context, payload) if callable(target) else target
        if next_state not in self._states:
            msg = f'Target state "{next_state}" not defined'
            raise MachineError(msg)

        previous = self._current
        self._current = next_state
        if self._on_transition is not None:
            self._on_transition(
                Transition(
                    from_state=previous,
                    to_state=next_state,
                    event=event,
                    payload=payload,
                    context=self._context,
                )
            )
        return True

    def is_in(self, state: str) -> bool:
        return self._current == state

    def can(self, event: str) -> bool:
        return self._target(event) is not None


def create_cyclic_machine(
    names: Sequence[str],
    initial: str | None = None,
    on_transition: Callable[[Transition], None] | None = None,
) -> StateMachine:
    """Build a machine that cycles through *names* (themes, carousels, tabs).

    Every state answers ``NEXT`` and ``PREV`` (wrapping at both ends) and
    ``GOTO`` with ``{"target": name}`` in the payload.
    """
    if not names:
        msg = "names must be a non-empty sequence"
        raise MachineError(msg)

    count = len(names)
    states: dict[str, dict[str, Any]] = {}
    for index, name in enumerate(names):
        states[name] = {
            "on": {
                "NEXT": names[(index + 1) % count],
                "PREV": names[(index - 1) % count],
                "GOTO": _goto,
            }
        }
    return StateMachine(initial or names[0], states, on_transition)


def _goto(_context: dict[str, Any], payload: dict[str, Any]) -> str:
    return payload.get("target", "")
