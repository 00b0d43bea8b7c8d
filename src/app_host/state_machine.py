"""Godot hook state machine using the ``transitions`` library.

A hook moves from ``not_started`` through ``building`` and, on success,
``build_succeeded`` -> ``launching`` -> ``launched``.  ``build_failed``,
``launch_failed``, ``cancelled`` and ``launched`` are terminal.
"""

from __future__ import annotations

import logging
from typing import Any

from transitions.extensions.asyncio import AsyncMachine, AsyncState

logger = logging.getLogger(__name__)

STATES: list[AsyncState] = [
    AsyncState("not_started"),
    AsyncState("building"),
    AsyncState("build_failed"),
    AsyncState("build_succeeded"),
    AsyncState("launching"),
    AsyncState("launched"),
    AsyncState("launch_failed"),
    AsyncState("cancelled"),
]

TERMINAL_STATES: frozenset[str] = frozenset(
    {"build_failed", "launched", "launch_failed", "cancelled"}
)

TRANSITIONS: list[dict[str, Any]] = [
    {"trigger": "begin_build", "source": "not_started", "dest": "building"},
    {"trigger": "reject_build", "source": "building", "dest": "build_failed"},
    {"trigger": "accept_build", "source": "building", "dest": "build_succeeded"},
    {"trigger": "begin_launch", "source": "build_succeeded", "dest": "launching"},
    {"trigger": "confirm_launch", "source": "launching", "dest": "launched"},
    {"trigger": "reject_launch", "source": "launching", "dest": "launch_failed"},
    {"trigger": "abort_build", "source": "building", "dest": "cancelled"},
]


def create_hook_machine(model: Any, initial_state: str = "not_started") -> AsyncMachine:
    """Create and return an ``AsyncMachine`` bound to *model*.

    Invalid triggers raise ``transitions.MachineError``; a hook that
    fires the wrong trigger is a programming error.
    """
    machine = AsyncMachine(
        model=model,
        states=STATES,
        transitions=TRANSITIONS,
        initial=initial_state,
        auto_transitions=False,
        send_event=True,
        queued=True,
    )
    return machine
