from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping, Protocol


PointerPhase = Literal[
    "down",
    "move",
    "up",
    "down_outside",
    "double_click",
    "enter",
    "leave",
]

_PHASES = frozenset({"down", "move", "up", "down_outside", "double_click", "enter", "leave"})


@dataclass(frozen=True)
class AxisPointerEvent:
    """Pointer event in axis-local logical coordinates.

    `move` is only produced while a button is held over the axis.
    """

    phase: PointerPhase
    local_x: float = 0.0
    local_y: float = 0.0


def parse_pointer_event(event_type: str, payload: object) -> AxisPointerEvent | None:
    """Normalize a host `pointer` event; anything unrecognised yields None."""

    if event_type != "pointer" or not isinstance(payload, Mapping):
        return None
    phase = payload.get("phase")
    if phase not in _PHASES:
        return None
    try:
        local_x = float(payload.get("x", 0.0))
        local_y = float(payload.get("y", 0.0))
    except (TypeError, ValueError):
        return None
    return AxisPointerEvent(phase=phase, local_x=local_x, local_y=local_y)


class PointerHandlers(Protocol):
    def mouse_down_event(self, event: AxisPointerEvent) -> None:
        ...

    def pressed_mouse_move_event(self, event: AxisPointerEvent) -> None:
        ...

    def mouse_up_event(self, event: AxisPointerEvent) -> None:
        ...

    def mouse_down_outside_event(self) -> None:
        ...

    def mouse_double_click_event(self, event: AxisPointerEvent) -> None:
        ...

    def mouse_enter_event(self, event: AxisPointerEvent) -> None:
        ...

    def mouse_leave_event(self, event: AxisPointerEvent) -> None:
        ...


class PointerEventRouter:
    def __init__(self, handlers: PointerHandlers) -> None:
        self._handlers: PointerHandlers | None = handlers

    @property
    def destroyed(self) -> bool:
        return self._handlers is None

    def dispatch(self, event: AxisPointerEvent) -> bool:
        handlers = self._handlers
        if handlers is None:
            return False
        if event.phase == "down":
            handlers.mouse_down_event(event)
        elif event.phase == "move":
            handlers.pressed_mouse_move_event(event)
        elif event.phase == "up":
            handlers.mouse_up_event(event)
        elif event.phase == "down_outside":
            handlers.mouse_down_outside_event()
        elif event.phase == "double_click":
            handlers.mouse_double_click_event(event)
        elif event.phase == "enter":
            handlers.mouse_enter_event(event)
        elif event.phase == "leave":
            handlers.mouse_leave_event(event)
        else:
            return False
        return True

    def destroy(self) -> None:
        self._handlers = None
