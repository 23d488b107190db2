from __future__ import annotations

import logging
from typing import Callable, Literal

from timeaxis.model import ChartModel
from timeaxis.options import HandleScaleOptions


LOGGER = logging.getLogger(__name__)

CursorType = Literal["default", "ew-resize"]


class DragController:
    """Turns pointer presses on the axis into time scale drag commands.

    The model owns the drag anchor and delta; this controller only forwards
    the current pointer x. A press that fails the enable/empty guard still
    arms `mouse_down`, so the matching release still reaches the model as
    `end_scale_time()`.
    """

    def __init__(self, model: ChartModel, handle_scale: Callable[[], HandleScaleOptions]) -> None:
        self._model = model
        self._handle_scale = handle_scale
        self._mouse_down = False
        self._cursor: CursorType = "default"

    @property
    def mouse_down(self) -> bool:
        return self._mouse_down

    @property
    def cursor(self) -> CursorType:
        return self._cursor

    def pointer_down(self, x: float) -> None:
        if self._mouse_down:
            return

        self._mouse_down = True
        if self._time_scale_empty() or not self._drag_enabled():
            return

        LOGGER.debug("starting time scale drag at x=%s", x)
        self._model.start_scale_time(x)

    def pointer_down_outside(self) -> None:
        if not self._time_scale_empty() and self._mouse_down:
            self._mouse_down = False
            if self._drag_enabled():
                self._model.end_scale_time()

    def pointer_move(self, x: float) -> None:
        if not self._mouse_down:
            return
        if self._time_scale_empty() or not self._drag_enabled():
            return

        self._model.scale_time_to(x)

    def pointer_up(self) -> None:
        self._mouse_down = False
        if self._time_scale_empty() and not self._drag_enabled():
            return

        LOGGER.debug("ending time scale drag")
        self._model.end_scale_time()

    def double_click(self) -> None:
        if self._handle_scale().axis_double_click_reset:
            self._model.reset_time_scale()

    def pointer_enter(self) -> CursorType:
        if self._drag_enabled():
            self._cursor = "ew-resize"
        return self._cursor

    def pointer_leave(self) -> CursorType:
        self._cursor = "default"
        return self._cursor

    def cancel(self) -> None:
        """End a press that is still held, e.g. when the axis is torn down."""
        if not self._mouse_down:
            return
        self._mouse_down = False
        LOGGER.debug("cancelling time scale drag")
        self._model.end_scale_time()

    def _drag_enabled(self) -> bool:
        return self._handle_scale().axis_pressed_mouse_move.time

    def _time_scale_empty(self) -> bool:
        return self._model.time_scale().is_empty()
