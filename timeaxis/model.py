from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    from timeaxis.font_metrics import RendererGeometry
    from timeaxis.options import TimeScaleOptions
    from timeaxis.raster.context import RasterContext


@dataclass(frozen=True)
class TimeMark:
    """A labelled tick on the time axis; `weight` ranks its temporal significance."""

    coord: float
    weight: int
    label: str


class InvalidationLevel(IntEnum):
    NONE = 0
    CURSOR = 1
    LIGHT = 2
    FULL = 3


class TimeScale(Protocol):
    def is_empty(self) -> bool:
        ...

    def marks(self) -> Sequence[TimeMark] | None:
        """Current marks, ordered by coordinate. Regenerates marks as a side effect."""
        ...

    def options(self) -> TimeScaleOptions:
        ...


class TimeAxisViewRenderer(Protocol):
    def draw(self, ctx: RasterContext, geometry: RendererGeometry, pixel_ratio: float) -> None:
        ...


class TimeAxisView(Protocol):
    def renderer(self) -> TimeAxisViewRenderer:
        ...


class TimeAxisLabelSource(Protocol):
    def time_axis_views(self) -> Sequence[TimeAxisView]:
        ...


class ChartModel(Protocol):
    """The parts of the chart model the time axis reads from and commands."""

    def time_scale(self) -> TimeScale:
        ...

    def start_scale_time(self, x: float) -> None:
        ...

    def scale_time_to(self, x: float) -> None:
        ...

    def end_scale_time(self) -> None:
        ...

    def reset_time_scale(self) -> None:
        ...

    def light_update(self) -> None:
        """Schedule a cheap re-layout; must not paint synchronously."""
        ...

    def crosshair_source(self) -> TimeAxisLabelSource:
        ...
