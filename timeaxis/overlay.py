from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Iterable

from timeaxis.font_metrics import RendererGeometry, label_baseline
from timeaxis.model import TimeAxisLabelSource
from timeaxis.raster.canvas import round_half_up
from timeaxis.raster.context import RasterContext, scaled
from timeaxis.surface import Size


class OverlayLabelRenderer:
    """Clears the overlay and lets each source draw its own time axis labels."""

    def paint(
        self,
        ctx: RasterContext,
        sources: Iterable[TimeAxisLabelSource],
        geometry: RendererGeometry,
        pixel_ratio: float,
        size: Size,
    ) -> None:
        ctx.clear_rect(0, 0, math.ceil(size.width * pixel_ratio), math.ceil(size.height * pixel_ratio))
        for source in sources:
            for view in source.time_axis_views():
                ctx.save()
                try:
                    view.renderer().draw(ctx, geometry, pixel_ratio)
                finally:
                    ctx.restore()


@dataclass(frozen=True)
class TimeAxisLabel:
    text: str
    coordinate: float
    axis_width: float
    background_color: str
    text_color: str
    visible: bool = True


class TimeAxisLabelRenderer:
    """Boxed label centred on a coordinate, e.g. the crosshair time."""

    def __init__(self, label: TimeAxisLabel | None = None) -> None:
        self._label = label

    def set_label(self, label: TimeAxisLabel | None) -> None:
        self._label = label

    def draw(self, ctx: RasterContext, geometry: RendererGeometry, pixel_ratio: float) -> None:
        label = self._label
        if label is None or not label.visible or not label.text:
            return

        ctx.font = geometry.font
        text_width = round_half_up(geometry.width_cache.measure(ctx, label.text))
        if text_width <= 0:
            return

        label_width = text_width + 2 * geometry.padding_horizontal
        x1 = label.coordinate - label_width / 2.0
        x2 = x1 + label_width
        # keep the whole box on the axis
        if x1 < 0:
            x1 = 0
            x2 = label_width
        elif x2 > label.axis_width:
            x1 = label.axis_width - label_width
            x2 = label.axis_width

        y2 = math.ceil(
            geometry.border_size
            + geometry.tick_length
            + geometry.padding_top
            + geometry.font_size
            + geometry.padding_bottom
        )

        ctx.fill_style = label.background_color
        ctx.fill_rect(
            round_half_up(x1 * pixel_ratio),
            0,
            round_half_up(x2 * pixel_ratio) - round_half_up(x1 * pixel_ratio),
            math.ceil(y2 * pixel_ratio),
        )

        ctx.fill_style = label.text_color
        ctx.text_align = "left"
        with scaled(ctx, pixel_ratio):
            ctx.fill_text(label.text, x1 + geometry.padding_horizontal, label_baseline(geometry))


class TimeAxisLabelView:
    def __init__(self, label: TimeAxisLabel | None = None) -> None:
        self._renderer = TimeAxisLabelRenderer(label)

    def update(self, label: TimeAxisLabel | None) -> None:
        self._renderer.set_label(label)

    def renderer(self) -> TimeAxisLabelRenderer:
        return self._renderer
