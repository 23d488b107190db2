from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Sequence

from timeaxis.font_metrics import RendererGeometry, label_baseline
from timeaxis.model import TimeMark
from timeaxis.raster.canvas import round_half_up
from timeaxis.raster.context import RasterContext, scaled
from timeaxis.surface import Size


# Marks weighted strictly between these bounds are demoted so that e.g. 15:00
# is not bold while its 14:00 neighbour is regular.
DEMOTE_WEIGHT_LOWER = 30
DEMOTE_WEIGHT_UPPER = 40


@dataclass(frozen=True)
class TickMarkStyle:
    line_color: str
    text_color: str
    font: str
    bold_font: str
    border_visible: bool


def max_tick_weight(marks: Sequence[TimeMark]) -> int:
    max_weight = marks[0].weight
    for mark in marks[1:]:
        if mark.weight > max_weight:
            max_weight = mark.weight
    if DEMOTE_WEIGHT_LOWER < max_weight < DEMOTE_WEIGHT_UPPER:
        max_weight = DEMOTE_WEIGHT_LOWER
    return max_weight


class TickMarkRenderer:
    """Draws tick glyphs and labels onto the base surface."""

    def paint(
        self,
        ctx: RasterContext,
        marks: Sequence[TimeMark] | None,
        geometry: RendererGeometry,
        pixel_ratio: float,
        style: TickMarkStyle,
    ) -> None:
        if not marks:
            return

        max_weight = max_tick_weight(marks)
        y_text = label_baseline(geometry)

        ctx.save()
        try:
            ctx.stroke_style = style.line_color
            ctx.text_align = "center"
            ctx.fill_style = style.line_color

            if style.border_visible:
                border_size = math.floor(geometry.border_size * pixel_ratio)
                tick_width = max(1, math.floor(pixel_ratio))
                tick_offset = math.floor(pixel_ratio * 0.5)
                tick_len = round_half_up(geometry.tick_length * pixel_ratio)
                ctx.begin_path()
                for mark in reversed(marks):
                    x = round_half_up(mark.coord * pixel_ratio)
                    ctx.rect(x - tick_offset, border_size, tick_width, tick_len)
                ctx.fill()

            ctx.fill_style = style.text_color
            with scaled(ctx, pixel_ratio):
                ctx.font = style.font
                for mark in marks:
                    if mark.weight < max_weight:
                        ctx.fill_text(mark.label, mark.coord, y_text)
                ctx.font = style.bold_font
                for mark in marks:
                    if mark.weight >= max_weight:
                        ctx.fill_text(mark.label, mark.coord, y_text)
        finally:
            ctx.restore()


def draw_background(ctx: RasterContext, size: Size, pixel_ratio: float, color: str) -> None:
    with scaled(ctx, pixel_ratio):
        ctx.clear_rect(0, 0, size.width, size.height)
        ctx.fill_style = color
        ctx.fill_rect(0, 0, size.width, size.height)


def draw_border(ctx: RasterContext, size: Size, pixel_ratio: float, geometry: RendererGeometry, color: str) -> None:
    ctx.save()
    try:
        ctx.fill_style = color
        border_size = max(1, math.floor(geometry.border_size * pixel_ratio))
        ctx.fill_rect(0, 0, math.ceil(size.width * pixel_ratio), border_size)
    finally:
        ctx.restore()
