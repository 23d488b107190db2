from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, replace
import math
import re
from typing import Iterator, Literal

import numpy as np

from timeaxis.raster.canvas import clear_rect, fill_mask, parse_color
from timeaxis.raster.text import DEFAULT_FONT_FAMILY, draw_text, text_advance


TextAlign = Literal["left", "center", "right"]

_FONT_DESCRIPTOR = re.compile(r"^\s*(?P<style>(?:[a-z]+\s+)*)(?P<size>\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)px\s+(?P<family>.+?)\s*$")


@dataclass(frozen=True)
class FontDescriptor:
    size_px: float
    family: str
    bold: bool = False


def parse_font(descriptor: str) -> FontDescriptor:
    match = _FONT_DESCRIPTOR.match(descriptor)
    if match is None:
        raise ValueError(f"invalid font descriptor: {descriptor!r}")
    styles = match.group("style").split()
    return FontDescriptor(
        size_px=float(match.group("size")),
        family=match.group("family"),
        bold="bold" in styles,
    )


@dataclass(frozen=True)
class _ContextState:
    fill_style: str = "#000000"
    stroke_style: str = "#000000"
    font: str = f"10px {DEFAULT_FONT_FAMILY}"
    text_align: TextAlign = "left"
    scale_x: float = 1.0
    scale_y: float = 1.0


class RasterContext:
    """Canvas-2D style drawing context over one RGBA bitmap.

    Coordinates passed to drawing calls are user-space and go through the
    current scale transform; `save()`/`restore()` snapshot every style field
    together with the transform. The current path is not part of the saved
    state, matching the usual 2D context contract.
    """

    def __init__(self, bitmap: np.ndarray) -> None:
        if bitmap.ndim != 3 or bitmap.shape[2] != 4 or bitmap.dtype != np.uint8:
            raise ValueError("bitmap must be a uint8 array of shape (H, W, 4)")
        self._bitmap = bitmap
        self._state = _ContextState()
        self._stack: list[_ContextState] = []
        self._path: list[tuple[int, int, int, int]] = []

    @property
    def bitmap(self) -> np.ndarray:
        return self._bitmap

    @property
    def fill_style(self) -> str:
        return self._state.fill_style

    @fill_style.setter
    def fill_style(self, value: str) -> None:
        parse_color(value)
        self._state = replace(self._state, fill_style=value)

    @property
    def stroke_style(self) -> str:
        return self._state.stroke_style

    @stroke_style.setter
    def stroke_style(self, value: str) -> None:
        parse_color(value)
        self._state = replace(self._state, stroke_style=value)

    @property
    def font(self) -> str:
        return self._state.font

    @font.setter
    def font(self, value: str) -> None:
        parse_font(value)
        self._state = replace(self._state, font=value)

    @property
    def text_align(self) -> TextAlign:
        return self._state.text_align

    @text_align.setter
    def text_align(self, value: TextAlign) -> None:
        if value not in ("left", "center", "right"):
            raise ValueError(f"unsupported text_align: {value!r}")
        self._state = replace(self._state, text_align=value)

    @property
    def transform_scale(self) -> tuple[float, float]:
        return (self._state.scale_x, self._state.scale_y)

    @property
    def save_depth(self) -> int:
        return len(self._stack)

    def save(self) -> None:
        self._stack.append(self._state)

    def restore(self) -> None:
        if self._stack:
            self._state = self._stack.pop()

    def scale(self, sx: float, sy: float) -> None:
        self._state = replace(self._state, scale_x=self._state.scale_x * sx, scale_y=self._state.scale_y * sy)

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        x0, y0, x1, y1 = self._device_rect(x, y, width, height)
        if x1 <= x0 or y1 <= y0:
            return
        fill_mask(self._bitmap, np.ones((y1 - y0, x1 - x0), dtype=np.bool_), parse_color(self.fill_style), x=x0, y=y0)

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        x0, y0, x1, y1 = self._device_rect(x, y, width, height)
        clear_rect(self._bitmap, x0, y0, x1, y1)

    def begin_path(self) -> None:
        self._path = []

    def rect(self, x: float, y: float, width: float, height: float) -> None:
        self._path.append(self._device_rect(x, y, width, height))

    def fill(self) -> None:
        h, w = self._bitmap.shape[:2]
        if h == 0 or w == 0 or not self._path:
            return
        # Union of all subpaths, blended once so overlapping rects do not double up.
        coverage = np.zeros((h, w), dtype=np.bool_)
        for x0, y0, x1, y1 in self._path:
            xa, xb = max(0, x0), min(w, x1)
            ya, yb = max(0, y0), min(h, y1)
            if xa < xb and ya < yb:
                coverage[ya:yb, xa:xb] = True
        fill_mask(self._bitmap, coverage, parse_color(self.fill_style))

    def fill_text(self, text: str, x: float, y: float) -> None:
        if not text:
            return
        font = parse_font(self.font)
        sx, sy = self.transform_scale
        size_px = font.size_px * sy
        left = x * sx
        if self.text_align != "left":
            advance = text_advance(text, font_family=font.family, font_size_px=size_px)
            left -= advance / 2.0 if self.text_align == "center" else advance
        draw_text(
            self._bitmap,
            left,
            y * sy,
            text,
            parse_color(self.fill_style),
            font_family=font.family,
            font_size_px=size_px,
            bold=font.bold,
        )

    def measure_text(self, text: str) -> float:
        font = parse_font(self.font)
        return text_advance(text, font_family=font.family, font_size_px=font.size_px)

    def _device_rect(self, x: float, y: float, width: float, height: float) -> tuple[int, int, int, int]:
        sx, sy = self.transform_scale
        x0 = int(math.floor(x * sx + 0.5))
        y0 = int(math.floor(y * sy + 0.5))
        x1 = int(math.floor((x + width) * sx + 0.5))
        y1 = int(math.floor((y + height) * sy + 0.5))
        return (min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1))


@contextmanager
def scaled(ctx: RasterContext, pixel_ratio: float) -> Iterator[RasterContext]:
    """Draw in logical units: scales by `pixel_ratio` and restores on exit."""

    ctx.save()
    ctx.scale(pixel_ratio, pixel_ratio)
    try:
        yield ctx
    finally:
        ctx.restore()
