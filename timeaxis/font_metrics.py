from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
import math
from typing import Protocol

from timeaxis.raster.canvas import round_half_up


BORDER_SIZE = 1
TICK_LENGTH = 3
TEXT_WIDTH_CACHE_SIZE = 50


def make_font(size: float, family: str, style: str | None = None) -> str:
    prefix = f"{style} " if style else ""
    return f"{prefix}{format_font_size(size)}px {family}"


def format_font_size(size: float) -> str:
    # shortest exact form: 12 not 12.0, 12.0000001 not 12
    value = float(size)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class _Measurer(Protocol):
    def measure_text(self, text: str) -> float:
        ...


class TextWidthCache:
    """Bounded text -> width memo; only valid for the font it was filled with."""

    def __init__(self, max_size: int = TEXT_WIDTH_CACHE_SIZE) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be > 0")
        self._max_size = max_size
        self._cache: OrderedDict[str, float] = OrderedDict()

    def __len__(self) -> int:
        return len(self._cache)

    def measure(self, ctx: _Measurer, text: str) -> float:
        cached = self._cache.get(text)
        if cached is not None:
            self._cache.move_to_end(text)
            return cached
        width = float(ctx.measure_text(text))
        self._cache[text] = width
        if len(self._cache) > self._max_size:
            self._cache.popitem(last=False)
        return width

    def reset(self) -> None:
        self._cache.clear()


@dataclass(frozen=True)
class RendererGeometry:
    font_size: float = math.nan
    font: str = ""
    padding_top: float = math.nan
    padding_bottom: float = math.nan
    padding_horizontal: float = math.nan
    baseline_offset: float = math.nan
    border_size: int = BORDER_SIZE
    tick_length: int = TICK_LENGTH
    width_cache: TextWidthCache = field(default_factory=TextWidthCache, compare=False, repr=False)


class FontMetricsCache:
    """Single-slot memo of font-derived axis geometry.

    The slot is keyed on the font descriptor string. A new descriptor rebuilds
    the whole geometry in one step and resets the shared text width cache, so
    callers never observe padding from one font next to the size of another.
    """

    def __init__(self) -> None:
        self._width_cache = TextWidthCache()
        self._last_key: str | None = None
        self._value = RendererGeometry(width_cache=self._width_cache)

    @property
    def current(self) -> RendererGeometry:
        return self._value

    def get_geometry(self, font_size: float, font_family: str) -> RendererGeometry:
        key = make_font(font_size, font_family)
        if key == self._last_key:
            return self._value
        padding_top = math.ceil(font_size / 2.5)
        self._width_cache.reset()
        self._value = RendererGeometry(
            font_size=font_size,
            font=key,
            padding_top=padding_top,
            padding_bottom=padding_top,
            padding_horizontal=math.ceil(font_size / 2),
            baseline_offset=round_half_up(font_size / 5),
            width_cache=self._width_cache,
        )
        self._last_key = key
        return self._value


def optimal_height(geometry: RendererGeometry) -> int:
    return math.ceil(
        geometry.border_size
        + geometry.tick_length
        + geometry.font_size
        + geometry.padding_top
        + geometry.padding_bottom
    )


def label_baseline(geometry: RendererGeometry) -> float:
    return (
        geometry.border_size
        + geometry.tick_length
        + geometry.padding_top
        + geometry.font_size
        - geometry.baseline_offset
    )
