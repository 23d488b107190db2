from __future__ import annotations

import logging
import math
from typing import Callable, Literal, Protocol

from timeaxis.font_metrics import RendererGeometry
from timeaxis.model import InvalidationLevel
from timeaxis.options import ChartOptions, PriceScaleOptions
from timeaxis.raster.context import scaled
from timeaxis.surface import BoundSurface, Size


LOGGER = logging.getLogger(__name__)

Side = Literal["left", "right"]
BorderVisibleGetter = Callable[[], bool]


class CornerStub(Protocol):
    def set_size(self, size: Size) -> None:
        ...

    def paint(self, level: InvalidationLevel) -> None:
        ...

    def set_device_pixel_ratio(self, device_pixel_ratio: float) -> None:
        ...

    def destroy(self) -> None:
        ...


StubFactory = Callable[[Side, BorderVisibleGetter], CornerStub]


class PriceAxisStub:
    """Empty corner cell under a price axis, matching its width."""

    def __init__(
        self,
        side: Side,
        options: Callable[[], ChartOptions],
        geometry: Callable[[], RendererGeometry],
        border_visible: BorderVisibleGetter,
        *,
        device_pixel_ratio: float = 1.0,
    ) -> None:
        self._side = side
        self._options = options
        self._geometry = geometry
        self._border_visible = border_visible
        self._size = Size(0, 0)
        self._surface = BoundSurface(Size(16, 16), device_pixel_ratio)
        self._invalidated = True

    @property
    def side(self) -> Side:
        return self._side

    @property
    def size(self) -> Size:
        return self._size

    @property
    def surface(self) -> BoundSurface:
        return self._surface

    def border_visible(self) -> bool:
        return self._border_visible()

    def set_size(self, size: Size) -> None:
        if size != self._size:
            self._size = size
            self._surface.resize(size)
            self._invalidated = True

    def set_device_pixel_ratio(self, device_pixel_ratio: float) -> None:
        if device_pixel_ratio != self._surface.device_pixel_ratio:
            self._surface.set_device_pixel_ratio(device_pixel_ratio)
            self._invalidated = True

    def paint(self, level: InvalidationLevel) -> None:
        if level < InvalidationLevel.FULL and not self._invalidated:
            return
        if not self._size.has_area:
            return
        self._invalidated = False
        ctx = self._surface.context()
        pixel_ratio = self._surface.pixel_ratio
        options = self._options()

        with scaled(ctx, pixel_ratio):
            ctx.clear_rect(0, 0, self._size.width, self._size.height)
            ctx.fill_style = options.layout.background_color
            ctx.fill_rect(0, 0, self._size.width, self._size.height)

        if self._border_visible():
            ctx.save()
            ctx.fill_style = options.time_scale.border_color
            border_size = max(1, math.floor(self._geometry().border_size * pixel_ratio))
            left = self._surface.bitmap_size.width - border_size if self._side == "left" else 0
            ctx.fill_rect(left, 0, border_size, border_size)
            ctx.restore()

    def destroy(self) -> None:
        self._surface.dispose()


class CornerStubSync:
    """Keeps one corner stub per visible price scale.

    `sync()` reconciles against the latest price scale options: a side that
    becomes hidden has its stub destroyed, a side that becomes visible gets a
    fresh stub. Stubs are never toggled in place.
    """

    def __init__(self, stub_factory: StubFactory, time_border_visible: BorderVisibleGetter) -> None:
        self._stub_factory = stub_factory
        self._time_border_visible = time_border_visible
        self._scales: dict[Side, PriceScaleOptions] = {
            "left": PriceScaleOptions(),
            "right": PriceScaleOptions(),
        }
        self._stubs: dict[Side, CornerStub | None] = {"left": None, "right": None}

    @property
    def left(self) -> CornerStub | None:
        return self._stubs["left"]

    @property
    def right(self) -> CornerStub | None:
        return self._stubs["right"]

    def sync(self, left: PriceScaleOptions, right: PriceScaleOptions) -> None:
        self._scales = {"left": left, "right": right}
        for side in ("left", "right"):
            stub = self._stubs[side]
            if not self._scales[side].visible and stub is not None:
                self._stubs[side] = None
                stub.destroy()
                LOGGER.debug("destroyed %s corner stub", side)
        for side in ("left", "right"):
            if self._scales[side].visible and self._stubs[side] is None:
                self._stubs[side] = self._stub_factory(side, self._border_visible_getter(side))
                LOGGER.debug("created %s corner stub", side)

    def set_size(self, height: float, left_width: float, right_width: float) -> None:
        left = self._stubs["left"]
        if left is not None:
            left.set_size(Size(left_width, height))
        right = self._stubs["right"]
        if right is not None:
            right.set_size(Size(right_width, height))

    def set_device_pixel_ratio(self, device_pixel_ratio: float) -> None:
        for stub in self._stubs.values():
            if stub is not None:
                stub.set_device_pixel_ratio(device_pixel_ratio)

    def paint(self, level: InvalidationLevel) -> None:
        for stub in self._stubs.values():
            if stub is not None:
                stub.paint(level)

    def destroy(self) -> None:
        for side, stub in self._stubs.items():
            if stub is not None:
                self._stubs[side] = None
                stub.destroy()

    def _border_visible_getter(self, side: Side) -> BorderVisibleGetter:
        def border_visible() -> bool:
            return self._scales[side].border_visible and self._time_border_visible()

        return border_visible
