from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable

import numpy as np

from timeaxis.errors import SurfaceDisposedError
from timeaxis.raster.canvas import new_bitmap, round_half_up
from timeaxis.raster.context import RasterContext


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Size:
    width: float
    height: float

    @property
    def has_area(self) -> bool:
        return self.width > 0 and self.height > 0


def equal_sizes(a: Size, b: Size) -> bool:
    return a.width == b.width and a.height == b.height


BitmapSizeChangedCallback = Callable[[Size, Size], None]


class BoundSurface:
    """An owned RGBA bitmap bound to a logical (layout) size and a device pixel ratio.

    The bitmap is `round_half_up(logical * device_pixel_ratio)` physical pixels per
    side. Listeners are told whenever the physical size changes, whether the
    cause is a logical resize or a pixel ratio change on its own.
    """

    def __init__(self, logical_size: Size, device_pixel_ratio: float = 1.0) -> None:
        if device_pixel_ratio <= 0:
            raise ValueError("device_pixel_ratio must be > 0")
        self._logical_size = logical_size
        self._device_pixel_ratio = float(device_pixel_ratio)
        self._listeners: list[BitmapSizeChangedCallback] = []
        self._disposed = False
        self._allocations = 0
        self._bitmap_size = self._suggested_bitmap_size()
        self._bitmap = self._allocate(self._bitmap_size)

    @property
    def logical_size(self) -> Size:
        return self._logical_size

    @property
    def bitmap_size(self) -> Size:
        return self._bitmap_size

    @property
    def device_pixel_ratio(self) -> float:
        return self._device_pixel_ratio

    @property
    def pixel_ratio(self) -> float:
        """Physical bitmap width over logical width, as currently allocated."""
        if self._logical_size.width <= 0:
            return self._device_pixel_ratio
        return self._bitmap_size.width / self._logical_size.width

    @property
    def allocations(self) -> int:
        return self._allocations

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def bitmap(self) -> np.ndarray:
        self._ensure_alive()
        return self._bitmap

    def context(self) -> RasterContext:
        self._ensure_alive()
        return RasterContext(self._bitmap)

    def resize(self, logical_size: Size) -> None:
        self._ensure_alive()
        if equal_sizes(self._logical_size, logical_size):
            return
        self._logical_size = logical_size
        self._apply_bitmap_size()

    def set_device_pixel_ratio(self, device_pixel_ratio: float) -> None:
        self._ensure_alive()
        if device_pixel_ratio <= 0:
            raise ValueError("device_pixel_ratio must be > 0")
        if device_pixel_ratio == self._device_pixel_ratio:
            return
        self._device_pixel_ratio = float(device_pixel_ratio)
        self._apply_bitmap_size()

    def subscribe_bitmap_size_changed(self, callback: BitmapSizeChangedCallback) -> None:
        self._listeners.append(callback)

    def unsubscribe_bitmap_size_changed(self, callback: BitmapSizeChangedCallback) -> None:
        self._listeners = [listener for listener in self._listeners if listener != callback]

    def dispose(self) -> None:
        if self._disposed:
            raise SurfaceDisposedError("surface already disposed")
        self._disposed = True
        self._listeners.clear()
        self._bitmap = new_bitmap(0, 0)

    def _apply_bitmap_size(self) -> None:
        new_size = self._suggested_bitmap_size()
        if equal_sizes(new_size, self._bitmap_size):
            return
        old_size = self._bitmap_size
        self._bitmap_size = new_size
        self._bitmap = self._allocate(new_size)
        for listener in list(self._listeners):
            listener(old_size, new_size)

    def _suggested_bitmap_size(self) -> Size:
        return Size(
            width=max(0, round_half_up(self._logical_size.width * self._device_pixel_ratio)),
            height=max(0, round_half_up(self._logical_size.height * self._device_pixel_ratio)),
        )

    def _allocate(self, bitmap_size: Size) -> np.ndarray:
        self._allocations += 1
        LOGGER.debug("allocating %dx%d surface bitmap", bitmap_size.width, bitmap_size.height)
        return new_bitmap(int(bitmap_size.width), int(bitmap_size.height))

    def _ensure_alive(self) -> None:
        if self._disposed:
            raise SurfaceDisposedError("surface used after dispose")
