from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable

import numpy as np

from timeaxis.raster.canvas import blit
from timeaxis.raster.context import RasterContext
from timeaxis.surface import BoundSurface, Size, equal_sizes


LOGGER = logging.getLogger(__name__)

INITIAL_SURFACE_SIZE = Size(16, 16)


@dataclass(frozen=True)
class SurfaceTarget:
    """A drawing context paired with the pixel ratio it must be painted at."""

    context: RasterContext
    pixel_ratio: float
    bitmap_size: Size


class DualSurfaceCompositor:
    """Base + overlay surfaces that always share one logical size.

    The base surface holds the expensive full repaint (background, border,
    tick marks); the overlay holds per-frame content such as the crosshair
    label and is cleared on every paint.
    """

    def __init__(
        self,
        on_bitmap_size_changed: Callable[[], None],
        *,
        device_pixel_ratio: float = 1.0,
    ) -> None:
        self._on_bitmap_size_changed = on_bitmap_size_changed
        self._size = Size(0, 0)
        self._base = BoundSurface(INITIAL_SURFACE_SIZE, device_pixel_ratio)
        self._overlay = BoundSurface(INITIAL_SURFACE_SIZE, device_pixel_ratio)
        self._base.subscribe_bitmap_size_changed(self._base_bitmap_size_changed)
        self._overlay.subscribe_bitmap_size_changed(self._overlay_bitmap_size_changed)
        self._disposed = False

    @property
    def size(self) -> Size:
        return self._size

    @property
    def has_area(self) -> bool:
        return self._size.has_area

    @property
    def base(self) -> BoundSurface:
        return self._base

    @property
    def overlay(self) -> BoundSurface:
        return self._overlay

    def resize(self, size: Size) -> bool:
        """Resize both surfaces in lockstep; returns False when the size is unchanged."""
        if equal_sizes(self._size, size):
            return False
        self._size = size
        self._base.resize(size)
        self._overlay.resize(size)
        return True

    def set_device_pixel_ratio(self, device_pixel_ratio: float) -> None:
        self._base.set_device_pixel_ratio(device_pixel_ratio)
        self._overlay.set_device_pixel_ratio(device_pixel_ratio)

    def base_target(self) -> SurfaceTarget:
        return _target(self._base)

    def overlay_target(self) -> SurfaceTarget:
        return _target(self._overlay)

    def image(self) -> np.ndarray:
        return self._base.bitmap.copy()

    def composite(self) -> np.ndarray:
        frame = self._base.bitmap.copy()
        overlay = self._overlay.bitmap
        if overlay.shape == frame.shape:
            blit(frame, overlay)
        else:
            LOGGER.warning(
                "overlay bitmap %s does not match base bitmap %s; compositing base only",
                overlay.shape[:2],
                frame.shape[:2],
            )
        return frame

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._overlay.unsubscribe_bitmap_size_changed(self._overlay_bitmap_size_changed)
        self._overlay.dispose()
        self._base.unsubscribe_bitmap_size_changed(self._base_bitmap_size_changed)
        self._base.dispose()

    def _base_bitmap_size_changed(self, old: Size, new: Size) -> None:
        self._on_bitmap_size_changed()

    def _overlay_bitmap_size_changed(self, old: Size, new: Size) -> None:
        self._on_bitmap_size_changed()


def _target(surface: BoundSurface) -> SurfaceTarget:
    # Recomputed per paint: the ratio can change between resizes.
    return SurfaceTarget(
        context=surface.context(),
        pixel_ratio=surface.pixel_ratio,
        bitmap_size=surface.bitmap_size,
    )
