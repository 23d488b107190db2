from __future__ import annotations

import logging

import numpy as np

from timeaxis.compile import WriteBatch, compile_full_rewrite_batch, compile_replace_patch_batch
from timeaxis.compositor import DualSurfaceCompositor
from timeaxis.drag import CursorType, DragController
from timeaxis.font_metrics import FontMetricsCache, RendererGeometry, make_font, optimal_height
from timeaxis.model import ChartModel, InvalidationLevel
from timeaxis.options import ChartOptions, DEFAULT_OPTIONS
from timeaxis.overlay import OverlayLabelRenderer
from timeaxis.pointer import AxisPointerEvent, PointerEventRouter
from timeaxis.stubs import BorderVisibleGetter, CornerStub, CornerStubSync, PriceAxisStub, Side, StubFactory
from timeaxis.surface import Size
from timeaxis.tick_marks import TickMarkRenderer, TickMarkStyle, draw_background, draw_border


LOGGER = logging.getLogger(__name__)


class TimeAxisWidget:
    """Horizontal time axis of one chart: tick marks, crosshair label and axis drag.

    Painting is split over two surfaces. `InvalidationLevel.CURSOR` repaints
    only the overlay; any stronger level also repaints the base surface and
    the corner stubs. Pixel-ratio-only changes on either surface ask the model
    for a light update instead of repainting here.
    """

    def __init__(
        self,
        model: ChartModel,
        options: ChartOptions = DEFAULT_OPTIONS,
        *,
        device_pixel_ratio: float = 1.0,
        stub_factory: StubFactory | None = None,
    ) -> None:
        self._model = model
        self._options = options
        self._device_pixel_ratio = device_pixel_ratio
        self._destroyed = False
        self._font_metrics = FontMetricsCache()
        self._tick_renderer = TickMarkRenderer()
        self._overlay_renderer = OverlayLabelRenderer()
        self._compositor = DualSurfaceCompositor(
            self._on_bitmap_size_changed,
            device_pixel_ratio=device_pixel_ratio,
        )
        self._stubs = CornerStubSync(
            stub_factory or self._create_stub,
            lambda: self._model.time_scale().options().border_visible,
        )
        self._stubs.sync(options.left_price_scale, options.right_price_scale)
        self._drag = DragController(model, lambda: self._options.handle_scale)
        self._pointer = PointerEventRouter(self)

    @property
    def options(self) -> ChartOptions:
        return self._options

    @property
    def cursor(self) -> CursorType:
        return self._drag.cursor

    @property
    def compositor(self) -> DualSurfaceCompositor:
        return self._compositor

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        self._pointer.destroy()
        self._drag.cancel()
        self._stubs.destroy()
        self._compositor.dispose()
        LOGGER.debug("time axis destroyed")

    def left_stub(self) -> CornerStub | None:
        return self._stubs.left

    def right_stub(self) -> CornerStub | None:
        return self._stubs.right

    def apply_options(self, options: ChartOptions) -> None:
        """Take a new options snapshot; price scale visibility changes rebuild the stubs."""
        if self._destroyed:
            LOGGER.warning("apply_options called on a destroyed time axis")
            return
        self._options = options
        self._stubs.sync(options.left_price_scale, options.right_price_scale)

    def set_device_pixel_ratio(self, device_pixel_ratio: float) -> None:
        if self._destroyed:
            return
        self._device_pixel_ratio = device_pixel_ratio
        self._compositor.set_device_pixel_ratio(device_pixel_ratio)
        self._stubs.set_device_pixel_ratio(device_pixel_ratio)

    def handle_pointer_event(self, event: AxisPointerEvent) -> bool:
        return self._pointer.dispatch(event)

    def mouse_down_event(self, event: AxisPointerEvent) -> None:
        self._drag.pointer_down(event.local_x)

    def mouse_down_outside_event(self) -> None:
        self._drag.pointer_down_outside()

    def pressed_mouse_move_event(self, event: AxisPointerEvent) -> None:
        self._drag.pointer_move(event.local_x)

    def mouse_up_event(self, event: AxisPointerEvent) -> None:
        self._drag.pointer_up()

    def mouse_double_click_event(self, event: AxisPointerEvent) -> None:
        self._drag.double_click()

    def mouse_enter_event(self, event: AxisPointerEvent) -> None:
        self._drag.pointer_enter()

    def mouse_leave_event(self, event: AxisPointerEvent) -> None:
        self._drag.pointer_leave()

    def get_size(self) -> Size:
        return self._compositor.size

    def set_sizes(self, time_axis_size: Size, left_stub_width: float, right_stub_width: float) -> None:
        if self._destroyed:
            LOGGER.warning("set_sizes called on a destroyed time axis")
            return
        self._compositor.resize(time_axis_size)
        self._stubs.set_size(time_axis_size.height, left_stub_width, right_stub_width)

    def optimal_height(self) -> int:
        return optimal_height(self._geometry())

    def update(self) -> None:
        # marks() regenerates the marks on the time scale
        self._model.time_scale().marks()

    def image(self) -> np.ndarray:
        return self._compositor.image()

    def compile_write_batch(self, origin: tuple[int, int] | None = None) -> WriteBatch:
        """Package the composited frame for the host.

        Without an `origin` the host target is the axis itself and gets a full
        rewrite; with one, the axis is patched into a chart frame at that point.
        """
        frame = self._compositor.composite()
        if origin is None:
            return compile_full_rewrite_batch(frame)
        x, y = origin
        return compile_replace_patch_batch(frame, x=x, y=y)

    def paint(self, level: InvalidationLevel) -> None:
        if level == InvalidationLevel.NONE or self._destroyed:
            return

        geometry = self._geometry()
        size = self._compositor.size

        if level != InvalidationLevel.CURSOR:
            if size.has_area:
                self._paint_base(geometry, size)
            self._stubs.paint(level)

        if not size.has_area:
            return

        target = self._compositor.overlay_target()
        self._overlay_renderer.paint(
            target.context,
            [self._model.crosshair_source()],
            geometry,
            target.pixel_ratio,
            size,
        )

    def _paint_base(self, geometry: RendererGeometry, size: Size) -> None:
        target = self._compositor.base_target()
        ctx = target.context
        pixel_ratio = target.pixel_ratio
        options = self._options

        draw_background(ctx, size, pixel_ratio, options.layout.background_color)
        if options.time_scale.border_visible:
            draw_border(ctx, size, pixel_ratio, geometry, options.time_scale.border_color)

        time_scale = self._model.time_scale()
        style = TickMarkStyle(
            line_color=options.time_scale.border_color,
            text_color=options.layout.text_color,
            font=make_font(options.layout.font_size, options.layout.font_family),
            bold_font=make_font(options.layout.font_size, options.layout.font_family, "bold"),
            border_visible=time_scale.options().border_visible,
        )
        self._tick_renderer.paint(ctx, time_scale.marks(), geometry, pixel_ratio, style)

    def _geometry(self) -> RendererGeometry:
        layout = self._options.layout
        return self._font_metrics.get_geometry(layout.font_size, layout.font_family)

    def _create_stub(self, side: Side, border_visible: BorderVisibleGetter) -> CornerStub:
        return PriceAxisStub(
            side,
            lambda: self._options,
            self._geometry,
            border_visible,
            device_pixel_ratio=self._device_pixel_ratio,
        )

    def _on_bitmap_size_changed(self) -> None:
        if self._destroyed:
            return
        self._model.light_update()
