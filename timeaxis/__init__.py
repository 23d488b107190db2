from timeaxis.compositor import DualSurfaceCompositor, SurfaceTarget
from timeaxis.drag import DragController
from timeaxis.errors import SurfaceDisposedError, TimeAxisError
from timeaxis.font_metrics import FontMetricsCache, RendererGeometry, TextWidthCache, make_font, optimal_height
from timeaxis.model import ChartModel, InvalidationLevel, TimeMark, TimeScale
from timeaxis.options import ChartOptions, DEFAULT_OPTIONS, resolve_chart_options
from timeaxis.overlay import OverlayLabelRenderer, TimeAxisLabel, TimeAxisLabelRenderer, TimeAxisLabelView
from timeaxis.pointer import AxisPointerEvent, PointerEventRouter, parse_pointer_event
from timeaxis.stubs import CornerStubSync, PriceAxisStub
from timeaxis.surface import BoundSurface, Size, equal_sizes
from timeaxis.tick_marks import TickMarkRenderer, TickMarkStyle, max_tick_weight
from timeaxis.widget import TimeAxisWidget

__all__ = [
    "AxisPointerEvent",
    "BoundSurface",
    "ChartModel",
    "ChartOptions",
    "CornerStubSync",
    "DEFAULT_OPTIONS",
    "DragController",
    "DualSurfaceCompositor",
    "FontMetricsCache",
    "InvalidationLevel",
    "OverlayLabelRenderer",
    "PointerEventRouter",
    "PriceAxisStub",
    "RendererGeometry",
    "Size",
    "SurfaceDisposedError",
    "SurfaceTarget",
    "TextWidthCache",
    "TickMarkRenderer",
    "TickMarkStyle",
    "TimeAxisError",
    "TimeAxisLabel",
    "TimeAxisLabelRenderer",
    "TimeAxisLabelView",
    "TimeAxisWidget",
    "TimeMark",
    "TimeScale",
    "equal_sizes",
    "make_font",
    "max_tick_weight",
    "optimal_height",
    "parse_pointer_event",
    "resolve_chart_options",
]
