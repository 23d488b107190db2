from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass, replace
import math
from typing import Any, Mapping

from timeaxis.raster.canvas import is_hex_color


MAX_FONT_SIZE = 1000.0


@dataclass(frozen=True)
class LayoutOptions:
    background_color: str = "#FFFFFF"
    text_color: str = "#191919"
    font_size: float = 12.0
    font_family: str = "-apple-system, BlinkMacSystemFont, 'Trebuchet MS', Roboto, Ubuntu, sans-serif"


@dataclass(frozen=True)
class TimeScaleOptions:
    border_visible: bool = True
    border_color: str = "#2B2B43"


@dataclass(frozen=True)
class AxisPressedMouseMoveOptions:
    time: bool = True
    price: bool = True


@dataclass(frozen=True)
class HandleScaleOptions:
    axis_pressed_mouse_move: AxisPressedMouseMoveOptions = field(default_factory=AxisPressedMouseMoveOptions)
    axis_double_click_reset: bool = True


@dataclass(frozen=True)
class PriceScaleOptions:
    visible: bool = False
    border_visible: bool = True


@dataclass(frozen=True)
class ChartOptions:
    """Chart-wide options the time axis reads; treat instances as immutable snapshots."""

    layout: LayoutOptions = field(default_factory=LayoutOptions)
    time_scale: TimeScaleOptions = field(default_factory=TimeScaleOptions)
    handle_scale: HandleScaleOptions = field(default_factory=HandleScaleOptions)
    left_price_scale: PriceScaleOptions = field(default_factory=PriceScaleOptions)
    right_price_scale: PriceScaleOptions = field(default_factory=lambda: PriceScaleOptions(visible=True))


DEFAULT_OPTIONS = ChartOptions()

_COLOR_KEYS = frozenset({"background_color", "text_color", "border_color"})


def resolve_chart_options(
    overrides: Mapping[str, Any] | None = None,
    *,
    base: ChartOptions = DEFAULT_OPTIONS,
) -> ChartOptions:
    """Merge nested option overrides onto `base` and validate the result.

    Keys mirror the dataclass field names, e.g.
    `{"layout": {"font_size": 14}, "left_price_scale": {"visible": True}}`.
    """

    merged = _merge(base, overrides or {}, path="")
    _validate(merged)
    return merged


def _merge(current: Any, overrides: Mapping[str, Any], *, path: str) -> Any:
    known = {f.name: f for f in fields(current)}
    changes: dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in known:
            raise ValueError(f"Unknown option: {path}{key}")
        existing = getattr(current, key)
        if is_dataclass(existing):
            if not isinstance(value, Mapping):
                raise ValueError(f"Option `{path}{key}` must be a mapping")
            changes[key] = _merge(existing, value, path=f"{path}{key}.")
        else:
            changes[key] = value
    return replace(current, **changes)


def _validate(options: ChartOptions) -> None:
    _validate_section(options, path="")
    layout = options.layout
    if not isinstance(layout.font_family, str) or not layout.font_family.strip():
        raise ValueError("Option `layout.font_family` must be a non-empty string")
    font_size = layout.font_size
    if isinstance(font_size, bool) or not isinstance(font_size, (int, float)):
        raise ValueError("Option `layout.font_size` must be a positive number")
    if not math.isfinite(font_size) or font_size <= 0:
        raise ValueError("Option `layout.font_size` must be a positive number")
    if font_size > MAX_FONT_SIZE:
        raise ValueError(f"Option `layout.font_size` must be at most {MAX_FONT_SIZE:g}")


def _validate_section(section: Any, *, path: str) -> None:
    for f in fields(section):
        value = getattr(section, f.name)
        name = f"{path}{f.name}"
        if is_dataclass(value):
            _validate_section(value, path=f"{name}.")
        elif f.name in _COLOR_KEYS:
            if not is_hex_color(value):
                raise ValueError(f"Option `{name}` must be a hex color (#RRGGBB or #RRGGBBAA)")
        elif f.type in ("bool", bool) and not isinstance(value, bool):
            raise ValueError(f"Option `{name}` must be a boolean")
