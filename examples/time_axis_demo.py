from __future__ import annotations

import argparse
from pathlib import Path

from PIL import Image

from timeaxis import (
    DEFAULT_OPTIONS,
    InvalidationLevel,
    Size,
    TimeAxisLabel,
    TimeAxisLabelView,
    TimeAxisWidget,
    TimeMark,
)
from timeaxis.options import TimeScaleOptions


class _HourlyTimeScale:
    def __init__(self, width: float) -> None:
        self._width = width

    def is_empty(self) -> bool:
        return False

    def marks(self) -> list[TimeMark]:
        out: list[TimeMark] = []
        for idx, hour in enumerate(range(9, 18)):
            weight = 50 if hour == 12 else 30
            out.append(TimeMark(coord=40 + idx * (self._width - 80) / 8, weight=weight, label=f"{hour:02d}:00"))
        return out

    def options(self) -> TimeScaleOptions:
        return DEFAULT_OPTIONS.time_scale


class _Crosshair:
    def __init__(self, view: TimeAxisLabelView) -> None:
        self._view = view

    def time_axis_views(self) -> list[TimeAxisLabelView]:
        return [self._view]


class DemoChartModel:
    def __init__(self, width: float) -> None:
        self._time_scale = _HourlyTimeScale(width)
        self.crosshair_view = TimeAxisLabelView()
        self._crosshair = _Crosshair(self.crosshair_view)

    def time_scale(self) -> _HourlyTimeScale:
        return self._time_scale

    def start_scale_time(self, x: float) -> None:
        print(f"start_scale_time({x})")

    def scale_time_to(self, x: float) -> None:
        print(f"scale_time_to({x})")

    def end_scale_time(self) -> None:
        print("end_scale_time()")

    def reset_time_scale(self) -> None:
        print("reset_time_scale()")

    def light_update(self) -> None:
        return None

    def crosshair_source(self) -> _Crosshair:
        return self._crosshair


def main() -> None:
    parser = argparse.ArgumentParser(prog="time_axis_demo")
    parser.add_argument("--out", type=Path, default=Path("time_axis.png"))
    parser.add_argument("--width", type=int, default=720)
    parser.add_argument("--pixel-ratio", type=float, default=2.0)
    args = parser.parse_args()

    model = DemoChartModel(args.width)
    widget = TimeAxisWidget(model, device_pixel_ratio=args.pixel_ratio)
    widget.set_sizes(Size(args.width, widget.optimal_height()), 0, 56)
    widget.paint(InvalidationLevel.FULL)

    model.crosshair_view.update(
        TimeAxisLabel(
            text="13:27",
            coordinate=args.width * 0.55,
            axis_width=args.width,
            background_color="#4C525E",
            text_color="#FFFFFF",
        )
    )
    widget.paint(InvalidationLevel.CURSOR)

    Image.fromarray(widget.compositor.composite()).save(args.out)
    widget.destroy()
    print(f"wrote {args.out}")


if __name__ == "__main__":
    main()
