from __future__ import annotations

import unittest

from timeaxis.font_metrics import FontMetricsCache
from timeaxis.model import TimeMark
from timeaxis.raster.canvas import new_bitmap
from timeaxis.raster.context import RasterContext
from timeaxis.surface import Size
from timeaxis.tick_marks import TickMarkRenderer, TickMarkStyle, draw_border, max_tick_weight


_STYLE = TickMarkStyle(
    line_color="#2B2B43",
    text_color="#191919",
    font="12px Arial",
    bold_font="bold 12px Arial",
    border_visible=True,
)


class _RecordingContext:
    """Records the drawing calls a renderer makes, with the font active for text."""

    def __init__(self) -> None:
        self.ops: list[tuple] = []
        self.fill_style = "#000000"
        self.stroke_style = "#000000"
        self.text_align = "left"
        self._font = "10px Arial"
        self._depth = 0

    @property
    def font(self) -> str:
        return self._font

    @font.setter
    def font(self, value: str) -> None:
        self._font = value
        self.ops.append(("font", value))

    @property
    def depth(self) -> int:
        return self._depth

    def save(self) -> None:
        self._depth += 1
        self.ops.append(("save",))

    def restore(self) -> None:
        self._depth -= 1
        self.ops.append(("restore",))

    def scale(self, sx: float, sy: float) -> None:
        self.ops.append(("scale", sx, sy))

    def begin_path(self) -> None:
        self.ops.append(("begin_path",))

    def rect(self, x: float, y: float, width: float, height: float) -> None:
        self.ops.append(("rect", x, y, width, height))

    def fill(self) -> None:
        self.ops.append(("fill", self.fill_style))

    def fill_text(self, text: str, x: float, y: float) -> None:
        self.ops.append(("fill_text", text, x, y, self._font))

    def named(self, name: str) -> list[tuple]:
        return [op for op in self.ops if op[0] == name]


def _geometry():
    return FontMetricsCache().get_geometry(12, "Arial")


def _paint(marks, *, pixel_ratio: float = 1.0, style: TickMarkStyle = _STYLE) -> _RecordingContext:
    ctx = _RecordingContext()
    TickMarkRenderer().paint(ctx, marks, _geometry(), pixel_ratio, style)
    return ctx


def _text_fonts(ctx: _RecordingContext) -> dict[str, str]:
    return {op[1]: op[4] for op in ctx.named("fill_text")}


class MaxTickWeightTests(unittest.TestCase):
    def test_weights_inside_demotion_band_clamp_to_thirty(self) -> None:
        for weight in (31, 35, 39):
            marks = [TimeMark(0, 20, "a"), TimeMark(10, weight, "b")]
            self.assertEqual(max_tick_weight(marks), 30)

    def test_band_bounds_are_exclusive(self) -> None:
        self.assertEqual(max_tick_weight([TimeMark(0, 30, "a")]), 30)
        self.assertEqual(max_tick_weight([TimeMark(0, 40, "a")]), 40)
        self.assertEqual(max_tick_weight([TimeMark(0, 45, "a"), TimeMark(5, 20, "b")]), 45)


class TickMarkRendererTests(unittest.TestCase):
    def test_highest_weight_is_bold_outside_demotion_band(self) -> None:
        ctx = _paint([TimeMark(10, 20, "10:00"), TimeMark(50, 45, "11:00")])
        fonts = _text_fonts(ctx)
        self.assertEqual(fonts["10:00"], "12px Arial")
        self.assertEqual(fonts["11:00"], "bold 12px Arial")

    def test_demoted_single_mark_still_renders_bold(self) -> None:
        ctx = _paint([TimeMark(5, 35, "A")])
        self.assertEqual(_text_fonts(ctx), {"A": "bold 12px Arial"})

    def test_demotion_band_bolds_everything_at_or_above_thirty(self) -> None:
        marks = [
            TimeMark(0, 20, "a"),
            TimeMark(10, 30, "b"),
            TimeMark(20, 33, "c"),
            TimeMark(30, 25, "d"),
        ]
        fonts = _text_fonts(_paint(marks))
        for mark in marks:
            expected = "bold 12px Arial" if mark.weight >= 30 else "12px Arial"
            self.assertEqual(fonts[mark.label], expected, mark.label)

    def test_regular_pass_precedes_bold_pass_with_one_font_switch_each(self) -> None:
        marks = [TimeMark(0, 50, "D1"), TimeMark(10, 20, "h1"), TimeMark(20, 50, "D2"), TimeMark(30, 20, "h2")]
        ctx = _paint(marks)
        self.assertEqual(ctx.named("font"), [("font", "12px Arial"), ("font", "bold 12px Arial")])
        labels = [op[1] for op in ctx.named("fill_text")]
        self.assertEqual(labels, ["h1", "h2", "D1", "D2"])

    def test_tick_glyphs_are_filled_as_one_path(self) -> None:
        marks = [TimeMark(10, 20, "a"), TimeMark(20, 20, "b"), TimeMark(30, 40, "c")]
        ctx = _paint(marks)
        self.assertEqual(len(ctx.named("begin_path")), 1)
        self.assertEqual(len(ctx.named("rect")), 3)
        self.assertEqual(ctx.named("fill"), [("fill", "#2B2B43")])

    def test_tick_glyph_geometry_at_fractional_pixel_ratio(self) -> None:
        ctx = _paint([TimeMark(10, 20, "a")], pixel_ratio=1.5)
        # x = round(15), offset floor(0.75), width max(1, floor(1.5)), top floor(1.5), length round(4.5)
        self.assertEqual(ctx.named("rect"), [("rect", 15, 1, 1, 5)])

    def test_no_glyphs_when_border_hidden(self) -> None:
        hidden = TickMarkStyle(
            line_color=_STYLE.line_color,
            text_color=_STYLE.text_color,
            font=_STYLE.font,
            bold_font=_STYLE.bold_font,
            border_visible=False,
        )
        ctx = _paint([TimeMark(10, 20, "a")], style=hidden)
        self.assertEqual(ctx.named("rect"), [])
        self.assertEqual(ctx.named("fill"), [])
        self.assertEqual(len(ctx.named("fill_text")), 1)

    def test_text_is_drawn_in_logical_units_at_baseline(self) -> None:
        ctx = _paint([TimeMark(40, 20, "a")], pixel_ratio=2.0)
        self.assertIn(("scale", 2.0, 2.0), ctx.ops)
        self.assertEqual(ctx.named("fill_text"), [("fill_text", "a", 40, 19, "bold 12px Arial")])

    def test_state_changes_are_scoped(self) -> None:
        ctx = _paint([TimeMark(10, 20, "a"), TimeMark(20, 45, "b")])
        self.assertEqual(ctx.depth, 0)
        self.assertEqual(ctx.ops[0], ("save",))
        self.assertEqual(ctx.ops[-1], ("restore",))

    def test_empty_or_missing_marks_draw_nothing(self) -> None:
        self.assertEqual(_paint([]).ops, [])
        self.assertEqual(_paint(None).ops, [])

    def test_glyph_pixels_land_under_border(self) -> None:
        ctx = RasterContext(new_bitmap(40, 30))
        TickMarkRenderer().paint(ctx, [TimeMark(10, 20, "a")], _geometry(), 1.0, _STYLE)
        line = (0x2B, 0x2B, 0x43, 255)
        for row in (1, 2, 3):
            self.assertEqual(tuple(int(v) for v in ctx.bitmap[row, 10]), line)
        self.assertEqual(int(ctx.bitmap[4, 10, 3]), 0)
        self.assertEqual(int(ctx.bitmap[1, 11, 3]), 0)
        self.assertEqual(ctx.save_depth, 0)
        self.assertEqual(ctx.fill_style, "#000000")


class BorderTests(unittest.TestCase):
    def test_border_spans_physical_width(self) -> None:
        ctx = RasterContext(new_bitmap(15, 6))
        draw_border(ctx, Size(10, 4), 1.5, _geometry(), "#FF0000")
        self.assertEqual(tuple(int(v) for v in ctx.bitmap[0, 14]), (255, 0, 0, 255))
        self.assertEqual(int(ctx.bitmap[1, 0, 3]), 0)
        self.assertEqual(ctx.fill_style, "#000000")


if __name__ == "__main__":
    unittest.main()
