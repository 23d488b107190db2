from __future__ import annotations

import unittest

import numpy as np

from timeaxis.font_metrics import make_font
from timeaxis.raster.canvas import blit, new_bitmap, parse_color, round_half_up
from timeaxis.raster.context import RasterContext, parse_font, scaled
from timeaxis.raster.text import render_text_mask


class RasterCanvasTests(unittest.TestCase):
    def test_parse_color_supports_optional_alpha(self) -> None:
        self.assertEqual(parse_color("#2B2B43"), (0x2B, 0x2B, 0x43, 255))
        self.assertEqual(parse_color("#FF000080"), (255, 0, 0, 128))

    def test_parse_color_rejects_named_colors(self) -> None:
        with self.assertRaisesRegex(ValueError, "hex color"):
            parse_color("red")

    def test_round_half_up_matches_browser_rounding(self) -> None:
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(4.5), 5)
        self.assertEqual(round_half_up(-0.5), 0)

    def test_blit_composites_source_over(self) -> None:
        dst = new_bitmap(4, 4, color=(255, 255, 255, 255))
        src = new_bitmap(4, 4)
        src[1, 2] = (255, 0, 0, 255)
        blit(dst, src)
        self.assertEqual(tuple(int(v) for v in dst[1, 2]), (255, 0, 0, 255))
        self.assertEqual(tuple(int(v) for v in dst[0, 0]), (255, 255, 255, 255))


class RasterContextTests(unittest.TestCase):
    def test_fill_rect_goes_through_scale_transform(self) -> None:
        ctx = RasterContext(new_bitmap(10, 10))
        ctx.fill_style = "#FF0000"
        ctx.scale(2, 2)
        ctx.fill_rect(1, 1, 2, 1)
        bitmap = ctx.bitmap
        self.assertEqual(tuple(int(v) for v in bitmap[2, 2]), (255, 0, 0, 255))
        self.assertEqual(tuple(int(v) for v in bitmap[3, 5]), (255, 0, 0, 255))
        self.assertEqual(int(bitmap[1, 1, 3]), 0)
        self.assertEqual(int(bitmap[4, 2, 3]), 0)
        self.assertEqual(int(bitmap[2, 6, 3]), 0)

    def test_restore_reverts_style_and_transform(self) -> None:
        ctx = RasterContext(new_bitmap(4, 4))
        ctx.fill_style = "#112233"
        ctx.save()
        ctx.fill_style = "#445566"
        ctx.font = "bold 14px Test"
        ctx.scale(3, 3)
        ctx.restore()
        self.assertEqual(ctx.fill_style, "#112233")
        self.assertEqual(ctx.transform_scale, (1.0, 1.0))
        self.assertEqual(ctx.save_depth, 0)

    def test_scaled_restores_even_when_drawing_raises(self) -> None:
        ctx = RasterContext(new_bitmap(4, 4))
        with self.assertRaises(ValueError):
            with scaled(ctx, 2.0):
                ctx.fill_style = "not-a-color"
        self.assertEqual(ctx.transform_scale, (1.0, 1.0))
        self.assertEqual(ctx.save_depth, 0)

    def test_path_fill_blends_overlapping_rects_once(self) -> None:
        ctx = RasterContext(new_bitmap(10, 4))
        ctx.fill_style = "#FF000080"
        ctx.begin_path()
        ctx.rect(0, 0, 6, 2)
        ctx.rect(4, 0, 6, 2)
        ctx.fill()
        self.assertEqual(int(ctx.bitmap[0, 1, 3]), 128)
        self.assertEqual(int(ctx.bitmap[0, 5, 3]), 128)
        self.assertEqual(int(ctx.bitmap[3, 5, 3]), 0)

    def test_clear_rect_makes_pixels_transparent(self) -> None:
        ctx = RasterContext(new_bitmap(6, 6, color=(10, 20, 30, 255)))
        ctx.clear_rect(0, 0, 3, 3)
        self.assertEqual(int(ctx.bitmap[1, 1, 3]), 0)
        self.assertEqual(int(ctx.bitmap[4, 4, 3]), 255)

    def test_drawing_on_zero_area_bitmap_is_a_noop(self) -> None:
        ctx = RasterContext(new_bitmap(0, 0))
        ctx.fill_rect(0, 0, 10, 10)
        ctx.clear_rect(0, 0, 10, 10)
        ctx.begin_path()
        ctx.rect(0, 0, 5, 5)
        ctx.fill()
        ctx.font = "12px DejaVu Sans"
        ctx.fill_text("10:00", 5, 10)
        self.assertEqual(ctx.bitmap.shape, (0, 0, 4))

    def test_centered_text_straddles_anchor(self) -> None:
        ctx = RasterContext(new_bitmap(100, 30))
        ctx.fill_style = "#000000"
        ctx.font = "12px DejaVu Sans"
        ctx.text_align = "center"
        ctx.fill_text("10:00", 50, 20)
        covered = np.flatnonzero(ctx.bitmap[:, :, 3].max(axis=0))
        self.assertGreater(covered.size, 0)
        self.assertLess(int(covered.min()), 50)
        self.assertGreater(int(covered.max()), 50)
        # nothing lands below the baseline row for digits
        self.assertEqual(int(ctx.bitmap[25:, :, 3].max()), 0)

    def test_bold_mask_has_more_coverage(self) -> None:
        regular, _, _ = render_text_mask("11:00", "DejaVu Sans", 12.0, False)
        bold, _, _ = render_text_mask("11:00", "DejaVu Sans", 12.0, True)
        self.assertGreater(int(bold.astype(np.int64).sum()), int(regular.astype(np.int64).sum()))

    def test_parse_font_reads_style_size_and_family(self) -> None:
        font = parse_font("bold 12px Trebuchet MS, sans-serif")
        self.assertTrue(font.bold)
        self.assertEqual(font.size_px, 12.0)
        self.assertEqual(font.family, "Trebuchet MS, sans-serif")
        self.assertFalse(parse_font("11.5px Roboto").bold)

    def test_parse_font_reads_exponent_sizes(self) -> None:
        self.assertEqual(parse_font("1e-05px Roboto").size_px, 1e-05)
        self.assertEqual(parse_font("bold 1.5e+16px Roboto").size_px, 1.5e16)

    def test_make_font_output_always_parses(self) -> None:
        for size in (12, 12.5, 12.0000001, 1e-05, 1234567, 1.5e16):
            with self.subTest(size=size):
                self.assertEqual(parse_font(make_font(size, "Roboto", "bold")).size_px, float(size))

    def test_invalid_font_descriptor_is_rejected(self) -> None:
        ctx = RasterContext(new_bitmap(2, 2))
        with self.assertRaisesRegex(ValueError, "font descriptor"):
            ctx.font = "large Roboto"


if __name__ == "__main__":
    unittest.main()
