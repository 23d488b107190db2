from .canvas import RGBA, blit, clear_rect, fill_mask, fill_rect, new_bitmap, parse_color
from .context import FontDescriptor, RasterContext, parse_font, scaled
from .text import DEFAULT_FONT_FAMILY, draw_text, text_advance

__all__ = [
    "DEFAULT_FONT_FAMILY",
    "FontDescriptor",
    "RGBA",
    "RasterContext",
    "blit",
    "clear_rect",
    "draw_text",
    "fill_mask",
    "fill_rect",
    "new_bitmap",
    "parse_color",
    "parse_font",
    "scaled",
    "text_advance",
]
