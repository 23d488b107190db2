from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from timeaxis.raster.canvas import RGBA, fill_mask, round_half_up


DEFAULT_FONT_FAMILY = "DejaVu Sans"
BOLD_EMBOLDEN_PX = 2
FONT_FALLBACK_PATTERNS = (
    "dejavusans",
    "dejavu sans",
    "helvetica",
    "arial",
    "liberationsans",
    "liberation sans",
)
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/System/Library/Fonts/Supplemental"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)


def text_advance(text: str, *, font_family: str = DEFAULT_FONT_FAMILY, font_size_px: float = 12.0) -> float:
    if not text:
        return 0.0
    font = load_font(font_family, font_size_px)
    return float(font.getlength(text))


def draw_text(
    dst: np.ndarray,
    x: float,
    y: float,
    text: str,
    color: RGBA,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = 12.0,
    bold: bool = False,
) -> None:
    """Draw `text` with its left edge at `x` and its alphabetic baseline at `y`."""

    if not text:
        return
    mask, left, top = render_text_mask(text, font_family, font_size_px, bold)
    fill_mask(dst, mask, color, x=round_half_up(x) + left, y=round_half_up(y) + top)


@lru_cache(maxsize=256)
def render_text_mask(text: str, font_family: str, font_size_px: float, bold: bool) -> tuple[np.ndarray, int, int]:
    """Return a coverage mask and its offset from the left/baseline origin."""

    font = load_font(font_family, font_size_px)
    left, top, right, bottom = font.getbbox(text, anchor="ls")
    width = max(1, int(right - left))
    height = max(1, int(bottom - top))
    image = Image.new("L", (width, height), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font, anchor="ls")
    mask = np.asarray(image, dtype=np.uint8)
    if bold:
        mask = _embolden(mask, BOLD_EMBOLDEN_PX)
    return mask, int(left), int(top)


def _embolden(mask: np.ndarray, embolden_px: int) -> np.ndarray:
    if embolden_px <= 1:
        return mask
    out = mask.copy()
    for shift in range(1, embolden_px):
        src = mask[:, : max(0, mask.shape[1] - shift)]
        dst = out[:, shift:]
        if src.size == 0 or dst.size == 0:
            break
        np.maximum(dst, src, out=dst)
    return out


@lru_cache(maxsize=64)
def load_font(font_family: str, font_size_px: float) -> ImageFont.FreeTypeFont:
    size = max(1, int(round(font_size_px)))
    font_path = resolve_font_path(font_family)
    if font_path is not None:
        try:
            return ImageFont.truetype(str(font_path), size=size)
        except OSError:
            pass
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=32)
def resolve_font_path(font_family: str) -> Path | None:
    # CSS-style family lists: try each entry before the generic fallbacks.
    wanted = tuple(
        part.strip().strip("'\"").lower() for part in font_family.split(",") if part.strip().strip("'\"")
    )
    patterns = wanted + FONT_FALLBACK_PATTERNS

    candidates: list[Path] = []
    for base in FONT_DIRS:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(base.rglob(ext))

    for pattern in patterns:
        p = pattern.replace(" ", "")
        for path in candidates:
            stem = path.stem.lower().replace(" ", "")
            if p == stem:
                return path
        for path in candidates:
            stem = path.stem.lower().replace(" ", "")
            if p in stem and "bold" not in stem and "oblique" not in stem:
                return path
    return None
