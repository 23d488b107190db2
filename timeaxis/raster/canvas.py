from __future__ import annotations

import math
import re

import numpy as np


RGBA = tuple[int, int, int, int]

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")
TRANSPARENT: RGBA = (0, 0, 0, 0)


def is_hex_color(value: object) -> bool:
    return isinstance(value, str) and _HEX_COLOR.match(value) is not None


def parse_color(value: str) -> RGBA:
    if not is_hex_color(value):
        raise ValueError(f"color must be a hex color (#RRGGBB or #RRGGBBAA), got {value!r}")
    r = int(value[1:3], 16)
    g = int(value[3:5], 16)
    b = int(value[5:7], 16)
    a = int(value[7:9], 16) if len(value) == 9 else 255
    return (r, g, b, a)


def new_bitmap(width: int, height: int, color: RGBA = TRANSPARENT) -> np.ndarray:
    bitmap = np.zeros((max(0, height), max(0, width), 4), dtype=np.uint8)
    if color != TRANSPARENT:
        bitmap[:, :] = np.asarray(color, dtype=np.uint8)
    return bitmap


def clip_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int) -> tuple[int, int, int, int] | None:
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1], max(x0, x1))
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0], max(y0, y1))
    if xa >= xb or ya >= yb:
        return None
    return (xa, ya, xb, yb)


def clear_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int) -> None:
    clipped = clip_rect(dst, x0, y0, x1, y1)
    if clipped is None:
        return
    xa, ya, xb, yb = clipped
    dst[ya:yb, xa:xb] = 0


def fill_mask(dst: np.ndarray, coverage: np.ndarray, color: RGBA, x: int = 0, y: int = 0) -> None:
    """Source-over blend `color` into `dst` wherever `coverage` (0..255 or bool) is set."""

    h, w = coverage.shape
    clipped = clip_rect(dst, x, y, x + w, y + h)
    if clipped is None:
        return
    xa, ya, xb, yb = clipped
    cov = coverage[ya - y : yb - y, xa - x : xb - x]
    if cov.dtype == np.bool_:
        cov = cov.astype(np.float32)
    else:
        cov = cov.astype(np.float32) / 255.0
    src_alpha = (color[3] / 255.0) * cov
    if not np.any(src_alpha > 0):
        return

    patch = dst[ya:yb, xa:xb]
    dst_rgb = patch[:, :, :3].astype(np.float32)
    dst_alpha = patch[:, :, 3].astype(np.float32) / 255.0
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = src_rgb * src_alpha[:, :, None] + dst_rgb * dst_alpha[:, :, None] * (1.0 - src_alpha[:, :, None])
    safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)
    out_rgb = out_rgb_num / safe_alpha[:, :, None]

    patch[:, :, :3] = np.clip(np.round(out_rgb), 0, 255).astype(np.uint8)
    patch[:, :, 3] = np.clip(np.round(out_alpha * 255.0), 0, 255).astype(np.uint8)


def fill_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    clipped = clip_rect(dst, x0, y0, x1, y1)
    if clipped is None:
        return
    xa, ya, xb, yb = clipped
    fill_mask(dst, np.ones((yb - ya, xb - xa), dtype=np.bool_), color, x=xa, y=ya)


def blit(dst: np.ndarray, src: np.ndarray, x0: int = 0, y0: int = 0) -> None:
    h, w, _ = src.shape
    y1 = min(dst.shape[0], y0 + h)
    x1 = min(dst.shape[1], x0 + w)
    if y0 >= y1 or x0 >= x1:
        return

    view = dst[y0:y1, x0:x1]
    patch = src[: y1 - y0, : x1 - x0]
    src_alpha = patch[:, :, 3:4].astype(np.float32) / 255.0
    dst_alpha = view[:, :, 3:4].astype(np.float32) / 255.0
    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = patch[:, :, :3] * src_alpha + view[:, :, :3] * dst_alpha * (1.0 - src_alpha)
    safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)
    view[:, :, :3] = np.clip(np.round(out_rgb_num / safe_alpha), 0, 255).astype(np.uint8)
    view[:, :, 3] = np.clip(np.round(out_alpha[:, :, 0] * 255.0), 0, 255).astype(np.uint8)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
