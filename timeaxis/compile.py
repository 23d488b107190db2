"""Composited axis frames packaged as torch write batches for a host display.

A host either dedicates a target to the axis (`FullRewrite`) or keeps one
frame for the whole chart and places the axis strip in it (`ReplaceRect`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

import numpy as np
import torch


@dataclass(frozen=True)
class FullRewrite:
    tensor_h_w_4: torch.Tensor


@dataclass(frozen=True)
class ReplaceRect:
    x: int
    y: int
    rect_h_w_4: torch.Tensor

    @property
    def width(self) -> int:
        return int(self.rect_h_w_4.shape[1])

    @property
    def height(self) -> int:
        return int(self.rect_h_w_4.shape[0])


WriteOp: TypeAlias = FullRewrite | ReplaceRect


@dataclass(frozen=True)
class WriteBatch:
    operations: tuple[WriteOp, ...]


def frame_tensor(frame: np.ndarray) -> torch.Tensor:
    if frame.dtype != np.uint8 or frame.ndim != 3 or frame.shape[2] != 4:
        raise ValueError(f"axis frame must be a uint8 (H, W, 4) array, got {frame.dtype} {frame.shape}")
    if frame.shape[0] == 0 or frame.shape[1] == 0:
        raise ValueError("axis frame must have area")
    # copy: the compositor keeps drawing into its own buffers
    return torch.from_numpy(frame.copy())


def compile_full_rewrite_batch(frame: np.ndarray) -> WriteBatch:
    return WriteBatch((FullRewrite(frame_tensor(frame)),))


def compile_replace_patch_batch(frame: np.ndarray, x: int, y: int) -> WriteBatch:
    if x < 0 or y < 0:
        raise ValueError(f"axis origin must be non-negative, got ({x}, {y})")
    return WriteBatch((ReplaceRect(x=x, y=y, rect_h_w_4=frame_tensor(frame)),))
