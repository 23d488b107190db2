from __future__ import annotations

import unittest

import numpy as np
import torch

from timeaxis.compile import FullRewrite, ReplaceRect, compile_full_rewrite_batch, compile_replace_patch_batch


class TimeAxisCompileTests(unittest.TestCase):
    def test_full_rewrite_wraps_frame(self) -> None:
        frame = np.zeros((4, 6, 4), dtype=np.uint8)
        frame[1, 2] = (10, 20, 30, 255)
        batch = compile_full_rewrite_batch(frame)
        # later drawing into the source frame does not leak into the batch
        frame[1, 2] = (0, 0, 0, 0)
        self.assertEqual(len(batch.operations), 1)
        op = batch.operations[0]
        self.assertIsInstance(op, FullRewrite)
        self.assertEqual(tuple(op.tensor_h_w_4.shape), (4, 6, 4))
        self.assertEqual(op.tensor_h_w_4.dtype, torch.uint8)
        self.assertEqual(op.tensor_h_w_4[1, 2].tolist(), [10, 20, 30, 255])

    def test_replace_patch_records_offset_and_size(self) -> None:
        patch = np.full((3, 5, 4), 7, dtype=np.uint8)
        batch = compile_replace_patch_batch(patch, x=2, y=9)
        op = batch.operations[0]
        self.assertIsInstance(op, ReplaceRect)
        self.assertEqual((op.x, op.y, op.width, op.height), (2, 9, 5, 3))

    def test_rejects_non_rgba_frames(self) -> None:
        with self.assertRaisesRegex(ValueError, "uint8"):
            compile_full_rewrite_batch(np.zeros((2, 2, 4), dtype=np.float32))
        with self.assertRaisesRegex(ValueError, r"\(H, W, 4\)"):
            compile_full_rewrite_batch(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_rejects_negative_offsets_and_empty_patches(self) -> None:
        with self.assertRaisesRegex(ValueError, "non-negative"):
            compile_replace_patch_batch(np.zeros((1, 1, 4), dtype=np.uint8), x=-1, y=0)
        with self.assertRaisesRegex(ValueError, "have area"):
            compile_replace_patch_batch(np.zeros((0, 3, 4), dtype=np.uint8), x=0, y=0)


if __name__ == "__main__":
    unittest.main()
