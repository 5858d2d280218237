#!/usr/bin/env python3
"""
深度差分分類モジュール

現在フレームとベースラインを画素ごとに比較し、
「変化あり」二値マスクと表示用 BGR バッファを生成します。
距離が減少した（物体が近づいた）方向のみを変化として扱います。
"""

from typing import Tuple
import numpy as np

from depthguard.constants import (
    INVALID_DEPTH_COLOR, MOTION_COLOR, REGION_HIGHLIGHT_COLOR, BYTES_PER_PIXEL
)
from depthguard.data_types import MaskTag, MASK_DTYPE
from depthguard.detection.topology import GridTopology

__all__ = ["DiffClassifier", "depth_to_intensity", "overlay_regions"]


def depth_to_intensity(depth: np.ndarray, min_depth: int, max_depth: int) -> np.ndarray:
    """深度をグレースケール輝度に変換（近いほど明るい、単調減少）"""
    span = max(int(max_depth) - int(min_depth), 1)
    clipped = np.clip(depth.astype(np.int64), min_depth, max_depth) - int(min_depth)
    return (255 - (clipped * 255) // span).astype(np.uint8)


def overlay_regions(
    display: np.ndarray,
    filtered_mask: np.ndarray,
    color: Tuple[int, int, int] = REGION_HIGHLIGHT_COLOR,
) -> np.ndarray:
    """有効領域の画素を強調色で上書き（display をその場で更新して返す）"""
    display[filtered_mask == MaskTag.QUALIFYING] = color
    return display


class DiffClassifier:
    """ベースライン差分による画素分類器"""

    def __init__(self, topology: GridTopology) -> None:
        self.topology = topology

    def classify(
        self,
        current: np.ndarray,
        baseline: np.ndarray,
        min_depth: int,
        max_depth: int,
        threshold: int,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        画素ごとの変化判定と表示色の生成

        Args:
            current: 現在フレームの距離グリッド
            baseline: ベースライン距離グリッド
            min_depth: 有効深度の下限
            max_depth: 有効深度の上限
            threshold: 変化とみなす最小の距離減少量

        Returns:
            (二値マスク (height, width) uint8, 表示バッファ (height, width, 3) uint8 BGR)
        """
        if min_depth > max_depth:
            raise ValueError(f"Invalid depth range [{min_depth}, {max_depth}]")

        cur = self._as_grid(current, "current").astype(np.int64)
        base = self._as_grid(baseline, "baseline").astype(np.int64)

        valid = (cur >= min_depth) & (cur <= max_depth)
        changed = valid & ((base - cur) > threshold)

        mask = np.zeros(self.topology.shape, dtype=MASK_DTYPE)
        mask[changed] = MaskTag.CHANGED

        display = np.empty(self.topology.shape + (BYTES_PER_PIXEL,), dtype=np.uint8)
        display[...] = depth_to_intensity(cur, min_depth, max_depth)[..., np.newaxis]
        display[~valid] = INVALID_DEPTH_COLOR
        display[changed] = MOTION_COLOR

        return mask, display

    def _as_grid(self, grid: np.ndarray, name: str) -> np.ndarray:
        """平坦配列も受け付け、(height, width) に揃える"""
        grid = np.asarray(grid)
        if grid.shape == self.topology.shape:
            return grid
        if grid.ndim == 1 and grid.size == self.topology.size:
            return grid.reshape(self.topology.shape)
        raise ValueError(
            f"{name} grid shape {grid.shape} does not match {self.topology.shape}"
        )
