#!/usr/bin/env python3
"""
グリッドトポロジー

行優先の平坦インデックス (row * width + col) から4近傍
(北・東・南・西) の画素インデックスを求めます。
グリッド外または行境界をまたぐ移動は「近傍なし」となります。
"""

from typing import Iterator, Optional, Tuple

from numba import njit

from depthguard.data_types import Direction

__all__ = ["GridTopology", "neighbor_index", "NO_NEIGHBOR"]

# JITカーネル内での「近傍なし」
NO_NEIGHBOR = -1


@njit(cache=True)
def neighbor_index(index: int, direction: int, width: int, size: int) -> int:
    """4近傍インデックス（近傍なしは -1）。フラッドフィルカーネルからも使用"""
    if direction == 0:  # north
        nxt = index - width
        if nxt < 0:
            return -1
        return nxt
    if direction == 1:  # east
        if (index % width) + 1 >= width:
            return -1
        return index + 1
    if direction == 2:  # south
        nxt = index + width
        if nxt >= size:
            return -1
        return nxt
    if direction == 3:  # west
        if index % width == 0:
            return -1
        return index - 1
    return -1


class GridTopology:
    """固定サイズ矩形グリッドの4連結トポロジー

    Parameters
    ----------
    width : int
        グリッドの幅（列数）
    height : int
        グリッドの高さ（行数）
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.size = self.width * self.height

    @property
    def shape(self) -> Tuple[int, int]:
        """numpy 配列形状 (height, width)"""
        return self.height, self.width

    def index_of(self, row: int, col: int) -> int:
        """(row, col) を平坦インデックスに変換"""
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise ValueError(f"({row}, {col}) is outside {self.width}x{self.height} grid")
        return row * self.width + col

    def coords_of(self, index: int) -> Tuple[int, int]:
        """平坦インデックスを (row, col) に変換"""
        self._check_index(index)
        return divmod(index, self.width)

    def neighbor(self, index: int, direction: Direction) -> Optional[int]:
        """
        指定方向の隣接画素インデックスを取得

        Args:
            index: 平坦インデックス
            direction: 方向

        Returns:
            隣接インデックス。グリッド外・行境界をまたぐ場合は None
        """
        self._check_index(index)
        nxt = neighbor_index(index, int(direction), self.width, self.size)
        if nxt == NO_NEIGHBOR:
            return None
        return nxt

    def neighbors(self, index: int) -> Iterator[int]:
        """存在する隣接画素インデックスを N E S W の順に列挙"""
        for direction in Direction:
            nxt = self.neighbor(index, direction)
            if nxt is not None:
                yield nxt

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.size:
            raise ValueError(f"Index {index} is outside grid of {self.size} pixels")

    def __repr__(self) -> str:
        return f"GridTopology(width={self.width}, height={self.height})"
