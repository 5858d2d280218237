#!/usr/bin/env python3
"""Mock depth camera used in headless mode or CI.

Generates a flat wall at a fixed distance with per-pixel sensor noise and
optional rectangular "intruders" that appear closer than the wall for a
scripted range of frames.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from depthguard.constants import (
    DEFAULT_DEPTH_WIDTH, DEFAULT_DEPTH_HEIGHT,
    DEFAULT_MIN_DEPTH_MM, DEFAULT_MAX_DEPTH_MM,
)
from depthguard.data_types import DepthFrame

__all__ = ["MockDepthCamera", "Intruder"]


@dataclass
class Intruder:
    """A rectangular block placed in front of the wall."""
    row: int
    col: int
    height: int
    width: int
    depth_mm: int
    start_frame: int = 1
    end_frame: Optional[int] = None  # inclusive, None = forever

    def is_active(self, frame_number: int) -> bool:
        if frame_number < self.start_frame:
            return False
        return self.end_frame is None or frame_number <= self.end_frame


class MockDepthCamera:
    """Synthetic depth source implementing the ``FrameSource`` protocol."""

    def __init__(
        self,
        width: int = DEFAULT_DEPTH_WIDTH,
        height: int = DEFAULT_DEPTH_HEIGHT,
        background_mm: int = 2000,
        noise_mm: int = 5,
        dropout_ratio: float = 0.0,
        intruders: Optional[Sequence[Intruder]] = None,
        min_depth: int = DEFAULT_MIN_DEPTH_MM,
        max_depth: int = DEFAULT_MAX_DEPTH_MM,
        seed: Optional[int] = None,
    ):
        self.width = width
        self.height = height
        self.background_mm = background_mm
        self.noise_mm = noise_mm
        self.dropout_ratio = dropout_ratio
        self.intruders: List[Intruder] = list(intruders or [])
        self.min_depth = min_depth
        self.max_depth = max_depth
        self._rng = np.random.default_rng(seed)
        self._frame_counter: int = 0
        self._running = False

    # ------------------------------------------------------------------
    # FrameSource API
    # ------------------------------------------------------------------
    def start(self) -> bool:
        self._running = True
        return True

    def stop(self) -> None:
        self._running = False

    def get_frame(self, timeout_ms: int = 100) -> Optional[DepthFrame]:
        """Return the next synthetic frame (``None`` when stopped)."""
        if not self._running:
            return None

        self._frame_counter += 1
        depth = np.full((self.height, self.width), self.background_mm, dtype=np.int32)

        if self.noise_mm > 0:
            depth += self._rng.integers(-self.noise_mm, self.noise_mm + 1, size=depth.shape)

        for intruder in self.intruders:
            if intruder.is_active(self._frame_counter):
                depth[intruder.row:intruder.row + intruder.height,
                      intruder.col:intruder.col + intruder.width] = intruder.depth_mm

        if self.dropout_ratio > 0.0:
            depth[self._rng.random(depth.shape) < self.dropout_ratio] = 0

        return DepthFrame(
            depth=depth.astype(np.uint16),
            min_depth=self.min_depth,
            max_depth=self.max_depth,
            timestamp_ms=time.perf_counter() * 1000.0,
            frame_number=self._frame_counter,
        )

    def add_intruder(self, intruder: Intruder) -> None:
        self.intruders.append(intruder)

    # Context manager helpers -------------------------------------------------
    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
