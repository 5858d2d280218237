#!/usr/bin/env python3
"""
OpenNI2 深度カメラ入力

OpenCV の OpenNI2 キャプチャバックエンド経由で Kinect 等の
深度マップ (uint16, mm) を取得します。
"""

import time
from typing import Optional

import cv2
import numpy as np

from depthguard import get_logger
from depthguard.constants import DEFAULT_MIN_DEPTH_MM, DEFAULT_MAX_DEPTH_MM
from depthguard.data_types import DepthFrame

logger = get_logger(__name__)

__all__ = ["OpenNIDepthCamera"]


class OpenNIDepthCamera:
    """OpenNI2 深度カメラ（FrameSource 実装）"""

    def __init__(
        self,
        device_index: int = 0,
        min_depth: int = DEFAULT_MIN_DEPTH_MM,
        max_depth: int = DEFAULT_MAX_DEPTH_MM,
    ):
        self.device_index = device_index
        self.min_depth = min_depth
        self.max_depth = max_depth
        self._capture: Optional[cv2.VideoCapture] = None
        self._frame_counter = 0

    def start(self) -> bool:
        """デバイスを開く"""
        try:
            self._capture = cv2.VideoCapture(cv2.CAP_OPENNI2 + self.device_index)
        except cv2.error as e:
            logger.error(f"OpenNI2 capture could not be created: {e}")
            self._capture = None
            return False

        if not self._capture.isOpened():
            logger.error("No OpenNI2 depth sensor found (is OpenCV built with OpenNI2?)")
            self._capture = None
            return False

        logger.info(f"OpenNI2 depth sensor #{self.device_index} opened")
        return True

    def get_frame(self, timeout_ms: int = 100) -> Optional[DepthFrame]:
        """
        深度フレームを取得

        Returns:
            取得できなかった場合は None
        """
        if self._capture is None:
            return None

        if not self._capture.grab():
            logger.debug("OpenNI2 grab failed")
            return None

        ok, depth = self._capture.retrieve(None, cv2.CAP_OPENNI_DEPTH_MAP)
        if not ok or depth is None:
            return None

        self._frame_counter += 1
        return DepthFrame(
            depth=np.asarray(depth, dtype=np.uint16),
            min_depth=self.min_depth,
            max_depth=self.max_depth,
            timestamp_ms=time.perf_counter() * 1000.0,
            frame_number=self._frame_counter,
        )

    def stop(self) -> None:
        """デバイスを閉じる"""
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info("OpenNI2 depth sensor released")
