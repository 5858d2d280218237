#!/usr/bin/env python3
"""
ベースライン取得ラッチ

取得要求の次のフレームを一度だけベースラインとして保存し、
システムを警戒状態にします。
"""

import numpy as np

from depthguard import get_logger
from depthguard.data_types import CaptureState
from depthguard.detection.topology import GridTopology

logger = get_logger(__name__)

__all__ = ["BaselineCapture"]


class BaselineCapture:
    """ワンショットのベースライン取得と警戒状態の管理

    ベースラインはゼロで初期化されるため、最初の取得までは
    どの画素も「変化あり」にはなりません。
    """

    def __init__(self, topology: GridTopology, dtype=np.uint16) -> None:
        self.topology = topology
        self.baseline = np.zeros(topology.shape, dtype=dtype)
        self.state = CaptureState.IDLE
        self.armed = False
        self.capture_count = 0

    @property
    def is_pending(self) -> bool:
        return self.state == CaptureState.PENDING

    def request_capture(self) -> bool:
        """
        次フレームでのベースライン取得を要求

        Returns:
            新しく要求された場合 True（既に保留中なら False）
        """
        if self.state == CaptureState.PENDING:
            logger.debug("Baseline capture already pending")
            return False
        self.state = CaptureState.PENDING
        logger.info("Baseline capture requested")
        return True

    def on_frame(self, current: np.ndarray) -> bool:
        """
        フレーム到着時の処理

        Args:
            current: 現在フレームの距離グリッド

        Returns:
            このフレームでベースラインを取得した場合 True（検出はスキップする）
        """
        if self.state != CaptureState.PENDING:
            return False

        current = np.asarray(current)
        if current.size != self.topology.size:
            raise ValueError(
                f"Frame of {current.size} pixels does not match baseline of {self.topology.size}"
            )

        # 入力フレームの整数型のまま丸ごと置き換える
        self.baseline = current.reshape(self.topology.shape).copy()
        self.state = CaptureState.IDLE
        self.armed = True
        self.capture_count += 1
        logger.info(f"Baseline captured (#{self.capture_count}), system armed")
        return True

    def disarm(self) -> None:
        """警戒状態を解除（ベースラインは保持）"""
        if self.armed:
            logger.info("System disarmed")
        self.armed = False
