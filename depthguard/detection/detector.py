#!/usr/bin/env python3
"""
動体領域検出セッション

距離グリッド・ベースライン・作業バッファ・設定を1つのセッションにまとめ、
1フレームずつ以下の順で処理します:

1. 保留中の設定変更を適用（フレーム境界でのみ）
2. ベースライン取得要求があればフレームを保存して終了
3. 差分分類 (DiffClassifier)
4. 連結領域解析 (RegionAnalyzer)
5. 警報判定 (AlarmDecision)
6. 表示バッファへの有効領域の重ね描き
"""

import threading
from dataclasses import replace
from typing import Optional, Dict, Any

from depthguard import get_logger
from depthguard.config import DetectorConfig, AlarmConfig
from depthguard.constants import FRAME_BUDGET_MS
from depthguard.data_types import DepthFrame, FrameResult, AlarmState
from depthguard.detection.topology import GridTopology
from depthguard.detection.diff import DiffClassifier, overlay_regions
from depthguard.detection.regions import RegionAnalyzer
from depthguard.detection.alarm import AlarmDecision
from depthguard.detection.baseline import BaselineCapture
from depthguard.performance.profiler import FrameBudgetMonitor
from depthguard.sound.backend import IAlarmBackend

logger = get_logger(__name__)

__all__ = ["MotionDetector"]


class MotionDetector:
    """フレーム単位の侵入検出セッション

    Parameters
    ----------
    config : DetectorConfig, optional
        グリッドサイズと検出閾値
    alarm_backend : IAlarmBackend, optional
        警報音の出力先。None の場合は状態のみ更新する
    alarm_config : AlarmConfig, optional
        警報音ファイルと警報に必要な領域数
    budget_ms : float
        1フレームの処理時間予算
    log_overruns : bool
        予算超過フレームを警告ログに出すか
    """

    def __init__(
        self,
        config: Optional[DetectorConfig] = None,
        alarm_backend: Optional[IAlarmBackend] = None,
        alarm_config: Optional[AlarmConfig] = None,
        budget_ms: float = FRAME_BUDGET_MS,
        log_overruns: bool = True,
    ) -> None:
        self.config = replace(config) if config is not None else DetectorConfig()
        self.config.validate()
        alarm_config = alarm_config or AlarmConfig()

        self.topology = GridTopology(self.config.width, self.config.height)
        self.classifier = DiffClassifier(self.topology)
        self.analyzer = RegionAnalyzer(self.topology)
        self.baseline = BaselineCapture(self.topology)
        self.alarm = AlarmDecision(
            sink=alarm_backend,
            sound_id=alarm_config.sound_file,
            min_regions=alarm_config.min_regions,
        )
        self.monitor = FrameBudgetMonitor(budget_ms=budget_ms, log_overruns=log_overruns)

        self._pending_config: Optional[DetectorConfig] = None
        self._config_lock = threading.Lock()
        self.frames_processed = 0

        logger.info(
            f"MotionDetector ready: {self.config.width}x{self.config.height}, "
            f"threshold={self.config.depth_threshold}mm, "
            f"min_region={self.config.min_region_size}px"
        )

    # ------------------------------------------------------------------
    # 制御
    # ------------------------------------------------------------------
    @property
    def armed(self) -> bool:
        return self.baseline.armed

    @property
    def alarm_state(self) -> AlarmState:
        return self.alarm.state

    def request_baseline_capture(self) -> bool:
        """次フレームをベースラインとして取得し警戒状態にする"""
        return self.baseline.request_capture()

    def disarm(self) -> None:
        """警戒解除。警報は次のフレームで停止する"""
        self.baseline.disarm()

    def reconfigure(
        self,
        depth_threshold: Optional[int] = None,
        min_region_size: Optional[int] = None,
    ) -> DetectorConfig:
        """
        検出閾値を変更（次フレームの開始時に適用）

        Args:
            depth_threshold: 変化とみなす最小の距離減少量 (mm)
            min_region_size: 有効領域の最小画素数（この値を超える必要がある）

        Returns:
            適用予定の設定

        Raises:
            ValueError: 不正な値の場合（現在の設定は変更されない）
        """
        with self._config_lock:
            base = self._pending_config or self.config
            new_config = replace(base)
            if depth_threshold is not None:
                new_config.depth_threshold = int(depth_threshold)
            if min_region_size is not None:
                new_config.min_region_size = int(min_region_size)
            new_config.validate()
            self._pending_config = new_config

        logger.info(
            f"Reconfiguration staged: threshold={new_config.depth_threshold}mm, "
            f"min_region={new_config.min_region_size}px"
        )
        return new_config

    def _apply_pending_config(self) -> None:
        with self._config_lock:
            if self._pending_config is None:
                return
            self.config = self._pending_config
            self._pending_config = None
        logger.debug("Pending configuration applied")

    # ------------------------------------------------------------------
    # フレーム処理
    # ------------------------------------------------------------------
    def process_frame(self, frame: Optional[DepthFrame]) -> Optional[FrameResult]:
        """
        1フレームを処理

        Args:
            frame: 深度フレーム。None や空フレームは無視する

        Returns:
            検出結果。フレームが無効な場合は None
        """
        if frame is None or not frame.is_valid:
            logger.debug("No valid frame, skipping detection")
            return None

        if frame.depth.size != self.topology.size:
            raise ValueError(
                f"Frame of shape {frame.depth.shape} does not match "
                f"{self.topology.width}x{self.topology.height} detector"
            )

        self._apply_pending_config()
        self.monitor.start_frame()

        if self.baseline.on_frame(frame.depth):
            elapsed = self.monitor.end_frame()
            return FrameResult(
                frame_number=frame.frame_number,
                armed=self.armed,
                baseline_captured=True,
                alarm_state=self.alarm.state,
                processing_time_ms=elapsed,
            )

        with self.monitor.measure_phase("classify"):
            changed_mask, display = self.classifier.classify(
                frame.depth, self.baseline.baseline,
                frame.min_depth, frame.max_depth,
                self.config.depth_threshold,
            )

        with self.monitor.measure_phase("regions"):
            filtered_mask, qualifying = self.analyzer.analyze(
                changed_mask, self.config.min_region_size
            )

        transition = self.alarm.update(qualifying, self.armed)
        overlay_regions(display, filtered_mask)

        elapsed = self.monitor.end_frame()
        self.frames_processed += 1

        return FrameResult(
            frame_number=frame.frame_number,
            armed=self.armed,
            changed_mask=changed_mask,
            filtered_mask=filtered_mask,
            qualifying_count=qualifying,
            alarm_state=self.alarm.state,
            alarm_transition=transition,
            display_buffer=display,
            processing_time_ms=elapsed,
        )

    def get_performance_stats(self) -> Dict[str, Any]:
        """パフォーマンス統計を取得"""
        stats = self.monitor.get_stats()
        stats['frames_processed'] = self.frames_processed
        stats['armed'] = self.armed
        stats['alarm_state'] = self.alarm.state.value
        return stats

    def shutdown(self) -> None:
        """警報を停止してセッションを終了"""
        self.alarm.reset()
        logger.info("MotionDetector shutdown")
