#!/usr/bin/env python3
"""
フレーム処理時間の測定

フェーズ別の処理時間を記録し、フレーム間隔（予算）を
超過したフレームを検出します。
"""

import time
import threading
from typing import Dict, Optional, Any
from dataclasses import dataclass
from collections import deque
from contextlib import contextmanager
import psutil

from depthguard import get_logger
from depthguard.constants import FRAME_BUDGET_MS, PERFORMANCE_HISTORY_SIZE

logger = get_logger(__name__)


@dataclass
class PhaseTimer:
    """フェーズ別タイマー"""
    name: str
    start_time: float = 0.0
    total_time: float = 0.0
    call_count: int = 0
    min_time: float = float('inf')
    max_time: float = 0.0

    def start(self):
        """タイマー開始"""
        self.start_time = time.perf_counter()

    def stop(self) -> float:
        """タイマー停止と時間記録"""
        if self.start_time == 0.0:
            return 0.0

        elapsed = (time.perf_counter() - self.start_time) * 1000.0
        self.total_time += elapsed
        self.call_count += 1
        self.min_time = min(self.min_time, elapsed)
        self.max_time = max(self.max_time, elapsed)
        self.start_time = 0.0
        return elapsed

    def get_average(self) -> float:
        """平均時間を取得"""
        return self.total_time / self.call_count if self.call_count > 0 else 0.0

    def reset(self):
        """統計リセット"""
        self.total_time = 0.0
        self.call_count = 0
        self.min_time = float('inf')
        self.max_time = 0.0


class FrameBudgetMonitor:
    """フレーム予算監視

    Parameters
    ----------
    budget_ms : float
        1フレームあたりの処理時間予算（既定はフレーム間隔）
    history_size : int
        保持するフレーム時間履歴の長さ
    log_overruns : bool
        予算超過フレームを警告ログに出すか（超過回数は常に数える）
    """

    def __init__(self, budget_ms: float = FRAME_BUDGET_MS,
                 history_size: int = PERFORMANCE_HISTORY_SIZE,
                 log_overruns: bool = True):
        self.budget_ms = budget_ms
        self.log_overruns = log_overruns
        self.frame_times: deque = deque(maxlen=history_size)
        self.phase_timers: Dict[str, PhaseTimer] = {}
        self.frame_count = 0
        self.overrun_count = 0
        self._frame_start: Optional[float] = None
        self.process = psutil.Process()
        self.lock = threading.RLock()

    def create_timer(self, phase_name: str) -> PhaseTimer:
        """フェーズタイマーを作成"""
        with self.lock:
            if phase_name not in self.phase_timers:
                self.phase_timers[phase_name] = PhaseTimer(phase_name)
            return self.phase_timers[phase_name]

    @contextmanager
    def measure_phase(self, phase_name: str):
        """フェーズ実行時間を測定"""
        timer = self.create_timer(phase_name)
        timer.start()
        try:
            yield timer
        finally:
            timer.stop()

    def start_frame(self) -> None:
        """フレーム開始時刻を記録"""
        self._frame_start = time.perf_counter()

    def end_frame(self) -> float:
        """
        フレーム終了を記録

        Returns:
            フレーム処理時間（ミリ秒）
        """
        if self._frame_start is None:
            return 0.0
        frame_time = (time.perf_counter() - self._frame_start) * 1000.0
        self._frame_start = None

        with self.lock:
            self.frame_times.append(frame_time)
            self.frame_count += 1
            if frame_time > self.budget_ms:
                self.overrun_count += 1
                if self.log_overruns:
                    logger.warning(
                        f"Frame processing {frame_time:.1f}ms exceeded budget {self.budget_ms:.1f}ms"
                    )
        return frame_time

    def get_average_frame_time(self) -> float:
        """履歴内の平均フレーム時間"""
        with self.lock:
            if not self.frame_times:
                return 0.0
            return sum(self.frame_times) / len(self.frame_times)

    def get_stats(self) -> Dict[str, Any]:
        """統計情報を取得"""
        with self.lock:
            stats: Dict[str, Any] = {
                'frames': self.frame_count,
                'overruns': self.overrun_count,
                'budget_ms': self.budget_ms,
                'avg_frame_ms': self.get_average_frame_time(),
                'max_frame_ms': max(self.frame_times) if self.frame_times else 0.0,
                'memory_mb': self.process.memory_info().rss / 1024 / 1024,
                'phases': {},
            }
            for phase_name, timer in self.phase_timers.items():
                if timer.call_count > 0:
                    stats['phases'][phase_name] = {
                        'avg_ms': timer.get_average(),
                        'min_ms': timer.min_time,
                        'max_ms': timer.max_time,
                        'total_calls': timer.call_count,
                    }
            return stats

    def reset_statistics(self):
        """統計をリセット"""
        with self.lock:
            for timer in self.phase_timers.values():
                timer.reset()
            self.frame_times.clear()
            self.frame_count = 0
            self.overrun_count = 0
            logger.info("Performance statistics reset")
