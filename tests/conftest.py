#!/usr/bin/env python3
"""
pytest共通設定とフィクスチャ

テスト実行時の共通設定、モック、フィクスチャを提供します。
"""

import pytest
import logging
import sys
import os
import numpy as np
from typing import Callable, Optional
from dataclasses import dataclass

# プロジェクトルートのパス追加
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from depthguard import setup_logging, get_logger
from depthguard.config import DetectorConfig, AlarmConfig
from depthguard.data_types import DepthFrame
from depthguard.detection.detector import MotionDetector
from depthguard.sound.backend.null_backend import NullAlarmBackend

# =============================================================================
# テストロギング設定
# =============================================================================

@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    """テスト全体のロギング設定"""
    setup_logging(level="DEBUG")
    logger = get_logger("test")
    logger.info("=== テストセッション開始 ===")
    yield
    logger.info("=== テストセッション終了 ===")


@pytest.fixture
def test_logger():
    """テスト用ロガー"""
    return get_logger("test")


# =============================================================================
# パフォーマンス計測
# =============================================================================

@dataclass
class PerformanceMeasurement:
    """パフォーマンス計測結果"""
    execution_time_ms: float
    memory_usage_mb: float
    target_met: bool = False

    def log_results(self, logger: logging.Logger, test_name: str, target_ms: Optional[float] = None):
        """結果をログ出力"""
        logger.info(f"=== {test_name} パフォーマンス結果 ===")
        logger.info(f"実行時間: {self.execution_time_ms:.3f}ms")
        logger.info(f"メモリ使用量: {self.memory_usage_mb:.2f}MB")
        if target_ms:
            self.target_met = self.execution_time_ms <= target_ms
            status = "✓ 達成" if self.target_met else "✗ 未達成"
            logger.info(f"目標時間: {target_ms}ms {status}")


@pytest.fixture
def performance_tracker():
    """パフォーマンス計測ユーティリティ"""
    import time
    import psutil
    import gc

    class PerformanceTracker:
        def __init__(self):
            self.start_time = None
            self.start_memory = None

        def start(self):
            """計測開始"""
            gc.collect()
            self.start_time = time.perf_counter()
            self.start_memory = psutil.Process().memory_info().rss / 1024 / 1024

        def stop(self) -> PerformanceMeasurement:
            """計測終了"""
            end_time = time.perf_counter()
            end_memory = psutil.Process().memory_info().rss / 1024 / 1024
            return PerformanceMeasurement(
                execution_time_ms=(end_time - self.start_time) * 1000,
                memory_usage_mb=end_memory - self.start_memory,
            )

    return PerformanceTracker()


# =============================================================================
# テストデータフィクスチャ
# =============================================================================

@pytest.fixture
def null_backend() -> NullAlarmBackend:
    """起動済みの Null 警報バックエンド"""
    backend = NullAlarmBackend()
    backend.initialize(44100, 2, 256)
    backend.start()
    yield backend
    backend.shutdown()


@pytest.fixture
def flat_grid() -> Callable[..., np.ndarray]:
    """一様距離のグリッド生成器"""
    def _make(width: int, height: int, value: int = 1000) -> np.ndarray:
        return np.full((height, width), value, dtype=np.uint16)
    return _make


@pytest.fixture
def make_frame() -> Callable[..., DepthFrame]:
    """DepthFrame 生成器（フレーム番号は自動採番）"""
    counter = {"n": 0}

    def _make(depth: np.ndarray, min_depth: int = 800, max_depth: int = 4000) -> DepthFrame:
        counter["n"] += 1
        return DepthFrame(depth=depth, min_depth=min_depth, max_depth=max_depth,
                          frame_number=counter["n"])
    return _make


@pytest.fixture
def make_detector(null_backend) -> Callable[..., MotionDetector]:
    """MotionDetector 生成器（Null バックエンド接続済み）"""
    def _make(width: int, height: int, threshold: int = 50, min_region_size: int = 800) -> MotionDetector:
        config = DetectorConfig(width=width, height=height,
                                depth_threshold=threshold, min_region_size=min_region_size)
        return MotionDetector(config, alarm_backend=null_backend, alarm_config=AlarmConfig())
    return _make


# =============================================================================
# テストスイート選択
# =============================================================================

def pytest_collection_modifyitems(config, items):
    """テスト収集時の自動マーカー付与"""
    for item in items:
        if "performance" in item.nodeid:
            item.add_marker(pytest.mark.performance)
            item.add_marker(pytest.mark.slow)
        elif "integration" in item.nodeid or "scenario" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        elif "test_" in item.name:
            item.add_marker(pytest.mark.unit)
