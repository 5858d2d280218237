#!/usr/bin/env python3
"""
共通定数・設定値

検出パイプライン全体で使用される定数や閾値を一元管理し、
モジュール間の循環依存を解消します。
"""

from typing import Final, Tuple

# =============================================================================
# 入力（深度センサー）関連
# =============================================================================

# Kinect 深度ストリーム 640x480 @ 30fps
DEFAULT_DEPTH_WIDTH: Final[int] = 640
DEFAULT_DEPTH_HEIGHT: Final[int] = 480
DEFAULT_DEPTH_FPS: Final[int] = 30

# 有効深度範囲（ミリメートル）
DEFAULT_MIN_DEPTH_MM: Final[int] = 800
DEFAULT_MAX_DEPTH_MM: Final[int] = 4000

# =============================================================================
# 検出関連
# =============================================================================

# ベースラインよりこの値(mm)を超えて近づいた画素を「変化あり」とみなす
DEFAULT_DEPTH_THRESHOLD: Final[int] = 50

# この画素数を超える連結領域のみを侵入対象とみなす
DEFAULT_MIN_REGION_SIZE: Final[int] = 800

# 警報に必要な有効領域数（1領域のみは誤検出として扱う）
DEFAULT_MIN_REGIONS_FOR_ALARM: Final[int] = 2

# =============================================================================
# 表示関連 (BGR)
# =============================================================================

INVALID_DEPTH_COLOR: Final[Tuple[int, int, int]] = (50, 0, 0)    # 暗い青
MOTION_COLOR: Final[Tuple[int, int, int]] = (0, 255, 0)          # 緑
REGION_HIGHLIGHT_COLOR: Final[Tuple[int, int, int]] = (0, 0, 255)  # 赤

BYTES_PER_PIXEL: Final[int] = 3

# =============================================================================
# 警報音関連
# =============================================================================

DEFAULT_ALARM_SOUND: Final[str] = "WARNING_INTRUDER.wav"
DEFAULT_ALARM_VOLUME: Final[float] = 0.8
DEFAULT_SAMPLE_RATE: Final[int] = 44100
DEFAULT_BUFFER_SIZE: Final[int] = 256
DEFAULT_CHANNELS: Final[int] = 2

# =============================================================================
# パフォーマンス関連
# =============================================================================

# フレーム処理時間の予算（ミリ秒）
FRAME_BUDGET_MS: Final[float] = 1000.0 / DEFAULT_DEPTH_FPS
PERFORMANCE_HISTORY_SIZE: Final[int] = 120
