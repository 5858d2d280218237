#!/usr/bin/env python3
"""
共通型定義

検出パイプライン全体で使用される型定義を一元管理し、
モジュール間の循環依存を解消します。
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Protocol, runtime_checkable
import numpy as np

from depthguard.constants import DEFAULT_MIN_DEPTH_MM, DEFAULT_MAX_DEPTH_MM


# =============================================================================
# マスク・グリッド型定義
# =============================================================================

class MaskTag(IntEnum):
    """画素ごとのマスクタグ"""
    BACKGROUND = 0
    CHANGED = 1      # ベースラインより閾値を超えて近づいた画素
    QUALIFYING = 2   # サイズ閾値を超えた連結領域に属する画素


class Direction(IntEnum):
    """4近傍の方向 (N E S W)"""
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3


MASK_DTYPE = np.uint8


# =============================================================================
# 警報型定義
# =============================================================================

class AlarmState(Enum):
    """警報の状態"""
    SILENT = "silent"
    SOUNDING = "sounding"


class AlarmTransition(Enum):
    """1フレームで発生した警報の遷移"""
    NONE = "none"
    START = "start"
    STOP = "stop"


class CaptureState(Enum):
    """ベースライン取得ラッチの状態"""
    IDLE = "idle"
    PENDING = "pending"


# =============================================================================
# 入力システム型定義
# =============================================================================

@dataclass
class DepthFrame:
    """深度フレームデータ構造"""
    depth: Optional[np.ndarray] = None   # (height, width) 距離[mm]
    min_depth: int = DEFAULT_MIN_DEPTH_MM
    max_depth: int = DEFAULT_MAX_DEPTH_MM
    timestamp_ms: float = 0.0
    frame_number: int = 0

    @property
    def is_valid(self) -> bool:
        """深度データが存在するか"""
        return self.depth is not None and self.depth.size > 0

    @property
    def timestamp(self) -> float:
        """タイムスタンプ（秒）"""
        return self.timestamp_ms / 1000.0


@runtime_checkable
class FrameSource(Protocol):
    """深度フレーム供給元のプロトコル"""

    def start(self) -> bool:
        ...

    def get_frame(self, timeout_ms: int = 100) -> Optional[DepthFrame]:
        ...

    def stop(self) -> None:
        ...


# =============================================================================
# 検出結果型定義
# =============================================================================

@dataclass
class FrameResult:
    """1フレーム分の検出結果"""
    frame_number: int
    armed: bool
    baseline_captured: bool = False
    changed_mask: Optional[np.ndarray] = None
    filtered_mask: Optional[np.ndarray] = None
    qualifying_count: int = 0
    alarm_state: AlarmState = AlarmState.SILENT
    alarm_transition: AlarmTransition = AlarmTransition.NONE
    display_buffer: Optional[np.ndarray] = None
    processing_time_ms: float = 0.0

    @property
    def detection_ran(self) -> bool:
        """このフレームで領域検出が実行されたか"""
        return self.filtered_mask is not None

    @property
    def is_alarm_sounding(self) -> bool:
        return self.alarm_state == AlarmState.SOUNDING
