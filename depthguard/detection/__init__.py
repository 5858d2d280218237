"""
DepthGuard 検出フェーズ

深度フレームとベースラインの差分から侵入領域を検出し、警報を判定します。

処理フロー:
1. 差分分類 (diff.py) - 画素ごとの変化判定と表示色
2. 連結領域解析 (regions.py) - フラッドフィルによる成分サイズフィルタ
3. 警報判定 (alarm.py) - 有効領域数と警戒状態による ON/OFF
4. ベースライン取得 (baseline.py) - ワンショットラッチ

セッション (detector.py) がこれらをまとめて1フレームずつ実行します。
"""

from .topology import GridTopology, neighbor_index, NO_NEIGHBOR
from .diff import DiffClassifier, depth_to_intensity, overlay_regions
from .regions import RegionAnalyzer
from .alarm import AlarmDecision
from .baseline import BaselineCapture
from .detector import MotionDetector

__all__ = [
    'GridTopology',
    'neighbor_index',
    'NO_NEIGHBOR',
    'DiffClassifier',
    'depth_to_intensity',
    'overlay_regions',
    'RegionAnalyzer',
    'AlarmDecision',
    'BaselineCapture',
    'MotionDetector',
]
