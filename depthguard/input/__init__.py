"""
入力フェーズパッケージ
深度センサー（またはモック）からの距離グリッド取得
"""

from .mock_camera import MockDepthCamera, Intruder
from .openni_camera import OpenNIDepthCamera

__all__ = [
    'MockDepthCamera',
    'Intruder',
    'OpenNIDepthCamera',
]
