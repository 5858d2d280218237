#!/usr/bin/env python3
"""
警報音バックエンド抽象化層

異なる音響ライブラリ（pyo, null）を統一インターフェースで利用できます。
"""

from abc import ABC, abstractmethod
from enum import Enum


class BackendType(Enum):
    """バックエンドタイプの列挙"""
    PYO = "pyo"
    NULL = "null"


class IAlarmBackend(ABC):
    """警報音バックエンドインターフェース"""

    @abstractmethod
    def initialize(self, sample_rate: int, channels: int, buffer_size: int, **kwargs) -> bool:
        """バックエンドを初期化"""
        pass

    @abstractmethod
    def start(self) -> bool:
        """音響処理を開始"""
        pass

    @abstractmethod
    def start_looping(self, sound_id: str) -> bool:
        """指定サウンドのループ再生を開始"""
        pass

    @abstractmethod
    def stop(self) -> bool:
        """再生中のサウンドを停止"""
        pass

    @abstractmethod
    def shutdown(self) -> bool:
        """バックエンドをシャットダウン"""
        pass

    @abstractmethod
    def is_playing(self) -> bool:
        """ループ再生中かどうか"""
        pass

    @abstractmethod
    def get_backend_type(self) -> BackendType:
        """バックエンドタイプを取得"""
        pass


# ファクトリ関数のインポート
from .factory import create_backend, get_available_backends, is_backend_available

__all__ = [
    'IAlarmBackend',
    'BackendType',
    'create_backend',
    'get_available_backends',
    'is_backend_available'
]
