#!/usr/bin/env python3
"""
Null警報音バックエンド

音を鳴らさないダミーバックエンド。
CI環境やテスト環境、pyoが利用できない場合に使用します。
呼び出し履歴を保持するので、警報の遷移確認にも使えます。
"""

import threading
from typing import Dict, List, Optional, Tuple
from . import IAlarmBackend, BackendType
from ... import get_logger

logger = get_logger(__name__)


class NullAlarmBackend(IAlarmBackend):
    """音響処理を行わないダミーバックエンド"""

    def __init__(self):
        self.initialized = False
        self.running = False
        self.sample_rate = 44100
        self.channels = 2
        self.buffer_size = 256

        self.current_sound: Optional[str] = None
        self.call_history: List[Tuple[str, Optional[str]]] = []
        self._lock = threading.Lock()

        logger.debug("NullAlarmBackend initialized")

    def initialize(self, sample_rate: int, channels: int, buffer_size: int, **kwargs) -> bool:
        """バックエンドを初期化"""
        self.sample_rate = sample_rate
        self.channels = channels
        self.buffer_size = buffer_size
        self.initialized = True
        logger.info(f"NullBackend initialized: {sample_rate}Hz, {channels}ch, {buffer_size} samples")
        return True

    def start(self) -> bool:
        """音響処理を開始"""
        if not self.initialized:
            logger.error("Backend not initialized")
            return False

        self.running = True
        logger.info("NullBackend started (no actual audio output)")
        return True

    def start_looping(self, sound_id: str) -> bool:
        """ループ再生を記録"""
        with self._lock:
            self.current_sound = sound_id
            self.call_history.append(("start_looping", sound_id))
        logger.debug(f"Null loop started: {sound_id}")
        return True

    def stop(self) -> bool:
        """停止を記録"""
        with self._lock:
            self.current_sound = None
            self.call_history.append(("stop", None))
        logger.debug("Null loop stopped")
        return True

    def shutdown(self) -> bool:
        """バックエンドをシャットダウン"""
        with self._lock:
            self.current_sound = None
        self.running = False
        self.initialized = False
        logger.info("NullBackend shutdown")
        return True

    def is_playing(self) -> bool:
        """ループ再生中かどうか"""
        with self._lock:
            return self.current_sound is not None

    def get_backend_type(self) -> BackendType:
        """バックエンドタイプを取得"""
        return BackendType.NULL

    def get_stats(self) -> Dict[str, object]:
        """統計情報を取得"""
        with self._lock:
            starts = sum(1 for name, _ in self.call_history if name == "start_looping")
            stops = sum(1 for name, _ in self.call_history if name == "stop")
        return {
            'playing': self.is_playing(),
            'start_calls': starts,
            'stop_calls': stops,
            'sample_rate': self.sample_rate,
            'running': self.running
        }
