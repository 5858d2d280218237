#!/usr/bin/env python3
"""
Pyo警報音バックエンド

pyoライブラリのラッパー実装。
WAVファイルを SfPlayer でループ再生します。
"""

import threading
from pathlib import Path
from typing import Dict, Optional, Any
from . import IAlarmBackend, BackendType
from ... import get_logger

logger = get_logger(__name__)

try:
    import pyo
    HAS_PYO = True
except ImportError:
    HAS_PYO = False
    pyo = None
    logger.warning("pyo not available. PyoAlarmBackend will not function.")


class PyoAlarmBackend(IAlarmBackend):
    """pyo警報音バックエンド"""

    def __init__(self, volume: float = 0.8, sound_dir: Optional[Path] = None):
        if not HAS_PYO:
            raise RuntimeError("pyo library is not available")

        self.server: Optional[Any] = None
        self.initialized = False
        self.running = False
        self.volume = volume
        self.sound_dir = sound_dir

        self._player: Optional[Any] = None
        self._current_sound: Optional[str] = None
        self._lock = threading.Lock()

        logger.debug("PyoAlarmBackend initialized")

    def initialize(self, sample_rate: int, channels: int, buffer_size: int, **kwargs) -> bool:
        """バックエンドを初期化"""
        try:
            audio_driver = kwargs.get('audio_driver', 'portaudio')

            self.server = pyo.Server(
                sr=sample_rate,
                nchnls=channels,
                buffersize=buffer_size,
                duplex=0,
                audio=audio_driver
            )

            self.server.boot()
            self.initialized = True
            logger.info(f"PyoBackend initialized: {sample_rate}Hz, {channels}ch, {buffer_size} samples")
            return True

        except Exception as e:
            logger.exception(f"Failed to initialize PyoBackend: {e}")
            return False

    def start(self) -> bool:
        """音響処理を開始"""
        if not self.initialized or not self.server:
            logger.error("Backend not initialized")
            return False

        try:
            self.server.start()
            self.running = True
            logger.info("PyoBackend started")
            return True
        except Exception as e:
            logger.exception(f"Failed to start PyoBackend: {e}")
            return False

    def _resolve(self, sound_id: str) -> Path:
        path = Path(sound_id).expanduser()
        if not path.is_absolute() and self.sound_dir is not None:
            path = self.sound_dir / path
        return path

    def start_looping(self, sound_id: str) -> bool:
        """サウンドファイルのループ再生を開始"""
        if not self.running:
            logger.error("Cannot play alarm: backend not running")
            return False

        path = self._resolve(sound_id)
        if not path.exists():
            logger.error(f"Alarm sound not found: {path}")
            return False

        try:
            with self._lock:
                if self._player is not None:
                    self._player.stop()
                self._player = pyo.SfPlayer(str(path), loop=True, mul=self.volume).out()
                self._current_sound = sound_id
            logger.debug(f"Looping alarm sound: {path}")
            return True
        except Exception as e:
            logger.exception(f"Error starting alarm sound {path}: {e}")
            return False

    def stop(self) -> bool:
        """ループ再生を停止"""
        with self._lock:
            if self._player is None:
                return True
            try:
                self._player.stop()
                return True
            except Exception as e:
                logger.error(f"Error stopping alarm sound: {e}")
                return False
            finally:
                self._player = None
                self._current_sound = None

    def shutdown(self) -> bool:
        """バックエンドをシャットダウン"""
        try:
            self.stop()

            if self.server:
                self.server.stop()
                self.server.shutdown()
                self.server = None

            self.running = False
            self.initialized = False
            logger.info("PyoBackend shutdown")
            return True

        except Exception as e:
            logger.exception(f"Error shutting down PyoBackend: {e}")
            return False

    def is_playing(self) -> bool:
        """ループ再生中かどうか"""
        with self._lock:
            return self._player is not None

    def get_backend_type(self) -> BackendType:
        """バックエンドタイプを取得"""
        return BackendType.PYO

    def get_stats(self) -> Dict[str, Any]:
        """統計情報を取得"""
        stats: Dict[str, Any] = {
            'playing': self.is_playing(),
            'current_sound': self._current_sound,
            'running': self.running
        }

        if self.server:
            stats.update({
                'sample_rate': self.server.getSamplingRate(),
                'buffer_size': self.server.getBufferSize(),
                'channels': self.server.getNchnls()
            })

        return stats
