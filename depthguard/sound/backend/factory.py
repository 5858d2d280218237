#!/usr/bin/env python3
"""
警報音バックエンドファクトリ

利用可能なライブラリに応じて適切なバックエンドを作成します。
"""

from typing import Optional
from . import IAlarmBackend, BackendType
from .null_backend import NullAlarmBackend
from ... import get_logger

logger = get_logger(__name__)

# pyoバックエンドは遅延インポート
_pyo_backend_available = None


def _check_pyo_available() -> bool:
    """pyoの利用可能性をチェック（キャッシュ）"""
    global _pyo_backend_available
    if _pyo_backend_available is None:
        from .pyo_backend import HAS_PYO
        _pyo_backend_available = HAS_PYO
    return _pyo_backend_available


def create_backend(preferred_type: Optional[BackendType] = None, **kwargs) -> IAlarmBackend:
    """
    警報音バックエンドを作成

    Args:
        preferred_type: 優先するバックエンドタイプ。Noneの場合は自動選択。
        **kwargs: PyoAlarmBackend に渡す引数 (volume, sound_dir)

    Returns:
        作成されたバックエンドインスタンス
    """
    if preferred_type == BackendType.NULL:
        logger.info("Creating NullAlarmBackend (explicitly requested)")
        return NullAlarmBackend()

    if preferred_type == BackendType.PYO:
        if _check_pyo_available():
            from .pyo_backend import PyoAlarmBackend
            logger.info("Creating PyoAlarmBackend (explicitly requested)")
            return PyoAlarmBackend(**kwargs)
        else:
            logger.warning("Pyo backend requested but not available, falling back to Null")
            return NullAlarmBackend()

    # 自動選択: Pyoが利用可能ならPyo、そうでなければNull
    if _check_pyo_available():
        from .pyo_backend import PyoAlarmBackend
        logger.info("Creating PyoAlarmBackend (auto-selected)")
        return PyoAlarmBackend(**kwargs)
    else:
        logger.info("Creating NullAlarmBackend (pyo not available)")
        return NullAlarmBackend()


def get_available_backends() -> list[BackendType]:
    """利用可能なバックエンドタイプのリストを取得"""
    available = [BackendType.NULL]  # Nullは常に利用可能

    if _check_pyo_available():
        available.append(BackendType.PYO)

    return available


def is_backend_available(backend_type: BackendType) -> bool:
    """指定されたバックエンドが利用可能かチェック"""
    if backend_type == BackendType.NULL:
        return True
    elif backend_type == BackendType.PYO:
        return _check_pyo_available()
    else:
        return False


def backend_type_from_name(name: str) -> Optional[BackendType]:
    """設定文字列 (auto / pyo / null) をバックエンドタイプに変換"""
    if name == "auto":
        return None
    return BackendType(name)
