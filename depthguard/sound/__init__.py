"""
DepthGuard 警報音フェーズ

検出結果に応じて警報音をループ再生・停止するバックエンドを提供します。
"""

from .backend import (
    IAlarmBackend,
    BackendType,
    create_backend,
    get_available_backends,
    is_backend_available,
)
from .backend.null_backend import NullAlarmBackend
from .backend.factory import backend_type_from_name

__all__ = [
    'IAlarmBackend',
    'BackendType',
    'NullAlarmBackend',
    'create_backend',
    'get_available_backends',
    'is_backend_available',
    'backend_type_from_name',
]
