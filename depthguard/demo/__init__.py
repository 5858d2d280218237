#!/usr/bin/env python3
"""
DepthGuard デモシステム

引数解析・ビューワー・メインループを提供します。
"""

from .config import (
    DemoConfiguration,
    create_common_argument_parser,
    parse_arguments_to_config,
)
from .viewer import DetectorViewer, ViewerCommand, key_to_command
from .runner import DemoRunner, main

__all__ = [
    # 設定
    'DemoConfiguration',
    'create_common_argument_parser',
    'parse_arguments_to_config',
    # ビューワー
    'DetectorViewer',
    'ViewerCommand',
    'key_to_command',
    # ランナー
    'DemoRunner',
    'main',
]
