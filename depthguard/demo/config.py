#!/usr/bin/env python3
"""
DepthGuard デモ設定モジュール

コマンドライン引数を解析し、YAML 設定と統合したデモ設定を作成します。
"""

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..config import DepthGuardConfig, load_config
from .. import get_logger

logger = get_logger(__name__)


@dataclass
class DemoConfiguration:
    """デモ実行設定"""
    app: DepthGuardConfig = field(default_factory=DepthGuardConfig)

    # 実行制御
    headless: bool = False
    max_frames: Optional[int] = None
    arm_on_start: bool = False
    simulate_intruders: bool = False

    @property
    def log_level(self) -> str:
        return self.app.log_level


def create_common_argument_parser() -> argparse.ArgumentParser:
    """引数パーサーを作成"""
    parser = argparse.ArgumentParser(
        description="DepthGuard 深度センサー侵入検知",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument('--config', type=str, default=None,
                        help='YAML設定ファイル')
    parser.add_argument('--log-level',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default=None,
                        help='ログレベル（設定ファイルより優先）')

    # 入力系オプション
    input_group = parser.add_argument_group('入力系オプション')
    input_group.add_argument('--source', choices=['mock', 'openni'], default=None,
                             help='深度フレームの取得元')
    input_group.add_argument('--fps', type=int, default=None,
                             help='フレームレート（モックカメラの再生速度と処理予算）')
    input_group.add_argument('--frames', type=int, default=None,
                             help='処理するフレーム数（省略時は無制限）')
    input_group.add_argument('--simulate', action='store_true',
                             help='モックカメラに侵入者を出現させる')

    # 検出系オプション
    detect_group = parser.add_argument_group('検出オプション')
    detect_group.add_argument('--threshold', type=int, default=None,
                              help='変化とみなす距離減少量 (mm)')
    detect_group.add_argument('--min-region', type=int, default=None,
                              help='有効領域の最小画素数')
    detect_group.add_argument('--arm', action='store_true',
                              help='起動直後にベースラインを取得して警戒する')

    # 警報系オプション
    alarm_group = parser.add_argument_group('警報オプション')
    alarm_group.add_argument('--backend', choices=['auto', 'pyo', 'null'], default=None,
                             help='警報音バックエンド')
    alarm_group.add_argument('--sound-file', type=str, default=None,
                             help='警報音 WAV ファイル')

    # UI設定オプション
    ui_group = parser.add_argument_group('UI設定オプション')
    ui_group.add_argument('--headless', action='store_true',
                          help='ウィンドウを表示しない')

    return parser


def parse_arguments_to_config(args: argparse.Namespace) -> DemoConfiguration:
    """引数をDemoConfigurationに変換（指定された引数のみ設定ファイルを上書き）"""
    app = load_config(Path(args.config) if args.config else None)

    if args.log_level is not None:
        app.log_level = args.log_level
    if args.source is not None:
        app.input.source = args.source
    if args.fps is not None:
        app.input.fps = args.fps
    if args.threshold is not None:
        app.detector.depth_threshold = args.threshold
    if args.min_region is not None:
        app.detector.min_region_size = args.min_region
    if args.backend is not None:
        app.alarm.backend = args.backend
    if args.sound_file is not None:
        app.alarm.sound_file = args.sound_file
    if args.headless:
        app.display.enable_display = False

    app.detector.validate()
    app.input.validate()

    return DemoConfiguration(
        app=app,
        headless=not app.display.enable_display,
        max_frames=args.frames,
        arm_on_start=args.arm,
        simulate_intruders=args.simulate,
    )


__all__ = [
    'DemoConfiguration',
    'create_common_argument_parser',
    'parse_arguments_to_config',
]
