#!/usr/bin/env python3
"""
DepthGuard デモランナー

フレーム取得 → 検出 → 表示・警報 のメインループを実行します。
"""

import signal
import time
import traceback
from typing import Optional

from .config import DemoConfiguration, create_common_argument_parser, parse_arguments_to_config
from .viewer import DetectorViewer, ViewerCommand
from ..data_types import FrameResult, FrameSource, AlarmTransition
from ..detection.detector import MotionDetector
from ..input import MockDepthCamera, Intruder, OpenNIDepthCamera
from ..sound.backend import IAlarmBackend, create_backend
from ..sound.backend.factory import backend_type_from_name
from .. import setup_logging, get_logger

THRESHOLD_STEP_MM = 10
MIN_REGION_STEP_PX = 100


def build_demo_intruders(width: int, height: int) -> list:
    """モック用の侵入シナリオ（2体が出現して退出する）"""
    block_h, block_w = height // 4, width // 6
    return [
        Intruder(row=height // 3, col=width // 8, height=block_h, width=block_w,
                 depth_mm=1200, start_frame=60, end_frame=180),
        Intruder(row=height // 2, col=width // 2, height=block_h, width=block_w,
                 depth_mm=1500, start_frame=90, end_frame=150),
    ]


class DemoRunner:
    """デモランナー"""

    def __init__(self, config: DemoConfiguration):
        self.config = config
        self.logger = get_logger(__name__)
        self.source: Optional[FrameSource] = None
        self.backend: Optional[IAlarmBackend] = None
        self.detector: Optional[MotionDetector] = None
        self.viewer: Optional[DetectorViewer] = None
        self.is_running = False

        setup_logging(level=config.log_level, format_style=config.app.log_format_style)

        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum: int, frame) -> None:
        """シグナルハンドラ"""
        self.logger.info(f"Signal {signum} received, shutting down...")
        self.is_running = False

    # ------------------------------------------------------------------
    # 構築
    # ------------------------------------------------------------------
    def _create_source(self) -> FrameSource:
        app = self.config.app
        if app.input.source == "openni":
            return OpenNIDepthCamera(min_depth=app.input.min_depth, max_depth=app.input.max_depth)

        intruders = []
        if self.config.simulate_intruders:
            intruders = build_demo_intruders(app.detector.width, app.detector.height)
        return MockDepthCamera(
            width=app.detector.width,
            height=app.detector.height,
            intruders=intruders,
            min_depth=app.input.min_depth,
            max_depth=app.input.max_depth,
        )

    def _create_backend(self) -> IAlarmBackend:
        alarm = self.config.app.alarm
        backend = create_backend(backend_type_from_name(alarm.backend), volume=alarm.volume)
        if not backend.initialize(alarm.sample_rate, alarm.channels, alarm.buffer_size,
                                  audio_driver=alarm.audio_driver):
            self.logger.warning("Alarm backend initialization failed; alarm will be silent")
        elif not backend.start():
            self.logger.warning("Alarm backend could not start; alarm will be silent")
        return backend

    # ------------------------------------------------------------------
    # 実行
    # ------------------------------------------------------------------
    def run(self) -> int:
        """デモを実行"""
        try:
            app = self.config.app
            self.source = self._create_source()
            if not self.source.start():
                self.logger.error("Frame source could not be started")
                return 1

            self.backend = self._create_backend()
            self.detector = MotionDetector(app.detector, self.backend, app.alarm,
                                           budget_ms=1000.0 / app.input.fps,
                                           log_overruns=app.enable_performance_logging)
            if not self.config.headless:
                self.viewer = DetectorViewer(
                    window_name=app.display.window_name,
                    screenshot_dir=app.display.screenshot_dir,
                    screenshot_prefix=app.display.screenshot_prefix,
                )
                self._print_controls()

            if self.config.arm_on_start:
                self.detector.request_baseline_capture()

            self._main_loop()
            return 0

        except KeyboardInterrupt:
            self.logger.info("Demo interrupted by user")
            return 0
        finally:
            self._cleanup()

    def _main_loop(self) -> None:
        app = self.config.app
        frame_interval = 1.0 / app.input.fps
        pace = isinstance(self.source, MockDepthCamera)
        frames = 0
        self.is_running = True

        while self.is_running:
            started = time.perf_counter()
            frame = self.source.get_frame(app.input.timeout_ms)
            result = self.detector.process_frame(frame)
            if frame is not None:
                frames += 1

            if result is not None:
                self._handle_result(result)

            if self.viewer is not None:
                self._handle_command(self.viewer.poll_command())

            if self.config.max_frames is not None and frames >= self.config.max_frames:
                self.logger.info(f"Processed {frames} frames, stopping")
                break

            if pace:
                remaining = frame_interval - (time.perf_counter() - started)
                if remaining > 0:
                    time.sleep(remaining)

    def _handle_result(self, result: FrameResult) -> None:
        if result.baseline_captured:
            self.logger.info(f"Frame {result.frame_number}: baseline captured, armed")
            return
        if result.alarm_transition != AlarmTransition.NONE:
            self.logger.info(
                f"Frame {result.frame_number}: alarm {result.alarm_transition.value} "
                f"({result.qualifying_count} regions)"
            )
        if self.viewer is not None:
            self.viewer.show(result)

    def _handle_command(self, command: ViewerCommand) -> None:
        if command == ViewerCommand.NONE:
            return
        if command == ViewerCommand.QUIT:
            self.is_running = False
        elif command == ViewerCommand.CAPTURE_BASELINE:
            self.detector.request_baseline_capture()
        elif command == ViewerCommand.SCREENSHOT:
            self.viewer.save_screenshot()
            self.detector.request_baseline_capture()
        elif command == ViewerCommand.DISARM:
            self.detector.disarm()
        elif command in (ViewerCommand.THRESHOLD_UP, ViewerCommand.THRESHOLD_DOWN):
            step = THRESHOLD_STEP_MM if command == ViewerCommand.THRESHOLD_UP else -THRESHOLD_STEP_MM
            new_threshold = max(0, self.detector.config.depth_threshold + step)
            self.detector.reconfigure(depth_threshold=new_threshold)
        elif command in (ViewerCommand.MIN_REGION_UP, ViewerCommand.MIN_REGION_DOWN):
            step = MIN_REGION_STEP_PX if command == ViewerCommand.MIN_REGION_UP else -MIN_REGION_STEP_PX
            new_size = max(0, self.detector.config.min_region_size + step)
            self.detector.reconfigure(min_region_size=new_size)
        elif command == ViewerCommand.PERFORMANCE:
            stats = self.detector.get_performance_stats()
            self.logger.info(
                f"Frames: {stats['frames']}, avg {stats['avg_frame_ms']:.1f}ms, "
                f"max {stats['max_frame_ms']:.1f}ms, overruns {stats['overruns']}"
            )

    def _print_controls(self) -> None:
        """コントロール表示"""
        print("\n=== DepthGuard ===")
        print("\n=== コントロール ===")
        print("ESC/Q: 終了")
        print("B: ベースライン取得・警戒開始")
        print("S: スクリーンショット保存 + ベースライン取得")
        print("D: 警戒解除")
        print("+/-: 深度閾値調整")
        print("[/]: 最小領域サイズ調整")
        print("P: パフォーマンス統計表示")
        print("==================\n")

    def _cleanup(self) -> None:
        """クリーンアップ処理"""
        if self.detector is not None:
            self.detector.shutdown()
        if self.backend is not None:
            self.backend.shutdown()
        if self.source is not None:
            self.source.stop()
        if self.viewer is not None:
            self.viewer.cleanup()


def main() -> int:
    """メイン関数"""
    try:
        parser = create_common_argument_parser()
        args = parser.parse_args()

        config = parse_arguments_to_config(args)

        runner = DemoRunner(config)
        return runner.run()

    except Exception as e:
        print(f"Fatal error: {e}")
        traceback.print_exc()
        return 1


if __name__ == '__main__':
    raise SystemExit(main())
