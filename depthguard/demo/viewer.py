#!/usr/bin/env python3
"""
検出結果ビューワー

表示バッファを OpenCV ウィンドウに描画し、キー操作をコマンドに変換します。
スクリーンショットの保存失敗は検出器の状態に影響しません。
"""

import time
from enum import Enum
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from ..data_types import FrameResult
from .. import get_logger

logger = get_logger(__name__)


class ViewerCommand(Enum):
    """キー操作から得られるコマンド"""
    NONE = "none"
    QUIT = "quit"
    CAPTURE_BASELINE = "capture_baseline"
    SCREENSHOT = "screenshot"          # 保存後にベースライン取得も行う
    DISARM = "disarm"
    THRESHOLD_UP = "threshold_up"
    THRESHOLD_DOWN = "threshold_down"
    MIN_REGION_UP = "min_region_up"
    MIN_REGION_DOWN = "min_region_down"
    PERFORMANCE = "performance"


_KEY_COMMANDS = {
    27: ViewerCommand.QUIT,            # ESC
    ord('q'): ViewerCommand.QUIT,
    ord('b'): ViewerCommand.CAPTURE_BASELINE,
    ord('s'): ViewerCommand.SCREENSHOT,
    ord('d'): ViewerCommand.DISARM,
    ord('+'): ViewerCommand.THRESHOLD_UP,
    ord('='): ViewerCommand.THRESHOLD_UP,
    ord('-'): ViewerCommand.THRESHOLD_DOWN,
    ord(']'): ViewerCommand.MIN_REGION_UP,
    ord('['): ViewerCommand.MIN_REGION_DOWN,
    ord('p'): ViewerCommand.PERFORMANCE,
}


def key_to_command(key: int) -> ViewerCommand:
    """cv2.waitKey の戻り値をコマンドに変換"""
    if key < 0:
        return ViewerCommand.NONE
    key &= 0xFF
    if ord('A') <= key <= ord('Z'):
        key += ord('a') - ord('A')
    return _KEY_COMMANDS.get(key, ViewerCommand.NONE)


class DetectorViewer:
    """OpenCV ウィンドウによる表示シンク"""

    def __init__(
        self,
        window_name: str = "DepthGuard",
        screenshot_dir: str = "~/Pictures",
        screenshot_prefix: str = "DepthGuardScreenshot",
    ):
        self.window_name = window_name
        self.screenshot_dir = Path(screenshot_dir).expanduser()
        self.screenshot_prefix = screenshot_prefix
        self._last_image: Optional[np.ndarray] = None
        self._window_created = False

    def show(self, result: FrameResult) -> None:
        """検出結果を描画"""
        if result.display_buffer is None:
            return

        image = result.display_buffer.copy()
        status = "ARMED" if result.armed else "DISARMED"
        if result.is_alarm_sounding:
            status += " / ALARM"
        text = f"{status}  regions={result.qualifying_count}  {result.processing_time_ms:.1f}ms"
        color = (0, 0, 255) if result.is_alarm_sounding else (255, 255, 255)
        cv2.putText(image, text, (10, 24), cv2.FONT_HERSHEY_SIMPLEX, 0.6, color, 2)

        if not self._window_created:
            cv2.namedWindow(self.window_name, cv2.WINDOW_AUTOSIZE)
            self._window_created = True
        cv2.imshow(self.window_name, image)
        self._last_image = image

    def poll_command(self, wait_ms: int = 1) -> ViewerCommand:
        """キー入力を取得してコマンドに変換"""
        return key_to_command(cv2.waitKey(wait_ms))

    def save_screenshot(self, image: Optional[np.ndarray] = None) -> Optional[Path]:
        """
        表示中の画像を PNG として保存

        Returns:
            保存先パス。保存できなかった場合は None
        """
        image = image if image is not None else self._last_image
        if image is None:
            logger.warning("Nothing to save yet")
            return None

        path = self.screenshot_dir / f"{self.screenshot_prefix}-{time.strftime('%H-%M-%S')}.png"
        try:
            self.screenshot_dir.mkdir(parents=True, exist_ok=True)
            if not cv2.imwrite(str(path), image):
                logger.error(f"Screenshot write failed: {path}")
                return None
        except (OSError, cv2.error) as e:
            logger.error(f"Screenshot write failed: {path} ({e})")
            return None

        logger.info(f"Screenshot saved: {path}")
        return path

    def cleanup(self) -> None:
        """ウィンドウを破棄"""
        if self._window_created:
            cv2.destroyWindow(self.window_name)
            self._window_created = False
