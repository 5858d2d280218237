#!/usr/bin/env python3
"""
DepthGuard 設定管理システム

検出器・警報・入力・表示の設定値を統一管理し、
Magic Numberのハードコーディングを解消します。
"""

import yaml
from dataclasses import dataclass, field, fields, asdict
from typing import Optional, Dict, Any
from pathlib import Path

from depthguard import get_logger
from depthguard.constants import (
    DEFAULT_DEPTH_WIDTH, DEFAULT_DEPTH_HEIGHT, DEFAULT_DEPTH_FPS,
    DEFAULT_MIN_DEPTH_MM, DEFAULT_MAX_DEPTH_MM,
    DEFAULT_DEPTH_THRESHOLD, DEFAULT_MIN_REGION_SIZE, DEFAULT_MIN_REGIONS_FOR_ALARM,
    DEFAULT_ALARM_SOUND, DEFAULT_ALARM_VOLUME,
    DEFAULT_SAMPLE_RATE, DEFAULT_BUFFER_SIZE, DEFAULT_CHANNELS,
)

logger = get_logger(__name__)


@dataclass
class DetectorConfig:
    """動体領域検出設定"""
    width: int = DEFAULT_DEPTH_WIDTH
    height: int = DEFAULT_DEPTH_HEIGHT
    depth_threshold: int = DEFAULT_DEPTH_THRESHOLD   # mm
    min_region_size: int = DEFAULT_MIN_REGION_SIZE   # 画素数

    def validate(self) -> None:
        """
        設定値を検証

        Raises:
            ValueError: 不正な設定値の場合
        """
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid size must be positive, got {self.width}x{self.height}")
        if self.depth_threshold < 0:
            raise ValueError(f"depth_threshold must be >= 0, got {self.depth_threshold}")
        if self.min_region_size < 0:
            raise ValueError(f"min_region_size must be >= 0, got {self.min_region_size}")

    @property
    def pixel_count(self) -> int:
        """グリッドの総画素数"""
        return self.width * self.height


@dataclass
class AlarmConfig:
    """警報設定"""
    sound_file: str = DEFAULT_ALARM_SOUND
    volume: float = DEFAULT_ALARM_VOLUME
    min_regions: int = DEFAULT_MIN_REGIONS_FOR_ALARM
    backend: str = "auto"  # auto / pyo / null

    # オーディオエンジン設定
    sample_rate: int = DEFAULT_SAMPLE_RATE
    buffer_size: int = DEFAULT_BUFFER_SIZE
    channels: int = DEFAULT_CHANNELS
    audio_driver: str = "portaudio"


@dataclass
class InputConfig:
    """入力システム設定"""
    source: str = "mock"  # mock / openni
    fps: int = DEFAULT_DEPTH_FPS
    min_depth: int = DEFAULT_MIN_DEPTH_MM
    max_depth: int = DEFAULT_MAX_DEPTH_MM
    timeout_ms: int = 100

    def validate(self) -> None:
        """
        設定値を検証

        Raises:
            ValueError: 不正な設定値の場合
        """
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.min_depth < 0 or self.min_depth > self.max_depth:
            raise ValueError(f"Invalid depth range [{self.min_depth}, {self.max_depth}]")
        if self.timeout_ms < 0:
            raise ValueError(f"timeout_ms must be >= 0, got {self.timeout_ms}")


@dataclass
class DisplayConfig:
    """表示設定"""
    window_name: str = "DepthGuard"
    enable_display: bool = True
    screenshot_dir: str = "~/Pictures"
    screenshot_prefix: str = "DepthGuardScreenshot"


@dataclass
class DepthGuardConfig:
    """プロジェクト全体設定"""
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    alarm: AlarmConfig = field(default_factory=AlarmConfig)
    input: InputConfig = field(default_factory=InputConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    # ログ設定
    log_level: str = "INFO"
    log_format_style: str = "detailed"
    enable_performance_logging: bool = True


_SECTIONS = ("detector", "alarm", "input", "display")
_TOP_LEVEL_KEYS = ("log_level", "log_format_style", "enable_performance_logging")


class ConfigManager:
    """設定管理クラス"""

    def __init__(self):
        self._config: Optional[DepthGuardConfig] = None
        self._config_file_path: Optional[Path] = None

    def load_config(self, config_file: Optional[Path] = None) -> DepthGuardConfig:
        """
        設定ファイルを読み込み

        Args:
            config_file: 設定ファイルパス（Noneの場合はデフォルト設定）

        Returns:
            読み込まれた設定
        """
        if config_file is None:
            project_root = Path(__file__).parent.parent
            default_paths = [
                project_root / "depthguard.yaml",
                project_root / "config.yaml",
                Path.home() / ".depthguard" / "config.yaml"
            ]

            for path in default_paths:
                if path.exists():
                    config_file = path
                    break

        if config_file and config_file.exists():
            try:
                with open(config_file, 'r', encoding='utf-8') as f:
                    config_dict = yaml.safe_load(f) or {}

                self._config = self._dict_to_config(config_dict)
                self._config_file_path = config_file
                logger.info(f"Configuration loaded from {config_file}")

            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {config_file}: {e}")
                logger.info("Using default configuration")
                self._config = DepthGuardConfig()
        else:
            logger.info("No config file found, using default configuration")
            self._config = DepthGuardConfig()

        return self._config

    def save_config(self, config_file: Optional[Path] = None) -> bool:
        """
        設定をファイルに保存

        Args:
            config_file: 保存先ファイルパス

        Returns:
            保存成功したかどうか
        """
        if self._config is None:
            logger.error("No configuration to save")
            return False

        if config_file is None:
            config_file = self._config_file_path or Path("depthguard.yaml")

        try:
            config_dict = self._config_to_dict(self._config)

            config_file.parent.mkdir(parents=True, exist_ok=True)

            with open(config_file, 'w', encoding='utf-8') as f:
                yaml.dump(config_dict, f, default_flow_style=False,
                          allow_unicode=True, indent=2)

            logger.info(f"Configuration saved to {config_file}")
            return True

        except OSError as e:
            logger.error(f"Failed to save config to {config_file}: {e}")
            return False

    def get_config(self) -> DepthGuardConfig:
        """現在の設定を取得"""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> DepthGuardConfig:
        """辞書を設定オブジェクトに変換"""
        config = DepthGuardConfig()
        if not isinstance(config_dict, dict):
            logger.warning("Config file root is not a mapping, using defaults")
            return config

        for section_name in _SECTIONS:
            section_dict = config_dict.get(section_name)
            if not isinstance(section_dict, dict):
                continue
            section = getattr(config, section_name)
            known = {f.name for f in fields(section)}
            for key, value in section_dict.items():
                if key in known:
                    setattr(section, key, value)
                else:
                    logger.debug(f"Ignoring unknown config key: {section_name}.{key}")

        for key in _TOP_LEVEL_KEYS:
            if key in config_dict:
                setattr(config, key, config_dict[key])

        # 検出器・入力設定は不正値のままにしない
        try:
            config.detector.validate()
        except ValueError as e:
            logger.warning(f"Invalid detector configuration ({e}), using defaults")
            config.detector = DetectorConfig()

        try:
            config.input.validate()
        except ValueError as e:
            logger.warning(f"Invalid input configuration ({e}), using defaults")
            config.input = InputConfig()

        return config

    def _config_to_dict(self, config: DepthGuardConfig) -> Dict[str, Any]:
        """設定オブジェクトを辞書に変換"""
        return asdict(config)


# グローバル設定マネージャー
_config_manager: Optional[ConfigManager] = None

def get_config_manager() -> ConfigManager:
    """グローバル設定マネージャーを取得"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager

def get_config() -> DepthGuardConfig:
    """現在の設定を取得"""
    return get_config_manager().get_config()

def load_config(config_file: Optional[Path] = None) -> DepthGuardConfig:
    """設定を読み込み"""
    return get_config_manager().load_config(config_file)

def save_config(config_file: Optional[Path] = None) -> bool:
    """設定を保存"""
    return get_config_manager().save_config(config_file)
