#!/usr/bin/env python3
"""
警報判定ステートマシン

毎フレーム、有効領域数と警戒状態から警報の ON/OFF を判定します。
レベルトリガーでデバウンスは行いません。
"""

from typing import Optional

from depthguard import get_logger
from depthguard.constants import DEFAULT_ALARM_SOUND, DEFAULT_MIN_REGIONS_FOR_ALARM
from depthguard.data_types import AlarmState, AlarmTransition
from depthguard.sound.backend import IAlarmBackend

logger = get_logger(__name__)

__all__ = ["AlarmDecision"]


class AlarmDecision:
    """SILENT / SOUNDING の2状態警報判定

    Parameters
    ----------
    sink : IAlarmBackend, optional
        遷移時に start_looping / stop を呼び出す警報音バックエンド
    sound_id : str
        ループ再生するサウンド識別子
    min_regions : int, default 2
        警報に必要な有効領域数。1領域のみは誤検出として扱う
    """

    def __init__(
        self,
        sink: Optional[IAlarmBackend] = None,
        sound_id: str = DEFAULT_ALARM_SOUND,
        min_regions: int = DEFAULT_MIN_REGIONS_FOR_ALARM,
    ) -> None:
        if min_regions < 1:
            raise ValueError(f"min_regions must be >= 1, got {min_regions}")
        self.sink = sink
        self.sound_id = sound_id
        self.min_regions = min_regions
        self.state = AlarmState.SILENT

    @property
    def is_sounding(self) -> bool:
        return self.state == AlarmState.SOUNDING

    def should_sound(self, qualifying_count: int, armed: bool) -> bool:
        """このフレームで警報を鳴らすべきか"""
        return armed and qualifying_count >= self.min_regions

    def update(self, qualifying_count: int, armed: bool) -> AlarmTransition:
        """
        フレームごとの警報判定

        Args:
            qualifying_count: 有効領域数
            armed: 警戒中かどうか

        Returns:
            このフレームで発生した遷移
        """
        if self.should_sound(qualifying_count, armed):
            if self.state == AlarmState.SOUNDING:
                return AlarmTransition.NONE
            self.state = AlarmState.SOUNDING
            logger.info(f"Alarm ON: {qualifying_count} regions detected")
            if self.sink is not None and not self.sink.start_looping(self.sound_id):
                logger.warning(f"Alarm sink failed to start '{self.sound_id}'")
            return AlarmTransition.START

        if self.state == AlarmState.SILENT:
            return AlarmTransition.NONE
        self.state = AlarmState.SILENT
        logger.info(f"Alarm OFF: {qualifying_count} regions, armed={armed}")
        if self.sink is not None and not self.sink.stop():
            logger.warning("Alarm sink failed to stop")
        return AlarmTransition.STOP

    def reset(self) -> AlarmTransition:
        """警報を強制的に停止（シャットダウン時）"""
        return self.update(0, False)
