"""
パフォーマンス測定パッケージ
"""

from .profiler import PhaseTimer, FrameBudgetMonitor

__all__ = ['PhaseTimer', 'FrameBudgetMonitor']
