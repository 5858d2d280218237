#!/usr/bin/env python3
"""
DepthGuard エントリーポイント

使用方法:
    # モックカメラで侵入シナリオを再生し、起動直後に警戒開始
    python run_depthguard.py --source mock --simulate --arm

    # Kinect (OpenNI2) で実行
    python run_depthguard.py --source openni --threshold 50 --min-region 800

    # ウィンドウなしで300フレーム処理
    python run_depthguard.py --headless --simulate --arm --frames 300 --backend null
"""

import sys
import os

# プロジェクトルートをパスに追加
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, PROJECT_ROOT)

from depthguard.demo.runner import main


if __name__ == '__main__':
    sys.exit(main())
