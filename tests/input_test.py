#!/usr/bin/env python3
"""
入力フェーズのテスト
モック深度カメラのフレーム生成を検証
"""

import numpy as np
import pytest

from depthguard.data_types import DepthFrame, FrameSource
from depthguard.input import MockDepthCamera, Intruder, OpenNIDepthCamera


class TestMockDepthCamera:
    """MockDepthCameraのテスト"""

    def test_implements_frame_source(self):
        assert isinstance(MockDepthCamera(), FrameSource)
        assert isinstance(OpenNIDepthCamera(), FrameSource)

    def test_no_frame_before_start(self):
        camera = MockDepthCamera(width=8, height=6)
        assert camera.get_frame() is None

    def test_frame_shape_and_type(self):
        with MockDepthCamera(width=8, height=6, background_mm=2000, noise_mm=5, seed=0) as camera:
            frame = camera.get_frame()

        assert isinstance(frame, DepthFrame)
        assert frame.is_valid
        assert frame.depth.shape == (6, 8)
        assert frame.depth.dtype == np.uint16
        assert frame.frame_number == 1
        assert np.all(np.abs(frame.depth.astype(np.int32) - 2000) <= 5)

    def test_noise_free_frame(self):
        with MockDepthCamera(width=4, height=4, background_mm=1500, noise_mm=0) as camera:
            frame = camera.get_frame()
        assert np.all(frame.depth == 1500)

    def test_intruder_window(self):
        """侵入者は指定フレーム範囲のみ出現"""
        intruder = Intruder(row=1, col=2, height=2, width=3, depth_mm=900,
                            start_frame=2, end_frame=3)
        with MockDepthCamera(width=8, height=6, noise_mm=0, intruders=[intruder]) as camera:
            frames = [camera.get_frame() for _ in range(4)]

        assert not np.any(frames[0].depth == 900)
        assert np.all(frames[1].depth[1:3, 2:5] == 900)
        assert np.count_nonzero(frames[2].depth == 900) == 6
        assert not np.any(frames[3].depth == 900)

    def test_intruder_without_end(self):
        intruder = Intruder(row=0, col=0, height=1, width=1, depth_mm=1000)
        assert intruder.is_active(1)
        assert intruder.is_active(10000)
        assert not Intruder(0, 0, 1, 1, 1000, start_frame=5).is_active(4)

    def test_add_intruder(self):
        camera = MockDepthCamera(width=4, height=4, noise_mm=0)
        camera.add_intruder(Intruder(row=0, col=0, height=2, width=2, depth_mm=1000))
        with camera:
            frame = camera.get_frame()
        assert np.count_nonzero(frame.depth == 1000) == 4

    def test_dropout(self):
        """欠損画素は0（有効範囲外）になる"""
        with MockDepthCamera(width=64, height=48, noise_mm=0, dropout_ratio=0.5, seed=3) as camera:
            frame = camera.get_frame()
        zeros = np.count_nonzero(frame.depth == 0)
        assert 0 < zeros < frame.depth.size

    def test_stop(self):
        camera = MockDepthCamera(width=4, height=4)
        camera.start()
        assert camera.get_frame() is not None
        camera.stop()
        assert camera.get_frame() is None


class TestOpenNIDepthCamera:

    def test_get_frame_before_start(self):
        assert OpenNIDepthCamera().get_frame() is None

    def test_stop_without_start(self):
        OpenNIDepthCamera().stop()
