#!/usr/bin/env python3
"""
深度差分分類のテスト
"""

import numpy as np
import pytest

from depthguard.constants import INVALID_DEPTH_COLOR, MOTION_COLOR, REGION_HIGHLIGHT_COLOR
from depthguard.data_types import MaskTag
from depthguard.detection.diff import DiffClassifier, depth_to_intensity, overlay_regions
from depthguard.detection.topology import GridTopology


@pytest.fixture
def classifier():
    return DiffClassifier(GridTopology(4, 3))


class TestDiffClassifier:
    """画素分類のテスト"""

    def test_identical_grids_are_background(self, classifier):
        """同一フレームは全画素背景、表示はグレー"""
        grid = np.full((3, 4), 1500, dtype=np.uint16)
        mask, display = classifier.classify(grid, grid, 800, 4000, 50)

        assert mask.shape == (3, 4)
        assert display.shape == (3, 4, 3)
        assert np.all(mask == MaskTag.BACKGROUND)
        # グレースケールは3チャンネル同値
        assert np.all(display[..., 0] == display[..., 1])
        assert np.all(display[..., 1] == display[..., 2])

    def test_approach_beyond_threshold_is_changed(self, classifier):
        """閾値を超えて近づいた画素は変化あり・緑"""
        baseline = np.full((3, 4), 2000, dtype=np.uint16)
        current = baseline.copy()
        current[1, 2] = 1900

        mask, display = classifier.classify(current, baseline, 800, 4000, 50)

        assert mask[1, 2] == MaskTag.CHANGED
        assert np.count_nonzero(mask) == 1
        assert tuple(display[1, 2]) == MOTION_COLOR

    def test_receding_is_never_changed(self, classifier):
        """遠ざかった画素は変化なし"""
        baseline = np.full((3, 4), 1000, dtype=np.uint16)
        current = np.full((3, 4), 3000, dtype=np.uint16)

        mask, _ = classifier.classify(current, baseline, 800, 4000, 50)
        assert np.all(mask == MaskTag.BACKGROUND)

    def test_threshold_is_strict(self, classifier):
        """減少量がちょうど閾値の場合は変化なし"""
        baseline = np.full((3, 4), 2000, dtype=np.uint16)
        current = baseline.copy()
        current[0, 0] = 1950
        current[0, 1] = 1949

        mask, _ = classifier.classify(current, baseline, 800, 4000, 50)
        assert mask[0, 0] == MaskTag.BACKGROUND
        assert mask[0, 1] == MaskTag.CHANGED

    def test_invalid_depth_is_dark_blue(self, classifier):
        """有効範囲外の画素は暗い青で、変化扱いしない"""
        baseline = np.full((3, 4), 2000, dtype=np.uint16)
        current = baseline.copy()
        current[0, 0] = 0        # 測定不能
        current[2, 3] = 5000     # 範囲外

        mask, display = classifier.classify(current, baseline, 800, 4000, 50)
        assert mask[0, 0] == MaskTag.BACKGROUND
        assert mask[2, 3] == MaskTag.BACKGROUND
        assert tuple(display[0, 0]) == INVALID_DEPTH_COLOR
        assert tuple(display[2, 3]) == INVALID_DEPTH_COLOR

    def test_unsigned_data_does_not_wrap(self, classifier):
        """uint16 で current > baseline でも差分が折り返さない"""
        baseline = np.full((3, 4), 900, dtype=np.uint16)
        current = np.full((3, 4), 3900, dtype=np.uint16)

        mask, _ = classifier.classify(current, baseline, 800, 4000, 0)
        assert np.all(mask == MaskTag.BACKGROUND)

    def test_zero_baseline_never_changes(self, classifier):
        """ゼロのベースラインに対してはどの画素も変化なし"""
        baseline = np.zeros((3, 4), dtype=np.uint16)
        current = np.full((3, 4), 1000, dtype=np.uint16)

        mask, _ = classifier.classify(current, baseline, 800, 4000, 0)
        assert not mask.any()

    def test_classification_is_idempotent(self, classifier):
        """同じ入力からは同じ出力"""
        rng = np.random.default_rng(7)
        baseline = rng.integers(0, 4500, size=(3, 4)).astype(np.uint16)
        current = rng.integers(0, 4500, size=(3, 4)).astype(np.uint16)

        mask1, display1 = classifier.classify(current, baseline, 800, 4000, 50)
        mask2, display2 = classifier.classify(current, baseline, 800, 4000, 50)
        np.testing.assert_array_equal(mask1, mask2)
        np.testing.assert_array_equal(display1, display2)

    def test_flat_input_is_accepted(self, classifier):
        """平坦配列も同じ画素数なら受け付ける"""
        baseline = np.full(12, 2000, dtype=np.uint16)
        current = baseline.copy()
        current[5] = 1000

        mask, _ = classifier.classify(current, baseline, 800, 4000, 50)
        assert mask.shape == (3, 4)
        assert mask[1, 1] == MaskTag.CHANGED

    def test_shape_mismatch_raises(self, classifier):
        baseline = np.full((3, 4), 2000, dtype=np.uint16)
        with pytest.raises(ValueError):
            classifier.classify(np.full((4, 3), 2000, dtype=np.uint16), baseline, 800, 4000, 50)
        with pytest.raises(ValueError):
            classifier.classify(baseline, np.zeros(11, dtype=np.uint16), 800, 4000, 50)

    def test_inverted_range_raises(self, classifier):
        grid = np.full((3, 4), 2000, dtype=np.uint16)
        with pytest.raises(ValueError):
            classifier.classify(grid, grid, 4000, 800, 50)

    def test_wide_integer_grids(self, classifier):
        """int32 グリッドでも 16bit を超える値を正しく比較する"""
        baseline = np.full((3, 4), 70000, dtype=np.int32)
        current = baseline.copy()
        current[0, 0] = 60000

        mask, _ = classifier.classify(current, baseline, 800, 100000, 50)
        assert mask[0, 0] == MaskTag.CHANGED
        assert np.count_nonzero(mask) == 1


class TestDisplayHelpers:
    """表示バッファ補助関数のテスト"""

    def test_intensity_is_monotonic(self):
        """近いほど明るい"""
        depth = np.arange(800, 4001, 100, dtype=np.uint16)
        intensity = depth_to_intensity(depth, 800, 4000)

        assert intensity[0] == 255
        assert intensity[-1] == 0
        assert np.all(np.diff(intensity.astype(np.int32)) <= 0)

    def test_intensity_clips_out_of_range(self):
        depth = np.array([0, 10000], dtype=np.uint16)
        intensity = depth_to_intensity(depth, 800, 4000)
        assert intensity.tolist() == [255, 0]

    def test_overlay_regions(self):
        """有効領域画素のみ強調色で上書き"""
        display = np.zeros((2, 2, 3), dtype=np.uint8)
        filtered = np.array([[MaskTag.QUALIFYING, MaskTag.BACKGROUND],
                             [MaskTag.BACKGROUND, MaskTag.QUALIFYING]], dtype=np.uint8)

        result = overlay_regions(display, filtered)

        assert result is display
        assert tuple(display[0, 0]) == REGION_HIGHLIGHT_COLOR
        assert tuple(display[1, 1]) == REGION_HIGHLIGHT_COLOR
        assert tuple(display[0, 1]) == (0, 0, 0)
