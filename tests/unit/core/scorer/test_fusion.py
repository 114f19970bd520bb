"""
Tests for score fusion.
"""
import pytest

from core.scorer.fusion import fuse_scores


class TestFuseScores:

    def test_blend_weights(self):
        fused = fuse_scores(0.5, 1.0)
        assert fused.score == pytest.approx(0.3 * 0.5 + 0.7 * 1.0)
        assert fused.degraded is False
        assert fused.weighted == 1.0

    def test_degraded_uses_similarity_only(self):
        fused = fuse_scores(0.85, None)
        assert fused.score == pytest.approx(0.85)
        assert fused.degraded is True
        assert fused.weighted is None

    def test_degraded_negative_similarity_clamped_to_zero(self):
        fused = fuse_scores(-0.4, None)
        assert fused.score == 0.0
        assert fused.degraded is True
        assert fused.similarity == -0.4

    def test_normal_result_clamped_to_unit_interval(self):
        assert fuse_scores(-1.0, 0.0).score == 0.0
        assert fuse_scores(1.0, 1.5).score == 1.0

    @pytest.mark.parametrize("similarity,weighted", [
        (-1.0, 0.0), (-1.0, 1.0), (0.0, 0.0), (0.2, 0.9), (1.0, 1.0), (0.7, None), (-0.3, None),
    ])
    def test_always_within_bounds(self, similarity, weighted):
        score = fuse_scores(similarity, weighted).score
        assert 0.0 <= score <= 1.0

    def test_custom_weights(self):
        fused = fuse_scores(1.0, 0.0, similarity_weight=0.5, weighted_weight=0.5)
        assert fused.score == pytest.approx(0.5)
