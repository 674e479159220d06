"""Tests for the field helpers and diagnostics in FlowUtil."""

import numpy as np
import pytest

from fluidsim.gpu import TextureFormat
from fluidsim.flow import FlowUtil


class TestOperations:

    def test_zero_clears_both_buffers(self, make_swap_fbo):
        fbo = make_swap_fbo(3, 3, TextureFormat.R32F, np.ones((3, 3), dtype=np.float32))
        fbo.back_texture.clear(2.0)
        FlowUtil.zero(fbo)
        assert np.all(fbo.texture.read() == 0.0)
        assert np.all(fbo.back_texture.read() == 0.0)

    def test_zero_single_buffer(self, make_fbo):
        fbo = make_fbo(2, 2, TextureFormat.R32F, np.ones((2, 2), dtype=np.float32))
        FlowUtil.zero(fbo)
        assert np.all(fbo.read() == 0.0)

    def test_set_scales_in_place(self, make_swap_fbo):
        fbo = make_swap_fbo(3, 3, TextureFormat.R32F, np.full((3, 3), 4.0, dtype=np.float32))
        FlowUtil.set(fbo, fbo.texture, 0.25)
        np.testing.assert_allclose(fbo.read(), 1.0)

    def test_set_from_other_texture(self, make_swap_fbo, make_fbo):
        fbo = make_swap_fbo(2, 2, TextureFormat.R32F, np.ones((2, 2), dtype=np.float32))
        src = make_fbo(2, 2, TextureFormat.R32F, np.full((2, 2), 3.0, dtype=np.float32))
        FlowUtil.set(fbo, src, 0.5)
        np.testing.assert_allclose(fbo.read(), 1.5)


class TestMetrics:

    def test_total_and_max_abs(self, make_fbo):
        tex = make_fbo(2, 2, TextureFormat.R32F, np.array([[1.0, -4.0], [2.0, 0.5]], dtype=np.float32))
        assert FlowUtil.total(tex) == pytest.approx(-0.5)
        assert FlowUtil.max_abs(tex) == pytest.approx(4.0)

    def test_is_finite(self, make_fbo):
        tex = make_fbo(2, 2)
        assert FlowUtil.is_finite(tex)
        tex.tensor[0, 0, 0] = float('nan')
        assert not FlowUtil.is_finite(tex)

    def test_mean_abs_divergence(self, make_fbo):
        assert FlowUtil.mean_abs_divergence(make_fbo(4, 4, TextureFormat.RG32F)) == 0.0
