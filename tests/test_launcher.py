"""Tests for the headless launcher path."""

import cv2

from fluidsim.flow.fluid import FluidEngine
from launcher import run_headless


def test_headless_run_saves_image(tmp_path):
    path = tmp_path / 'frame.png'
    with FluidEngine(32, 24, 'fluid', device='cpu') as engine:
        run_headless(engine, frames=5, delta_time=1.0 / 60.0, random_splats=3, save=str(path))
        assert engine.frame == 5

    image = cv2.imread(str(path))
    assert image is not None
    assert image.shape == (24, 32, 3)


def test_headless_run_without_save():
    with FluidEngine(16, 16, 'simple', device='cpu') as engine:
        run_headless(engine, frames=2, delta_time=0.0, random_splats=0, save=None)
        assert engine.time == 0.0
