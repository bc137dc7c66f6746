"""Shared fixtures for the analysis engine and API tests."""

import io

import numpy as np
import pytest
from PIL import Image

from app import create_app
from services.features import ImageFeatures


class StubRandom:
    """
    Deterministic random source.

    uniform(a, b) returns the point at `fraction` of the interval and
    choice(seq) returns seq[index].
    """

    def __init__(self, fraction=0.5, index=0):
        self.fraction = fraction
        self.index = index

    def uniform(self, a, b):
        return a + (b - a) * self.fraction

    def choice(self, seq):
        return seq[self.index]


def make_features(**overrides) -> ImageFeatures:
    """Feature vector that scores a flat 50 unless overridden."""
    values = dict(
        green_ratio=30.0,
        brown_ratio=0.0,
        yellow_ratio=0.0,
        avg_brightness=30.0,
        avg_red=100.0,
        avg_green=100.0,
        avg_blue=100.0,
        width=100,
        height=100,
        sample_count=100,
    )
    values.update(overrides)
    return ImageFeatures(**values)


def solid_image(color, size=(100, 100)) -> Image.Image:
    return Image.new('RGB', size, color)


def png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def stub_rng():
    return StubRandom()


@pytest.fixture
def healthy_features():
    return make_features(
        green_ratio=80.0,
        brown_ratio=0.0,
        yellow_ratio=0.0,
        avg_brightness=130.0,
        avg_red=90.0,
        avg_green=150.0,
        avg_blue=90.0,
    )


@pytest.fixture
def rusty_wheat_features():
    return make_features(
        green_ratio=10.0,
        yellow_ratio=30.0,
        brown_ratio=5.0,
        avg_brightness=110.0,
        avg_green=80.0,
        avg_red=100.0,
        avg_blue=70.0,
    )


@pytest.fixture
def noise_image():
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, size=(120, 90, 3), dtype=np.uint8)


@pytest.fixture(scope='session')
def app():
    return create_app('testing')


@pytest.fixture
def client(app):
    return app.test_client()
