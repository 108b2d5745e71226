"""Tests for carpet pattern textures and their soft failure."""

import logging

import pytest
from PIL import Image, ImageColor

from decor_gen.descriptors import HangingCarpet, PatternType
from decor_gen.textures import (
    PillowTextureFactory,
    TextureUnavailable,
    carpet_texture,
)

PRIMARY = "#8b0000"
SECONDARY = "#daa520"


def make_carpet(pattern: PatternType) -> HangingCarpet:
    return HangingCarpet(
        id=f"carpet-{pattern.value}",
        start=(0.0, 5.0, 0.0),
        end=(8.0, 5.0, 0.0),
        length=8.0,
        sag=0.4,
        wind_phase=0.0,
        primary_color=PRIMARY,
        secondary_color=SECONDARY,
        pattern=pattern,
        width=2.5,
    )


class BrokenFactory:
    def __init__(self, exc):
        self.exc = exc

    def new_canvas(self, width, height, color):
        raise self.exc


@pytest.fixture
def factory():
    return PillowTextureFactory()


def rgb(hex_color):
    return ImageColor.getrgb(hex_color)


class TestPatterns:
    @pytest.mark.parametrize("pattern", list(PatternType))
    def test_size_and_type(self, factory, pattern):
        img = carpet_texture(make_carpet(pattern), factory)
        assert isinstance(img, Image.Image)
        assert img.size == (512, 512)

    def test_custom_size(self, factory):
        img = carpet_texture(make_carpet(PatternType.MEDALLION), factory, size=64)
        assert img.size == (64, 64)

    def test_striped(self, factory):
        img = carpet_texture(make_carpet(PatternType.STRIPED), factory)
        # 16 bands of 32 px; even bands filled over their top 60%
        assert img.getpixel((100, 5)) == rgb(SECONDARY)
        assert img.getpixel((100, 25)) == rgb(PRIMARY)
        assert img.getpixel((100, 50)) == rgb(PRIMARY)
        assert img.getpixel((100, 70)) == rgb(SECONDARY)

    def test_geometric(self, factory):
        img = carpet_texture(make_carpet(PatternType.GEOMETRIC), factory)
        # cell centres: (0, 0) filled, (1, 0) outlined only
        assert img.getpixel((32, 32)) == rgb(SECONDARY)
        assert img.getpixel((96, 32)) == rgb(PRIMARY)
        assert img.getpixel((0, 0)) == rgb(PRIMARY)

    def test_medallion(self, factory):
        img = carpet_texture(make_carpet(PatternType.MEDALLION), factory)
        assert img.getpixel((10, 256)) == rgb(SECONDARY)  # border
        assert img.getpixel((256, 256)) == rgb(PRIMARY)  # inner disc
        assert img.getpixel((256 + 100, 256)) == rgb(SECONDARY)  # outer disc
        assert img.getpixel((100, 60)) == rgb(PRIMARY)  # field

    def test_deterministic(self, factory):
        a = carpet_texture(make_carpet(PatternType.GEOMETRIC), factory)
        b = carpet_texture(make_carpet(PatternType.GEOMETRIC), factory)
        assert a.tobytes() == b.tobytes()


class TestSoftFailure:
    def test_no_factory(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert carpet_texture(make_carpet(PatternType.STRIPED)) is None
        assert "no texture factory" in caplog.text

    @pytest.mark.parametrize(
        "exc", [TextureUnavailable("no context"), OSError("out of handles")]
    )
    def test_factory_failure(self, exc, caplog):
        carpet = make_carpet(PatternType.MEDALLION)
        with caplog.at_level(logging.WARNING):
            assert carpet_texture(carpet, BrokenFactory(exc)) is None
        assert carpet.id in caplog.text

    def test_other_errors_propagate(self):
        with pytest.raises(ZeroDivisionError):
            carpet_texture(
                make_carpet(PatternType.STRIPED), BrokenFactory(ZeroDivisionError())
            )

    def test_bad_size_is_unavailable(self, factory):
        with pytest.raises(TextureUnavailable):
            factory.new_canvas(0, 512, PRIMARY)
        assert carpet_texture(make_carpet(PatternType.STRIPED), factory, size=0) is None

    def test_unavailable_is_runtime_error(self):
        assert issubclass(TextureUnavailable, RuntimeError)
