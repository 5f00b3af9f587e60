import numpy as np
import pytest
from PIL import Image

from logo_cruncher.models import ColorKeyRemover, remove_background
from logo_cruncher.processors.cleanup import is_fully_transparent, trim_transparent

from .helpers import BLACK, RED, WHITE, solid, square_on


def alpha_of(image):
    return np.asarray(image)[:, :, 3]


class TestRemoveBackground:
    def test_tolerance_zero_keys_exact_matches_only(self):
        image = solid((4, 1), WHITE)
        image.putpixel((1, 0), (254, 255, 255))
        image.putpixel((2, 0), (0, 0, 0))

        keyed = remove_background(image, WHITE, tolerance=0)

        assert alpha_of(keyed).tolist() == [[0, 255, 255, 0]]

    def test_tolerance_max_keys_everything(self):
        image = square_on(RED, BLACK, (20, 20), (5, 5, 15, 15))

        keyed = remove_background(image, RED, tolerance=255)

        assert not alpha_of(keyed).any()

    def test_tolerance_is_per_channel(self):
        image = solid((3, 1), (100, 100, 100))
        image.putpixel((1, 0), (130, 70, 130))
        image.putpixel((2, 0), (131, 100, 100))

        keyed = remove_background(image, (100, 100, 100), tolerance=30)

        assert alpha_of(keyed).tolist() == [[0, 0, 255]]

    def test_existing_alpha_is_replaced(self):
        image = solid((2, 1), BLACK, mode="RGBA")
        image.putpixel((0, 0), (0, 0, 0, 0))

        keyed = remove_background(image, RED)

        assert alpha_of(keyed).tolist() == [[255, 255]]

    def test_source_image_is_untouched(self):
        image = solid((5, 5), WHITE, mode="RGBA")

        ColorKeyRemover(WHITE).remove(image)

        assert image.getpixel((0, 0)) == (255, 255, 255, 255)

    def test_invalid_tolerance(self):
        with pytest.raises(ValueError):
            ColorKeyRemover(WHITE, tolerance=300)


class TestTrimTransparent:
    def test_crops_to_opaque_bounding_box(self):
        image = square_on(RED, BLACK, (40, 40), (12, 8, 30, 20))
        keyed = remove_background(image, RED)

        trimmed = trim_transparent(keyed)

        assert trimmed.size == (18, 12)
        assert alpha_of(trimmed).all()

    def test_is_idempotent(self):
        image = Image.new("RGBA", (30, 30), (0, 0, 0, 0))
        image.putpixel((3, 4), (10, 10, 10, 255))
        image.putpixel((20, 25), (10, 10, 10, 1))

        once = trim_transparent(image)
        twice = trim_transparent(once)

        assert once.size == (18, 22)
        assert twice.size == once.size
        assert twice.tobytes() == once.tobytes()

    def test_fully_transparent_returns_sentinel(self):
        trimmed = trim_transparent(Image.new("RGBA", (64, 32), (255, 255, 255, 0)))

        assert trimmed.size == (1, 1)
        assert trimmed.getpixel((0, 0)) == (0, 0, 0, 0)
        assert is_fully_transparent(trimmed)

    def test_opaque_image_is_unchanged(self):
        image = solid((7, 9), RED)

        assert trim_transparent(image).size == (7, 9)

    def test_padding_is_clamped(self):
        image = Image.new("RGBA", (10, 10), (0, 0, 0, 0))
        image.putpixel((1, 1), (0, 0, 0, 255))

        assert trim_transparent(image, pad=3).size == (5, 5)

    def test_white_scenario_reduces_to_sentinel(self):
        keyed = remove_background(solid((100, 100), WHITE), WHITE, tolerance=30)

        assert not alpha_of(keyed).any()
        assert trim_transparent(keyed).size == (1, 1)


def test_is_fully_transparent_on_opaque_modes():
    assert not is_fully_transparent(solid((2, 2), WHITE))
    assert not is_fully_transparent(solid((2, 2), WHITE, mode="RGBA"))
