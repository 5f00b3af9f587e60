import json

import pytest
from PIL import Image

from logo_cruncher.errors import DecodeError, NotFoundError
from logo_cruncher.jobs import LogoJob, jobs_from_directory, load_json_jobs
from logo_cruncher.processors.loader import flatten_to_rgb, load_image, resolve_image_path

from .helpers import RED, WHITE, solid


class TestResolveImagePath:
    def test_existing_path_is_used_as_is(self, tmp_path):
        path = tmp_path / "3"
        solid((2, 2), RED).save(path, "PNG")

        assert resolve_image_path(path) == path

    def test_extensions_are_probed_in_order(self, tmp_path):
        solid((2, 2), RED).save(tmp_path / "3.jpg")
        solid((2, 2), RED).save(tmp_path / "3.png")

        assert resolve_image_path(tmp_path / "3") == tmp_path / "3.png"

    def test_falls_through_to_later_extensions(self, tmp_path):
        solid((2, 2), RED).save(tmp_path / "3.bmp")

        assert resolve_image_path(tmp_path / "3") == tmp_path / "3.bmp"

    def test_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError):
            resolve_image_path(tmp_path / "404")


class TestLoadImage:
    @pytest.mark.parametrize("ext", ["png", "jpg", "gif", "webp", "bmp", "ico"])
    def test_common_formats(self, tmp_path, ext):
        solid((16, 16), RED).save(tmp_path / f"1.{ext}")

        image = load_image(tmp_path / "1")

        assert image.size == (16, 16)

    def test_garbage_raises_decode_error(self, tmp_path):
        (tmp_path / "1.png").write_bytes(b"definitely not a png")

        with pytest.raises(DecodeError):
            load_image(tmp_path / "1")

    def test_missing_raises_not_found(self, tmp_path):
        with pytest.raises(NotFoundError):
            load_image(tmp_path / "1")


def test_flatten_turns_non_opaque_pixels_white():
    image = Image.new("RGBA", (3, 1), (10, 20, 30, 255))
    image.putpixel((1, 0), (10, 20, 30, 128))
    image.putpixel((2, 0), (10, 20, 30, 0))

    flat = flatten_to_rgb(image)

    assert flat.mode == "RGB"
    assert [flat.getpixel((x, 0)) for x in range(3)] == [(10, 20, 30), WHITE, WHITE]


def test_flatten_grayscale_with_alpha():
    image = Image.new("LA", (2, 1), (0, 255))
    image.putpixel((1, 0), (0, 0))

    flat = flatten_to_rgb(image)

    assert [flat.getpixel((x, 0)) for x in range(2)] == [(0, 0, 0), WHITE]


def test_flatten_palette_with_alpha():
    image = Image.new("LA", (2, 1), (1, 255))
    image.putpalette([0, 0, 0, 255, 0, 0])
    image.putpixel((1, 0), (1, 0))
    assert image.mode == "PA"

    flat = flatten_to_rgb(image)

    assert [flat.getpixel((x, 0)) for x in range(2)] == [RED, WHITE]


def test_flatten_palette_transparency(tmp_path):
    image = Image.new("P", (2, 1), 1)
    image.putpalette([0, 0, 0, 255, 0, 0])
    image.putpixel((1, 0), 0)
    image.save(tmp_path / "1.png", transparency=0)

    flat = flatten_to_rgb(load_image(tmp_path / "1"))

    assert [flat.getpixel((x, 0)) for x in range(2)] == [RED, WHITE]


def test_flatten_keeps_opaque_modes():
    flat = flatten_to_rgb(solid((2, 2), RED).convert("L"))

    assert flat.mode == "RGB"


class TestJobs:
    def test_load_json_jobs(self, tmp_path):
        path = tmp_path / "job.json"
        path.write_text(json.dumps([{"id": 2, "url": "http://a/b.png"}, {"id": 1}]))

        jobs = load_json_jobs(path)

        assert jobs == [LogoJob(2, "http://a/b.png"), LogoJob(1)]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "job.json"
        path.write_text("{not json")

        with pytest.raises(ValueError):
            load_json_jobs(path)

    def test_entry_without_id(self, tmp_path):
        path = tmp_path / "job.json"
        path.write_text(json.dumps([{"url": "x"}]))

        with pytest.raises(ValueError):
            load_json_jobs(path)

    def test_negative_id_rejected(self):
        with pytest.raises(ValueError):
            LogoJob(-1)

    def test_jobs_from_directory(self, tmp_path):
        for name in ["10.png", "2.JPG", "7", "notes.txt", "logo.png", "5.txt"]:
            (tmp_path / name).write_bytes(b"")
        (tmp_path / "11").mkdir()

        jobs = jobs_from_directory(tmp_path)

        assert [job.id for job in jobs] == [2, 7, 10]

    def test_jobs_from_missing_directory(self, tmp_path):
        with pytest.raises(ValueError):
            jobs_from_directory(tmp_path / "missing")
