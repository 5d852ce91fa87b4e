"""
Tests for loading and saving pixel buffers through Pillow.
"""

import pytest
from PIL import Image

from conftest import as_array
from imglab.errors import DecodeError, EncodeError
from imglab.models.image_model import PixelBuffer


class TestLoadImage:

    def test_missing_file(self, image_service, tmp_path):
        with pytest.raises(DecodeError) as exc_info:
            image_service.load_image(tmp_path / "missing.png")

        assert str(exc_info.value).startswith("Failed to load image: ")

    def test_not_an_image(self, image_service, tmp_path):
        path = tmp_path / "notes.png"
        path.write_text("definitely not a png")

        with pytest.raises(DecodeError, match="^Failed to load image: "):
            image_service.load_image(path)

    def test_directory(self, image_service, tmp_path):
        with pytest.raises(DecodeError):
            image_service.load_image(tmp_path)

    def test_grayscale_file_is_expanded_to_rgba(self, image_service, tmp_path):
        path = tmp_path / "gray.png"
        Image.new("L", (3, 2), color=90).save(path)

        buffer = image_service.load_image(str(path))

        assert (buffer.width, buffer.height, buffer.format) == (3, 2, "rgba")
        assert buffer.is_well_formed()
        assert as_array(buffer).reshape(-1, 4).tolist() == [[90, 90, 90, 255]] * 6


class TestSaveImage:

    def test_png_round_trip(self, image_service, random_buffer, tmp_path):
        path = tmp_path / "out.png"

        image_service.save_image(random_buffer, path)
        loaded = image_service.load_image(path)

        assert (loaded.width, loaded.height) == (random_buffer.width, random_buffer.height)
        assert loaded.data == random_buffer.data

    def test_length_mismatch_fails_before_io(self, image_service, tmp_path):
        path = tmp_path / "never.png"
        buffer = PixelBuffer(width=2, height=2, data=bytes(15))

        with pytest.raises(EncodeError) as exc_info:
            image_service.save_image(buffer, path)

        assert str(exc_info.value) == "Failed to create image from data"
        assert not path.exists()

    def test_unwritable_destination(self, image_service, primaries_buffer, tmp_path):
        with pytest.raises(EncodeError, match="^Failed to save image: "):
            image_service.save_image(primaries_buffer, tmp_path / "no" / "such" / "dir" / "out.png")

    def test_unknown_extension(self, image_service, primaries_buffer, tmp_path):
        with pytest.raises(EncodeError, match="^Failed to save image: "):
            image_service.save_image(primaries_buffer, tmp_path / "out.unknownext")

    def test_format_follows_extension(self, image_service, primaries_buffer, tmp_path):
        path = tmp_path / "out.bmp"

        image_service.save_image(primaries_buffer, path)

        with Image.open(path) as img:
            assert img.format == "BMP"
            assert img.size == (2, 2)

    def test_read_only_format(self, image_service, primaries_buffer, tmp_path):
        path = tmp_path / "out.psd"

        with pytest.raises(EncodeError, match="^Failed to save image: "):
            image_service.save_image(primaries_buffer, path)

        assert not path.exists()
