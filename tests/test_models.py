"""
Tests for the value objects and their record (wire) shape.
"""

import dataclasses

import pytest
from PIL import Image

from imglab.models.adjustments import Adjustments
from imglab.models.image_model import ColorSample, HistogramData, PixelBuffer


class TestPixelBuffer:

    def test_length_invariant(self):
        assert PixelBuffer(width=2, height=3, data=bytes(24)).is_well_formed()
        assert not PixelBuffer(width=2, height=3, data=bytes(23)).is_well_formed()

    def test_immutable(self):
        buffer = PixelBuffer(width=1, height=1, data=bytes(4))

        with pytest.raises(dataclasses.FrozenInstanceError):
            buffer.width = 2

    def test_record_shape(self):
        buffer = PixelBuffer(width=1, height=1, data=bytes([1, 2, 3, 4]))

        assert buffer.to_dict() == {"width": 1, "height": 1, "data": [1, 2, 3, 4], "format": "rgba"}
        assert PixelBuffer.from_dict(buffer.to_dict()) == buffer

    def test_from_dict_rejects_out_of_range_bytes(self):
        with pytest.raises(ValueError):
            PixelBuffer.from_dict({"width": 1, "height": 1, "data": [0, 0, 0, 256], "format": "rgba"})

    def test_pil_bridge(self):
        img = Image.new("RGB", (2, 1), color=(10, 20, 30))
        buffer = PixelBuffer.from_pil(img)

        assert buffer.data == bytes([10, 20, 30, 255] * 2)
        assert buffer.to_pil().getpixel((1, 0)) == (10, 20, 30, 255)

    def test_with_data_keeps_shape(self):
        buffer = PixelBuffer(width=1, height=1, data=bytes(4))
        other = buffer.with_data(bytearray([9, 9, 9, 9]))

        assert (other.width, other.height, other.format) == (1, 1, "rgba")
        assert other.data == bytes([9, 9, 9, 9])
        assert buffer.data == bytes(4)


class TestColorSample:

    def test_hex_is_lowercase(self):
        assert ColorSample.from_rgb(10, 255, 16).hex == "#0aff10"

    def test_record_shape(self):
        assert ColorSample.from_rgb(128, 128, 128).to_dict() == {"r": 128, "g": 128, "b": 128, "hex": "#808080"}

    def test_from_record_recomputes_hex(self):
        color = ColorSample.from_dict({"r": 255, "g": 0, "b": 16, "hex": "#FFFFFF"})

        assert color == ColorSample.from_rgb(255, 0, 16)

    @pytest.mark.parametrize("record", [{"r": 1, "g": 2}, {"r": 256, "g": 0, "b": 0}, {"r": "x", "g": 0, "b": 0}])
    def test_from_record_rejects_bad_channels(self, record):
        with pytest.raises((KeyError, ValueError)):
            ColorSample.from_dict(record)


class TestHistogramData:

    def test_from_counts_converts_to_ints(self):
        hist = HistogramData.from_counts([1.0] * 256, range(256), [0] * 256, [0] * 256)

        assert hist.red[0] == 1 and isinstance(hist.red[0], int)
        assert hist.green[255] == 255
        assert set(hist.to_dict()) == {"red", "green", "blue", "luminosity"}


class TestAdjustments:

    def test_identity(self):
        assert Adjustments().is_identity
        assert not Adjustments(grayscale=True).is_identity
        assert not Adjustments(brightness=1.1).is_identity
        assert not Adjustments(posterize_levels=4).is_identity
        assert not Adjustments(palette="zorn").is_identity
        assert not Adjustments(guide="blocks").is_identity
