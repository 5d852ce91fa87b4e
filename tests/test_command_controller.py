"""
Tests for the command boundary: records in, records out, string errors.
"""

import pytest

from imglab.controllers.command_controller import ImageCommands
from imglab.errors import CommandError


@pytest.fixture
def commands() -> ImageCommands:
    return ImageCommands()


class TestInvoke:

    def test_lists_all_commands(self, commands):
        assert set(commands.command_names) == {
            "load_image",
            "analyze_image",
            "adjust_brightness",
            "adjust_contrast",
            "convert_to_grayscale",
            "posterize",
            "quantize",
            "list_palettes",
            "remap_to_palette",
            "map_colors_to_palette",
            "paint_by_numbers_lines",
            "paint_by_numbers_blocks",
            "save_image",
        }

    def test_unknown_command(self, commands):
        with pytest.raises(CommandError, match="Unknown command: crop"):
            commands.invoke("crop")

    def test_missing_arguments(self, commands):
        with pytest.raises(CommandError, match="^Invalid arguments for adjust_brightness"):
            commands.invoke("adjust_brightness", image_data={"width": 0, "height": 0, "data": [], "format": "rgba"})

    def test_malformed_record(self, commands):
        with pytest.raises(CommandError, match="^Invalid arguments for analyze_image"):
            commands.invoke("analyze_image", image_data={"width": 1})


class TestRecords:

    def test_analyze_record(self, commands, primaries_buffer):
        record = commands.invoke("analyze_image", image_data=primaries_buffer.to_dict())

        assert set(record) == {"histogram", "dominant_colors", "average_brightness", "contrast"}
        assert len(record["histogram"]["luminosity"]) == 256
        assert record["histogram"]["luminosity"][255] == 1
        assert record["dominant_colors"] == [{"r": 128, "g": 128, "b": 128, "hex": "#808080"}]
        assert record["average_brightness"] == pytest.approx(509 / 4 / 255)

    def test_transforms_return_buffer_records(self, commands, primaries_buffer):
        record = primaries_buffer.to_dict()

        bright = commands.invoke("adjust_brightness", image_data=record, amount=1.0)
        contrast = commands.invoke("adjust_contrast", image_data=record, amount=1.0)
        gray = commands.invoke("convert_to_grayscale", image_data=record)

        assert bright == record
        assert contrast == record
        assert gray["data"][:4] == [76, 76, 76, 255]
        assert (gray["width"], gray["height"], gray["format"]) == (2, 2, "rgba")

    def test_posterize_invalid_levels(self, commands, primaries_buffer):
        with pytest.raises(CommandError, match="levels"):
            commands.invoke("posterize", image_data=primaries_buffer.to_dict(), levels=1)


class TestPaletteCommands:

    def test_list_palettes(self, commands):
        palettes = commands.invoke("list_palettes")

        assert len(palettes) == 13
        assert palettes["zorn"]["name"] == "Anders Zorn"
        assert palettes["grayscale"]["category"] == "classic"

    def test_remap_by_key_and_by_colors_agree(self, commands, primaries_buffer):
        record = primaries_buffer.to_dict()

        by_key = commands.invoke("remap_to_palette", image_data=record, palette="primary")
        by_colors = commands.invoke(
            "remap_to_palette", image_data=record, palette=commands.invoke("list_palettes")["primary"]["colors"]
        )

        assert by_key == by_colors
        assert by_key["data"] == record["data"]

    def test_unknown_palette(self, commands, primaries_buffer):
        with pytest.raises(CommandError, match="^Unknown palette: sepia"):
            commands.invoke("remap_to_palette", image_data=primaries_buffer.to_dict(), palette="sepia")

    def test_bad_hex_in_list(self, commands, primaries_buffer):
        with pytest.raises(CommandError, match="Invalid hex color"):
            commands.invoke("remap_to_palette", image_data=primaries_buffer.to_dict(), palette=["#000000", 7])

    def test_map_colors(self, commands):
        mapped = commands.invoke(
            "map_colors_to_palette",
            colors=[{"r": 250, "g": 10, "b": 5, "hex": "#fa0a05"}],
            palette=["#000000", "#FF0000"],
        )

        assert mapped == [{"r": 250, "g": 10, "b": 5, "hex": "#ff0000"}]


class TestGuideCommands:

    def test_quantize(self, commands, primaries_buffer):
        record = commands.invoke("quantize", image_data=primaries_buffer.to_dict(), levels=1)

        assert record["data"] == [0, 0, 0, 255] * 4

    def test_lines_record(self, commands, gradient_buffer):
        record = commands.invoke("paint_by_numbers_lines", image_data=gradient_buffer.to_dict(), levels=5)

        assert (record["width"], record["height"]) == (16, 16)
        assert set(record["data"]) <= {0, 255}

    def test_blocks_on_malformed_record(self, commands):
        record = {"width": 2, "height": 2, "data": [0] * 12, "format": "rgba"}

        with pytest.raises(CommandError, match="does not match"):
            commands.invoke("paint_by_numbers_blocks", image_data=record)


class TestFileCommands:

    def test_save_then_load(self, commands, random_buffer, tmp_path):
        path = str(tmp_path / "round.png")

        assert commands.invoke("save_image", image_data=random_buffer.to_dict(), path=path) is None
        loaded = commands.invoke("load_image", path=path)

        assert loaded == random_buffer.to_dict()

    def test_load_failure_message(self, commands, tmp_path):
        with pytest.raises(CommandError) as exc_info:
            commands.invoke("load_image", path=str(tmp_path / "absent.png"))

        assert str(exc_info.value).startswith("Failed to load image: ")

    def test_save_mismatch_message(self, commands, tmp_path):
        record = {"width": 4, "height": 4, "data": [0] * 10, "format": "rgba"}

        with pytest.raises(CommandError) as exc_info:
            commands.invoke("save_image", image_data=record, path=str(tmp_path / "x.png"))

        assert str(exc_info.value) == "Failed to create image from data"

    def test_save_read_only_format_message(self, commands, primaries_buffer, tmp_path):
        with pytest.raises(CommandError) as exc_info:
            commands.invoke("save_image", image_data=primaries_buffer.to_dict(), path=str(tmp_path / "out.psd"))

        assert str(exc_info.value).startswith("Failed to save image: ")
