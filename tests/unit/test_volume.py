"""Unit tests for SoX progress meter parsing and bar rendering."""

import pytest

from vox.audio.volume import EMPTY_GLYPH, FILLED_GLYPH, parse_volume, render_bar


@pytest.mark.unit
class TestParseVolume:
    """Test cases for parse_volume."""

    def test_decibel_form(self):
        level, found = parse_volume("In:0.00% 00:00:01.54 [00:00:00.00] Out:24.6k [ -20.0dB] Clip:0")

        assert found
        assert level == pytest.approx(0.1, abs=0.001)

    def test_minus_infinity_is_silence(self):
        level, found = parse_volume("[ -inf dB]")

        assert found
        assert level == 0.0

    def test_positive_decibels_clamp_to_full(self):
        level, found = parse_volume("[ +1.5dB]")

        assert found
        assert level == 1.0

    def test_zero_decibels_is_full(self):
        level, found = parse_volume("[  0.0dB]")

        assert found
        assert level == pytest.approx(1.0)

    def test_ascii_bar_form(self):
        level, found = parse_volume("In:0.00% 00:00:02.30 [00:00:00.00] Out:36.9k [===   |===   ] Hd:0.0 Clip:0")

        assert found
        assert level == pytest.approx(0.5)

    def test_ascii_bar_takes_louder_channel(self):
        level, found = parse_volume("[==    |====  ]")

        assert found
        assert level == pytest.approx(4 / 6)

    def test_ascii_bar_counts_peak_glyphs(self):
        level, found = parse_volume("[=-!   |      ]")

        assert found
        assert level == pytest.approx(0.5)

    def test_line_without_brackets(self):
        assert parse_volume("Input File     : 'default' (coreaudio)") == (0.0, False)

    def test_time_field_alone_is_not_a_meter(self):
        assert parse_volume("In:0.00% 00:00:01.54 [00:00:00.00] Out:24.6k") == (0.0, False)

    def test_empty_line(self):
        assert parse_volume("") == (0.0, False)

    def test_rightmost_meter_wins(self):
        level, found = parse_volume("[ -6.0dB] then [ -inf dB]")

        assert found
        assert level == 0.0

    def test_unterminated_bracket(self):
        assert parse_volume("Out:24.6k [ -20.0dB") == (0.0, False)

    def test_stray_closing_bracket_after_meter(self):
        level, found = parse_volume("In: [ -20.0dB] ]")

        assert found
        assert level == pytest.approx(0.1, abs=0.001)

    def test_time_field_after_meter_is_skipped(self):
        level, found = parse_volume("[ -20.0dB] [00:01]")

        assert found
        assert level == pytest.approx(0.1, abs=0.001)

    def test_garbage_inside_brackets(self):
        assert parse_volume("[ loud ]") == (0.0, False)

    def test_nan_decibels_rejected(self):
        assert parse_volume("[ nandB]") == (0.0, False)


@pytest.mark.unit
class TestRenderBar:
    """Test cases for render_bar."""

    def test_rounds_to_nearest(self):
        bar = render_bar(0.5, 10)

        assert bar == FILLED_GLYPH * 5 + EMPTY_GLYPH * 5

    @pytest.mark.parametrize("level", [-1.0, 0.0, 0.04, 0.33, 0.5, 0.96, 1.0, 7.0, float("nan")])
    @pytest.mark.parametrize("width", [1, 7, 30])
    def test_width_is_exact(self, level, width):
        assert len(render_bar(level, width)) == width

    def test_zero_width(self):
        assert render_bar(0.7, 0) == ""

    def test_negative_width(self):
        assert render_bar(0.7, -3) == ""

    def test_clamps_out_of_range(self):
        assert render_bar(-0.5, 4) == EMPTY_GLYPH * 4
        assert render_bar(3.0, 4) == FILLED_GLYPH * 4

    def test_nan_renders_empty(self):
        assert render_bar(float("nan"), 5) == EMPTY_GLYPH * 5

    def test_filled_glyphs_come_first(self):
        bar = render_bar(0.3, 10)

        assert bar == FILLED_GLYPH * 3 + EMPTY_GLYPH * 7
