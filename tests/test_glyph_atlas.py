import numpy as np
import pytest

from asciigrid.glyph_atlas import GLYPH_SIZE, CharBrightnessTable, GlyphCache, load_font, render_glyph
from tests.conftest import FONT_PATH, FixedGlyphCache, needs_font


def test_render_glyph_shape():
    mask = render_glyph("A", load_font())
    assert mask.shape == (GLYPH_SIZE, GLYPH_SIZE)
    assert mask.dtype == bool


def test_space_has_no_ink():
    assert not render_glyph(" ", load_font()).any()


def test_render_is_deterministic():
    font = load_font()
    np.testing.assert_array_equal(render_glyph("@", font), render_glyph("@", font))


def test_dense_char_brighter_than_dot():
    glyphs = GlyphCache()
    assert glyphs.raw_brightness("@") > glyphs.raw_brightness(".") > glyphs.raw_brightness(" ") == 0.0


@needs_font
def test_truetype_font():
    glyphs = GlyphCache(font_path=FONT_PATH)
    assert 0.0 < glyphs.raw_brightness("#") <= 1.0


def test_normalized_extremes():
    table = CharBrightnessTable({"a": 0.1, "b": 0.3, "c": 0.5})
    assert table.normalized == {"a": 0.0, "b": pytest.approx(0.5), "c": 1.0}
    assert (table.min_raw, table.max_raw) == (0.1, 0.5)


def test_normalized_values_in_unit_range():
    glyphs = GlyphCache()
    table = glyphs.table("0123456789@#. ")
    assert min(table.normalized.values()) == 0.0
    assert max(table.normalized.values()) == 1.0
    assert all(0.0 <= v <= 1.0 for v in table.normalized.values())


def test_single_char_normalizes_to_zero():
    table = CharBrightnessTable({"x": 0.4})
    assert table.normalized_brightness("x") == 0.0


def test_equal_brightness_normalizes_to_zero():
    table = CharBrightnessTable({"x": 0.4, "y": 0.4})
    assert table.normalized == {"x": 0.0, "y": 0.0}


def test_empty_table_rejected():
    with pytest.raises(ValueError):
        CharBrightnessTable({})


def test_ordered_by_brightness_then_code_point():
    table = CharBrightnessTable({"z": 0.0, "b": 0.5, "a": 0.5, "m": 1.0})
    assert table.ordered == ("z", "a", "b", "m")
    assert list(table) == ["z", "a", "b", "m"]
    assert "a" in table and "q" not in table
    assert len(table) == 4


def test_raw_brightness_rendered_once(fixed_glyphs):
    fixed_glyphs.table(" #")
    fixed_glyphs.table(" +#")
    fixed_glyphs.table("+#")
    assert sorted(fixed_glyphs.rendered) == [" ", "#", "+"]
    assert len(fixed_glyphs) == 3


def test_table_reused_for_same_charset(fixed_glyphs):
    first = fixed_glyphs.table(" #")
    assert fixed_glyphs.table("# ") is first
    assert fixed_glyphs.table({"#", " "}) is first


def test_table_rebuilt_when_charset_changes(fixed_glyphs):
    wide = fixed_glyphs.table(" +#")
    narrow = fixed_glyphs.table("+#")
    assert narrow is not wide
    # "+" moves from the middle to the bottom once " " is gone
    assert wide.normalized["+"] == pytest.approx(0.5)
    assert narrow.normalized["+"] == 0.0
    assert wide.normalized["+"] == pytest.approx(0.5)


def test_invalidate_forces_rebuild(fixed_glyphs):
    first = fixed_glyphs.table(" #")
    fixed_glyphs.invalidate()
    second = fixed_glyphs.table(" #")
    assert second is not first
    assert second.normalized == first.normalized
    assert fixed_glyphs.rendered.count("#") == 1


def test_fixed_cache_helper_values():
    glyphs = FixedGlyphCache({"a": 0.2, "b": 0.8})
    assert glyphs.table("ab").normalized == {"a": 0.0, "b": 1.0}
