from __future__ import annotations

import matplotlib.colors as mcolors
import pytest

from spmrf.palette import PRESETS, resolve_colors, to_mpl_color


def test_presets():
    assert resolve_colors("blue") == ("blue", "lightblue")
    assert resolve_colors("gray") == ("black", "gray80")
    assert resolve_colors("green") == ("green3", "lightgreen")
    assert resolve_colors("red") == ("red", "pink")
    assert resolve_colors("purple") == ("purple", "lavender")


@pytest.mark.parametrize("name", sorted(PRESETS))
def test_preset_colors_render_in_matplotlib(name):
    for color in resolve_colors(name):
        assert mcolors.is_color_like(to_mpl_color(color))


def test_unknown_preset():
    with pytest.raises(ValueError, match="Preset colors"):
        resolve_colors("orange")


def test_explicit_pair_overrides_preset():
    assert resolve_colors("orange", trend_col="darkred", bci_col="mistyrose") == ("darkred", "mistyrose")


def test_explicit_colors_must_come_in_pairs():
    with pytest.raises(ValueError, match="bci_col"):
        resolve_colors("blue", trend_col="red")
    with pytest.raises(ValueError, match="trend_col"):
        resolve_colors("blue", bci_col="pink")


def test_r_gray_levels():
    assert to_mpl_color("gray80") == "#CCCCCC"
    assert to_mpl_color("grey60") == "#999999"
    assert to_mpl_color("gray0") == "#000000"
    assert to_mpl_color("steelblue") == "steelblue"
    with pytest.raises(ValueError):
        to_mpl_color("gray101")
