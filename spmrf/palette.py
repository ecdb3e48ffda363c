"""Color presets for trend lines and credible bands."""
from __future__ import annotations

import re
from typing import Dict, Optional, Tuple

# preset -> (trend color, band color)
PRESETS: Dict[str, Tuple[str, str]] = {
    "blue": ("blue", "lightblue"),
    "green": ("green3", "lightgreen"),
    "red": ("red", "pink"),
    "purple": ("purple", "lavender"),
    "gray": ("black", "gray80"),
}

# R color names used by the presets that matplotlib does not know.
_R_COLORS = {
    "green3": "#00CD00",
}

_GRAY_RE = re.compile(r"^gr[ae]y(\d{1,3})$")


def resolve_colors(
    colset: str = "blue",
    trend_col: Optional[str] = None,
    bci_col: Optional[str] = None,
) -> Tuple[str, str]:
    """Return ``(trend_color, band_color)`` from a preset or an explicit pair."""
    if trend_col is None and bci_col is not None:
        raise ValueError("Must specify trend_col if specifying bci_col.")
    if trend_col is not None and bci_col is None:
        raise ValueError("Must specify bci_col if specifying trend_col.")
    if trend_col is not None and bci_col is not None:
        return trend_col, bci_col

    if colset not in PRESETS:
        names = ", ".join(f"'{name}'" for name in PRESETS)
        raise ValueError(f"Preset colors for colset are {names}.")
    return PRESETS[colset]


def to_mpl_color(name: str) -> str:
    """Translate R-style color names (``gray80``, ``green3``) to something matplotlib accepts."""
    if not isinstance(name, str):
        return name
    key = name.lower()
    if key in _R_COLORS:
        return _R_COLORS[key]
    m = _GRAY_RE.match(key)
    if m:
        level = int(m.group(1))
        if level > 100:
            raise ValueError(f"Gray level must be between 0 and 100, got '{name}'.")
        v = int(round(level * 255 / 100))
        return f"#{v:02X}{v:02X}{v:02X}"
    return name
