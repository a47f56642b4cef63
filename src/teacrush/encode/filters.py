"""Filter graph construction.

Builds the ``-vf`` chain (scale, frame dedupe, fps) and the two GIF palette
graphs. All functions are pure.
"""

from __future__ import annotations

import logging
import math
import re

logger = logging.getLogger(__name__)

DEDUPE_FILTER = "mpdecimate"

_EXPLICIT_SIZE = re.compile(r"^\s*(-?\d+)\s*[xX:]\s*(-?\d+)\s*$")
_RATIONAL_RATE = re.compile(r"^(\d+(?:\.\d+)?)/(\d+(?:\.\d+)?)$")

# Frame rate abbreviations understood by ffmpeg
NAMED_RATES = frozenset(
    {"ntsc", "pal", "qntsc", "qpal", "sntsc", "spal", "film", "ntsc-film"}
)


def _parse_divisor(spec: str) -> float | None:
    try:
        divisor = float(spec)
    except ValueError:
        return None
    if not math.isfinite(divisor) or divisor <= 0:
        return None
    return divisor


def is_valid_resolution(spec: str) -> bool:
    """True for "", a positive number, or an explicit W<sep>H size."""
    spec = spec.strip()
    if not spec:
        return True
    if _parse_divisor(spec) is not None:
        return True
    return _EXPLICIT_SIZE.match(spec) is not None


def is_valid_fps(spec: str) -> bool:
    """True for "", a positive number, a N/D rational or a named rate."""
    spec = spec.strip()
    if not spec or spec in NAMED_RATES:
        return True
    if _parse_divisor(spec) is not None:
        return True
    match = _RATIONAL_RATE.match(spec)
    return match is not None and all(float(g) > 0 for g in match.groups())


def build_scale_filter(spec: str) -> str | None:
    """Translate a resolution spec into a scale filter.

    - "" or "1": no scaling
    - "N": divide both dimensions by N, rounded down to even values
    - "WxH", "WXH" or "W:H": explicit size

    Unrecognized specs produce no filter and a warning.
    """
    spec = spec.strip()
    if not spec or spec == "1":
        return None

    match = _EXPLICIT_SIZE.match(spec)
    if match:
        return f"scale={match.group(1)}:{match.group(2)}"

    divisor = _parse_divisor(spec)
    if divisor is None:
        logger.warning("Ignoring unrecognized resolution spec: %r", spec)
        return None
    if divisor == 1:
        return None

    n = f"{divisor:g}"
    return f"scale=trunc((iw/{n})/2)*2:trunc((ih/{n})/2)*2"


def scaled_dimensions(width: int, height: int, divisor: float) -> tuple[int, int]:
    """Dimensions produced by the divisor scale filter.

    Each dimension becomes floor(dim / divisor / 2) * 2.
    """
    if divisor <= 0:
        raise ValueError(f"divisor must be positive, got {divisor}")
    return (
        math.floor(width / divisor / 2) * 2,
        math.floor(height / divisor / 2) * 2,
    )


def build_filter_chain(resolution: str = "", fps: str = "") -> str:
    """Compose scale, frame dedupe and fps filters into one chain."""
    filters = []
    scale = build_scale_filter(resolution)
    if scale:
        filters.append(scale)
    filters.append(DEDUPE_FILTER)
    fps = fps.strip()
    if fps:
        filters.append(f"fps={fps}")
    return ",".join(filters)


def build_palette_filters(chain: str) -> tuple[str, str]:
    """Build the palette-generation chain and the palette-use graph.

    Args:
        chain: The shared filter chain, possibly empty.

    Returns:
        (palettegen chain for the first stage, two-input paletteuse graph for
        the second stage, reading the source as input 0 and the palette as
        input 1).
    """
    if chain:
        palettegen = f"{chain},palettegen"
        paletteuse = f"[0:v]{chain}[x];[x][1:v]paletteuse"
    else:
        palettegen = "palettegen"
        paletteuse = "[0:v]fifo[x];[x][1:v]paletteuse"
    return palettegen, paletteuse
