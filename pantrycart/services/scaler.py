"""Rescale the leading amount of free-text ingredient lines."""
import re
from fractions import Fraction
from typing import List, Optional, Sequence, Tuple, Union

MIXED_RE = re.compile(r"^(\d+)\s+(\d+)/(\d+)\s+(.+)$")
FRACTION_RE = re.compile(r"^(\d+)/(\d+)\s+(.+)$")
NUMBER_RE = re.compile(r"^(\d+(?:\.\d+)?)\s+(.+)$")

SNAP_TOLERANCE = 0.001

# fractional part -> display; 0.33 and 0.66 cover decimals typed by hand
_SNAPS = (
    (0.25, "1/4"),
    (0.33, "1/3"),
    (1 / 3, "1/3"),
    (0.5, "1/2"),
    (0.66, "2/3"),
    (2 / 3, "2/3"),
    (0.75, "3/4"),
)

Factor = Union[int, float, Fraction]


def parse_leading_quantity(text: str) -> Optional[Tuple[float, str]]:
    """Return (value, rest) for a line that starts with an amount, else None."""
    trimmed = text.strip()

    m = MIXED_RE.match(trimmed)
    if m:
        whole, num, den = int(m.group(1)), int(m.group(2)), int(m.group(3))
        if den == 0:
            return None
        return whole + num / den, m.group(4).strip()

    m = FRACTION_RE.match(trimmed)
    if m:
        num, den = int(m.group(1)), int(m.group(2))
        if den == 0:
            return None
        return num / den, m.group(3).strip()

    m = NUMBER_RE.match(trimmed)
    if m:
        return float(m.group(1)), m.group(2).strip()

    return None


def format_quantity(value: float) -> str:
    if value <= 0:
        return ""
    whole = int(value)
    frac = value - whole
    if frac < 0.01:
        # too small to show; callers keep the line as written
        return str(whole) if whole else ""
    if frac > 0.99:
        return str(whole + 1)
    for target, label in _SNAPS:
        if abs(frac - target) < SNAP_TOLERANCE:
            return f"{whole} {label}" if whole else label
    return f"{value:.2f}"


def scale_line(line: str, factor: Factor) -> str:
    parsed = parse_leading_quantity(line)
    if parsed is None:
        return line
    value, rest = parsed
    formatted = format_quantity(value * float(factor))
    if not formatted:
        return line
    return f"{formatted} {rest}".strip()


def scale(ingredients: Sequence[str], factor: Factor) -> List[str]:
    if factor <= 0:
        raise ValueError("scale factor must be positive")
    if factor == 1:
        return list(ingredients)
    return [scale_line(line, factor) for line in ingredients]
