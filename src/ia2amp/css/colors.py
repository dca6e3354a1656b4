"""Hex color normalization into CSS ``rgb()``/``rgba()`` functions."""

import re

from ia2amp.exceptions import InvalidFormatError

HEX_DIGITS = re.compile(r"^[0-9a-f]+$")


def to_rgb(color: str) -> str:
    """Convert a hex color into a CSS rgb()/rgba() function.

    Accepts 3 (RGB), 4 (ARGB), 6 (RRGGBB) or 8 (AARRGGBB) hex digits with an
    optional leading ``#``. Alpha is placed first, as in the Instant Articles
    style format.

    Args:
        color: Hex color string

    Returns:
        ``rgb(r,g,b)`` when fully opaque, ``rgba(r,g,b,a)`` otherwise

    Raises:
        InvalidFormatError: If the string is not 3, 4, 6 or 8 hex digits

    Examples:
        >>> to_rgb("FFAABB")
        'rgb(255,170,187)'
        >>> to_rgb("#EEFFAABB")
        'rgba(255,170,187,0.93)'
    """
    if not isinstance(color, str):
        raise InvalidFormatError(f"Color must be a string, got {type(color).__name__}", value=color)

    digits = color.strip().lstrip("#").lower()
    if not HEX_DIGITS.match(digits):
        raise InvalidFormatError(f"Invalid hex color: {color!r}", value=color)

    if len(digits) in (3, 4):
        digits = "".join(nibble * 2 for nibble in digits)

    if len(digits) == 6:
        alpha_hex, rgb_hex = None, digits
    elif len(digits) == 8:
        alpha_hex, rgb_hex = digits[:2], digits[2:]
    else:
        raise InvalidFormatError(
            f"Hex color must have 3, 4, 6 or 8 digits: {color!r}", value=color
        )

    red, green, blue = (int(rgb_hex[i:i + 2], 16) for i in (0, 2, 4))
    alpha = 1.0 if alpha_hex is None else round(int(alpha_hex, 16) / 255, 2)

    if alpha == 1.0:
        return f"rgb({red},{green},{blue})"
    return f"rgba({red},{green},{blue},{format(alpha, 'g')})"
