"""ANSI painting of styled runs.

Style strings use rich's syntax ("bold green", "italic #ff8800 on black").
"""

from functools import lru_cache
from typing import Optional

from rich.color import ColorSystem
from rich.errors import StyleSyntaxError
from rich.style import Style

from promptseg.kernel.formatter import FormatError


@lru_cache(maxsize=64)
def parse_style(style: str) -> Style:
    """Parse a style string.

    Raises:
        FormatError: If `style` is not a valid style definition
    """
    try:
        return Style.parse(style)
    except StyleSyntaxError as e:
        raise FormatError(f"Invalid style string {style!r}: {e}") from None


def paint_ansi(text: str, style: Optional[str]) -> str:
    """Wrap `text` in the ANSI escape codes for `style`."""
    if not style or not text:
        return text
    return parse_style(style).render(text, color_system=ColorSystem.TRUECOLOR)
