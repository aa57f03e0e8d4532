"""
Event classification and display colors.

Both functions are total: they never raise and always return a usable value.
"""

import math
from typing import Dict, Optional

from dayplan.domain import EventType


FOCUS_KEYWORDS = ("focus", "deep work")

# Google Calendar event palette, keyed by colorId.
GOOGLE_COLOR_MAP: Dict[str, str] = {
    "1": "#7986CB",  # lavender
    "2": "#33B679",  # sage
    "3": "#8E24AA",  # grape
    "4": "#E67C73",  # flamingo
    "5": "#F6BF26",  # banana
    "6": "#F4511E",  # tangerine
    "7": "#039BE5",  # peacock
    "8": "#616161",  # graphite
    "9": "#3F51B5",  # blueberry
    "10": "#0B8043",  # basil
    "11": "#D50000",  # tomato
}

HASH_SATURATION = 65
HASH_LIGHTNESS = 45


def classify_event(title: str, attendee_count: int) -> EventType:
    """
    Classify a raw calendar event.

    Events with attendees are meetings; otherwise titles mentioning focus
    or deep work are focus time; everything else is other.
    """
    if attendee_count > 0:
        return EventType.MEETING
    title_lower = (title or "").lower()
    if any(keyword in title_lower for keyword in FOCUS_KEYWORDS):
        return EventType.FOCUS
    return EventType.OTHER


def djb2_hash(text: str) -> int:
    """
    32-bit djb2 hash over UTF-16 code units, returned as an absolute value.

    The accumulator wraps to a signed 32-bit integer on every step.
    """
    value = 5381
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        value = (value * 33 + code_unit) & 0xFFFFFFFF
        if value >= 0x80000000:
            value -= 0x100000000
    return abs(value)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def hsl_to_hex(hue: float, saturation: float, lightness: float) -> str:
    """Convert HSL (degrees, percent, percent) to a #rrggbb string."""
    h = hue / 360
    s = saturation / 100
    l = lightness / 100  # noqa: E741
    a = s * min(l, 1 - l)

    def channel(n: int) -> str:
        k = (n + h * 12) % 12
        color = l - a * max(min(k - 3, 9 - k, 1), -1)
        return f"{_round_half_up(255 * color):02x}"

    return f"#{channel(0)}{channel(8)}{channel(4)}"


def resolve_color(
    color_id: Optional[str] = None, title: Optional[str] = None
) -> str:
    """
    Map an event to a display color.

    A recognised provider palette id wins; otherwise the color is derived
    from a hash of the title so the same title always gets the same hue.
    """
    if color_id and color_id in GOOGLE_COLOR_MAP:
        return GOOGLE_COLOR_MAP[color_id]
    hue = djb2_hash(title or "") % 360
    return hsl_to_hex(hue, HASH_SATURATION, HASH_LIGHTNESS)
