"""Theme colors and color utilities for the UI."""


class JourneyColors:
    """Light theme palette for the learning journey."""

    BG_TOP = "#eff6ff"
    BG_BOTTOM = "#dbeafe"

    PRIMARY = "#2563eb"
    PRIMARY_LIGHT = "#60a5fa"
    PRIMARY_DARK = "#1e40af"

    SUCCESS = "#16a34a"
    SUCCESS_LIGHT = "#bbf7d0"
    LOCKED = "#9ca3af"
    CURRENT = "#f59e0b"

    CARD_BG = "rgba(255, 255, 255, 0.85)"
    CARD_BORDER = "rgba(255, 255, 255, 0.6)"

    TEXT_PRIMARY = "#1f2937"
    TEXT_SECONDARY = "#4b5563"
    TEXT_MUTED = "#9ca3af"

    # Progress card – overall completion bar
    PROGRESS_CARD_BG = "#eff6ff"
    PROGRESS_TRACK = "#bfdbfe"
    PROGRESS_FILL = "#2563eb"
    SECTION_FILL = "#22c55e"
    SECTION_TRACK = "#d1d5db"


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    try:
        a = a.strip()
        b = b.strip()
        if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
            return a
        t = max(0.0, min(1.0, float(t)))
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
        r = int(ar + (br - ar) * t)
        g = int(ag + (bg - ag) * t)
        bl = int(ab + (bb - ab) * t)
        return f"#{r:02X}{g:02X}{bl:02X}"
    except ValueError:
        return a


def progress_color(fraction: float) -> str:
    """Section bar color: light green when barely started, full green when done."""
    return blend_hex(JourneyColors.SUCCESS_LIGHT, JourneyColors.SUCCESS, fraction)
