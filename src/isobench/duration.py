"""Go duration strings.

``go test`` reports elapsed time in its trailer line using Go's
``time.Duration`` text form (``2.250s``, ``1m3.5s``, ``150ms``).  This
module parses that grammar into integer nanoseconds and formats
nanoseconds back into the same form, so the summary trailer reads
exactly like one written by ``go test`` itself.

Durations are kept as integer nanoseconds throughout so that summing
them is exact.
"""

from __future__ import annotations

import re
from fractions import Fraction

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

_MAX_DURATION = (1 << 63) - 1

_UNITS: dict[str, int] = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # MICRO SIGN
    "μs": MICROSECOND,  # GREEK SMALL LETTER MU
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

# One ``<number><unit>`` component: integer part, optional fraction, unit.
_COMPONENT = re.compile(r"(?P<int>[0-9]*)(?:\.(?P<frac>[0-9]*))?(?P<unit>[^0-9.]*)")


def parse_duration(text: str) -> int:
    """Parse a Go duration string into nanoseconds.

    Accepts a possibly signed sequence of decimal numbers, each with an
    optional fraction and a mandatory unit suffix, such as ``"300ms"``,
    ``"-1.5h"`` or ``"2h45m"``.  The bare string ``"0"`` is also accepted.

    Raises:
        ValueError: If *text* is not a valid duration.
    """
    s = text
    neg = False
    if s and s[0] in "-+":
        neg = s[0] == "-"
        s = s[1:]
    if s == "0":
        return 0
    if not s:
        raise ValueError(f"invalid duration {text!r}")

    total = Fraction(0)
    pos = 0
    while pos < len(s):
        m = _COMPONENT.match(s, pos)
        # The pattern can match empty; an empty match means a stray character.
        if m is None or m.end() == pos:
            raise ValueError(f"invalid duration {text!r}")
        int_part, frac_part, unit = m.group("int"), m.group("frac"), m.group("unit")
        if not int_part and not frac_part:
            raise ValueError(f"invalid duration {text!r}")
        if not unit:
            raise ValueError(f"missing unit in duration {text!r}")
        if unit not in _UNITS:
            raise ValueError(f"unknown unit {unit!r} in duration {text!r}")
        value = Fraction(int(int_part or "0"))
        if frac_part:
            value += Fraction(int(frac_part), 10 ** len(frac_part))
        total += value * _UNITS[unit]
        pos = m.end()

    ns = int(total)
    limit = _MAX_DURATION + 1 if neg else _MAX_DURATION
    if ns > limit:
        raise ValueError(f"invalid duration {text!r}")
    return -ns if neg else ns


def _fmt_frac(value: int, prec: int) -> tuple[int, str]:
    """Split off *prec* fractional digits, dropping trailing zeros."""
    if prec == 0:
        return value, ""
    scale = 10**prec
    digits = f"{value % scale:0{prec}d}".rstrip("0")
    return value // scale, f".{digits}" if digits else ""


def format_duration(ns: int) -> str:
    """Format nanoseconds the way Go's ``Duration.String`` does.

    Examples: ``0s``, ``850ns``, ``1.5µs``, ``12.25ms``, ``3.267s``,
    ``1m0s``, ``2h3m4.5s``.
    """
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    u = abs(ns)

    if u < SECOND:
        if u < MICROSECOND:
            prec, unit = 0, "ns"
        elif u < MILLISECOND:
            prec, unit = 3, "µs"
        else:
            prec, unit = 6, "ms"
        whole, frac = _fmt_frac(u, prec)
        return f"{sign}{whole}{frac}{unit}"

    secs, frac = _fmt_frac(u, 9)
    text = f"{secs % 60}{frac}s"
    mins = secs // 60
    if mins:
        text = f"{mins % 60}m{text}"
        hours = mins // 60
        if hours:
            text = f"{hours}h{text}"
    return f"{sign}{text}"
