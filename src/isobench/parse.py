"""Parse and format ``go test -bench`` result lines.

A result line looks like::

    BenchmarkFoo-4   	    2000	   1068291 ns/op	  48 B/op	   2 allocs/op

Fields are whitespace separated.  The first is the benchmark name (it
must start with ``Benchmark``), the second the iteration count, and the
rest are ``<value> <unit>`` pairs.  Recognised units are ``ns/op``,
``MB/s``, ``B/op`` and ``allocs/op``; unknown units and values that fail
to parse are skipped, matching golang.org/x/tools/benchmark/parse.
"""

from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass

from isobench.errors import LineParseError

_INT = re.compile(r"[+-]?[0-9]+")
_UINT = re.compile(r"[0-9]+")
# Go's ParseFloat: decimal or exponent form, or inf/infinity/nan.
_FLOAT = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)

_NON_FINITE = re.compile(r"inf|nan", re.IGNORECASE)
_MAX_UINT64 = (1 << 64) - 1
_MAX_INT64 = (1 << 63) - 1
_MIN_INT64 = -(1 << 63)

_COLUMN = 15


class Measured(enum.IntFlag):
    """Which optional measurements a record carries."""

    NONE = 0
    NS_PER_OP = 1
    MB_PER_S = 2
    ALLOCED_BYTES_PER_OP = 4
    ALLOCS_PER_OP = 8


@dataclass(frozen=True)
class MeasurementRecord:
    """One parsed benchmark result line."""

    name: str
    iterations: int
    ns_per_op: float = 0.0
    mb_per_s: float = 0.0
    alloced_bytes_per_op: int = 0
    allocs_per_op: int = 0
    measured: Measured = Measured.NONE


def _parse_float(text: str) -> float | None:
    if _FLOAT.fullmatch(text) is None:
        return None
    value = float(text)
    # Out of range literals overflow to inf; ParseFloat rejects them.
    if math.isinf(value) and not _NON_FINITE.search(text):
        return None
    return value


def _parse_uint(text: str) -> int | None:
    if _UINT.fullmatch(text) is None:
        return None
    value = int(text)
    return value if value <= _MAX_UINT64 else None


def parse_line(line: str) -> MeasurementRecord:
    """Parse a single benchmark result line.

    Raises:
        LineParseError: If the line has fewer than two fields, does not
            start with a benchmark name, or has a malformed iteration count.
    """
    fields = line.split()
    if len(fields) < 2:
        raise LineParseError(f"two fields required, have {len(fields)}")
    if not fields[0].startswith("Benchmark"):
        raise LineParseError('first field does not start with "Benchmark"')
    if _INT.fullmatch(fields[1]) is None or not _MIN_INT64 <= int(fields[1]) <= _MAX_INT64:
        raise LineParseError(f"invalid iteration count {fields[1]!r}")

    values: dict[str, float | int] = {}
    measured = Measured.NONE
    for i in range(2, len(fields) - 1, 2):
        quant, unit = fields[i], fields[i + 1]
        if unit == "ns/op":
            f = _parse_float(quant)
            if f is not None:
                values["ns_per_op"] = f
                measured |= Measured.NS_PER_OP
        elif unit == "MB/s":
            f = _parse_float(quant)
            if f is not None:
                values["mb_per_s"] = f
                measured |= Measured.MB_PER_S
        elif unit == "B/op":
            n = _parse_uint(quant)
            if n is not None:
                values["alloced_bytes_per_op"] = n
                measured |= Measured.ALLOCED_BYTES_PER_OP
        elif unit == "allocs/op":
            n = _parse_uint(quant)
            if n is not None:
                values["allocs_per_op"] = n
                measured |= Measured.ALLOCS_PER_OP

    return MeasurementRecord(
        name=fields[0],
        iterations=int(fields[1]),
        measured=measured,
        **values,  # type: ignore[arg-type]
    )


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def _go_fixed(value: float, prec: int) -> str:
    """Render like Go's ``%.<prec>f``, including its non-finite spellings."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:.{prec}f}"


def format_ns_per_op(value: float) -> str:
    """Render ns/op with two decimals, trimmed when the integer part is long.

    When the decimal point sits past the second character, the last three
    characters are cut off.  This truncates rather than rounds:
    ``123456.78`` becomes ``123456`` while ``12.34`` is kept as is.
    """
    s = _go_fixed(value, 2)
    if s.find(".") > 2:
        s = s[:-3]
    return s


def format_record(record: MeasurementRecord, width: int) -> str:
    """Format *record* as an aligned, benchcmp compatible line.

    The name is padded to *width* plus four columns; every number is
    right-aligned in a fifteen-column field followed by its unit.
    """
    parts = [f"{record.name:<{width + 4}}{record.iterations:{_COLUMN}d}"]
    if record.measured & Measured.NS_PER_OP:
        parts.append(f"{format_ns_per_op(record.ns_per_op):>{_COLUMN}} ns/op")
    if record.measured & Measured.MB_PER_S:
        parts.append(f"{_go_fixed(record.mb_per_s, 2):>{_COLUMN}} MB/s")
    if record.measured & Measured.ALLOCED_BYTES_PER_OP:
        parts.append(f"{record.alloced_bytes_per_op:{_COLUMN}d} B/op")
    if record.measured & Measured.ALLOCS_PER_OP:
        parts.append(f"{record.allocs_per_op:{_COLUMN}d} allocs/op")
    return "".join(parts)
