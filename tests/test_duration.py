"""Tests for isobench.duration — Go duration strings."""

from __future__ import annotations

import unittest

from isobench.duration import (
    HOUR,
    MICROSECOND,
    MILLISECOND,
    MINUTE,
    SECOND,
    format_duration,
    parse_duration,
)


class TestParseDuration(unittest.TestCase):
    def test_seconds_with_fraction(self) -> None:
        self.assertEqual(parse_duration("2.250s"), 2_250_000_000)

    def test_compound(self) -> None:
        self.assertEqual(parse_duration("1m3.5s"), MINUTE + 3 * SECOND + 500 * MILLISECOND)

    def test_hours_minutes(self) -> None:
        self.assertEqual(parse_duration("2h45m"), 2 * HOUR + 45 * MINUTE)

    def test_milliseconds(self) -> None:
        self.assertEqual(parse_duration("150ms"), 150 * MILLISECOND)

    def test_microsecond_spellings(self) -> None:
        for text in ("1.5us", "1.5µs", "1.5μs"):
            with self.subTest(text=text):
                self.assertEqual(parse_duration(text), 1500)

    def test_nanoseconds(self) -> None:
        self.assertEqual(parse_duration("850ns"), 850)

    def test_bare_zero(self) -> None:
        self.assertEqual(parse_duration("0"), 0)

    def test_signs(self) -> None:
        self.assertEqual(parse_duration("-1.5h"), -(HOUR + 30 * MINUTE))
        self.assertEqual(parse_duration("+5s"), 5 * SECOND)

    def test_leading_dot(self) -> None:
        self.assertEqual(parse_duration(".5s"), 500 * MILLISECOND)

    def test_fraction_truncates(self) -> None:
        self.assertEqual(parse_duration("1.0000000009s"), SECOND)

    def test_invalid(self) -> None:
        for text in ("", "-", "1.5", "3x", "s", ".s", "1s ", "1..5s", "abc"):
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    parse_duration(text)

    def test_overflow(self) -> None:
        with self.assertRaises(ValueError):
            parse_duration("9999999999h")


class TestFormatDuration(unittest.TestCase):
    def test_zero(self) -> None:
        self.assertEqual(format_duration(0), "0s")

    def test_sub_microsecond(self) -> None:
        self.assertEqual(format_duration(850), "850ns")

    def test_microseconds(self) -> None:
        self.assertEqual(format_duration(1500), "1.5µs")

    def test_milliseconds(self) -> None:
        self.assertEqual(format_duration(12_250_000), "12.25ms")
        self.assertEqual(format_duration(MILLISECOND), "1ms")

    def test_seconds(self) -> None:
        self.assertEqual(format_duration(3_267_000_000), "3.267s")

    def test_exact_minute(self) -> None:
        self.assertEqual(format_duration(MINUTE), "1m0s")

    def test_exact_hour(self) -> None:
        self.assertEqual(format_duration(HOUR), "1h0m0s")

    def test_hours_minutes_seconds(self) -> None:
        self.assertEqual(format_duration(2 * HOUR + 3 * MINUTE + 4_500 * MILLISECOND), "2h3m4.5s")

    def test_negative(self) -> None:
        self.assertEqual(format_duration(-1500), "-1.5µs")

    def test_nanosecond_precision_in_seconds(self) -> None:
        self.assertEqual(format_duration(SECOND + 1), "1.000000001s")

    def test_format_is_accepted_by_parser(self) -> None:
        for ns in (0, 1, 999, MICROSECOND, 1500, 12_250_000, 3_267_000_000, MINUTE, 7384 * SECOND):
            with self.subTest(ns=ns):
                self.assertEqual(parse_duration(format_duration(ns)), ns)

    def test_trailer_values_round_trip(self) -> None:
        for text in ("2.250s", "1.021s", "0.005s", "61.2s"):
            with self.subTest(text=text):
                ns = parse_duration(text)
                self.assertEqual(parse_duration(format_duration(ns)), ns)


if __name__ == "__main__":
    unittest.main()
