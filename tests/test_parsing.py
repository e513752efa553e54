"""
Tests for text and .npy parsing

Covers:
1. Decimal, ratio and mixed-number literals
2. Repeating decimal notation and its round trip with to_repeating_string
3. Bracketed fraction lists read from files
4. Float arrays read from .npy, including raw bfloat16 payloads
"""

import numpy as np
import pytest

from fraction import NaN, NEGATIVE_INFINITY, POSITIVE_INFINITY, of, of_exact
from parsing import (ParseError, load_fractions_from_file, load_fractions_from_npy, parse_fraction,
                     parse_repeating)


class TestParseFraction:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("3.65", (73, 20)),
            ("13/5", (13, 5)),
            (" 13 / 5 ", (13, 5)),
            ("5 3/4", (23, 4)),
            ("-4 3/5", (-23, 5)),
            ("-4 -3/5", (-17, 5)),
            ("12.5/0.1", (125, 1)),
            ("1e3", (1000, 1)),
            ("-.5", (-1, 2)),
            ("7", (7, 1)),
        ],
    )
    def test_literals(self, text, expected) -> None:
        assert parse_fraction(text).as_integer_ratio() == expected

    def test_division_by_zero(self) -> None:
        assert parse_fraction("1/0") == POSITIVE_INFINITY
        assert parse_fraction("0/0") == NaN

    def test_float_fallback(self) -> None:
        assert parse_fraction("inf") == POSITIVE_INFINITY
        assert parse_fraction("-inf") == NEGATIVE_INFINITY
        assert parse_fraction("nan") == NaN

    @pytest.mark.parametrize("text", ["abc", "0x10", "", "1/2/3", "1/"])
    def test_rejects(self, text) -> None:
        with pytest.raises(ParseError):
            parse_fraction(text)

    def test_parse_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_fraction("abc")

    def test_of_string(self) -> None:
        assert of("0.1") == of(1, 10)
        assert of("22/7") == of(22, 7)


class TestParseRepeating:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("0.58(3)", (7, 12)),
            ("3.(142857)", (22, 7)),
            ("-0.(3)", (-1, 3)),
            ("33.(3)", (100, 3)),
            ("0.1(6)", (1, 6)),
            ("1.(6)e2", (500, 3)),
            ("0.25", (1, 4)),
            ("2.5e-1", (1, 4)),
        ],
    )
    def test_literals(self, text, expected) -> None:
        assert parse_repeating(text).as_integer_ratio() == expected

    def test_specials(self) -> None:
        assert parse_repeating("Infinity") == POSITIVE_INFINITY
        assert parse_repeating("-Infinity") == NEGATIVE_INFINITY
        assert parse_repeating("NaN") == NaN

    @pytest.mark.parametrize("text", ["1(3)", "0.(3", "abc", "0.(x)"])
    def test_rejects(self, text) -> None:
        with pytest.raises(ParseError):
            parse_repeating(text)

    @pytest.mark.parametrize("n, d", [(7, 12), (22, 7), (-1, 3), (1, 7), (5, 1), (-13, 4), (1, 81)])
    def test_round_trip(self, n, d) -> None:
        f = of(n, d)
        assert parse_repeating(f.to_repeating_string()) == f


class TestLoadFromFile:
    def test_vector(self, tmp_path) -> None:
        path = tmp_path / "values.txt"
        path.write_text("[1/3, 0.25,\n -2 1/2]\n")
        assert load_fractions_from_file(str(path)) == [of(1, 3), of(1, 4), of(-5, 2)]

    def test_illegal_characters(self, tmp_path) -> None:
        path = tmp_path / "values.txt"
        path.write_text("[1/3, x]")
        with pytest.raises(ParseError):
            load_fractions_from_file(str(path))

    @pytest.mark.parametrize("content", ["", "[]", "[1/3", "[1] 2", "1/3", "[1/3,]"])
    def test_malformed(self, tmp_path, content) -> None:
        path = tmp_path / "values.txt"
        path.write_text(content)
        with pytest.raises(ParseError):
            load_fractions_from_file(str(path))


class TestLoadFromNpy:
    def test_float32_exact(self, tmp_path) -> None:
        path = tmp_path / "a.npy"
        np.save(path, np.array([0.1, 0.5], dtype=np.float32))
        values = load_fractions_from_npy(str(path))
        assert values == [of(13421773, 2**27), of(1, 2)]

    def test_float32_simplest(self, tmp_path) -> None:
        path = tmp_path / "a.npy"
        np.save(path, np.array([[0.1, 0.3], [-2.5, 0.0]], dtype=np.float32))
        values = load_fractions_from_npy(str(path), simplest=True)
        assert values == [of(1, 10), of(3, 10), of(-5, 2), of(0)]

    def test_float16(self, tmp_path) -> None:
        path = tmp_path / "a.npy"
        np.save(path, np.array([0.1], dtype=np.float16))
        assert load_fractions_from_npy(str(path)) == [of(819, 8192)]
        assert load_fractions_from_npy(str(path), simplest=True) == [of(1, 10)]

    def test_float64(self, tmp_path) -> None:
        path = tmp_path / "a.npy"
        np.save(path, np.array([0.1]))
        assert load_fractions_from_npy(str(path)) == [of_exact(0.1)]

    def test_bfloat16_payload(self, tmp_path) -> None:
        path = tmp_path / "a.npy"
        np.save(path, np.array([0x3F80, 0x4049, 0xC000], dtype='<u2').view('V2'))
        assert load_fractions_from_npy(str(path)) == [of(1), of(201, 64), of(-2)]

    def test_non_finite(self, tmp_path) -> None:
        path = tmp_path / "a.npy"
        np.save(path, np.array([1.0, np.nan]))
        with pytest.raises(ValueError):
            load_fractions_from_npy(str(path))

    def test_unsupported_dtype(self, tmp_path) -> None:
        path = tmp_path / "a.npy"
        np.save(path, np.arange(3))
        with pytest.raises(TypeError):
            load_fractions_from_npy(str(path))
