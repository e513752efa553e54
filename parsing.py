import decimal
import logging
import re

import numpy as np

from floatbits import from_bits
from formats import BFLOAT16, format_of
from fraction import Fraction, of_decimal, of_exact, of_simplest, NaN, POSITIVE_INFINITY, NEGATIVE_INFINITY

LOG = logging.getLogger(__name__)

ALLOWED_CHARS = set("0123456789.,[]-+/eE \t\r\n")

class ParseError(ValueError):
    pass

_DECIMAL = r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"
# [integer <spaces>] decimal [/ decimal]
_FRACTION = re.compile(rf"\s*(?:([+-]?\d+) +)?({_DECIMAL})(?:\s*/\s*({_DECIMAL}))?\s*")
# decimal [(repeating digits)] [e exponent]
_REPEATING = re.compile(r"\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))(?:\((\d+)\))?(?:[eE]([+-]?\d+))?\s*")
_SPECIALS = {"NaN": NaN, "Infinity": POSITIVE_INFINITY, "-Infinity": NEGATIVE_INFINITY}

def _decimal(s: str) -> Fraction:
    return of_decimal(decimal.Decimal(s))

def parse_fraction(text: str) -> Fraction:
    """
    Parse a decimal ("3.65"), a ratio ("13/5", "12.5/0.1") or a mixed number ("5 3/4").

    A mixed number means integer + sign(integer) * numerator / denominator, so
    "-4 3/5" is -23/5. Anything else Python reads as a float ("1e-300", "inf", "nan")
    becomes the simplest fraction with that double value.
    """
    m = _FRACTION.fullmatch(text)
    if m:
        whole, numerator, denominator = m.groups()
        result = _decimal(numerator)
        if denominator is not None:
            result = result / _decimal(denominator)
        if whole is not None:
            if whole.startswith('-'):
                result = -result
            result = result + int(whole)
        return result
    try:
        value = float(text)
    except ValueError:
        raise ParseError(f"Cannot parse '{text}' as a fraction")
    return of_simplest(value)

def parse_repeating(text: str) -> Fraction:
    """
    Parse repeating decimal notation as written by Fraction.to_repeating_string:
    "0.58(3)" -> 7/12, "3.(142857)" -> 22/7, optionally followed by an exponent ("1.(6)e2").
    """
    special = _SPECIALS.get(text.strip())
    if special is not None:
        return special
    m = _REPEATING.fullmatch(text)
    if not m:
        raise ParseError(f"Cannot parse '{text}' as a repeating decimal")
    head, repeating, exponent = m.groups()
    result = _decimal(head)
    if repeating is not None:
        if '.' not in head:
            raise ParseError(f"Repeating digits must follow a '.' in '{text}'")
        k = len(repeating)
        shifted = _decimal(head + repeating) * 10 ** k
        result = (shifted - result) / (10 ** k - 1)
    if exponent is not None:
        result = result * Fraction(10) ** int(exponent)
    return result

def load_text_strict(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        s = f.read().strip()
    if any(c not in ALLOWED_CHARS for c in s):
        bad = sorted(set(c for c in s if c not in ALLOWED_CHARS))
        raise ParseError(f"Illegal character(s) found: {bad}. Allowed are only 0-9 . , [ ] - + / e E and whitespace")
    if not s:
        raise ParseError("Empty file.")
    return s

def expect_char(s: str, i: int, ch: str):
    while i < len(s) and s[i].isspace():
        i += 1
    if i >= len(s) or s[i] != ch:
        raise ParseError(f"Expected '{ch}' at position {i}")
    return i + 1

def parse_entry(s: str, i: int):
    n = len(s)
    start = i
    while i < n and s[i] not in ",]":
        i += 1
    token = s[start:i]
    if not token.strip():
        raise ParseError(f"Expected a number at position {start}")
    m = _FRACTION.fullmatch(token)
    if not m:
        raise ParseError(f"Malformed number '{token.strip()}' at position {start}")
    return parse_fraction(token), i

def parse_vector(s: str, i: int):
    i = expect_char(s, i, '[')
    vec = []
    x, i = parse_entry(s, i)
    vec.append(x)
    while i < len(s) and s[i] == ',':
        i += 1
        x, i = parse_entry(s, i)
        vec.append(x)
    i = expect_char(s, i, ']')
    return vec, i

def load_fractions_from_file(path: str):
    """Read a bracketed list of exact values, e.g. "[1/3, 0.25, -2 1/2]"."""
    s = load_text_strict(path)
    vec, i = parse_vector(s, 0)
    if i != len(s):
        raise ParseError(f"Unexpected trailing content at position {i}: {s[i:]}")
    return vec

def load_fractions_from_npy(path: str, simplest: bool = False):
    """
    Exact fractions for the entries of a float .npy array, each read in its own format
    (float16/float32/float64, raw 2-byte payloads as bfloat16). With simplest=True the
    simplest fraction reproducing each entry is returned instead of its exact value.
    """
    arr = np.load(path, allow_pickle=False).ravel()
    k, isz = arr.dtype.kind, arr.dtype.itemsize
    convert = of_simplest if simplest else of_exact

    # Numeric floats: f16/f32/f64
    if k == 'f' and isz in (2, 4, 8):
        values = [(x, format_of(x)) for x in arr]

    # Raw 2-byte payloads: interpret as bfloat16
    # This is needed for some of the saved bfloat16 arrays
    elif (k in ('V', 'S', 'a')) and isz == 2:
        # little-endian 16-bit words
        u16 = arr.view('<u2')
        values = [(from_bits(int(w), BFLOAT16), BFLOAT16) for w in u16]
    else:
        raise TypeError(f"Unsupported dtype: {arr.dtype!r}")

    out = []
    for x, fmt in values:
        if not np.isfinite(x):
            raise ValueError("NaN/Inf encountered; cannot convert to a finite Fraction.")
        out.append(convert(x, fmt))
    LOG.debug("loaded %d %s values from %s", len(out), arr.dtype, path)
    return out
