"""
Exact rational numbers closed over infinities and NaN.

A Fraction is a reduced pair (numerator, denominator) with denominator >= 0.
Besides the ordinary rationals there are four values with a zero denominator
or numerator that never raise during arithmetic:

    ZERO               0/1
    POSITIVE_INFINITY  1/0
    NEGATIVE_INFINITY -1/0
    NaN                0/0

Operations involving NaN return NaN, 0/0 and inf - inf give NaN, x/0 gives a
signed infinity, just as IEEE-754 floats do. Every construction goes through
gcd reduction, so e.g. 1234/0 is the same value as 1/0.
"""
from __future__ import annotations
from dataclasses import dataclass
import decimal
import fractions
import logging
import math
import operator

import numpy as np

from arithmetic import (RoundingMode, DEFAULT_RADIX, DEFAULT_REPEATING_LIMIT, check_radix,
                        divide_rounded, int_to_str, positional_digits, repeating_digits)
from floatbits import decompose, recompose, to_bits
from formats import FloatFormat, DOUBLE, SINGLE, format_of

LOG = logging.getLogger(__name__)

def _sign(x: int) -> int:
    return (x > 0) - (x < 0)

def _lowest_set_bit(x: int) -> int:
    return (x & -x).bit_length() - 1

@dataclass(frozen=True, init=False, eq=False)
class Fraction:
    numerator: int
    denominator: int

    def __init__(self, numerator: int, denominator: int = 1):
        numerator = operator.index(numerator)
        denominator = operator.index(denominator)
        g = math.gcd(numerator, denominator)
        if g == 0:
            # only 0/0
            numerator, denominator = 0, 0
        else:
            if denominator < 0:
                g = -g
            numerator //= g
            denominator //= g
        object.__setattr__(self, "numerator", numerator)
        object.__setattr__(self, "denominator", denominator)

    # ------------------------------------------------------------------
    # classification

    @property
    def is_nan(self) -> bool:
        return self.denominator == 0 and self.numerator == 0

    @property
    def is_infinite(self) -> bool:
        return self.denominator == 0 and self.numerator != 0

    @property
    def is_finite(self) -> bool:
        return self.denominator != 0

    def is_integer(self) -> bool:
        return self.denominator == 1

    def signum(self) -> int:
        """1 if positive, -1 if negative, 0 for ZERO and NaN."""
        return _sign(self.numerator)

    def as_integer_ratio(self):
        return self.numerator, self.denominator

    # ------------------------------------------------------------------
    # arithmetic

    def __neg__(self) -> Fraction:
        return Fraction(-self.numerator, self.denominator)

    def __pos__(self) -> Fraction:
        return self

    def __abs__(self) -> Fraction:
        return Fraction(abs(self.numerator), self.denominator)

    def __pow__(self, exponent):
        if not isinstance(exponent, int):
            return NotImplemented
        if exponent < 0:
            return self.reciprocal() ** -exponent
        return Fraction(self.numerator ** exponent, self.denominator ** exponent)

    def reciprocal(self) -> Fraction:
        """
        Multiplicative inverse: NaN stays NaN, infinities become ZERO, ZERO
        becomes POSITIVE_INFINITY.
        """
        if self.numerator < 0:
            return Fraction(-self.denominator, -self.numerator)
        return Fraction(self.denominator, self.numerator)

    def frac(self) -> Fraction:
        """
        Fractional part `self % 1`, keeping the sign of self:
        frac(13/10) == 3/10, frac(-13/10) == -3/10. Infinities and NaN are returned unchanged.
        """
        if self.denominator == 0:
            return self
        r = abs(self.numerator) % self.denominator
        return Fraction(-r if self.numerator < 0 else r, self.denominator)

    def shift_left(self, shift: int) -> Fraction:
        """self * 2^shift, moving factors of two between numerator and denominator."""
        if self.denominator == 0 or self.numerator == 0 or shift == 0:
            return self
        nu, de = self.numerator, self.denominator
        if shift > 0:
            lsb = _lowest_set_bit(de)
            if shift > lsb:
                de >>= lsb
                nu <<= shift - lsb
            else:
                de >>= shift
        else:
            lsb = _lowest_set_bit(nu)
            if -shift > lsb:
                nu >>= lsb
                de <<= -shift - lsb
            else:
                nu >>= -shift
        return Fraction(nu, de)

    def shift_right(self, shift: int) -> Fraction:
        """self / 2^shift."""
        return self.shift_left(-shift)

    # ------------------------------------------------------------------
    # comparison

    def compare_to(self, other) -> int:
        """
        -1, 0 or 1. Infinities order by sign, NaN sorts above POSITIVE_INFINITY
        and equal to itself, so the order is total over all values.
        """
        value = _coerce(other)
        if value is NotImplemented:
            raise TypeError(f"cannot compare Fraction with {type(other).__name__}")
        other = value
        if self.is_nan or other.is_nan:
            return self.is_nan - other.is_nan
        if self.denominator == 0 and other.denominator == 0:
            return _sign(self.numerator - other.numerator)
        # denominators are non-negative, the cross product keeps the order
        return _sign(self.numerator * other.denominator - other.numerator * self.denominator)

    def __eq__(self, other):
        if isinstance(other, Fraction):
            return self.numerator == other.numerator and self.denominator == other.denominator
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        if other.is_nan:
            # a float or Decimal NaN equals nothing, not even NaN
            return False
        return self == other

    def __hash__(self):
        if self.denominator == 0:
            return hash(self.numerator * math.inf) if self.numerator else 0
        if self.denominator == 1:
            return hash(self.numerator)
        return hash(fractions.Fraction(self.numerator, self.denominator))

    def __bool__(self):
        return self.numerator != 0 or self.denominator == 0

    # ------------------------------------------------------------------
    # conversions

    def to_format(self, fmt: FloatFormat):
        """Nearest value of the given binary format (ties to even)."""
        if self.denominator == 0:
            special = math.nan if self.numerator == 0 else self.numerator * math.inf
            return special if fmt.native is np.float64 else fmt.native(special)
        if self.numerator == 0:
            return 0.0 if fmt.native is np.float64 else fmt.native(0.0)
        magnitude = abs(self.numerator)
        # quotient keeps at least p + 2 bits; any remainder becomes a sticky bit
        shift = max(0, self.denominator.bit_length() - magnitude.bit_length() + fmt.p + 2)
        q, r = divmod(magnitude << shift, self.denominator)
        if r:
            q |= 1
        return recompose(-q if self.numerator < 0 else q, -shift, fmt)

    def to_double(self) -> float:
        return self.to_format(DOUBLE)

    def to_float(self) -> np.float32:
        """Nearest binary32 value."""
        return self.to_format(SINGLE)

    def __float__(self):
        return self.to_double()

    def to_big_integer(self, rounding: RoundingMode = RoundingMode.DOWN) -> int:
        """Integer value rounded with `rounding` (toward zero by default). Zero for infinities and NaN."""
        if self.denominator == 0:
            return 0
        return divide_rounded(self.numerator, self.denominator, rounding)

    to_int = to_big_integer

    def __int__(self):
        return self.to_big_integer()

    __trunc__ = __int__

    def __floor__(self):
        return self.to_big_integer(RoundingMode.FLOOR)

    def __ceil__(self):
        return self.to_big_integer(RoundingMode.CEILING)

    def __round__(self, ndigits=None):
        if ndigits is None:
            return self.to_big_integer(RoundingMode.HALF_EVEN)
        if self.denominator == 0:
            return self
        scale = 10 ** abs(ndigits)
        if ndigits >= 0:
            return Fraction(divide_rounded(self.numerator * scale, self.denominator, RoundingMode.HALF_EVEN), scale)
        return Fraction(divide_rounded(self.numerator, self.denominator * scale, RoundingMode.HALF_EVEN) * scale)

    def to_decimal(self, scale: int | None = None, rounding: RoundingMode = RoundingMode.HALF_EVEN,
                   context: decimal.Context | None = None) -> decimal.Decimal:
        """
        Decimal value of this fraction.

        With a scale, the result has exactly `scale` digits after the point, rounded with
        `rounding`. Without one, numerator / denominator is divided in `context`
        (default: the current decimal context).

        Raises ArithmeticError for infinities and NaN.
        """
        if self.denominator == 0:
            raise ArithmeticError(f"{self.to_string(0)} has no decimal value")
        if scale is None:
            context = context or decimal.getcontext()
            return context.divide(decimal.Decimal(self.numerator), decimal.Decimal(self.denominator))
        if scale >= 0:
            unscaled = divide_rounded(self.numerator * 10 ** scale, self.denominator, rounding)
        else:
            unscaled = divide_rounded(self.numerator, self.denominator * 10 ** -scale, rounding)
        # string construction is exact, no context rounding
        return decimal.Decimal(f"{unscaled}E{-scale}")

    def as_rational(self) -> fractions.Fraction:
        if self.denominator == 0:
            raise ValueError(f"{self.to_string(0)} is not a rational number")
        return fractions.Fraction(self.numerator, self.denominator)

    def continued_fraction(self):
        """
        Continued fraction expansion [a0; a1, a2, ...] of this value.

        Raises ArithmeticError for infinities and NaN.
        """
        if self.denominator == 0:
            raise ArithmeticError(self.to_string(0))
        from continued_fraction import ContinuedFraction
        return ContinuedFraction.of(self)

    # ------------------------------------------------------------------
    # formatting

    def __str__(self):
        return f"{self.numerator}/{self.denominator}"

    def _special_string(self) -> str:
        if self.numerator > 0:
            return "Infinity"
        if self.numerator < 0:
            return "-Infinity"
        return "NaN"

    def to_string(self, n: int, radix: int = DEFAULT_RADIX, rounding: RoundingMode = RoundingMode.DOWN) -> str:
        """
        Positional representation with at most n digits after the point. Digits past n
        are cut off (rounding=DOWN) unless another rounding mode is given; expansions that
        terminate earlier are not padded. Infinities and NaN give "Infinity", "-Infinity", "NaN".
        """
        check_radix(radix)
        if self.denominator == 0:
            return self._special_string()
        return positional_digits(self.numerator, self.denominator, n, radix, rounding)

    def to_repeating_string(self, radix: int = DEFAULT_RADIX, limit: int = DEFAULT_REPEATING_LIMIT) -> str:
        """
        Exact positional representation, repeating block in parentheses:
        7/12 -> "0.58(3)", 22/7 -> "3.(142857)", 100/3 -> "33.(3)".

        After `limit` fractional digits without a repeat the digits are cut off and "..."
        is appended; limit <= 0 disables this.
        """
        check_radix(radix)
        if self.denominator == 0:
            return self._special_string()
        return repeating_digits(self.numerator, self.denominator, radix, limit)

    def to_mixed_string(self, radix: int = DEFAULT_RADIX) -> str:
        """
        Mixed number "[-]a b/c": 8/5 -> "1 3/5", -13/5 -> "-2 3/5".
        Falls back to str() when the integer part or the denominator is zero.
        """
        check_radix(radix)
        if self.denominator == 0:
            return str(self)
        whole = divide_rounded(self.numerator, self.denominator, RoundingMode.DOWN)
        if whole == 0:
            return str(self)
        rest = abs(self.numerator - whole * self.denominator)
        return f"{int_to_str(whole, radix)} {int_to_str(rest, radix)}/{int_to_str(self.denominator, radix)}"

ZERO = Fraction(0, 1)
ONE = Fraction(1, 1)
POSITIVE_INFINITY = Fraction(1, 0)
NEGATIVE_INFINITY = Fraction(-1, 0)
NaN = Fraction(0, 0)

# ----------------------------------------------------------------------
# operand coercion and operators

def _coerce(value):
    """Exact Fraction for a supported operand, NotImplemented otherwise."""
    if isinstance(value, Fraction):
        return value
    if isinstance(value, (int, np.integer)):
        return Fraction(int(value))
    if isinstance(value, fractions.Fraction):
        return Fraction(value.numerator, value.denominator)
    if isinstance(value, decimal.Decimal):
        return of_decimal(value)
    if isinstance(value, (float, np.floating)):
        return of_exact(value)
    return NotImplemented

def _add(a: Fraction, b: Fraction) -> Fraction:
    if a.denominator == 0 or b.denominator == 0:
        if a.is_nan or b.is_nan:
            return NaN
        if a.denominator == 0 and b.denominator == 0:
            return a if a.numerator == b.numerator else NaN
        return a if a.denominator == 0 else b
    return Fraction(a.numerator * b.denominator + b.numerator * a.denominator, a.denominator * b.denominator)

def _sub(a: Fraction, b: Fraction) -> Fraction:
    return _add(a, -b)

def _mul(a: Fraction, b: Fraction) -> Fraction:
    # inf * 0 and anything * NaN reduce to 0/0 on their own
    return Fraction(a.numerator * b.numerator, a.denominator * b.denominator)

def _truediv(a: Fraction, b: Fraction) -> Fraction:
    if b.numerator == 0 and b.denominator == 1:
        return Fraction(_sign(a.numerator), 0)
    # reciprocal moves the sign of b into its numerator, which survives inf * x
    return _mul(a, b.reciprocal())

def _mod(a: Fraction, b: Fraction) -> Fraction:
    """Truncated remainder with the sign of a, like math.fmod (not Python's floored %)."""
    if a.denominator == 0 or b.is_nan or b == ZERO:
        return NaN
    if b.denominator == 0:
        return a
    return _mul(b, _truediv(a, b).frac())

def _operator(op):
    def forward(a, b):
        b = _coerce(b)
        if b is NotImplemented:
            return NotImplemented
        return op(a, b)

    def reverse(b, a):
        a = _coerce(a)
        if a is NotImplemented:
            return NotImplemented
        return op(a, b)

    name = op.__name__.strip('_')
    forward.__name__ = f"__{name}__"
    reverse.__name__ = f"__r{name}__"
    return forward, reverse

def _comparison(test):
    def compare(a, b):
        b = _coerce(b)
        if b is NotImplemented:
            return NotImplemented
        return test(a.compare_to(b))
    return compare

Fraction.__add__, Fraction.__radd__ = _operator(_add)
Fraction.__sub__, Fraction.__rsub__ = _operator(_sub)
Fraction.__mul__, Fraction.__rmul__ = _operator(_mul)
Fraction.__truediv__, Fraction.__rtruediv__ = _operator(_truediv)
Fraction.__mod__, Fraction.__rmod__ = _operator(_mod)
Fraction.__lt__ = _comparison(lambda c: c < 0)
Fraction.__le__ = _comparison(lambda c: c <= 0)
Fraction.__gt__ = _comparison(lambda c: c > 0)
Fraction.__ge__ = _comparison(lambda c: c >= 0)

# ----------------------------------------------------------------------
# factories

def of_exact(value, fmt: FloatFormat | None = None) -> Fraction:
    """
    The exact value of a binary float, e.g. of_exact(0.3) == 5404319552844595/18014398509481984.
    numpy float32/float16 scalars are read in their own format unless fmt says otherwise.
    """
    if fmt is None:
        fmt = format_of(value)
    if math.isnan(value):
        return NaN
    if math.isinf(value):
        return POSITIVE_INFINITY if value > 0 else NEGATIVE_INFINITY
    if value == 0:
        return ZERO
    bits = decompose(value, fmt)
    if bits.exp >= 0:
        return Fraction(bits.significand << bits.exp)
    return Fraction(bits.significand, 1 << -bits.exp)

def of_simplest(value, fmt: FloatFormat | None = None) -> Fraction:
    """
    The fraction with the smallest denominator among the convergents of the exact
    value that converts back to the very same float, e.g. of_simplest(0.3) == 3/10.
    """
    if fmt is None:
        fmt = format_of(value)
    exact = of_exact(value, fmt)
    if exact.denominator == 0 or exact.numerator == 0:
        return exact
    target = to_bits(value, fmt)
    result = exact.continued_fraction().to_fraction(lambda c: to_bits(c.to_format(fmt), fmt) == target)
    LOG.debug("simplest %s fraction for %r: %s (exact %s)", fmt.name, value, result, exact)
    return result

def of_decimal(value: decimal.Decimal) -> Fraction:
    """Exact value of a Decimal; 'Infinity' and 'NaN' map to the special fractions."""
    if value.is_nan():
        return NaN
    if value.is_infinite():
        return NEGATIVE_INFINITY if value.is_signed() else POSITIVE_INFINITY
    sign, digits, exponent = value.as_tuple()
    unscaled = int(''.join(map(str, digits)) or '0')
    if sign:
        unscaled = -unscaled
    if exponent >= 0:
        return Fraction(unscaled * 10 ** exponent)
    return Fraction(unscaled, 10 ** -exponent)

def of_ratio(numerator, denominator) -> Fraction:
    """Exact value of numerator / denominator for any two values `of` accepts."""
    return of(numerator) / of(denominator)

def of(value, denominator=None) -> Fraction:
    """
    Build a Fraction from
    - two integers: of(2, -4) == -1/2
    - an integer, Decimal, fractions.Fraction or Fraction: its exact value
    - a float (or numpy float32/float16): the simplest fraction with that float value, see of_simplest
    - a string: decimal, ratio or mixed number, see parsing.parse_fraction
    - two non-integers: of_ratio
    """
    if denominator is not None:
        if isinstance(value, (int, np.integer)) and isinstance(denominator, (int, np.integer)):
            return Fraction(value, denominator)
        return of_ratio(value, denominator)
    if isinstance(value, Fraction):
        return value
    if isinstance(value, (float, np.floating)):
        return of_simplest(value)
    if isinstance(value, str):
        from parsing import parse_fraction
        return parse_fraction(value)
    result = _coerce(value)
    if result is NotImplemented:
        raise TypeError(f"cannot convert {type(value).__name__} to Fraction")
    return result
