from __future__ import annotations
import decimal
from enum import Enum
from typing import Dict, List

DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
MIN_RADIX = 2
MAX_RADIX = len(DIGITS)
DEFAULT_RADIX = 10
DEFAULT_REPEATING_LIMIT = 255

class RoundingMode(str, Enum):
    """Rounding of an exact quotient to an integer.

    Values mirror the `decimal` module constants so a mode can be handed to
    `Decimal.quantize` directly. UNNECESSARY asserts that no rounding happens.
    """
    UP = decimal.ROUND_UP
    DOWN = decimal.ROUND_DOWN
    CEILING = decimal.ROUND_CEILING
    FLOOR = decimal.ROUND_FLOOR
    HALF_UP = decimal.ROUND_HALF_UP
    HALF_DOWN = decimal.ROUND_HALF_DOWN
    HALF_EVEN = decimal.ROUND_HALF_EVEN
    UNNECESSARY = "UNNECESSARY"

def check_radix(radix: int) -> int:
    if not MIN_RADIX <= radix <= MAX_RADIX:
        raise ValueError(f"radix must be between {MIN_RADIX} and {MAX_RADIX}, got {radix}")
    return radix

def int_to_str(value: int, radix: int = DEFAULT_RADIX) -> str:
    """Render an integer in the given radix with lower-case digits."""
    check_radix(radix)
    if radix == 10:
        return str(value)
    if value == 0:
        return "0"
    sign = '-' if value < 0 else ''
    value = abs(value)
    out = []
    while value:
        value, d = divmod(value, radix)
        out.append(DIGITS[d])
    return sign + ''.join(reversed(out))

def round_magnitude(quotient: int, remainder: int, divisor: int,
                    mode: RoundingMode, negative: bool = False) -> int:
    """
    Round the truncated magnitude quotient of |x| / divisor to an integer magnitude.
    - quotient, remainder: |x| = quotient * divisor + remainder, 0 <= remainder < divisor
    - negative: sign of x, needed by CEILING and FLOOR
    """
    if remainder == 0:
        return quotient
    mode = RoundingMode(mode)
    if mode is RoundingMode.DOWN:
        return quotient
    if mode is RoundingMode.UP:
        return quotient + 1
    if mode is RoundingMode.CEILING:
        return quotient if negative else quotient + 1
    if mode is RoundingMode.FLOOR:
        return quotient + 1 if negative else quotient
    twice = remainder << 1
    if mode is RoundingMode.HALF_UP:
        return quotient + 1 if twice >= divisor else quotient
    if mode is RoundingMode.HALF_DOWN:
        return quotient + 1 if twice > divisor else quotient
    if mode is RoundingMode.HALF_EVEN:
        if twice > divisor or (twice == divisor and quotient & 1):
            return quotient + 1
        return quotient
    raise ArithmeticError("Rounding necessary")

def divide_rounded(numerator: int, denominator: int, mode: RoundingMode = RoundingMode.DOWN) -> int:
    """numerator / denominator rounded to an integer; denominator must be positive."""
    if denominator <= 0:
        raise ValueError(f"divide_rounded requires a positive denominator, got {denominator}")
    negative = numerator < 0
    q, r = divmod(abs(numerator), denominator)
    q = round_magnitude(q, r, denominator, mode, negative)
    return -q if negative else q

def shift_right_half_even(value: int, shift: int) -> int:
    """value / 2^shift for value >= 0, rounded half to even."""
    if shift <= 0:
        return value << -shift
    if shift > value.bit_length():
        # below half a unit in the last place
        return 0
    return round_magnitude(value >> shift, value & ((1 << shift) - 1), 1 << shift, RoundingMode.HALF_EVEN)

def positional_digits(numerator: int, denominator: int, n: int,
                      radix: int = DEFAULT_RADIX, mode: RoundingMode = RoundingMode.DOWN) -> str:
    """
    Positional expansion of numerator/denominator (denominator > 0) with at most n
    fractional digits. Long division stops early once the remainder is zero; otherwise
    the last digit is rounded with `mode` (DOWN truncates). n == 0 yields the rounded integer.
    """
    check_radix(radix)
    negative = numerator < 0
    q, rem = divmod(abs(numerator), denominator)
    k = 0
    scaled = q
    while k < n and rem != 0:
        rem *= radix
        digit, rem = divmod(rem, denominator)
        scaled = scaled * radix + digit
        k += 1
    scaled = round_magnitude(scaled, rem, denominator, mode, negative)
    sign = '-' if negative and scaled != 0 else ''
    s = int_to_str(scaled, radix)
    if k == 0:
        return sign + s
    s = s.rjust(k + 1, '0')
    return f"{sign}{s[:-k]}.{s[-k:]}"

def repeating_digits(numerator: int, denominator: int, radix: int = DEFAULT_RADIX,
                     limit: int = DEFAULT_REPEATING_LIMIT) -> str:
    """
    Exact positional expansion of numerator/denominator (denominator > 0).
    - If it terminates, returns all digits.
    - If it repeats, the repeating block is put in parentheses, e.g. "0.58(3)".
    - If more than `limit` digits are needed, returns them followed by "..." (limit <= 0: no limit).
    The integer part is never part of the repeating block.
    """
    check_radix(radix)
    sign = '-' if numerator < 0 else ''
    int_part, rem = divmod(abs(numerator), denominator)
    head = f"{sign}{int_to_str(int_part, radix)}"
    if rem == 0:
        return head

    # Long division for fractional part with cycle detection
    digits: List[str] = []
    seen: Dict[int, int] = {}  # remainder -> index in digits
    while rem != 0:
        start = seen.get(rem)
        if start is not None:
            return f"{head}.{''.join(digits[:start])}({''.join(digits[start:])})"
        seen[rem] = len(digits)
        if 0 < limit < len(seen):
            return f"{head}.{''.join(digits)}..."
        rem *= radix
        digit, rem = divmod(rem, denominator)
        digits.append(DIGITS[digit])
    return f"{head}.{''.join(digits)}"
