"""
Exact decomposition of IEEE-754 binary values into significand * 2^exp and back.

Only finite, nonzero values are handled here; NaN, infinities and zeros are the
caller's business (see fraction.of_exact / Fraction.to_format).
"""
from __future__ import annotations
from dataclasses import dataclass
import math

import numpy as np

from arithmetic import shift_right_half_even
from formats import FloatFormat, DOUBLE, BFLOAT16, format_of

@dataclass(frozen=True)
class FloatBits:
    significand: int    # signed
    exp: int            # value = significand * 2^exp

def _is_bfloat16(fmt: FloatFormat) -> bool:
    return fmt.storage is BFLOAT16.storage and fmt.native is BFLOAT16.native

def to_bits(value, fmt: FloatFormat = DOUBLE) -> int:
    """Raw bit pattern of the value of fmt nearest to value (ties to even)."""
    if _is_bfloat16(fmt):
        if is_finite_nonzero(value):
            # round once from the source format, not through binary32
            bits = decompose(value)
            value = recompose(bits.significand, bits.exp, fmt)
        # bfloat16 is the top half of a binary32
        top = int(np.float32(value).view(np.uint32)) >> 16
        if value != value:
            # keep NaN a NaN when its payload sat in the dropped half
            top |= 0x0040
        return top
    return int(fmt.native(value).view(fmt.storage))

def from_bits(bits: int, fmt: FloatFormat = DOUBLE):
    """Reinterpret a raw bit pattern; binary64 yields a Python float, narrower formats numpy scalars."""
    if _is_bfloat16(fmt):
        return np.uint32(bits << 16).view(np.float32)
    value = fmt.storage(bits).view(fmt.native)
    if fmt.native is np.float64:
        return float(value)
    return value

def is_finite_nonzero(value) -> bool:
    return math.isfinite(value) and value != 0

def decompose(value, fmt: FloatFormat | None = None) -> FloatBits:
    """
    Split a finite, nonzero float into (significand, exp) with value == significand * 2^exp exactly.

    Normal values get the implicit leading 1; subnormals (exponent field 0) do not,
    and their exponent field is read as 1.
    """
    if fmt is None:
        fmt = format_of(value)
    if not is_finite_nonzero(value):
        raise ValueError(f"decompose requires a finite nonzero value, got {value!r}")
    bits = to_bits(value, fmt)
    negative = bool(bits & fmt.sign_bit)
    field = (bits >> fmt.mantissa_bits) & fmt.exponent_max_field
    significand = bits & fmt.mantissa_mask
    if field > 0:
        significand |= 1 << fmt.mantissa_bits
    else:
        field = 1
    if negative:
        significand = -significand
    return FloatBits(significand, field - fmt.bias)

def recompose(significand: int, exp: int, fmt: FloatFormat = DOUBLE):
    """
    Nearest value of fmt to significand * 2^exp, ties to even.

    Rounds once, at the last bit the result can hold: the leading bit for normal
    results, the fixed 2^(1 - bias) position for subnormals. Overflow gives the
    signed infinity, underflow the signed zero.
    """
    negative = significand < 0
    mantissa = abs(significand)
    sign = fmt.sign_bit if negative else 0
    if mantissa == 0:
        return from_bits(sign, fmt)

    # lowest exponent a mantissa bit may carry (denormal floor, field = 1)
    floor_exp = 1 - fmt.bias
    shift = mantissa.bit_length() - fmt.p
    if exp + shift < floor_exp:
        shift = floor_exp - exp
    mantissa = shift_right_half_even(mantissa, shift)
    exp += shift
    if mantissa.bit_length() > fmt.p:
        # rounding carried into a new bit; the dropped bit is zero
        mantissa >>= 1
        exp += 1

    if mantissa >> fmt.mantissa_bits:
        field = exp + fmt.bias
    else:
        # subnormal (or flushed to zero); exp sits at the floor here
        field = 0
    if field >= fmt.exponent_max_field:
        return from_bits(sign | (fmt.exponent_max_field << fmt.mantissa_bits), fmt)
    return from_bits(sign | (field << fmt.mantissa_bits) | (mantissa & fmt.mantissa_mask), fmt)
