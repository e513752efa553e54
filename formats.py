from dataclasses import dataclass
from math import ldexp

import numpy as np

@dataclass(frozen=True)
class FloatFormat:
    name: str
    exponent_bits: int  # width of the stored exponent field
    mantissa_bits: int  # width of the stored fraction field
    storage: type       # numpy unsigned integer holding the bit pattern
    native: type        # numpy float type values travel as

    @property
    def p(self) -> int:
        """Precision in bits, implicit leading 1 included."""
        return self.mantissa_bits + 1

    @property
    def emax(self) -> int:
        return (1 << (self.exponent_bits - 1)) - 1

    @property
    def emin(self) -> int:
        return 1 - self.emax

    @property
    def bias(self) -> int:
        """Subtrahend turning the exponent field into the exponent of an integer significand."""
        return self.emax + self.mantissa_bits

    @property
    def exponent_max_field(self) -> int:
        """All-ones exponent field, the encoding of infinities and NaNs."""
        return (1 << self.exponent_bits) - 1

    @property
    def sign_bit(self) -> int:
        return 1 << (self.exponent_bits + self.mantissa_bits)

    @property
    def mantissa_mask(self) -> int:
        return (1 << self.mantissa_bits) - 1

    # magnitudes, all exact powers of two (or one ulp short of one)
    @property
    def eps(self) -> float:
        return ldexp(1.0, -self.mantissa_bits)

    @property
    def u(self) -> float:
        return ldexp(1.0, -self.p)

    @property
    def min_normal(self) -> float:
        return ldexp(1.0, self.emin)

    @property
    def denorm_min(self) -> float:
        return ldexp(1.0, self.emin - self.mantissa_bits)

    @property
    def Fmax(self) -> float:
        return ldexp(float((1 << self.p) - 1), self.emax - self.mantissa_bits)

# (exponent_bits, mantissa_bits, storage, native)
# bfloat16 has no numpy dtype: its values travel as float32, its bits are the top half.
_BINARY64 = (11, 52, np.uint64, np.float64)
_BINARY32 = (8, 23, np.uint32, np.float32)
_BINARY16 = (5, 10, np.uint16, np.float16)
_BFLOAT16 = (8, 7, np.uint16, np.float32)

_REGISTRY = {
    "float64":   _BINARY64,
    "fp64":      _BINARY64,
    "binary64":  _BINARY64,
    "double":    _BINARY64,

    "float32":   _BINARY32,
    "fp32":      _BINARY32,
    "binary32":  _BINARY32,
    "single":    _BINARY32,
    "float":     _BINARY32,

    "float16":   _BINARY16,
    "fp16":      _BINARY16,
    "binary16":  _BINARY16,
    "half":      _BINARY16,

    "bfloat16":  _BFLOAT16,
    "bf16":      _BFLOAT16,
}

def get_float_format(name: str) -> FloatFormat:
    key = (name or "float64").lower()
    if key not in _REGISTRY:
        raise NotImplementedError(f"Format '{name}' not implemented. Supported formats {sorted(_REGISTRY.keys())}")
    return FloatFormat(key, *_REGISTRY[key])

DOUBLE = get_float_format("binary64")
SINGLE = get_float_format("binary32")
HALF = get_float_format("binary16")
BFLOAT16 = get_float_format("bfloat16")

def format_of(value) -> FloatFormat:
    """Format a native float value is stored in: numpy scalars by dtype, Python floats as binary64."""
    if isinstance(value, np.floating):
        if value.dtype == np.float32:
            return SINGLE
        if value.dtype == np.float16:
            return HALF
        if value.dtype == np.float64:
            return DOUBLE
        raise NotImplementedError(f"Format for dtype {value.dtype!r} not implemented.")
    return DOUBLE
