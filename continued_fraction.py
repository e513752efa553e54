"""
Simple continued fractions [a0; a1, a2, ...] and their convergents.

Only finite continued fractions are supported: expansions of a Fraction always
terminate, explicit term lists are finite by construction.
"""
from __future__ import annotations
from typing import Callable, Iterable, Iterator, Sequence

from fraction import Fraction

def euclid_terms(fraction: Fraction) -> Iterator[int]:
    """Partial quotients of fraction by the Euclidean algorithm (floor division)."""
    a, b = fraction.numerator, fraction.denominator
    while b != 0:
        q, r = divmod(a, b)
        yield q
        a, b = b, r

class ContinuedFraction:
    """
    Restartable sequence of partial quotients. Built from a Fraction, the terms are
    recomputed lazily on every iteration; built from a list, the list is replayed.
    """

    def __init__(self, source: Fraction | Sequence[int]):
        self._source = source

    @classmethod
    def of(cls, value: Fraction | Iterable[int]) -> ContinuedFraction:
        if isinstance(value, Fraction):
            if value.denominator == 0:
                raise ArithmeticError(value.to_string(0))
            return cls(value)
        terms = [int(t) for t in value]
        if not terms:
            raise ValueError("Empty collection")
        return cls(terms)

    def __iter__(self) -> Iterator[int]:
        if isinstance(self._source, Fraction):
            return euclid_terms(self._source)
        return iter(self._source)

    def __repr__(self):
        return f"ContinuedFraction({self})"

    def __str__(self):
        terms = []
        for n, term in enumerate(self):
            if n > 10:
                terms.append("...")
                break
            terms.append(str(term))
        if len(terms) == 1:
            return f"[{terms[0]}]"
        return f"[{terms[0]}; {', '.join(terms[1:])}]"

    def convergents(self) -> Iterator[Fraction]:
        """
        Successive convergents p_i/q_i with
          p_i = a_i*p_{i-1} + p_{i-2},  q_i = a_i*q_{i-1} + q_{i-2}
        seeded by p_{-1}=1, p_{-2}=0, q_{-1}=0, q_{-2}=1.
        """
        p_prev, q_prev = 0, 1
        p, q = 1, 0
        for a in self:
            p, p_prev = a * p + p_prev, p
            q, q_prev = a * q + q_prev, q
            yield Fraction(p, q)

    def to_fraction(self, limit: int | Callable[[Fraction], bool] | None = None) -> Fraction:
        """
        Convert back to a Fraction.

        - limit=None: all terms, the exact value
        - limit=n: the convergent built from the first n terms (simplifies the value)
        - limit=predicate: the first convergent for which predicate holds, or the exact
          value if none does. Only first order convergents are tried.
        """
        if callable(limit):
            result = None
            for result in self.convergents():
                if limit(result):
                    return result
            return result
        if limit is not None and limit < 1:
            raise ValueError(f"to_fraction needs at least one term, got {limit}")
        result = None
        for i, result in enumerate(self.convergents(), 1):
            if i == limit:
                break
        return result

    def compare_to(self, other: ContinuedFraction) -> int:
        return self.to_fraction().compare_to(other.to_fraction())

    def __eq__(self, other):
        if not isinstance(other, ContinuedFraction):
            return NotImplemented
        return self.to_fraction() == other.to_fraction()

    def __hash__(self):
        return hash(self.to_fraction())

    def __lt__(self, other):
        if not isinstance(other, ContinuedFraction):
            return NotImplemented
        return self.compare_to(other) < 0

    def __le__(self, other):
        if not isinstance(other, ContinuedFraction):
            return NotImplemented
        return self.compare_to(other) <= 0

    def __gt__(self, other):
        if not isinstance(other, ContinuedFraction):
            return NotImplemented
        return self.compare_to(other) > 0

    def __ge__(self, other):
        if not isinstance(other, ContinuedFraction):
            return NotImplemented
        return self.compare_to(other) >= 0

    def __float__(self):
        return self.to_fraction().to_double()

    def __int__(self):
        return self.to_fraction().to_big_integer()

    def to_decimal(self, *args, **kwargs):
        return self.to_fraction().to_decimal(*args, **kwargs)
