"""Precision-preserving numeric type for prices and indicator values.

Num wraps ``decimal.Decimal`` and evaluates every operation in a fixed
32-digit ROUND_HALF_UP context, so long recursive indicator chains do not
accumulate binary floating-point drift. It adds an explicit "not available"
state, ``Num.NaN``, which propagates through arithmetic instead of raising.

CRITICAL: All prices and indicator values use Num. Never use float for
indicator computations; floats are only accepted at construction time and
converted through their string form.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation

from ta_engine.config import NumSettings
from ta_engine.exceptions import FormatError, InvalidParameterError

#: Arithmetic context shared by all Num operations.
MATH_CONTEXT = Context(prec=NumSettings().precision, rounding=ROUND_HALF_UP)

_NAN_HASH = hash("ta_engine.Num.NaN")


@dataclass(frozen=True, eq=False)
class Num:
    """Immutable decimal value, or the unavailable marker ``Num.NaN``.

    Build instances with ``Num.of``; the constructor expects an already
    validated ``decimal.Decimal``.
    """

    value: Decimal

    # Class-level constants, assigned after the class body.
    NaN = None  # type: Num
    ZERO = None  # type: Num
    ONE = None  # type: Num
    HUNDRED = None  # type: Num

    @classmethod
    def of(cls, value: object) -> Num:
        """Convert int, float, str, Decimal or Num to a Num.

        Raises:
            FormatError: If text is not a valid number, or the value is infinite.
        """
        if isinstance(value, Num):
            return value
        if isinstance(value, bool):
            raise FormatError(f"booleans are not numeric values: {value!r}")
        if isinstance(value, Decimal):
            dec = value
        elif isinstance(value, int):
            dec = Decimal(value)
        elif isinstance(value, float):
            # Convert float to string first to avoid binary FP artifacts
            dec = Decimal(repr(value))
        elif isinstance(value, str):
            try:
                dec = Decimal(value.strip())
            except InvalidOperation as exc:
                raise FormatError(f"not a valid number: {value!r}") from exc
        else:
            raise FormatError(f"unsupported numeric type: {type(value).__name__}")

        if dec.is_nan():
            return cls.NaN
        if dec.is_infinite():
            raise FormatError(f"infinite values are not supported: {value!r}")
        return cls(dec)

    # ──────────────────────────────────────────────
    # State checks
    # ──────────────────────────────────────────────

    def is_nan(self) -> bool:
        """True for the unavailable marker."""
        return self.value.is_nan()

    def is_zero(self) -> bool:
        return not self.is_nan() and self.value.is_zero()

    def is_positive(self) -> bool:
        return not self.is_nan() and self.value > 0

    def is_negative(self) -> bool:
        return not self.is_nan() and self.value < 0

    def is_equal(self, other: object, epsilon: object) -> bool:
        """Tolerance equality: ``|self - other| <= epsilon``.

        Two unavailable values are equal; an unavailable value never equals
        an available one.

        Raises:
            InvalidParameterError: If ``epsilon`` is unavailable or negative.
        """
        tolerance = Num.of(epsilon)
        if tolerance.is_nan() or tolerance.is_negative():
            raise InvalidParameterError(f"epsilon must be a non-negative number, got {epsilon!r}")
        other = Num.of(other)
        if self.is_nan() or other.is_nan():
            return self.is_nan() and other.is_nan()
        difference = abs(self - other)
        return difference.value <= tolerance.value

    # ──────────────────────────────────────────────
    # Arithmetic
    # ──────────────────────────────────────────────

    def _apply(self, other: object, operation) -> Num:
        operand = _coerce(other)
        if operand is None:
            return NotImplemented
        if self.is_nan() or operand.is_nan():
            return Num.NaN
        return Num(operation(self.value, operand.value))

    def __add__(self, other: object) -> Num:
        return self._apply(other, MATH_CONTEXT.add)

    def __radd__(self, other: object) -> Num:
        return self._apply(other, lambda a, b: MATH_CONTEXT.add(b, a))

    def __sub__(self, other: object) -> Num:
        return self._apply(other, MATH_CONTEXT.subtract)

    def __rsub__(self, other: object) -> Num:
        return self._apply(other, lambda a, b: MATH_CONTEXT.subtract(b, a))

    def __mul__(self, other: object) -> Num:
        return self._apply(other, MATH_CONTEXT.multiply)

    def __rmul__(self, other: object) -> Num:
        return self._apply(other, lambda a, b: MATH_CONTEXT.multiply(b, a))

    def __truediv__(self, other: object) -> Num:
        divisor = _coerce(other)
        if divisor is None:
            return NotImplemented
        if divisor.is_zero():
            return Num.NaN
        return self._apply(divisor, MATH_CONTEXT.divide)

    def __rtruediv__(self, other: object) -> Num:
        dividend = _coerce(other)
        if dividend is None:
            return NotImplemented
        return dividend / self

    def __neg__(self) -> Num:
        if self.is_nan():
            return self
        return Num(MATH_CONTEXT.minus(self.value))

    def __abs__(self) -> Num:
        if self.is_nan():
            return self
        return Num(MATH_CONTEXT.abs(self.value))

    def sqrt(self) -> Num:
        """Square root; unavailable for negative values."""
        if self.is_nan() or self.value < 0:
            return Num.NaN
        return Num(MATH_CONTEXT.sqrt(self.value))

    def min(self, other: object) -> Num:
        other = Num.of(other)
        if self.is_nan() or other.is_nan():
            return Num.NaN
        return self if self.value <= other.value else other

    def max(self, other: object) -> Num:
        other = Num.of(other)
        if self.is_nan() or other.is_nan():
            return Num.NaN
        return self if self.value >= other.value else other

    # ──────────────────────────────────────────────
    # Comparison
    # ──────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        operand = _coerce(other)
        if operand is None:
            return NotImplemented
        if self.is_nan() or operand.is_nan():
            return self.is_nan() and operand.is_nan()
        return self.value == operand.value

    def __hash__(self) -> int:
        if self.is_nan():
            return _NAN_HASH
        return hash(self.value)

    def _compare(self, other: object, predicate) -> bool:
        operand = _coerce(other)
        if operand is None:
            return NotImplemented
        if self.is_nan() or operand.is_nan():
            return False
        return predicate(self.value, operand.value)

    def __lt__(self, other: object) -> bool:
        return self._compare(other, lambda a, b: a < b)

    def __le__(self, other: object) -> bool:
        return self._compare(other, lambda a, b: a <= b)

    def __gt__(self, other: object) -> bool:
        return self._compare(other, lambda a, b: a > b)

    def __ge__(self, other: object) -> bool:
        return self._compare(other, lambda a, b: a >= b)

    # ──────────────────────────────────────────────
    # Conversion
    # ──────────────────────────────────────────────

    def to_decimal(self) -> Decimal:
        return self.value

    def __float__(self) -> float:
        return float(self.value)

    def __int__(self) -> int:
        if self.is_nan():
            raise ValueError("cannot convert Num.NaN to int")
        return int(self.value)

    def __str__(self) -> str:
        return "NaN" if self.is_nan() else str(self.value)

    def __repr__(self) -> str:
        return f"Num('{self}')"


def _coerce(value: object) -> Num | None:
    """Promote a plain numeric operand to Num; None for unsupported types."""
    if isinstance(value, Num):
        return value
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return Num.of(value)
    return None


Num.NaN = Num(Decimal("NaN"))
Num.ZERO = Num(Decimal(0))
Num.ONE = Num(Decimal(1))
Num.HUNDRED = Num(Decimal(100))
