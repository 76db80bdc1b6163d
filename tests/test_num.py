"""Tests for the Num precision model.

Covers construction and FormatError, NaN propagation through every
operation, division by zero, comparison semantics and tolerance equality.
"""

from decimal import Decimal

import pytest

from ta_engine.exceptions import FormatError, InvalidParameterError
from ta_engine.num import Num


class TestConstruction:
    """Tests for Num.of."""

    def test_from_text(self) -> None:
        """Numeric text converts exactly."""
        assert Num.of("21.0711").to_decimal() == Decimal("21.0711")

    def test_from_int_and_decimal(self) -> None:
        """Ints and Decimals with equal value are equal."""
        assert Num.of(3) == Num.of(Decimal("3.0"))

    def test_float_goes_through_text(self) -> None:
        """0.1 is taken as written, not as its binary approximation."""
        assert Num.of(0.1).to_decimal() == Decimal("0.1")

    def test_num_passes_through(self) -> None:
        """An existing Num is returned unchanged."""
        value = Num.of("1.5")
        assert Num.of(value) is value

    def test_nan_text_is_unavailable(self) -> None:
        """NaN text and float NaN map to the unavailable marker."""
        assert Num.of("NaN").is_nan()
        assert Num.of(float("nan")) is Num.NaN

    @pytest.mark.parametrize("text", ["", "abc", "1,000", "12.3.4", "#N/A"])
    def test_malformed_text_raises(self, text: str) -> None:
        """Text that is not a number raises FormatError."""
        with pytest.raises(FormatError):
            Num.of(text)

    def test_infinity_rejected(self) -> None:
        """Infinite values are not representable."""
        with pytest.raises(FormatError):
            Num.of("Infinity")

    def test_unsupported_type_rejected(self) -> None:
        """Non-numeric types raise FormatError."""
        with pytest.raises(FormatError):
            Num.of([1])

    def test_format_error_is_value_error(self) -> None:
        """FormatError can be caught as ValueError."""
        with pytest.raises(ValueError):
            Num.of("x")


class TestNaNPropagation:
    """Any operation touching NaN yields NaN rather than raising."""

    @pytest.mark.parametrize(
        "operation",
        [
            lambda a, b: a + b,
            lambda a, b: a - b,
            lambda a, b: a * b,
            lambda a, b: a / b,
            lambda a, b: b / a,
            lambda a, b: a.min(b),
            lambda a, b: a.max(b),
        ],
    )
    def test_binary_operations(self, operation) -> None:
        """NaN on either side of a binary operation gives NaN."""
        assert operation(Num.NaN, Num.of("2")).is_nan()
        assert operation(Num.of("2"), Num.NaN).is_nan()

    def test_unary_operations(self) -> None:
        """Negation, abs and sqrt of NaN give NaN."""
        assert (-Num.NaN).is_nan()
        assert abs(Num.NaN).is_nan()
        assert Num.NaN.sqrt().is_nan()

    def test_plain_operands_promoted(self) -> None:
        """Plain numbers combined with NaN give NaN."""
        assert (Num.NaN + 1).is_nan()
        assert (1 - Num.NaN).is_nan()

    def test_division_by_zero_is_nan(self) -> None:
        """Division by zero gives NaN instead of raising."""
        assert (Num.of("5") / Num.ZERO).is_nan()
        assert (Num.ZERO / 0).is_nan()

    def test_sqrt_of_negative_is_nan(self) -> None:
        """The square root of a negative number is unavailable."""
        assert Num.of(-4).sqrt().is_nan()


class TestArithmetic:
    """Tests for arithmetic on available values."""

    def test_exact_decimal_addition(self) -> None:
        """0.1 + 0.2 is exactly 0.3."""
        assert Num.of("0.1") + Num.of("0.2") == Num.of("0.3")

    def test_mixed_operands(self) -> None:
        """Ints on either side of an operator are promoted."""
        assert 2 * Num.of("1.5") == Num.of(3)
        assert Num.of(10) / 4 == Num.of("2.5")
        assert 1 - Num.of("0.25") == Num.of("0.75")

    def test_division_uses_32_digits(self) -> None:
        """Division rounds to 32 significant digits."""
        third = Num.ONE / 3
        assert third.to_decimal() == Decimal("0." + "3" * 32)

    def test_min_max(self) -> None:
        """min and max accept plain numbers."""
        assert Num.of(2).min(3) == Num.of(2)
        assert Num.of(2).max(3) == Num.of(3)

    def test_sqrt(self) -> None:
        """The square root of a perfect square is exact."""
        assert Num.of(16).sqrt() == Num.of(4)

    def test_abs_and_neg(self) -> None:
        """abs and unary minus flip the sign as expected."""
        assert abs(Num.of("-1.5")) == Num.of("1.5")
        assert -Num.of("1.5") == Num.of("-1.5")

    def test_state_checks(self) -> None:
        """Zero, sign and NaN checks are mutually consistent."""
        assert Num.ZERO.is_zero()
        assert Num.of(1).is_positive()
        assert Num.of(-1).is_negative()
        assert not Num.NaN.is_zero()
        assert not Num.NaN.is_positive()


class TestComparison:
    """Tests for ordering, equality and tolerance equality."""

    def test_ordering(self) -> None:
        """Ordering works against Num and plain numbers."""
        assert Num.of(1) < Num.of(2)
        assert Num.of(2) >= 2

    def test_comparisons_with_nan_are_false(self) -> None:
        """Every ordering comparison involving NaN is false."""
        assert not Num.NaN < Num.of(1)
        assert not Num.NaN > Num.of(1)
        assert not Num.of(1) <= Num.NaN
        assert not Num.of(1) >= Num.NaN

    def test_nan_sentinel_equals_itself(self) -> None:
        """NaN equals NaN and nothing else."""
        assert Num.NaN == Num.of("NaN")
        assert Num.NaN != Num.ZERO

    def test_hash_consistent_with_equality(self) -> None:
        """Equal values hash equally, NaN included."""
        assert hash(Num.of("1.0")) == hash(Num.of(1))
        assert len({Num.NaN, Num.of("NaN")}) == 1

    def test_is_equal_within_epsilon(self) -> None:
        """Values within the tolerance are equal."""
        assert Num.of("21.07105").is_equal(Num.of("21.0711"), Num.of("0.0001"))

    def test_is_equal_outside_epsilon(self) -> None:
        """Values beyond the tolerance are not equal."""
        assert not Num.of("21.07").is_equal(Num.of("21.0711"), Num.of("0.0001"))

    def test_is_equal_accepts_plain_values(self) -> None:
        """Text and float operands are accepted for value and tolerance."""
        assert Num.of("20.90201").is_equal("20.9020", 0.0001)

    def test_is_equal_with_nan(self) -> None:
        """Two NaNs are equal; NaN never equals a number."""
        assert Num.NaN.is_equal(Num.NaN, "0.0001")
        assert not Num.NaN.is_equal(Num.ZERO, "0.0001")
        assert not Num.ZERO.is_equal(Num.NaN, "0.0001")

    @pytest.mark.parametrize("epsilon", ["NaN", "-0.0001", Num.NaN])
    def test_is_equal_rejects_bad_epsilon(self, epsilon) -> None:
        """An unavailable or negative tolerance is a parameter error, not a mismatch."""
        with pytest.raises(InvalidParameterError, match="epsilon"):
            Num.of(1).is_equal(Num.of(2), epsilon)
        with pytest.raises(InvalidParameterError):
            Num.NaN.is_equal(Num.NaN, epsilon)


class TestConversion:
    """Tests for conversion to Python types."""

    def test_str_and_repr(self) -> None:
        """str keeps the written digits; repr shows the constructor."""
        assert str(Num.of("1.50")) == "1.50"
        assert str(Num.NaN) == "NaN"
        assert repr(Num.of(2)) == "Num('2')"

    def test_float_and_int(self) -> None:
        """float and int conversions truncate like Decimal."""
        assert float(Num.of("2.5")) == 2.5
        assert int(Num.of("2.9")) == 2

    def test_int_of_nan_raises(self) -> None:
        """NaN has no integer value."""
        with pytest.raises(ValueError):
            int(Num.NaN)
