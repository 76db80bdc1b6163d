"""Verification of indicators against reference fixture columns.

The harness ties one IndicatorFactory to one expected column of an open
fixture. For a parameter vector it writes the parameters into the fixture,
reads the recalculated column, builds the indicator through the factory and
compares both index by index over the reference series. The first value
outside the tolerance aborts the comparison with a ToleranceMismatchError.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from ta_engine.config import VerificationSettings
from ta_engine.exceptions import FixtureFormatError, ToleranceMismatchError
from ta_engine.indicators.base import Indicator
from ta_engine.indicators.factory import IndicatorFactory
from ta_engine.logging import get_logger, verification_context
from ta_engine.num import Num
from ta_engine.series.time_series import TimeSeries
from ta_engine.verification.fixture import ReferenceFixture

logger = get_logger(__name__)


class ReferenceIndicator(Indicator):
    """Indicator backed by precomputed reference values.

    ``values[k]`` is the value at ``series.begin_index + k``.

    Raises:
        FixtureFormatError: If the number of values differs from the bar count.
    """

    def __init__(self, series: TimeSeries, values: Sequence[Num]) -> None:
        super().__init__(series)
        if len(values) != series.bar_count:
            raise FixtureFormatError(
                f"{len(values)} reference values for {series.bar_count} bars "
                f"of series {series.name!r}"
            )
        self._values = tuple(values)

    def get_value(self, index: int) -> Num:
        self._series.check_index(index)
        return self._values[index - self._series.begin_index]


def assert_indicator_equals(
    expected: Indicator,
    actual: Indicator,
    epsilon: Num | Decimal | str | float,
) -> None:
    """Compare two indicators over every index of ``expected``'s series.

    Raises:
        ToleranceMismatchError: At the first index where the values differ by
            more than ``epsilon``.
    """
    for index in expected.series.indices():
        expected_value = expected.get_value(index)
        actual_value = actual.get_value(index)
        if not actual_value.is_equal(expected_value, epsilon):
            logger.warning(
                "verification_mismatch",
                indicator=actual.name,
                index=index,
                expected=str(expected_value),
                actual=str(actual_value),
                epsilon=str(epsilon),
            )
            raise ToleranceMismatchError(index, expected_value, actual_value, epsilon)


class VerificationHarness:
    """Checks indicators built by ``factory`` against one fixture column.

    Args:
        factory: Builds the indicator under test from a parameter vector.
        fixture: An open reference fixture.
        column_index: Column of the fixture holding the expected values.
        settings: Default tolerance.
    """

    def __init__(
        self,
        factory: IndicatorFactory,
        fixture: ReferenceFixture,
        column_index: int,
        settings: VerificationSettings | None = None,
    ) -> None:
        self._factory = factory
        self._fixture = fixture
        self._column_index = column_index
        self._settings = settings or VerificationSettings()

    @property
    def factory(self) -> IndicatorFactory:
        return self._factory

    @property
    def epsilon(self) -> Decimal:
        return self._settings.epsilon

    def series(self) -> TimeSeries:
        """The reference series of the fixture."""
        return self._fixture.series()

    def expected(self, *params: object) -> ReferenceIndicator:
        """Apply ``params`` to the fixture and wrap the recalculated column."""
        self._fixture.apply_parameters(params)
        values = self._fixture.read_column(self._column_index)
        return ReferenceIndicator(self.series(), values)

    def actual(
        self,
        series: TimeSeries,
        *params: object,
        prerequisite: Indicator | None = None,
    ) -> Indicator:
        """Build the indicator under test through the factory."""
        return self._factory.build(series, prerequisite, *params)

    def compare(
        self,
        indicator: Indicator,
        column_index: int | None = None,
        epsilon: object = None,
    ) -> None:
        """Compare ``indicator`` with a fixture column at the current parameters.

        Raises:
            ToleranceMismatchError: At the first index outside ``epsilon``.
            FixtureFormatError: If the column has missing or non-numeric cells.
        """
        if column_index is None:
            column_index = self._column_index
        if epsilon is None:
            epsilon = self._settings.epsilon
        series = self.series()
        expected = ReferenceIndicator(series, self._fixture.read_column(column_index))
        assert_indicator_equals(expected, indicator, epsilon)
        logger.info(
            "verification_passed",
            indicator=indicator.name,
            fixture=self._fixture.name,
            column=column_index,
            bars=series.bar_count,
        )

    def verify(
        self,
        *params: object,
        epsilon: object = None,
        prerequisite: Indicator | None = None,
    ) -> Indicator:
        """Apply ``params``, build the indicator and compare it with the column.

        Returns:
            The verified indicator, for further assertions.
        """
        with verification_context(
            factory=self._factory.name,
            fixture=self._fixture.name,
            params=[str(p) for p in params],
        ):
            self._fixture.apply_parameters(params)
            indicator = self.actual(self.series(), *params, prerequisite=prerequisite)
            self.compare(indicator, epsilon=epsilon)
        return indicator
