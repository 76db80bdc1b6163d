"""External verification of indicators against reference fixtures.

Provides the spreadsheet-like Sheet source, the ReferenceFixture reader and
the VerificationHarness that compares factory-built indicators with the
fixture's expected columns.
"""

from ta_engine.verification.fixture import ReferenceFixture, open_fixture
from ta_engine.verification.harness import (
    ReferenceIndicator,
    VerificationHarness,
    assert_indicator_equals,
)
from ta_engine.verification.sheet import Formula, Sheet, load_csv

__all__ = [
    "Formula",
    "ReferenceFixture",
    "ReferenceIndicator",
    "Sheet",
    "VerificationHarness",
    "assert_indicator_equals",
    "load_csv",
    "open_fixture",
]
