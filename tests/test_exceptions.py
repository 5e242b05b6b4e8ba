"""Unit tests for the error hierarchy."""

import pytest

from ic_core_lib.exceptions import (
    IncidentCommandError,
    InvalidMoveError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "error_cls,code",
    [
        (ValidationError, "VALIDATION_ERROR"),
        (InvalidMoveError, "INVALID_MOVE"),
        (NotFoundError, "NOT_FOUND"),
        (PersistenceError, "PERSISTENCE_ERROR"),
    ],
)
def test_should_carry_default_error_codes(error_cls, code):
    """Test each error exposes its machine-readable code."""
    error = error_cls("boom", context={"incident_id": "INC-1"})

    assert isinstance(error, IncidentCommandError)
    assert error.error_code == code
    assert error.context == {"incident_id": "INC-1"}
    assert str(error) == "boom"


@pytest.mark.unit
def test_should_allow_code_override():
    """Test an explicit error_code wins over the default."""
    assert ValidationError("x", error_code="CUSTOM").error_code == "CUSTOM"
    assert IncidentCommandError("x").context == {}
