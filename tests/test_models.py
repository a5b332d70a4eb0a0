"""Test classes CalculationRequest and HistoryRecord."""
from datetime import datetime, timezone

from pydantic import ValidationError
import pytest

from arithmetic_history_service.common.models import CalculationRequest, HistoryRecord, Operation


def test_calculation_request_valid() -> None:
    """Test that a valid CalculationRequest can be created."""
    req = CalculationRequest(operation="add", operand1=2, operand2="3.5")
    assert req.operation is Operation.ADD
    assert req.operand1 == 2.0
    assert req.operand2 == 3.5
    assert isinstance(req.operand1, float)


@pytest.mark.parametrize("operation", ["ADD", "Add", "modulo", "", 1, None])
def test_calculation_request_invalid_operation(operation) -> None:
    """Test that operations outside the exact, lower-case set are rejected."""
    with pytest.raises(ValidationError):
        CalculationRequest(operation=operation, operand1=1, operand2=2)


@pytest.mark.parametrize("operand", ["abc", "NaN", "Infinity", float("nan"), float("inf"), True, None, [1]])
def test_calculation_request_invalid_operand(operand) -> None:
    """Test that non-finite or non-numeric operands are rejected."""
    with pytest.raises(ValidationError):
        CalculationRequest(operation="add", operand1=operand, operand2=2)


def test_calculation_request_is_frozen() -> None:
    """Test that a validated request cannot be mutated."""
    req = CalculationRequest(operation="add", operand1=1, operand2=2)
    with pytest.raises(ValidationError):
        req.operand1 = 10


def test_history_record_to_public() -> None:
    """Test the public shape of a history record."""
    created_at = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    record = HistoryRecord(
        id=1, operation="multiply", operand1=2.5, operand2=4, result=10, created_at=created_at
    )
    assert record.to_public() == {
        "operation": "multiply",
        "operand1": 2.5,
        "operand2": 4.0,
        "result": 10.0,
        "timestamp": "2024-01-02T03:04:05+00:00",
    }


def test_history_record_parses_iso_timestamp() -> None:
    """Test that a stored ISO-8601 string is read back as a datetime."""
    record = HistoryRecord(
        id=3, operation="add", operand1=1, operand2=1, result=2, created_at="2024-01-02T03:04:05+00:00"
    )
    assert record.created_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
