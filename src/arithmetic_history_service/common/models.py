"""Pydantic models for calculation requests, violations and history records."""
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


class Operation(str, Enum):
    """The four supported binary operations."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"


def _reject_bool(value: Any) -> Any:
    """Refuse booleans, which pydantic would otherwise coerce to 0.0 / 1.0."""
    if isinstance(value, bool):
        raise ValueError("Booleans are not numbers")
    return value


Operand = Annotated[float, BeforeValidator(_reject_bool)]


class CalculationRequest(BaseModel):
    """A validated request for a single binary operation."""

    model_config = ConfigDict(frozen=True)

    operation: Operation = Field(..., description="Operation to apply")
    operand1: Operand = Field(..., allow_inf_nan=False, description="Left operand")
    operand2: Operand = Field(..., allow_inf_nan=False, description="Right operand")


class Violation(BaseModel):
    """A field-level validation failure reported back to the caller."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(..., description="Name of the offending field")
    message: str = Field(..., description="Human-readable explanation")


class HistoryRecord(BaseModel):
    """
    An immutable, persisted record of one completed calculation.

    ``id`` and ``created_at`` are always assigned by the history store.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1, description="Store-assigned, strictly increasing identifier")
    operation: Operation
    operand1: float
    operand2: float
    result: float
    created_at: datetime = Field(..., description="UTC time the record was written")

    def to_public(self) -> Dict[str, Any]:
        """
        Return the shape exposed by ``GET /history``.

        :return: Mapping with operation, operands, result and ISO-8601 timestamp
        :rtype: Dict[str, Any]
        """
        return {
            "operation": self.operation.value,
            "operand1": self.operand1,
            "operand2": self.operand2,
            "result": self.result,
            "timestamp": self.created_at.isoformat(),
        }
