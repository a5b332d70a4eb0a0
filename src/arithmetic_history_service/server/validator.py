"""Validate raw calculation payloads before any computation happens."""
from collections.abc import Mapping
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from arithmetic_history_service.common.models import CalculationRequest, Operation, Violation

OPERATION_MESSAGE: str = "Operation must be one of: " + ", ".join(op.value for op in Operation)


class ValidationOutcome(BaseModel):
    """Either a validated request or the list of field-level violations."""

    model_config = ConfigDict(frozen=True)

    request: Optional[CalculationRequest] = Field(default=None, description="Validated request")
    violations: List[Violation] = Field(default_factory=list, description="Field-level failures")

    @property
    def is_valid(self) -> bool:
        """True when the payload was accepted."""
        return self.request is not None and not self.violations


class RequestValidator:
    """
    Check a raw payload against the accepted request shape.

    Rules:
        - ``operation`` is one of add, subtract, multiply, divide (exact, case-sensitive)
        - ``operand1`` and ``operand2`` parse as finite floats
        - every failing field produces exactly one violation, in field order

    The validator has no side effects and never invokes the calculator.
    """

    @staticmethod
    def _message(field: str, error_type: str) -> str:
        """
        Build the caller-facing message for a failing field.

        :param str field: Name of the failing field
        :param str error_type: Pydantic error type (e.g. "missing", "enum")

        :return: Human-readable message
        :rtype: str
        """
        if error_type == "missing":
            return f"{field} is required"
        if field == "operation":
            return OPERATION_MESSAGE
        return f"{field} must be a finite number"

    @staticmethod
    def validate(payload: Any) -> ValidationOutcome:
        """
        Validate a decoded request body.

        :param Any payload: Decoded JSON body (anything, including None)

        :return: Outcome holding the request or the violations
        :rtype: ValidationOutcome
        """
        if not isinstance(payload, Mapping):
            return ValidationOutcome(
                violations=[Violation(field="body", message="Request body must be a JSON object")]
            )

        try:
            request = CalculationRequest.model_validate(dict(payload))
        except ValidationError as exc:
            violations: List[Violation] = []
            seen: set = set()
            for error in exc.errors():
                field = str(error["loc"][0]) if error["loc"] else "body"
                # Keep only the first error reported for a field
                if field in seen:
                    continue
                seen.add(field)
                violations.append(
                    Violation(field=field, message=RequestValidator._message(field, error["type"]))
                )
            return ValidationOutcome(violations=violations)

        return ValidationOutcome(request=request)
