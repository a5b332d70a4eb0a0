"""Orchestrate validation, calculation and history persistence."""
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from arithmetic_history_service.common.errors import DomainError, StorageUnavailableError
from arithmetic_history_service.common.logger import logger
from arithmetic_history_service.common.models import Violation
from arithmetic_history_service.server.calculator import Calculator
from arithmetic_history_service.server.history_store import HistoryStore
from arithmetic_history_service.server.validator import RequestValidator

HISTORY_LIMIT: int = 100
INTERNAL_ERROR_MESSAGE: str = "Internal server error"


class ResponseKind(str, Enum):
    """Caller-facing outcome of a handler operation."""

    OK = "ok"
    VALIDATION_ERROR = "validation_error"
    DOMAIN_ERROR = "domain_error"
    STORAGE_ERROR = "storage_error"


STATUS_CODES: Dict[ResponseKind, int] = {
    ResponseKind.OK: 200,
    ResponseKind.VALIDATION_ERROR: 400,
    ResponseKind.DOMAIN_ERROR: 422,
    ResponseKind.STORAGE_ERROR: 500,
}


class HandlerResponse(BaseModel):
    """Outcome kind plus the JSON-ready body to send back."""

    model_config = ConfigDict(frozen=True)

    kind: ResponseKind
    body: Dict[str, Any] = Field(default_factory=dict)

    @property
    def status_code(self) -> int:
        """HTTP status conventionally associated with the outcome."""
        return STATUS_CODES[self.kind]

    @classmethod
    def storage_error(cls) -> "HandlerResponse":
        """Generic failure that does not leak storage details."""
        return cls(kind=ResponseKind.STORAGE_ERROR, body={"error": INTERNAL_ERROR_MESSAGE})


class CalculationHandler:
    """
    Entry point for the compute and history operations.

    This is the only layer that turns internal errors into caller-facing
    responses. Compute follows persist-then-acknowledge: a result is only
    returned once its history record has been committed.
    """

    def __init__(self, store: HistoryStore, history_limit: int = HISTORY_LIMIT) -> None:
        if not 1 <= history_limit <= HISTORY_LIMIT:
            raise ValueError(f"history_limit must be between 1 and {HISTORY_LIMIT}")
        self.store = store
        self.history_limit = history_limit

    def compute(self, payload: Any) -> HandlerResponse:
        """
        Validate, calculate and persist a single calculation.

        :param Any payload: Decoded request body

        :return: OK with ``{"result"}``, or a validation, domain or storage error
        :rtype: HandlerResponse
        """
        outcome = RequestValidator.validate(payload)
        if not outcome.is_valid:
            violations: List[Violation] = outcome.violations
            logger.warning(f"📝❌ Rejected calculation request: {[v.field for v in violations]}")
            return HandlerResponse(
                kind=ResponseKind.VALIDATION_ERROR,
                body={"errors": [v.model_dump() for v in violations]},
            )

        request = outcome.request
        try:
            result = Calculator.calculate(request.operation, request.operand1, request.operand2)
        except DomainError as exc:
            logger.warning(
                f"🧮❌ {request.operation.value}({request.operand1}, {request.operand2}) rejected: {exc}"
            )
            return HandlerResponse(kind=ResponseKind.DOMAIN_ERROR, body={"error": str(exc)})

        try:
            record = self.store.append(request.operation, request.operand1, request.operand2, result)
        except StorageUnavailableError:
            # Store already logged the cause; the result is not acknowledged
            return HandlerResponse.storage_error()

        logger.info(
            f"🧮✅ #{record.id} {request.operation.value}({request.operand1}, {request.operand2}) = {result}"
        )
        return HandlerResponse(kind=ResponseKind.OK, body={"result": result})

    def get_history(self) -> HandlerResponse:
        """
        Return the most recent calculations, newest first.

        :return: OK with ``{"history": [...]}`` or a storage error
        :rtype: HandlerResponse
        """
        try:
            records = self.store.list_recent(self.history_limit)
        except StorageUnavailableError:
            return HandlerResponse.storage_error()

        return HandlerResponse(
            kind=ResponseKind.OK,
            body={"history": [record.to_public() for record in records]},
        )
