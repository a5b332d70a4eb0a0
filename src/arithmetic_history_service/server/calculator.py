"""Apply one of the four supported operations to two operands."""
from collections.abc import Callable as ABCCallable
import math
import operator
from typing import Callable, Dict

from arithmetic_history_service.common.errors import DivisionByZeroError, NonFiniteResultError
from arithmetic_history_service.common.models import Operation

# Type alias for operator functions (taking two floats, returning a float)
OperatorFn: ABCCallable[[float, float], float] = Callable[[float, float], float]

# Mapping of operations to their implementation
OPERATIONS: Dict[Operation, OperatorFn] = {
    Operation.ADD: operator.add,
    Operation.SUBTRACT: operator.sub,
    Operation.MULTIPLY: operator.mul,
    Operation.DIVIDE: operator.truediv,
}


class Calculator:
    """
    Pure, deterministic arithmetic over IEEE-754 doubles.

    No rounding is applied; formatting belongs to whoever presents the result.
    """

    @staticmethod
    def calculate(operation: Operation, a: float, b: float) -> float:
        """
        Apply ``operation`` to ``a`` and ``b``.

        :param Operation operation: Operation to apply
        :param float a: Left operand
        :param float b: Right operand

        :return: Result of the operation
        :rtype: float
        :raises DivisionByZeroError: If dividing by zero
        :raises NonFiniteResultError: If the result overflows to infinity
        :raises ValueError: If the operation is not supported
        """
        try:
            fn: OperatorFn = OPERATIONS[Operation(operation)]
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Unsupported operation: {operation!r}") from exc

        if fn is operator.truediv and b == 0:
            raise DivisionByZeroError()

        result = float(fn(a, b))
        if not math.isfinite(result):
            raise NonFiniteResultError()
        return result
