"""HTTP client for the arithmetic history service."""
from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, FilePath, IPvAnyAddress
import requests


class ServiceError(Exception):
    """The service answered a request with a failure status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class CalculatorClient(BaseModel):
    """
    HTTP client responsible for sending calculations to the service and reading back its history.

    The HTTP client:
    - posts single calculations and returns their result
    - fetches the most recent history entries
    - replays a file of ``operation operand1 operand2`` lines and writes one result line each
    """

    # Make the Pydantic instance immutable (read-only), so the target
    # service cannot change between two calls of a batch.
    model_config = ConfigDict(frozen=True)

    host: IPvAnyAddress = Field(default="127.0.0.1", description="Service host address")
    port: int = Field(default=8000, ge=1, le=65535, description="Service TCP port")
    timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")

    @property
    def base_url(self) -> str:
        """Root URL of the service."""
        return f"http://{self.host}:{self.port}"

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """
        Extract a readable error message from a failed response.

        :param requests.Response response: Failed HTTP response

        :return: Error message, or the raw text when the body is not the expected JSON
        :rtype: str
        """
        try:
            body: Dict[str, Any] = response.json()
        except ValueError:
            return response.text
        if "error" in body:
            return str(body["error"])
        if "errors" in body:
            return ", ".join(f"{e['field']}: {e['message']}" for e in body["errors"])
        return response.text

    def calculate(self, operation: str, operand1: Any, operand2: Any) -> float:
        """
        Ask the service to compute one operation.

        :param str operation: One of add, subtract, multiply, divide
        :param operand1: Left operand (number or numeric string)
        :param operand2: Right operand (number or numeric string)

        :return: Computed result
        :rtype: float
        :raises ServiceError: If the service rejects the request
        """
        response = requests.post(
            f"{self.base_url}/calculate",
            json={"operation": operation, "operand1": operand1, "operand2": operand2},
            timeout=self.timeout,
        )
        if not response.ok:
            raise ServiceError(response.status_code, self._error_message(response))
        return float(response.json()["result"])

    def history(self) -> List[Dict[str, Any]]:
        """
        Fetch the most recent calculations, newest first.

        :return: History entries
        :rtype: List[Dict[str, Any]]
        :raises ServiceError: If the service fails to read its history
        """
        response = requests.get(f"{self.base_url}/history", timeout=self.timeout)
        if not response.ok:
            raise ServiceError(response.status_code, self._error_message(response))
        return response.json()["history"]

    def send_file(self, input_file: FilePath, output_file: Path) -> None:
        """
        Send every calculation of an input file and write the results to an output file.

        Each non-empty input line holds ``operation operand1 operand2``.
        Each output line is ``<line> = <result>`` or ``<line> -> ERROR: <message>``;
        a line the service could not be reached for is reported the same way.

        :param FilePath input_file: Path to the input file
        :param Path output_file: Path where results will be written

        :return: None
        """
        lines = [line.strip() for line in input_file.read_text().splitlines() if line.strip()]

        with output_file.open("w", encoding="utf-8") as f_out:
            for line in lines:
                parts = line.split()
                if len(parts) != 3:
                    f_out.write(f"{line} -> ERROR: expected 'operation operand1 operand2'\n")
                else:
                    try:
                        result = self.calculate(*parts)
                        f_out.write(f"{line} = {result}\n")
                    except ServiceError as exc:
                        f_out.write(f"{line} -> ERROR: {exc.message}\n")
                    except requests.RequestException as exc:
                        # Unreachable service or timeout; keep going with the next line
                        f_out.write(f"{line} -> ERROR: {exc}\n")
                # Flushing keeps finished lines on disk if the batch is interrupted
                f_out.flush()
