"""
Command-line entrypoint.

Subcommands:
- serve:   run the HTTP service
- calc:    send one calculation to a running service
- history: print the recent history of a running service
- batch:   send a file of calculations and write a results file next to it
"""

import argparse
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, FilePath, ValidationError
import requests
import uvicorn

from arithmetic_history_service.client.client import CalculatorClient, ServiceError
from arithmetic_history_service.common.config import Settings
from arithmetic_history_service.common.logger import set_level
from arithmetic_history_service.server.app import create_app


class BatchArgs(BaseModel):
    """
    Pydantic model used to validate the batch file argument.

    Attributes
    ----------
    file_path : FilePath
        Path to the file containing calculations.
    """

    file_path: FilePath


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser with all subcommands.

    :return: Configured parser
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(description="Arithmetic history service")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", help="Bind address (default: CALC_HOST or 0.0.0.0)")
    serve.add_argument("--port", help="Bind port (default: CALC_PORT or 8000)")
    serve.add_argument("--db-path", help="SQLite history file (default: CALC_DB_PATH)")

    for name, help_text in (
        ("calc", "Send one calculation"),
        ("history", "Print recent history"),
        ("batch", "Send a file of calculations"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--host", default="127.0.0.1", help="Service host")
        sub.add_argument("--port", default="8000", help="Service port")
        if name == "calc":
            sub.add_argument("operation", help="add, subtract, multiply or divide")
            sub.add_argument("operand1")
            sub.add_argument("operand2")
        elif name == "batch":
            sub.add_argument("file_path", help="File with one 'operation operand1 operand2' per line")

    return parser


def build_settings(args: argparse.Namespace) -> Settings:
    """
    Merge command-line overrides into the environment settings.

    :param argparse.Namespace args: Parsed ``serve`` arguments

    :return: Validated settings
    :rtype: Settings
    :raises ValidationError: If an override is invalid
    """
    settings = Settings.from_env()
    overrides = {
        field: value
        for field, value in (("host", args.host), ("port", args.port), ("db_path", args.db_path))
        if value is not None
    }
    if not overrides:
        return settings
    return Settings(**{**settings.model_dump(), **overrides})


def build_output_path(input_path: Path) -> Path:
    """
    Construct the results file path for a batch input file.

    Examples
    --------
    input: resources/operations.txt
    output: resources/operations_txt_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    suffix_safe = "_".join(input_path.suffixes).replace(".", "_")
    return input_path.with_name(f"{input_path.stem}{suffix_safe}_results.txt")


def main(argv: Optional[List[str]] = None) -> None:
    """
    Run the selected subcommand.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        try:
            settings = build_settings(args)
        except ValidationError as exc:
            parser.error(str(exc))
        set_level(settings.log_level)
        uvicorn.run(create_app(settings), host=str(settings.host), port=settings.port)
        return

    try:
        client = CalculatorClient(host=args.host, port=args.port)
    except ValidationError as exc:
        parser.error(str(exc))

    try:
        if args.command == "calc":
            print(client.calculate(args.operation, args.operand1, args.operand2))
        elif args.command == "history":
            for entry in client.history():
                print(
                    f"{entry['timestamp']}  {entry['operation']} "
                    f"{entry['operand1']} {entry['operand2']} = {entry['result']}"
                )
        elif args.command == "batch":
            try:
                batch = BatchArgs(file_path=args.file_path)
            except ValidationError as exc:
                parser.error(str(exc))
            output_path = build_output_path(Path(batch.file_path))
            client.send_file(Path(batch.file_path), output_path)
            print(output_path)
    except ServiceError as exc:
        parser.exit(1, f"error: {exc}\n")
    except requests.RequestException as exc:
        parser.exit(1, f"error: could not reach service at {client.base_url}: {exc}\n")


if __name__ == "__main__":
    main()
