"""Service configuration read from the environment."""
import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, IPvAnyAddress

# Environment variable -> Settings field
ENV_VARS = {
    "CALC_HOST": "host",
    "CALC_PORT": "port",
    "CALC_DB_PATH": "db_path",
    "CALC_HISTORY_LIMIT": "history_limit",
    "CALC_LOG_LEVEL": "log_level",
}


class Settings(BaseModel):
    """
    Runtime settings of the HTTP service.

    Immutable once built, so a running server cannot have its storage
    location or bind address changed underneath it.
    """

    model_config = ConfigDict(frozen=True, validate_default=True)

    host: IPvAnyAddress = Field(default="0.0.0.0", description="Server host address")
    port: int = Field(default=8000, ge=1, le=65535, description="Server TCP port")
    db_path: Path = Field(
        default=Path("data") / "calc-history.db",
        description="SQLite file holding the calculation history",
    )
    history_limit: int = Field(
        default=100, ge=1, le=100, description="Maximum entries returned by GET /history (at most 100)"
    )
    log_level: str = Field(default="INFO", description="Logging level name")

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from ``CALC_*`` environment variables, loading the nearest ``.env`` first.

        :return: Validated settings
        :rtype: Settings
        :raises pydantic.ValidationError: If a variable holds an invalid value
        """
        load_dotenv(find_dotenv(usecwd=True))
        values = {
            field: os.environ[name]
            for name, field in ENV_VARS.items()
            if os.environ.get(name)
        }
        return cls(**values)
