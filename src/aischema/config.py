"""Schema generation settings, read from the environment or a .env file."""

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

# Nearest .env in the working directory or a parent; existing variables win
_env_file = find_dotenv(usecwd=True)
if _env_file:
    load_dotenv(_env_file)


class SchemaConfig(BaseModel):
    """Configuration for schema generation and encoding."""

    indent: int = Field(
        default_factory=lambda: int(os.getenv("AISCHEMA_INDENT", "2")),
        ge=0,
        description="Indentation used when encoding schemas as JSON",
    )
    annotations_file: Path | None = Field(
        default_factory=lambda: (
            Path(os.environ["AISCHEMA_ANNOTATIONS_FILE"])
            if os.getenv("AISCHEMA_ANNOTATIONS_FILE")
            else None
        ),
        description="YAML annotation table layered under the caller's table",
    )


def get_config() -> SchemaConfig:
    """Get the current schema configuration."""
    return SchemaConfig()
