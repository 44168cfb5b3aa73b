"""
Identificadores y marcas de tiempo compartidos por los modelos.
"""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field

ID_LENGTH = 8


def generate_id() -> str:
    """ID corto aleatorio (hex, 8 caracteres) para nodos, campos y workspaces."""
    return uuid.uuid4().hex[:ID_LENGTH]


def generate_timestamp() -> str:
    """Marca de tiempo ISO en UTC, con precisión de segundos."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class TimestampedModel(BaseModel):
    """Modelo persistible con ID propio y fechas de alta y modificación."""

    id: str = Field(default_factory=generate_id)
    created_at: str = Field(default_factory=generate_timestamp)
    updated_at: str = Field(default_factory=generate_timestamp)

    def touch(self) -> None:
        self.updated_at = generate_timestamp()
