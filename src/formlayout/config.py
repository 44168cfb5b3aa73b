"""Constantes de formato, grupos de tipos de campo y configuración."""

import os
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator


# ============================================================================
# Formato del documento
# ============================================================================

FORMAT_VERSION = "2.0"
GENERATED_BY = "FormLayout Builder"
DEFAULT_WEBFORM_NAME = "Untitled Webform"
DEFAULT_CODELIST_ITEMS = ["Option 1", "Option 2", "Option 3"]


class FieldType(str, Enum):
    """Tipos de campo conocidos por el runtime de formularios."""
    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    TEL = "tel"
    PHONE = "phone"
    NUMBER = "number"
    NUMBER_INTEGER = "number_integer"
    NUMBER_DECIMAL = "number_decimal"
    DATE = "date"
    CHECKBOX = "checkbox"
    SELECT = "select"
    CODELIST = "codelist"
    MULTISELECT_CODELIST = "multiselect_codelist"
    ATTACHMENT = "attachment"
    LABEL = "label"
    LINK = "link"
    EXTERNAL_LINK = "external_link"


# Tipos que llevan placeholder
PLACEHOLDER_TYPES = frozenset(t.value for t in (
    FieldType.TEXT, FieldType.EMAIL, FieldType.TEL, FieldType.PHONE,
    FieldType.NUMBER, FieldType.NUMBER_INTEGER, FieldType.NUMBER_DECIMAL, FieldType.TEXTAREA,
))

# Tipos numéricos con autoincremento
AUTO_INCREMENT_TYPES = frozenset({FieldType.NUMBER.value, FieldType.NUMBER_INTEGER.value})

# Tipos con lista de opciones
CODELIST_TYPES = frozenset({FieldType.CODELIST.value, FieldType.MULTISELECT_CODELIST.value})

LABEL_TYPES = frozenset({FieldType.LABEL.value})

# Tipos que marcan el formulario como "avanzado" en metadata
ADVANCED_TYPES = CODELIST_TYPES | LABEL_TYPES | frozenset({
    FieldType.ATTACHMENT.value, FieldType.LINK.value, FieldType.EXTERNAL_LINK.value,
})


# ============================================================================
# Configuración de la aplicación
# ============================================================================

def default_data_dir() -> Path:
    """Directorio de datos por defecto (~/.formlayout o $FORMLAYOUT_HOME)."""
    env_home = os.environ.get("FORMLAYOUT_HOME")
    if env_home:
        return Path(env_home)
    return Path.home() / ".formlayout"


class Settings(BaseModel):
    """Configuración general de FormLayout."""
    data_dir: Path = Field(default_factory=default_data_dir, description="Directorio de datos")
    log_level: str = Field(default="WARNING", description="Nivel de logging")
    theme: str = Field(default="default", description="Tema de la consola")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Nivel de logging inválido: {v}")
        return level

    @property
    def workspaces_dir(self) -> Path:
        """Directorio donde se guardan los formularios en edición."""
        return self.data_dir / "workspaces"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Obtiene la configuración leyendo variables de entorno (singleton)."""
    global _settings
    if _settings is None:
        values = {}
        if os.environ.get("FORMLAYOUT_LOG_LEVEL"):
            values["log_level"] = os.environ["FORMLAYOUT_LOG_LEVEL"]
        if os.environ.get("FORMLAYOUT_THEME"):
            values["theme"] = os.environ["FORMLAYOUT_THEME"]
        _settings = Settings(**values)
    return _settings


def reset_settings() -> None:
    """Descarta la configuración cacheada (útil en tests)."""
    global _settings
    _settings = None
