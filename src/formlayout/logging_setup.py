"""Configuración de logging con salida Rich."""

import logging
from typing import Union

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s | %(message)s"


def setup_logging(level: Union[str, int] = "WARNING") -> logging.Logger:
    """
    Instala un RichHandler sobre stderr en el logger del paquete.

    Llamadas repetidas reemplazan el handler anterior en lugar de duplicarlo.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logger = logging.getLogger("formlayout")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
