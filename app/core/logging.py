# app/core/logging.py
import logging
import sys

from app.core.config import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str | None = None) -> logging.Logger:
    """
    Configura el logger raiz de la aplicacion (handler de consola).
    Se llama al importar app.main y desde los scripts.
    """
    root = logging.getLogger("app")
    root.setLevel((level or settings.LOG_LEVEL).upper())

    # Evitar handlers duplicados si se llama mas de una vez
    if root.handlers:
        return root

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    root.addHandler(handler)
    return root
