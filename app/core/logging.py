# app/core/logging.py
import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

def setup_logging(level: str | None = None) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO))

    # evita handlers duplicados quando o uvicorn recarrega o módulo
    if any(getattr(h, "_checkin_handler", False) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._checkin_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    # o log de acesso do uvicorn duplica o middleware de requests
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
