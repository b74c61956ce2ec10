# Logging configuration for the chemical formula toolkit.

import logging
import sys
from typing import Optional

from chemformula.config import settings


def setup_logging(level: Optional[str] = None, stream=None):
    # Configure application logging.
    handlers = [logging.StreamHandler(stream or sys.stdout)]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file, mode="a"))

    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper()),
        format=settings.log_format,
        handlers=handlers,
        force=True
    )

    # Set specific logger levels
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)
    logging.getLogger("lark").setLevel(logging.WARNING)

    return logging.getLogger("chemformula")
