from __future__ import annotations

import logging
from importlib.metadata import version

__version__ = version("skyreport")

logger = logging.getLogger("skyreport")

__all__ = ["__version__", "logger"]
