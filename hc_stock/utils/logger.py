"""
Logging setup

All modules obtain loggers through get_logger() so the handler and level are
configured exactly once, from settings.log_level.
"""

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_configured = False


def _configure() -> None:
    global _configured
    if _configured:
        return

    from hc_stock.config.settings import settings

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))

    root = logging.getLogger("hc_stock")
    root.addHandler(handler)
    root.setLevel(settings.log_level.upper())
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the hc_stock hierarchy"""
    _configure()
    if not name.startswith("hc_stock"):
        name = f"hc_stock.{name}"
    return logging.getLogger(name)


logger = get_logger("hc_stock")
