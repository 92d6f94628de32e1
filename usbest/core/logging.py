# usbest/core/logging.py
import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """
    Configures the root 'usbest' logger once: a single console handler.
    Safe to call more than once (reloads, tests).
    """
    logger = logging.getLogger("usbest")
    logger.setLevel(level.upper())
    if any(getattr(h, "_usbest", False) for h in logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._usbest = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False
