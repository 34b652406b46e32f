import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger.

    Safe to call more than once; an existing handler installed here is replaced
    rather than duplicated.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_registry_api", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._registry_api = True
    root.addHandler(handler)
    root.setLevel(level)

    # uvicorn's access log duplicates the per-request line written by the lookup route
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
