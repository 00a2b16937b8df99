"""Central logging setup for the Synapse backend."""

import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configures the root "app" logger once.

    Repeated calls only adjust the level, so uvicorn reloads do not stack handlers.
    """
    app_logger = logging.getLogger("app")
    app_logger.setLevel(level.upper())

    if not app_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        app_logger.addHandler(handler)
        app_logger.propagate = False

    app_logger.info("Logging initialized at level %s", level.upper())
    return app_logger
