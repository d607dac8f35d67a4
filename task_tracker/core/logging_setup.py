import logging
import sys

_HANDLER_NAME = "task_tracker.console"


def setup_logging(level: str | int = logging.INFO) -> None:
    """
    Configure the `task_tracker` logger with a single console handler.

    Safe to call more than once: the handler is only installed the first time,
    later calls just adjust the level. Records still propagate to the root
    logger so uvicorn or pytest handlers keep seeing them.
    """
    logger = logging.getLogger("task_tracker")
    logger.setLevel(level if isinstance(level, int) else level.upper())

    if any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
