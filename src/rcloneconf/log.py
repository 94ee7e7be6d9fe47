import logging

HANDLER_NAME = "rcloneconf"
FORMAT = "%(levelname)s %(name)s: %(message)s"


def setup_logging(debug=False, loggers=("rcloneconf",), stream=None):
    """Send the records of `loggers` to stderr (or `stream`).

    Without `debug` only warnings and errors get through. Calling this
    again replaces the handler of an earlier call instead of adding a
    second one.

    """
    handler = logging.StreamHandler(stream)
    handler.name = HANDLER_NAME
    handler.setFormatter(logging.Formatter(FORMAT))
    level = logging.DEBUG if debug else logging.WARNING
    for name in loggers:
        logger = logging.getLogger(name)
        for old in list(logger.handlers):
            if old.name == HANDLER_NAME:
                logger.removeHandler(old)
        logger.setLevel(level)
        logger.addHandler(handler)
    return handler
