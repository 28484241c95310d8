import logging, json, sys, time, os

ROOT_LOGGER = "w3name"


def _env_level():
    level = os.getenv("W3NAME_LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(level), int):
        return "INFO"
    return level


def get_logger(name=ROOT_LOGGER, level=None):
    """
    Unified structured logger for all w3name components.

    Handlers live on the package root logger only; module loggers
    ("w3name.ipns", "w3name.transport.http", ...) propagate to it.
    The root level defaults to $W3NAME_LOG_LEVEL; unknown names fall back to INFO.
    """
    root = logging.getLogger(ROOT_LOGGER)

    if not root.handlers:
        # stderr, so CLI output on stdout stays machine readable
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter(
            fmt=json.dumps({
                "ts": "%(asctime)s",
                "level": "%(levelname)s",
                "name": "%(name)s",
                "msg": "%(message)s"
            }),
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )
        formatter.converter = time.gmtime  # Use UTC timestamps
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(_env_level())

    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
