import logging
from aqsnet.config import CONFIG

PACKAGE_LOGGER = "aqsnet"


def _level(debug):
    return logging.DEBUG if debug else logging.INFO


def get_logger(name):
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(_level(CONFIG.get("debug", False)))
    return logger


def set_debug(debug: bool) -> None:
    """Switch every aqsnet logger created so far between DEBUG and INFO."""
    CONFIG["debug"] = debug
    for name, logger in logging.root.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and name.startswith(PACKAGE_LOGGER):
            logger.setLevel(_level(debug))
