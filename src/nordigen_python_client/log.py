import logging


def get_logger(
    name: str,
    level: int = logging.INFO
) -> logging.Logger:
    """
    Return a named logger writing to stderr.

    A `StreamHandler` is attached only the first time a given logger is
    requested, so repeated client instances don't duplicate output.

    Parameters
    ----------
    name : str
        Logger name (e.g. "nordigen.client").
    level : int
        Level applied when the handler is first attached.

    Returns
    -------
    logging.Logger
        The configured logger.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        fmt = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(fmt)
        logger.addHandler(handler)
        logger.setLevel(level)
    logger.propagate = False
    return logger
