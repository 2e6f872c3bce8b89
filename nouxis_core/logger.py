import logging, json, sys, time, os


def get_logger(name="Nouxis", level=logging.INFO, to_file=None):
    """Unified structured logger for all Nouxis resolver components."""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
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
        logger.addHandler(handler)

        if to_file:
            dir_path = os.path.dirname(to_file)
            if dir_path:
                os.makedirs(dir_path, exist_ok=True)
            file_handler = logging.FileHandler(to_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


def log_event(logger, level, event, **fields):
    """
    Emit a diagnostic event as a dict payload: {"event": ..., **fields}.

    Resolution outcomes go through here so every failure kind leaves one
    structured line that tests and log shippers can match on ``event``.
    """
    payload = {"event": event}
    payload.update(fields)
    logger.log(level, payload)
    return payload
