import datetime
import logging

FORMAT = "%(asctime)s  %(levelname)-8s %(name)s :: %(message)s"


def init_logger(settings, name: str = "moodmixer", tag: str = "session"):
    logger = logging.getLogger(name)
    logger.setLevel(settings.log_level)
    logger.handlers.clear()

    stream = logging.StreamHandler()
    stream.setFormatter(logging.Formatter(FORMAT))
    logger.addHandler(stream)

    if settings.log_dir:
        ts = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(settings.log_dir / f"log_{tag}_{ts}.txt", encoding="utf-8")
        handler.setFormatter(logging.Formatter(FORMAT))
        logger.addHandler(handler)

    logger.propagate = False
    return logger
