import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure root logging on stderr (plus an optional file) and return the
    CLI logger.
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)

    return logging.getLogger("wav_files_tempo")
