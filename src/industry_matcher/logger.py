import logging
import os
from datetime import datetime

LOG_DIR = os.path.join(os.getcwd(), "logs")
LOG_FILE = f"{datetime.now().strftime('%m_%d_%Y_%H_%M_%S')}.log"
LOG_FORMAT = "[ %(asctime)s ] %(lineno)d %(name)s - %(levelname)s - %(message)s"

_configured = False


def _configure_root():
    """
    Sets up the file + console handlers once per process.
    """
    global _configured
    if _configured:
        return

    os.makedirs(LOG_DIR, exist_ok=True)
    log_file_path = os.path.join(LOG_DIR, LOG_FILE)

    root = logging.getLogger("industry_matcher")
    root.setLevel(logging.INFO)

    file_handler = logging.FileHandler(log_file_path)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console_handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Returns a logger under the shared 'industry_matcher' hierarchy.
    """
    _configure_root()
    if not name.startswith("industry_matcher"):
        name = f"industry_matcher.{name}"
    return logging.getLogger(name)
