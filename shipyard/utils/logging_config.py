import logging
import sys
import os
from datetime import datetime

# Between INFO (20) and WARNING (30)
SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")


def log_success(logger: logging.Logger, msg: str, *args) -> None:
    """Emit a record at the SUCCESS level."""
    if logger.isEnabledFor(SUCCESS):
        logger.log(SUCCESS, msg, *args)


class ColoredFormatter(logging.Formatter):
    """Custom formatter that prints a colored [LEVEL] tag before each message."""

    blue = "\033[0;34m"
    cyan = "\x1b[36m"
    green = "\033[0;32m"
    yellow = "\033[1;33m"
    red = "\033[0;31m"
    bold_red = "\x1b[31;1m"
    reset = "\033[0m"

    COLORS = {
        logging.DEBUG: cyan,
        logging.INFO: blue,
        SUCCESS: green,
        logging.WARNING: yellow,
        logging.ERROR: red,
        logging.CRITICAL: bold_red,
    }

    def format(self, record):
        color = self.COLORS.get(record.levelno)
        if not color:
            return f"[{record.levelname}] {record.getMessage()}"
        return f"{color}[{record.levelname}]{self.reset} {record.getMessage()}"


def setup_logging(level=logging.INFO, log_to_file: bool = True, log_dir: str = "logs"):
    """Setup centralized logging configuration."""
    root_logger = logging.getLogger()

    # Clear existing handlers to prevent duplicate logs
    if root_logger.handlers:
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

    root_logger.setLevel(level)

    # 1. Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ColoredFormatter())
    root_logger.addHandler(console_handler)

    # 2. File handler for persistence
    if log_to_file:
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = logging.FileHandler(
            os.path.join(log_dir, f"shipyard_{datetime.now().strftime('%Y%m%d')}.log")
        )
        file_fmt = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        file_handler.setFormatter(file_fmt)
        root_logger.addHandler(file_handler)

    # The docker SDK and httpx log every request at DEBUG/INFO
    for noisy in ["docker", "urllib3", "httpx", "httpcore"]:
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))

    logging.getLogger("shipyard").setLevel(level)
