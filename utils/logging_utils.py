"""
Logging configuration for the PAPI proxy.

This module sets up a hierarchical logging structure with specialized loggers:
- app (parent logger with console output)
- app.server (routes and request handling → server_YYYY-MM-DD_hh-mm-ss.log)
- app.transport (outbound HTTP traffic → transport_YYYY-MM-DD_hh-mm-ss.log)
- app.client (inbound caller authentication → client_YYYY-MM-DD_hh-mm-ss.log)

File handlers open their file on first write, so channels that never log do
not leave empty files behind.
"""

import gzip
import logging
import os
import shutil
import threading
from datetime import datetime, timedelta

DEFAULT_LOG_FOLDER = "logs"
ARCHIVE_AGE_HOURS = 24
LOG_CHANNELS = ("server", "transport", "client")

LOG_FORMAT = (
    "%(asctime)s.%(msecs)03d [%(levelname)s] [%(threadName)s] "
    "[%(filename)s:%(lineno)d]:  %(message)s"
)
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_setup_lock = threading.Lock()
_loggers_initialized = False
_log_timestamp: str | None = None


def _gzip_file(src_path: str, dst_path: str) -> None:
    """Gzip a file and remove the original (GNU gzip behavior)."""
    with open(src_path, "rb") as f_in:
        with gzip.open(dst_path, "wb") as f_out:
            shutil.copyfileobj(f_in, f_out)
    os.remove(src_path)


def _is_stale(path: str) -> bool:
    file_age = datetime.now() - datetime.fromtimestamp(os.path.getmtime(path))
    return file_age > timedelta(hours=ARCHIVE_AGE_HOURS)


def archive_previous_logs(log_folder: str) -> None:
    """Move logs of earlier runs into ``<log_folder>/archive``.

    Files older than ARCHIVE_AGE_HOURS are gzipped on the way; plain files
    already sitting in the archive are gzipped once they age past it.
    """
    archive_folder = os.path.join(log_folder, "archive")
    os.makedirs(archive_folder, exist_ok=True)

    for log_file in [f for f in os.listdir(log_folder) if f.endswith(".log")]:
        src = os.path.join(log_folder, log_file)
        if _is_stale(src):
            dst = os.path.join(archive_folder, log_file + ".gz")
            _gzip_file(src, dst)
        else:
            dst = os.path.join(archive_folder, log_file)
            shutil.move(src, dst)
        logging.debug("Archived log file %s to %s", log_file, dst)

    for log_file in [f for f in os.listdir(archive_folder) if f.endswith(".log")]:
        src = os.path.join(archive_folder, log_file)
        if _is_stale(src):
            _gzip_file(src, src + ".gz")


def _attach_file_handler(channel: str, log_folder: str, level: int) -> None:
    logger = logging.getLogger(f"app.{channel}")
    logger.setLevel(level)

    log_path = os.path.join(log_folder, f"{channel}_{_log_timestamp}.log")
    file_handler = logging.FileHandler(log_path, delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    )
    logger.addHandler(file_handler)
    logger.propagate = True


def init_logging(debug: bool = False, log_folder: str = DEFAULT_LOG_FOLDER) -> None:
    """Configure the application logging.

    Idempotent: only the first call configures handlers, later calls are
    ignored.

    Args:
        debug: If True, set logging level to DEBUG, otherwise INFO
        log_folder: Directory receiving the per-run channel log files
    """
    global _loggers_initialized, _log_timestamp

    with _setup_lock:
        if _loggers_initialized:
            return

        level = logging.DEBUG if debug else logging.INFO
        logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

        os.makedirs(log_folder, exist_ok=True)
        archive_previous_logs(log_folder)

        _log_timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        logging.getLogger("app").setLevel(level)
        for channel in LOG_CHANNELS:
            _attach_file_handler(channel, log_folder, level)

        _loggers_initialized = True
        logging.debug("Logging initialized with timestamp: %s", _log_timestamp)


def get_server_logger(name: str) -> logging.Logger:
    """Get a logger under ``app.server`` for routes and request handling.

    Args:
        name: Name suffix for the logger (e.g., 'routes' -> 'app.server.routes')
    """
    return logging.getLogger("app.server." + name)


def get_transport_logger(name: str) -> logging.Logger:
    """Get a logger under ``app.transport`` for outbound HTTP traffic."""
    return logging.getLogger("app.transport." + name)


def get_client_logger(name: str) -> logging.Logger:
    """Get a logger under ``app.client`` for inbound caller handling."""
    return logging.getLogger("app.client." + name)
