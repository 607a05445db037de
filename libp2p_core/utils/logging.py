import atexit
from datetime import (
    datetime,
)
import logging
import logging.handlers
import os
from pathlib import (
    Path,
)
import queue
import sys
import tempfile
import threading
from typing import (
    Any,
)

ROOT_LOGGER_NAME = "libp2p_core"
DEBUG_ENV_VAR = "LIBP2P_CORE_DEBUG"
DEBUG_FILE_ENV_VAR = "LIBP2P_CORE_DEBUG_FILE"

# Default format for log messages
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

log_queue: "queue.Queue[Any]" = queue.Queue()

# Listener draining ``log_queue``; replaced on every ``setup_logging`` call
_current_listener: logging.handlers.QueueListener | None = None

_listener_ready = threading.Event()


def _parse_debug_modules(debug_str: str) -> dict[str, int]:
    """
    Parse the ``LIBP2P_CORE_DEBUG`` value into module-specific log levels.

    Format examples:
    - "DEBUG"  # All modules at DEBUG level
    - "libp2p_core.peer.envelope:DEBUG"  # Only the envelope module at DEBUG
    - "peer.envelope:DEBUG"  # Same as above, the package prefix is optional
    - "peer:DEBUG,protocol_muxer:INFO"  # Multiple modules

    The empty-string key stands for the package-wide level.
    """
    module_levels: dict[str, int] = {}

    if not debug_str or debug_str.isspace():
        return module_levels

    if ":" not in debug_str and debug_str.strip().upper() in logging._nameToLevel:
        return {"": logging._nameToLevel[debug_str.strip().upper()]}

    for part in debug_str.split(","):
        if ":" not in part:
            continue

        module, _, level = part.rpartition(":")
        level = level.strip().upper()
        if level not in logging._nameToLevel:
            continue

        module = module.strip().replace("/", ".")
        if module.startswith(f"{ROOT_LOGGER_NAME}."):
            module = module[len(ROOT_LOGGER_NAME) + 1 :]
        module = module.strip(".")

        module_levels[module] = logging._nameToLevel[level]

    return module_levels


def _disable_logging(root_logger: logging.Logger) -> None:
    root_logger.handlers.clear()
    root_logger.setLevel(logging.WARNING)
    root_logger.propagate = False


def _default_log_file() -> str:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    unique_id = os.urandom(4).hex()
    return str(
        Path(tempfile.gettempdir()) / f"libp2p_core_{timestamp}_{unique_id}.log"
    )


def _build_handlers() -> list[logging.Handler]:
    formatter = logging.Formatter(DEFAULT_LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)

    log_file = os.environ.get(DEBUG_FILE_ENV_VAR)
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    else:
        log_file = _default_log_file()
        print(f"Logging to: {log_file}", file=sys.stderr)

    file_handler = logging.FileHandler(log_file, mode="w")
    file_handler.setFormatter(formatter)

    return [console_handler, file_handler]


def setup_logging() -> None:
    """
    Set up logging configuration based on environment variables.

    Environment Variables:
        LIBP2P_CORE_DEBUG
            Controls logging levels, either one level for the whole package
            ("DEBUG") or a comma separated list of ``module:LEVEL`` pairs
            ("peer.envelope:DEBUG,protocol_muxer:INFO"). When unset, the
            ``libp2p_core`` logger stays at WARNING without handlers.

        LIBP2P_CORE_DEBUG_FILE
            File path for log output. If not set, logs go to a timestamped file
            in the system's temp directory as well as to stderr.

    Log records are handed to a ``QueueHandler`` and written out by a
    ``QueueListener`` thread, so logging never blocks record processing.
    """
    global _current_listener

    _listener_ready.clear()

    if _current_listener is not None:
        _current_listener.stop()
        _current_listener = None

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    module_levels = _parse_debug_modules(os.environ.get(DEBUG_ENV_VAR, ""))

    if not module_levels:
        _disable_logging(root_logger)
        _listener_ready.set()
        return

    handlers = _build_handlers()
    queue_handler = logging.handlers.QueueHandler(log_queue)

    root_logger.handlers.clear()
    root_logger.addHandler(queue_handler)
    root_logger.propagate = False
    root_logger.setLevel(module_levels.get("", logging.INFO))

    for module, level in module_levels.items():
        if not module:
            continue
        logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{module}")
        logger.handlers.clear()
        logger.addHandler(queue_handler)
        logger.setLevel(level)
        logger.propagate = False

    _current_listener = logging.handlers.QueueListener(
        log_queue, *handlers, respect_handler_level=True
    )
    _current_listener.start()

    _listener_ready.set()


@atexit.register
def cleanup_logging() -> None:
    """Stop the queue listener on interpreter exit."""
    global _current_listener
    if _current_listener is not None:
        _current_listener.stop()
        _current_listener = None
