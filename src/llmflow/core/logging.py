"""Logging configuration with pretty formatting for llmflow."""

import logging
from typing import Optional, Dict
from enum import Enum, IntEnum
from datetime import datetime
from pydantic import BaseModel, Field

# ANSI Color Codes
class Colors:
    """ANSI color codes for pretty terminal output."""
    HEADER = '\033[95m'      # Pink
    INFO = '\033[94m'        # Blue
    SUCCESS = '\033[92m'     # Green
    WARNING = '\033[93m'     # Yellow
    ERROR = '\033[91m'       # Red
    RESET = '\033[0m'        # Reset
    BOLD = '\033[1m'         # Bold
    DIM = '\033[2m'          # Dim

PRETTY_FORMAT = (
    "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
)

DETAILED_FORMAT = (
    f"{Colors.DIM}%(asctime)s{Colors.RESET} │ "
    f"%(colored_level)-40s │ "
    f"{Colors.DIM}%(name)s{Colors.RESET} │ "
    f"%(message)s"
)

class PrettyFormatter(logging.Formatter):
    """Formatter that prefixes the level name with a color and symbol."""

    level_colors = {
        'DEBUG': (Colors.DIM, '🔍'),
        'VERBOSE': (Colors.DIM, '·'),
        'INFO': (Colors.INFO, 'ℹ️'),
        'PROVIDER': (Colors.HEADER, '🛰'),
        'WARNING': (Colors.WARNING, '⚠️'),
        'ERROR': (Colors.ERROR, '❌'),
        'CRITICAL': (Colors.ERROR + Colors.BOLD, '🚨'),
    }

    def format(self, record):
        color, symbol = self.level_colors.get(record.levelname, (Colors.RESET, '•'))
        record.colored_level = f"{color}{symbol} {record.levelname}{Colors.RESET}"
        return super().format(record)

class PrettyLogHandler(logging.StreamHandler):
    """Stream handler that stamps a short wall-clock time on each record."""

    def emit(self, record):
        record.asctime = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')
        super().emit(record)

class LogComponent(str, Enum):
    """Components that can be logged."""
    GRAPH = "llmflow.core.graph"
    PROPAGATION = "llmflow.core.graph.propagation"
    EXECUTOR = "llmflow.core.graph.executor"
    DISPATCH = "llmflow.core.dispatch"
    PROVIDERS = "llmflow.core.providers"
    CHAT = "llmflow.core.chat"
    SERVER = "llmflow.server"

class LogLevel(IntEnum):
    """Log levels mapped to logging module levels."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL
    PROVIDER = 25  # Outbound provider calls

class VerbosityLevel(IntEnum):
    """Custom verbosity levels for more granular control."""
    DEBUG = logging.DEBUG
    VERBOSE = 15
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

logging.addLevelName(LogLevel.PROVIDER, "PROVIDER")
logging.addLevelName(VerbosityLevel.VERBOSE, "VERBOSE")

class LoggingConfig(BaseModel):
    """Configuration for logging behavior."""
    show_propagation: bool = Field(default=False)

def configure_logging(
    default_level: LogLevel = LogLevel.INFO,
    component_levels: Optional[Dict[LogComponent, LogLevel]] = None,
    pretty: bool = True,
    log_file: Optional[str] = None
) -> None:
    """Configure the root logger and per-component levels."""
    handlers = []

    console_handler = PrettyLogHandler() if pretty else logging.StreamHandler()
    console_handler.setFormatter(
        PrettyFormatter(DETAILED_FORMAT if pretty else PRETTY_FORMAT)
    )
    handlers.append(console_handler)

    # File output never carries colors
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(PRETTY_FORMAT))
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(default_level.value)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    if not component_levels:
        component_levels = {
            LogComponent.DISPATCH: LogLevel.PROVIDER,
            LogComponent.PROVIDERS: LogLevel.PROVIDER,
            LogComponent.GRAPH: LogLevel.INFO,
            LogComponent.PROPAGATION: LogLevel.WARNING,
        }

    for component, level in component_levels.items():
        logging.getLogger(component.value).setLevel(level.value)

def get_logger(component: LogComponent) -> logging.Logger:
    """Get a logger for a specific component."""
    logger = logging.getLogger(component.value)

    def log_provider(self, msg: str) -> None:
        self.log(LogLevel.PROVIDER, msg)

    logger.provider = lambda msg: log_provider(logger, msg)

    return logger

def log_verbose(logger: logging.Logger, message: str) -> None:
    """Log a message at VERBOSE level."""
    if logger.isEnabledFor(VerbosityLevel.VERBOSE):
        logger.log(VerbosityLevel.VERBOSE, message)

def mask_secret(secret: Optional[str], visible: int = 4) -> str:
    """Render a credential for logs, keeping only its last few characters."""
    if not secret:
        return "<empty>"
    if len(secret) <= visible:
        return "*" * len(secret)
    return f"{'*' * 6}{secret[-visible:]}"
