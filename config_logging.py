#!/usr/bin/env python3
"""
ProofreadCompare Configuration & Logging Module
===============================================
Centralized configuration, structured logging, error types and request
throttling for the proofread comparison service.

The comparison engine itself never raises for text input; everything in
this module serves the HTTP surface and the engine's diagnostics.
"""

import os
import sys
import json
import logging
import uuid
import time
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from pathlib import Path
from dataclasses import dataclass, field
from contextlib import contextmanager
import threading

# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================
DEFAULT_MAX_TEXT_CHARS = 200_000     # Longest text accepted per side
MAX_SAFE_TEXT_CHARS = 2_000_000      # Hard ceiling for max_text_chars
DEFAULT_RATE_LIMIT_REQUESTS = 100    # Default requests per window
DEFAULT_RATE_LIMIT_WINDOW = 60       # Default window in seconds
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024  # 5MB max per log file
LOG_BACKUP_COUNT = 5                 # Number of log backup files to keep

VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
VALID_LOG_FORMATS = ('json', 'text')

__version__ = '1.0.0'
VERSION = __version__
APP_NAME = "ProofreadCompare"


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == 'true'


# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================

@dataclass
class AppConfig:
    """Service configuration with safe defaults."""

    # Server settings
    host: str = "127.0.0.1"  # Localhost only by default
    port: int = 5060
    debug: bool = False

    # Input limits
    max_text_chars: int = DEFAULT_MAX_TEXT_CHARS

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_requests: int = DEFAULT_RATE_LIMIT_REQUESTS
    rate_limit_window: int = DEFAULT_RATE_LIMIT_WINDOW  # seconds

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # Options: json, text
    log_to_file: bool = False
    log_to_console: bool = True
    log_dir: Path = field(default_factory=lambda: Path.cwd() / 'logs')

    def __post_init__(self):
        """Normalize values and apply production overrides."""
        self.log_level = self.log_level.upper()
        self.log_format = self.log_format.lower()
        self.log_dir = Path(self.log_dir)

        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        # Force debug=False in production environment
        if os.environ.get('PRC_ENV', 'development').lower() == 'production':
            self.debug = False

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Load configuration from environment variables."""
        return cls(
            host=os.environ.get('PRC_HOST', '127.0.0.1'),
            port=int(os.environ.get('PRC_PORT', '5060')),
            debug=_env_flag('PRC_DEBUG', 'false'),
            max_text_chars=int(os.environ.get('PRC_MAX_TEXT_CHARS', str(DEFAULT_MAX_TEXT_CHARS))),
            rate_limit_enabled=_env_flag('PRC_RATE_LIMIT', 'true'),
            rate_limit_requests=int(os.environ.get('PRC_RATE_LIMIT_REQUESTS', str(DEFAULT_RATE_LIMIT_REQUESTS))),
            rate_limit_window=int(os.environ.get('PRC_RATE_LIMIT_WINDOW', str(DEFAULT_RATE_LIMIT_WINDOW))),
            log_level=os.environ.get('PRC_LOG_LEVEL', 'INFO'),
            log_format=os.environ.get('PRC_LOG_FORMAT', 'json'),
            log_to_file=_env_flag('PRC_LOG_TO_FILE', 'false'),
            log_dir=Path(os.environ.get('PRC_LOG_DIR', str(Path.cwd() / 'logs'))),
        )

    def validate(self) -> tuple:
        """Validate configuration and return (is_valid, errors)."""
        errors = []

        if self.debug and os.environ.get('PRC_ENV') == 'production':
            errors.append("Debug mode cannot be enabled in production")

        if self.log_level not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log_level: {self.log_level}")

        if self.log_format not in VALID_LOG_FORMATS:
            errors.append(f"Invalid log_format: {self.log_format}. Must be 'json' or 'text'")

        if self.max_text_chars <= 0:
            errors.append("max_text_chars must be positive")
        elif self.max_text_chars > MAX_SAFE_TEXT_CHARS:
            errors.append(f"max_text_chars exceeds safe limit ({MAX_SAFE_TEXT_CHARS})")

        if self.rate_limit_requests <= 0 or self.rate_limit_window <= 0:
            errors.append("Rate limit requests and window must be positive")

        return (len(errors) == 0, errors)


# Global config instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get or create the global configuration."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reset_config():
    """Reset the global configuration (for testing)."""
    global _config
    _config = None


# =============================================================================
# STRUCTURED LOGGING
# =============================================================================

class StructuredLogger:
    """Thread-safe structured logger with correlation IDs."""

    _local = threading.local()

    def __init__(self, name: str, config: Optional[AppConfig] = None):
        self.name = name
        self.config = config or get_config()
        self._setup_logger()

    def _setup_logger(self):
        """Configure the underlying Python logger."""
        self.logger = logging.getLogger(self.name)
        level = self.config.log_level if self.config.log_level in VALID_LOG_LEVELS else 'INFO'
        self.logger.setLevel(getattr(logging, level))
        self.logger.handlers.clear()

        if self.config.log_format == 'json':
            formatter = JsonFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s [%(levelname)s] %(name)s - %(message)s'
            )

        if self.config.log_to_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        # Rotating file handler keeps the log directory bounded
        if self.config.log_to_file:
            from logging.handlers import RotatingFileHandler
            log_file = self.config.log_dir / f"{self.name.lower()}.log"
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    @classmethod
    def set_correlation_id(cls, correlation_id: str):
        """Set correlation ID for current thread."""
        cls._local.correlation_id = correlation_id

    @classmethod
    def get_correlation_id(cls) -> str:
        """Get correlation ID for current thread."""
        return getattr(cls._local, 'correlation_id', None) or str(uuid.uuid4())[:8]

    @classmethod
    def new_correlation_id(cls) -> str:
        """Generate and set a new correlation ID."""
        correlation_id = str(uuid.uuid4())[:12]
        cls.set_correlation_id(correlation_id)
        return correlation_id

    def _extra(self, kwargs: Dict[str, Any]) -> Dict[str, Any]:
        return {'correlation_id': self.get_correlation_id(), **kwargs}

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self.logger.debug(message, extra=self._extra(kwargs))

    def info(self, message: str, **kwargs):
        """Log info message."""
        self.logger.info(message, extra=self._extra(kwargs))

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self.logger.warning(message, extra=self._extra(kwargs))

    def error(self, message: str, exc_info: bool = False, **kwargs):
        """Log error message with optional exception info."""
        self.logger.error(message, exc_info=exc_info, extra=self._extra(kwargs))

    def exception(self, message: str, **kwargs):
        """Log exception with full traceback."""
        self.error(message, exc_info=True, **kwargs)

    @contextmanager
    def log_operation(self, operation: str, **context):
        """Context manager for logging operation start/end with timing."""
        start_time = time.time()
        self.debug(f"{operation} started", operation=operation, status='started', **context)
        try:
            yield
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self.error(f"{operation} failed: {e}", operation=operation, status='failed',
                       duration_ms=round(duration_ms, 2), exc_info=True, **context)
            raise
        duration_ms = (time.time() - start_time) * 1000
        self.info(f"{operation} completed", operation=operation, status='completed',
                  duration_ms=round(duration_ms, 2), **context)


# Attributes every LogRecord carries; anything else came in through `extra`
_RESERVED_RECORD_KEYS = frozenset((
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'thread', 'threadName', 'exc_info', 'exc_text',
    'message', 'taskName',
))


class JsonFormatter(logging.Formatter):
    """JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if record.exc_info:
            log_data['traceback'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name, get_config())


# =============================================================================
# ERROR HANDLING
# =============================================================================

class CompareError(Exception):
    """Base exception for the comparison service."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR",
                 status_code: int = 500, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API response dict."""
        return {
            'success': False,
            'error': {
                'code': self.code,
                'message': self.message,
                'details': self.details
            }
        }


class ValidationError(CompareError):
    """Request validation error."""
    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400,
                         details={'field': field, **kwargs})


class ProcessingError(CompareError):
    """Comparison could not be produced."""
    def __init__(self, message: str, stage: Optional[str] = None, **kwargs):
        super().__init__(message, code="PROCESSING_ERROR", status_code=500,
                         details={'stage': stage, **kwargs})


class RateLimitError(CompareError):
    """Rate limit exceeded."""
    def __init__(self, retry_after: int = 60, **kwargs):
        super().__init__("Rate limit exceeded", code="RATE_LIMIT", status_code=429,
                         details={'retry_after': retry_after, **kwargs})


# =============================================================================
# RATE LIMITING
# =============================================================================

class RateLimiter:
    """Sliding-window in-memory rate limiter keyed by client."""

    def __init__(self, max_requests: int = 100, window_seconds: int = 60):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests: Dict[str, list] = {}
        self._lock = threading.Lock()

    def is_allowed(self, key: str) -> bool:
        """Record a request for key and report whether it is within the limit."""
        now = time.time()

        with self._lock:
            recent = [
                t for t in self._requests.get(key, [])
                if now - t < self.window_seconds
            ]
            if len(recent) >= self.max_requests:
                self._requests[key] = recent
                return False

            recent.append(now)
            self._requests[key] = recent
            return True

    def get_retry_after(self, key: str) -> int:
        """Get seconds until the oldest request for key leaves the window."""
        with self._lock:
            timestamps = self._requests.get(key)
            if not timestamps:
                return 0
            oldest = min(timestamps)
        return max(0, int(self.window_seconds - (time.time() - oldest)))

    def reset(self, key: Optional[str] = None):
        """Reset rate limit for a key or all keys."""
        with self._lock:
            if key:
                self._requests.pop(key, None)
            else:
                self._requests.clear()


_rate_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    """Get or create global rate limiter."""
    global _rate_limiter
    if _rate_limiter is None:
        config = get_config()
        _rate_limiter = RateLimiter(
            config.rate_limit_requests,
            config.rate_limit_window
        )
    return _rate_limiter


def reset_rate_limiter():
    """Drop the global rate limiter so the next call rebuilds it (for testing)."""
    global _rate_limiter
    _rate_limiter = None
