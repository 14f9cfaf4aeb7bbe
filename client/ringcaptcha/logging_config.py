"""
Logging configuration for the RingCaptcha client

The library itself only emits records through module loggers. ``setup_logging`` is meant for
applications and the command line tool that want those records printed somewhere.
"""

import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone


def setup_logging(log_level=None, log_file=None, max_bytes=10*1024*1024, backup_count=5,
                  stream=None):
    """
    Set up logging for an application using the RingCaptcha client.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (if None, logs to stdout)
        max_bytes: Maximum size of log file before rotation (default 10MB)
        backup_count: Number of backup log files to keep (default 5)
        stream: Stream for console output when no log file is used (default stdout)
    """

    # Default log level from environment or INFO
    if log_level is None:
        log_level = os.environ.get('LOG_LEVEL', 'INFO')
    log_level = log_level.upper()

    # Default log file from environment
    if log_file is None:
        log_file = os.environ.get('LOG_FILE')

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level))
    root_logger.handlers.clear()

    if log_file:
        handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count
        )
    else:
        handler = logging.StreamHandler(stream or sys.stdout)

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logger = logging.getLogger(__name__)
    output = log_file or getattr(handler.stream, 'name', 'stream')
    logger.debug(f"Logging initialized - Level: {log_level}, Output: {output}")

    return logger


def get_logger(name):
    """
    Get a logger instance for a specific module.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def log_api_event(event_type, resource=None, status=None, http_status=None,
                  success=True, error=None):
    """
    Log a RingCaptcha API call with structured information.

    Args:
        event_type: Type of API event (e.g., 'code_requested', 'code_verified', 'sms_sent')
        resource: Path that was called, relative to the API host
        status: ``status`` field of the JSON reply
        http_status: HTTP status code of the reply
        success: Whether the transport step succeeded
        error: Error message if applicable
    """
    logger = logging.getLogger('ringcaptcha.api')

    log_data = {
        'event_type': event_type,
        'success': success,
        'timestamp': datetime.now(timezone.utc).isoformat(),
    }

    if resource:
        log_data['resource'] = resource
    if status:
        log_data['status'] = status
    if http_status is not None:
        log_data['http_status'] = http_status
    if error:
        log_data['error'] = error

    # Format as key=value pairs for easy parsing
    log_message = ' '.join([f"{k}={v}" for k, v in log_data.items()])

    if success:
        logger.info(f"API: {log_message}")
    else:
        logger.error(f"API: {log_message}")
