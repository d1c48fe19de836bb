"""Logging utilities for consistent logging across modules."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


def setup_logging(log_dir: Optional[str] = None, level: int = logging.INFO) -> None:
    """Setup logging configuration.

    Logs always go to the console; a ``kolide_relay.log`` file is added when a
    log directory is configured.
    """
    handlers = [logging.StreamHandler()]
    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path / "kolide_relay.log"))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def log_server_message(message: str) -> None:
    """Log server-related messages."""
    logger.info(f"[SERVER] {message}")


def _timestamped_file(log_dir: str, prefix: str) -> Path:
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%dT%H%M%S%f")
    return log_path / f"{prefix}-{timestamp}.log"


def log_webhook_request(
    webhook_data: Dict[str, Any],
    log_dir: Optional[str],
    webhook_identifier: Optional[str] = None,
) -> None:
    """Write the received webhook payload to a timestamped file in ``log_dir``."""
    if not log_dir:
        return
    try:
        webhook_file = _timestamped_file(log_dir, "webhook")
        with open(webhook_file, "w", encoding="utf-8") as f:
            f.write(f"Webhook received at: {datetime.now().isoformat()}\n")
            if webhook_identifier:
                f.write(f"Webhook identifier: {webhook_identifier}\n")
            f.write(f"Webhook payload:\n{json.dumps(webhook_data, indent=2, ensure_ascii=False)}\n")

        logger.info(f"Webhook logged to: {webhook_file}")

    except OSError as e:
        logger.error(f"Failed to log webhook request: {e}")


def log_error(error_message: str, log_dir: Optional[str] = None, error_data: str = "") -> None:
    """Log an error, and write it with optional data to a timestamped file."""
    logger.error(error_message)
    if not log_dir:
        return
    try:
        error_file = _timestamped_file(log_dir, "error")
        with open(error_file, "w", encoding="utf-8") as f:
            f.write(f"Error occurred at: {datetime.now().isoformat()}\n")
            f.write(f"Error message: {error_message}\n")
            if error_data:
                f.write(f"Error data:\n{error_data}\n")

        logger.error(f"Error logged to: {error_file}")

    except OSError as e:
        logger.error(f"Failed to log error: {e}")
