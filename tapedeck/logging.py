"""
Logging configuration for tapedeck using eliot.

This module provides structured logging for the playback orchestrator and its
collaborators. Actions are opened with ``start_action(<component>_logger, ...)``
and individual events are written with the ``log_*`` helpers below.
"""

import eliot
import logging
import sys
from eliot import log_message, start_action, write_traceback
from eliot.stdlib import EliotHandler
from pathlib import Path


class HumanReadableDestination:
    """Destination that formats logs in a human-readable format."""

    # Emitted on every countdown tick or shuffle draw
    skip_messages = {
        "timer_tick",
        "queue_operation",
    }

    def __init__(self, file):
        self.file = file

    def __call__(self, message):
        """Format and write log message."""
        # Skip internal Eliot messages (action start/status messages)
        if message.get("action_status") and not message.get("message_type"):
            return

        msg_type = message.get("message_type", "")
        if msg_type in self.skip_messages or message.get("event") in self.skip_messages:
            return

        action = message.get("action", msg_type)
        description = message.get("description", "")
        trigger = message.get("trigger_source", "")

        if msg_type == "player_action":
            old_state = message.get("old_state", "")
            new_state = message.get("new_state", "")
            prefix = f"[{trigger.upper()}] " if trigger else ""

            if description:
                output = f"{prefix}{description}"
            elif old_state != "" and new_state != "":
                output = f"{prefix}{action} ({old_state} → {new_state})"
            else:
                output = f"{prefix}{action}"

        elif msg_type == "timer_event":
            output = f"[TIMER] {description or message.get('event', '')}"

        elif msg_type == "inventory_request":
            output = f"[INVENTORY] {action}"
            if description:
                output += f": {description}"

        elif msg_type == "error_occurred":
            output = f"[ERROR] {message.get('error_type', '')}: {message.get('error_message', '')}"

        elif description:
            output = description
        elif "message" in message:
            output = message["message"]
        else:
            return

        if output and output.strip():
            self.file.write(output + "\n")
            self.file.flush()


def setup_logging(log_level: str = "INFO", log_file: str = None) -> None:
    """
    Set up eliot logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write logs to (always logs to stdout as well)
    """
    eliot.add_destination(HumanReadableDestination(sys.stdout))

    # Raw JSON for machine parsing
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        eliot.to_file(open(log_path, "a"))

    # Route stdlib logging (requests, urllib3) through eliot
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    logger.addHandler(EliotHandler())

    log_message(
        message_type="logging_setup", log_level=log_level, log_file=log_file or "stdout", message="Eliot logging configured"
    )


def get_logger(name: str):
    """
    Get an eliot logger instance for a specific component.

    Note: This returns an eliot Logger object that can be used with start_action()
    for creating action contexts. Use the log_* helpers for individual messages.

    Args:
        name: Module or component name

    Returns:
        Eliot Logger instance for use with start_action()
    """
    return eliot.Logger()


# Global logger instances for different components
app_logger = get_logger("tapedeck_app")
player_logger = get_logger("tapedeck_player")
timer_logger = get_logger("tapedeck_timer")
engine_logger = get_logger("tapedeck_engine")
inventory_logger = get_logger("tapedeck_inventory")


def log_player_action(action: str, **context):
    """
    Log player actions with context.

    Args:
        action: Player action (play, pause, next, previous, etc.)
        **context: Additional context data
    """
    log_message(message_type="player_action", action=action, **context)


def log_queue_operation(operation: str, **context):
    """
    Log queue operations with context.

    Args:
        operation: Queue operation (replace, sample, refill, etc.)
        **context: Additional context data
    """
    log_message(message_type="queue_operation", operation=operation, **context)


def log_timer_event(event: str, **context):
    """
    Log sleep timer events with context.

    Args:
        event: Timer event (armed, fading, expired, cancelled)
        **context: Additional context data
    """
    log_message(message_type="timer_event", event=event, **context)


def log_inventory_request(action: str, trigger_source: str = "inventory", **context):
    """
    Log inventory service requests with context.

    Args:
        action: Request being performed (list_tracks, add_track, ...)
        trigger_source: Source of the request (default: "inventory")
        **context: Additional context data (url, status code, counts)
    """
    log_message(message_type="inventory_request", action=action, trigger_source=trigger_source, **context)


def log_error(logger: eliot.Logger, error: Exception, **context):
    """
    Log errors with full context and traceback.

    Args:
        logger: Eliot logger instance
        error: Exception that occurred
        **context: Additional context data
    """
    if sys.exc_info()[0] is not None:
        write_traceback(logger, exc_info=sys.exc_info())
    log_message(message_type="error_occurred", error_message=str(error), error_type=type(error).__name__, **context)


__all__ = [
    'HumanReadableDestination',
    'app_logger',
    'engine_logger',
    'get_logger',
    'inventory_logger',
    'log_error',
    'log_inventory_request',
    'log_player_action',
    'log_queue_operation',
    'log_timer_event',
    'player_logger',
    'setup_logging',
    'start_action',
    'timer_logger',
]
