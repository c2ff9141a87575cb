"""
Structured logging configuration for the referee.
"""
import structlog
import logging
import sys
from typing import Any, Dict, Optional


def configure_logging(environment: str = "development"):
    """Configure structured logging based on environment."""

    # Configure standard logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.INFO if environment == "production" else logging.DEBUG,
    )

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if environment == "production" else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.INFO if environment == "production" else logging.DEBUG
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger()


def get_logger(name: str = None):
    """Get a configured logger instance."""
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()


class GameEventLogger:
    """Logger for a single session's game events."""

    def __init__(self, game_id: str):
        self.game_id = game_id
        self.logger = get_logger("catan_referee").bind(game_id=game_id)

    def log_action(
        self,
        player_id: int,
        action: str,
        success: bool,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        """Log the outcome of an action or follow-up."""
        if success:
            self.logger.info(
                "action_accepted",
                player_id=player_id,
                action=action,
                message=message,
                details=details or {},
            )
        else:
            self.logger.info(
                "action_rejected",
                player_id=player_id,
                action=action,
                reason=message,
            )

    def log_event(self, event: str, **details: Any):
        """Log a session lifecycle event (turns, status changes, attacks...)."""
        self.logger.info(event, **details)

    def log_debug(self, event: str, **details: Any):
        self.logger.debug(event, **details)
