"""
Observability module: structured logging and operation IDs.

Usage:
    from routine_anchor.observability import get_logger, OperationContext

    logger = get_logger(__name__)
    logger.info("Processing write", extra={"block_id": "..."})

    with OperationContext("add_block") as ctx:
        logger.info("Write started")
"""

from .context import (
    OperationContext,
    generate_operation_id,
    get_operation_id,
    get_operation_name,
    set_operation_id,
)
from .logging import HumanFormatter, JSONFormatter, configure_from_env, configure_logging, get_logger

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "configure_from_env",
    "JSONFormatter",
    "HumanFormatter",
    # Context
    "OperationContext",
    "generate_operation_id",
    "get_operation_id",
    "get_operation_name",
    "set_operation_id",
]
