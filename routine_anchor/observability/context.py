"""
Operation context management with context-local storage.

Each schedule write runs inside an OperationContext so every log line it
emits carries the same operation id and the name of the write.
"""

import contextvars
import uuid
from typing import Optional

_operation_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "operation_id", default=None
)
_operation_name_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "operation_name", default=None
)


def get_operation_id() -> Optional[str]:
    """Get the current operation ID from context."""
    return _operation_id_var.get()


def set_operation_id(operation_id: str) -> contextvars.Token:
    """Set the operation ID in context. Returns token for reset."""
    return _operation_id_var.set(operation_id)


def get_operation_name() -> Optional[str]:
    """Name of the running write (e.g. "add_block"), if any."""
    return _operation_name_var.get()


def generate_operation_id() -> str:
    return f"op-{uuid.uuid4().hex[:16]}"


class OperationContext:
    """
    Context manager for one schedule write (add, edit, status change...).

    Usage:
        with OperationContext("add_block") as ctx:
            logger.info("Saving block")
            # Logs within this block carry ctx.operation_id and "add_block"

        # Or with an existing ID:
        with OperationContext("refresh", operation_id="op-abc123"):
            ...
    """

    def __init__(self, name: str = "", operation_id: Optional[str] = None):
        self.name = name
        self.operation_id = operation_id or generate_operation_id()
        self._tokens: Optional[tuple[contextvars.Token, contextvars.Token]] = None

    def __enter__(self) -> "OperationContext":
        self._tokens = (
            set_operation_id(self.operation_id),
            _operation_name_var.set(self.name or None),
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._tokens is not None:
            id_token, name_token = self._tokens
            _operation_name_var.reset(name_token)
            _operation_id_var.reset(id_token)
            self._tokens = None
