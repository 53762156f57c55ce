"""
Error Handler
Global error handling and reporting
"""

import asyncio
import time
import traceback
from typing import Any, Dict, Optional

from mappings_bot.utils.logger import get_logger


class ErrorHandler:
    """Counts unexpected errors per context and trips a breaker on bursts."""

    def __init__(self, max_errors_per_minute: int = 10, breaker_seconds: float = 60.0):
        self.logger = get_logger("ErrorHandler")
        self.error_counts: Dict[str, int] = {}
        self.circuit_breakers: Dict[str, float] = {}
        self.max_errors_per_minute = max_errors_per_minute
        self.breaker_seconds = breaker_seconds
        self._cleanup_task: Optional[asyncio.Task] = None

    def initialize(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Install the loop exception handler and start the periodic cleanup."""
        if loop is None:
            loop = asyncio.get_running_loop()

        loop.set_exception_handler(self._async_exception_handler)
        self._cleanup_task = loop.create_task(self._periodic_cleanup())

        self.logger.info("Error handlers initialized")

    def _async_exception_handler(self, loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        exception = context.get("exception")
        if exception:
            self.handle_exception(exception, "loop")
        else:
            message = context.get("message", "Unknown async error")
            self.logger.error(f"Async error: {message}")

    def handle_exception(self, error: BaseException, context: str = "") -> bool:
        """
        Handle an exception.

        Args:
            error: The exception that occurred
            context: Where it happened, usually a command name

        Returns:
            True if this error opened the circuit breaker for ``context``
        """
        error_key = f"{context}:{type(error).__name__}"

        if context:
            self.logger.error(f"[{context}] {error}")
        else:
            self.logger.error(f"{error}")

        trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        self.logger.debug(f"Traceback:\n{trace}")

        count = self.error_counts.get(error_key, 0) + 1
        self.error_counts[error_key] = count

        if count >= self.max_errors_per_minute and context not in self.circuit_breakers:
            self.logger.warning(f"Circuit breaker triggered for: {context or error_key}")
            self.circuit_breakers[context] = time.monotonic() + self.breaker_seconds
            return True

        return False

    def is_circuit_broken(self, context: str) -> bool:
        """Check if a context is circuit broken."""
        break_until = self.circuit_breakers.get(context)
        if not break_until:
            return False

        if time.monotonic() > break_until:
            del self.circuit_breakers[context]
            for key in [k for k in self.error_counts if k.startswith(f"{context}:")]:
                del self.error_counts[key]
            return False

        return True

    async def _periodic_cleanup(self) -> None:
        while True:
            try:
                await asyncio.sleep(60)
                if self.error_counts:
                    self.logger.debug("Error counts cleaned up")
                self.error_counts.clear()
            except asyncio.CancelledError:
                break

    def reset(self) -> None:
        """Forget all counts and open breakers."""
        self.error_counts.clear()
        self.circuit_breakers.clear()

    async def shutdown(self) -> None:
        """Clean shutdown."""
        self.logger.info("Shutting down error handler...")

        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None

        self.reset()


# Global error handler instance
_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """Get the global error handler instance."""
    global _error_handler
    if _error_handler is None:
        _error_handler = ErrorHandler()
    return _error_handler


def setup_error_handler(loop: Optional[asyncio.AbstractEventLoop] = None) -> ErrorHandler:
    """Set up the global error handler."""
    handler = get_error_handler()
    handler.initialize(loop)
    return handler
