"""
Structured JSON logging for configuration builds.

This module provides a structured logger that outputs JSON-formatted
logs with a build correlation ID, namespace and component so that every
diagnostic of one configuration build can be queried together.
"""

import json
import logging
import os
import time
from typing import Any, Dict, Optional
from datetime import datetime, timezone


class StructuredLogger:
    """
    Structured JSON logger for configuration builders.

    Outputs logs in JSON format with:
    - Timestamp (ISO 8601)
    - Log level
    - Correlation fields (buildId, namespace)
    - Component and operation
    - Message and additional context
    """

    def __init__(
        self,
        component: str,
        build_id: Optional[str] = None,
        namespace: Optional[str] = None
    ):
        """
        Initialize structured logger.

        Args:
            component: Component name (e.g., 'LoadDistributionPolicyBuilder')
            build_id: Configuration build identifier for correlation
            namespace: Kubernetes namespace the messages relate to
        """
        self.component = component
        self.build_id = build_id
        self.namespace = namespace
        self.logger = logging.getLogger(component)

        log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.logger.setLevel(getattr(logging, log_level, logging.INFO))

    def bind(self, **fields: Optional[str]) -> 'StructuredLogger':
        """
        Create a logger sharing this component with updated correlation fields.

        Args:
            **fields: ``build_id`` and/or ``namespace`` overrides

        Returns:
            New StructuredLogger instance
        """
        return StructuredLogger(
            component=self.component,
            build_id=fields.get('build_id', self.build_id),
            namespace=fields.get('namespace', self.namespace)
        )

    def _format_log(
        self,
        level: str,
        message: str,
        operation: Optional[str] = None,
        **kwargs
    ) -> str:
        """
        Format log entry as JSON.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR)
            message: Log message
            operation: Operation being performed
            **kwargs: Additional context fields

        Returns:
            JSON-formatted log string
        """
        log_entry: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.%fZ'),
            'level': level,
            'component': self.component,
            'message': message
        }

        if self.build_id:
            log_entry['buildId'] = self.build_id
        if self.namespace:
            log_entry['namespace'] = self.namespace

        if operation:
            log_entry['operation'] = operation

        if kwargs:
            log_entry['context'] = kwargs

        return json.dumps(log_entry, default=str)

    def debug(self, message: str, operation: Optional[str] = None, **kwargs) -> None:
        self.logger.debug(self._format_log('DEBUG', message, operation, **kwargs))

    def info(self, message: str, operation: Optional[str] = None, **kwargs) -> None:
        self.logger.info(self._format_log('INFO', message, operation, **kwargs))

    def warning(self, message: str, operation: Optional[str] = None, **kwargs) -> None:
        self.logger.warning(self._format_log('WARNING', message, operation, **kwargs))

    def error(
        self,
        message: str,
        operation: Optional[str] = None,
        error: Optional[Exception] = None,
        **kwargs
    ) -> None:
        """
        Log error message.

        Args:
            message: Log message
            operation: Operation being performed
            error: Exception object if available
            **kwargs: Additional context
        """
        if error:
            kwargs['error_type'] = type(error).__name__
            kwargs['error_message'] = str(error)

        self.logger.error(self._format_log('ERROR', message, operation, **kwargs))


class LoggingContext:
    """
    Context manager for logging operation duration.

    Logs operation start and end at DEBUG, or an error with the duration
    if the block raises.
    """

    def __init__(self, logger: StructuredLogger, operation: str, **kwargs):
        self.logger = logger
        self.operation = operation
        self.context = kwargs
        self.start_time: Optional[float] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug(
            f'Starting operation: {self.operation}',
            operation=self.operation,
            **self.context
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is None:
            return False

        self.duration_ms = (time.perf_counter() - self.start_time) * 1000
        if exc_type is not None:
            self.logger.error(
                f'Operation failed: {self.operation}',
                operation=self.operation,
                error=exc_val,
                duration_ms=self.duration_ms,
                **self.context
            )
        else:
            self.logger.debug(
                f'Completed operation: {self.operation}',
                operation=self.operation,
                duration_ms=self.duration_ms,
                **self.context
            )
        return False


def get_structured_logger(
    component: str,
    build_id: Optional[str] = None,
    namespace: Optional[str] = None
) -> StructuredLogger:
    """
    Factory function for creating StructuredLogger instances.

    Args:
        component: Name of the component (e.g., 'LoadDistributionPolicyBuilder')
        build_id: Configuration build identifier
        namespace: Namespace for context

    Returns:
        Configured StructuredLogger instance

    Example:
        >>> logger = get_structured_logger('LoadDistributionPolicyBuilder', build_id='3f2a')
        >>> logger.info('Built load distribution policies', policy_count=2)
    """
    return StructuredLogger(component=component, build_id=build_id, namespace=namespace)


def configure_logging() -> None:
    """
    Configure the root logger for JSON output.

    Sets the level from LOG_LEVEL and emits bare messages, since the
    structured logger formats them as JSON already.
    """
    log_level = os.getenv('LOG_LEVEL', 'INFO').upper()

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format='%(message)s',
        force=True
    )

    # HTTP client logging is noisy below DEBUG
    if log_level != 'DEBUG':
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('requests').setLevel(logging.WARNING)
