"""Service layer logging utilities.

Provides structured logging functions for service operations, enabling
consistent log format and context across the import and export pipelines.

Usage:
    from film_recipes.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    # Log successful operation
    log_operation(
        logger,
        operation="import_rows",
        outcome="committed",
        imported=12,
        updated=3,
    )

    # Log a recoverable row failure
    log_operation(
        logger,
        operation="import_row",
        outcome="error",
        level=logging.WARNING,
        row=7,
        error="Unknown setting 'Film Sim Strength'",
    )
"""

import logging
from typing import Any

LOGGER_PREFIX = "film_recipes.services"


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for service operations.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger instance with the 'film_recipes.services' prefix.

    Example:
        >>> logger = get_service_logger(__name__)
        >>> logger.name
        'film_recipes.services.recipe_import_service'
    """
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"{LOGGER_PREFIX}.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The context is passed via the 'extra' parameter for structured logging.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "import_rows", "export_recipes")
        outcome: Outcome description (e.g., "committed", "rolled_back", "error")
        level: Log level (default: INFO). Use DEBUG for verbose/frequent logs.
        **context: Additional context fields (row numbers, counts, error details)

    Example:
        >>> log_operation(
        ...     logger,
        ...     operation="export_recipes",
        ...     outcome="success",
        ...     exported_recipes=40,
        ...     errors=0,
        ... )
        # Logs: "export_recipes: success" with extra context
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)
