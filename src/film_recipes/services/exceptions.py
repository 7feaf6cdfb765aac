"""Service layer exception classes for Film Recipes.

This module defines all custom exceptions used by the service layer to provide
consistent error handling across the import and export pipelines.

Row-level and recipe-level errors are recoverable: the engines catch them,
record them in their result objects and carry on. Batch-level and
invocation-level errors are fatal and propagate to the caller after rollback
has been attempted.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError        (row-level)
    ├── UnknownSettingError    (row-level)
    ├── RecipeNotFound         (invocation-fatal, export by id)
    ├── SourceFileError        (batch-fatal)
    ├── ImportBatchError       (batch-fatal)
    └── DatabaseError
"""

from typing import List, Optional


class ServiceError(Exception):
    """Base exception for all service layer errors.

    All service-specific exceptions should inherit from this class.
    """

    pass


class ValidationError(ServiceError):
    """Raised when input data validation fails.

    Args:
        errors: List of validation messages

    Example:
        >>> raise ValidationError(["Camera system name is required"])
        ValidationError: Validation failed: Camera system name is required
    """

    def __init__(self, errors: List[str]):
        self.errors = errors
        error_msg = "; ".join(errors)
        super().__init__(f"Validation failed: {error_msg}")


class UnknownSettingError(ServiceError):
    """Raised when a canonical setting name has no setting definition.

    Args:
        setting_name: Canonical name produced by the transformer
        raw_name: Name as it appeared in the source cell

    Example:
        >>> raise UnknownSettingError("Film Sim Strength", "film sim strength")
        UnknownSettingError: Unknown setting 'Film Sim Strength' (from 'film sim strength')
    """

    def __init__(self, setting_name: str, raw_name: Optional[str] = None):
        self.setting_name = setting_name
        self.raw_name = raw_name
        message = f"Unknown setting '{setting_name}'"
        if raw_name is not None and raw_name.strip() != setting_name:
            message += f" (from '{raw_name.strip()}')"
        super().__init__(message)


class RecipeNotFound(ServiceError):
    """Raised when a recipe cannot be found by ID.

    Args:
        recipe_id: The recipe ID that was not found

    Example:
        >>> raise RecipeNotFound(123)
        RecipeNotFound: Recipe with ID 123 not found
    """

    def __init__(self, recipe_id: int):
        self.recipe_id = recipe_id
        super().__init__(f"Recipe with ID {recipe_id} not found")


class SourceFileError(ServiceError):
    """Raised when an import source file cannot be read.

    Args:
        file_path: Path of the source file
        reason: What went wrong
    """

    def __init__(self, file_path: str, reason: str):
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"Cannot read source file '{file_path}': {reason}")


class ImportBatchError(ServiceError):
    """Raised when a batch-level statement fails and the batch is rolled back.

    Args:
        stage: Batch stage that failed (e.g. "truncate", "commit")
        original_error: Underlying exception
    """

    def __init__(self, stage: str, original_error: Optional[Exception] = None):
        self.stage = stage
        self.original_error = original_error
        detail = f": {original_error}" if original_error is not None else ""
        super().__init__(f"Import batch failed during {stage}{detail}")


class DatabaseError(ServiceError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
