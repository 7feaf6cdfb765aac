"""Services package - Business logic layer for Film Recipes.

This package contains the service modules that normalize spreadsheet data,
persist it and export it again as public JSON.

Architecture:
- Services: Stateless functions organized by pipeline stage
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy
- Results: Recoverable errors are collected in result objects

Service Modules:
- setting_transformer: Free-text setting names and values to canonical pairs
- row_resolver: Find-or-create of authors, systems, cameras and tags
- recipe_import_service: Transactional recipe spreadsheet import
- author_import_service: Author spreadsheet import
- reference_data_service: Setting definitions and style category seeding
- recipe_query_service: Read-only joined rows for export
- export_transformer_service: Joined rows to public recipe documents
- recipe_export_service: Batch and single-recipe JSON export

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Engine, session management and upsert helpers
- logging_utils: Structured operation logging
"""

from . import (
    database,
    setting_transformer,
    row_resolver,
    reference_data_service,
    recipe_import_service,
    author_import_service,
    recipe_query_service,
    export_transformer_service,
    recipe_export_service,
)

from .database import session_scope, init_database

from .exceptions import (
    ServiceError,
    ValidationError,
    UnknownSettingError,
    RecipeNotFound,
    SourceFileError,
    ImportBatchError,
    DatabaseError,
)

__all__ = [
    "database",
    "setting_transformer",
    "row_resolver",
    "reference_data_service",
    "recipe_import_service",
    "author_import_service",
    "recipe_query_service",
    "export_transformer_service",
    "recipe_export_service",
    "session_scope",
    "init_database",
    "ServiceError",
    "ValidationError",
    "UnknownSettingError",
    "RecipeNotFound",
    "SourceFileError",
    "ImportBatchError",
    "DatabaseError",
]
