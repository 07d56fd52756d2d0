"""
Custom exception types for import and record processing.

These exceptions give semantic meaning to error handling, making it clear
whether an error belongs to the caller (bad input, reported with a 4xx),
to a single row of an import (recorded and counted, the batch continues),
or to the deployment (misconfiguration).

IMPORT FAILURE LEVELS:
- Request level: the uploaded file or mapping is unusable, nothing is created
- Row level: one row fails validation or persistence, the batch keeps going
- Anything else propagates and fails the request; rows already committed stay
"""


class BusinessLogicError(Exception):
    """
    Exception for permanent business logic errors caused by caller input.

    These errors won't be resolved by retrying the same request and are
    surfaced to the caller with a 4xx status.

    Examples:
    - Sort field outside the supported set
    - Unknown platform or status in a filter
    - Note content left blank

    Usage:
        if sort_field not in SORT_FIELDS:
            raise BusinessLogicError(f"Invalid sort field: {sort_field}")
    """

    def __init__(self, message: str, details: dict = None):
        """
        Args:
            message: Human-readable error description
            details: Optional dict of additional context for logging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ImportFileError(BusinessLogicError):
    """
    Request-level import failure, raised before any row is processed.

    No import batch exists when this is raised.

    Examples:
    - Unsupported file extension
    - File cannot be read or has no header row
    - File has no data rows
    - Mapping payload is not a JSON object or names an unknown field

    Usage:
        if extension not in settings.IMPORT_ALLOWED_EXTENSIONS:
            raise ImportFileError("Unsupported file format")
    """


class PersistenceError(Exception):
    """
    Exception for a record the store refused to write.

    Raised by import stores when the database rejects a single insert
    (constraint violation, value out of range). The batch importer turns it
    into a row error instead of aborting the batch.

    Usage:
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise PersistenceError(str(e), original_exception=e) from e
    """

    def __init__(self, message: str, details: dict = None, original_exception: Exception = None):
        """
        Args:
            message: Human-readable error description
            details: Optional dict of additional context for logging
            original_exception: The underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_exception = original_exception


class ConfigurationError(Exception):
    """
    Exception for missing or invalid configuration.

    Examples:
    - Clerk frontend API host not set when a token needs verifying
    - Invalid configuration value format

    Usage:
        if not settings.CLERK_FRONTEND_API:
            raise ConfigurationError("CLERK_FRONTEND_API not configured", "CLERK_FRONTEND_API")
    """

    def __init__(self, message: str, config_key: str = None):
        """
        Args:
            message: Human-readable error description
            config_key: Name of the missing/invalid configuration key
        """
        super().__init__(message)
        self.message = message
        self.config_key = config_key
