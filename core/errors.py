# core/errors.py

from fastapi import HTTPException

from core.logging_config import logger


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1: Supabase Auth / GoTrue / PostgREST APIError
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2: Errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    return str(error) or error.__class__.__name__


def handle_supabase_error(error: Exception, operation: str = "Database operation", status_code: int = 500) -> HTTPException:
    """
    Handle Supabase errors with consistent formatting.
    Returns HTTPException (doesn't raise) so caller can customize or re-raise.
    HTTPExceptions raised inside the try block are passed through untouched.

    Args:
        error: The exception that occurred
        operation: Description of what operation failed (e.g., "Failed to save SEO page")
        status_code: HTTP status code for unclassified errors (default 500)
    """
    if isinstance(error, HTTPException):
        return error

    error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    # Generic messages only; internals stay in the log
    error_lower = error_detail.lower()
    if "duplicate" in error_lower or "unique" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Record already exists")
    elif "foreign key" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Invalid reference")
    elif "not found" in error_lower or "does not exist" in error_lower:
        return HTTPException(status_code=404, detail=f"{operation}: Resource not found")
    else:
        return HTTPException(status_code=status_code, detail=operation)


def error_body(message: str, **extra) -> dict:
    """Failure envelope shared by every handler."""
    body = {"success": False, "error": message}
    body.update(extra)
    return body
