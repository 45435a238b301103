"""
Snippetbox — Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for the different failure classes.
Why:   Each class maps to exactly one kind of response, so handlers raise and
       the global handlers registered in main.py decide what the client sees.
How:   Each exception carries a message and an optional context dict. The
       context is logged server-side and never written to a response body.

Exception Hierarchy:
    SnippetboxError (base)
    ├── ClientInputError           → 4xx plain-text response
    │   └── MalformedFormError     → 400 Bad Request
    ├── NotFoundError              → 404 Not Found
    ├── DuplicateEmailError        → handled in the signup handler (422 re-render)
    ├── InvalidCredentialsError    → handled in the login handler (422 re-render)
    ├── LoginRequired              → 303 redirect to the login page
    ├── DatabaseError              → 500 Internal Server Error
    ├── TemplateNotFoundError      → 500 Internal Server Error
    └── TemplateRenderError        → 500 Internal Server Error

    InvalidDecoderTargetError is deliberately NOT a SnippetboxError: it means a
    form class is wired wrongly, so it must never be mistaken for bad input.
"""

from typing import Any, Dict, Optional


class SnippetboxError(Exception):
    """
    Base exception for all Snippetbox application errors.

    Attributes:
        message:  Error description (logged; only safe ones reach the client)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ClientInputError(SnippetboxError):
    """
    Raised when the request itself is unusable (bad form body, bad identifier).

    HTTP: `status_code`, 400 unless told otherwise. The response body is the
    standard status phrase only.
    """

    def __init__(
        self,
        message: str = "Bad request",
        status_code: int = 400,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.status_code = status_code


class MalformedFormError(ClientInputError):
    """
    Raised when a submitted form cannot be decoded into its form class.

    When: The body is not a parseable form, or a value does not coerce to the
    field's type (e.g. expires=abc for an int field).
    """

    def __init__(
        self,
        message: str = "Malformed form submission",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, status_code=400, context=ctx)
        self.field = field


class NotFoundError(SnippetboxError):
    """
    Raised when a requested resource does not exist (or has expired).

    SQLAlchemy returns None for missing rows; the service layer converts that
    into this exception so handlers stay free of None checks.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DuplicateEmailError(SnippetboxError):
    """
    Raised by UserService.insert when the email is already registered.

    This is a late-discovered validation failure, not a server error: the
    signup handler turns it into a field error on "email".
    """

    def __init__(self, email: str = "", context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Email address is already in use", context=context)
        self.email = email


class InvalidCredentialsError(SnippetboxError):
    """Raised by UserService.authenticate for an unknown email or wrong password."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Email or password is incorrect", context=context)


class LoginRequired(SnippetboxError):
    """Raised by the authentication gate when the session has no user."""

    def __init__(self, redirect_to: str = "/user/login"):
        super().__init__(message="Authentication required")
        self.redirect_to = redirect_to


class DatabaseError(SnippetboxError):
    """
    Raised when database operations fail unexpectedly.

    Security Note:
        The client only ever sees a generic 500. Query text, constraint names
        and driver messages go to the log through `context`.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TemplateNotFoundError(SnippetboxError):
    """
    Raised when a handler asks for a page that has no compiled template.

    Never a user error: it means a handler and the template directory are out
    of sync.
    """

    def __init__(self, page: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["page"] = page
        super().__init__(message=f"The template {page} does not exist", context=ctx)
        self.page = page


class TemplateRenderError(SnippetboxError):
    """Raised when executing a template fails part-way through."""

    def __init__(
        self,
        page: str,
        message: str = "Template execution failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["page"] = page
        super().__init__(message=message, context=ctx)
        self.page = page


class InvalidDecoderTargetError(TypeError):
    """
    Raised when a form class cannot be decoded into at all.

    What:  The target is not a dataclass, or one of its fields has a type the
           decoder cannot bind to.
    Why a TypeError: it is a programming error in the form definition. The
           decoder re-raises it instead of returning a client error, and it
           ends up in the catch-all handler.
    """
