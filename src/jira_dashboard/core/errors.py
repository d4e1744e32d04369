"""
Custom exceptions for jira-dashboard.

Every error carries a message plus keyword context (urls, status codes,
names) for logging.

Exception Hierarchy:
    JiraDashboardError (base)
    ├── NotFoundError (entity, project or README not found)
    │   └── AnnotationMissingError (required entity annotation absent)
    ├── UpstreamError (catalog/Jira/raw content HTTP failures)
    ├── FilterResolutionError (named filter could not be resolved)
    └── ReadmeFetchError (README client failures)

Route handlers trap the errors they recognize and turn them into HTTP
responses; anything else reaches the application-wide exception handler.

Example:
    >>> from jira_dashboard.core.errors import FilterResolutionError
    >>> try:
    ...     raise FilterResolutionError("team-bugs", "Unknown filter")
    ... except FilterResolutionError as e:
    ...     print(f"Filter {e.filter_name} failed: {e}")
"""


class JiraDashboardError(Exception):
    """
    Root of the jira-dashboard exceptions.

    Attributes:
        message: What went wrong, suitable for logs
        context: Extra keyword details given at raise time
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class NotFoundError(JiraDashboardError):
    """Raised when a catalog entity, Jira project or README does not exist."""


class AnnotationMissingError(NotFoundError):
    """
    Raised when a required annotation is absent from an entity.

    Attributes:
        annotation: Name of the missing annotation
    """

    def __init__(self, annotation: str, message: str, **context: object) -> None:
        super().__init__(message, annotation=annotation, **context)
        self.annotation = annotation


class UpstreamError(JiraDashboardError):
    """
    A call to Jira, the catalog or a content host failed.

    Raise it `from` the transport error so the cause stays attached.

    Attributes:
        service: Name of the upstream service ("jira", "catalog", ...)
        status_code: HTTP status returned upstream, if any

    Example:
        >>> str(UpstreamError("jira", "HTTP 503 for project/ABC", status_code=503))
        '[jira] HTTP 503 for project/ABC'
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
        **context: object,
    ) -> None:
        super().__init__(message, service=service, status_code=status_code, **context)
        self.service = service
        self.status_code = status_code

    def __str__(self) -> str:
        return f"[{self.service}] {self.message}"


class FilterResolutionError(JiraDashboardError):
    """
    Raised when a filter named in an entity annotation cannot be resolved.

    Attributes:
        filter_name: The name (or saved filter id) that failed
    """

    def __init__(self, filter_name: str, message: str, **context: object) -> None:
        super().__init__(message, filter_name=filter_name, **context)
        self.filter_name = filter_name


class ReadmeFetchError(JiraDashboardError):
    """Raised by the README client when the backend call fails."""


__all__ = [
    "JiraDashboardError",
    "NotFoundError",
    "AnnotationMissingError",
    "UpstreamError",
    "FilterResolutionError",
    "ReadmeFetchError",
]
