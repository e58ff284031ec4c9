"""Domain-specific exception classes for the influencer CRM."""


class CRMError(Exception):
    """Base class for all domain errors in the CRM."""


class NotFoundError(CRMError):
    """Raised when a requested record does not exist.

    Attributes:
        resource: The kind of record that was looked up (e.g. ``"influencer"``).
        identifier: The identifier that was not found.
    """

    def __init__(self, resource: str, identifier: str) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} '{identifier}' not found")


class DuplicateError(CRMError):
    """Raised when creating a record that collides with an existing one."""

    def __init__(self, resource: str, identifier: str) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} '{identifier}' already exists")


class ConfigurationError(CRMError):
    """Raised when a required credential or setting is missing."""


class ExternalServiceError(CRMError):
    """Raised when a third-party API (Shopify, Apify, RapidAPI) fails.

    Attributes:
        service: Human-readable name of the failing service.
        status_code: HTTP status returned by the service, if any.
        detail: Raw error body returned by the service, if any.
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        self.service = service
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{service}: {message}")


class LookupRejectedError(CRMError):
    """Raised when a profile lookup service rejects the request itself.

    The service answered, but with an error payload (for example an invalid
    username), so retrying the same input will not help.
    """
