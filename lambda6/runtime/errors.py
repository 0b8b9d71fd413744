# =============================================================================
# Runtime Errors
# =============================================================================
# Invalid input surfaces as plain TypeError. Endpoint errors are never wrapped.
# =============================================================================


class Lambda6Error(Exception):
    """Base exception for all lambda6 runtime errors."""


class EndpointNotFoundError(Lambda6Error, LookupError):
    """No registered endpoint matches the requested operation.

    Raised both for missing members and for members that exist but were
    never registered with ``@operation``.
    """

    def __init__(self, operation: str) -> None:
        super().__init__(f'endpoint not found for operation "{operation}"')
        self.operation = operation
