"""Error types shared by every resource kind.

Listing failures (TransportError, CollectorError) halt the run. Operation
failures and timeouts are recorded against a single resource. NotFoundError is
raised by providers for resources that are already gone and is never shown to
the operator.
"""


class LeftoversError(Exception):
    """Base class for all leftovers errors."""


class CredentialsError(LeftoversError):
    """Raised when provider credentials or required settings are missing."""


class TransportError(LeftoversError):
    """Raised when a resource kind cannot be listed."""

    def __init__(self, kind, scope, cause):
        self.kind = kind
        self.scope = scope
        self.cause = cause
        where = f" for {scope}" if scope else ""
        super().__init__(f"Listing {kind}{where}: {cause}")


class CollectorError(LeftoversError):
    """Raised when a listed item cannot be turned into a resource descriptor."""


class OperationError(LeftoversError):
    """Raised when a provider operation finishes with an error payload."""

    def __init__(self, detail, operation_id=None):
        self.detail = detail
        self.operation_id = operation_id
        super().__init__(detail)


class OperationTimeoutError(LeftoversError):
    """Raised when a provider operation never reaches DONE."""

    def __init__(self, operation_id, timeout):
        self.operation_id = operation_id
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout}s waiting for operation {operation_id}")


class NotFoundError(LeftoversError):
    """Raised by delete calls when the provider no longer has the resource."""
