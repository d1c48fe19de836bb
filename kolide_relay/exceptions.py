"""Custom exceptions for webhook relay operations"""


class RelayError(Exception):
    """Base exception for webhook relay operations.

    ``message`` is the only text ever returned to the webhook caller; ``detail``
    is kept for the logs.
    """

    status_code = 500
    message = "Internal server error"

    def __init__(self, detail: str = "", message: str | None = None) -> None:
        if message is not None:
            self.message = message
        self.detail = detail or self.message
        super().__init__(self.detail)


class AuthError(RelayError):
    """Raised when the webhook signature is missing or invalid"""

    status_code = 401
    message = "Invalid signature"


class MalformedPayloadError(RelayError):
    """Raised when the request body is not valid JSON"""

    status_code = 400
    message = "Invalid JSON payload"


class InvalidPayloadError(RelayError):
    """Raised when the event envelope is missing required fields"""

    status_code = 400
    message = "Invalid payload structure"


class ForwardingError(RelayError):
    """Raised when a downstream Slack or Linear call fails"""
    pass


class ConfigurationError(RelayError):
    """Raised when a required setting is missing"""
    pass


class UnexpectedError(RelayError):
    """Wraps any other failure at the request handler boundary"""
    pass
