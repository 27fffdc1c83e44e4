"""Custom exception classes for the relay.

Status codes drive Stripe's retry behaviour: 400 is a permanent rejection,
500 and 502 are retried.
"""


class RelayError(Exception):
    """Base exception for the relay."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class MissingSignatureError(RelayError):
    """Request arrived without a Stripe-Signature header."""

    def __init__(self, message: str = "Missing Stripe-Signature header"):
        super().__init__("MISSING_SIGNATURE", message, status_code=400)


class InvalidSignatureError(RelayError):
    """Signature header malformed, stale, or not matching the body."""

    def __init__(self, message: str = "Bad signature", details=None):
        super().__init__("INVALID_SIGNATURE", message, details, status_code=400)


class ServerMisconfiguredError(RelayError):
    """Forwarding destination or shared secret is not configured."""

    def __init__(self, message: str = "Server misconfigured", details=None):
        super().__init__("SERVER_MISCONFIGURED", message, details, status_code=500)


class ForwardFailedError(RelayError):
    """Downstream delivery did not succeed.

    Covers non-2xx responses, exhausted redirect chains and transport errors.
    ``outcome`` is set whenever the downstream produced a response.
    """

    def __init__(self, message: str = "Forward failed", details=None, outcome=None):
        self.outcome = outcome
        super().__init__("FORWARD_FAILED", message, details, status_code=502)


class InternalRelayError(RelayError):
    """Unexpected failure while handling a webhook."""

    def __init__(self, message: str = "Server error", details=None):
        super().__init__("INTERNAL_ERROR", message, details, status_code=500)
