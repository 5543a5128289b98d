"""Error types shared by the gateway, the polling controller and the HTTP layer."""

GENERIC_ERROR_MESSAGE = "Error processing your request"


class GatewayError(Exception):
    """Base error. `status_code` is the HTTP status the API answers with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GatewayError):
    """Caller input failed a precondition (missing image, unknown model)."""

    status_code = 400


class RemoteError(GatewayError):
    """The prediction service reported a job-level error."""

    status_code = 500


class InternalError(GatewayError):
    """Unexpected transport or parsing failure. Carries only a generic message."""

    status_code = 500

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE):
        super().__init__(message)


class TransportError(GatewayError):
    """A status query could not be completed."""

    status_code = 502
