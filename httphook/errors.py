"""Exceptions raised by HTTPHook.fire."""


class HookError(Exception):
    """Base exception for log shipping failures."""


class MarshalError(HookError):
    """Raised when a log entry cannot be serialized to JSON."""

    def __init__(self, details: object):
        super().__init__(f"failed to marshal payload due to error {details}")


class BuildRequestError(HookError):
    """Raised when the endpoint cannot be turned into a request."""

    def __init__(self, details: object):
        super().__init__(f"failed to build request due to error {details}")


class TransportError(HookError):
    """Raised when the request could not be performed."""

    def __init__(self, details: object):
        super().__init__(f"failed to perform request due to error {details}")


class BadStatusError(HookError):
    """Raised when the endpoint answers with anything but 200 or 201."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(
            f"failed to post payload, the server responded with a status of {status_code}"
        )
