from typing import Any


class RelayError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def payload(self) -> dict[str, Any]:
        return {"error": self.message}


class ClientInputError(RelayError):
    """Request body is missing a required field or has the wrong shape."""

    status_code = 400


class UpstreamFormatError(RelayError):
    """The completion service answered, but not with the declared shape."""

    status_code = 502

    def __init__(self, message: str, raw: str):
        super().__init__(message)
        self.raw = raw

    def payload(self) -> dict[str, Any]:
        return {"error": self.message, "raw": self.raw}


class UpstreamCallError(RelayError):
    """Network, auth or protocol failure reaching the completion service."""

    status_code = 500
