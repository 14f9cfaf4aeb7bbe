"""
Errors raised by the RingCaptcha client.
"""

from typing import Optional


class RingCaptchaError(Exception):
    """Base class for every RingCaptcha client error"""


class InvalidArgument(RingCaptchaError, ValueError):
    """A call was made with an argument the API does not accept"""


class RequestFailed(RingCaptchaError):
    """The HTTP round trip failed or returned a non 2xx/3xx status"""

    def __init__(self, message: str, response=None):
        super().__init__(message)
        self.message = message
        self.response = response


class MalformedResponse(RingCaptchaError, ValueError):
    """The response body is not a JSON object"""

    def __init__(self, message: str, response=None, body: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.response = response
        self.body = body
