"""
RingCaptcha Client

A Python client library for the RingCaptcha phone verification API.
"""

from .api import RingCaptcha, sanitize_data
from .config import RingCaptchaConfig
from .exceptions import InvalidArgument, MalformedResponse, RequestFailed, RingCaptchaError
from .responses import (
    RingCaptchaMessage,
    RingCaptchaResponse,
    RingCaptchaValidation,
    RingCaptchaVerification,
)

__all__ = [
    'RingCaptcha',
    'RingCaptchaConfig',
    'RingCaptchaResponse',
    'RingCaptchaValidation',
    'RingCaptchaVerification',
    'RingCaptchaMessage',
    'RingCaptchaError',
    'InvalidArgument',
    'RequestFailed',
    'MalformedResponse',
    'sanitize_data',
]

__version__ = "1.0.0"
