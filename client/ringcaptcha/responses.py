"""
RingCaptcha response records

Each API call answers with a JSON object. The records in this module expose a fixed,
per-endpoint set of keys from that object as read-only attributes and drop everything else.
Keys a record declares but the server left out are ``None``.
"""

import json
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Tuple

from .exceptions import MalformedResponse

SUCCESS_STATUS = "SUCCESS"

# Bookkeeping fields that are not part of the API payload
_INTERNAL_FIELDS = ("response", "json_data")


@dataclass(frozen=True)
class RingCaptchaResponse:
    """Base record for a parsed RingCaptcha reply"""

    response: Any = field(default=None, repr=False, compare=False)
    json_data: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def allowed_fields(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls) if f.name not in _INTERNAL_FIELDS)

    @classmethod
    def from_response(cls, response):
        """
        Build a record from a completed HTTP response.

        Args:
            response: A ``requests.Response`` (or anything with a ``text`` attribute)

        Returns:
            An instance of ``cls`` holding the allow-listed keys of the body

        Raises:
            MalformedResponse: If the body is not a JSON object
        """
        return cls.from_json(response.text, response=response)

    @classmethod
    def from_json(cls, text: str, response=None):
        """Build a record from a raw JSON string"""
        try:
            payload = json.loads(text)
        except (TypeError, ValueError) as e:
            raise MalformedResponse(f"Response body is not valid JSON: {e}",
                                    response=response, body=text) from e

        if not isinstance(payload, dict):
            raise MalformedResponse(f"Expected a JSON object, got {type(payload).__name__}",
                                    response=response, body=text)

        allowed = cls.allowed_fields()
        selected = {k: v for k, v in payload.items() if k in allowed}
        values = {name: selected.get(name) for name in allowed}
        return cls(response=response, json_data=selected, **values)

    @property
    def valid(self) -> bool:
        return getattr(self, "status", None) == SUCCESS_STATUS

    def as_dict(self) -> Dict[str, Any]:
        """Allow-listed keys that were actually present in the reply"""
        return dict(self.json_data)


@dataclass(frozen=True)
class RingCaptchaValidation(RingCaptchaResponse):
    """Reply to a code request (``/code/<service>``)"""

    status: Optional[str] = None
    message: Optional[str] = None
    id: Optional[str] = None
    phone: Optional[str] = None
    token: Optional[str] = None
    country: Optional[str] = None
    service: Optional[str] = None
    attempt: Optional[int] = None
    pcp: Optional[str] = None
    retry_in: Optional[int] = None
    expires_in: Optional[int] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class RingCaptchaVerification(RingCaptchaResponse):
    """Reply to a code check (``/verify``)"""

    status: Optional[str] = None
    message: Optional[str] = None
    id: Optional[str] = None
    phone: Optional[str] = None
    dialog_code: Optional[str] = None
    country: Optional[str] = None
    service: Optional[str] = None
    # Usually a JSON object, left out of the hash
    geolocation: Optional[Any] = field(default=None, hash=False)
    referer: Optional[str] = None


@dataclass(frozen=True)
class RingCaptchaMessage(RingCaptchaResponse):
    """Reply to a plain SMS send (``/sms``)"""

    status: Optional[str] = None
    message: Optional[str] = None
    id: Optional[str] = None
    phone: Optional[str] = None
    message_count: Optional[int] = None
    reason: Optional[str] = None
