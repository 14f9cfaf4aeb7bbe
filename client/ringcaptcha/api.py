"""
RingCaptcha API Client Module

This module talks to the RingCaptcha phone verification API: it requests PIN codes by SMS or
voice call, validates the codes users type back, and sends plain SMS messages.
"""

from typing import Dict, Optional
from urllib.parse import quote

import requests

from .exceptions import InvalidArgument, MalformedResponse, RequestFailed
from .logging_config import get_logger, log_api_event
from .responses import RingCaptchaMessage, RingCaptchaValidation, RingCaptchaVerification

logger = get_logger(__name__)

SERVER = 'api.ringcaptcha.com'
USER_AGENT = 'ringcaptcha-python/1.0'
AVAILABLE_SERVICES = ('sms', 'voice')
ERROR_PROCESSING_REQUEST = 'ERROR_PROCESSING_REQUEST'

# Characters left untouched when escaping request values, as legacy URI escaping does
_URI_SAFE_CHARS = "-_.!~*'();/?:@&=+$,[]"

# Free-text fields sent exactly as given
_VERBATIM_FIELDS = ('message',)


def sanitize_data(data: Dict[str, str]) -> Dict[str, str]:
    """
    Return a copy of ``data`` ready to be posted.

    Every value is trimmed and percent-encoded, except the free-text ``message`` which is
    copied verbatim.
    """
    sanitized = {}
    for key, value in data.items():
        if key in _VERBATIM_FIELDS:
            sanitized[key] = value
        else:
            sanitized[key] = quote(str(value).strip(), safe=_URI_SAFE_CHARS)
    return sanitized


class RingCaptcha:
    """Client for the RingCaptcha API"""

    SERVER = SERVER
    USER_AGENT = USER_AGENT
    AVAILABLE_SERVICES = AVAILABLE_SERVICES

    def __init__(self, app_key: str, secret_key: str, timeout: Optional[float] = None):
        self._app_key = app_key
        self._secret_key = secret_key
        self.secure = True
        # None blocks until the server answers
        self.timeout = timeout
        self.message: Optional[str] = None

    @classmethod
    def from_config(cls, config):
        """Build a client from a ``RingCaptchaConfig``"""
        client = cls(config.app_key, config.secret_key, timeout=config.timeout)
        client.secure = config.secure
        return client

    @property
    def app_key(self) -> str:
        return self._app_key

    @property
    def secret_key(self) -> str:
        return self._secret_key

    def is_secure(self) -> bool:
        return self.secure

    def send_pin_code(self, phone_number: str, service: str = 'sms') -> RingCaptchaValidation:
        """
        Ask RingCaptcha to deliver a PIN code to a phone.

        Args:
            phone_number: Destination phone number
            service: Delivery channel, 'sms' or 'voice'

        Returns:
            RingCaptchaValidation: Parsed reply, its ``token`` is needed to validate the code

        Raises:
            InvalidArgument: If ``service`` is not supported (no request is sent)
            RequestFailed: If the HTTP call fails
        """
        service = str(service).lower()
        if service not in self.AVAILABLE_SERVICES:
            raise InvalidArgument(
                f"undefined service '{service}', available are: {list(self.AVAILABLE_SERVICES)}"
            )

        data = {'secret_key': self._secret_key, 'phone': phone_number}
        resource = f"{self._app_key}/code/{service}"
        response = self._call('code_requested', resource, data)
        return self._parse('code_requested', resource, response, RingCaptchaValidation)

    def validate_pin_code(self, pin_code: str, token: str) -> RingCaptchaVerification:
        """
        Check a PIN code typed by the user against the token of the code request.

        Returns:
            RingCaptchaVerification: Parsed reply, ``valid`` tells if the code matched
        """
        data = {'secret_key': self._secret_key, 'token': token, 'code': pin_code}
        resource = f"{self._app_key}/verify"
        response = self._call('code_verified', resource, data)
        return self._parse('code_verified', resource, response, RingCaptchaVerification)

    def send_message(self, phone_number: str, message: str) -> RingCaptchaMessage:
        """Send a free-text SMS to a phone"""
        data = {'secret_key': self._secret_key, 'phone': phone_number, 'message': message}
        resource = f"{self._app_key}/sms"
        response = self._call('sms_sent', resource, data)
        return self._parse('sms_sent', resource, response, RingCaptchaMessage)

    def _call(self, event_type: str, resource: str, data: Dict[str, str]):
        try:
            response = self._api_rest_call(resource, data)
        except RequestFailed as e:
            self.message = e.message
            http_status = e.response.status_code if e.response is not None else None
            log_api_event(event_type, resource=resource, http_status=http_status,
                          success=False, error=e.message)
            raise

        self.message = None
        return response

    def _parse(self, event_type: str, resource: str, response, record_class):
        try:
            record = record_class.from_response(response)
        except MalformedResponse as e:
            self.message = e.message
            log_api_event(event_type, resource=resource, http_status=response.status_code,
                          success=False, error=e.message)
            raise

        log_api_event(event_type, resource=resource, status=record.status,
                      http_status=response.status_code)
        return record

    def _build_url(self, resource: str, port: int = 80) -> str:
        protocol = "https://" if self.secure else "http://"
        # TLS always goes through 443, whatever port was asked for
        port = 443 if self.secure else port
        return f"{protocol}{self.SERVER}:{port}/{resource}"

    def _api_rest_call(self, resource: str, data: Dict[str, str], port: int = 80) -> requests.Response:
        """POST form data to the API and return the response if it is a 2xx or 3xx"""
        url = self._build_url(resource, port)
        logger.debug(f"POST {url}")

        try:
            response = requests.post(
                url,
                data=sanitize_data(data),
                headers={'User-Agent': self.USER_AGENT},
                timeout=self.timeout,
                allow_redirects=False,
            )
        except requests.exceptions.RequestException as e:
            logger.debug(f"Request to {url} failed: {e}")
            raise RequestFailed(str(e)) from e

        logger.debug(f"Response from {url}: HTTP {response.status_code}")
        if not 200 <= response.status_code < 400:
            raise RequestFailed(ERROR_PROCESSING_REQUEST, response=response)

        return response
