"""
Configuration file support for the RingCaptcha client

The library can be used without any file: ``RingCaptcha(app_key, secret_key)`` is enough.
The command line tool and ``RingCaptcha.from_config`` read credentials from a JSON file
looked up the same way as other XDG-aware tools.
"""

import json
import os
from typing import Optional

CONFIG_ENV_VAR = "RINGCAPTCHA_CONFIG"
CONFIG_DIR_NAME = "ringcaptcha"
CONFIG_FILE_NAME = "config.json"


def get_default_config_dir() -> str:
    """Get the default configuration directory following XDG standards"""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return os.path.join(xdg_config_home, CONFIG_DIR_NAME)

    home = os.environ.get("HOME")
    if home:
        return os.path.join(home, ".config", CONFIG_DIR_NAME)

    # Last resort: current directory
    return os.path.join(os.getcwd(), ".config", CONFIG_DIR_NAME)


def get_default_config_path() -> str:
    """Config path from RINGCAPTCHA_CONFIG, or config.json in the default directory"""
    return os.environ.get(CONFIG_ENV_VAR) or os.path.join(get_default_config_dir(), CONFIG_FILE_NAME)


class RingCaptchaConfig:
    """Credentials and connection settings for the RingCaptcha API"""

    REQUIRED_FIELDS = ('app_key', 'secret_key')

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or get_default_config_path()
        self.app_key: str = ""
        self.secret_key: str = ""
        self.secure: bool = True
        self.timeout: Optional[float] = None
        self.default_service: str = "sms"

        self._load_config()

    def _load_config(self):
        """Load configuration from file"""
        if not os.path.exists(self.config_path):
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            config_data = json.load(f)

        if not isinstance(config_data, dict):
            raise ValueError(f"Config file must contain a JSON object: {self.config_path}")

        for name in self.REQUIRED_FIELDS:
            if not config_data.get(name):
                raise ValueError(f"Missing required config field: {name}")
            setattr(self, name, str(config_data[name]))

        # Optional fields
        secure = config_data.get('secure', True)
        if not isinstance(secure, bool):
            raise ValueError("Config field 'secure' must be true or false")
        self.secure = secure

        timeout = config_data.get('timeout')
        if timeout is not None:
            try:
                timeout = float(timeout)
            except (TypeError, ValueError):
                raise ValueError(f"Config field 'timeout' must be a number, got {timeout!r}")
        self.timeout = timeout

        self.default_service = str(config_data.get('default_service', 'sms')).lower()

