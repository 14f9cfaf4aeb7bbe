import argparse
import json
import os
import sys

from .api import RingCaptcha
from .config import CONFIG_FILE_NAME, RingCaptchaConfig, get_default_config_dir
from .exceptions import RingCaptchaError
from .logging_config import setup_logging


def load_client(args: argparse.Namespace, config: RingCaptchaConfig) -> RingCaptcha:
    client = RingCaptcha.from_config(config)

    # Override TLS setting if specified on command line
    if args.insecure:
        client.secure = False
    return client


def print_record(record, summary: str, verbose: bool) -> int:
    if verbose:
        print(json.dumps(record.as_dict(), indent=2))
    else:
        print(summary)
    return 0 if record.valid else 2


def run_call(args: argparse.Namespace, call) -> int:
    """Run an API call and map its failures to exit code 1"""
    # Logs go to stderr so stdout only carries the command output
    setup_logging('DEBUG' if args.verbose else 'WARNING', stream=sys.stderr)
    try:
        config = RingCaptchaConfig(args.config)
        client = load_client(args, config)
        return call(client, config)
    except (RingCaptchaError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_send_code(args: argparse.Namespace) -> int:
    """Request a PIN code for a phone number"""
    def call(client: RingCaptcha, config: RingCaptchaConfig) -> int:
        service = args.service or config.default_service
        record = client.send_pin_code(args.phone, service)
        if record.valid:
            summary = f"Code sent to {record.phone or args.phone}. Token: {record.token}"
        else:
            summary = f"Code request rejected: {record.message or record.status}"
        return print_record(record, summary, args.verbose)

    return run_call(args, call)


def cmd_verify(args: argparse.Namespace) -> int:
    """Validate a PIN code"""
    def call(client: RingCaptcha, config: RingCaptchaConfig) -> int:
        record = client.validate_pin_code(args.code, args.token)
        if record.valid:
            summary = f"Code verified for {record.phone or 'unknown phone'}"
        else:
            summary = f"Code verification failed: {record.message or record.status}"
        return print_record(record, summary, args.verbose)

    return run_call(args, call)


def cmd_send_message(args: argparse.Namespace) -> int:
    """Send a free-text SMS"""
    def call(client: RingCaptcha, config: RingCaptchaConfig) -> int:
        record = client.send_message(args.phone, args.message)
        if record.valid:
            summary = f"SMS sent successfully! Message ID: {record.id or 'N/A'}"
        else:
            summary = f"SMS rejected: {record.message or record.status}"
        return print_record(record, summary, args.verbose)

    return run_call(args, call)


def cmd_init(args: argparse.Namespace) -> int:
    """Create the config directory and write config.json"""
    config_dir = args.config_dir or get_default_config_dir()
    config_path = os.path.join(config_dir, CONFIG_FILE_NAME)

    if os.path.exists(config_path) and not args.force:
        print(f"Config file already exists: {config_path}")
        print("Use --force to overwrite existing files")
        return 1

    try:
        os.makedirs(config_dir, exist_ok=True)
    except OSError as e:
        print(f"Failed to create config directory: {e}", file=sys.stderr)
        return 1

    config_data = {
        "app_key": args.app_key,
        "secret_key": args.secret_key,
        "secure": not args.insecure,
        "timeout": args.timeout,
        "default_service": args.service,
    }
    # Remove None values
    config_data = {k: v for k, v in config_data.items() if v is not None}

    try:
        with open(config_path, 'w') as f:
            json.dump(config_data, f, indent=2)
        os.chmod(config_path, 0o600)
    except OSError as e:
        print(f"Failed to write config file: {e}", file=sys.stderr)
        return 1

    print(f"Created config file: {config_path}")
    return 0


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=None, help="Config file path (default: $RINGCAPTCHA_CONFIG or XDG config directory)")
    parser.add_argument("--insecure", action="store_true", help="Use plain HTTP on port 80 instead of HTTPS")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print the full JSON reply and debug logs")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ringcaptcha", description="RingCaptcha phone verification client")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init", help="Write a config file with API credentials")
    p_init.add_argument("--config-dir", help="Config directory (default: XDG_CONFIG_HOME/ringcaptcha or ~/.config/ringcaptcha)")
    p_init.add_argument("--app-key", required=True, help="RingCaptcha application key")
    p_init.add_argument("--secret-key", required=True, help="RingCaptcha secret key")
    p_init.add_argument("--service", choices=RingCaptcha.AVAILABLE_SERVICES, default="sms", help="Default delivery channel for codes")
    p_init.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds (default: none)")
    p_init.add_argument("--insecure", action="store_true", help="Store secure=false (plain HTTP)")
    p_init.add_argument("--force", action="store_true", help="Overwrite existing files")
    p_init.set_defaults(func=cmd_init)

    p_code = sub.add_parser("send-code", help="Send a PIN code to a phone number")
    p_code.add_argument("phone", help="Destination phone number")
    p_code.add_argument("--service", default=None, help="Delivery channel: sms or voice (default: from config, else sms)")
    add_common_arguments(p_code)
    p_code.set_defaults(func=cmd_send_code)

    p_verify = sub.add_parser("verify", help="Validate a PIN code")
    p_verify.add_argument("code", help="PIN code entered by the user")
    p_verify.add_argument("token", help="Token returned by send-code")
    add_common_arguments(p_verify)
    p_verify.set_defaults(func=cmd_verify)

    p_sms = sub.add_parser("send-message", help="Send an SMS message")
    p_sms.add_argument("phone", help="Destination phone number")
    p_sms.add_argument("message", help="Message to send")
    add_common_arguments(p_sms)
    p_sms.set_defaults(func=cmd_send_message)

    return p


def main(argv=None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
