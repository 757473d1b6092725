"""
Command line entry point for the Cell Broadcast Alert Filter.

Evaluates one broadcast against a carrier configuration file and prints the
resulting decision as JSON.
"""

import argparse
import json
import sys
from dataclasses import asdict
from enum import Enum
from typing import Any, List, Optional

from .models.device import DeviceState, RegistrationState, RoamingType, ServiceState
from .models.message import (
    BroadcastMessage,
    CmasMessageClass,
    EtwsWarningInfo,
    EtwsWarningType,
    MessageType,
)
from .services.alert_service import AlertService
from .services.config_manager import ConfigurationManager
from .utils.logging import get_logger, setup_logging


def _channel_id(value: str) -> int:
    """Channel ids may be given in decimal or 0x hex."""
    return int(value, 0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cell-broadcast-filter",
        description="Classify a cell broadcast and decide whether it is displayed",
    )
    parser.add_argument("--config", help="Path to the carrier configuration file")
    parser.add_argument("--channel", required=True, type=_channel_id, help="Channel id (decimal or 0x hex)")
    parser.add_argument("--body", default="", help="Decoded message body")
    parser.add_argument("--language", default=None, help="Message language code")
    parser.add_argument("--sub-id", type=int, default=0, help="Subscription id")
    parser.add_argument(
        "--message-type",
        choices=[t.value for t in MessageType],
        default=MessageType.GSM.value,
    )
    parser.add_argument(
        "--etws-warning-type",
        choices=[t.name.lower() for t in EtwsWarningType],
        help="ETWS warning type (ETWS messages only)",
    )
    parser.add_argument(
        "--cmas-class",
        choices=[c.name.lower() for c in CmasMessageClass],
        help="CMAS message class (CMAS messages only)",
    )
    parser.add_argument(
        "--roaming",
        choices=[r.value for r in RoamingType],
        help="Voice roaming type; omit when the service state is unknown",
    )
    parser.add_argument(
        "--reg-state",
        choices=[s.value for s in RegistrationState],
        default=RegistrationState.IN_SERVICE.value,
    )
    parser.add_argument("--device-language", default=None, help="Device locale language")
    parser.add_argument("--ecbm", action="store_true", help="Device is in emergency callback mode")
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    return parser


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    return value


def run(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)

    config_manager = ConfigurationManager(args.config)
    config = config_manager.load_config()

    setup_logging(log_dir=config.log_dir, log_level=args.log_level or config.log_level)
    logger = get_logger("main")

    message_type = MessageType(args.message_type)
    message = BroadcastMessage(
        channel=args.channel,
        body=args.body,
        language_code=args.language,
        sub_id=args.sub_id,
        message_type=message_type,
        etws_warning_info=(
            EtwsWarningInfo(EtwsWarningType[args.etws_warning_type.upper()])
            if args.etws_warning_type
            else None
        ),
        cmas_message_class=(
            CmasMessageClass[args.cmas_class.upper()] if args.cmas_class else None
        ),
    )
    message.validate()

    service_state = None
    if args.roaming is not None:
        service_state = ServiceState(
            voice_reg_state=RegistrationState(args.reg_state),
            voice_roaming_type=RoamingType(args.roaming),
        )

    device = DeviceState(emergency_callback_mode=args.ecbm)
    if args.device_language is not None:
        device = DeviceState(language=args.device_language, emergency_callback_mode=args.ecbm)

    outcome = AlertService(config_manager).process_message(message, service_state, device)
    logger.debug("Outcome computed", extra={"show": outcome.show})

    print(json.dumps(_to_jsonable(asdict(outcome)), indent=2))
    return 0


def main():
    """Main application entry point."""
    try:
        sys.exit(run())
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
