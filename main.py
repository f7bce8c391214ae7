"""
Multi-Wind: current wind from SMHI or YR in the terminal

Fetches the current wind for one location, prints it with the configured
display conventions and, unless --once is given, keeps refreshing on the
configured interval with bounded retries.

Settings come from .env / environment (see multi_wind.config); command-line
options override them.
"""

import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime
from typing import Optional, Tuple

from colorama import Fore, Style, init
from dotenv import load_dotenv

from multi_wind import __version__
from multi_wind.config import (
    DIRECTION_TYPES,
    DISPLAY_TYPES,
    ConfigError,
    ProviderConfig,
    WindConfig,
    load_config,
    make_provider_config,
)
from multi_wind.display import format_error, format_loading, format_wind
from multi_wind.models import WindObservation
from multi_wind.resilience import AcquisitionError, categorize_error
from multi_wind.scheduler import WindScheduler

init()

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='Multi-Wind - current wind from SMHI or YR'
    )
    parser.add_argument('--provider', choices=['smhi', 'yr'], help='Data provider')
    parser.add_argument('--lat', help='Latitude in degrees')
    parser.add_argument('--lon', help='Longitude in degrees')
    parser.add_argument('--altitude', help='Altitude in meters (YR only)')
    parser.add_argument('--display-type', choices=DISPLAY_TYPES, help='Wind speed display')
    parser.add_argument('--direction-type', choices=DIRECTION_TYPES, help='Wind direction display')
    parser.add_argument('--icon-only', action='store_true', default=None, help='Hide text labels')
    parser.add_argument('--once', action='store_true', help='Fetch once (with retries) and exit')
    parser.add_argument('--detailed-errors', action='store_true', help='Show the failure reason')
    parser.add_argument('--single-flight', action='store_true', help='Never overlap a retry with a running fetch')
    return parser.parse_args(argv)


def setup_logging():
    os.makedirs("logs", exist_ok=True)
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler("logs/multi_wind.log", mode='a', encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )


def build_config(args) -> Tuple[ProviderConfig, WindConfig]:
    """Environment settings with command-line overrides applied."""
    provider_config, wind_config = load_config()

    if any(v is not None for v in (args.provider, args.lat, args.lon, args.altitude)):
        provider_config = make_provider_config(
            provider=args.provider or provider_config.provider,
            lat=args.lat if args.lat is not None else provider_config.lat,
            lon=args.lon if args.lon is not None else provider_config.lon,
            altitude=args.altitude if args.altitude is not None else provider_config.altitude,
        )

    if args.display_type:
        wind_config.display_type = args.display_type
    if args.direction_type:
        wind_config.direction_type = args.direction_type
    if args.icon_only:
        wind_config.icon_only = True

    return provider_config, wind_config


def print_banner(provider_config: ProviderConfig):
    print(f"\n{Fore.CYAN}{'=' * 50}{Style.RESET_ALL}")
    print(f"{Fore.CYAN}   MULTI-WIND v{__version__}{Style.RESET_ALL}")
    print(f"{Fore.WHITE}   [PROVIDER] {provider_config.provider.name}"
          f"  [LOCATION] {provider_config.lat}, {provider_config.lon}{Style.RESET_ALL}")
    print(f"{Fore.CYAN}{'=' * 50}{Style.RESET_ALL}\n")


def make_printers(wind_config: WindConfig):
    """on_data / on_error callbacks that render to the terminal."""

    def on_data(observation: WindObservation):
        speed_line, direction_line = format_wind(observation, wind_config)
        stamp = datetime.now().strftime("%H:%M:%S")
        print(f"{Fore.GREEN}[{stamp}]{Style.RESET_ALL} {speed_line.text}  ({speed_line.icon})")
        print(f"           {direction_line.text}  ({direction_line.icon})")

    def on_error(error: Optional[AcquisitionError]):
        stamp = datetime.now().strftime("%H:%M:%S")
        message = format_error()
        if error is not None:
            error_type, error_msg = categorize_error(error)
            message = f"{message} ({error_type.value}: {error_msg})"
        print(f"{Fore.RED}[{stamp}] {message}{Style.RESET_ALL}")

    return on_data, on_error


def print_loading(scheduler: WindScheduler):
    """Placeholder line until the first result (data or error) arrives."""
    if not scheduler.state.loaded:
        print(f"{Fore.YELLOW}{format_loading()}{Style.RESET_ALL}")


async def main(args=None):
    """Main entry point for Multi-Wind."""
    if args is None:
        args = parse_args()

    try:
        provider_config, wind_config = build_config(args)
    except ConfigError as e:
        logger.error(f"[main] Invalid configuration: {e}")
        print(f"{Fore.RED}CONFIG ERROR: {e}{Style.RESET_ALL}")
        return 2

    print_banner(provider_config)
    on_data, on_error = make_printers(wind_config)

    scheduler = WindScheduler(
        provider_config,
        wind_config,
        on_data=on_data,
        on_error=on_error,
        detailed_errors=args.detailed_errors,
        single_flight=args.single_flight,
    )
    print_loading(scheduler)

    if args.once:
        logger.info("[main] Single fetch mode")
        scheduler.request_acquisition()
        await scheduler.drain()
        return 0 if scheduler.state.observation is not None else 1

    try:
        await scheduler.run()
    finally:
        scheduler.stop()
    return 0


if __name__ == "__main__":
    load_dotenv()
    setup_logging()
    args = parse_args()
    try:
        exit_code = asyncio.run(main(args))
    except KeyboardInterrupt:
        exit_code = 0
    sys.exit(exit_code)
