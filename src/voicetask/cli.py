import argparse
import asyncio
import json
import logging
import sys

from voicetask.config import settings
from voicetask.errors import InvalidInputError
from voicetask.models import Coordinates
from voicetask.sentry import flush as sentry_flush
from voicetask.sentry import init_sentry


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def parse(args: argparse.Namespace) -> None:
    from voicetask.services.pipeline import parse_text

    user_location = None
    if args.lat is not None and args.lng is not None:
        user_location = Coordinates(args.lat, args.lng)

    try:
        result = await parse_text(
            args.text,
            user_timezone=args.timezone,
            user_location=user_location,
        )
    except InvalidInputError as e:
        print(f"Error: {e.message}")
        sys.exit(2)

    print(json.dumps(result.to_dict(), indent=2))


def serve(args: argparse.Namespace) -> None:
    import uvicorn

    uvicorn.run(
        "voicetask.api:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        log_level=settings.log_level.lower(),
    )


def check_config() -> None:
    print("voicetask Configuration Check\n")

    checks = [
        ("Google Maps API Key", settings.has_google_maps),
        ("Sentry DSN", settings.has_sentry),
    ]

    for name, configured in checks:
        status = "OK" if configured else "MISSING"
        symbol = "+" if configured else "-"
        print(f"  [{symbol}] {name}: {status}")

    print(f"\n  Default timezone: {settings.user_timezone}")
    print(f"  Default radius: {settings.default_radius_m} m")
    print()
    if settings.has_google_maps:
        print("Place lookup and travel time enabled.")
    else:
        print("Place lookup and travel time disabled. Saved locations still work.")


def main() -> None:
    parser = argparse.ArgumentParser(description="Parse spoken tasks and events")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    parse_parser = subparsers.add_parser("parse", help="Parse one utterance and print JSON")
    parse_parser.add_argument("text", help="Utterance to parse")
    parse_parser.add_argument("--timezone", help="IANA timezone, e.g. America/New_York")
    parse_parser.add_argument("--lat", type=float, help="Your current latitude")
    parse_parser.add_argument("--lng", type=float, help="Your current longitude")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host")
    serve_parser.add_argument("--port", type=int)

    subparsers.add_parser("check", help="Check configuration")

    args = parser.parse_args()

    setup_logging()

    # No-op without SENTRY_DSN
    init_sentry()

    try:
        if args.command == "parse":
            asyncio.run(parse(args))
        elif args.command == "serve":
            serve(args)
        elif args.command == "check":
            check_config()
        else:
            parser.print_help()
    finally:
        sentry_flush(timeout=2.0)


if __name__ == "__main__":
    main()
