"""CLI entry point for the forecast app."""

import argparse
import asyncio
import logging

from forecaster.aggregation.time_conversion import device_today
from forecaster.cache.codec import NotFound, deserialize
from forecaster.config.loader import get_config_value, load_config
from forecaster.config.schema import AppConfig
from forecaster.errors import FormatError
from forecaster.location.device import FixedLocator
from forecaster.models.forecast import Coordinate
from forecaster.models.result import ForecastResult
from forecaster.pipeline.forecast_pipeline import ForecastPipeline
from forecaster.reporting.formatters import format_forecast_json, format_forecast_text
from forecaster.reporting.icons import icon_url
from forecaster.storage import cache_repo

DEFAULT_CONFIG = "config/forecaster.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="forecaster",
        description="5-day weather forecast with offline fallback",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=None, help="SQLite DB path")

    sub = parser.add_subparsers(dest="command")

    # forecast
    fc_p = sub.add_parser("forecast", help="Show the 5-day forecast for a city")
    fc_p.add_argument("city", help="City key, e.g. Tokyo")
    fc_p.add_argument("--json", action="store_true", help="Output JSON")

    # here
    here_p = sub.add_parser("here", help="Forecast for the current location")
    here_p.add_argument("--lat", type=float, help="Latitude of the device")
    here_p.add_argument("--lon", type=float, help="Longitude of the device")
    here_p.add_argument("--json", action="store_true", help="Output JSON")

    # cities
    sub.add_parser("cities", help="List configured cities")

    # cache show / cache clear
    cache_p = sub.add_parser("cache", help="Cache operations")
    cache_sub = cache_p.add_subparsers(dest="cache_command")
    show_p = cache_sub.add_parser("show", help="Show the cached forecast for a city")
    show_p.add_argument("city")
    clear_p = cache_sub.add_parser("clear", help="Remove the cached forecast for a city")
    clear_p.add_argument("city")

    # config show / config get
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Get a config value")
    get_p.add_argument("key", help="Dotted key, e.g. openweather.lang")

    # icon
    icon_p = sub.add_parser("icon", help="Print the icon URL for a code")
    icon_p.add_argument("code")
    icon_p.add_argument("--small", action="store_true", help="Small icon")

    # serve
    serve_p = sub.add_parser("serve", help="Run the JSON API")
    serve_p.add_argument("--host", default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=8777)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    if args.command == "forecast":
        return _cmd_forecast(config, args)
    elif args.command == "here":
        return _cmd_here(config, args)
    elif args.command == "cities":
        return _cmd_cities(config)
    elif args.command == "cache":
        return _cmd_cache(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    elif args.command == "icon":
        return _cmd_icon(args)
    elif args.command == "serve":
        return _cmd_serve(config, args)
    else:
        parser.print_help()
        return 1


def _print_result(config: AppConfig, result: ForecastResult, as_json: bool) -> int:
    if as_json:
        print(format_forecast_json(result))
    else:
        print(format_forecast_text(
            result,
            style=config.display.weekday_style,
            today=device_today(config.display.timezone),
        ))
    return 0 if result.is_available else 1


def _cmd_forecast(config: AppConfig, args) -> int:
    pipeline = ForecastPipeline(config, args.db)
    try:
        result = asyncio.run(pipeline.refresh(args.city))
    finally:
        pipeline.close()
    return _print_result(config, result, args.json)


def _cmd_here(config: AppConfig, args) -> int:
    if (args.lat is None) != (args.lon is None):
        print("Error: pass both --lat and --lon, or neither")
        return 1
    if args.lat is None:
        home = config.location.home
        coordinate = Coordinate(home.latitude, home.longitude)
    else:
        coordinate = Coordinate(args.lat, args.lon)

    pipeline = ForecastPipeline(config, args.db)
    try:
        result = asyncio.run(pipeline.refresh_current(FixedLocator(coordinate)))
    finally:
        pipeline.close()
    return _print_result(config, result, args.json)


def _cmd_cities(config: AppConfig) -> int:
    for c in config.cities:
        state = "" if c.enabled else " (disabled)"
        print(f"{c.key:<12} {c.name} ({c.latitude:.4f}, {c.longitude:.4f}){state}")
    return 0


def _cmd_cache(config: AppConfig, args) -> int:
    if args.cache_command not in ("show", "clear"):
        print("Use: cache show CITY | cache clear CITY")
        return 1

    pipeline = ForecastPipeline(config, args.db)
    try:
        if args.cache_command == "clear":
            removed = cache_repo.delete_record(pipeline.conn, args.city)
            print(f"Cleared {args.city}" if removed else f"No cache for {args.city}")
            return 0

        try:
            cached = deserialize(cache_repo.get_record(pipeline.conn, args.city))
        except FormatError as e:
            print(f"Error: cache for {args.city} is unreadable: {e}")
            return 1
        if isinstance(cached, NotFound):
            print(f"No cache for {args.city}")
            return 1
        print(format_forecast_text(
            ForecastResult.fallback(cached),
            style=config.display.weekday_style,
            today=device_today(config.display.timezone),
        ))
        return 0
    finally:
        pipeline.close()


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "get":
        try:
            print(get_config_value(config, args.key))
            return 0
        except (KeyError, IndexError, ValueError) as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config get KEY")
        return 1


def _cmd_icon(args) -> int:
    try:
        print(icon_url(args.code, primary=not args.small))
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    return 0


def _cmd_serve(config: AppConfig, args) -> int:
    import uvicorn

    from forecaster.api import create_app

    uvicorn.run(create_app(config, args.db), host=args.host, port=args.port)
    return 0
