"""Command-line interface for world generation."""

import argparse
import logging

import structlog


def main(argv: list[str] | None = None) -> int:
    """CLI entry point: build a world and print its summary."""
    parser = argparse.ArgumentParser(
        description="Generate a parcelworld delivery town"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path or name of a world TOML config file",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed (overrides config)")
    parser.add_argument("--size", type=float, default=None, help="World side length (overrides config)")
    parser.add_argument(
        "--resolution", type=int, default=None, help="Grid nodes per side (overrides config)"
    )
    parser.add_argument(
        "--districts", type=int, default=None, help="Peripheral district count (overrides config)"
    )
    parser.add_argument(
        "--validate", action="store_true", help="Check world invariants after building"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )

    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
    logger = structlog.get_logger()

    # Import here to avoid slow startup for --help
    from .config import WorldConfig, find_config, load_config
    from .exceptions import ConfigurationError
    from .validation import validate_world
    from .world import build_world

    try:
        if args.config:
            config_path = find_config(args.config)
            config = load_config(config_path)
            logger.info("config_loaded", path=str(config_path))
        else:
            config = WorldConfig()
            logger.info("using_default_config")
    except FileNotFoundError as e:
        logger.error("config_not_found", error=str(e))
        return 1
    except ConfigurationError as e:
        logger.error("config_invalid", error=str(e))
        return 1

    overrides = {
        "seed": args.seed,
        "size": args.size,
        "resolution": args.resolution,
        "district_count": args.districts,
    }
    config = config.model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )

    try:
        world = build_world(config)
    except ConfigurationError as e:
        logger.error("config_invalid", error=str(e))
        return 1

    for key, value in world.summary().items():
        print(f"  {key}: {value}")

    if args.validate:
        result = validate_world(world)
        if not result.passed:
            return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
