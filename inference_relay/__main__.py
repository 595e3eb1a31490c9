import argparse
import sys

from .config import load_config
from .errors import ConfigError
from .log import resolve_log_level, setup_logging

DEFAULT_PORT = 8080


def main(argv=None):
    parser = argparse.ArgumentParser(prog="inference-relay", add_help=True)
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", default=DEFAULT_PORT, type=int)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the TOML config file (overrides RELAY_CONFIG, default config.toml).",
    )
    parser.add_argument("--log-level", default=None, help="Overrides RELAY_LOG_LEVEL.")
    args = parser.parse_args(argv)

    log_level = resolve_log_level(args.log_level)
    logger = setup_logging(log_level)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        logger.error("Error reading config file: %s", exc)
        sys.exit(1)

    import uvicorn

    from .api import create_app

    app = create_app(config)
    logger.info("Server is running on port %s", args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_level=log_level.lower())


if __name__ == "__main__":
    main()
