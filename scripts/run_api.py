#!/usr/bin/env python3
"""Script to run the sync API under uvicorn.

Loads configuration, reflects the sync tables from the configured database
and serves every table with an ``updated_at`` column as a listable resource.

Usage:
    python scripts/run_api.py [--config CONFIG_PATH]
"""

import argparse
import sys

import structlog
import uvicorn

from walletsync.api import create_app, reflect_sync_tables, sql_collection_factories
from walletsync.providers import get_engine, get_session_factory
from walletsync.utils.config_loader import ConfigLoader, ConfigurationError
from walletsync.utils.logging_config import configure_logging_from_config

log = structlog.stdlib.get_logger()


def main() -> int:
    """Main entry point.

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(description="Run the walletsync API")
    parser.add_argument("--config", help="Path to configuration YAML file")
    args = parser.parse_args()

    loader = ConfigLoader()
    try:
        config = loader.load_config(args.config)
    except ConfigurationError as e:
        log.error("configuration_failed", error=str(e))
        print(f"❌ Configuration error: {e}")
        return 1

    configure_logging_from_config(config.logging)
    loader.validate_config(config)

    try:
        engine = get_engine(config.database.url, echo=config.database.echo)
    except (ValueError, RuntimeError) as e:
        print(f"❌ Database error: {e}")
        return 1

    tables = reflect_sync_tables(engine, config.sync.watermark_field)
    if not tables:
        log.warning("no_sync_tables_found", database=config.database.url)
        print("⚠️  Warning: no tables with a watermark column were found")

    app = create_app(
        config,
        collections=sql_collection_factories(get_session_factory(engine), tables),
    )

    log.info("starting_api_server", host=config.api.host, port=config.api.port)
    print(f"🚀 Serving http://{config.api.host}:{config.api.port}{config.api.prefix}")
    print("\nPress Ctrl+C to stop the server\n")

    uvicorn.run(app, host=config.api.host, port=config.api.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
