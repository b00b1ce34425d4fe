"""Main entry point for the valuation HTTP service."""

import logging
import sys

import uvicorn
from dotenv import load_dotenv

from .config import Config
from .providers.base import DataSourceAdapter
from .providers.chain import DataSourceChain
from .providers.finmind import FinMindProvider
from .providers.mock import MockSeriesGenerator
from .providers.yahoo import YahooFinanceProvider
from .services.snapshot_service import SnapshotService

logger = logging.getLogger(__name__)


def build_source(config: Config) -> DataSourceAdapter:
    """Live sources in priority order: FinMind, then Yahoo Finance if enabled."""
    sources = [FinMindProvider(config)]
    if config.enable_yfinance:
        sources.append(YahooFinanceProvider(config))
    logger.info("Live data sources: %s", ", ".join(source.name for source in sources))
    return DataSourceChain(sources)


def build_service(config: Config) -> SnapshotService:
    return SnapshotService(config, build_source(config), MockSeriesGenerator())


def main() -> None:
    """Configure logging, wire the service and start the HTTP server."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    load_dotenv()

    config = Config.from_env()

    from .web_api import configure_api, web_api

    configure_api(build_service(config))
    logger.info("Starting valuation API on %s:%d", config.host, config.port)
    uvicorn.run(web_api, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
