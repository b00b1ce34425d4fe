"""Data providers package."""

from .base import DataSourceAdapter, DataSourceError
from .chain import DataSourceChain
from .finmind import FinMindProvider
from .mock import MockSeriesGenerator
from .yahoo import YahooFinanceProvider

__all__ = [
    "DataSourceAdapter",
    "DataSourceChain",
    "DataSourceError",
    "FinMindProvider",
    "MockSeriesGenerator",
    "YahooFinanceProvider",
]
