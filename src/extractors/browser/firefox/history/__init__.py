from .extractor import FirefoxHistoryExtractor

__all__ = ["FirefoxHistoryExtractor"]
