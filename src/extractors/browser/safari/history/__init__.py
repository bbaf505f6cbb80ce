from .extractor import SafariHistoryExtractor

__all__ = ["SafariHistoryExtractor"]
