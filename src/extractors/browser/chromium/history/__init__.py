from .extractor import ChromiumHistoryExtractor

__all__ = ["ChromiumHistoryExtractor"]
