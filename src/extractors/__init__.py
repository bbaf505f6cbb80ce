"""
Browser history extractors.

Folder Structure:
- browser/         Browser family extractors (chromium/, firefox/, safari/)
- _shared/         Shared utilities (timestamps, sqlite_helpers, path_utils,
                   profile_locator)
- ai_patterns      AI tool URL catalog
- browser_patterns Per-OS profile roots of each browser

Submodules are imported explicitly (``from extractors.extractor_registry
import ExtractorRegistry``); core.config depends on extractors.exceptions,
so this package keeps its import side effects to the exceptions.
"""

from .exceptions import (
    ConfigurationError,
    ExtractionFailedError,
    ExtractorError,
    MissingToolError,
)

__all__ = [
    'ConfigurationError',
    'ExtractionFailedError',
    'ExtractorError',
    'MissingToolError',
]
