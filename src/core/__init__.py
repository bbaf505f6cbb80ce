"""Core layer: models, configuration, logging and the scan orchestrator."""

from .config import AppConfig, load_app_config  # noqa: F401
# NOTE: orchestrator not exported from package to avoid circular import
# Import directly: from core.orchestrator import ScanOrchestrator
