"""
FileChat - Dependency Injection.

FastAPI dependencies for feature flags and the process-wide collaborators
(database, blob storage, text generator, metrics). The collaborators are
built once in the application lifespan and live on ``app.state``.
"""

from typing import Annotated

from fastapi import Depends, Request

from filechat.config import FeatureFlags, Settings
from filechat.core.database import Database
from filechat.core.file_storage import FileStorage
from filechat.core.gemini import TextGenerator
from filechat.exceptions import FeatureDisabledException
from filechat.observability.metrics import MetricsStore


# =============================================================================
# Settings Dependencies
# =============================================================================


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


def get_features(settings: Annotated[Settings, Depends(get_app_settings)]) -> FeatureFlags:
    """Get feature flags from settings."""
    return settings.features


# =============================================================================
# Collaborators
# =============================================================================


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_file_storage(request: Request) -> FileStorage:
    return request.app.state.file_storage


def get_generator(request: Request) -> TextGenerator:
    return request.app.state.generator


def get_metrics(request: Request) -> MetricsStore:
    return request.app.state.metrics


# =============================================================================
# Feature Flag Guards
# =============================================================================


def require_feature(feature_name: str):
    """Create a dependency that requires a specific feature to be enabled."""

    def check_feature(features: Annotated[FeatureFlags, Depends(get_features)]) -> bool:
        if not getattr(features, feature_name, False):
            raise FeatureDisabledException(feature_name)
        return True

    return check_feature


# Specific feature guards
require_upload = Depends(require_feature("upload"))
require_chat = Depends(require_feature("chat"))
require_conversations = Depends(require_feature("conversations"))
require_files = Depends(require_feature("files"))
require_voice = Depends(require_feature("voice"))
