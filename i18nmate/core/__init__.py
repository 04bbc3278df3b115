"""
Core module - fundamental data models and infrastructure.

This module contains:
- models: Core data models (Project, Key, Translation, TranslationJob)
- errors: API error envelope and user-facing messages
- validation: Key, locale and translation value rules
- debounce: Debounced callbacks for autosave
- app_config: Fail-closed feature gates
- utils: Shared utility functions
"""

from i18nmate.core.models import (
    Project,
    ProjectLocale,
    Key,
    Translation,
    UpdateTranslationRequest,
    UpdateSource,
    KeyDefaultViewItem,
    KeyPerLanguageViewItem,
    Page,
    PaginationMetadata,
    PaginationParams,
    TranslationJob,
    JobMode,
    JobStatus,
)

from i18nmate.core.errors import (
    ApiError,
    create_api_error,
)

from i18nmate.core.debounce import Debouncer

from i18nmate.core.app_config import (
    AppConfig,
    load_app_config,
)

from i18nmate.core.utils import (
    generate_id,
    is_uuid,
    utc_now,
)

__all__ = [
    # Models
    "Project",
    "ProjectLocale",
    "Key",
    "Translation",
    "UpdateTranslationRequest",
    "UpdateSource",
    "KeyDefaultViewItem",
    "KeyPerLanguageViewItem",
    "Page",
    "PaginationMetadata",
    "PaginationParams",
    "TranslationJob",
    "JobMode",
    "JobStatus",
    # Errors
    "ApiError",
    "create_api_error",
    # Debounce
    "Debouncer",
    # App config
    "AppConfig",
    "load_app_config",
    # Utils
    "generate_id",
    "is_uuid",
    "utc_now",
]
