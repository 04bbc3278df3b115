"""
Storage abstractions.

Integration Points:
- TranslationStorage → PostgreSQL (views, RPC functions, fan-out triggers)
- InMemoryTranslationStorage → development and tests
"""

from i18nmate.storage.base import TranslationStorage
from i18nmate.storage.local import InMemoryTranslationStorage, create_local_storage

__all__ = [
    "TranslationStorage",
    "InMemoryTranslationStorage",
    "create_local_storage",
]
