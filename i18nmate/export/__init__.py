"""
Translation export: per-locale JSON files in a ZIP archive.
"""

from i18nmate.export.pipeline import (
    ExportResult,
    TranslationExporter,
    build_archive,
    build_export_filename,
    render_locale_file,
    sanitize_filename,
)

__all__ = [
    "ExportResult",
    "TranslationExporter",
    "build_archive",
    "build_export_filename",
    "render_locale_file",
    "sanitize_filename",
]
