"""
Translation jobs: status polling.
"""

from i18nmate.jobs.polling import JobPoller

__all__ = ["JobPoller"]
