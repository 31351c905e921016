"""Presenters for CLI output formatting."""

from .summary import ImportSummaryPresenter, ImportSummaryRequest

__all__ = ["ImportSummaryPresenter", "ImportSummaryRequest"]
