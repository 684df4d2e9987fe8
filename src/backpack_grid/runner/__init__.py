"""Batch organize experiments."""
