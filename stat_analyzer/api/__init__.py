"""FastAPI backend for StatAnalyzer.

This module contains:
- File upload and background analysis
- Analysis status and listing endpoints
- Report download and chart endpoints
"""

from stat_analyzer.api.app import app, create_app, get_repository

__all__ = [
    "app",
    "create_app",
    "get_repository",
]
