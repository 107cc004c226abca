"""Infrastructure layer for namespace app.

This package contains integrations with external systems:
- MIME type detection and content-kind classification

Keep infrastructure concerns separate from business logic.
"""
