"""
Name: Backend ASGI Entrypoint (account_access.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers (uvicorn account_access.main:app)

Notes:
  - No configuration or IO here; keep it thin.
"""

from .api.main import app

__all__ = ["app"]
