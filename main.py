"""Service Entry Point - Root Module.

This is the root-level entry point for running the service with
`uvicorn main:app`. It imports from the src package.
"""

from src.main import create_app

app = create_app()

__all__ = [
    "app",
]
