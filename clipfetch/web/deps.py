"""
deps — FastAPI dependencies.
"""
from __future__ import annotations
from fastapi import Request

from ..config import Config


def get_config(request: Request) -> Config:
    """FastAPI dependency: the Config the app was created with."""
    return request.app.state.config
