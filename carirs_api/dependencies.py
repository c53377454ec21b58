from __future__ import annotations

from fastapi import Request

from .api_clients.base import HospitalProvider
from .cache import CacheProvider
from .config import Settings


def get_provider(request: Request) -> HospitalProvider:
    return request.app.state.provider


def get_cache(request: Request) -> CacheProvider:
    return request.app.state.cache


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
