"""Dependency injection utilities for FastAPI routes.

Everything here is read from ``app.state``, which ``create_app`` fills in
once at startup.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from linktracker.core.config import Settings
from linktracker.core.database import get_async_session
from linktracker.core.redis import LinkCache
from linktracker.services.assets import StaticAssetServer
from linktracker.services.click_storage import ClickRecorder


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_click_recorder(request: Request) -> ClickRecorder:
    return request.app.state.click_recorder


def get_link_cache(request: Request) -> LinkCache:
    return request.app.state.link_cache


def get_asset_server(request: Request) -> StaticAssetServer:
    return request.app.state.asset_server


# Type aliases for dependency injection
SessionDep = Annotated[AsyncSession, Depends(get_async_session)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
ClickRecorderDep = Annotated[ClickRecorder, Depends(get_click_recorder)]
LinkCacheDep = Annotated[LinkCache, Depends(get_link_cache)]
AssetServerDep = Annotated[StaticAssetServer, Depends(get_asset_server)]
