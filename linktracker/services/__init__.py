"""Business logic services."""

from linktracker.services import click_storage as click_service
from linktracker.services import link as link_service
from linktracker.services.assets import StaticAssetServer
from linktracker.services.click_storage import ClickRecorder

__all__ = [
    "ClickRecorder",
    "StaticAssetServer",
    "click_service",
    "link_service",
]
