"""Host services handed to plugins at construction and setup time."""
import logging
from dataclasses import dataclass
from typing import List

from fastapi import APIRouter, FastAPI

from ..config import ConfigService


class LoggerFactory:
    """Creates loggers namespaced under a plugin."""

    def __init__(self, namespace: str):
        self._namespace = namespace

    def get(self, *names: str) -> logging.Logger:
        return logging.getLogger(".".join((self._namespace,) + names))


@dataclass
class PluginInitializerContext:
    """Services available when a plugin is constructed."""
    logger: LoggerFactory
    config: ConfigService


class HttpServiceSetup:
    """Gives plugins routers mounted on the application."""

    def __init__(self, app: FastAPI):
        self._app = app
        self._routers: List[APIRouter] = []

    def create_router(self) -> APIRouter:
        router = APIRouter()
        self._routers.append(router)
        return router

    def mount_routers(self) -> None:
        """Mount every router created so far. Call after routes are registered."""
        for router in self._routers:
            self._app.include_router(router)
        self._routers.clear()


@dataclass
class CoreSetup:
    http: HttpServiceSetup
