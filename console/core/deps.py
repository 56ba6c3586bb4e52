"""
FastAPI dependencies.

The registry, the API client and the form/screen arenas are built once in
the app lifespan and hung on `app.state`; routes receive them through
these functions so tests can override any of them.
"""
from fastapi import Depends, Request

from console.services.api_client import BencherApiClient
from console.services.forms import FormStore
from console.services.resources import ResourceRegistry
from console.services.screens import ScreenController, ScreenStore


def get_registry(request: Request) -> ResourceRegistry:
    return request.app.state.registry


def get_api_client(request: Request) -> BencherApiClient:
    return request.app.state.api_client


def get_form_store(request: Request) -> FormStore:
    return request.app.state.forms


def get_screen_store(request: Request) -> ScreenStore:
    return request.app.state.screens


def get_screen_controller(
    registry: ResourceRegistry = Depends(get_registry),
    api: BencherApiClient = Depends(get_api_client),
    store: ScreenStore = Depends(get_screen_store),
) -> ScreenController:
    return ScreenController(registry=registry, api=api, store=store)
