# routes.py
from fastapi import FastAPI
from controller.auth_controller import auth_router
from controller.track_controller import track_router


def register_routes(app: FastAPI) -> None:
    """Register & Access control controllers here."""
    app.include_router(auth_router)
    app.include_router(track_router)
