# routes.py
from fastapi import FastAPI
from controller.access_token_controller import access_token_router
from controller.blob_controller import blob_router
from controller.complaint_controller import complaint_router
from controller.file_controller import file_router
from controller.reply_controller import reply_router


def register_routes(app: FastAPI) -> None:
    """Register & Access control controllers here."""
    app.include_router(blob_router)
    app.include_router(access_token_router)
    app.include_router(complaint_router)
    app.include_router(reply_router)
    app.include_router(file_router)
