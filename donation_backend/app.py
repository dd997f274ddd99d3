from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from donation_backend.config import Settings, get_settings
from donation_backend.files import PhotoStore
from donation_backend.logging_setup import configure_logging
from donation_backend.middleware import RequestLoggingMiddleware
from donation_backend.routes import router
from donation_backend.service import RecipientService
from donation_backend.store import RecipientStore


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    store = RecipientStore(settings.DATABASE_URL, echo=settings.DB_ECHO)
    photos = PhotoStore(settings.UPLOAD_DIR)
    # StaticFiles refuses a missing directory
    photos.ensure_directory()

    app = FastAPI(title="Donation Backend", version="1.0.0")
    app.state.recipient_service = RecipientService(store, photos)

    app.add_middleware(RequestLoggingMiddleware)
    # CORS config
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

    # Connect to the store on startup; failures are logged and the server keeps running
    @app.on_event("startup")
    def on_startup():
        store.connect()

    @app.on_event("shutdown")
    def on_shutdown():
        store.dispose()

    return app

