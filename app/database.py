"""
Backend handles and request dependencies

The store and image storage are created by the application lifespan
and kept on app.state; handlers receive them through these dependencies.
"""
from fastapi import Request

from app.config import Settings
from app.services.chapter_store import ChapterStore
from app.services.image_storage import ImageStorage


def init_db(settings: Settings) -> ChapterStore:
    """Create the chapter store for the configured backend"""
    return ChapterStore.from_settings(settings)


def get_db(request: Request) -> ChapterStore:
    """Dependency returning the chapter store owned by the app"""
    return request.app.state.chapter_store


def get_image_storage(request: Request) -> ImageStorage:
    """Dependency returning the upload storage owned by the app"""
    return request.app.state.image_storage
