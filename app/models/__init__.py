"""
Database models package
"""
from app.models.chapter import ChapterDocument

__all__ = ["ChapterDocument"]
