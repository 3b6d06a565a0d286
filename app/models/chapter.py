"""
Chapter document model - mapping between API schemas and MongoDB documents
"""
from bson import ObjectId
from bson.errors import InvalidId
from typing import Any, Dict, Optional

from app.schemas.chapter import Chapter, ChapterInput


class ChapterDocument:
    """
    Chapters collection - one document per chapter, subsections and
    findings embedded in it
    """
    
    # Fields written by create and replaced by update
    FIELDS = ("chapterTitle", "subsections", "tags", "imageURL")
    
    @staticmethod
    def parse_id(chapter_id: str) -> Optional[ObjectId]:
        """Return the ObjectId for a hex id, or None when it is malformed"""
        try:
            return ObjectId(chapter_id)
        except (InvalidId, TypeError):
            return None
    
    @classmethod
    def from_input(cls, chapter: ChapterInput) -> Dict[str, Any]:
        """Build the stored fields from a payload, without any _id"""
        data = chapter.model_dump(include=set(cls.FIELDS))
        return {field: data.get(field) for field in cls.FIELDS}
    
    @staticmethod
    def to_chapter(document: Dict[str, Any]) -> Chapter:
        """Convert a stored document into the API representation"""
        data = {key: value for key, value in document.items() if key != "_id"}
        return Chapter(id=str(document["_id"]), **data)
