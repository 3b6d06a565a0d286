"""
Chapter persistence service
MongoDB-backed CRUD for chapter documents plus the distinct-tags aggregation
"""
import logging
from typing import List, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from app.config import Settings
from app.models.chapter import ChapterDocument
from app.schemas.chapter import Chapter, ChapterInput

logger = logging.getLogger(__name__)


class ChapterStoreError(Exception):
    """Backend connectivity or query failure"""
    pass


class ChapterNotFoundError(ChapterStoreError):
    """Id does not resolve to a stored chapter"""
    pass


class ChapterStore:
    """
    Store for chapter documents
    
    Wraps a single collection. Every operation is one backend call;
    failures are raised as ChapterStoreError without retrying.
    """
    
    # $unwind + $addToSet yields one document holding the union of all tags
    TAGS_PIPELINE = [
        {"$unwind": {"path": "$tags"}},
        {"$group": {"_id": None, "tags": {"$addToSet": "$tags"}}},
        {"$project": {"_id": 0, "tags": 1}},
    ]
    
    def __init__(self, collection: Collection, client: Optional[MongoClient] = None):
        self.collection = collection
        self.client = client
    
    @classmethod
    def from_settings(cls, settings: Settings) -> "ChapterStore":
        """
        Build a store owning its own client
        
        timeoutMS bounds every operation issued through the client,
        server selection included.
        """
        client = MongoClient(
            settings.MONGO_URL,
            timeoutMS=settings.MONGO_TIMEOUT_MS,
        )
        collection = client[settings.MONGO_DB][settings.MONGO_COLLECTION]
        logger.info(
            f"Chapter store configured: {settings.MONGO_DB}.{settings.MONGO_COLLECTION}"
        )
        return cls(collection, client=client)
    
    def _to_document(self, chapter: ChapterInput) -> dict:
        """Stored fields for a payload, with missing tags normalized to []"""
        document = ChapterDocument.from_input(chapter)
        if document["tags"] is None:
            document["tags"] = []
        return document
    
    def create(self, chapter: ChapterInput) -> str:
        """
        Insert a new chapter
        
        Args:
            chapter: Payload; any id it carries is ignored
            
        Returns:
            Hex id generated by the backend
        """
        document = self._to_document(chapter)
        
        try:
            result = self.collection.insert_one(document)
        except PyMongoError as e:
            logger.error(f"Failed to create chapter: {str(e)}")
            raise ChapterStoreError(str(e)) from e
        
        chapter_id = str(result.inserted_id)
        logger.info(f"Chapter created: {chapter_id}")
        return chapter_id
    
    def get(self, chapter_id: str) -> Chapter:
        """
        Fetch one chapter with its subsections and findings
        
        Raises:
            ChapterNotFoundError: malformed id or no matching document
            ChapterStoreError: backend failure
        """
        object_id = ChapterDocument.parse_id(chapter_id)
        if object_id is None:
            raise ChapterNotFoundError(f"invalid chapter id: {chapter_id}")
        
        try:
            document = self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"Failed to fetch chapter {chapter_id}: {str(e)}")
            raise ChapterStoreError(str(e)) from e
        
        if document is None:
            raise ChapterNotFoundError(f"no chapter with id {chapter_id}")
        
        return ChapterDocument.to_chapter(document)
    
    def list_all(self) -> List[Chapter]:
        """All chapters in storage order"""
        try:
            documents = list(self.collection.find({}))
        except PyMongoError as e:
            logger.error(f"Failed to list chapters: {str(e)}")
            raise ChapterStoreError(str(e)) from e
        
        return [ChapterDocument.to_chapter(document) for document in documents]
    
    def update(self, chapter_id: str, chapter: ChapterInput) -> Chapter:
        """
        Replace the stored fields of a chapter
        
        An id matching nothing (malformed ids included) is not an error:
        the call succeeds with zero documents modified.
        
        Returns:
            The normalized payload, not re-read from storage
        """
        document = self._to_document(chapter)
        object_id = ChapterDocument.parse_id(chapter_id)
        
        if object_id is None:
            logger.warning(f"Update addressed malformed chapter id {chapter_id}")
        else:
            try:
                result = self.collection.update_one(
                    {"_id": object_id},
                    {"$set": document}
                )
            except PyMongoError as e:
                logger.error(f"Failed to update chapter {chapter_id}: {str(e)}")
                raise ChapterStoreError(str(e)) from e
            
            if result.matched_count == 0:
                logger.warning(f"Update matched no chapter with id {chapter_id}")
            else:
                logger.info(f"Chapter updated: {chapter_id}")
        
        return Chapter(id=chapter_id, **document)
    
    def distinct_tags(self) -> List[str]:
        """Set union of the tags of every chapter, order unspecified"""
        try:
            results = list(self.collection.aggregate(self.TAGS_PIPELINE))
        except PyMongoError as e:
            logger.error(f"Failed to aggregate tags: {str(e)}")
            raise ChapterStoreError(str(e)) from e
        
        if not results:
            return []
        return [str(tag) for tag in results[0].get("tags", [])]
    
    def ping(self) -> bool:
        """Check the backend answers"""
        try:
            self.collection.database.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"Backend ping failed: {str(e)}")
            return False
    
    def close(self) -> None:
        """Close the owned client, if any"""
        if self.client is not None:
            self.client.close()
            logger.info("Chapter store closed")
