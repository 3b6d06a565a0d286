"""
Chapter management API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import List
import logging

from app.database import get_db
from app.schemas.chapter import Chapter, ChapterInput, InsertAck
from app.services.chapter_store import ChapterStore, ChapterStoreError

router = APIRouter(tags=["chapters"])
logger = logging.getLogger(__name__)


# Handlers are sync so the blocking driver calls run in the threadpool
@router.post("/chapter", response_model=InsertAck)
def create_chapter(
    chapter: ChapterInput,
    store: ChapterStore = Depends(get_db)
):
    """
    Create a chapter
    
    - Ignores any client supplied id
    - Defaults missing tags to []
    - Returns the insertion acknowledgment holding the new id
    """
    
    try:
        chapter_id = store.create(chapter)
    except ChapterStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))
    
    return InsertAck(InsertedID=chapter_id)


@router.get("/chapter/{chapter_id}", response_model=Chapter)
def get_chapter(
    chapter_id: str,
    store: ChapterStore = Depends(get_db)
):
    """
    Get a chapter with its subsections and findings
    
    Unknown and malformed ids are reported as 500, like any
    other lookup failure.
    """
    
    try:
        return store.get(chapter_id)
    except ChapterStoreError as e:
        logger.error(f"Failed to fetch chapter {chapter_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/chapters", response_model=List[Chapter])
def list_chapters(store: ChapterStore = Depends(get_db)):
    """List every chapter, [] when there are none"""
    
    try:
        return store.list_all()
    except ChapterStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/chapter/{chapter_id}", response_model=Chapter)
def update_chapter(
    chapter_id: str,
    chapter: ChapterInput,
    store: ChapterStore = Depends(get_db)
):
    """
    Replace a chapter's title, subsections, tags and image URL
    
    An id matching no chapter still succeeds; the normalized
    payload is echoed back either way.
    """
    
    try:
        return store.update(chapter_id, chapter)
    except ChapterStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/tags", response_model=List[str])
def list_tags(store: ChapterStore = Depends(get_db)):
    """Distinct tags across all chapters"""
    
    try:
        return store.distinct_tags()
    except ChapterStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))
