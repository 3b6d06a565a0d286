"""
Pydantic schemas for chapter-related requests and responses
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional


class Finding(BaseModel):
    """Leaf content item with its supporting authors"""
    findingDescription: str = ""
    supportingAuthors: Optional[List[str]] = Field(default_factory=list)

    @field_validator("supportingAuthors", mode="before")
    @classmethod
    def null_list_to_empty(cls, value):
        return [] if value is None else value


class Subsection(BaseModel):
    """Ordered grouping of findings inside a chapter"""
    subsectionTitle: str = ""
    findings: Optional[List[Finding]] = Field(default_factory=list)

    @field_validator("findings", mode="before")
    @classmethod
    def null_list_to_empty(cls, value):
        return [] if value is None else value


class ChapterInput(BaseModel):
    """
    Chapter payload accepted by create and update

    Any client supplied id is accepted but ignored; tags may be
    omitted or null and are normalized by the store.
    """
    id: Optional[str] = None
    chapterTitle: str = ""
    subsections: Optional[List[Subsection]] = Field(default_factory=list)
    tags: Optional[List[str]] = None
    imageURL: str = ""

    @field_validator("subsections", mode="before")
    @classmethod
    def null_list_to_empty(cls, value):
        return [] if value is None else value

    @field_validator("imageURL", mode="before")
    @classmethod
    def null_url_to_empty(cls, value):
        return "" if value is None else value


class Chapter(BaseModel):
    """Stored chapter document"""
    id: Optional[str] = None
    chapterTitle: str = ""
    subsections: Optional[List[Subsection]] = Field(default_factory=list)
    tags: Optional[List[str]] = Field(default_factory=list)
    imageURL: str = ""

    @field_validator("subsections", "tags", mode="before")
    @classmethod
    def null_list_to_empty(cls, value):
        return [] if value is None else value

    @field_validator("imageURL", mode="before")
    @classmethod
    def null_url_to_empty(cls, value):
        return "" if value is None else value


class InsertAck(BaseModel):
    """Raw insertion acknowledgment returned by create"""
    InsertedID: str


class UploadResponse(BaseModel):
    """Response after an image upload"""
    imageURL: str
