# /notegen/models/generation_model.py

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GenerationType(str, Enum):
    SUMMARY = "summary"
    FLASHCARDS = "flashcards"
    KEY_POINTS = "key_points"


class GenerationRecord(BaseModel):
    """
    The data contract for a single generation record as it is read back from
    the database. Serialized with camelCase aliases for API clients.
    """
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    owner_id: str = Field(serialization_alias="ownerId")
    original_content: str = Field(serialization_alias="originalContent")
    generated_content: str = Field(serialization_alias="generatedContent")
    file_name: str = Field(serialization_alias="fileName")
    generation_type: GenerationType = Field(serialization_alias="generationType")
    user_given_name: Optional[str] = Field(default=None, serialization_alias="userGivenName")
    upload_date: datetime = Field(serialization_alias="uploadDate")
    original_file_url: str = Field(serialization_alias="originalFileUrl")


class GenerationListResponse(BaseModel):
    generations: List[GenerationRecord]
    total: int


class GenerationRename(BaseModel):
    """Payload for PUT /api/generations/{id}. Only the label can change."""
    model_config = ConfigDict(populate_by_name=True)

    user_given_name: str = Field(validation_alias="userGivenName")


class UploadResponse(BaseModel):
    id: str
    generated_content: str = Field(serialization_alias="generatedContent")
    generation_type: GenerationType = Field(serialization_alias="generationType")
    message: str = "Content generated and saved successfully!"


class ErrorResponse(BaseModel):
    kind: str
    detail: str
