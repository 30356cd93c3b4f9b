# /notegen/db/models/generation_models.py

from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from ..base_class import Base


class Generation(Base):
    """
    One successful pipeline run: the extracted source text, the AI artifact
    produced from it, and the metadata of the uploaded file.

    `owner_id` and `generation_type` are written once at creation; the only
    column ever updated afterwards is `user_given_name`.
    """
    id = Column(String, primary_key=True, index=True)
    owner_id = Column(String, ForeignKey("users.id"), index=True, nullable=False)
    original_content = Column(Text, nullable=False)
    generated_content = Column(Text, nullable=False)
    file_name = Column(String, nullable=False)
    generation_type = Column(String, index=True, nullable=False)
    user_given_name = Column(String, nullable=True)
    upload_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    original_file_url = Column(String, nullable=False)
