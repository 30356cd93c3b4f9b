# /notegen/services/database_helpers/generation_repository_sql.py

from typing import List, Dict, Optional
from sqlalchemy.orm import Session
from notegen.db.models.generation_models import Generation


class GenerationRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def add_generation_record(self, record: Dict) -> Generation:
        """Creates a new Generation record in the database from a dictionary."""
        new_generation = Generation(**record)
        self.db.add(new_generation)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(new_generation)
        return new_generation

    def get_generation_by_id(self, generation_id: str) -> Optional[Generation]:
        return self.db.query(Generation).filter(Generation.id == generation_id).first()

    def get_generations_by_owner(self, owner_id: str, generation_type: Optional[str] = None) -> List[Generation]:
        """Retrieves one owner's records, most recent first."""
        query = self.db.query(Generation).filter(Generation.owner_id == owner_id)
        if generation_type:
            query = query.filter(Generation.generation_type == generation_type)
        return query.order_by(Generation.upload_date.desc()).all()

    def update_user_given_name(self, generation_id: str, user_given_name: str) -> Optional[Generation]:
        # The label is the only mutable column.
        record = self.get_generation_by_id(generation_id)
        if not record:
            return None
        record.user_given_name = user_given_name
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(record)
        return record

    def delete_generation_record(self, generation_id: str) -> bool:
        """Deletes a single generation record by its ID."""
        record = self.get_generation_by_id(generation_id)
        if record:
            self.db.delete(record)
            try:
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
            return True
        return False
