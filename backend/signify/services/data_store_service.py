"""
Data Store Service

Generic catalogue of data items shown on the data store page.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..models.db_models import DataItemDB


class DataStoreService:

    def __init__(self, db: Session):
        self.db = db

    def list_items(self) -> List[DataItemDB]:
        return self.db.query(DataItemDB).order_by(DataItemDB.id).all()

    def get_item(self, item_id: int) -> Optional[DataItemDB]:
        return self.db.query(DataItemDB).filter(DataItemDB.id == item_id).first()

    def add_item(self, data: Dict[str, Any]) -> DataItemDB:
        now = datetime.utcnow()
        item = DataItemDB(
            name=data.get("name", ""),
            category=data.get("category", ""),
            description=data.get("description", ""),
            item_metadata=dict(data.get("metadata") or {}),
            created_at=now,
            updated_at=now,
        )
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def update_item(self, item_id: int, data: Dict[str, Any]) -> Optional[DataItemDB]:
        item = self.get_item(item_id)
        if item is None:
            return None

        item.name = data.get("name", item.name)
        item.category = data.get("category", item.category)
        item.description = data.get("description", item.description)
        if "metadata" in data:
            item.item_metadata = dict(data["metadata"] or {})
        item.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_item(self, item_id: int) -> bool:
        item = self.get_item(item_id)
        if item is None:
            return False
        self.db.delete(item)
        self.db.commit()
        return True
