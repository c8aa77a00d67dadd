"""
People Service

Person records, typed connections between people, and the node/link
projection used by the relationship graph.

Connections are kept twice: as typed ConnectionDB rows and as each person's
`connection_ids` adjacency list. add_connection and delete_person keep the
two in step.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..models.db_models import ConnectionDB, PersonDB
from ..models.risk import SignalSet

logger = logging.getLogger(__name__)

PERSON_FIELDS = ("name", "email", "department", "role", "date_of_birth", "gender", "postcode")


class PeopleService:
    """CRUD over people and their connections."""

    def __init__(self, db: Session):
        self.db = db

    # =========================================================================
    # PEOPLE
    # =========================================================================

    def list_people(self) -> List[PersonDB]:
        return self.db.query(PersonDB).order_by(PersonDB.id).all()

    def get_person(self, person_id: int) -> Optional[PersonDB]:
        return self.db.query(PersonDB).filter(PersonDB.id == person_id).first()

    def add_person(self, data: Dict[str, Any]) -> PersonDB:
        person = PersonDB(
            **{k: data.get(k) for k in PERSON_FIELDS if data.get(k) is not None},
            signals=SignalSet.from_mapping(data.get("signals")).to_dict(),
            connection_ids=self._existing_ids(data.get("connection_ids") or []),
            signal_log_version=0,
        )
        self.db.add(person)
        self.db.commit()
        self.db.refresh(person)
        logger.info("Added person %s (%s)", person.id, person.name)
        return person

    def update_person(self, person_id: int, data: Dict[str, Any]) -> Optional[PersonDB]:
        """
        Replace a person's editable fields.

        Signals are not touched here; they change only through the risk engine.
        """
        person = self.get_person(person_id)
        if person is None:
            return None

        for key in PERSON_FIELDS:
            if key in data:
                setattr(person, key, data[key])
        if "connection_ids" in data:
            person.connection_ids = self._existing_ids(
                [i for i in data["connection_ids"] or [] if i != person_id]
            )
        person.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(person)
        return person

    def delete_person(self, person_id: int) -> bool:
        person = self.get_person(person_id)
        if person is None:
            return False

        self.db.query(ConnectionDB).filter(
            (ConnectionDB.source_person_id == person_id)
            | (ConnectionDB.target_person_id == person_id)
        ).delete(synchronize_session=False)

        for other in self.list_people():
            if other.id != person_id and person_id in (other.connection_ids or []):
                other.connection_ids = [i for i in other.connection_ids if i != person_id]

        # Signal log rows go with the person (delete-orphan cascade)
        self.db.delete(person)
        self.db.commit()
        logger.info("Deleted person %s", person_id)
        return True

    # =========================================================================
    # CONNECTIONS
    # =========================================================================

    def list_connections(self) -> List[ConnectionDB]:
        return self.db.query(ConnectionDB).order_by(ConnectionDB.id).all()

    def add_connection(
        self,
        source_person_id: int,
        target_person_id: int,
        relation_type: str = "",
        description: str = "",
    ) -> Optional[ConnectionDB]:
        """Link two people. None if either end does not exist."""
        source = self.get_person(source_person_id)
        target = self.get_person(target_person_id)
        if source is None or target is None:
            return None

        connection = ConnectionDB(
            source_person_id=source_person_id,
            target_person_id=target_person_id,
            relation_type=relation_type,
            description=description,
        )
        self.db.add(connection)

        if target_person_id not in (source.connection_ids or []):
            source.connection_ids = list(source.connection_ids or []) + [target_person_id]
        if source_person_id not in (target.connection_ids or []):
            target.connection_ids = list(target.connection_ids or []) + [source_person_id]

        self.db.commit()
        self.db.refresh(connection)
        logger.info(
            "Connected person %s -> %s (%s)",
            source_person_id, target_person_id, relation_type or "unspecified",
        )
        return connection

    def get_network_data(self) -> Dict[str, List[Dict[str, Any]]]:
        """Nodes grouped by department, links labelled by relation type."""
        nodes = [
            {"id": p.id, "label": p.name, "group": p.department}
            for p in self.list_people()
        ]
        links = [
            {"source": c.source_person_id, "target": c.target_person_id, "label": c.relation_type}
            for c in self.list_connections()
        ]
        return {"nodes": nodes, "links": links}

    def _existing_ids(self, ids: List[int]) -> List[int]:
        """Deduplicate and drop ids with no matching person."""
        if not ids:
            return []
        known = {
            row.id for row in self.db.query(PersonDB.id).filter(PersonDB.id.in_(ids)).all()
        }
        result = []
        for person_id in ids:
            if person_id in known and person_id not in result:
                result.append(person_id)
        return result
