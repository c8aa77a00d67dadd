"""
Signify - SQLAlchemy ORM Models

Only raw state is stored. A person's risk category and each event's
cumulative impact / resulting category are derived on read.
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Date, Text, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from ..database import Base


class PersonDB(Base):
    """Tracked individual."""
    __tablename__ = "people"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, default="")
    department = Column(String(100), nullable=False, default="")
    role = Column(String(100), nullable=False, default="")

    # Demographics
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(50), nullable=True)
    postcode = Column(String(10), nullable=True)

    # Signal name -> bool, all seven keys always present once written
    signals = Column(JSON, nullable=False, default=dict)

    # Adjacency list of other person ids
    connection_ids = Column(JSON, nullable=False, default=list)

    # Bumped on every signal-log write; used for optimistic concurrency
    signal_log_version = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    events = relationship(
        "SignalLogEventDB",
        back_populates="person",
        cascade="all, delete-orphan",
        order_by="SignalLogEventDB.position",
    )


class ConnectionDB(Base):
    """Typed relationship between two people."""
    __tablename__ = "connections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    source_person_id = Column(Integer, ForeignKey("people.id", ondelete="CASCADE"), nullable=False, index=True)
    target_person_id = Column(Integer, ForeignKey("people.id", ondelete="CASCADE"), nullable=False, index=True)
    relation_type = Column(String(100), nullable=False, default="")
    description = Column(Text, nullable=False, default="")


class SignalLogEventDB(Base):
    """Raw signal log entry. No derived columns."""
    __tablename__ = "signal_log_events"
    __table_args__ = (
        UniqueConstraint("person_id", "event_id", name="uq_signal_log_person_event"),
    )

    pk = Column(Integer, primary_key=True, autoincrement=True)
    person_id = Column(Integer, ForeignKey("people.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(Integer, nullable=False)  # Unique within the person's log

    # Insertion order; date ties fold in this order
    position = Column(Integer, nullable=False, default=0)

    event_date = Column(Date, nullable=False)
    event_type = Column(String(50), nullable=False)
    description = Column(Text, nullable=False, default="")
    # Signed and unbounded, stored as decimal text
    risk_score_impact = Column(Text, nullable=False, default="0")

    # {"action_id": ..., "date_taken": "YYYY-MM-DD", "notes": ...} or NULL
    action_taken = Column(JSON, nullable=True)

    person = relationship("PersonDB", back_populates="events")


class DataItemDB(Base):
    """Generic catalogued data item."""
    __tablename__ = "data_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    # "metadata" is reserved on declarative classes
    item_metadata = Column("metadata", JSON, nullable=False, default=dict)
