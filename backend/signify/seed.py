"""
Signify - Demo Seed Data

Loads a small demo caseload into an empty database. Seed records are plain
tuples copied into fresh rows on each call; nothing here is shared mutable
state.

Usage:
    python -m signify.seed
"""
import logging
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from .models.db_models import ConnectionDB, DataItemDB, PersonDB, SignalLogEventDB
from .models.risk import SignalSet

logger = logging.getLogger(__name__)


# (name, email, department, role, date_of_birth, gender, postcode, active signals)
DEMO_PEOPLE = (
    ("Jordan Hayes", "jordan.hayes@example.org", "North Ward", "Young Person",
     date(2007, 3, 14), "Male", "N17 6QA",
     ("previous_homelessness", "temporary_accommodation", "education_status")),
    ("Aisha Rahman", "aisha.rahman@example.org", "North Ward", "Young Person",
     date(2008, 9, 2), "Female", "N15 4RX",
     ("care_status",)),
    ("Callum Price", "callum.price@example.org", "East Ward", "Young Person",
     date(2006, 11, 21), "Male", "E9 5LN",
     ("parental_substance_abuse", "parental_crimes", "youth_justice", "education_status")),
    ("Megan Doyle", "megan.doyle@example.org", "East Ward", "Young Person",
     date(2009, 1, 30), "Female", "E5 8BB",
     ()),
    ("Priya Shah", "priya.shah@council.example.org", "Housing", "Housing Officer",
     None, "Female", None, ()),
    ("Marcus Bell", "marcus.bell@council.example.org", "Youth Services", "Youth Worker",
     None, "Male", None, ()),
)

# (source index, target index, relation type, description) - indexes into DEMO_PEOPLE
DEMO_CONNECTIONS = (
    (0, 4, "Caseworker", "Housing officer for temporary accommodation case"),
    (0, 5, "Caseworker", "Weekly youth work sessions"),
    (1, 4, "Caseworker", "Leaving care housing plan"),
    (2, 5, "Caseworker", "Youth justice liaison"),
    (0, 2, "Friend", "Attended the same school"),
    (3, 1, "Sibling", "Half-sister, different placements"),
)

# person index -> (date, event type, description, impact, action or None)
DEMO_SIGNAL_LOG = {
    0: (
        (date(2023, 1, 15), "moving_house", "Family moved out of private rented flat", 2, None),
        (date(2023, 3, 22), "temporary_accommodation", "Placed in B&B by housing options", 2,
         {"action_id": "ta_housing_referral", "date_taken": "2023-03-24", "notes": "Referred same week"}),
        (date(2023, 5, 10), "school_expulsion", "Permanent exclusion after repeated absence", 1, None),
    ),
    1: (
        (date(2023, 2, 1), "care_placement_change", "Moved to new foster placement", 1,
         {"action_id": "cp_placement_review", "date_taken": "2023-02-10", "notes": None}),
        (date(2023, 6, 18), "bereavement", "Loss of grandparent", 1, None),
        (date(2023, 9, 5), "care_placement_change", "Placement stabilised, returning to school", -1, None),
    ),
    2: (
        (date(2022, 11, 3), "arrest", "Arrested for shoplifting, released with caution", 2, None),
        (date(2023, 4, 12), "family_breakdown", "Parents separated, moving between homes", 2,
         {"action_id": "fb_mediation", "date_taken": "2023-04-20", "notes": "Two sessions booked"}),
        (date(2023, 8, 29), "substance_abuse_incident", "Found with cannabis at school", 1, None),
    ),
}

# (name, category, description, metadata, age in days)
DEMO_DATA_ITEMS = (
    ("Housing Register Extract", "Housing", "Monthly extract of households on the housing register",
     {"source": "housing", "frequency": "monthly"}, 30),
    ("School Attendance Feed", "Education", "Weekly attendance figures from secondary schools",
     {"source": "education", "frequency": "weekly"}, 25),
    ("Youth Justice Referrals", "Justice", "Referrals received from the youth offending team",
     {"source": "yot"}, 20),
    ("Children in Care Register", "Social Care", "Current looked-after children and placements",
     {"source": "social_care"}, 15),
    ("Temporary Accommodation Bookings", "Housing", "Nightly B&B and hostel placements",
     {"source": "housing", "frequency": "daily"}, 10),
)


def seed_demo_data(db: Session) -> bool:
    """
    Insert the demo caseload if the database holds no people yet.

    Returns True when data was written.
    """
    if db.query(PersonDB).first() is not None:
        logger.info("Demo seed skipped - people already present")
        return False

    people = []
    for name, email, department, role, dob, gender, postcode, active in DEMO_PEOPLE:
        person = PersonDB(
            name=name,
            email=email,
            department=department,
            role=role,
            date_of_birth=dob,
            gender=gender,
            postcode=postcode,
            signals=SignalSet.from_mapping({s: True for s in active}).to_dict(),
            connection_ids=[],
            signal_log_version=0,
        )
        db.add(person)
        people.append(person)
    db.flush()

    for source_idx, target_idx, relation_type, description in DEMO_CONNECTIONS:
        source, target = people[source_idx], people[target_idx]
        db.add(ConnectionDB(
            source_person_id=source.id,
            target_person_id=target.id,
            relation_type=relation_type,
            description=description,
        ))
        if target.id not in source.connection_ids:
            source.connection_ids = source.connection_ids + [target.id]
        if source.id not in target.connection_ids:
            target.connection_ids = target.connection_ids + [source.id]

    for person_idx, entries in DEMO_SIGNAL_LOG.items():
        person = people[person_idx]
        for position, (event_date, event_type, description, impact, action) in enumerate(entries):
            db.add(SignalLogEventDB(
                person_id=person.id,
                event_id=position + 1,
                position=position,
                event_date=event_date,
                event_type=event_type,
                description=description,
                risk_score_impact=str(impact),
                action_taken=dict(action) if action else None,
            ))

    now = datetime.utcnow()
    for name, category, description, metadata, age_days in DEMO_DATA_ITEMS:
        db.add(DataItemDB(
            name=name,
            category=category,
            description=description,
            item_metadata=dict(metadata),
            created_at=now - timedelta(days=age_days),
            updated_at=now,
        ))

    db.commit()
    logger.info(
        "Seeded %d people, %d connections, %d signal log events, %d data items",
        len(DEMO_PEOPLE), len(DEMO_CONNECTIONS),
        sum(len(v) for v in DEMO_SIGNAL_LOG.values()), len(DEMO_DATA_ITEMS),
    )
    return True


if __name__ == "__main__":
    from .database import SessionLocal, init_db

    logging.basicConfig(level=logging.INFO)
    init_db()
    session = SessionLocal()
    try:
        seed_demo_data(session)
    finally:
        session.close()
