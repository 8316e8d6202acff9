from datetime import date, timedelta

from prtracker.auth import hash_password
from prtracker.core.time_utils import split_time_text
from prtracker.db import Base, SessionLocal, engine
from prtracker.models.personal_record import PersonalRecord
from prtracker.models.profile import Profile  # noqa: F401  (registers table)
from prtracker.models.user import User
from prtracker.repositories.profiles import ProfileRepository
from prtracker.repositories.records import PersonalRecordRepository
from prtracker.repositories.users import UserRepository
from prtracker.schemas.profile import ProfileUpsert
from prtracker.schemas.record import RecordCreate


DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo-runner"

# (distance, time text, race, days ago or None when undated)
DEMO_RECORDS = [
    ("5K", "19:42", "Parkrun Riverside", 30),
    ("10K", "41:05", "Spring 10K", 120),
    ("Half Marathon", "1:31:18", "City Half", 200),
    ("Marathon", "3:14:56", "Autumn Marathon", 365),
    ("1 Mile", "5:38", "Track night", None),
]


def get_or_create_demo_user(db) -> User:
    """Return the demo user, creating it and its profile on first run."""
    users = UserRepository(db)
    user = users.get_by_email(DEMO_EMAIL)
    if user:
        return user
    user = users.create(DEMO_EMAIL, hash_password(DEMO_PASSWORD))
    ProfileRepository(db).upsert(
        user.id,
        ProfileUpsert(name="Demo Runner", location="Portland, OR", bio="Chasing a sub-3."),
    )
    return user


def clear_records(db, user: User) -> None:
    """Delete the demo user's records so we can reseed cleanly."""
    db.query(PersonalRecord).filter(PersonalRecord.user_id == user.id).delete()
    db.commit()


def seed_demo_records(db, user: User) -> None:
    records = PersonalRecordRepository(db)
    today = date.today()
    for distance, time_text, race, days_ago in DEMO_RECORDS:
        hours, minutes, seconds = split_time_text(time_text)
        records.insert(
            user.id,
            RecordCreate(
                distance=distance,
                hours=hours,
                minutes=minutes,
                seconds=seconds,
                race_location=race,
                date_achieved=today - timedelta(days=days_ago) if days_ago is not None else None,
            ),
        )

    print(f"Seeded {len(DEMO_RECORDS)} demo records for {DEMO_EMAIL}")


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        user = get_or_create_demo_user(db)
        clear_records(db, user)
        seed_demo_records(db, user)
    finally:
        db.close()


if __name__ == "__main__":
    main()
