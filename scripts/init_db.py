#!/usr/bin/env python3
"""
Initialize DUPulse database tables.

Creates every table and, with --seed, adds a few societies, users, events and
deals so a fresh local database has something to show.
"""

import argparse
import sys
import os
import logging
from datetime import datetime, timedelta, timezone

# Add the project root to Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from core.database import Base, SessionLocal, engine
from models.admin import AdminActivity, PlatformSetting  # noqa: F401
from models.deal import Deal
from models.event import Event
from models.partner import Partner
from models.rsvp import RSVP
from models.society import Society
from models.user import User

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

EXPECTED_TABLES = [
    "societies", "events", "users", "rsvps", "deals",
    "partners", "admin_activity_log", "platform_settings",
]

SAMPLE_SOCIETIES = [
    {
        "name": "Computing Society",
        "description": "Hackathons, talks and coding nights.",
        "contact_person": "Alex Morgan",
        "contact_email": "computing@societies.example.ac.uk",
    },
    {
        "name": "Film Society",
        "description": "Weekly screenings and discussions.",
        "contact_person": "Sam Patel",
        "contact_email": "film@societies.example.ac.uk",
    },
]

SAMPLE_USERS = [
    {"name": "Jordan Lee", "email": "jordan@students.example.ac.uk", "user_type": "student"},
    {"name": "Priya Shah", "email": "priya@students.example.ac.uk", "user_type": "student"},
]

SAMPLE_DEALS = [
    {
        "title": "10% off at the campus cafe",
        "description": "Show your student card at the till.",
        "code": "DUPULSE10",
        "status": "approved",
    },
]

SAMPLE_PARTNERS = [
    {
        "contact_email": "hello@campuscafe.example.com",
        "user_id": "00000000-0000-0000-0000-000000000001",
        "description": "Coffee and study space next to the library.",
        "website_url": "https://campuscafe.example.com",
    },
]


def init_database():
    """Create tables and check that they exist."""
    print("🗄️  Initializing database...")

    try:
        Base.metadata.create_all(bind=engine)

        with engine.connect() as conn:
            result = conn.execute(text("SELECT 1")).fetchone()
            print(f"✅ Database connected: {result[0]}")

        existing = set(inspect(engine).get_table_names())
        missing = [name for name in EXPECTED_TABLES if name not in existing]
        for name in EXPECTED_TABLES:
            print(f"{'✅' if name in existing else '❌'} {name} table")
        return not missing

    except SQLAlchemyError as e:
        print(f"❌ Database initialization failed: {str(e)}")
        return False


def seed_database():
    """Insert sample data unless societies already exist."""
    print("\n🌱 Seeding sample data...")

    db = SessionLocal()
    try:
        if db.query(Society).count():
            print("⚠️  Societies already present, skipping seed")
            return True

        societies = [Society(**data) for data in SAMPLE_SOCIETIES]
        users = [User(**data) for data in SAMPLE_USERS]
        db.add_all(societies + users)
        db.flush()

        start = datetime.now(timezone.utc).replace(hour=18, minute=0, second=0, microsecond=0)
        events = [
            Event(
                name="Intro to Python Workshop",
                description="Bring a laptop.",
                start_time=start + timedelta(days=2),
                end_time=start + timedelta(days=2, hours=2),
                location="Lab 3",
                category="academic",
                society_id=societies[0].id,
                status="approved",
            ),
            Event(
                name="Classic Film Night",
                start_time=start + timedelta(days=5),
                end_time=start + timedelta(days=5, hours=3),
                location="Lecture Theatre 1",
                category="media",
                society_id=societies[1].id,
                status="pending",
            ),
        ]
        db.add_all(events)
        db.flush()

        db.add_all([RSVP(user_id=user.id, event_id=events[0].id) for user in users])
        db.add_all([Deal(**data) for data in SAMPLE_DEALS])
        db.add_all([Partner(**data) for data in SAMPLE_PARTNERS])
        db.commit()

        print(f"✅ Seeded {len(societies)} societies, {len(users)} users, {len(events)} events")
        return True

    except SQLAlchemyError as e:
        db.rollback()
        print(f"❌ Seeding failed: {str(e)}")
        return False
    finally:
        db.close()


def main(argv=None):
    """Main initialization function."""
    parser = argparse.ArgumentParser(description="Create DUPulse tables")
    parser.add_argument("--seed", action="store_true", help="insert sample data")
    args = parser.parse_args(argv)

    print("🚀 Starting DUPulse Database Initialization\n")
    print(f"📋 Database: {engine.url}")

    steps = [("Database", init_database)]
    if args.seed:
        steps.append(("Sample Data", seed_database))

    results = []
    for step_name, step_func in steps:
        print(f"\n{'='*50}")
        print(f"Step: {step_name}")
        print('='*50)

        result = step_func()
        results.append((step_name, result))
        if not result:
            print(f"❌ {step_name} failed. Stopping initialization.")
            break

    # Summary
    print(f"\n{'='*50}")
    print("INITIALIZATION SUMMARY")
    print('='*50)

    passed = sum(1 for _, result in results if result)
    for step_name, result in results:
        status = "✅ SUCCESS" if result else "❌ FAILED"
        print(f"{status} - {step_name}")

    print(f"\nCompleted: {passed}/{len(results)} steps")

    if passed == len(results):
        print("\n🎉 Database initialization completed successfully!")
        print("\n📋 Next steps:")
        print("1. Start the API: uvicorn app.main:app --reload")
        print("2. Check health: http://localhost:8000/api/health")
        return True

    print("\n🔧 Troubleshooting:")
    print("1. Check DATABASE_URL / POSTGRES_* in .env")
    print("2. Ensure PostgreSQL is running")
    print("3. Check database permissions")
    return False


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
