"""Initialize the database - creates all tables and adds missing columns/indexes."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tutorial_cms.database import engine, Base
import tutorial_cms.models  # noqa: F401 - registers all models
from tutorial_cms.utils.schema_sync import sync_missing_schema_objects


def init_db():
    print("Creating all database tables...")
    Base.metadata.create_all(bind=engine)
    applied = sync_missing_schema_objects(engine, Base.metadata)
    for name in applied:
        print(f"  + {name}")
    print("Database initialized successfully.")


if __name__ == "__main__":
    init_db()
