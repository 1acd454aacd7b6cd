#!/usr/bin/env python3
# scripts/check_db.py - Check database connection and which finance tables exist
import sys
import os

from sqlalchemy import inspect

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tuitiondesk.core.config import settings
from tuitiondesk.core.db import db_manager
from tuitiondesk.models import Base


def check_database_connection() -> bool:
    """Check if database connection is working and report missing tables"""
    target = settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else settings.DATABASE_URL

    print("Database Connection Check")
    print("=" * 40)
    print(f"Database: {target}")
    print(f"Environment: {settings.ENV}")
    print("-" * 40)

    health = db_manager.health_check()
    if health["status"] != "healthy":
        print(f"❌ Connection failed: {health.get('error')}")
        print("\nTroubleshooting:")
        print("1. Check that the database server is running")
        print("2. Verify DATABASE_URL in your .env file")
        return False

    print(f"✅ Connection successful ({health['response_time_ms']} ms)")

    existing = set(inspect(db_manager.engine).get_table_names())
    expected = sorted(Base.metadata.tables)
    missing = [name for name in expected if name not in existing]

    print(f"Tables in database: {len(existing)}")
    for name in expected:
        print(f"  {'✅' if name in existing else '❌'} {name}")

    if missing:
        print("\n📝 Run 'alembic upgrade head' to create the missing tables")
        return False
    return True


if __name__ == "__main__":
    sys.exit(0 if check_database_connection() else 1)
