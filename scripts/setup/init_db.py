"""
Initialize database — creates the key-value table and seeds empty collections.
Run once before first launch, or after pointing DATABASE_URL somewhere new.
Usage: python scripts/setup/init_db.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from sqlalchemy import inspect, text

from ticket_parking.config import settings
from ticket_parking.database import SessionLocal, create_tables, engine
from ticket_parking.services.errors import TicketStorageError
from ticket_parking.storage.ticket_store import TicketStore


def main():
    print("🗄️  Ticket Parking DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    print(f"✅ Tables: {', '.join(inspect(engine).get_table_names())}")

    db = SessionLocal()
    try:
        store = TicketStore(db)
        for key in (settings.ACTIVE_TICKETS_KEY, settings.HISTORY_TICKETS_KEY):
            try:
                tickets = store.get(key)
            except TicketStorageError as e:
                print(f"❌ {e}")
                print("   Fix or remove the stored value before starting the backend.")
                sys.exit(1)
            if not tickets and not store.set(key, []):
                print(f"❌ Could not seed {key}")
                sys.exit(1)
            print(f"   ✓ {key}: {len(tickets)} ticket(s)")
    finally:
        db.close()

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn ticket_parking.main:app --host 0.0.0.0 --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
