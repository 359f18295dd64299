"""
Key-value table behind the ticket store.
One row per collection key; `value` holds the JSON-encoded ticket list.
Two rows exist in practice: the active collection and the history collection.
"""

from sqlalchemy import Column, String, DateTime, Text
from ticket_parking.database import Base


class KeyValueEntry(Base):
    __tablename__ = "kv_store"

    key = Column(String(200), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True))

    def __repr__(self):
        return f"<KeyValueEntry {self.key} ({len(self.value or '')} bytes)>"
