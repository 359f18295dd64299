# Ticket Parking — Database Models
# Import all models here for SQLAlchemy discovery

from ticket_parking.models.kv_entry import KeyValueEntry   # noqa
