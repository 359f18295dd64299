"""Ticket id generation."""

import uuid


def generate_id() -> str:
    """Opaque unique string id for a new ticket."""
    return str(uuid.uuid4())
