"""Column types shared by the models"""
import uuid

from sqlalchemy import TypeDecorator, String


def generate_uuid() -> str:
    return str(uuid.uuid4())


class GUID(TypeDecorator):
    """
    UUID stored as VARCHAR(36) on every backend.

    Values always come back as `str`, so ids compare equal to the strings
    carried in tokens and URLs whichever driver is in use.
    """
    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else str(value)
