import uuid
from datetime import datetime, timezone


def new_id() -> str:
    """Text primary keys are UUID4 strings unless the caller supplies one."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
