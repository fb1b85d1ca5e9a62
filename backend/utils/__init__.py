from datetime import datetime
import os

import pytz
from sqlalchemy.orm import class_mapper

# Business time zone used for audit timestamps
LOCAL_TIMEZONE = pytz.timezone(os.getenv("APP_TIMEZONE", "Asia/Kathmandu"))


def local_now() -> datetime:
    """Current time in the business time zone."""
    return datetime.now(LOCAL_TIMEZONE)


def sqlalchemy_to_dict(obj):
    """Convert a SQLAlchemy object to a dictionary."""
    if not obj:
        return None
    mapper = class_mapper(obj.__class__)
    result = {}
    for c in mapper.columns:
        value = getattr(obj, c.key)
        # Convert datetime objects to ISO format strings
        if hasattr(value, 'isoformat'):
            value = value.isoformat()
        # Convert Decimal objects to strings so no precision is lost in the audit trail
        elif hasattr(value, 'normalize') and hasattr(value, 'from_float'):  # Check if it's a Decimal
            value = str(value)
        # Convert enum types to strings
        elif hasattr(value, 'name') and hasattr(value, 'value'):  # Check if it's an enum
            value = value.value
        result[c.key] = value
    return result

__all__ = ['LOCAL_TIMEZONE', 'local_now', 'sqlalchemy_to_dict']
