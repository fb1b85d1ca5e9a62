from pydantic import field_validator


def non_nullable(*fields: str):
    """
    Validator for PATCH bodies: a field may be left out, but an explicit null
    is refused when the column behind it cannot be empty.
    """
    def check(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value
    return field_validator(*fields)(classmethod(check))
