# backend/pomotask/schemas/common.py

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def _strip_and_reject_blank(v, field_name: str):
    """
    Strip surrounding whitespace; a blank string raises ValueError
    so pydantic reports it as a validation error.
    """
    if v is None or not isinstance(v, str):
        return v
    stripped = v.strip()
    if stripped == "":
        raise ValueError(f"{field_name} must not be blank")
    return stripped


def _strip_to_none(v):
    """
    Optional[str] input: "   " -> None, otherwise the stripped string.
    """
    if v is None or not isinstance(v, str):
        return v
    s = v.strip()
    return s or None


class CamelModel(BaseModel):
    """
    Wire format is camelCase (taskId, durationSeconds, ...).
    snake_case field names are accepted on input as well.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Message(CamelModel):
    message: str
