from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for records exchanged with the back-office REST API (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def ref_id(ref: object) -> str:
    """Return the id of a reference that is either a bare id or an embedded record."""
    if ref is None:
        return ""
    if isinstance(ref, str):
        return ref
    return getattr(ref, "id", None) or ""


__all__ = ["ApiModel", "ref_id"]
