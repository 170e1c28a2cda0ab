"""Shared request-model base, text types and pagination helpers for the API routers."""

import math
from typing import Annotated, Any, Dict

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel


# Stripped before the length check, so "   " fails min_length.
ShortText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
LongText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
PersonName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
Username = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=255)]
Venue = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=500)]


class CamelModel(BaseModel):
    """Request body whose JSON keys are camelCase (eventDate -> event_date)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def pagination(page: int, limit: int, total: int) -> Dict[str, Any]:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }
