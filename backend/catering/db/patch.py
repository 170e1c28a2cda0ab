"""Apply typed partial updates (pydantic patch models) to ORM rows."""

from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel

from catering.errors import ValidationError


def apply_patch(
    row: Any,
    patch: BaseModel,
    converters: Optional[Dict[str, Callable[[Any], Any]]] = None,
    allow_none: tuple = (),
) -> Dict[str, Any]:
    """
    Copy every field explicitly set on `patch` onto `row`.

    Field names on the patch model match ORM attribute names. `converters`
    maps a field to a function applied before assignment (e.g. pesos ->
    centavos). Fields set to None are rejected unless listed in `allow_none`.

    Returns the dict of applied changes; raises ValidationError when the
    patch carries no fields.
    """
    converters = converters or {}
    changes = patch.model_dump(exclude_unset=True, by_alias=False)
    if not changes:
        raise ValidationError("No fields to update")

    for field, value in changes.items():
        if value is None and field not in allow_none:
            raise ValidationError(f"{field} cannot be null")
        if value is not None and field in converters:
            value = converters[field](value)
        setattr(row, field, value)
    return changes
