# stackfabric/models.py
"""Base models shared by every stackfabric-based client.

``QueryOptions`` is the base for list filter models: each field's alias is the
fixed query parameter name it serialises to. ``build_query`` turns a
populated options model into a query string, leaving unset fields out.
"""

from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict


class QueryOptions(BaseModel):
    """Base model for list filter/sort/pagination options.

    Fields default to None and are left out of the query string while unset.
    Empty strings and integer zero are treated as unset as well; booleans are
    sent whenever they are not None, so an explicit False is distinguishable
    from an omitted field.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


def _is_populated(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return True
    if isinstance(value, str):
        return value != ""
    if isinstance(value, int):
        return value != 0
    return True


def _format_value(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def query_params(opts: QueryOptions | None) -> dict[str, str]:
    """Return the populated options as ``{parameter_name: value}`` in field order."""
    if opts is None:
        return {}
    params: dict[str, str] = {}
    for field_name, field in type(opts).model_fields.items():
        value = getattr(opts, field_name)
        if _is_populated(value):
            params[field.alias or field_name] = _format_value(value)
    return params


def build_query(opts: QueryOptions | None) -> str:
    """Serialise options into a query string.

    Returns:
        str: ``""`` when no field is populated, otherwise ``"?"`` followed by
            the url-encoded parameters.
    """
    params = query_params(opts)
    if not params:
        return ""
    return f"?{httpx.QueryParams(params)}"
