"""
Serialize ORM rows to the camelCase keys the frontend reads.
Uses Pydantic's alias_generators for consistency with schema validation.
"""
from datetime import date, datetime
from typing import Any, Iterable, Optional

from pydantic.alias_generators import to_camel

# Column names whose camelCase form the frontend spells differently
CAMEL_OVERRIDES = {
    "date_of_establishment_mlb": "dateOfEstablishmentMLB",
    "date_of_establishment_olb": "dateOfEstablishmentOLB",
    "relation_manager_id": "relationManagerID",
    "credit_analyst_id": "creditAnalystID",
    "supervisor_id": "supervisorID",
    "committee_manager_id": "committeManagerID",
}


def to_camel_key(s: str) -> str:
    """Convert a single snake_case key to camelCase (first letter lower)."""
    return CAMEL_OVERRIDES.get(s) or to_camel(s)


def _json_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def row_to_camel(row: Any, exclude: Optional[Iterable[str]] = None) -> dict[str, Any]:
    """Serialize an ORM row's columns to a camelCase dict with ISO dates."""
    skip = set(exclude or ())
    return {
        to_camel_key(col.key): _json_value(getattr(row, col.key))
        for col in row.__table__.columns
        if col.key not in skip
    }
