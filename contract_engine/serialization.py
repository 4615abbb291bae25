"""JSON-ready views of engine outputs.

Money stays exact: ``Decimal`` values become strings, never floats.
Only dataclass fields are emitted; computed properties are left to the
reader, except in ``snapshot_row`` which adds the ones a report needs.
"""

from dataclasses import fields, is_dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable

from contract_engine.models.snapshot import MonthlySnapshot, Projection


def serialize_value(value: Any) -> Any:
    """Convert one value (recursively) to JSON-compatible types."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        # datetime is a date subclass
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return dataclass_to_dict(value)
    if isinstance(value, dict):
        return {key: serialize_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    return value


def dataclass_to_dict(obj: Any, exclude: Iterable[str] = ()) -> dict[str, Any]:
    """Serialize the fields of a dataclass instance.

    Parameters
    ----------
    obj : Any
        Contract, metadata, snapshot, schedule or projection.
    exclude : Iterable[str]
        Field names to leave out.

    Returns
    -------
    dict[str, Any]
        Field name to serialized value, in field order.
    """
    skipped = set(exclude)
    return {
        f.name: serialize_value(getattr(obj, f.name))
        for f in fields(obj)
        if f.name not in skipped
    }


def to_dict(obj: Any) -> dict[str, Any]:
    """Serialize an engine output or a plain mapping.

    Raises
    ------
    TypeError
        If ``obj`` is neither a dataclass instance nor a dict.
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        return dataclass_to_dict(obj)
    if isinstance(obj, dict):
        return serialize_value(obj)
    raise TypeError(f"Cannot serialize {type(obj).__name__}")


def snapshot_row(snapshot: MonthlySnapshot) -> dict[str, Any]:
    """Flat report row for one month: aggregates plus derived balances, no breakdown."""
    row = dataclass_to_dict(snapshot, exclude=("contract_breakdown",))
    row["display_month"] = snapshot.display_month
    row["free_balance"] = str(snapshot.free_balance)
    row["savings_rate_percent"] = round(snapshot.savings_rate_percent, 2)
    return row


def projection_report(projection: Projection) -> dict[str, Any]:
    """Monthly rows, window, totals and final contract states of a projection."""
    return {
        "from": f"{projection.projected_from_year}-{projection.projected_from_month:02d}",
        "to": f"{projection.projected_to_year}-{projection.projected_to_month:02d}",
        "total_income": str(projection.total_income),
        "total_mandatory_outflow": str(projection.total_mandatory_outflow),
        "total_free_balance": str(projection.total_free_balance),
        "months": [snapshot_row(s) for s in projection.snapshots],
        "final_contract_states": [to_dict(c) for c in projection.final_contract_states],
    }
