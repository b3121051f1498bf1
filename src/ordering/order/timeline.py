"""Order timeline — the customer-facing progress view of an order's stages.

Each lifecycle stage is marked ``completed``, ``current`` or ``pending``
relative to the order's current stage, and dated from the status history.
A cancelled order gets a dedicated view instead of the progression.
"""

from datetime import datetime

from ordering.order.stages import (
    LIFECYCLE,
    OrderStage,
    stage_description,
    stage_index,
    stage_label,
)

COMPLETED = "completed"
CURRENT = "current"
PENDING = "pending"


def _field(entry, name):
    if entry is None:
        return None
    if isinstance(entry, dict):
        return entry.get(name)
    return getattr(entry, name, None)


def _as_datetime(value):
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _iso(value):
    return value.isoformat() if value else None


def stage_dates(status_history, created_at=None):
    """Earliest recorded date per stage. PLACED is seeded with the creation date."""
    dates = {}
    placed_at = _as_datetime(created_at)
    if placed_at:
        dates[OrderStage.PLACED.value] = placed_at

    for entry in status_history or []:
        stage = _field(entry, "stage")
        date = _as_datetime(_field(entry, "date"))
        if not stage or not date:
            continue
        if stage not in dates or date < dates[stage]:
            dates[stage] = date
    return dates


def progress_percent(current_stage):
    index = stage_index(current_stage)
    return max(0.0, index / (len(LIFECYCLE) - 1) * 100)


def build_timeline(current_stage, status_history=None, created_at=None):
    dates = stage_dates(status_history, created_at)

    if current_stage == OrderStage.CANCELLED.value:
        return {
            "current_stage": current_stage,
            "cancelled": True,
            "label": stage_label(current_stage),
            "description": stage_description(current_stage),
            "cancelled_at": _iso(dates.get(current_stage)),
            "progress_percent": 0.0,
            "steps": [],
        }

    current_index = stage_index(current_stage)
    steps = []
    for index, stage in enumerate(LIFECYCLE):
        if index < current_index:
            status = COMPLETED
        elif index == current_index:
            status = CURRENT
        else:
            status = PENDING

        steps.append(
            {
                "stage": stage,
                "label": stage_label(stage),
                "description": stage_description(stage),
                "status": status,
                "date": _iso(dates.get(stage)),
            }
        )

    return {
        "current_stage": current_stage,
        "cancelled": False,
        "label": stage_label(current_stage),
        "description": stage_description(current_stage),
        "cancelled_at": None,
        "progress_percent": progress_percent(current_stage),
        "steps": steps,
    }


def admin_history(order):
    """Status history newest first, as the back-office lists it.

    An order without any recorded history still shows the stage it is in,
    dated from its last update.
    """
    fallback = _as_datetime(order.created_at)
    entries = []
    for entry in order.status_history or []:
        stage = _field(entry, "stage")
        if not stage:
            continue
        entries.append(
            {
                "stage": stage,
                "date": _as_datetime(_field(entry, "date")) or fallback,
                "note": _field(entry, "note") or "",
            }
        )

    if not entries and order.stage:
        entries.append(
            {
                "stage": order.stage,
                "date": _as_datetime(order.updated_at) or fallback,
                "note": "Initial Status",
            }
        )

    entries.sort(key=lambda e: e["date"].timestamp() if e["date"] else float("-inf"), reverse=True)
    return [{**e, "date": _iso(e["date"])} for e in entries]
