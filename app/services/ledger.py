"""Workload ledger operations and the monthly view resolver.

Everything here works on an already-loaded Collaborator aggregate and does no
I/O; persistence is the caller's job (see collaborator_service).
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from app.core.exceptions import ValidationError
from app.models.collaborator import Collaborator, Workload


@dataclass
class MonthlyProjectDays:
    project_id: Any
    name: Optional[str]
    days_worked: float


@dataclass
class MonthlyView:
    collaborator_id: int
    name: str
    daily_rate: Optional[float]
    month: str
    year: int
    comment: str
    projects: List[MonthlyProjectDays] = field(default_factory=list)

    @property
    def total_days(self) -> float:
        return sum(p.days_worked for p in self.projects)

    @property
    def total_cost(self) -> float:
        # an unset rate counts as zero
        return self.total_days * (self.daily_rate or 0)


def project_key(ref: Any) -> Optional[str]:
    """Identifier string of a project reference.

    Accepts a resolved object exposing ``id``, a mapping with an ``id`` key or
    a bare identifier, so references compare equal whatever their shape.
    """
    if ref is None:
        return None
    if isinstance(ref, dict):
        ref = ref.get("id")
    else:
        ref = getattr(ref, "id", ref)
    return None if ref is None else str(ref)


def period_entries(workloads: Iterable[Workload], month: str, year: int) -> List[Workload]:
    return [w for w in workloads if w.month == month and w.year == int(year)]


def find_entry(workloads: Iterable[Workload], project_id: Any, month: str, year: int) -> Optional[Workload]:
    key = project_key(project_id)
    for entry in period_entries(workloads, month, year):
        if project_key(entry.project_id) == key:
            return entry
    return None


def validate_days(days: Optional[float]) -> float:
    if days is None or not math.isfinite(days) or days < 0:
        raise ValidationError("Days worked must be greater than or equal to 0")
    return days


def upsert_days(collaborator: Collaborator, project_id: Any, days: Optional[float], month: str, year: int) -> Workload:
    """Set the days worked for (project, month, year), creating the entry if needed."""
    days = validate_days(days)
    entry = find_entry(collaborator.workloads, project_id, month, year)
    if entry is not None:
        entry.days_worked = days
        return entry

    entry = Workload(project_id=project_id, days_worked=days, month=month, year=int(year))
    collaborator.workloads.append(entry)
    return entry


def monthly_comment(workloads: Iterable[Workload], month: str, year: int) -> str:
    for entry in period_entries(workloads, month, year):
        if entry.comment:
            return entry.comment
    return ""


def comment_slot(workloads: Iterable[Workload], month: str, year: int) -> Optional[Workload]:
    """The entry holding the period comment.

    The project-less placeholder of the period wins; older data may carry the
    comment on a project entry instead, in which case the first such entry is
    reused so the period never ends up with two comments.
    """
    entries = period_entries(workloads, month, year)
    for entry in entries:
        if entry.project_id is None:
            return entry
    for entry in entries:
        if entry.comment:
            return entry
    return None


def upsert_comment(collaborator: Collaborator, comment: str, month: str, year: int) -> Workload:
    slot = comment_slot(collaborator.workloads, month, year)
    if slot is not None:
        slot.comment = comment
        return slot

    slot = Workload(project_id=None, days_worked=0, month=month, year=int(year), comment=comment)
    collaborator.workloads.append(slot)
    return slot


def resolve_monthly_view(
    collaborator: Collaborator,
    month: str,
    year: int,
    project_names: Optional[Dict[Any, str]] = None,
) -> MonthlyView:
    """Days worked per statically assigned project for one period."""
    project_names = project_names or {}
    names_by_key = {project_key(pid): name for pid, name in project_names.items()}
    entries = period_entries(collaborator.workloads, month, year)

    projects = []
    for assignment in collaborator.projects:
        ref = assignment.project_id
        key = project_key(ref)
        entry = next((w for w in entries if project_key(w.project_id) == key), None)
        projects.append(MonthlyProjectDays(
            project_id=getattr(ref, "id", ref),
            name=getattr(ref, "name", None) or names_by_key.get(key),
            days_worked=entry.days_worked if entry else 0,
        ))

    return MonthlyView(
        collaborator_id=collaborator.id,
        name=collaborator.name,
        daily_rate=collaborator.daily_rate,
        month=month,
        year=int(year),
        comment=monthly_comment(entries, month, year),
        projects=projects,
    )
