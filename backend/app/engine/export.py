"""CSV export of the allocation matrix."""
import csv
import io
from typing import Iterable

from app.engine.sprint_calendar import Sprint, sprint_label
from app.schemas.allocation import Allocation
from app.schemas.project import Project
from app.schemas.team import TeamMember

EMPTY_CELL = "-"


def _pct(value: float) -> str:
    return f"{value:g}%"


def allocation_matrix_csv(
    allocations: Iterable[Allocation],
    members: Iterable[TeamMember],
    projects: Iterable[Project],
    sprints: list[Sprint],
) -> str:
    """One row per project, one column group per sprint (total then each member).

    Only members and projects with an allocation in ``sprints`` are included.
    """
    shown = set(sprints)
    cells: dict[tuple[str, str, Sprint], float] = {}
    for a in allocations:
        if a.sprint in shown:
            key = (a.project_id, a.product_manager_id, a.sprint)
            cells[key] = cells.get(key, 0.0) + a.allocation_percentage

    member_ids = {member_id for _, member_id, _ in cells}
    project_ids = {project_id for project_id, _, _ in cells}
    columns = sorted((m for m in members if m.id in member_ids), key=lambda m: m.full_name.lower())
    rows = sorted(
        (p for p in projects if p.id in project_ids),
        key=lambda p: (p.customer_name.lower(), p.project_name.lower()),
    )

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    header = ["Customer", "Project", "Max Capacity (%)"]
    subheader = ["", "", ""]
    for sprint in sprints:
        header += [sprint_label(sprint)] + [""] * len(columns)
        subheader += ["Total"] + [m.full_name for m in columns]
    writer.writerow(header)
    writer.writerow(subheader)

    for project in rows:
        row = [
            project.customer_name,
            project.project_name,
            f"{project.max_capacity_percentage:g}" if project.max_capacity_percentage else EMPTY_CELL,
        ]
        for sprint in sprints:
            per_member = [cells.get((project.id, m.id, sprint)) for m in columns]
            total = sum(p for p in per_member if p is not None)
            row.append(_pct(total) if total else EMPTY_CELL)
            row += [_pct(p) if p else EMPTY_CELL for p in per_member]
        writer.writerow(row)
    return buffer.getvalue()
