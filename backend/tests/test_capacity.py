"""Tests for capacity aggregation and threshold classification."""
import pytest

from app.engine.capacity import ThresholdMode, classify, utilization_status
from app.engine.sprint_calendar import Sprint
from app.schemas.project import ProjectStatus

from conftest import allocation_for, make_member

MARCH_S1 = Sprint(2025, 3, 1)


class TestClassify:
    @pytest.mark.parametrize(
        "total,expected",
        [(69, "under"), (70, "good"), (100, "good"), (101, "over")],
    )
    def test_absolute_boundaries(self, total, expected):
        assert classify(total, 100, 70, 100, ThresholdMode.ABSOLUTE) == expected

    def test_relative_scales_with_capacity(self):
        # half-time member: 85% of 50 = 42.5, 120% of 50 = 60
        assert classify(42, 50, 85, 120, ThresholdMode.RELATIVE_TO_CAPACITY) == "under"
        assert classify(50, 50, 85, 120, ThresholdMode.RELATIVE_TO_CAPACITY) == "good"
        assert classify(61, 50, 85, 120, ThresholdMode.RELATIVE_TO_CAPACITY) == "over"

    def test_absolute_ignores_capacity(self):
        assert classify(50, 50, 85, 120, ThresholdMode.ABSOLUTE) == "under"

    @pytest.mark.parametrize("total,expected", [(99.9, "under"), (100, "full"), (100.1, "over")])
    def test_utilization_status(self, total, expected):
        assert utilization_status(total) == expected

    @pytest.mark.parametrize("parts", [[33.3, 33.3, 33.4], [10.1] * 9 + [9.1], [0.1] * 1000])
    def test_utilization_status_ignores_float_drift(self, parts):
        assert utilization_status(sum(parts)) == "full"

    def test_utilization_status_near_boundary(self):
        assert utilization_status(99.99999999999999) == "full"
        assert utilization_status(100.00000000000001) == "full"


class TestMemberLoad:
    async def test_totals_and_classification(self, workspace, apollo, zephyr, alice, bob):
        await workspace.allocations.add_allocation(allocation_for(apollo, bob, 70), "u1")
        await workspace.allocations.add_allocation(allocation_for(zephyr, bob, 31), "u1")
        await workspace.allocations.add_allocation(allocation_for(apollo, alice, 69), "u1")

        loads = {load.member_id: load for load in workspace.capacity.member_load(MARCH_S1, 70, 100, ThresholdMode.ABSOLUTE)}

        assert loads[bob.id].total_percentage == 101
        assert loads[bob.id].classification == "over"
        assert loads[alice.id].classification == "under"

    async def test_inactive_members_excluded_by_default(self, workspace, bob):
        workspace.members.deactivate_member(bob.id)
        ids = [load.member_id for load in workspace.capacity.member_load(MARCH_S1, 85, 120)]
        assert bob.id not in ids

    async def test_project_total(self, workspace, apollo, alice, bob):
        await workspace.allocations.add_allocation(allocation_for(apollo, bob, 40), "u1")
        await workspace.allocations.add_allocation(allocation_for(apollo, alice, 25), "u1")
        assert workspace.capacity.total_for_project(apollo.id, MARCH_S1) == 65
        # project max is 150: 65 < 85% of 150
        assert workspace.capacity.project_classification(apollo, MARCH_S1, 85, 120) == "under"


class TestRoleRequirementGap:
    async def test_reports_only_short_roles(self, workspace, apollo, alice, bob):
        await workspace.metadata.set_requirements(
            apollo.id, MARCH_S1, {"Product Manager": 100, "Product Director": 50}
        )
        await workspace.allocations.add_allocation(allocation_for(apollo, bob, 60), "u1")
        await workspace.allocations.add_allocation(allocation_for(apollo, alice, 50), "u1")

        gaps = workspace.capacity.role_requirement_gap(apollo, MARCH_S1)

        assert len(gaps) == 1
        assert gaps[0].role == "Product Manager"
        assert gaps[0].required == 100
        assert gaps[0].allocated == 60

    async def test_no_requirements_no_gaps(self, workspace, apollo):
        assert workspace.capacity.role_requirement_gap(apollo, MARCH_S1) == []

    async def test_unknown_member_ignored(self, workspace, apollo, bob):
        await workspace.metadata.set_requirements(apollo.id, MARCH_S1, {"Product Manager": 50})
        await workspace.allocations.add_allocation(allocation_for(apollo, bob, 50), "u1")
        gaps = workspace.capacity.role_requirement_gap(apollo, MARCH_S1, members=[make_member("Carol Diaz")])
        assert gaps[0].allocated == 0


class TestSprintOverview:
    async def test_three_sprint_dashboard(self, workspace, apollo, zephyr, bob, march_2025):
        await workspace.allocations.add_allocation(allocation_for(apollo, bob, 40), "u1")

        overview = workspace.capacity.sprint_overview(march_2025, 3, 85, 120)

        assert [o.sprint.label for o in overview] == [
            "2025 - March - S1",
            "2025 - March - S2",
            "2025 - April - S1",
        ]
        first = overview[0]
        assert [p.project_id for p in first.unallocated_projects] == [zephyr.id]
        assert bob.id in [m.member_id for m in first.under_capacity_members]
        assert first.over_capacity_members == []
        assert {p.project_id for p in overview[1].unallocated_projects} == {apollo.id, zephyr.id}

    async def test_unstaffed_alerts_only_active_projects(self, workspace, apollo, zephyr, bob, march_2025):
        await workspace.allocations.add_allocation(allocation_for(apollo, bob, 40, month=4), "u1")
        workspace.projects.update_project(zephyr.id, {"status": ProjectStatus.ON_HOLD})

        assert workspace.capacity.unstaffed_projects(march_2025) == []

    async def test_unstaffed_alerts(self, workspace, zephyr, march_2025):
        ids = [p.project_id for p in workspace.capacity.unstaffed_projects(march_2025)]
        assert zephyr.id in ids

    async def test_archived_projects_not_flagged(self, workspace, apollo, zephyr, march_2025):
        workspace.projects.archive_project(zephyr.id)
        workspace.projects.archive_project(apollo.id)
        assert workspace.capacity.unstaffed_projects(march_2025) == []
