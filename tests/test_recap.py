"""Tests for the yearly recap aggregation."""
import random

import pytest

from app.services import collaborator_service, project_service
from app.services.recap_service import LedgerRow, aggregate_recap, compute_recap


def row(month, project_id, days, rate, name=None, year=2025):
    return LedgerRow(
        month=month,
        year=year,
        project_id=project_id,
        project_name=name if name is not None else f"Proj{project_id}",
        days_worked=days,
        daily_rate=rate,
    )


def totals(months):
    return {
        m.month: ({p.id: p.total_cost for p in m.projects}, m.total_month_cost)
        for m in months
    }


class TestAggregateRecap:

    def test_costs_summed_across_collaborators(self):
        rows = [
            row("03", 1, 6, 500),   # 3000
            row("03", 1, 4, 500),   # 2000
            row("03", 2, 2, 450),   # 900
        ]
        (march,) = aggregate_recap(rows, 2025)

        assert march.month == "03"
        assert march.year == 2025
        assert {p.id: p.total_cost for p in march.projects} == {1: 5000, 2: 900}
        assert march.total_month_cost == 5900

    def test_month_total_reconciles_with_projects(self):
        rows = [row(f"{m:02d}", p, d, r) for m, p, d, r in [
            (1, 1, 3, 400), (1, 2, 5, 300), (2, 1, 1, None), (7, 3, 12, 650), (7, 1, 2, 400), (12, 2, 0.5, 300),
        ]]
        for month in aggregate_recap(rows, 2025):
            assert month.total_month_cost == sum(p.total_cost for p in month.projects)

    def test_unset_rate_counts_as_zero(self):
        (month,) = aggregate_recap([row("05", 1, 10, None), row("05", 1, 2, 100)], 2025)

        assert month.projects[0].total_cost == 200

    def test_months_sorted_ascending(self):
        rows = [row("11", 1, 1, 1), row("02", 1, 1, 1), row("10", 1, 1, 1), row("01", 1, 1, 1)]

        assert [m.month for m in aggregate_recap(rows, 2025)] == ["01", "02", "10", "11"]

    def test_other_years_excluded(self):
        rows = [row("03", 1, 1, 100, year=2024), row("03", 1, 2, 100)]
        (march,) = aggregate_recap(rows, 2025)

        assert march.total_month_cost == 200

    def test_month_filter(self):
        rows = [row("03", 1, 1, 100), row("04", 1, 2, 100)]

        assert [m.month for m in aggregate_recap(rows, 2025, month="04")] == ["04"]

    def test_first_name_wins_and_unresolved_kept(self):
        rows = [
            row("03", 1, 1, 100, name="Alpha"),
            row("03", 1, 1, 100, name="Alpha renamed"),
            LedgerRow(month="03", year=2025, project_id=99, project_name=None, days_worked=2, daily_rate=100),
        ]
        (march,) = aggregate_recap(rows, 2025)

        assert [(p.id, p.name) for p in march.projects] == [(1, "Alpha"), (99, None)]
        assert march.total_month_cost == 400

    def test_projects_in_order_of_first_appearance(self):
        rows = [row("03", 3, 1, 1), row("03", 1, 1, 1), row("03", 3, 1, 1), row("03", 2, 1, 1)]
        (march,) = aggregate_recap(rows, 2025)

        assert [p.id for p in march.projects] == [3, 1, 2]

    def test_invariant_under_reordering(self):
        rows = [row(f"{m:02d}", p, d, r) for m, p, d, r in [
            (1, 1, 3, 400), (1, 2, 5, 300), (1, 1, 2, 250), (3, 2, 4, 300), (3, 3, 1, None), (9, 1, 8, 400),
        ]]
        expected = totals(aggregate_recap(rows, 2025))

        shuffled = list(rows)
        for seed in range(5):
            random.Random(seed).shuffle(shuffled)
            assert totals(aggregate_recap(shuffled, 2025)) == expected

    def test_empty_ledger(self):
        assert aggregate_recap([], 2025) == []


class TestComputeRecap:

    @pytest.mark.asyncio
    async def test_recap_from_database(self, session, projects):
        proj_a, proj_b = projects
        alice = await collaborator_service.create_collaborator(session, "Alice", [proj_a.id, proj_b.id], 500)
        bob = await collaborator_service.create_collaborator(session, "Bob", [proj_a.id], 400)
        await collaborator_service.record_days(session, alice.id, proj_a.id, 6, "03", 2025)
        await collaborator_service.record_days(session, bob.id, proj_a.id, 5, "03", 2025)
        await collaborator_service.record_days(session, alice.id, proj_b.id, 2, "04", 2025)
        await collaborator_service.record_days(session, alice.id, proj_b.id, 9, "04", 2024)
        await collaborator_service.upsert_comment(session, alice.id, "conference", "03", 2025)

        recap = await compute_recap(session, 2025)

        assert [m.month for m in recap.months] == ["03", "04"]
        march, april = recap.months
        assert [(p.name, p.total_cost) for p in march.projects] == [("ProjA", 5000)]
        assert [(p.name, p.total_cost) for p in april.projects] == [("ProjB", 1000)]
        assert recap.total_year_cost == 6000

    @pytest.mark.asyncio
    async def test_deleted_project_still_counted(self, session, projects):
        proj_a, _ = projects
        alice = await collaborator_service.create_collaborator(session, "Alice", [proj_a.id], 300)
        await collaborator_service.record_days(session, alice.id, proj_a.id, 2, "01", 2025)
        await project_service.delete_project(session, proj_a.id)

        recap = await compute_recap(session, 2025)

        (january,) = recap.months
        assert january.projects[0].id == proj_a.id
        assert january.projects[0].name is None
        assert january.total_month_cost == 600

    @pytest.mark.asyncio
    async def test_collaborator_without_rate(self, session, projects):
        proj_a, _ = projects
        alice = await collaborator_service.create_collaborator(session, "Alice", [proj_a.id])
        await collaborator_service.record_days(session, alice.id, proj_a.id, 2, "01", 2025)

        recap = await compute_recap(session, 2025)

        assert recap.months[0].projects[0].total_cost == 0
        assert recap.total_year_cost == 0
