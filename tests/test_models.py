from datetime import date, time

from overtime.models import EmployeeTotals, GlobalStats, RecordRow, summarize, top_employees


def row(net_hours, value):
    return RecordRow(date(2024, 6, 3), time(18, 0), time(20, 0), net_hours, False, net_hours, value)


def test_summarize_sums_net_hours_and_value():
    summary = summarize([row(2.0, 31.14), row(0.33, 5.19)])

    assert summary.total_hours == 2.33
    assert summary.total_value == 36.33
    assert summary.record_count == 2


def test_summarize_empty():
    summary = summarize([])

    assert (summary.total_hours, summary.total_value, summary.record_count) == (0.0, 0.0, 0)


def test_global_stats_average_over_employees():
    stats = GlobalStats.build(total_employees=3, total_hours=10.0, total_value=155.7)

    assert stats.average_hours == 3.33
    assert stats.total_value == 155.7


def test_global_stats_without_employees_has_zero_average():
    assert GlobalStats.build(0, 0.0, 0.0).average_hours == 0.0


def test_top_employees_skips_empty_profiles_and_sorts_by_hours():
    employees = [
        EmployeeTotals("a", "Ana", total_hours=4.0, record_count=2),
        EmployeeTotals("b", "Bruno", total_hours=0.0, record_count=0),
        EmployeeTotals("c", "Carla", total_hours=12.5, record_count=3),
        EmployeeTotals("d", "Davi", total_hours=1.0, record_count=1),
    ]

    ranked = top_employees(employees, limit=2)

    assert [e.user_id for e in ranked] == ["c", "a"]
