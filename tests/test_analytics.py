"""Tests for dashboard task analytics."""

from datetime import timedelta

from meeting_tasks.analytics import compute_task_analytics


class TestCounts:
    def test_empty(self, now):
        result = compute_task_analytics([], now=now)

        assert result.total_tasks == 0
        assert result.completion_rate == 0
        assert result.on_time_rate == 100
        assert result.avg_completion_days is None
        assert len(result.weekly) == 4

    def test_status_priority_assignee_counts(self, make_task, now):
        tasks = [
            make_task(id="a", status="completed", priority="high",
                      assignees=[{"id": "c1", "name": "Ana"}]),
            make_task(id="b", status="pending", priority="high",
                      assignees=[{"id": "c1", "name": "Ana"}, {"id": "c2", "name": "Ben"}]),
            make_task(id="c", status="pending", priority="low"),
        ]

        result = compute_task_analytics(tasks, now=now)

        assert result.status_counts == {"completed": 1, "pending": 2}
        assert result.priority_counts == {"high": 2, "low": 1}
        assert result.assignee_counts == {"Ana": 2, "Ben": 1, "Unassigned": 1}
        assert result.completion_rate == 33


class TestOnTime:
    def test_on_time_and_late(self, make_task, now):
        tasks = [
            make_task(id="a", status="completed",
                      deadline=(now + timedelta(days=1)).isoformat(),
                      assignees=[{"id": "c1", "name": "Ana"}]),
            make_task(id="b", status="completed",
                      deadline=(now - timedelta(days=5)).isoformat(),
                      assignees=[{"id": "c1", "name": "Ana"}]),
            make_task(id="c", status="completed",
                      assignees=[{"id": "c2", "name": "Ben"}]),
        ]

        result = compute_task_analytics(tasks, now=now)

        assert result.on_time_tasks == 1
        assert result.late_tasks == 1
        assert result.on_time_rate == 50
        ana = result.person_stats["Ana"]
        assert (ana.completed, ana.on_time, ana.late) == (2, 1, 1)
        assert ana.on_time_rate == 50
        # No deadline counts as on time per person
        assert result.person_stats["Ben"].on_time == 1

    def test_average_completion_days(self, make_task, now):
        tasks = [
            make_task(id="a", status="completed",
                      createdAt=(now - timedelta(days=4)).isoformat(),
                      updatedAt=(now - timedelta(days=1)).isoformat()),
            make_task(id="b", status="completed",
                      createdAt=(now - timedelta(days=2)).isoformat(),
                      updatedAt=(now - timedelta(days=1)).isoformat()),
        ]

        assert compute_task_analytics(tasks, now=now).avg_completion_days == 2.0


class TestWeekly:
    def test_buckets_oldest_first(self, make_task, now):
        tasks = [
            make_task(id="recent", status="completed",
                      createdAt=(now - timedelta(days=2)).isoformat(),
                      updatedAt=(now - timedelta(days=1)).isoformat()),
            make_task(id="older", status="pending",
                      createdAt=(now - timedelta(days=20)).isoformat()),
            make_task(id="ancient", status="pending",
                      createdAt=(now - timedelta(days=60)).isoformat()),
        ]

        weekly = compute_task_analytics(tasks, now=now).weekly

        assert [w.created for w in weekly] == [0, 1, 0, 1]
        assert [w.completed for w in weekly] == [0, 0, 0, 1]
        assert weekly[-1].week == f"W{now.isocalendar()[1]}"

    def test_to_dict_is_serializable(self, make_task, now):
        data = compute_task_analytics([make_task()], now=now).to_dict()

        assert data["person_stats"]["Unassigned"]["total"] == 1
        assert data["weekly"][0].keys() == {"week", "completed", "created"}
