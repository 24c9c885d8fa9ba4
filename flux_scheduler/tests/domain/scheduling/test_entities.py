"""Unit tests for scheduling entities and the snapshot index."""

from datetime import timedelta

import pytest
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from flux_scheduler.domain.scheduling.entities import (
    InternalTask,
    OutsourcedTask,
    SnapshotIndex,
    Task,
    sort_by_start,
)
from flux_scheduler.domain.scheduling.value_objects import ProofStatus

from .factories import (
    at,
    make_assignment,
    make_group,
    make_internal_task,
    make_job,
    make_outsourced_task,
    make_provider,
    make_snapshot,
    make_station,
)


class TestTaskAssignment:
    """Test TaskAssignment invariants."""

    def test_start_must_precede_end(self):
        with pytest.raises(PydanticValidationError, match="must end after it starts"):
            make_assignment("a1", "t1", at(10), at(10))

    def test_rescheduled_keeps_other_fields(self):
        assignment = make_assignment(
            "a1", "t1", at(8), at(9), is_completed=True, completed_at=at(9)
        )

        moved = assignment.rescheduled(at(10), at(11), at(12))

        assert (moved.scheduled_start, moved.scheduled_end) == (at(10), at(11))
        assert moved.updated_at == at(12)
        assert moved.is_completed
        assert moved.completed_at == at(9)
        assert assignment.scheduled_start == at(8)

    def test_duration(self):
        assert make_assignment("a1", "t1", at(8), at(9, 30)).duration == timedelta(
            minutes=90
        )

    def test_sort_by_start_is_stable(self):
        first = make_assignment("a1", "t1", at(9), at(10))
        second = make_assignment("a2", "t2", at(9), at(11))
        earlier = make_assignment("a3", "t3", at(8), at(9))

        assert [a.id for a in sort_by_start([first, second, earlier])] == [
            "a3",
            "a1",
            "a2",
        ]

    def test_iso_strings_with_z_suffix_are_parsed(self):
        assignment = make_assignment(
            "a1", "t1", "2026-03-02T08:00:00Z", "2026-03-02T09:00:00Z"
        )

        assert assignment.scheduled_start == at(8)


class TestTaskVariants:
    """Test the discriminated task union."""

    def test_discriminator_selects_variant(self):
        adapter = TypeAdapter(Task)

        internal = adapter.validate_python(
            {
                "id": "t1",
                "job_id": "j1",
                "sequence_order": 0,
                "type": "internal",
                "station_id": "s1",
                "duration": {"setup_minutes": 10, "run_minutes": 50},
            }
        )
        outsourced = adapter.validate_python(
            {
                "id": "t2",
                "job_id": "j1",
                "sequence_order": 1,
                "type": "outsourced",
                "provider_id": "p1",
                "action_type": "varnish",
                "duration": {"open_days": 2},
            }
        )

        assert isinstance(internal, InternalTask)
        assert internal.resource_id == "s1"
        assert isinstance(outsourced, OutsourcedTask)
        assert outsourced.resource_id == "p1"

    def test_records_are_frozen(self):
        task = make_internal_task("t1")

        with pytest.raises(PydanticValidationError):
            task.station_id = "other"


class TestResources:
    def test_group_cap_must_be_positive(self):
        with pytest.raises(PydanticValidationError):
            make_group(max_concurrent=0)

    def test_provider_rejects_invalid_weekday(self):
        with pytest.raises(PydanticValidationError, match="Invalid weekday"):
            make_provider(open_weekdays=frozenset({7}))

    def test_provider_rejects_invalid_clock(self):
        with pytest.raises(PydanticValidationError):
            make_provider(reception_time="24:00")

    def test_proof_gate_satisfaction(self):
        assert make_job(proof_status=ProofStatus.APPROVED).proof_approval.is_satisfied
        assert make_job(proof_status=ProofStatus.NOT_REQUIRED).proof_approval.is_satisfied
        assert not make_job(proof_status=ProofStatus.SENT).proof_approval.is_satisfied


class TestSnapshotIndex:
    """Test lookup tables built over a snapshot."""

    @pytest.fixture
    def snapshot(self):
        return make_snapshot(
            stations=[
                make_station("s1", group_id="g1"),
                make_station("s2", group_id="g1"),
                make_station("s3"),
            ],
            groups=[make_group("g1", max_concurrent=1)],
            providers=[make_provider("p1")],
            jobs=[make_job("j1")],
            tasks=[
                make_internal_task("t0", "j1", 0, "s1"),
                make_internal_task("t1", "j1", 1, "s2"),
                make_outsourced_task("t2", "j1", 2, "p1"),
            ],
            assignments=[
                make_assignment("a0", "t0", at(8), at(9), target_id="s1"),
                make_assignment("a1", "t1", at(9), at(10), target_id="s2"),
                make_assignment(
                    "a2", "t2", at(10), at(11), target_id="p1", is_outsourced=True
                ),
            ],
        )

    def test_predecessor_and_successor(self, snapshot):
        index = SnapshotIndex(snapshot)
        t1 = index.task("t1")

        assert index.predecessor_of(t1).id == "t0"
        assert index.successor_of(t1).id == "t2"
        assert index.predecessor_of(index.task("t0")) is None

    def test_group_back_reference(self, snapshot):
        index = SnapshotIndex(snapshot)

        assert index.group_for_station("s1").id == "g1"
        assert index.group_for_station("s3") is None
        assert {a.id for a in index.group_assignments("g1")} == {"a0", "a1"}

    def test_station_assignments_exclude_outsourced(self, snapshot):
        index = snapshot.index()

        assert [a.id for a in index.station_assignments("s1")] == ["a0"]
        assert index.station_assignments("p1") == []
        assert index.assignment_for("t2").id == "a2"

    def test_missing_references_resolve_to_none(self, snapshot):
        index = SnapshotIndex(snapshot)

        assert index.task("missing") is None
        assert index.station("missing") is None
        assert index.assignment_for("missing") is None

    def test_advanced_bumps_version(self, snapshot):
        advanced = snapshot.advanced(at(12), assignments=[])

        assert advanced.version == snapshot.version + 1
        assert advanced.generated_at == at(12)
        assert advanced.assignments == ()
        assert len(snapshot.assignments) == 3
