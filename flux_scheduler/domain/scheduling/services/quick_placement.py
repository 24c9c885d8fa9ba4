"""
Quick Placement

Backward-scheduling helpers: which task of a job an operator should place
next on a station.
"""

from collections.abc import Sequence

from ..entities.assignment import TaskAssignment
from ..entities.job import Job
from ..entities.task import InternalTask, OutsourcedTask


def available_task_for_station(
    job: Job,
    tasks: Sequence[InternalTask | OutsourcedTask],
    assignments: Sequence[TaskAssignment],
    station_id: str,
) -> InternalTask | None:
    """
    Task of ``job`` to place next on ``station_id``.

    Among the job's unplaced internal tasks for the station, the one with
    the highest sequence order whose successor is absent or already placed.

    Args:
        job: Job being scheduled
        tasks: All tasks of the schedule
        assignments: All placements of the schedule
        station_id: Station the operator targets

    Returns:
        The task to place, or ``None`` if every candidate waits on an
        unplaced successor
    """
    placed = {assignment.task_id for assignment in assignments}
    job_tasks = {task.sequence_order: task for task in tasks if task.job_id == job.id}

    candidates = sorted(
        (
            task
            for task in job_tasks.values()
            if isinstance(task, InternalTask)
            and task.station_id == station_id
            and task.id not in placed
        ),
        key=lambda task: task.sequence_order,
        reverse=True,
    )
    for task in candidates:
        successor = job_tasks.get(task.sequence_order + 1)
        if successor is None or successor.id in placed:
            return task
    return None


def stations_with_available_tasks(
    job: Job,
    tasks: Sequence[InternalTask | OutsourcedTask],
    assignments: Sequence[TaskAssignment],
) -> list[str]:
    """Stations, in first-seen order, where ``job`` has a task ready to place."""
    station_ids: list[str] = []
    for task in tasks:
        if (
            task.job_id == job.id
            and isinstance(task, InternalTask)
            and task.station_id not in station_ids
        ):
            station_ids.append(task.station_id)
    return [
        station_id
        for station_id in station_ids
        if available_task_for_station(job, tasks, assignments, station_id) is not None
    ]
