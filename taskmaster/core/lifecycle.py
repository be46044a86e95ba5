"""
Task lifecycle and time-log sequencing rules.

Tasks move pending -> completed | failed. The working day of a collaborator
is an append-only list of start/pause/resume/end events whose status is read
off the most recent one.

Both transition tables are only consulted when enforcement is switched on in
settings; by default any status or event is stored as sent.
"""
from typing import Dict, FrozenSet, Iterable, Mapping, Optional

from taskmaster.schemas.task import TaskStatus
from taskmaster.schemas.time_log import TimeLogType, WorkStatus


class TransitionError(ValueError):
    pass


TASK_TRANSITIONS: Dict[TaskStatus, FrozenSet[TaskStatus]] = {
    TaskStatus.pending: frozenset({TaskStatus.completed, TaskStatus.failed}),
    TaskStatus.completed: frozenset(),
    TaskStatus.failed: frozenset(),
}

TIME_LOG_TRANSITIONS: Dict[WorkStatus, FrozenSet[TimeLogType]] = {
    WorkStatus.idle: frozenset({TimeLogType.start}),
    WorkStatus.working: frozenset({TimeLogType.pause, TimeLogType.end}),
    WorkStatus.paused: frozenset({TimeLogType.resume, TimeLogType.end}),
    WorkStatus.ended: frozenset({TimeLogType.start}),
}

_STATUS_BY_EVENT = {
    TimeLogType.start: WorkStatus.working,
    TimeLogType.resume: WorkStatus.working,
    TimeLogType.pause: WorkStatus.paused,
    TimeLogType.end: WorkStatus.ended,
}


def check_task_transition(current: str, new: TaskStatus, failure_reason: Optional[str] = None) -> None:
    """Raise TransitionError unless ``current -> new`` is a legal lifecycle move."""
    try:
        current_status = TaskStatus(current)
    except ValueError:
        raise TransitionError(f"Task has unknown status '{current}'")

    if new not in TASK_TRANSITIONS[current_status]:
        raise TransitionError(
            f"Cannot move task from '{current_status.value}' to '{new.value}'"
        )
    if new is TaskStatus.failed and not (failure_reason or "").strip():
        raise TransitionError("A failure reason is required when marking a task as failed")


def derive_work_status(latest_type: Optional[str]) -> WorkStatus:
    if latest_type is None:
        return WorkStatus.idle
    return _STATUS_BY_EVENT[TimeLogType(latest_type)]


def derive_work_status_from_logs(logs: Iterable[Mapping]) -> WorkStatus:
    """``logs`` is newest first, as returned by the time-log listing."""
    for entry in logs:
        return derive_work_status(entry["type"])
    return WorkStatus.idle


def check_time_log_transition(current: WorkStatus, event: TimeLogType) -> None:
    if event not in TIME_LOG_TRANSITIONS[current]:
        raise TransitionError(
            f"Cannot log '{event.value}' while status is '{current.value}'"
        )
