"""Append-only task status ledger."""

from __future__ import annotations

from pyfleet.models.ledger import TaskStatusRecord


class StatusLedger:
    """Append-only log of task status transitions.

    Records only reference tasks by id. They are never modified; the
    only removal path is :meth:`purge`, used when a task is deleted.
    """

    def __init__(self) -> None:
        self._records: list[TaskStatusRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def append(self, record: TaskStatusRecord) -> TaskStatusRecord:
        self._records.append(record)
        return record

    def history(self, task_id: str) -> list[TaskStatusRecord]:
        """Records for *task_id*, most recent first.

        The sort is stable: records with equal timestamps keep their
        insertion order.
        """
        matching = [record for record in self._records if record.task_id == task_id]
        return sorted(matching, key=lambda record: record.timestamp, reverse=True)

    def records(self) -> list[TaskStatusRecord]:
        return list(self._records)

    def purge(self, task_id: str) -> int:
        """Drop every record of *task_id*; return how many were dropped."""
        kept = [record for record in self._records if record.task_id != task_id]
        dropped = len(self._records) - len(kept)
        self._records = kept
        return dropped
