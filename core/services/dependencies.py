"""
Delete-dependency reporting shared by doctors and procedures.

A parent row can have *cascade* dependents (removed together with it)
and *blocking* dependents (the delete is refused unless forced, in which
case their foreign keys are cleared first).
"""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class DeleteReport:
    entity: str
    cascade_records: list[str] = field(default_factory=list)
    blocking_records: list[str] = field(default_factory=list)

    def add(self, count: int, label: str, *, cascade: bool) -> None:
        if count <= 0:
            return
        target = self.cascade_records if cascade else self.blocking_records
        target.append(f'{count} {label}')

    @property
    def can_delete(self) -> bool:
        return not self.blocking_records

    @property
    def is_warning(self) -> bool:
        return bool(self.cascade_records) and self.can_delete

    @property
    def message(self) -> str:
        if self.blocking_records:
            return f"Cannot delete {self.entity}. It is referenced by: {', '.join(self.blocking_records)}."
        if self.cascade_records:
            return f"Deleting this {self.entity} will also delete: {', '.join(self.cascade_records)}."
        return f'This {self.entity} has no dependent records and can be deleted.'

    def as_dict(self) -> dict:
        return {
            'canDelete': self.can_delete,
            'canForceDelete': bool(self.blocking_records),
            'isWarning': self.is_warning,
            'blockingRecords': list(self.blocking_records),
            'cascadeRecords': list(self.cascade_records),
            'message': self.message,
        }
