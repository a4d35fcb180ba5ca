from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Punch:
    """One raw time-clock event as exported by the biometric device."""

    employee_id: int
    biometric_id: str
    timestamp: datetime
    device_id: Optional[str] = None
    status: Optional[str] = None
    type: Optional[str] = None


@dataclass(frozen=True)
class PunchImportResult:
    saved: int
    skipped: int
    errors: list[str] = field(default_factory=list)
    created: int = 0
    updated: int = 0

    @property
    def message(self) -> str:
        msg = f"Import completed. {self.saved} punches saved, {self.skipped} duplicates skipped"
        if self.saved:
            msg += f"; {self.created} attendance records created, {self.updated} updated"
        if self.errors:
            msg += f". {len(self.errors)} errors occurred."
        return msg
