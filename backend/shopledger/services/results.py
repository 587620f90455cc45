from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of a ledger command that changed in-memory state.

    warnings carries persistence failures; the command itself still succeeded.
    """
    value: Any = None
    warnings: tuple[str, ...] = ()

    @property
    def persisted(self) -> bool:
        return not self.warnings
