from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

READ = "read"
WRITE = "write"


@dataclass(frozen=True)
class Request:
    request_id: int
    op: str
    tag: str
    data: Any = None
    timestamp_ms: Optional[int] = None

    @property
    def is_write(self) -> bool:
        return self.op == WRITE
