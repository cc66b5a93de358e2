from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class NoopTransport:
    kind: str = "noop"
    reason: str | None = None

    async def complete(self, payload: dict[str, Any]) -> dict[str, Any]:
        _ = payload
        return {}
