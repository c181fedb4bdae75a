"""Production board: scripts grouped by production status."""

from __future__ import annotations

import time
from typing import Dict, List, Optional

from storage.models import Script, ScriptStatus
from storage.store import LocalStore


def now_ms() -> int:
    return int(time.time() * 1000)


def group_by_status(scripts: List[Script]) -> Dict[str, List[Script]]:
    columns: Dict[str, List[Script]] = {status.value: [] for status in ScriptStatus}
    for script in scripts:
        columns[script.status.value].append(script)
    return columns


async def move_script_service(script_id: str, status: ScriptStatus, store: LocalStore) -> Optional[Script]:
    """Move a card to another column; dropping it on its own column changes nothing."""
    script = await store.get_script(script_id)
    if script is None:
        return None
    if script.status == status:
        return script
    updated = script.model_copy(update={"status": status, "last_modified": now_ms()})
    return await store.save_script(updated)


def dashboard_totals(scripts: List[Script]) -> Dict[str, int]:
    columns = group_by_status(scripts)
    return {
        "total": len(scripts),
        "in_production": sum(
            len(columns[status.value])
            for status in (ScriptStatus.DRAFTING, ScriptStatus.FILMING, ScriptStatus.EDITING)
        ),
        "published": len(columns[ScriptStatus.PUBLISHED.value]),
    }
