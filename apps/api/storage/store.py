"""
Namespaced key-value store for user-authored records.

Each collection is one JSON document under a fixed key. Writes overwrite the
whole collection (read-modify-write, no locking): the last writer wins.
"""

from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from config import settings
from models.store_entry import StoreEntry
from services.crypto import decrypt_token, encrypt_token
from generative.models import StyleDNA
from .models import AutomationEdge, AutomationFlow, AutomationNode, NodeData, NodePosition, Script, UserProfile


SCRIPTS = "scripts"
STYLES = "styles"
PROFILE = "profile"
FLOWS = "flows"

DEFAULT_STYLE = StyleDNA(
    id="default-noir",
    name="Noir Detective",
    tone="Cynical, Slow-paced, Investigatory",
    structure="Cold Open -> Case File -> The Twist -> Conclusion",
    audio_signature="Jazz Noir / Rain Sounds",
    description="Classic investigative journalism with a dark twist.",
)


def default_flow() -> AutomationFlow:
    return AutomationFlow(
        id="flow-1",
        name="Discovery Pipeline",
        active=True,
        nodes=[
            AutomationNode(id="1", type="TRIGGER_TREND", position=NodePosition(x=100, y=150), data=NodeData(label="Daily Trend Scan")),
            AutomationNode(id="2", type="FILTER_STYLE", position=NodePosition(x=450, y=150), data=NodeData(label="Style Match: Noir")),
            AutomationNode(id="3", type="ACTION_SCRIPT", position=NodePosition(x=800, y=150), data=NodeData(label="Draft Script")),
        ],
        edges=[
            AutomationEdge(id="e1-2", source="1", target="2"),
            AutomationEdge(id="e2-3", source="2", target="3"),
        ],
    )


def _upsert(records: List[Any], record: Any) -> List[Any]:
    """Replace the record with the same id in place, or append it."""
    for index, existing in enumerate(records):
        if existing.id == record.id:
            records[index] = record
            return records
    records.append(record)
    return records


class LocalStore:
    """Typed accessors over the ``store_entries`` table."""

    def __init__(self, db: AsyncSession, namespace: Optional[str] = None):
        self.db = db
        self.namespace = namespace or settings.STORE_NAMESPACE

    def key(self, name: str) -> str:
        return f"{self.namespace}_{name}"

    async def read(self, name: str) -> Any:
        result = await self.db.execute(select(StoreEntry).where(StoreEntry.key == self.key(name)))
        entry = result.scalar_one_or_none()
        return entry.value_json if entry else None

    async def write(self, name: str, value: Any) -> None:
        key = self.key(name)
        result = await self.db.execute(select(StoreEntry).where(StoreEntry.key == key))
        entry = result.scalar_one_or_none()
        if entry:
            entry.value_json = value
        else:
            self.db.add(StoreEntry(key=key, value_json=value))
        await self.db.commit()

    # ==================== Scripts ====================

    async def get_scripts(self) -> List[Script]:
        return [Script.model_validate(item) for item in (await self.read(SCRIPTS) or [])]

    async def get_script(self, script_id: str) -> Optional[Script]:
        for script in await self.get_scripts():
            if script.id == script_id:
                return script
        return None

    async def save_script(self, script: Script) -> Script:
        scripts = _upsert(await self.get_scripts(), script)
        await self.write(SCRIPTS, [item.model_dump(mode="json") for item in scripts])
        return script

    async def delete_script(self, script_id: str) -> bool:
        scripts = await self.get_scripts()
        remaining = [item for item in scripts if item.id != script_id]
        await self.write(SCRIPTS, [item.model_dump(mode="json") for item in remaining])
        return len(remaining) != len(scripts)

    # ==================== Styles ====================

    async def get_styles(self) -> List[StyleDNA]:
        data = await self.read(STYLES)
        if data is None:
            return [DEFAULT_STYLE.model_copy()]
        return [StyleDNA.model_validate(item) for item in data]

    async def get_style(self, style_id: str) -> Optional[StyleDNA]:
        for style in await self.get_styles():
            if style.id == style_id:
                return style
        return None

    async def save_style(self, style: StyleDNA) -> StyleDNA:
        styles = _upsert(await self.get_styles(), style)
        await self.write(STYLES, [item.model_dump(mode="json") for item in styles])
        return style

    # ==================== Profile ====================

    async def get_user_profile(self) -> Optional[UserProfile]:
        data = await self.read(PROFILE)
        if not data:
            return None
        profile = UserProfile.model_validate(data)
        if profile.access_token:
            profile.access_token = decrypt_token(profile.access_token)
        return profile

    async def save_user_profile(self, profile: UserProfile) -> UserProfile:
        payload = profile.model_dump(mode="json")
        if profile.access_token:
            payload["access_token"] = encrypt_token(profile.access_token)
        await self.write(PROFILE, payload)
        return profile

    # ==================== Automation flows ====================

    async def get_flows(self) -> List[AutomationFlow]:
        data = await self.read(FLOWS)
        if data is None:
            return [default_flow()]
        return [AutomationFlow.model_validate(item) for item in data]

    async def save_flow(self, flow: AutomationFlow) -> AutomationFlow:
        flows = _upsert(await self.get_flows(), flow)
        await self.write(FLOWS, [item.model_dump(mode="json") for item in flows])
        return flow

    async def delete_flow(self, flow_id: str) -> bool:
        flows = await self.get_flows()
        remaining = [item for item in flows if item.id != flow_id]
        await self.write(FLOWS, [item.model_dump(mode="json") for item in remaining])
        return len(remaining) != len(flows)
