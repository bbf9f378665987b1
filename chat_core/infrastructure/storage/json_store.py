import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, List, Optional
from uuid import uuid4

from chat_core.config.settings import settings
from chat_core.domain.conversation import ActivityStore
from chat_core.domain.exceptions import BusinessError

SAVED_ITEMS = "saved_items"
CHECK_INS = "check_ins"
CALENDAR_EVENTS = "calendar_events"


def _iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class JsonActivityStore(ActivityStore):
    """基于 JSON Lines 文件的用户活动存储。

    目录结构: <root>/users/<user_id>/{saved_items,check_ins,calendar_events}.jsonl
    """

    def __init__(self, root: str | Path | None = None):
        self._root = Path(root or settings.storage_root).resolve()
        self._users_root = self._root / "users"
        self._users_root.mkdir(parents=True, exist_ok=True)

    # ---- 写入 ----

    def add_saved_item(self, user_id: str, activity: Dict[str, Any]) -> Dict[str, Any]:
        record = {
            "id": f"s-{uuid4().hex}",
            "activity": dict(activity),
            "created_at": _iso(datetime.now(timezone.utc)),
        }
        self._append(user_id, SAVED_ITEMS, record)
        return record

    def add_check_in(
        self,
        user_id: str,
        activity: Dict[str, Any],
        rating: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        record = {
            "id": f"ci-{uuid4().hex}",
            "activity": dict(activity),
            "rating": rating,
            "created_at": _iso(created_at or datetime.now(timezone.utc)),
        }
        self._append(user_id, CHECK_INS, record)
        return record

    def add_calendar_event(
        self,
        user_id: str,
        event_date: str,
        title: Optional[str] = None,
        event_time: Optional[str] = None,
        activity: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        record = {
            "id": f"ev-{uuid4().hex}",
            "title": title,
            "event_date": event_date,
            "event_time": event_time,
            "activity": dict(activity) if activity else None,
        }
        self._append(user_id, CALENDAR_EVENTS, record)
        return record

    # ---- 查询 ----

    def list_saved_items(self, user_id: str, limit: int) -> List[Dict[str, Any]]:
        return self._read(user_id, SAVED_ITEMS)[:limit]

    def list_check_ins(self, user_id: str, limit: int) -> List[Dict[str, Any]]:
        items = self._read(user_id, CHECK_INS)
        items.sort(key=lambda r: str(r.get("created_at") or ""), reverse=True)
        return items[:limit]

    def list_calendar_events(self, user_id: str, limit: int) -> List[Dict[str, Any]]:
        items = self._read(user_id, CALENDAR_EVENTS)
        items.sort(key=lambda r: str(r.get("event_date") or ""))
        return items[:limit]

    # ---- 内部 ----

    def _path(self, user_id: str, kind: str) -> Path:
        return self._users_root / user_id / f"{kind}.jsonl"

    def _append(self, user_id: str, kind: str, record: Dict[str, Any]) -> None:
        path = self._path(user_id, kind)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(record, ensure_ascii=False) + "\n")
        except OSError as e:
            raise BusinessError(code="STORE_WRITE_ERROR", message=str(e))

    def _read(self, user_id: str, kind: str) -> List[Dict[str, Any]]:
        path = self._path(user_id, kind)
        items: List[Dict[str, Any]] = []
        if not path.exists():
            return items
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise BusinessError(code="STORE_READ_ERROR", message=str(e))
        for line in lines:
            try:
                data = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(data, dict):
                items.append(data)
        return items
