"""用户上下文构建。

在每次发送前收集位置、昵称以及（已登录时）收藏、最近打卡、日历事件，
组装成随请求发送的 userContext。每一项都可以缺失，单项查询失败只记日志。
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from chat_core.config.settings import settings
from chat_core.domain.conversation import ActivityStore, LocationProvider, ProfileProvider
from chat_core.domain.exceptions import BusinessError
from chat_core.infrastructure.logging.logger import log_event


def _activity(record: Dict[str, Any]) -> Dict[str, Any]:
    activity = record.get("activity")
    return activity if isinstance(activity, dict) else {}


def _as_date(value: Any) -> Optional[str]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return str(value)


class UserContextBuilder:
    def __init__(
        self,
        location_provider: Optional[LocationProvider] = None,
        profile_provider: Optional[ProfileProvider] = None,
        activity_store: Optional[ActivityStore] = None,
        user_id: Optional[str] = None,
        cfg=settings,
    ):
        self._location_provider = location_provider
        self._profile_provider = profile_provider
        self._activity_store = activity_store
        self.user_id = user_id
        self._settings = cfg

    def build(self) -> Dict[str, Any]:
        ctx: Dict[str, Any] = {}

        location = self._lookup("location", self._location_provider.get_location) if self._location_provider else None
        if location:
            ctx["location"] = location

        profile = self._lookup("profile", self._profile_provider.get_profile) if self._profile_provider else None
        if profile and profile.get("name"):
            ctx["userName"] = profile["name"]

        if not (self.user_id and self._activity_store):
            return ctx

        saved = self._saved_activities()
        if saved:
            ctx["savedActivities"] = saved
        check_ins = self._recent_check_ins()
        if check_ins:
            ctx["recentCheckIns"] = check_ins
        events = self._calendar_events()
        if events:
            ctx["calendarEvents"] = events
        return ctx

    def _saved_activities(self) -> List[Dict[str, Any]]:
        limit = getattr(self._settings, "saved_items_limit", 20)
        rows = self._lookup("saved_items", lambda: self._activity_store.list_saved_items(self.user_id, limit)) or []
        items = []
        for row in rows[:limit]:
            activity = _activity(row)
            if activity.get("name"):
                items.append({"name": activity.get("name"), "category": activity.get("category")})
        return items

    def _recent_check_ins(self) -> List[Dict[str, Any]]:
        limit = getattr(self._settings, "check_ins_limit", 15)
        rows = self._lookup("check_ins", lambda: self._activity_store.list_check_ins(self.user_id, limit)) or []
        items = []
        for row in rows[:limit]:
            activity = _activity(row)
            if not activity.get("name"):
                continue
            items.append(
                {
                    "activity_name": activity.get("name"),
                    "category": activity.get("category"),
                    "rating": row.get("rating"),
                    "date": _as_date(row.get("created_at")),
                }
            )
        return items

    def _calendar_events(self) -> List[Dict[str, Any]]:
        limit = getattr(self._settings, "calendar_events_limit", 20)
        rows = self._lookup("calendar_events", lambda: self._activity_store.list_calendar_events(self.user_id, limit)) or []
        items = []
        for row in rows[:limit]:
            activity = _activity(row)
            items.append(
                {
                    "title": row.get("title") or activity.get("name"),
                    "date": row.get("event_date"),
                    "time": row.get("event_time"),
                    "category": activity.get("category"),
                }
            )
        return items

    def _lookup(self, source: str, fetch: Callable[[], Any]) -> Any:
        try:
            return fetch()
        except BusinessError as e:
            log_event(
                logging.WARNING,
                "User context lookup failed",
                {"user_id": self.user_id},
                source=source,
                code=e.code,
                error=e.message,
            )
            return None
        except Exception as e:
            log_event(
                logging.WARNING,
                "User context lookup failed",
                {"user_id": self.user_id},
                source=source,
                code="CONTEXT_LOOKUP_ERROR",
                error=str(e),
            )
            return None
