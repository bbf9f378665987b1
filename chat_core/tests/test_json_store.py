import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

from chat_core.infrastructure.storage.json_store import JsonActivityStore


def test_json_store_saved_items_limit():
    with tempfile.TemporaryDirectory() as d:
        store = JsonActivityStore(root=Path(d) / ".storage")
        for i in range(3):
            store.add_saved_item("u1", {"name": f"Hike {i}", "category": "outdoor"})
        items = store.list_saved_items("u1", limit=2)
        assert [i["activity"]["name"] for i in items] == ["Hike 0", "Hike 1"]
        assert store.list_saved_items("someone-else", limit=5) == []


def test_json_store_ordering():
    with tempfile.TemporaryDirectory() as d:
        store = JsonActivityStore(root=Path(d) / ".storage")
        now = datetime.now(timezone.utc)
        store.add_check_in("u1", {"name": "Old"}, rating=3, created_at=now - timedelta(days=2))
        store.add_check_in("u1", {"name": "New"}, rating=5, created_at=now)
        store.add_calendar_event("u1", "2026-12-01", title="Later")
        store.add_calendar_event("u1", "2026-11-01", activity={"name": "Sooner", "category": "food"})
        assert [c["activity"]["name"] for c in store.list_check_ins("u1", limit=10)] == ["New", "Old"]
        events = store.list_calendar_events("u1", limit=10)
        assert [e["event_date"] for e in events] == ["2026-11-01", "2026-12-01"]


def test_json_store_skips_corrupt_lines():
    with tempfile.TemporaryDirectory() as d:
        root = Path(d) / ".storage"
        store = JsonActivityStore(root=root)
        store.add_saved_item("u1", {"name": "Museum"})
        path = root / "users" / "u1" / "saved_items.jsonl"
        with path.open("a", encoding="utf-8") as f:
            f.write("{not json\n")
        assert len(store.list_saved_items("u1", limit=10)) == 1
