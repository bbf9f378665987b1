import json

from chat_core.api import service
from chat_core.session.orchestrator import ChatSession


class FakeTransport:
    name = "fake"

    def stream_chat(self, turns, user_context, access_token=None):
        yield "data: " + json.dumps({"choices": [{"delta": {"content": 'Hi!<!--QUICK_REPLIES:["Hey"]-->'}}]}) + "\n"
        yield "data: [DONE]\n"


def test_service_send_and_clear(monkeypatch):
    monkeypatch.setattr(service, "_session", ChatSession(FakeTransport()))
    reply = service.send_message("hello")
    assert reply["role"] == "assistant"
    assert reply["content"] == "Hi!"
    assert reply["quick_replies"] == ["Hey"]
    assert [m["role"] for m in service.list_messages()] == ["user", "assistant"]
    service.clear_conversation()
    assert service.list_messages() == []


def test_service_blank_message(monkeypatch):
    monkeypatch.setattr(service, "_session", ChatSession(FakeTransport()))
    assert service.send_message("  ") is None
