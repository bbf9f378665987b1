from chat_core.domain.conversation import ConversationState
from chat_core.domain.models import MessageView


def test_conversation_state_upsert_and_turns():
    state = ConversationState()
    user = state.append_user("hello")
    assert user.role == "user"
    assert user.id.startswith("m-")
    first = state.upsert_assistant("r1", MessageView("Hi", []))
    second = state.upsert_assistant("r1", MessageView("Hi there", ["Ok"]))
    assert first.timestamp == second.timestamp
    assert len(state) == 2
    assert state.get("r1").content == "Hi there"
    assert state.get("r1").quick_replies == ["Ok"]
    assert state.to_turns() == [
        {"role": "user", "content": "hello"},
        {"role": "assistant", "content": "Hi there"},
    ]


def test_conversation_state_other_messages_untouched():
    state = ConversationState()
    user = state.append_user("q1")
    state.upsert_assistant("r1", MessageView("a1", []))
    state.append_user("q2")
    state.upsert_assistant("r1", MessageView("a1 edited", []))
    assert state.messages[0] is user
    assert [m.content for m in state.messages] == ["q1", "a1 edited", "q2"]


def test_conversation_state_clear():
    state = ConversationState()
    state.append_user("x")
    state.clear()
    assert state.messages == ()
    assert state.get("missing") is None
