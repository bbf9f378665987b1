from chat_core.domain.conversation import ConversationState
from chat_core.streaming.assembler import AssemblerState, AssistantMessageAssembler


def test_assembler_state_machine():
    asm = AssistantMessageAssembler(reply_id="r1")
    assert asm.state is AssemblerState.IDLE
    assert asm.finalize() is None
    asm.reset("r2")
    assert asm.reply_id == "r2"
    assert asm.state is AssemblerState.IDLE
    view = asm.append("Hi")
    assert asm.state is AssemblerState.STREAMING
    assert view.clean_content == "Hi"
    assert asm.finalize() == view
    assert asm.state is AssemblerState.FINALIZED
    assert asm.append(" late") is None
    assert asm.running_text == "Hi"


def test_assembler_publishes_whole_text_view():
    published = []
    asm = AssistantMessageAssembler(reply_id="r1", on_update=lambda rid, v: published.append((rid, v)))
    asm.append("Hello ")
    asm.append("there<!--QUICK_")
    asm.append('REPLIES:["Yes",')
    asm.append('"No"]-->')
    assert [rid for rid, _ in published] == ["r1"] * 4
    assert published[1][1].clean_content == "Hello there<!--QUICK_"
    last = published[-1][1]
    assert last.clean_content == "Hello there"
    assert last.quick_replies == ["Yes", "No"]


def test_single_in_place_assistant_message():
    state = ConversationState()
    state.append_user("hi")
    asm = AssistantMessageAssembler(on_update=state.upsert_assistant)
    fragments = ["One ", "two ", "three"]
    for fragment in fragments:
        asm.append(fragment)
    matching = [m for m in state.messages if m.id == asm.reply_id]
    assert len(matching) == 1
    assert matching[0].role == "assistant"
    assert matching[0].content == "One two three"
    assert len(state) == 2
