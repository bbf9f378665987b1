"""Minimal demonstration of a streaming chat session."""

from chat_core.api.service import get_default_session

if __name__ == "__main__":
    session = get_default_session()
    question = "What can I do this weekend?"
    reply = session.send_message(question)
    print("User:", question)
    if reply is None:
        print("Assistant: (no reply, see logs/chat.log)")
    else:
        print("Assistant:", reply.content)
        for option in reply.quick_replies:
            print("  ->", option)
