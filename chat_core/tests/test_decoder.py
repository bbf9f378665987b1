import json

from chat_core.streaming.decoder import StreamDecoder, decode_record


def data_line(content):
    return "data: " + json.dumps({"choices": [{"delta": {"content": content}}]}) + "\n"


def test_decode_record_rules():
    assert decode_record("").kind == "ignorable"
    assert decode_record("   ").kind == "ignorable"
    assert decode_record(": ping").kind == "ignorable"
    assert decode_record("event: message").kind == "ignorable"
    assert decode_record("data:{}").kind == "ignorable"
    assert decode_record("data: [DONE]").kind == "terminator"
    assert decode_record("data:  [DONE]  ").kind == "terminator"
    event = decode_record(data_line("Hi").rstrip("\n"))
    assert event.kind == "data"
    assert event.content == "Hi"


def test_decode_record_without_content_is_ignorable():
    assert decode_record('data: {"choices":[{"delta":{"role":"assistant"}}]}').kind == "ignorable"
    assert decode_record('data: {"choices":[{"delta":{"content":""}}]}').kind == "ignorable"
    assert decode_record('data: {"choices":[]}').kind == "ignorable"
    assert decode_record("data: 42").kind == "ignorable"


def test_decode_record_malformed_keeps_record():
    event = decode_record('data: {"choices":[{"delta"')
    assert event.kind == "malformed"
    assert event.record == 'data: {"choices":[{"delta"'


def test_stream_decoder_stops_at_terminator():
    decoder = StreamDecoder()
    feed = data_line("Hi") + "data: [DONE]\n" + data_line("ignored")
    assert decoder.feed(feed) == ["Hi"]
    assert decoder.done
    assert decoder.feed(data_line("late")) == []
    assert decoder.finish() == []


def test_stream_decoder_chunk_boundary_invariance():
    feed = (
        ": comment\n"
        + data_line("Hel")
        + "\r\n"
        + data_line("lo <!--QUICK_")
        + "keep-alive\n"
        + data_line('REPLIES:["Yes","No"]-->')
        + "data: [DONE]\n"
    )
    whole = StreamDecoder()
    expected = whole.feed(feed) + whole.finish()
    assert "".join(expected) == 'Hello <!--QUICK_REPLIES:["Yes","No"]-->'

    for size in (1, 2, 5, 7, 13, 64):
        decoder = StreamDecoder()
        out = []
        for i in range(0, len(feed), size):
            out.extend(decoder.feed(feed[i:i + size]))
        out.extend(decoder.finish())
        assert "".join(out) == "".join(expected)


def test_stream_decoder_rebuffers_malformed_record():
    decoder = StreamDecoder()
    bad = 'data: {"choices": oops\n'
    assert decoder.feed(data_line("a") + bad + data_line("b")) == ["a"]
    assert decoder.malformed_retries == 1
    assert decoder.pending == bad + data_line("b")
    # 重试仍失败，后续内容继续被保留而不是丢弃
    assert decoder.feed(data_line("c")) == []
    assert decoder.pending.startswith(bad)
    assert decoder.finish() == ["b", "c"]
    assert decoder.dropped_records == 1


def test_stream_decoder_finish_handles_unterminated_tail():
    decoder = StreamDecoder()
    tail = data_line("end").rstrip("\n")
    assert decoder.feed(tail) == []
    assert decoder.finish() == ["end"]
    assert decoder.done


def test_stream_decoder_finish_stops_at_terminator_behind_malformed_record():
    decoder = StreamDecoder()
    feed = data_line("Hi") + 'data: {"bad\n' + "data: [DONE]\n" + data_line("ignored")
    assert decoder.feed(feed) == ["Hi"]
    assert not decoder.done
    assert decoder.finish() == []
    assert decoder.done
    assert decoder.dropped_records == 1
