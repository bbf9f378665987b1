from chat_core.streaming.quick_replies import extract_quick_replies


def test_extract_strips_annotation():
    view = extract_quick_replies('Hello there<!--QUICK_REPLIES:["Yes","No"]-->')
    assert view.clean_content == "Hello there"
    assert view.quick_replies == ["Yes", "No"]


def test_extract_without_annotation():
    view = extract_quick_replies("  just text  ")
    assert view.clean_content == "  just text  "
    assert view.quick_replies == []


def test_extract_invalid_json_keeps_text():
    text = 'Pick one<!--QUICK_REPLIES:["Yes","No"]]-->'
    view = extract_quick_replies(text)
    assert view.clean_content == text
    assert view.quick_replies == []


def test_extract_non_string_elements_keeps_text():
    text = "Numbers<!--QUICK_REPLIES:[1,2]-->"
    view = extract_quick_replies(text)
    assert view.clean_content == text
    assert view.quick_replies == []


def test_extract_incomplete_marker_is_not_stripped():
    text = 'Hi<!--QUICK_REPLIES:["Yes"'
    assert extract_quick_replies(text).clean_content == text


def test_extract_first_marker_only_and_trims():
    text = 'Hi\n<!--QUICK_REPLIES:["A"]--> more <!--QUICK_REPLIES:["B"]-->'
    view = extract_quick_replies(text)
    assert view.quick_replies == ["A"]
    assert view.clean_content == 'Hi\n more <!--QUICK_REPLIES:["B"]-->'


def test_extract_is_idempotent():
    text = 'Sure!\n\n<!--QUICK_REPLIES:["Show me more","Thanks"]-->\n'
    assert extract_quick_replies(text) == extract_quick_replies(text)
    assert extract_quick_replies(text).clean_content == "Sure!"
