"""从助手文本中提取快捷回复标注。

标注由后端追加在生成文本末尾，形如::

    <!--QUICK_REPLIES:["Yes","No"]-->

标注本身可能被切分在多个增量里，因此每次都对完整的累积文本重新提取。
"""

import json
import re

from chat_core.domain.models import MessageView

MARKER_PREFIX = "<!--QUICK_REPLIES:"
QUICK_REPLIES_PATTERN = re.compile(r"<!--QUICK_REPLIES:\[(.+?)\]-->")


def extract_quick_replies(text: str) -> MessageView:
    if MARKER_PREFIX not in text:
        return MessageView(clean_content=text, quick_replies=[])
    match = QUICK_REPLIES_PATTERN.search(text)
    if match is None:
        return MessageView(clean_content=text, quick_replies=[])
    try:
        replies = json.loads(f"[{match.group(1)}]")
    except json.JSONDecodeError:
        return MessageView(clean_content=text, quick_replies=[])
    if not all(isinstance(r, str) for r in replies):
        return MessageView(clean_content=text, quick_replies=[])
    clean = (text[:match.start()] + text[match.end():]).strip()
    return MessageView(clean_content=clean, quick_replies=replies)
