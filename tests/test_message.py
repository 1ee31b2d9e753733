from ChatMarkup.config import RenderOptions
from ChatMarkup.message import build_message_content


def test_plain_message_has_no_formatted_body():
    assert build_message_content("hello") == {"msgtype": "m.text", "body": "hello"}


def test_markup_adds_formatted_body():
    content = build_message_content("**hi**")
    assert content == {
        "msgtype": "m.text",
        "body": "**hi**",
        "format": "org.matrix.custom.html",
        "formatted_body": "<strong>hi</strong>",
    }


def test_options_reach_renderer():
    content = build_message_content("a < b", RenderOptions(escape_html=True))
    assert content["body"] == "a < b"
    assert content["formatted_body"] == "a &lt; b"
