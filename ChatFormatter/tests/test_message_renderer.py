from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from ChatFormatter import message_renderer
from ChatFormatter.content_detector import ContentShape
from ChatFormatter.message_renderer import format_message, render_message_text, render_preview_page

PRODUCT_RESPONSE = (
    "Here are some sleeper sofas you might like:\\n\\n"
    "1. **Aria Sleeper Sofa**\\nA deep sectional with a pull-out bed.\\n"
    "Available in Blue, Red, and Green\\nMade of solid oak\\n\\n"
    "2. **Luna Sleeper** **4417**\\n- Color options include grey and white\\n- Comes with two pillows\\n\\n"
    "Let me know if you would like more details!"
)


def _soup(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, "html.parser")


@pytest.mark.parametrize("raw", [None, "", "   ", "\\n\\n"])
def test_empty_input_returns_empty_string(raw):
    assert format_message(raw) == ""


@pytest.mark.parametrize(
    "raw",
    [
        "1.",
        "**",
        "1. **",
        "**1.**\n",
        "- ",
        "#",
        "# ",
        "1. \n2. \n3. ",
        "• ",
        "**Sofa** is **great",
        12345,
        "Dimensions: 80 x 35. Available in Blue",
        "`unterminated code",
    ],
)
def test_never_raises(raw):
    assert isinstance(format_message(raw), str)


def test_product_listing():
    markup = format_message(PRODUCT_RESPONSE)
    soup = _soup(markup)

    assert "\\n" not in markup
    assert soup.find("p", class_="mb-3").get_text() == "Here are some sleeper sofas you might like:"
    assert soup.find("p", class_="mt-3").get_text() == "Let me know if you would like more details!"
    titles = [h4.get_text() for h4 in soup.find_all("h4")]
    assert titles == ["1. Aria Sleeper Sofa", "2. Luna Sleeper"]
    assert "Blue, Red, and Green" in markup
    assert "<strong>4417</strong>" in markup
    keys = [span.get_text() for span in soup.find_all("span", class_="feature-key")]
    assert keys == ["Available Sizes:", "Color Options:", "Includes:"]
    descriptions = [p.get_text() for p in soup.find_all("p", class_="feature-description")]
    assert descriptions == ["A deep sectional with a pull-out bed.", "Made of solid oak"]


def test_numbered_order_preserved_for_each_strategy():
    samples = [
        "Tips:\n1. Drink water\n2. Sleep well\n3. Walk daily",
        "Tips:\n**1.**\nDrink water\n**2.**\nSleep well\n**3.**\nWalk daily",
        "Tips: 1. **Drink** water 2. **Sleep** well 3. **Walk** daily",
    ]
    for sample in samples:
        markup = format_message(sample)
        positions = [markup.index(word) for word in ("Drink", "Sleep", "Walk")]
        assert positions == sorted(positions), sample


def test_product_body_text_is_never_dropped():
    markup = format_message("Sofas:\n1. **Aria**\nPerfect size for small apartments\nAvailable in Blue")
    assert "Perfect size for small apartments" in markup


def test_bullets_after_last_item_go_to_conclusion():
    soup = _soup(format_message("Tips:\n1. Drink water\n2. Sleep well\n\n- Stay consistent\n\nThanks!"))
    container = soup.find("div", class_="list-container")
    assert [p.get_text() for p in container.find_all("p")] == ["1. Drink water", "2. Sleep well"]
    assert "Stay consistent" in soup.find("p", class_="mt-3").get_text()


def test_generic_numbered_list_uses_list_container():
    soup = _soup(format_message("Tips:\n1. Drink water\n2. Sleep well"))
    container = soup.find("div", class_="list-container")
    assert [p.get_text() for p in container.find_all("p")] == ["1. Drink water", "2. Sleep well"]


def test_bullet_only_input():
    soup = _soup(format_message("- First point\n- Second point"))
    lists = soup.find_all("ul")
    assert len(lists) == 1
    assert [li.get_text() for li in lists[0].find_all("li")] == ["First point", "Second point"]


def test_heading_input():
    soup = _soup(format_message("# Title\n\nBody text"))
    heading = soup.find("h1")
    paragraph = soup.find("p")
    assert heading.get_text() == "Title"
    assert paragraph.get_text() == "Body text"
    assert heading.find_next("p") is paragraph


def test_plain_text_input():
    soup = _soup(format_message("Hello there!\nHow can I help?"))
    assert soup.find("p").decode_contents() == "Hello there!<br/>How can I help?"


def test_markup_in_input_is_not_escaped():
    assert "<b>bold</b>" in format_message("Keep <b>bold</b> text")


def test_round_trip_formatting():
    for raw in (PRODUCT_RESPONSE, "- First point\n- Second point", "# Title\n\nBody text"):
        once = format_message(raw)
        twice = format_message(once)
        assert isinstance(twice, str)
        assert twice


def test_container_theme_and_options():
    markup = format_message("Hi", {"theme": "dark", "accentColor": "#ff0000", "fontClass": "font-serif"})
    container = _soup(markup).find("div")
    classes = container["class"]
    assert "chat-response" in classes
    assert "font-serif" in classes
    assert "animate-fade-in" in classes
    assert "#111827" in container["style"]
    assert "#ff0000" in container["style"]


def test_container_without_animations():
    container = _soup(format_message("Hi", {"enableAnimations": False})).find("div")
    assert "animate-fade-in" not in container["class"]


def test_unexpected_renderer_error_falls_back_to_plain_text(monkeypatch):
    def broken(text, profile, palette):
        raise RuntimeError("boom")

    monkeypatch.setitem(message_renderer.SHAPE_RENDERERS, ContentShape.BULLET_LIST, broken)
    markup = format_message("- First point")
    assert '<p class="mb-2">- First point</p>' in markup


def test_unsegmentable_numbered_text_falls_back_to_plain_text():
    markup = format_message("version1. is out")
    assert _soup(markup).find("p").get_text() == "version1. is out"


def test_render_message_text():
    text = render_message_text(format_message("Intro\n\n- First point\n- Second point"))
    assert text == "Intro\n- First point\n- Second point\n"


def test_render_message_text_product_rows():
    text = render_message_text(format_message(PRODUCT_RESPONSE))
    assert "1. Aria Sleeper Sofa" in text
    assert "Available Sizes: Blue, Red, and Green" in text
    assert "- Includes: two pillows" in text


def test_render_message_text_empty():
    assert render_message_text("") == ""


def test_render_preview_page():
    page = render_preview_page(format_message("Hello"), title="Preview <1>")
    assert page.startswith("<!DOCTYPE html>")
    assert "<title>Preview &lt;1&gt;</title>" in page
    assert ".chat-response" in page
    assert '<p class="mb-2">Hello</p>' in page
