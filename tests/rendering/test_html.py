"""
Tests for the HTML gloss view.
"""

from conftest import punct, word
from hwaet.core.models import Source, Token
from hwaet.rendering.html import dictionary_links, render_html


def test_words_punctuation_and_breaks():
    tokens = [word("Hwæt"), punct(","), Token.line_break(), word("wē", isFlagged=True)]

    html = render_html(tokens, title="Beowulf")

    assert "<title>Beowulf</title>" in html
    assert 'class="word px-1 -mr-1.5" data-index="0">Hwæt' in html
    assert 'class="punct mr-1.5">,</span>' in html
    assert '<span class="line-break w-full h-4 block basis-full"></span>' in html
    assert 'flagged" data-index="3"' in html


def test_values_are_escaped():
    html = render_html([word("<b>", lemma="a&b")])

    assert "&lt;b&gt;" in html
    assert "a&amp;b" in html


def test_quotes_marked_with_role():
    html = render_html([punct('"'), word("hē"), punct('"')])

    assert 'data-quote="open"' in html
    assert 'data-quote="close"' in html


def test_sources_rendered():
    token = word("cwæð", sources=[Source(title="BT", uri="https://bosworthtoller.com/1")])

    html = render_html([token])

    assert 'href="https://bosworthtoller.com/1">BT</a>' in html


def test_dictionary_links():
    links = dictionary_links("cweþan")

    assert links["Bosworth-Toller"] == "https://bosworthtoller.com/search?q=cwe%C3%BEan"
    assert links["Wiktionary"] == "https://en.wiktionary.org/wiki/cwe%C3%BEan#Old_English"
