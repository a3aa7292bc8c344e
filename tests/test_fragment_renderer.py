from __future__ import annotations

from refmark.converter.base import Node
from refmark.converter.html_converter import convert_html
from refmark.renderer.fragment_renderer import FragmentRenderer, FragmentType, split_sentences

SENTENCE_1 = (
    "Suspected militants armed with rocket-propelled grenades struck two buses carrying security "
    "forces and killed the soldiers in the city of Rafah, on the border between Egypt and Gaza, "
    "state-run Nile TV reported."
)
SENTENCE_2 = (
    "The Sinai Peninsula is a lawless area that was the site of frequent attacks even before "
    "Egypt's latest round of turmoil."
)
SENTENCE_3 = (
    "In May, for example, seven Egyptian solders were kidnapped and held for six days there, "
    "a spokesman for Egypt's armed forces said."
)
SENTENCE_4 = (
    "But the attack adds to the persistent tension across the country since the military ousted "
    "democratically elected President Mohamed Morsy in a coup."
)


def test_fragments_from_paragraph_events() -> None:
    writer = FragmentRenderer("Hello World")
    writer.open()
    for line in (SENTENCE_1 + SENTENCE_2, SENTENCE_3 + SENTENCE_4):
        node = Node("p", line)
        writer.on_open(node)
        writer.on_text(node)
        writer.on_close(node)
    writer.close()

    assert len(writer.get_fragments(FragmentType.PARAGRAPH)) == 2
    assert len(writer.get_fragments(FragmentType.SENTENCE)) == 4
    assert len(writer.get_fragments(FragmentType.BODY)) == 1


def test_default_title() -> None:
    writer = FragmentRenderer("Hello World")
    writer.open()
    writer.close()

    titles = writer.get_fragments(FragmentType.TITLE)
    assert len(titles) == 1
    assert titles[0].type is FragmentType.TITLE
    assert titles[0].text == "Hello World"


def test_title_from_head() -> None:
    html = (
        "<html><head><title>Doc Title</title><meta name=\"title\" content=\"Meta Title\"></head>"
        "<body><p>Hello there. General Kenobi!</p></body></html>"
    )
    writer = FragmentRenderer("Fallback")
    convert_html([writer], html)

    assert [f.text for f in writer.get_fragments(FragmentType.TITLE)] == ["Doc Title", "Meta Title"]
    assert [f.text for f in writer.get_fragments(FragmentType.BODY)] == ["Hello there. General Kenobi!"]
    assert [f.text for f in writer.get_fragments(FragmentType.SENTENCE)] == ["Hello there.", " General Kenobi!"]


def test_split_sentences() -> None:
    assert len(split_sentences(SENTENCE_1, 3)) == 1
    assert len(split_sentences(SENTENCE_1 + SENTENCE_2[:-1], 3)) == 2
    assert len(split_sentences(SENTENCE_1 + SENTENCE_2 + SENTENCE_3 + SENTENCE_4, 3)) == 4


def test_split_sentences_drops_short_pieces() -> None:
    assert split_sentences("Hi.Ok!This one stays.", 3) == ["This one stays."]
