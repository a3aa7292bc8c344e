"""Tests for editing references and regenerating Markdown.

Covers:
- URL changes, single removals and dead reference pruning
- Regenerated Markdown (section spacing, footer order)
- Round trip from HTML through the Markdown renderer and back
"""

from __future__ import annotations

from refmark.converter.html_converter import convert_html
from refmark.parser.base import ReferenceType
from refmark.parser.md_parser import MarkdownDocument, citation_pattern
from refmark.renderer.markdown_renderer import MarkdownRenderer

ARTICLE = """\
#Drakengard 3 delayed#

![Square Enix][1]

Square Enix is shifting the release date, according to its [official website][2].

- [Trailer][3]
- [Interview][4]

The title was [first confirmed][3] in March.

  [1]: http://img.example.com/drakengard.jpg
  [2]: http://www.jp.square-enix.com/
  [3]: http://www.example.com/trailer
  [4]: http://www.example.com/interview
"""

EMPTY_LINKS = """\
Read the [][1] story on [the site][2].

![][3]

  [1]: http://a.com
  [2]: http://b.com
  [3]: http://c.com/img.png
"""


def _has_citation(doc: MarkdownDocument, ref_id: int) -> bool:
    return any(
        citation_pattern(ref_id, kind).search(section.raw)
        for section in doc.sections
        for kind in ("image", "link")
    )


# ---------------------------------------------------------------------------
# Regeneration
# ---------------------------------------------------------------------------

def test_markdown_regenerates_unchanged_document() -> None:
    assert MarkdownDocument(ARTICLE).markdown == ARTICLE


def test_markdown_lists_footer_in_ascending_id_order() -> None:
    doc = MarkdownDocument("[x][1] [y][2]\n\n  [2]: http://b.com\n  [1]: http://a.com")
    assert doc.markdown == "[x][1] [y][2]\n\n  [1]: http://a.com\n  [2]: http://b.com\n"


def test_markdown_of_footer_only_document_is_trimmed() -> None:
    doc = MarkdownDocument("\n\n  [1]: http://a.com\n")
    assert doc.markdown == "[1]: http://a.com\n"


def test_clean_text() -> None:
    doc = MarkdownDocument("#Title#\n\nSee [the site][1].\n\n  [1]: http://a.com")
    assert doc.clean == "Title\n\nSee the site.\n\n"


# ---------------------------------------------------------------------------
# Mutation
# ---------------------------------------------------------------------------

def test_set_url_only_changes_the_footer_line() -> None:
    doc = MarkdownDocument(ARTICLE)
    doc.set_url(3, "http://www.thinkingmedia.ca/logo.png")

    before = ARTICLE.splitlines()
    after = doc.markdown.splitlines()
    changed = [(b, a) for b, a in zip(before, after) if b != a]

    assert len(before) == len(after)
    assert changed == [("  [3]: http://www.example.com/trailer", "  [3]: http://www.thinkingmedia.ca/logo.png")]
    assert "[first confirmed][3]" in doc.markdown


def test_set_url_ignores_unknown_ids() -> None:
    doc = MarkdownDocument(ARTICLE)
    doc.set_url(42, "http://nowhere.example.com")
    assert doc.markdown == ARTICLE


def test_remove_link_keeps_title() -> None:
    doc = MarkdownDocument("This is a paragraph with a [cnn][1] inside it.\n\n  [1]: http://cnn.com")
    doc.remove(1)

    assert doc.sections[0].raw == "This is a paragraph with a cnn inside it."
    assert doc.references == {}
    assert doc.markdown == "This is a paragraph with a cnn inside it.\n"


def test_remove_rewrites_every_section() -> None:
    doc = MarkdownDocument(ARTICLE)
    doc.remove(3)

    assert not _has_citation(doc, 3)
    assert "  [3]:" not in doc.markdown
    assert "- Trailer\n- [Interview][4]" in doc.markdown
    assert "The title was first confirmed in March." in doc.markdown
    assert sorted(doc.references) == [1, 2, 4]


def test_remove_image_drops_empty_section() -> None:
    doc = MarkdownDocument(ARTICLE)
    doc.remove(1)

    assert "Square Enix][1]" not in doc.markdown
    assert doc.markdown.startswith("#Drakengard 3 delayed#\n\nSquare Enix is shifting")


def test_remove_several_references() -> None:
    doc = MarkdownDocument(ARTICLE)
    for ref_id in (1, 2, 3, 4):
        doc.remove(ref_id)

    assert doc.references == {}
    assert doc.markdown == (
        "#Drakengard 3 delayed#\n\n"
        "Square Enix is shifting the release date, according to its official website.\n\n"
        "- Trailer\n- Interview\n\n"
        "The title was first confirmed in March.\n"
    )


def test_remove_unknown_id_is_a_no_op() -> None:
    doc = MarkdownDocument(ARTICLE)
    doc.remove(42)
    assert doc.markdown == ARTICLE


def test_remove_outer_link_of_linked_image() -> None:
    doc = MarkdownDocument("[![Logo][2]][1]\n\n  [1]: http://a.com\n  [2]: http://a.com/logo.png")
    doc.remove(1)

    assert doc.sections[0].raw == "![Logo][2]"
    assert doc.markdown == "![Logo][2]\n\n  [2]: http://a.com/logo.png\n"


# ---------------------------------------------------------------------------
# Dead references
# ---------------------------------------------------------------------------

def test_liveness() -> None:
    doc = MarkdownDocument(EMPTY_LINKS)

    assert doc.references[3].type is ReferenceType.IMAGE
    assert not doc.is_live(doc.references[1])
    assert doc.is_live(doc.references[2])
    assert doc.is_live(doc.references[3])


def test_is_live_does_not_modify_sections() -> None:
    doc = MarkdownDocument(EMPTY_LINKS)
    doc.is_live(doc.references[1])
    assert "[][1]" in doc.sections[0].raw


def test_strip_empty_links() -> None:
    doc = MarkdownDocument(EMPTY_LINKS)
    doc.strip_empty_links()
    doc.strip_empty_links()

    assert doc.sections[0].raw == "Read the  story on [the site][2]."
    assert doc.sections[1].raw == "![][3]"
    assert sorted(doc.references) == [1, 2, 3]


def test_remove_dead_references() -> None:
    doc = MarkdownDocument(EMPTY_LINKS)

    assert len(doc.sections) == 2
    assert len(doc.references) == 3

    assert doc.remove_dead_references() == 1

    assert len(doc.sections) == 2
    assert sorted(doc.references) == [2, 3]
    assert doc.markdown == (
        "Read the  story on [the site][2].\n\n"
        "![][3]\n\n"
        "  [2]: http://b.com\n"
        "  [3]: http://c.com/img.png\n"
    )


def test_remove_dead_references_reaches_a_fixpoint() -> None:
    doc = MarkdownDocument(
        "[[][2]][1] and [text][3]\n\n  [1]: http://a.com\n  [2]: http://b.com\n  [3]: http://c.com"
    )

    assert doc.remove_dead_references() == 2
    assert sorted(doc.references) == [3]
    assert doc.markdown == "and [text][3]\n\n  [3]: http://c.com\n"


def test_remove_dead_references_is_idempotent() -> None:
    doc = MarkdownDocument(EMPTY_LINKS)
    doc.remove_dead_references()
    once = doc.markdown

    assert doc.remove_dead_references() == 0
    assert doc.markdown == once


def test_unreferenced_footer_entries_are_pruned() -> None:
    doc = MarkdownDocument("No links here.\n\n  [1]: http://a.com\n  [2]: http://b.com/x.png")

    assert doc.remove_dead_references() == 2
    assert doc.markdown == "No links here.\n"


def test_linked_image_survives_pruning() -> None:
    markdown = "[![Logo][2]][1]\n\n  [1]: http://a.com\n  [2]: http://a.com/logo.png\n"
    doc = MarkdownDocument(markdown)

    assert doc.remove_dead_references() == 0
    assert doc.markdown == markdown


def test_other_reference_types_are_never_pruned() -> None:
    doc = MarkdownDocument("Nothing cited.\n\n  [1]: http://vimeo.com/1")
    doc.references[1].type = ReferenceType.VIMEO

    assert doc.remove_dead_references() == 0
    assert sorted(doc.references) == [1]


# ---------------------------------------------------------------------------
# Round trip
# ---------------------------------------------------------------------------

def test_round_trip_from_html() -> None:
    html = (
        "<h1>Title</h1>"
        '<p><img src="http://i.com/a.png" alt="Pic">See <a href="http://a.com">site</a>.</p>'
        "<ul><li>one</li><li>two</li></ul>"
    )
    writer = MarkdownRenderer()
    convert_html([writer], html)

    doc = MarkdownDocument(writer.markdown)

    assert writer.markdown == (
        "#Title#\n\n"
        "![Pic][1]\n\n"
        "See [site][2].\n\n"
        "- one\n- two\n\n"
        "  [1]: http://i.com/a.png\n"
        "  [2]: http://a.com\n"
    )
    assert doc.markdown == writer.markdown
    assert [r.url for r in doc.references.values()] == writer.references
    assert doc.references[1].type is ReferenceType.IMAGE
    assert doc.references[2].titles == ["site"]

    again = MarkdownDocument(doc.markdown)
    assert [(s.type, s.raw, s.clean) for s in again.sections] == [(s.type, s.raw, s.clean) for s in doc.sections]


def test_round_trip_with_bracketed_prose() -> None:
    writer = MarkdownRenderer()
    convert_html([writer], "<p>" + "[a]" * 30 + '<a href="http://a.com">x</a></p>')

    doc = MarkdownDocument(writer.markdown)

    assert writer.markdown == "\\[a\\]" * 30 + "[x][1]\n\n  [1]: http://a.com\n"
    assert doc.references[1].titles == ["x"]
    assert doc.remove_dead_references() == 0
    assert doc.markdown == writer.markdown
