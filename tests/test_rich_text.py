from __future__ import annotations

from src.scrapers.x.rich_text import render_inline
from src.utils.dom import parse_fragment


def _md(html: str, **kwargs) -> str:
    return render_inline(parse_fragment(f'<div data-testid="tweetText">{html}</div>'), **kwargs)


def test_plain_text_passes_through_unmodified() -> None:
    assert _md("  spaced   text ") == "  spaced   text "


def test_hashtag_link_renders_as_bold_chip() -> None:
    assert _md('<a href="/search?q=%23foo">#foo</a>') == "**#foo**"


def test_mention_link_renders_as_bold_chip() -> None:
    assert _md('hi <a href="/bob" role="link">@bob</a>!') == "hi **@bob**!"


def test_shortened_link_uses_title_as_label() -> None:
    html = '<a href="https://t.co/abc" title="https://example.com/page">https://t.co/abc</a>'
    assert _md(html) == "[https://example.com/page](https://t.co/abc)"


def test_relative_href_is_resolved_against_origin() -> None:
    assert _md('<a href="/i/lists/42">my list</a>') == "[my list](https://x.com/i/lists/42)"


def test_ellipsis_label_falls_back_to_bare_url() -> None:
    assert _md('<a href="https://t.co/xyz">…</a>') == "https://t.co/xyz"


def test_label_equal_to_url_emits_bare_url() -> None:
    assert _md('<a href="https://example.com">https://example.com</a>') == "https://example.com"


def test_link_without_href_emits_text() -> None:
    assert _md("<a>just text</a>") == "just text"


def test_split_link_text_is_joined_for_label() -> None:
    html = (
        '<a href="https://t.co/q"><span aria-hidden="true">https://</span>'
        '<span>example.com/lo</span><span aria-hidden="true">…</span></a>'
    )
    assert _md(html) == "[https://example.com/lo…](https://t.co/q)"


def test_emoji_image_emits_alt_text() -> None:
    assert _md('great <img alt="🔥" src="https://abs-0.twimg.com/emoji/v2/svg/1f525.svg"> stuff') == "great 🔥 stuff"


def test_line_breaks_and_emphasis() -> None:
    html = "<span>one</span><br><strong>two</strong><br><em>three</em> <b>four</b> <i>five</i>"
    assert _md(html) == "one\n**two**\n*three* **four** *five*"


def test_unknown_tags_never_drop_content() -> None:
    assert _md("<section><mark>kept</mark> <custom-x>too</custom-x></section>") == "kept too"


def test_comments_are_not_text() -> None:
    assert _md("a<!-- hidden -->b") == "ab"


def test_depth_cap_degrades_to_flat_text() -> None:
    html = "<span><span><span><span><b>deep</b> end</span></span></span></span>"
    assert _md(html) == "**deep** end"
    assert _md(html, max_depth=3) == "deep end"
