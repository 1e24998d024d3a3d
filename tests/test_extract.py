from __future__ import annotations

import pytest

from src.scrapers.x.extract import classify_count_label, extract, extract_html
from src.utils.dom import parse_fragment
from src.utils.exceptions import MalformedItemError

from thread_fixtures import quote_html, tweet_html


def test_author_block_fields() -> None:
    rec = extract_html(tweet_html(name="Alice A.", handle="alice", status_id="42"))
    assert rec.display_name == "Alice A."
    assert rec.handle == "@alice"
    assert rec.timestamp == "2024-01-05T15:04:00.000Z"
    assert rec.permalink == "https://x.com/alice/status/42"


def test_body_is_rendered_markdown() -> None:
    rec = extract_html(tweet_html(text_html='<span>Read </span><a href="/search?q=%23py">#py</a>'))
    assert rec.body == "Read **#py**"


def test_time_text_used_when_datetime_attribute_missing() -> None:
    html = (
        '<article data-testid="tweet"><div data-testid="User-Name">'
        '<a role="link" href="/dave"><span>Dave</span></a>'
        '<a role="link" href="/dave/status/7"><time>2h</time></a>'
        '</div></article>'
    )
    rec = extract_html(html)
    assert rec.timestamp == "2h"
    assert rec.permalink == "https://x.com/dave/status/7"


def test_reply_context_handles_in_order() -> None:
    rec = extract_html(tweet_html(reply_to=("@bob", "@carol")))
    assert rec.reply_context == ("@bob", "@carol")


def test_reply_context_absent_without_label() -> None:
    assert extract_html(tweet_html()).reply_context is None


def test_quoted_item() -> None:
    rec = extract_html(tweet_html(quote_html=quote_html(text_html="<span>inner</span><br><b>x</b>")))
    assert rec.quote is not None
    assert rec.quote.author == "Carol@carol"
    assert rec.quote.body == "inner\n**x**"
    assert rec.body == "Hello"


def test_quote_only_item_has_no_body_of_its_own() -> None:
    rec = extract_html(tweet_html(text_html=None, quote_html=quote_html(text_html="<span>inner</span>")))
    assert rec.body == ""
    assert rec.quote is not None
    assert rec.quote.body == "inner"
    assert rec.dedup_key == "@alice::"


def test_own_text_after_quote_is_still_the_body() -> None:
    html = tweet_html(text_html=None, quote_html=quote_html(text_html="<span>inner</span>")).replace(
        '<div role="group">', '<div data-testid="tweetText"><span>mine</span></div><div role="group">'
    )
    rec = extract_html(html)
    assert rec.body == "mine"
    assert rec.quote.body == "inner"


def test_media_flags() -> None:
    assert extract_html(tweet_html(photo=True)).has_image is True
    rec = extract_html(tweet_html(video=True))
    assert rec.has_video is True
    assert rec.has_image is False


def test_metrics_first_match_per_category_wins() -> None:
    rec = extract_html(tweet_html(metrics={
        "reply": "12 Replies. Reply",
        "retweet": "3 reposts. Repost",
        "like": "1.2K Likes. Like",
        "unlike": "99 Likes. Liked",
        "bookmark": "Bookmark",
        "analytics": "10,456 views. View post analytics",
    }))
    assert dict(rec.metrics) == {
        "replies": "12",
        "reposts": "3",
        "likes": "1.2K",
        "views": "10,456",
    }


def test_metrics_absent_when_no_counts() -> None:
    assert extract_html(tweet_html(metrics={"reply": "Reply"})).metrics is None


@pytest.mark.parametrize("label,expected", [
    ("5 Retweets", ("reposts", "5")),
    ("7 Bookmarks. Bookmark", ("bookmarks", "7")),
    ("2M views", ("views", "2M")),
    ("Share post", None),
    ("4 Quotes", None),
])
def test_classify_count_label(label, expected) -> None:
    assert classify_count_label(label) == expected


def test_missing_blocks_leave_fields_empty() -> None:
    rec = extract_html('<article data-testid="tweet"><div>nothing useful</div></article>')
    assert rec.handle == ""
    assert rec.display_name == ""
    assert rec.body == ""
    assert rec.quote is None
    assert rec.metrics is None
    assert rec.dedup_key == "::"


@pytest.mark.parametrize("payload", ["", "   ", "no markup at all", None])
def test_malformed_payload_raises(payload) -> None:
    with pytest.raises(MalformedItemError):
        extract_html(payload)


def test_extract_rejects_non_element_root() -> None:
    with pytest.raises(MalformedItemError):
        extract("not a tag")


def test_dedup_key_is_stable_across_extractions() -> None:
    html = tweet_html(text_html="<span>" + "x" * 200 + "</span>")
    a = extract(parse_fragment(html))
    b = extract(parse_fragment(html))
    assert a.dedup_key == b.dedup_key == "@alice::" + "x" * 80


def test_record_is_immutable() -> None:
    rec = extract_html(tweet_html(metrics={"like": "1 Like"}))
    with pytest.raises(Exception):
        rec.body = "changed"  # type: ignore[misc]
    with pytest.raises(TypeError):
        rec.metrics["likes"] = "2"  # type: ignore[index]
