import pytest

from wordfilter.FilterService.filter import (
    DEFAULT_REPLACEMENT,
    WordFilter,
    filter_content,
    parse_terms,
)


def test_parse_terms_trims_and_drops_empty_entries() -> None:
    assert parse_terms(" foo , bar ,, ,baz") == ["foo", "bar", "baz"]
    assert parse_terms("") == []
    assert parse_terms(None) == []


@pytest.mark.parametrize(
    "content",
    ["", "plain text", "<p>Some <em>markup</em></p>", "bad words everywhere"],
)
def test_empty_term_list_is_identity(content: str) -> None:
    assert filter_content(content, "", "X") == content


def test_terms_that_trim_to_nothing_are_ignored() -> None:
    assert filter_content("abc", " , ,", "X") == "abc"
    assert filter_content("a bad day", "bad, ,", "X") == "a X day"


def test_matching_is_case_insensitive() -> None:
    assert filter_content("Bad BAD bad", "bad", "X") == "X X X"


def test_terms_are_trimmed_before_matching() -> None:
    assert filter_content("foo bar", " foo , bar ", "X") == "X X"


def test_missing_replacement_defaults_to_stars() -> None:
    assert DEFAULT_REPLACEMENT == "***"
    assert filter_content("it was bad", "bad") == "it was ***"
    assert filter_content("it was bad", "bad", None) == "it was ***"


def test_disjoint_terms_do_not_depend_on_order() -> None:
    assert filter_content("cat dog", "dog,cat", "X") == "X X"
    assert filter_content("cat dog", "cat,dog", "X") == "X X"


def test_replaced_text_is_not_rescanned() -> None:
    assert filter_content("badX", "bad,X", "Y") == "YY"
    # The replacement itself contains a term but is left alone.
    assert filter_content("bad", "bad,oops", "oops") == "oops"


def test_empty_replacement_removes_terms() -> None:
    assert filter_content("this is bad", "bad", "") == "this is "


def test_matching_is_substring_based() -> None:
    assert filter_content("category", "cat", "X") == "Xegory"


def test_terms_are_literal_text() -> None:
    assert filter_content("a.b axb", "a.b", "X") == "X axb"
    assert filter_content("cost (USD)", "(usd)", "X") == "cost X"


def test_replacement_is_html_escaped() -> None:
    assert filter_content("bad", "bad", "<b>") == "&lt;b&gt;"
    assert filter_content("bad", "bad", 'a & "b"') == "a &amp; &#34;b&#34;"


def test_entities_already_in_the_replacement_are_kept() -> None:
    assert filter_content("bad", "bad", "&amp;") == "&amp;"
    assert filter_content("bad", "bad", "&copy; <b>") == "&copy; &lt;b&gt;"
    assert filter_content("bad", "bad", "&#8212; & &#x2014;") == "&#8212; &amp; &#x2014;"
    assert filter_content("bad", "bad", "fish & chips;") == "fish &amp; chips;"


def test_backslashes_in_replacement_are_inserted_verbatim() -> None:
    assert filter_content("bad", "bad", r"\1") == r"\1"


def test_markup_around_terms_is_preserved() -> None:
    assert (
        filter_content("<p>A <strong>Mean</strong> remark</p>", "mean", "***")
        == "<p>A <strong>***</strong> remark</p>"
    )


def test_earlier_terms_win_at_the_same_position() -> None:
    assert filter_content("badly", "bad,badly", "X") == "Xly"
    assert filter_content("badly", "badly,bad", "X") == "X"


def test_overlapping_terms_are_resolved_in_list_order() -> None:
    assert filter_content("abc", "bc,ab", "X") == "aX"
    assert filter_content("abc", "ab,bc", "X") == "Xc"
    assert filter_content("abad", "bad,ab", "X") == "aX"
    assert filter_content("ABAD", "bad,ab", "X") == "AX"


def test_filtering_is_not_idempotent_in_general() -> None:
    once = filter_content("abab", "ab,cc", "c")
    assert once == "cc"
    assert filter_content(once, "ab,cc", "c") == "c"


def test_content_is_not_modified_in_place() -> None:
    content = "bad content"
    result = filter_content(content, "bad", "X")
    assert content == "bad content"
    assert result == "X content"


def test_word_filter_applies_to_many_texts() -> None:
    word_filter = WordFilter("secret, token", replacement="[redacted]")
    assert word_filter.apply("secret token") == "[redacted] [redacted]"
    assert word_filter.apply("A SECRET code") == "A [redacted] code"
    assert word_filter.apply("Nothing to see") == "Nothing to see"


def test_word_filter_without_terms_leaves_text_alone() -> None:
    word_filter = WordFilter("  ,  ")
    assert word_filter.patterns == []
    assert word_filter.apply("anything") == "anything"
