import pytest

from gradientslide.model.brackets import read_group


@pytest.mark.parametrize(
    "text, index, content, end",
    [
        ("{ab}", 0, "ab", 4),
        ("x(a+b)*2", 1, "a+b", 6),
        ("{a{b}c}d", 0, "a{b}c", 7),
        ("((x))", 1, "x", 4),
    ],
)
def test_reads_balanced_group(text, index, content, end):
    assert read_group(text, index) == (content, end)


def test_content_of_balanced_group_has_zero_net_depth():
    text = r"\frac{\sqrt{x^{2}}}{y}"
    content, end = read_group(text, 5)
    assert content.count("{") == content.count("}")
    assert text[end - 1] == "}"
    assert content == r"\sqrt{x^{2}}"


def test_only_same_type_delimiters_count():
    assert read_group("{a(b}c)", 0) == ("a(b", 5)


def test_non_opener_is_a_no_op():
    assert read_group("abc", 1) == ("", 1)
    assert read_group("abc", 10) == ("", 10)


def test_unterminated_group_runs_to_the_end():
    assert read_group("{abc", 0) == ("abc", 4)
