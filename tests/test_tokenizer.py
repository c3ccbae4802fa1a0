import pytest

from gradientslide.model.tokenizer import IDENT, NUMBER, SYMBOL, Token, normalize_expression, split_identifier, tokenize


def test_tokenize_kinds():
    assert tokenize("3.5x+sin(y_1)") == [
        Token(NUMBER, "3.5"),
        Token(IDENT, "x"),
        Token(SYMBOL, "+"),
        Token(IDENT, "sin"),
        Token(SYMBOL, "("),
        Token(IDENT, "y_1"),
        Token(SYMBOL, ")"),
    ]


def test_split_identifier():
    assert split_identifier("xy") == [Token(IDENT, "x"), Token(IDENT, "y")]
    assert split_identifier("cos") == [Token(IDENT, "cos")]
    assert split_identifier("x_1") == [Token(IDENT, "x_1")]
    assert split_identifier("x2") == [Token(IDENT, "x"), Token(NUMBER, "2")]
    assert split_identifier("pix") == [Token(IDENT, "pi"), Token(IDENT, "x")]


@pytest.mark.parametrize(
    "flat, expected",
    [
        ("2x", "2*x"),
        ("xy", "x*y"),
        ("sin(x)", "sin(x)"),
        ("x^2y", "x^2*y"),
        ("2pix", "2*pi*x"),
        ("2(x+1)", "2*(x+1)"),
        ("(x)(y)", "(x)*(y)"),
        ("x(y)", "x*(y)"),
        ("e^(xy)", "e^(x*y)"),
        ("e^xy", "e^x*y"),
        ("x^-2y", "x^-2*y"),
        ("x^(2)(y)", "x^(2)*(y)"),
        ("e^sin(x)y", "e^sin(x)*y"),
        ("sqrt((x^2+y^2))", "sqrt((x^2+y^2))"),
        ("x^2+y^2-(1)/(2)cos(2x)", "x^2+y^2-(1)/(2)*cos(2*x)"),
    ],
)
def test_normalize_expression(flat, expected):
    assert normalize_expression(flat) == expected


def test_collapses_and_strips_multiplications():
    assert normalize_expression("*x**y*") == "x*y"


@pytest.mark.parametrize(
    "flat",
    ["2x", "xy", "x^2y", "e^xy", "(1)/(2)cos(2x)", "sqrt((x^2+y^2))", "2pixy^3(x-1)"],
)
def test_normalize_is_idempotent(flat):
    once = normalize_expression(flat)
    assert normalize_expression(once) == once
