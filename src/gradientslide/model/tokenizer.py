"""
Tokenizer & Implicit-Multiplication Inserter
============================================
Turns the flat string produced by the LaTeX translator into text a
conventional infix parser accepts:

    2x        ->  2*x
    xy        ->  x*y
    sin(x)    ->  sin(x)
    x^2y      ->  x^2*y
    2pix      ->  2*pi*x

Running normalize_expression() on its own output is a no-op.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

IDENT = "IDENT"
NUMBER = "NUMBER"
SYMBOL = "SYMBOL"

FUNCTION_NAMES = frozenset({
    "sin", "cos", "tan",
    "sinh", "cosh", "tanh",
    "asin", "acos", "atan",
    "exp", "log", "sqrt", "abs",
})
CONSTANT_NAMES = frozenset({"pi"})
RECOGNIZED_NAMES = FUNCTION_NAMES | CONSTANT_NAMES

_LONGEST_NAME = max(len(name) for name in RECOGNIZED_NAMES)

_TOKEN_RE = re.compile(
    r"\s*(?:(?P<ident>[A-Za-z_]\w*)|(?P<number>\d+(?:\.\d*)?|\.\d+)|(?P<symbol>\S))"
)
_PIECE_RE = re.compile(r"[A-Za-z]+|\d+")


@dataclass(frozen=True)
class Token:
    kind: str   # 'IDENT', 'NUMBER', 'SYMBOL'
    value: str

    def __repr__(self) -> str:
        return f"Token({self.kind!r}, {self.value!r})"


STAR = Token(SYMBOL, "*")


def tokenize(flat: str) -> List[Token]:
    """
    Lex a flat expression into tokens.

    - Identifiers: [A-Za-z_]\\w*
    - Numbers: 42, 3.14, 2., .5
    - Symbols: any other single non-space character
    """
    tokens: List[Token] = []
    for match in _TOKEN_RE.finditer(flat):
        if match.group("ident"):
            tokens.append(Token(IDENT, match.group("ident")))
        elif match.group("number"):
            tokens.append(Token(NUMBER, match.group("number")))
        elif match.group("symbol"):
            tokens.append(Token(SYMBOL, match.group("symbol")))
    return tokens


def split_identifier(name: str) -> List[Token]:
    """
    Split a lexeme that typeset input merged from several variables.

    Recognized names (functions, constants) are never split and are also
    kept whole when they appear inside a longer run ('sinx' -> sin, x).
    Names with an underscore ('x_1') are treated as a single variable.
    Digit runs inside a lexeme become numbers ('x2' -> x, 2).
    """
    if name in RECOGNIZED_NAMES or "_" in name:
        return [Token(IDENT, name)]

    parts: List[Token] = []
    for piece in _PIECE_RE.findall(name):
        if piece.isdigit():
            parts.append(Token(NUMBER, piece))
            continue

        i = 0
        while i < len(piece):
            matched = _recognized_prefix(piece, i)
            parts.append(Token(IDENT, matched))
            i += len(matched)
    return parts


def _recognized_prefix(letters: str, start: int) -> str:
    """Longest recognized name starting at ``start``, else the single letter."""
    for length in range(min(_LONGEST_NAME, len(letters) - start), 1, -1):
        candidate = letters[start:start + length]
        if candidate in RECOGNIZED_NAMES:
            return candidate
    return letters[start]


def normalize_expression(flat: str) -> str:
    """
    Make every implied multiplication in ``flat`` explicit.

    Args:
        flat: Output of translate_latex().

    Returns:
        A string for a standard infix parser (unary minus, right-associative
        '^', function calls as name(args)).
    """
    tokens: List[Token] = []
    for token in tokenize(flat):
        if token.kind == IDENT:
            tokens.extend(split_identifier(token.value))
        else:
            tokens.append(token)

    tokens = _normalize_exponents(tokens)
    tokens = _insert_implicit_products(tokens)
    tokens = _collapse_products(tokens)
    return "".join(token.value for token in tokens)


# ---------------------------------------------------------------------------
# Passes
# ---------------------------------------------------------------------------

def _is_symbol(token: Token, value: str) -> bool:
    return token.kind == SYMBOL and token.value == value


def _ends_operand(token: Token) -> bool:
    return token.kind in (NUMBER, IDENT) or _is_symbol(token, ")")


def _starts_operand(token: Token) -> bool:
    return token.kind in (NUMBER, IDENT) or _is_symbol(token, "(")


def _is_call(left: Token, right: Token) -> bool:
    return left.kind == IDENT and left.value in FUNCTION_NAMES and _is_symbol(right, "(")


def _insert_implicit_products(tokens: List[Token]) -> List[Token]:
    out: List[Token] = []
    for token in tokens:
        if out and _ends_operand(out[-1]) and _starts_operand(token) and not _is_call(out[-1], token):
            out.append(STAR)
        out.append(token)
    return out


def _matching_paren(tokens: List[Token], index: int) -> int:
    """Index of the ')' closing the '(' at ``index`` (last index if unbalanced)."""
    depth = 0
    for pos in range(index, len(tokens)):
        if _is_symbol(tokens[pos], "("):
            depth += 1
        elif _is_symbol(tokens[pos], ")"):
            depth -= 1
            if depth == 0:
                return pos
    return len(tokens) - 1


def _exponent_operand_end(tokens: List[Token], start: int) -> int:
    """
    End (exclusive) of the exponent operand beginning at ``start``.

    The operand is one atom with an optional sign: a number, a variable or
    constant, a parenthesized group, or a function call.
    """
    pos = start
    while pos < len(tokens) and tokens[pos].kind == SYMBOL and tokens[pos].value in "+-":
        pos += 1
    if pos >= len(tokens):
        return start

    token = tokens[pos]
    if _is_symbol(token, "("):
        return _matching_paren(tokens, pos) + 1
    if pos + 1 < len(tokens) and _is_call(token, tokens[pos + 1]):
        return _matching_paren(tokens, pos + 1) + 1
    if token.kind in (NUMBER, IDENT):
        return pos + 1
    return start


def _normalize_exponents(tokens: List[Token]) -> List[Token]:
    out: List[Token] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        out.append(token)
        i += 1
        if not _is_symbol(token, "^"):
            continue

        end = _exponent_operand_end(tokens, i)
        if end == i:
            continue
        out.extend(tokens[i:end])
        i = end
        if i < len(tokens) and (tokens[i].kind == IDENT or _is_symbol(tokens[i], "(")):
            out.append(STAR)
    return out


def _collapse_products(tokens: List[Token]) -> List[Token]:
    out: List[Token] = []
    for token in tokens:
        if token == STAR and out and out[-1] == STAR:
            continue
        out.append(token)

    while out and out[0] == STAR:
        out.pop(0)
    while out and out[-1] == STAR:
        out.pop()
    return out
