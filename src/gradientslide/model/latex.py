"""
LaTeX Notation Translator
=========================
Rewrites the typeset markup produced by the expression editor into a flat,
prefix-free expression string, e.g.::

    \\frac{\\sin\\left(x\\right)}{2}  ->  (sin(x))/(2)

Why is this file needed?
------------------------
The CAS front-end understands infix text, not LaTeX. Only the small command
subset in COMMAND_TOKENS is understood; anything else is passed through
literally so the parser can report it. The output still needs
tokenizer.normalize_expression() (implicit products, merged identifiers).

The translator is a recursive-descent walk over four token classes:
escape commands, grouping delimiters, whitespace and literal characters.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from gradientslide.model.brackets import CLOSING, read_group

logger = logging.getLogger(__name__)

ESCAPE = "\\"

# Commands that map 1:1 to a plain-text token
COMMAND_TOKENS: Dict[str, str] = {
    "sin": "sin",
    "cos": "cos",
    "tan": "tan",
    "sinh": "sinh",
    "cosh": "cosh",
    "tanh": "tanh",
    "asin": "asin",
    "acos": "acos",
    "atan": "atan",
    "arcsin": "asin",
    "arccos": "acos",
    "arctan": "atan",
    "exp": "exp",
    "ln": "log",
    "log": "log",
    "abs": "abs",
    "pi": "pi",
    "cdot": "*",
    "times": "*",
}

# Pure grouping hints, consumed without output
DISCARDED_COMMANDS = frozenset({"left", "right"})

FRACTION_COMMANDS = frozenset({"frac", "dfrac", "tfrac"})


def translate_latex(markup: str) -> str:
    """
    Translate typeset markup into a flat expression string.

    Args:
        markup: Raw LaTeX from the editor.

    Returns:
        The flattened expression. Never raises; malformed constructs degrade
        to literal text.
    """
    return _LatexTranslator(markup).translate()


class _LatexTranslator:
    """Single left-to-right pass over one markup string."""

    def __init__(self, markup: str) -> None:
        self.text = markup
        self.pos = 0
        self.out: List[str] = []

    def translate(self) -> str:
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == ESCAPE:
                self._escape()
            elif char in CLOSING:
                self.out.append(self._group())
            elif char.isspace():
                self.pos += 1
            else:
                self.out.append(char)
                self.pos += 1
        return "".join(self.out)

    # ------------------------------------------------------------------
    # Token classes
    # ------------------------------------------------------------------

    def _escape(self) -> None:
        word, end = self._read_command_word(self.pos)
        if not word:
            self._escaped_symbol()
            return

        self.pos = end
        if word in FRACTION_COMMANDS:
            self.out.append(self._fraction(word))
        elif word == "sqrt":
            self.out.append(self._square_root())
        elif word == "operatorname":
            self.out.append(self._operator_name())
        elif word in DISCARDED_COMMANDS:
            pass
        elif word in COMMAND_TOKENS:
            self.out.append(COMMAND_TOKENS[word])
        else:
            logger.warning(f"Unrecognized LaTeX command '\\{word}' passed through literally.")
            self.out.append(word)

    def _escaped_symbol(self) -> None:
        """Handles an escape followed by a non-letter (\\, \\; \\{ ...)."""
        following = self.text[self.pos + 1:self.pos + 2]
        if following == "{":
            self.out.append("(")
        elif following == "}":
            self.out.append(")")
        # Spacing commands and a trailing backslash produce nothing
        self.pos += 1 + len(following)

    def _group(self) -> str:
        content, self.pos = read_group(self.text, self.pos)
        return f"({translate_latex(content)})"

    # ------------------------------------------------------------------
    # Commands with arguments
    # ------------------------------------------------------------------

    def _fraction(self, word: str) -> str:
        numerator = self._next_group()
        if numerator is None:
            logger.warning(f"'\\{word}' without a numerator group, emitted literally.")
            return "frac"

        denominator = self._next_group()
        if denominator is None:
            logger.warning(f"'\\{word}' without a denominator group.")
            return f"({translate_latex(numerator)})/"

        return f"({translate_latex(numerator)})/({translate_latex(denominator)})"

    def _square_root(self) -> str:
        start = self.pos
        index = self._optional_index()
        radicand = self._next_group()
        if radicand is None:
            self.pos = start
            logger.warning("'\\sqrt' without an argument group, emitted literally.")
            return "sqrt"

        if index is not None:
            return f"({translate_latex(radicand)})^(1/({translate_latex(index)}))"
        # The radicand keeps its own group parentheses: sqrt((x^2+y^2))
        return f"sqrt(({translate_latex(radicand)}))"

    def _operator_name(self) -> str:
        name = self._next_group()
        if name is None:
            return "operatorname"
        return "".join(c for c in name if not c.isspace())

    # ------------------------------------------------------------------
    # Low-level readers
    # ------------------------------------------------------------------

    def _read_command_word(self, index: int) -> Tuple[str, int]:
        """Returns the letter run after the escape at ``index`` and its end."""
        end = index + 1
        while end < len(self.text) and self.text[end].isalpha():
            end += 1
        return self.text[index + 1:end], end

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _next_group(self) -> Optional[str]:
        """Reads the next grouped argument, or returns None if there is none."""
        self._skip_whitespace()
        content, end = read_group(self.text, self.pos)
        if end == self.pos:
            return None
        self.pos = end
        return content

    def _optional_index(self) -> Optional[str]:
        """Reads a root index like the '3' in \\sqrt[3]{x}."""
        self._skip_whitespace()
        if self.pos >= len(self.text) or self.text[self.pos] != "[":
            return None
        close = self.text.find("]", self.pos)
        if close == -1:
            return None
        index = self.text[self.pos + 1:close]
        self.pos = close + 1
        return index
