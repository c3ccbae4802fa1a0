"""
Computer-Algebra Adapter (SymPy)
================================
The only module that talks to SymPy. It provides the three capabilities the
rest of the application needs from a CAS:

1. parse(flat)              -> symbolic expression in x, y
2. compile_expression(expr) -> plain Python callable f(x, y)
3. derivative(expr, name)   -> symbolic partial derivative

Compiled callables use mpmath as numeric backend. Out-of-domain inputs such
as sqrt(-1) or log(-2) therefore come back as complex values (mpc) instead
of raising, and the field evaluator decides what to do with them.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

import sympy as sp
from sympy.parsing.sympy_parser import convert_xor, parse_expr, standard_transformations

from gradientslide.model.errors import ExpressionError

logger = logging.getLogger(__name__)

X = sp.Symbol("x", real=True)
Y = sp.Symbol("y", real=True)
VARIABLES: Dict[str, sp.Symbol] = {"x": X, "y": Y}

# Names the tokenizer leaves intact, mapped onto SymPy objects
NAMESPACE: Dict[str, Any] = {
    "sin": sp.sin, "cos": sp.cos, "tan": sp.tan,
    "sinh": sp.sinh, "cosh": sp.cosh, "tanh": sp.tanh,
    "asin": sp.asin, "acos": sp.acos, "atan": sp.atan,
    "exp": sp.exp, "log": sp.log, "sqrt": sp.sqrt, "abs": sp.Abs,
    "pi": sp.pi, "e": sp.E,
    **VARIABLES,
}

# '^' is power, everything else must already be explicit
TRANSFORMATIONS = standard_transformations + (convert_xor,)

RADIAL_BASE = X**2 + Y**2

Evaluable = Callable[[float, float], Any]


def parse(flat: str) -> sp.Expr:
    """
    Parse a normalized flat expression.

    Raises:
        ExpressionError: On syntax errors, non-scalar results, or free
            variables other than x and y.
    """
    if not flat.strip():
        raise ExpressionError("Expression is empty.")

    try:
        expr = parse_expr(flat, local_dict=dict(NAMESPACE), transformations=TRANSFORMATIONS)
    except Exception as e:
        raise ExpressionError(f"Cannot parse '{flat}': {e}") from e

    if not isinstance(expr, sp.Expr):
        raise ExpressionError(f"'{flat}' is not a scalar expression.")

    unknown = sorted(str(s) for s in expr.free_symbols - set(VARIABLES.values()))
    if unknown:
        raise ExpressionError(f"Unknown variable(s): {', '.join(unknown)}. Only x and y are allowed.")

    return expr


def compile_expression(expr: sp.Expr) -> Evaluable:
    """Turn a symbolic expression into a callable f(x, y)."""
    try:
        return sp.lambdify((X, Y), expr, modules="mpmath")
    except Exception as e:
        raise ExpressionError(f"Cannot compile '{expr}': {e}") from e


def derivative(expr: sp.Expr, name: str) -> sp.Expr:
    """Symbolic partial derivative of ``expr`` with respect to ``name``."""
    return sp.diff(expr, VARIABLES[name])


def has_radial_term(expr: sp.Expr) -> bool:
    """
    True if ``expr`` contains a half-integer power of x^2 + y^2, e.g.
    sqrt(x^2 + y^2) or 1/sqrt(x^2 + y^2).
    """
    return any(
        power.base == RADIAL_BASE and power.exp.is_Rational and power.exp.q == 2
        for power in expr.atoms(sp.Pow)
    )


def radial_limit(expr: sp.Expr) -> Optional[float]:
    """
    One-sided limit of f(r, 0) for r -> 0+.

    Returns:
        The limit as float, or None when it does not exist, is not a finite
        real number, or SymPy cannot compute it.
    """
    r = sp.Symbol("r", positive=True)
    try:
        value = sp.limit(expr.subs({X: r, Y: 0}), r, 0, "+")
    except Exception as e:
        logger.info(f"No symbolic limit at the origin for '{expr}': {e}")
        return None

    if value.is_real and value.is_finite:
        return float(value)
    return None
