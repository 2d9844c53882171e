"""
Turns a source expression into mathtext-ready LaTeX using SymPy.

Not every line of code is an equation. Anything SymPy can't parse, or whose
LaTeX mathtext can't lay out, is reported with a plain-text fallback that
quotes the original expression.
"""

import re

from matplotlib.mathtext import MathTextParser
import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    parse_expr,
    standard_transformations,
)

import config
from errors import InvalidExpression, TypesetError
from latex_sanitizer import normalize_expression, sanitize_latex

TRANSFORMATIONS = standard_transformations + (convert_xor,)

# A single '=' that isn't part of '==', '<=', '>=' or '!='.
ASSIGNMENT_RE = re.compile(r"(?<![<>=!])=(?!=)")

# Only SymPy names resolve; every other name becomes a Symbol or Function.
_SYMPY_NAMESPACE = {name: getattr(sp, name) for name in sp.__all__}

_mathtext_parser = None


def _parse_side(src, original):
    try:
        obj = parse_expr(
            src,
            global_dict=dict(_SYMPY_NAMESPACE),
            transformations=TRANSFORMATIONS,
            evaluate=False,
        )
    except Exception as e:
        raise InvalidExpression(f"Could not parse expression: '{original}'. Error: {e}") from e

    if not isinstance(obj, sp.Basic):
        raise InvalidExpression(f"'{original}' is not a symbolic expression")
    return obj


def to_latex(expr):
    """
    Parses a source expression and returns its LaTeX (without $ delimiters).
    An assignment like 'y = x^2' becomes the equation y = x^2.
    """
    src = normalize_expression(expr)
    if not src:
        raise InvalidExpression("The expression is empty")

    sides = ASSIGNMENT_RE.split(src)
    if len(sides) == 2:
        lhs, rhs = (s.strip() for s in sides)
        if not lhs or not rhs:
            raise InvalidExpression(f"'{expr}' is an incomplete assignment")
        obj = sp.Eq(_parse_side(lhs, expr), _parse_side(rhs, expr), evaluate=False)
    elif len(sides) == 1:
        obj = _parse_side(src, expr)
    else:
        raise InvalidExpression(f"'{expr}' contains more than one assignment")

    return sanitize_latex(sp.latex(obj))


def check_mathtext(math_str):
    """
    Raises InvalidExpression if matplotlib's mathtext can't lay out math_str.
    """
    global _mathtext_parser
    if _mathtext_parser is None:
        _mathtext_parser = MathTextParser("path")
    try:
        _mathtext_parser.parse(math_str)
    except ValueError as e:
        raise InvalidExpression(f"Unable to typeset '{math_str}': {e}") from e


def typeset(expr):
    """
    Returns (text, is_math). On success text is '$<latex>$' and is_math is
    True. If the expression can't be typeset, text is the fallback message
    quoting expr and is_math is False.
    """
    try:
        math_str = f"${to_latex(expr)}$"
        check_mathtext(math_str)
    except TypesetError:
        return config.FALLBACK_MESSAGE.format(expr=expr), False
    return math_str, True
