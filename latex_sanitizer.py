import re

# Source operators that the symbolic parser doesn't know, mapped to ones it does.
ELEMENTWISE_OPERATORS = {
    ".^": "^",
    ".*": "*",
    "./": "/",
}


def normalize_expression(expr):
    """
    Prepares a source expression for the symbolic parser.
    Drops a trailing statement terminator and rewrites element-wise operators.
    """
    expr = expr.strip()
    while expr.endswith(";"):
        expr = expr[:-1].rstrip()

    for op, replacement in ELEMENTWISE_OPERATORS.items():
        expr = expr.replace(op, replacement)

    return expr


def sanitize_latex(content):
    """
    Sanitizes LaTeX produced by SymPy so Matplotlib's mathtext engine can
    render it.
    """

    # 1. Remove newlines
    # Matplotlib's single-line rendering doesn't handle newlines well.
    content = content.replace('\n', ' ')

    # 2. Mathtext places limits on big operators by itself and rejects \limits.
    content = content.replace(r'\limits', '')

    # 3. Robust replacements for inequalities
    # Matplotlib sometimes struggles with the short forms \le and \ge if not followed by space.
    content = re.sub(r'\\le(?![a-zA-Z])', r'\\leq', content)
    content = re.sub(r'\\ge(?![a-zA-Z])', r'\\geq', content)

    # 4. Fix Absolute Values
    # Matplotlib's mathtext does not always render \lvert and \rvert correctly.
    content = content.replace(r'\left\lvert', r'\left|')
    content = content.replace(r'\right\rvert', r'\right|')
    content = content.replace(r'\lvert', '|')
    content = content.replace(r'\rvert', '|')

    return content
