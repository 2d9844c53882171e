"""
Rebuilds a logical expression from the physical lines of a script or of the
interactive history.

The expression line is read first, then lines logically above it are checked
for a trailing continuation marker and prepended one by one. Comments are
stripped with a plain regex, so a comment marker inside a string literal also
cuts the line. That's accepted: strings can't be typeset as equations anyway.
"""

import re

import config
from errors import FetchError, NoPrecedingContext, StartLineUnavailable
from line_source import get_syntax, open_lines


def _comment_pattern(syntax):
    return re.compile(r"\s*" + re.escape(syntax.comment) + r".*", re.DOTALL)


def _continuation_pattern(syntax):
    return re.compile(r"\s*" + re.escape(syntax.continuation) + r"$")


def strip_comment(line, syntax=None):
    """
    Removes everything from the first comment marker to the end of the line,
    along with the whitespace in front of it.
    """
    syntax = get_syntax(syntax or config.DEFAULT_SYNTAX)
    return _comment_pattern(syntax).sub("", line, count=1)


def split_continuation(line, syntax=None):
    """
    Returns (body, continued). When the line ends with the continuation
    marker, body is the line without the marker or the whitespace before it.
    """
    syntax = get_syntax(syntax or config.DEFAULT_SYNTAX)
    body, count = _continuation_pattern(syntax).subn("", line, count=1)
    return body, count > 0


def reconstruct(source, start, syntax=None):
    """
    Returns the logical expression ending at line `start` of `source`.

    source is a file path, line_source.HISTORY or a line source object.
    Continued lines are joined with no separator, like the interpreter joins
    them. Raises StartLineUnavailable (or NoPrecedingContext) when the
    starting line can't be read.
    """
    syntax = get_syntax(syntax or config.DEFAULT_SYNTAX)
    lines = open_lines(source)

    if start < 1 or not lines.has_preceding_context():
        raise NoPrecedingContext(
            "Unable to find any lines above the show_equation() call."
        )

    try:
        raw = lines.fetch(start)
    except FetchError as e:
        raise StartLineUnavailable(f"Unable to read the expression line: {e}") from e

    eqn = strip_comment(raw, syntax).strip()

    i = start
    while True:
        i = lines.previous(i)
        if i is None:
            break
        try:
            line_above = lines.fetch(i).strip()
        except FetchError:
            break

        candidate = strip_comment(line_above, syntax).strip()
        body, continued = split_continuation(candidate, syntax)
        if not continued:
            break
        eqn = body + eqn

    return eqn
