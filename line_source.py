import itertools
import sys
from collections import namedtuple

from errors import LineOutOfRange, NoHistory, SourceNotFound


class _HistorySentinel:
    def __repr__(self):
        return "HISTORY"


# Source id for the interactive command history.
HISTORY = _HistorySentinel()

LineRef = namedtuple("LineRef", ["source", "n"])

LineSyntax = namedtuple("LineSyntax", ["comment", "continuation"])

PYTHON_SYNTAX = LineSyntax(comment="#", continuation="\\")
MATLAB_SYNTAX = LineSyntax(comment="%", continuation="...")

SYNTAXES = {
    "python": PYTHON_SYNTAX,
    "matlab": MATLAB_SYNTAX,
}


def get_syntax(name):
    """
    Looks up a LineSyntax preset by name. LineSyntax values pass through.
    """
    if isinstance(name, LineSyntax):
        return name
    try:
        return SYNTAXES[name]
    except KeyError:
        raise ValueError(
            f"Unknown syntax {name!r}, expected one of: {', '.join(SYNTAXES)}"
        ) from None


class FileLines:
    """
    Lines of a text file, numbered from 1. Walking backwards moves up the file.
    """

    def __init__(self, path):
        self.path = path

    def fetch(self, n):
        if n < 1:
            raise LineOutOfRange(f"Line {n} is out of range for {self.path}")
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                line = next(itertools.islice(f, n - 1, None), None)
        except (OSError, UnicodeDecodeError) as e:
            raise SourceNotFound(f"Unable to read {self.path}: {e}") from e

        if line is None:
            raise LineOutOfRange(f"{self.path} has fewer than {n} lines")
        return line.rstrip("\r\n")

    def previous(self, n):
        return n - 1 if n > 1 else None

    def has_preceding_context(self):
        return True

    def __repr__(self):
        return f"FileLines({self.path!r})"


def _history_module():
    # The 3.13+ REPL keeps its own history; GNU readline's stays empty there.
    pyrepl = sys.modules.get("_pyrepl.readline")
    if pyrepl is not None:
        return pyrepl
    try:
        import readline
    except ImportError:
        raise NoHistory("Command history is not available (no readline module)")
    return readline


def read_readline_history():
    """
    Returns the interactive history oldest-first, without the newest entry
    (which is the command currently running).
    """
    history = _history_module()
    length = history.get_current_history_length()
    return [history.get_history_item(i) or "" for i in range(1, length)]


class HistoryLines:
    """
    Interactive command history. n=1 is the entry typed just before the
    current command; walking backwards moves to older entries.

    entries are oldest-first. When omitted they are read from readline on
    every access and never kept.
    """

    def __init__(self, entries=None):
        self._entries = entries

    def entries(self):
        if self._entries is None:
            return read_readline_history()
        return list(self._entries)

    def __len__(self):
        return len(self.entries())

    def fetch(self, n):
        entries = self.entries()
        if n < 1 or n > len(entries):
            raise NoHistory(
                f"History entry {n} requested but only {len(entries)} recorded"
            )
        return entries[-n].strip()

    def previous(self, n):
        return n + 1 if n + 1 <= len(self) else None

    def has_preceding_context(self):
        return len(self) > 0

    def __repr__(self):
        return "HistoryLines()"


def open_lines(source):
    """
    Resolves a source id to a line source. Accepts HISTORY, a file path, or an
    object that already provides fetch() and previous().
    """
    if source is HISTORY:
        return HistoryLines()
    if hasattr(source, "fetch") and hasattr(source, "previous"):
        return source
    return FileLines(source)


def fetch(source, n):
    """
    Returns line n of the given source. Raises a FetchError subclass when the
    line can't be read.
    """
    return open_lines(source).fetch(n)
