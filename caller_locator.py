import inspect

import config
from errors import NoCallerContext
from line_source import HISTORY, LineRef


def _is_interactive(filename):
    return filename in config.INTERACTIVE_FILENAMES or filename.startswith("<python-input")


def locate_caller(stacklevel=1):
    """
    Finds the line above a call site.

    stacklevel counts frames the way warnings.warn does: 1 is the function
    calling locate_caller, 2 is the caller of that function. Returns
    LineRef(path, line - 1) for code in a file and LineRef(HISTORY, 1) for
    code typed at the interactive prompt.
    """
    frame = inspect.currentframe()
    if frame is None:
        raise NoCallerContext("Call stack inspection is not supported by this interpreter")

    try:
        for _ in range(stacklevel):
            frame = frame.f_back
            if frame is None:
                raise NoCallerContext("Unable to find the caller in the call stack")

        filename = frame.f_code.co_filename
        lineno = frame.f_lineno
    finally:
        del frame

    if _is_interactive(filename):
        return LineRef(HISTORY, 1)

    if filename.startswith("<"):
        raise NoCallerContext(
            f"Source lines of {filename} can't be read; "
            "pass the expression as a string instead"
        )

    return LineRef(filename, lineno - 1)
