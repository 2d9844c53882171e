"""
Pops up a window with a pretty, typeset version of a math expression.

Works for the expression on the line above a call in a script, for the
previous command at the interactive prompt, or for an expression passed in:

1. In a script, call show_equation() on the line after the expression:

       y = exp(a**3 / b**2) * (x**2 + 2*x - sqrt(3)) / (x**3 + 2*x**2 - 4*x + 12)
       show_equation()

   The script continues once the Equation Viewer window is closed.

2. Inline, pass the expression as a string:

       show_equation('y = exp(a^3 / b^2)')

3. At the interactive prompt, call show_equation() to view the previous command.

Multi-line expressions and trailing comments are handled. Expressions are
parsed with SymPy; ones it can't parse are shown as text with a notice.
"""

import argparse
import base64
import fcntl
import io
import math
import os
import re
import struct
import sys
import termios

import matplotlib
import matplotlib.pyplot as plt

import config
from box_fit import Container, TextBlock, grow_to_fill, shrink_container_to_aspect
from caller_locator import locate_caller
from equation_typesetter import typeset
from errors import EquationViewerError
from line_reconstructor import reconstruct
from line_source import SYNTAXES

matplotlib.rcParams["mathtext.fontset"] = config.MATHTEXT_FONTSET
matplotlib.rcParams["font.family"] = config.FONT_FAMILY

# Constants
CHUNK_SIZE = 4096
NON_INTERACTIVE_BACKENDS = {"agg", "cairo", "pdf", "pgf", "ps", "svg", "template"}
LINE_ARG_RE = re.compile(r"^(?P<path>.+):(?P<line>\d+)$")


def get_terminal_cell_dims():
    """
    Attempts to get the terminal cell width and height in pixels using ioctl.
    Returns (cell_w, cell_h, cols, rows). Defaults to (10, 20, 80, 24) if it fails.
    """
    try:
        buf = fcntl.ioctl(sys.stdout.fileno(), termios.TIOCGWINSZ, b'\0' * 8)
        ws_row, ws_col, ws_xpixel, ws_ypixel = struct.unpack('HHHH', buf)

        if ws_col > 0 and ws_row > 0 and ws_xpixel > 0 and ws_ypixel > 0:
            return ws_xpixel / ws_col, ws_ypixel / ws_row, ws_col, ws_row
    except (OSError, ValueError):
        pass
    return 10, 20, 80, 24


def get_png_dimensions(data):
    if data[:8] != b'\x89PNG\r\n\x1a\n':
        return None
    w, h = struct.unpack('>LL', data[16:24])
    return w, h


def serialize_gr_command(cmd, payload=None):
    cmd_str = ",".join(f"{k}={v}" for k, v in cmd.items())
    ST = chr(27) + chr(92)

    if payload:
        b64_data = base64.standard_b64encode(payload)
        output = []
        while len(b64_data) > 0:
            chunk = b64_data[:CHUNK_SIZE]
            b64_data = b64_data[CHUNK_SIZE:]
            m_val = 1 if len(b64_data) > 0 else 0
            header = f"m={m_val};" if output else f"{cmd_str},m={m_val};"
            output.append("\x1b_G" + header + chunk.decode("ascii") + ST)
        return "".join(output)
    else:
        return f"\x1b_G{cmd_str};{ST}"


def display_image_kitty(png_bytes, cell_w=10, cell_h=20, term_cols=80):
    """
    Returns the kitty graphics escape sequence for png_bytes and the number of
    terminal rows it covers. Images wider than the terminal are scaled down.
    """
    w, h = get_png_dimensions(png_bytes)
    cmd = {"a": "T", "f": "100", "C": "1"}

    term_px_width = term_cols * cell_w
    if w > term_px_width:
        cmd["c"] = term_cols
        h = h * term_px_width / w

    rows_needed = max(1, math.ceil(h / cell_h))
    return serialize_gr_command(cmd, png_bytes), rows_needed


def render_figure_to_png(fig):
    buf = io.BytesIO()
    fig.savefig(
        buf,
        format="png",
        dpi=config.TERMINAL_DPI,
        facecolor=config.FIGURE_FACECOLOR,
        bbox_inches="tight",
        pad_inches=config.TERMINAL_PADDING,
    )
    return buf.getvalue()


def make_equation_figure(equation):
    """
    Makes a figure holding only the typeset equation, scaled up to fill it and
    trimmed to the equation's shape. Returns (fig, block).
    """
    # Make the figure (with minimal junk)
    fig = plt.figure(figsize=config.FIGURE_SIZE, facecolor=config.FIGURE_FACECOLOR)
    if fig.canvas.manager is not None:
        fig.canvas.manager.set_window_title(config.WINDOW_TITLE)

    # The axes are just a canvas for the text, so let them fill the figure
    ax = fig.add_axes([0, 0, 1, 1])
    ax.axis("off")

    text_str, is_math = typeset(equation)
    text = ax.text(
        0.5, 0.5, text_str,
        fontsize=config.INITIAL_FONT_SIZE,
        color=config.TEXT_COLOR,
        ha="center", va="center",
        parse_math=is_math,
    )
    block = TextBlock(text)

    try:
        grow_to_fill(block)
        shrink_container_to_aspect(Container.from_figure(fig), block).apply_to(fig)
    except EquationViewerError:
        plt.close(fig)
        raise

    return fig, block


def resolve_display(display=None):
    display = display or config.DISPLAY_MODE
    if display not in ("auto", "window", "terminal"):
        raise ValueError(f"Unknown display mode {display!r}")
    if display != "auto":
        return display

    backend = matplotlib.get_backend().lower()
    if backend in NON_INTERACTIVE_BACKENDS and sys.stdout.isatty():
        return "terminal"
    return "window"


def show_in_terminal(fig):
    cell_w, cell_h, term_cols, _ = get_terminal_cell_dims()
    img_seq, rows_needed = display_image_kitty(
        render_figure_to_png(fig), cell_w=cell_w, cell_h=cell_h, term_cols=term_cols
    )

    # Reserve space for the image, then draw it at the top of that space
    sys.stdout.write("\n" * rows_needed)
    sys.stdout.write(f"\033[{rows_needed}A\r")
    sys.stdout.write(img_seq)
    sys.stdout.write(f"\033[{rows_needed}B\r\n")
    sys.stdout.flush()

    input(config.DISMISS_PROMPT)


def wait_for_close(fig):
    """
    Shows fig and runs the GUI event loop until that figure's window is closed.
    Other open figures don't hold the caller.
    """
    cid = fig.canvas.mpl_connect("close_event", lambda event: fig.canvas.stop_event_loop())
    try:
        fig.show()
        # A timeout of 0 waits until stop_event_loop() is called
        fig.canvas.start_event_loop(timeout=0)
    finally:
        fig.canvas.mpl_disconnect(cid)


def show_modal(fig, display=None):
    """
    Shows the figure and blocks until the user dismisses it.
    """
    try:
        if resolve_display(display) == "terminal":
            show_in_terminal(fig)
        else:
            wait_for_close(fig)
    finally:
        plt.close(fig)


def show_equation(equation=None, *, syntax=None, display=None):
    """
    Shows a typeset equation and waits until it's dismissed.

    With no argument, the expression is read from the line(s) above the call,
    or from the previous interactive command. Returns the expression shown.
    """
    if equation is None:
        # Get the line from the calling file above the show_equation call
        ref = locate_caller(stacklevel=2)
        equation = reconstruct(ref.source, ref.n, syntax)

    fig, _ = make_equation_figure(equation)
    # Hold the code until the figure is dismissed
    show_modal(fig, display)
    return equation


def main():
    parser = argparse.ArgumentParser(description="Show a math expression as a typeset equation.")
    parser.add_argument(
        "input", nargs="?",
        help="Expression to show, or PATH:LINE to show the expression ending at that line of a file.",
    )
    parser.add_argument(
        "--syntax", choices=sorted(SYNTAXES), default=None,
        help=f"Comment/continuation convention of the file (default: {config.DEFAULT_SYNTAX}).",
    )
    parser.add_argument(
        "--display", choices=["auto", "window", "terminal"], default=None,
        help=f"Where to show the equation (default: {config.DISPLAY_MODE}).",
    )
    args = parser.parse_args()

    try:
        if not sys.stdin.isatty():
            equation = sys.stdin.read().strip()
        elif args.input:
            match = LINE_ARG_RE.match(args.input)
            if match and os.path.isfile(match.group("path")):
                equation = reconstruct(
                    match.group("path"), int(match.group("line")), args.syntax
                )
            else:
                equation = args.input
        else:
            sys.stderr.write("Error: No input provided.\n")
            sys.exit(1)

        if not equation:
            sys.stderr.write("Error: The expression is empty.\n")
            sys.exit(1)

        show_equation(equation, display=args.display)
    except EquationViewerError as e:
        sys.stderr.write(f"Error: {e}\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
