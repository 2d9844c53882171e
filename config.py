"""
Configuration settings for the Equation Viewer.
Adjust these values to customize how expressions are located and displayed.
"""

# --- Source Line Settings ---
# Comment / continuation convention used when reading expressions from source.
# "python" uses '#' and a trailing backslash, "matlab" uses '%' and '...'.
DEFAULT_SYNTAX = "python"

# Pseudo filenames the interpreter gives to code typed at the interactive prompt.
# Calls coming from these read the previous entry of the readline history.
INTERACTIVE_FILENAMES = ("<stdin>", "<console>")


# --- Fitting Settings ---
# Fraction of the window the equation should occupy along its dominant axis.
TARGET_FRACTION = 0.95

# Upper bound on font growth steps before giving up on the layout.
MAX_FIT_ITERATIONS = 50

# Starting font size; the fit loop grows it from here.
INITIAL_FONT_SIZE = 10


# --- Window Settings ---
WINDOW_TITLE = "Equation Viewer"
FIGURE_SIZE = (6.4, 4.8)
FIGURE_FACECOLOR = "white"
TEXT_COLOR = "black"

# Shown instead of the equation when the expression can't be typeset.
FALLBACK_MESSAGE = 'Oops! I had trouble parsing the expression:\n "{expr}"'

# 'stix' looks like LaTeX and covers more symbols than 'cm'.
MATHTEXT_FONTSET = "stix"
FONT_FAMILY = "STIXGeneral"


# --- Display Settings ---
# "window" opens a matplotlib window, "terminal" draws inline with the kitty
# graphics protocol, "auto" picks terminal when no GUI backend is active.
DISPLAY_MODE = "auto"

# Resolution and padding for the terminal image.
TERMINAL_DPI = 200
TERMINAL_PADDING = 0.1

DISMISS_PROMPT = "Press Enter to continue..."
