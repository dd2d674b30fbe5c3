import os
import sys

# --------- ANSI COLORS ----------
class Color:
    RESET = "\033[0m"
    DIM = "\033[2m"
    BOLD = "\033[1m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"


def _use_color(stream) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _paint(text, color, stream):
    if color == Color.RESET or not _use_color(stream):
        return text
    return f"{color}{text}{Color.RESET}"


# --------- DIAGNOSTICS (stderr) ----------
def print_info(text, color=Color.RESET, stream=None):
    stream = sys.stderr if stream is None else stream
    stream.write(_paint(text, color, stream) + "\n")
    stream.flush()


def print_warning(text, stream=None):
    print_info(text, color=Color.YELLOW, stream=stream)


def print_error(text, stream=None):
    print_info(text, color=Color.RED, stream=stream)


# --------- STREAMED OUTPUT (stdout) ----------
def write_fragment(text, stream=None):
    # flushed per fragment so the list appears as it streams in
    stream = sys.stdout if stream is None else stream
    stream.write(text)
    stream.flush()
