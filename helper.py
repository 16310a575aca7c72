import sys

GRAY = "\033[90m"
RESET = "\033[0m"


def print_gray(text: str, file=None) -> None:
    """
    Print a diagnostic line to stderr (or `file`), gray when it is a terminal.
    """
    stream = sys.stderr if file is None else file
    if stream.isatty():
        text = f"{GRAY}{text}{RESET}"
    print(text, file=stream)
