"""ANSI terminal color codes and the helper that wraps text in them."""

RESET = "\033[0m"

BLACK = 30
RED = 31
GREEN = 32
YELLOW = 33
BLUE = 34
MAGENTA = 35
CYAN = 36
LIGHT_GRAY = 37
DARK_GRAY = 90
LIGHT_RED = 91
LIGHT_GREEN = 92
LIGHT_YELLOW = 93
LIGHT_BLUE = 94
LIGHT_MAGENTA = 95
LIGHT_CYAN = 96
WHITE = 97


def colorize(color_code: int, value: str) -> str:
    """Wrap *value* in the escape sequence for *color_code* followed by a reset."""
    return f"\033[{color_code}m{value}{RESET}"
