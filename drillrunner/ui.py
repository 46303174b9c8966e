"""Terminal styling and status messages."""

from __future__ import annotations

import os
import sys

_RESET = "\x1b[0m"
_BOLD = "\x1b[1m"
_RED = "\x1b[31m"
_GREEN = "\x1b[32m"
_BLUE = "\x1b[34m"


def no_emoji() -> bool:
    """Return True when the NO_EMOJI environment variable is set."""
    return "NO_EMOJI" in os.environ


def emoji(fancy: str, plain: str) -> str:
    """Pick the emoji form of a symbol, or its plain fallback under NO_EMOJI."""
    return plain if no_emoji() else fancy


def _colors_enabled() -> bool:
    force = os.environ.get("CLICOLOR_FORCE")
    if force is not None and force != "0":
        return True
    if "NO_COLOR" in os.environ or os.environ.get("CLICOLOR") == "0":
        return False
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def _style(code: str, text: object) -> str:
    text = str(text)
    if not _colors_enabled():
        return text
    return f"{code}{text}{_RESET}"


def bold(text: object) -> str:
    """Render text in bold."""
    return _style(_BOLD, text)


def red(text: object) -> str:
    """Render text in red."""
    return _style(_RED, text)


def green(text: object) -> str:
    """Render text in green."""
    return _style(_GREEN, text)


def blue(text: object) -> str:
    """Render text in blue."""
    return _style(_BLUE, text)


def warn(message: str) -> None:
    """Print a warning line in red."""
    print(f"{red(emoji('⚠️ ', '!'))} {red(message)}")


def success(message: str) -> None:
    """Print a success line in green."""
    print(f"{green(emoji('✅', '✓'))} {green(message)}")