"""Terminal-safe output with ASCII fallbacks for report icons.

Detects the terminal encoding and swaps the Unicode glyphs used by the
reports for ASCII equivalents when the terminal cannot render them.
"""
import sys
import locale


# Unicode to ASCII icon mapping for non-UTF-8 terminals
ICON_MAP = {
    # Status icons
    '✓': '[OK]',
    '✗': '[FAIL]',
    '⚠': '[WARN]',
    '⚡': '[!]',
    '💥': '[!]',

    # Reference kinds
    '◆': '*',
    '⬇': 'v',
    '▶': '>',
    '✦': '+',
    '•': '.',
    '○': 'o',

    # Entity kinds and export markers
    'ƒ': 'f',
    '◇': 'C',
    '▪': '-',
    '⬆': '^',
    '⬚': ' ',
    '■': '#',

    # Structural icons
    '←': '<-',
    '→': '->',
    '├': '+',
    '─': '-',
    '📄': '[file]',
    '📊': '[stats]',
}


def detect_terminal_encoding() -> str:
    """Detect the terminal's encoding capability.

    Returns:
        str: Terminal encoding ('utf-8', 'cp1252', 'ascii', etc.)
    """
    if hasattr(sys.stdout, 'encoding') and sys.stdout.encoding:
        return sys.stdout.encoding.lower()

    try:
        return locale.getpreferredencoding().lower()
    except Exception:
        pass

    return 'ascii'


def is_utf8_capable() -> bool:
    """Check if the terminal can handle UTF-8 Unicode characters."""
    return detect_terminal_encoding().replace('-', '').replace('_', '') == 'utf8'


def sanitize_for_terminal(text: str) -> str:
    """Replace Unicode icons with ASCII equivalents if terminal doesn't support UTF-8.

    Args:
        text: Text potentially containing Unicode icons

    Returns:
        str: Sanitized text safe for current terminal
    """
    if is_utf8_capable():
        return text

    sanitized = text
    for unicode_char, ascii_replacement in ICON_MAP.items():
        sanitized = sanitized.replace(unicode_char, ascii_replacement)

    return sanitized
