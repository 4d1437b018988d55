from __future__ import annotations

import re

MAX_CLASS_LENGTH = 29
MAX_FALLBACK_CLASSES = 2


def normalize_space(value: str | None, limit: int = 200) -> str:
    if not value:
        return ""
    compact = re.sub(r"\s+", " ", str(value)).strip()
    return compact[:limit] if compact else ""


def unescape_locator_text(value: str) -> str:
    return re.sub(r"\\(.)", r"\1", value, flags=re.DOTALL)


def css_escape_identifier(value: str) -> str:
    if value == "-":
        return "\\-"

    pieces: list[str] = []
    for index, char in enumerate(value):
        code = ord(char)
        if code == 0:
            pieces.append("\ufffd")
        elif 0x1 <= code <= 0x1F or code == 0x7F:
            pieces.append(f"\\{code:x} ")
        elif index == 0 and char.isdigit() and char.isascii():
            pieces.append(f"\\{code:x} ")
        elif index == 1 and value[0] == "-" and char.isdigit() and char.isascii():
            pieces.append(f"\\{code:x} ")
        elif code >= 0x80 or char in "-_" or (char.isascii() and char.isalnum()):
            pieces.append(char)
        else:
            pieces.append(f"\\{char}")
    return "".join(pieces)


def is_noise_class(token: str) -> bool:
    # Tailwind variants (hover:bg-x) and hashed CSS-in-JS names.
    return ":" in token or len(token) > MAX_CLASS_LENGTH


def xpath_literal(value: str) -> str:
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    parts = value.split('"')
    return "concat(" + ", '\"', ".join(f'"{part}"' for part in parts) + ")"
