from __future__ import annotations

import re

NON_ALNUM_PATTERN = re.compile(r"[^0-9A-Za-z]")
VERSION_STRING_PATTERN = re.compile(r"^\s*(\d+)\.(\d+)\.(\d+)")


def sanitize_name(raw: str) -> str:
    """Drop every character that is not an ASCII letter or digit."""
    return NON_ALNUM_PATTERN.sub("", raw or "")


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments that sit outside string literals.

    Some vanilla and legacy packs ship manifests with comments, which the json
    module rejects. Line comments keep their terminating newline and block
    comments are replaced by a single space so token boundaries survive.
    An unterminated block comment swallows the rest of the text.
    """

    out: list[str] = []
    i = 0
    length = len(text)
    in_string = False
    while i < length:
        char = text[i]
        if in_string:
            out.append(char)
            if char == "\\" and i + 1 < length:
                out.append(text[i + 1])
                i += 2
                continue
            if char == '"':
                in_string = False
            i += 1
            continue

        if char == '"':
            in_string = True
            out.append(char)
            i += 1
            continue

        if char == "/" and i + 1 < length:
            following = text[i + 1]
            if following == "/":
                end = text.find("\n", i + 2)
                if end == -1:
                    break
                i = end
                continue
            if following == "*":
                end = text.find("*/", i + 2)
                if end == -1:
                    break
                out.append(" ")
                i = end + 2
                continue

        out.append(char)
        i += 1
    return "".join(out)
