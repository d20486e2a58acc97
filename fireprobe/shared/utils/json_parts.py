"""Split a log body into prose and embedded JSON fragments for display."""

import json
import re
from dataclasses import dataclass

_OPENERS = re.compile(r"[{\[]")


@dataclass(frozen=True)
class BodyPart:
    """One display segment of a log body."""

    text: str
    is_json: bool


def _match_brackets(text: str) -> int:
    """Return the index closing the bracket opened at text[0], or -1."""
    depth = 0
    in_string = False
    escaped = False
    for index, char in enumerate(text):
        if escaped:
            escaped = False
            continue
        if char == "\\" and in_string:
            escaped = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if char in "{[":
            depth += 1
        elif char in "}]":
            depth -= 1
            if depth == 0:
                return index
    return -1


def split_json_parts(body: str) -> list[BodyPart]:
    """Split ``body`` into prose and pretty-printed JSON parts, in order.

    A fragment counts as JSON only if it is bracket-balanced and decodes;
    otherwise its opening bracket is kept as prose and scanning resumes
    after it.
    """
    parts: list[BodyPart] = []
    remaining = body

    def add_text(text: str) -> None:
        if parts and not parts[-1].is_json:
            parts[-1] = BodyPart(parts[-1].text + text, False)
        else:
            parts.append(BodyPart(text, False))

    while remaining:
        match = _OPENERS.search(remaining)
        if match is None:
            add_text(remaining)
            break
        if match.start() > 0:
            add_text(remaining[: match.start()])
            remaining = remaining[match.start() :]

        end = _match_brackets(remaining)
        if end != -1:
            try:
                decoded = json.loads(remaining[: end + 1])
            except ValueError:
                pass
            else:
                parts.append(BodyPart(json.dumps(decoded, indent=2), True))
                remaining = remaining[end + 1 :]
                continue

        add_text(remaining[0])
        remaining = remaining[1:]

    return parts
