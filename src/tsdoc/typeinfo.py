"""
Type information serialization.
"""

from typing import List, Optional

from tsdoc.models import TypeInfo

_OPENERS = {"<": ">", "(": ")", "[": "]", "{": "}"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}


def extract_type_info(raw: str) -> TypeInfo:
    """
    Normalize a type's text into ``raw``, ``is_generic`` and its top-level
    type parameters.
    """
    return TypeInfo(
        raw=raw,
        is_generic="<" in raw,
        type_parameters=extract_type_parameters(raw),
    )


def _type_argument_span(type_str: str) -> Optional[str]:
    """Text between the first ``<`` and its matching ``>``."""
    start = type_str.find("<")
    if start < 0:
        return None
    depth = 0
    for idx in range(start, len(type_str)):
        ch = type_str[idx]
        if ch == ">" and idx > 0 and type_str[idx - 1] == "=":
            continue  # arrow in a function type
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
            if depth == 0:
                return type_str[start + 1 : idx]
    return None


def split_top_level(text: str, sep: str = ",") -> List[str]:
    """Split *text* on *sep* outside of any bracket pair."""
    parts: List[str] = []
    stack: List[str] = []
    current: List[str] = []
    quote: Optional[str] = None
    prev = ""
    for ch in text:
        if quote:
            current.append(ch)
            if ch == quote and prev != "\\":
                quote = None
        elif ch in "\"'`":
            quote = ch
            current.append(ch)
        elif ch in _OPENERS:
            stack.append(ch)
            current.append(ch)
        elif ch in _CLOSERS and not (ch == ">" and prev == "="):
            if stack and stack[-1] == _CLOSERS[ch]:
                stack.pop()
            current.append(ch)
        elif ch == sep and not stack:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
        prev = ch
    parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]


def extract_type_parameters(type_str: str) -> List[str]:
    """
    Type parameters of a generic type string:
    ``Map<string, Array<number>>`` -> ``["string", "Array<number>"]``.
    """
    span = _type_argument_span(type_str)
    if span is None:
        return []
    return split_top_level(span)
