"""
Comment and JSDoc extraction.

Leading comments are preserved exactly as written; JSDoc blocks are parsed into
a description and tags.
"""

import re
from typing import Dict, List, Optional, Tuple

import tree_sitter as ts

from tsdoc.models import CommentRecord, CommentType, JSDocRecord, JSDocTag
from tsdoc.parsers import get_node_text, leading_comment_nodes

# Tags whose first word names the documented parameter or property
PARAM_TAGS = ("param", "arg", "argument", "property", "prop")
RETURN_TAGS = ("returns", "return")

_TAG_RE = re.compile(r"^@(\S+)\s*(.*)$")
_SEPARATOR_RE = re.compile(r"^-\s*")
_WHITESPACE_RE = re.compile(r"\s+")


def extract_comments(node: ts.Node) -> List[CommentRecord]:
    """Return every comment directly preceding *node*, verbatim."""
    comments: List[CommentRecord] = []
    for comment in leading_comment_nodes(node):
        text = get_node_text(comment)
        comments.append(
            CommentRecord(
                type=(
                    CommentType.SINGLE_LINE
                    if text.startswith("//")
                    else CommentType.MULTI_LINE
                ),
                text=text,
                start=comment.start_byte,
            )
        )
    return comments


def is_jsdoc(text: str) -> bool:
    return text.startswith("/**") and text.endswith("*/") and text != "/**/"


def extract_jsdoc(node: ts.Node) -> Optional[JSDocRecord]:
    """
    Parse the first JSDoc block preceding *node*. Returns None when the node
    has no JSDoc block, so "no docs" stays distinct from "empty docs".
    """
    for comment in leading_comment_nodes(node):
        text = get_node_text(comment)
        if is_jsdoc(text):
            return parse_jsdoc(text)
    return None


def _jsdoc_lines(text: str) -> List[str]:
    body = text[3:-2]
    lines: List[str] = []
    for line in body.splitlines():
        line = line.strip()
        if line.startswith("*"):
            line = line[1:]
            if line.startswith(" "):
                line = line[1:]
        lines.append(line.rstrip())
    return lines


def _split_braced(text: str) -> Tuple[Optional[str], str]:
    """Split a leading ``{type}`` expression off *text*."""
    if not text.startswith("{"):
        return None, text
    depth = 0
    for idx, ch in enumerate(text):
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[1:idx].strip(), text[idx + 1 :].lstrip()
    return None, text


def _split_target(text: str) -> Tuple[Optional[str], str]:
    """Split the documented name (``name`` or ``[name=default]``) off *text*."""
    if not text:
        return None, text
    if text.startswith("["):
        end = text.find("]")
        if end < 0:
            return None, text
        inner = text[1:end].split("=", 1)[0].strip()
        return inner or None, text[end + 1 :].lstrip()
    head, *rest = _WHITESPACE_RE.split(text, maxsplit=1)
    return head, rest[0] if rest else ""


def _make_tag(name: str, lines: List[str]) -> JSDocTag:
    rest = "\n".join(lines).strip()
    tag_type, rest = _split_braced(rest)
    target: Optional[str] = None
    if name in PARAM_TAGS:
        target, rest = _split_target(rest)
        rest = _SEPARATOR_RE.sub("", rest)
    return JSDocTag(name=name, text=rest.strip(), type=tag_type, target=target)


def parse_jsdoc(text: str) -> JSDocRecord:
    description: List[str] = []
    tags: List[JSDocTag] = []
    tag_name: Optional[str] = None
    tag_lines: List[str] = []

    for line in _jsdoc_lines(text):
        m = _TAG_RE.match(line)
        if m:
            if tag_name is not None:
                tags.append(_make_tag(tag_name, tag_lines))
            tag_name = m.group(1)
            tag_lines = [m.group(2)]
        elif tag_name is not None:
            tag_lines.append(line)
        else:
            description.append(line)

    if tag_name is not None:
        tags.append(_make_tag(tag_name, tag_lines))

    return JSDocRecord(description="\n".join(description).strip(), tags=tags)


def extract_param_comment(
    jsdoc: Optional[JSDocRecord], param_name: str
) -> Optional[str]:
    """
    Return the comment of the first ``@param`` tag documenting *param_name*.
    Tags are matched on the documented name, not on their text.
    """
    if jsdoc is None:
        return None
    target = param_name[3:] if param_name.startswith("...") else param_name
    for tag in jsdoc.tags:
        if tag.name == "param" and tag.target == target:
            return tag.text or None
    return None


def jsdoc_param_types(jsdoc: Optional[JSDocRecord]) -> Dict[str, str]:
    """Map documented parameter names to their ``{type}`` annotations."""
    if jsdoc is None:
        return {}
    out: Dict[str, str] = {}
    for tag in jsdoc.tags:
        if tag.name in ("param", "arg", "argument") and tag.target and tag.type:
            out.setdefault(tag.target, tag.type)
    return out


def jsdoc_return_type(jsdoc: Optional[JSDocRecord]) -> Optional[str]:
    if jsdoc is None:
        return None
    return next((t.type for t in jsdoc.tags if t.name in RETURN_TAGS and t.type), None)
