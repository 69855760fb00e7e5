"""
Compact, human-readable signatures. These are for display only and never used
for matching.
"""

from typing import Iterable, List, Optional, Sequence

from tsdoc.comments import jsdoc_param_types, jsdoc_return_type
from tsdoc.models import JSDocRecord, SymbolKind
from tsdoc.parsers import Declaration, get_node_text, has_token
from tsdoc.resolve import (
    ParsedParameter,
    class_heritage,
    resolve_parameters,
    resolve_return_type,
    resolve_variable_type,
)
from tsdoc.settings import ExtractorSettings


def render_parameters(params: Iterable[ParsedParameter]) -> str:
    return ", ".join(
        f"{p.name}{'?' if p.optional and not p.is_rest else ''}: {p.type}"
        for p in params
    )


def function_signature(
    name: str, params: Sequence[ParsedParameter], return_type: str, is_async: bool
) -> str:
    prefix = "async " if is_async else ""
    return f"{prefix}function {name}({render_parameters(params)}): {return_type}"


def method_signature(
    name: str, params: Sequence[ParsedParameter], return_type: str
) -> str:
    return f"{name}({render_parameters(params)}): {return_type}"


def constructor_signature(params: Sequence[ParsedParameter]) -> str:
    return f"constructor({render_parameters(params)})"


def property_signature(name: str, type_text: str) -> str:
    return f"{name}: {type_text}"


def class_signature(name: str, base: Optional[str], interfaces: Sequence[str]) -> str:
    sig = f"class {name}"
    if base:
        sig += f" extends {base}"
    if interfaces:
        sig += f" implements {', '.join(interfaces)}"
    return sig


def interface_signature(name: str, members: Sequence[str], limit: int = 3) -> str:
    shown = "; ".join(members[:limit])
    more = "; ..." if len(members) > limit else ""
    return f"interface {name} {{ {shown}{more} }}"


def type_alias_signature(name: str, type_text: str) -> str:
    return f"type {name} = {type_text}"


def const_signature(
    name: str, type_text: str, initializer: Optional[str], limit: int = 50
) -> str:
    if initializer is not None and len(initializer) < limit:
        return f"const {name}: {type_text} = {initializer}"
    return f"const {name}: {type_text}"


def enum_signature(name: str) -> str:
    return f"enum {name}"


def fallback_signature(text: str, limit: int = 100) -> str:
    return text[:limit]


def interface_member_texts(node) -> List[str]:
    body = node.child_by_field_name("body")
    if body is None:
        return []
    return [get_node_text(c) for c in body.named_children if c.type != "comment"]


def build_signature(
    kind: SymbolKind,
    declaration: Declaration,
    name: str,
    js_doc: Optional[JSDocRecord] = None,
    settings: Optional[ExtractorSettings] = None,
) -> str:
    """Render the display signature of *declaration* according to its kind."""
    settings = settings or ExtractorSettings()
    node = declaration.node

    if kind is SymbolKind.FUNCTION:
        use_docs = declaration.source.is_javascript
        params = resolve_parameters(node, jsdoc_param_types(js_doc) if use_docs else None)
        ret = resolve_return_type(node, jsdoc_return_type(js_doc) if use_docs else None)
        return function_signature(name, params, ret, has_token(node, "async"))

    if kind is SymbolKind.CLASS:
        base, interfaces = class_heritage(node)
        return class_signature(name, base, interfaces)

    if kind is SymbolKind.INTERFACE:
        return interface_signature(
            name, interface_member_texts(node), settings.interface_preview_members
        )

    if kind is SymbolKind.TYPE:
        return type_alias_signature(name, get_node_text(node.child_by_field_name("value")))

    if kind is SymbolKind.CONST:
        value = node.child_by_field_name("value")
        return const_signature(
            name,
            resolve_variable_type(node),
            get_node_text(value) if value is not None else None,
            settings.initializer_preview_limit,
        )

    if kind is SymbolKind.ENUM:
        return enum_signature(name)

    return fallback_signature(declaration.text, settings.fallback_signature_limit)
