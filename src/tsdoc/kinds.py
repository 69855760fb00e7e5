"""
Kind-specific extractors. Each one takes the base symbol fields collected by
the classifier and returns the finished record for its kind.
"""

from typing import Any, Callable, Dict, List, Optional

import tree_sitter as ts

from tsdoc.comments import (
    extract_comments,
    extract_jsdoc,
    extract_param_comment,
    jsdoc_param_types,
    jsdoc_return_type,
)
from tsdoc.helpers import is_restricted, locale_key
from tsdoc.models import (
    ClassSymbol,
    ConstSymbol,
    EnumSymbol,
    EnumValue,
    FunctionSymbol,
    InterfaceMemberRecord,
    InterfaceSymbol,
    JSDocRecord,
    MemberKind,
    MemberRecord,
    ParameterRecord,
    SymbolKind,
    SymbolRecord,
    TypeAliasSymbol,
    Variant,
    Visibility,
)
from tsdoc.parsers import Declaration, declared_name, get_node_text, has_token
from tsdoc.resolve import (
    ParsedParameter,
    class_heritage,
    enum_members,
    is_accessor,
    node_visibility,
    property_type,
    resolve_parameters,
    resolve_return_type,
    resolve_variable_type,
)
from tsdoc.settings import ExtractorSettings
from tsdoc.signatures import (
    constructor_signature,
    method_signature,
    property_signature,
)
from tsdoc.typeinfo import extract_type_info

Extractor = Callable[
    [Dict[str, Any], Declaration, Variant, ExtractorSettings], SymbolRecord
]

METHOD_TYPES = ("method_definition", "method_signature", "abstract_method_signature")
PROPERTY_TYPES = ("public_field_definition",)

# symbol names the type checker gives to unnamed interface members
_SIGNATURE_SYMBOLS = {
    "call_signature": "__call",
    "construct_signature": "__new",
    "index_signature": "__index",
}


def _parameter_records(
    parsed: List[ParsedParameter], js_doc: Optional[JSDocRecord]
) -> List[ParameterRecord]:
    return [
        ParameterRecord(
            name=p.name,
            type=p.type,
            optional=p.optional,
            default_value=p.default,
            comment=extract_param_comment(js_doc, p.name),
        )
        for p in parsed
    ]


def _doc_types(js_doc: Optional[JSDocRecord], use_docs: bool) -> Optional[Dict[str, str]]:
    return jsdoc_param_types(js_doc) if use_docs else None


def extract_function(
    base: Dict[str, Any],
    declaration: Declaration,
    variant: Variant,
    settings: ExtractorSettings,
) -> FunctionSymbol:
    node = declaration.node
    js_doc: Optional[JSDocRecord] = base.get("js_doc")
    use_docs = declaration.source.is_javascript
    return FunctionSymbol(
        **base,
        parameters=_parameter_records(
            resolve_parameters(node, _doc_types(js_doc, use_docs)), js_doc
        ),
        return_type=resolve_return_type(
            node, jsdoc_return_type(js_doc) if use_docs else None
        ),
        is_async=has_token(node, "async"),
    )


# --- classes --------------------------------------------------------
def _constructor_member(node: ts.Node, use_docs: bool) -> MemberRecord:
    js_doc = extract_jsdoc(node)
    parsed = resolve_parameters(node, _doc_types(js_doc, use_docs))
    return MemberRecord(
        kind=MemberKind.CONSTRUCTOR,
        name="constructor",
        signature=constructor_signature(parsed),
        visibility=Visibility.PUBLIC,
        is_static=False,
        leading_comments=extract_comments(node),
        js_doc=js_doc,
        parameters=_parameter_records(parsed, js_doc),
    )


def _method_member(
    node: ts.Node, name: str, visibility: Visibility, use_docs: bool
) -> MemberRecord:
    js_doc = extract_jsdoc(node)
    parsed = resolve_parameters(node, _doc_types(js_doc, use_docs))
    return_type = resolve_return_type(
        node, jsdoc_return_type(js_doc) if use_docs else None
    )
    return MemberRecord(
        kind=MemberKind.METHOD,
        name=name,
        signature=method_signature(name, parsed, return_type),
        visibility=visibility,
        is_static=has_token(node, "static"),
        is_async=has_token(node, "async"),
        leading_comments=extract_comments(node),
        js_doc=js_doc,
        parameters=_parameter_records(parsed, js_doc),
        return_type=return_type,
    )


def _property_member(node: ts.Node, name: str, visibility: Visibility) -> MemberRecord:
    return MemberRecord(
        kind=MemberKind.PROPERTY,
        name=name,
        signature=property_signature(name, property_type(node)),
        visibility=visibility,
        is_static=has_token(node, "static"),
        leading_comments=extract_comments(node),
        js_doc=extract_jsdoc(node),
    )


def _member_order(member: MemberRecord) -> tuple:
    group = {
        MemberKind.CONSTRUCTOR: 0,
        MemberKind.PROPERTY: 1,
        MemberKind.METHOD: 2,
    }[member.kind]
    return group, locale_key(member.name)


def class_members(
    node: ts.Node, variant: Variant, use_docs: bool = False
) -> List[MemberRecord]:
    """
    Constructor first, then properties, then methods, each group in name
    order. Restricted members are dropped for the public variant.
    """
    body = node.child_by_field_name("body")
    entries = [c for c in body.named_children] if body is not None else []
    implemented = {
        declared_name(c) for c in entries if c.type == "method_definition"
    }

    ctor: Optional[MemberRecord] = None
    members: List[MemberRecord] = []
    for child in entries:
        if child.type in METHOD_TYPES:
            name = declared_name(child) or ""
            if name == "constructor":
                if ctor is None:
                    ctor = _constructor_member(child, use_docs)
                continue
            if is_accessor(child):
                continue
            # overload signatures of an implemented method
            if child.type == "method_signature" and name in implemented:
                continue
            visibility = node_visibility(child)
            if variant is Variant.PUBLIC and is_restricted(name, visibility):
                continue
            members.append(_method_member(child, name, visibility, use_docs))
        elif child.type in PROPERTY_TYPES:
            name = declared_name(child) or ""
            visibility = node_visibility(child)
            if variant is Variant.PUBLIC and is_restricted(name, visibility):
                continue
            members.append(_property_member(child, name, visibility))

    if ctor is not None:
        members.append(ctor)
    members.sort(key=_member_order)
    return members


def extract_class(
    base: Dict[str, Any],
    declaration: Declaration,
    variant: Variant,
    settings: ExtractorSettings,
) -> ClassSymbol:
    base_class, interfaces = class_heritage(declaration.node)
    return ClassSymbol(
        **base,
        base_class=base_class,
        interfaces=interfaces,
        members=class_members(
            declaration.node, variant, declaration.source.is_javascript
        ),
    )


# --- interfaces, aliases, constants, enums --------------------------
def interface_members(node: ts.Node) -> List[InterfaceMemberRecord]:
    body = node.child_by_field_name("body")
    if body is None:
        return []
    out: List[InterfaceMemberRecord] = []
    for member in body.named_children:
        if member.type == "comment":
            continue
        name = (
            _SIGNATURE_SYMBOLS.get(member.type) or declared_name(member) or "unknown"
        )
        text = get_node_text(member)
        sep = member.next_sibling
        if sep is not None and sep.type in (";", ","):
            # the member text includes its own terminator
            text += get_node_text(sep)
        out.append(
            InterfaceMemberRecord(
                name=name,
                signature=text,
                leading_comments=extract_comments(member),
            )
        )
    return out


def extract_interface(
    base: Dict[str, Any],
    declaration: Declaration,
    variant: Variant,
    settings: ExtractorSettings,
) -> InterfaceSymbol:
    return InterfaceSymbol(**base, properties=interface_members(declaration.node))


def extract_type_alias(
    base: Dict[str, Any],
    declaration: Declaration,
    variant: Variant,
    settings: ExtractorSettings,
) -> TypeAliasSymbol:
    raw = get_node_text(declaration.node.child_by_field_name("value"))
    return TypeAliasSymbol(**base, type_info=extract_type_info(raw))


def extract_const(
    base: Dict[str, Any],
    declaration: Declaration,
    variant: Variant,
    settings: ExtractorSettings,
) -> ConstSymbol:
    node = declaration.node
    value = node.child_by_field_name("value")
    return ConstSymbol(
        **base,
        type_info=extract_type_info(resolve_variable_type(node)),
        value=get_node_text(value) if value is not None else None,
    )


def extract_enum(
    base: Dict[str, Any],
    declaration: Declaration,
    variant: Variant,
    settings: ExtractorSettings,
) -> EnumSymbol:
    return EnumSymbol(
        **base,
        enum_values=[
            EnumValue(name=name, value=value)
            for name, value in enum_members(declaration.node)
        ],
    )


EXTRACTORS: Dict[SymbolKind, Extractor] = {
    SymbolKind.FUNCTION: extract_function,
    SymbolKind.CLASS: extract_class,
    SymbolKind.INTERFACE: extract_interface,
    SymbolKind.TYPE: extract_type_alias,
    SymbolKind.CONST: extract_const,
    SymbolKind.ENUM: extract_enum,
}
