from typing import Dict, Optional

from tsdoc.comments import extract_comments, extract_jsdoc
from tsdoc.helpers import is_restricted
from tsdoc.kinds import EXTRACTORS
from tsdoc.models import SymbolKind, SymbolRecord, UnknownSymbol, Variant
from tsdoc.parsers import Declaration
from tsdoc.resolve import node_visibility
from tsdoc.settings import ExtractorSettings
from tsdoc.signatures import build_signature

# Syntax node kinds that map onto a symbol kind; anything else is unknown.
KIND_TABLE: Dict[str, SymbolKind] = {
    "function_declaration": SymbolKind.FUNCTION,
    "generator_function_declaration": SymbolKind.FUNCTION,
    "function_signature": SymbolKind.FUNCTION,
    "function_expression": SymbolKind.FUNCTION,
    "function": SymbolKind.FUNCTION,
    "generator_function": SymbolKind.FUNCTION,
    "arrow_function": SymbolKind.FUNCTION,
    "method_definition": SymbolKind.FUNCTION,
    "class_declaration": SymbolKind.CLASS,
    "abstract_class_declaration": SymbolKind.CLASS,
    "class": SymbolKind.CLASS,
    "interface_declaration": SymbolKind.INTERFACE,
    "type_alias_declaration": SymbolKind.TYPE,
    "variable_declarator": SymbolKind.CONST,
    "enum_declaration": SymbolKind.ENUM,
}


def map_kind(label: str) -> SymbolKind:
    return KIND_TABLE.get(label, SymbolKind.UNKNOWN)


def resolve_name(declaration: Declaration) -> str:
    """Explicit name, else the exported name, else ``"default"``."""
    return declaration.name or declaration.export_name or "default"


def classify(
    declaration: Declaration,
    variant: Variant = Variant.PUBLIC,
    settings: Optional[ExtractorSettings] = None,
) -> Optional[SymbolRecord]:
    """
    Build the symbol record for one exported declaration, or return None when
    the declaration is hidden from *variant*.
    """
    settings = settings or ExtractorSettings()
    kind = map_kind(declaration.label)
    name = resolve_name(declaration)
    is_private = is_restricted(name, node_visibility(declaration.node))
    if variant is Variant.PUBLIC and is_private:
        return None

    js_doc = extract_jsdoc(declaration.anchor)
    base = dict(
        name=name,
        signature=build_signature(kind, declaration, name, js_doc, settings),
        leading_comments=extract_comments(declaration.anchor),
        js_doc=js_doc,
        is_private=is_private,
    )

    extractor = EXTRACTORS.get(kind)
    if extractor is None:
        return UnknownSymbol(**base)
    return extractor(base, declaration, variant, settings)
