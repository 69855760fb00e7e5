"""
Module extraction: load a file, classify its exported declarations and wrap
them into a deterministically ordered result.
"""

import json
from pathlib import Path
from typing import List, Optional, Union

from tsdoc.errors import InvalidArgumentError
from tsdoc.helpers import derive_module_name, locale_key
from tsdoc.logger import logger
from tsdoc.models import (
    ExtractionResult,
    ImportRecord,
    ModuleMetadata,
    SymbolKind,
    SymbolRecord,
    Variant,
)
from tsdoc.parsers import SourceFile, get_node_text, load_source, string_value
from tsdoc.settings import ExtractorSettings
from tsdoc.symbols import classify

KIND_PRIORITY = {
    SymbolKind.TYPE: 0,
    SymbolKind.INTERFACE: 1,
    SymbolKind.CONST: 2,
    SymbolKind.FUNCTION: 3,
    SymbolKind.CLASS: 4,
    SymbolKind.ENUM: 5,
}
UNKNOWN_PRIORITY = 99


def export_sort_key(symbol: SymbolRecord) -> tuple:
    return KIND_PRIORITY.get(symbol.kind, UNKNOWN_PRIORITY), locale_key(symbol.name)


def coerce_variant(variant: Union[str, Variant]) -> Variant:
    try:
        return Variant(variant)
    except ValueError:
        raise InvalidArgumentError(
            f"variant must be 'public' or 'internal', got '{variant}'"
        ) from None


def extract_imports(source: SourceFile) -> List[ImportRecord]:
    imports: List[ImportRecord] = []
    for stmt in source.statements("import_statement"):
        module_node = stmt.child_by_field_name("source")
        if module_node is None:
            # import x = require("...") is not an import declaration
            continue

        named: List[str] = []
        default: Optional[str] = None
        clause = next((c for c in stmt.named_children if c.type == "import_clause"), None)
        if clause is not None:
            for ch in clause.named_children:
                if ch.type == "identifier":
                    default = get_node_text(ch)
                elif ch.type == "named_imports":
                    for spec in ch.named_children:
                        if spec.type == "import_specifier":
                            named.append(get_node_text(spec.child_by_field_name("name")))

        imports.append(
            ImportRecord(
                module=string_value(module_node),
                named_imports=named,
                default_import=default,
            )
        )
    return imports


def extract_module(
    file_path: Union[str, Path],
    variant: Union[str, Variant, None] = None,
    settings: Optional[ExtractorSettings] = None,
) -> ExtractionResult:
    """
    Extract the API surface of one TypeScript/JavaScript file.

    Exports are ordered by kind (type, interface, const, function, class,
    enum, then anything else) and by name within a kind, so repeated runs give
    identical output regardless of declaration order. *variant* defaults to
    the configured one.
    """
    settings = settings or ExtractorSettings()
    selected = coerce_variant(variant if variant is not None else settings.variant)
    source = load_source(file_path)

    symbols: List[SymbolRecord] = []
    for _name, declarations in source.exported_declarations():
        for declaration in declarations:
            symbol = classify(declaration, selected, settings)
            if symbol is not None:
                symbols.append(symbol)
    symbols.sort(key=export_sort_key)

    logger.debug(
        "Extracted module",
        path=str(source.path),
        variant=selected.value,
        exports=len(symbols),
    )

    return ExtractionResult(
        module=derive_module_name(source.path, settings.sources_root),
        file_path=str(file_path),
        exports=symbols,
        imports=extract_imports(source),
        metadata=ModuleMetadata(
            has_default_export=source.has_default_export(),
            export_count=len(symbols),
            loc=source.end_line_number(),
        ),
    )


def render_json(result: ExtractionResult) -> str:
    """Render a result as 2-space indented JSON."""
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
