from tsdoc.extractor import extract_module, render_json
from tsdoc.models import ExtractionResult, SymbolKind, Variant
from tsdoc.symbols import classify

__all__ = [
    "ExtractionResult",
    "SymbolKind",
    "Variant",
    "classify",
    "extract_module",
    "render_json",
]
