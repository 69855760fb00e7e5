from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Variant(str, Enum):
    PUBLIC = "public"
    INTERNAL = "internal"


class SymbolKind(str, Enum):
    FUNCTION = "function"
    CLASS = "class"
    INTERFACE = "interface"
    TYPE = "type"
    CONST = "const"
    ENUM = "enum"
    UNKNOWN = "unknown"


class MemberKind(str, Enum):
    CONSTRUCTOR = "constructor"
    PROPERTY = "property"
    METHOD = "method"


class Visibility(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class CommentType(str, Enum):
    SINGLE_LINE = "single-line"
    MULTI_LINE = "multi-line"


# Base record: camelCase on the wire, immutable once built
class Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# Comments and documentation
class CommentRecord(Record):
    type: CommentType
    text: str  # verbatim, delimiters included
    start: int  # byte offset in the source file


class JSDocTag(Record):
    name: str
    text: str = ""
    type: Optional[str] = None
    # documented parameter name for @param-like tags, not serialized
    target: Optional[str] = Field(default=None, exclude=True)


class JSDocRecord(Record):
    description: str = ""
    tags: List[JSDocTag] = Field(default_factory=list)


class TypeInfo(Record):
    raw: str
    is_generic: bool
    type_parameters: List[str] = Field(default_factory=list)


class ParameterRecord(Record):
    name: str
    type: str
    optional: bool = False
    default_value: Optional[str] = None
    comment: Optional[str] = None


class MemberRecord(Record):
    kind: MemberKind
    name: str
    signature: str
    visibility: Visibility = Visibility.PUBLIC
    is_static: bool = False
    is_async: Optional[bool] = None
    leading_comments: List[CommentRecord] = Field(default_factory=list)
    js_doc: Optional[JSDocRecord] = None
    parameters: Optional[List[ParameterRecord]] = None
    return_type: Optional[str] = None


class InterfaceMemberRecord(Record):
    name: str
    signature: str
    leading_comments: List[CommentRecord] = Field(default_factory=list)


class EnumValue(Record):
    name: str
    value: Optional[Union[int, float, str]] = None


# ---------------------------------------------------------------------------
# Symbols: one variant per kind, discriminated by `kind`
# ---------------------------------------------------------------------------


class BaseSymbol(Record):
    kind: SymbolKind
    name: str
    signature: str
    leading_comments: List[CommentRecord] = Field(default_factory=list)
    js_doc: Optional[JSDocRecord] = None
    is_private: bool = False


class FunctionSymbol(BaseSymbol):
    kind: Literal[SymbolKind.FUNCTION] = SymbolKind.FUNCTION
    parameters: List[ParameterRecord] = Field(default_factory=list)
    return_type: str
    is_async: bool = False


class ClassSymbol(BaseSymbol):
    kind: Literal[SymbolKind.CLASS] = SymbolKind.CLASS
    base_class: Optional[str] = None
    interfaces: List[str] = Field(default_factory=list)
    members: List[MemberRecord] = Field(default_factory=list)


class InterfaceSymbol(BaseSymbol):
    kind: Literal[SymbolKind.INTERFACE] = SymbolKind.INTERFACE
    properties: List[InterfaceMemberRecord] = Field(default_factory=list)


class TypeAliasSymbol(BaseSymbol):
    kind: Literal[SymbolKind.TYPE] = SymbolKind.TYPE
    type_info: TypeInfo


class ConstSymbol(BaseSymbol):
    kind: Literal[SymbolKind.CONST] = SymbolKind.CONST
    type_info: TypeInfo
    value: Optional[str] = None


class EnumSymbol(BaseSymbol):
    kind: Literal[SymbolKind.ENUM] = SymbolKind.ENUM
    enum_values: List[EnumValue] = Field(default_factory=list)


class UnknownSymbol(BaseSymbol):
    kind: Literal[SymbolKind.UNKNOWN] = SymbolKind.UNKNOWN


SymbolRecord = Annotated[
    Union[
        FunctionSymbol,
        ClassSymbol,
        InterfaceSymbol,
        TypeAliasSymbol,
        ConstSymbol,
        EnumSymbol,
        UnknownSymbol,
    ],
    Field(discriminator="kind"),
]


# Module level
class ImportRecord(Record):
    module: str
    named_imports: List[str] = Field(default_factory=list)
    default_import: Optional[str] = None


class ModuleMetadata(Record):
    has_default_export: bool
    export_count: int
    loc: int


class ExtractionResult(Record):
    module: str
    file_path: str
    exports: List[SymbolRecord] = Field(default_factory=list)
    imports: List[ImportRecord] = Field(default_factory=list)
    metadata: ModuleMetadata
