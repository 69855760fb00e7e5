from pathlib import Path

import pytest

from tsdoc import classify, extract_module
from tsdoc.models import MemberKind, SymbolKind, Variant
from tsdoc.parsers import load_source
from tsdoc.symbols import map_kind


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #
def _extract(tmp_path: Path, code: str, name: str = "mod.ts", variant="public"):
    path = tmp_path / name
    path.write_text(code, encoding="utf-8")
    return {s.name: s for s in extract_module(path, variant).exports}


def _declarations(tmp_path: Path, code: str, name: str = "mod.ts"):
    path = tmp_path / name
    path.write_text(code, encoding="utf-8")
    return [d for _, decls in load_source(path).exported_declarations() for d in decls]


# --------------------------------------------------------------------------- #
# Classifier
# --------------------------------------------------------------------------- #
@pytest.mark.parametrize(
    "label, kind",
    [
        ("function_declaration", SymbolKind.FUNCTION),
        ("arrow_function", SymbolKind.FUNCTION),
        ("class_declaration", SymbolKind.CLASS),
        ("abstract_class_declaration", SymbolKind.CLASS),
        ("interface_declaration", SymbolKind.INTERFACE),
        ("type_alias_declaration", SymbolKind.TYPE),
        ("variable_declarator", SymbolKind.CONST),
        ("enum_declaration", SymbolKind.ENUM),
        ("internal_module", SymbolKind.UNKNOWN),
    ],
)
def test_map_kind(label, kind):
    assert map_kind(label) is kind


def test_classify_filters_private_for_public_variant(tmp_path):
    (decl,) = _declarations(tmp_path, "export function _internal(): void {}\n")

    assert classify(decl, Variant.PUBLIC) is None
    symbol = classify(decl, Variant.INTERNAL)
    assert symbol.is_private is True
    assert symbol.kind is SymbolKind.FUNCTION


def test_unknown_kinds_keep_base_fields(tmp_path):
    symbols = _extract(
        tmp_path,
        "export namespace Shapes {\n  export const unit = 1;\n}\nexport default 42;\n",
    )

    assert set(symbols) == {"Shapes", "default"}
    shapes = symbols["Shapes"]
    assert shapes.kind is SymbolKind.UNKNOWN
    assert shapes.signature.startswith("namespace Shapes {")
    assert set(shapes.to_dict()) == {"kind", "name", "signature", "leadingComments", "isPrivate"}
    assert symbols["default"].signature == "42"


def test_fallback_signature_is_truncated(tmp_path):
    body = "  export const value = 'x';\n" * 10
    shapes = _extract(tmp_path, f"export namespace Long {{\n{body}}}\n")["Long"]
    assert len(shapes.signature) == 100


# --------------------------------------------------------------------------- #
# Functions
# --------------------------------------------------------------------------- #
def test_inferred_parameter_and_return_types(tmp_path):
    symbols = _extract(
        tmp_path,
        "export function log(level = 'info', ...args): void {}\n"
        "export function noop() {}\n"
        "export async function load() { return 1; }\n"
        "export function opt(a?: number, b: string | null = null) { return a; }\n",
    )

    log = symbols["log"]
    assert [(p.name, p.type, p.optional) for p in log.parameters] == [
        ("level", "string", True),
        ("...args", "any[]", True),
    ]
    assert log.signature == "function log(level?: string, ...args: any[]): void"

    assert symbols["noop"].return_type == "void"
    assert symbols["load"].return_type == "Promise<any>"
    assert symbols["load"].is_async is True

    opt = symbols["opt"]
    assert opt.signature == "function opt(a?: number, b?: string | null): any"
    assert opt.parameters[1].default_value == "null"


def test_javascript_uses_jsdoc_types(tmp_path):
    symbols = _extract(
        tmp_path,
        "/**\n"
        " * Count things.\n"
        " * @param {string} name - the name\n"
        " * @returns {number} the count\n"
        " */\n"
        "export function count(name, times = 2) {\n"
        "  return name.length * times;\n"
        "}\n",
        name="count.js",
    )

    count = symbols["count"]
    assert count.signature == "function count(name: string, times?: number): number"
    assert count.parameters[0].comment == "the name"
    assert count.parameters[1].default_value == "2"
    assert count.return_type == "number"


def test_jsdoc_types_ignored_in_typescript(tmp_path):
    symbols = _extract(
        tmp_path,
        "/** @param {string} name */\nexport function hello(name) {}\n",
    )
    assert symbols["hello"].parameters[0].type == "any"


def test_default_export_of_anonymous_class(tmp_path):
    symbols = _extract(tmp_path, "export default class {\n  run(): void {}\n}\n")

    anon = symbols["default"]
    assert anon.kind is SymbolKind.CLASS
    assert anon.signature == "class default"
    assert [m.name for m in anon.members] == ["run"]


def test_default_export_of_identifier(tmp_path):
    symbols = _extract(
        tmp_path, "/** Main entry */\nfunction main(): number { return 0; }\nexport default main;\n"
    )

    assert list(symbols) == ["main"]
    assert symbols["main"].js_doc.description == "Main entry"


# --------------------------------------------------------------------------- #
# Classes
# --------------------------------------------------------------------------- #
def test_class_heritage(tmp_path):
    admin = _extract(
        tmp_path,
        "export class Admin extends Base<User> implements Auditable, Named {}\n",
    )["Admin"]

    assert admin.base_class == "Base"
    assert admin.interfaces == ["Auditable", "Named"]
    assert admin.signature == "class Admin extends Base implements Auditable, Named"


def test_javascript_class_heritage(tmp_path):
    widget = _extract(
        tmp_path, "export class Widget extends Base {}\n", name="mod.js"
    )["Widget"]

    assert widget.base_class == "Base"
    assert widget.interfaces == []


def test_class_members(tmp_path):
    code = (
        "export class Calc {\n"
        "  #secret = 1;\n"
        "  static readonly PI: number = 3.14;\n"
        "  constructor(private readonly base: number, scale = 1) {}\n"
        "  constructor(other: string) {}\n"
        "  static create(): Calc { return new Calc(0); }\n"
        "  get total(): number { return 0; }\n"
        "  set total(v: number) {}\n"
        "  add(x: number): number;\n"
        "  add(x: string): string;\n"
        "  add(x: any): any { return x; }\n"
        "  /** Reset state */\n"
        "  @logged\n"
        "  reset(): void {}\n"
        "}\n"
    )
    calc = _extract(tmp_path, code)["Calc"]

    assert [m.name for m in calc.members] == ["constructor", "PI", "add", "create", "reset"]
    ctor, pi, add, create, reset = calc.members

    assert ctor.kind is MemberKind.CONSTRUCTOR
    assert ctor.signature == "constructor(base: number, scale?: number)"
    assert ctor.is_static is False
    assert pi.kind is MemberKind.PROPERTY
    assert pi.is_static is True
    assert pi.signature == "PI: number"
    assert add.signature == "add(x: any): any"
    assert create.is_static is True
    assert create.return_type == "Calc"
    assert reset.js_doc.description == "Reset state"

    internal = _extract(tmp_path, code, variant="internal")["Calc"]
    secret = next(m for m in internal.members if m.name == "#secret")
    assert secret.visibility == "private"
    assert secret.signature == "#secret: number"


# --------------------------------------------------------------------------- #
# Interfaces
# --------------------------------------------------------------------------- #
def test_interface_signature_members(tmp_path):
    fn = _extract(
        tmp_path,
        "export interface Fn {\n"
        "  (x: number): string;\n"
        "  new (x: string): Fn;\n"
        "  [key: string]: any;\n"
        "  label: string;\n"
        "  run(): void;\n"
        "}\n",
    )["Fn"]

    assert [p.name for p in fn.properties] == ["__call", "__new", "__index", "label", "run"]
    assert fn.signature == (
        "interface Fn { (x: number): string; new (x: string): Fn; [key: string]: any; ... }"
    )
    assert fn.properties[3].signature == "label: string;"


def test_interface_property_signature_keeps_separator(tmp_path):
    point = _extract(
        tmp_path, "export interface Point {\n  x: number,\n  y: number\n}\n"
    )["Point"]

    assert [p.signature for p in point.properties] == ["x: number,", "y: number"]
    assert point.signature == "interface Point { x: number; y: number }"


# --------------------------------------------------------------------------- #
# Constants and type aliases
# --------------------------------------------------------------------------- #
def test_const_types(tmp_path):
    symbols = _extract(
        tmp_path,
        "// numbers\n"
        "export const answer = 42, label = 'two';\n"
        "export let counter = 0;\n"
        "export const ratio = -0.5;\n"
        "export const ready = true;\n"
        "export const items = [1, 2, 3];\n"
        "export const started = new Date();\n"
        "export const config = load() as Config;\n"
        "export const add = (a: number, b = 2): number => a + b;\n"
        "export declare const version: string;\n",
    )

    def raw(name):
        return symbols[name].type_info.raw

    assert raw("answer") == "42"
    assert raw("label") == '"two"'
    assert raw("counter") == "number"
    assert raw("ratio") == "-0.5"
    assert raw("ready") == "true"
    assert raw("items") == "number[]"
    assert raw("started") == "Date"
    assert raw("config") == "Config"
    assert raw("add") == "(a: number, b?: number) => number"

    # comments belong to the first declarator of a statement
    assert [c.text for c in symbols["answer"].leading_comments] == ["// numbers"]
    assert symbols["label"].leading_comments == []

    version = symbols["version"]
    assert version.value is None
    assert version.signature == "const version: string"
    assert "value" not in version.to_dict()


def test_const_literal_text_is_normalized(tmp_path):
    symbols = _extract(
        tmp_path,
        "export const hex = 0x10;\n"
        "export const big = 1_000;\n"
        "export const neg = -0x10;\n"
        "export const tpl = `x`;\n"
        "export const greeting = `hi ${name}`;\n"
        'export const quote = "say \\"hi\\"";\n'
        "export const accent = '\\u00e9';\n",
    )

    def raw(name):
        return symbols[name].type_info.raw

    assert raw("hex") == "16"
    assert raw("big") == "1000"
    assert raw("neg") == "-16"
    assert raw("tpl") == '"x"'
    assert raw("greeting") == "string"
    assert raw("quote") == '"say \\"hi\\""'
    assert raw("accent") == '"\u00e9"'


def test_const_signature_omits_long_initializer(tmp_path):
    long_text = "x" * 60
    symbols = _extract(
        tmp_path,
        f"export const short = 'abc';\nexport const long = '{long_text}';\n",
    )

    assert symbols["short"].signature == "const short: \"abc\" = 'abc'"
    assert symbols["long"].signature == f'const long: "{long_text}"'
    assert symbols["long"].value == f"'{long_text}'"


def test_type_alias_info(tmp_path):
    alias = _extract(
        tmp_path, "export type Lookup<T> = Map<string, Array<T>>;\n"
    )["Lookup"]

    assert alias.signature == "type Lookup = Map<string, Array<T>>"
    assert alias.type_info.is_generic is True
    assert alias.type_info.type_parameters == ["string", "Array<T>"]


# --------------------------------------------------------------------------- #
# Enums
# --------------------------------------------------------------------------- #
def test_enum_computed_values(tmp_path):
    flags = _extract(
        tmp_path,
        "export enum Flags {\n"
        "  None,\n"
        "  A = 1 << 0,\n"
        "  B = 1 << 1,\n"
        "  AB = A | B,\n"
        "  C,\n"
        "  Neg = -1,\n"
        "  Next,\n"
        "  'quoted-name' = 10,\n"
        "  Str = 's',\n"
        "}\n",
    )["Flags"]

    assert [(v.name, v.value) for v in flags.enum_values] == [
        ("None", 0),
        ("A", 1),
        ("B", 2),
        ("AB", 3),
        ("C", 4),
        ("Neg", -1),
        ("Next", 0),
        ("quoted-name", 10),
        ("Str", "s"),
    ]


def test_enum_unresolved_values_are_absent(tmp_path):
    random = _extract(
        tmp_path, "export enum Random {\n  A = Math.random(),\n  B,\n}\n"
    )["Random"]

    assert [(v.name, v.value) for v in random.enum_values] == [("A", None), ("B", None)]
    assert random.to_dict()["enumValues"] == [{"name": "A"}, {"name": "B"}]


def test_enum_string_escapes_are_decoded(tmp_path):
    text = _extract(
        tmp_path,
        "export enum Text {\n  Quote = 'a\\'b',\n  Line = \"x\\ny\",\n  Tpl = `t`,\n}\n",
    )["Text"]

    assert [(v.name, v.value) for v in text.enum_values] == [
        ("Quote", "a'b"),
        ("Line", "x\ny"),
        ("Tpl", "t"),
    ]


def test_enum_overflowing_arithmetic_is_absent(tmp_path):
    big = _extract(
        tmp_path,
        "export enum Big {\n"
        "  A = 10 ** 30000000,\n"
        "  B = 2 ** 10,\n"
        "  C = 1e308 * 10,\n"
        "  D = 3 * 4,\n"
        "}\n",
    )["Big"]

    assert [(v.name, v.value) for v in big.enum_values] == [
        ("A", None),
        ("B", 1024),
        ("C", None),
        ("D", 12),
    ]
