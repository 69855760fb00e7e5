"""
Type and value resolution on top of the tree-sitter syntax tree.

tree-sitter has no type checker, so types come from explicit annotations, from
JSDoc in JavaScript files, or from the literal shape of initializers. Anything
else resolves to ``any``.
"""

import json
import math
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

import tree_sitter as ts

from tsdoc.models import Visibility
from tsdoc.parsers import get_node_text, has_token, string_value

FUNCTION_LIKE_TYPES = (
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
    "method_definition",
    "method_signature",
    "abstract_method_signature",
    "class",
    "class_declaration",
)

_WIDENED = {
    "string": "string",
    "template_string": "string",
    "number": "number",
    "true": "boolean",
    "false": "boolean",
}
_ARITHMETIC_OPS = {"-", "*", "/", "%", "**", "<<", ">>", ">>>", "&", "|", "^"}
_COMPARISON_OPS = {
    "==", "===", "!=", "!==", "<", ">", "<=", ">=", "instanceof", "in",
}
_EXPONENT_RE = re.compile(r"e([+-])0*(\d)")


@dataclass
class ParsedParameter:
    name: str
    type: str
    optional: bool
    default: Optional[str] = None

    @property
    def is_rest(self) -> bool:
        return self.name.startswith("...")


def annotation_text(node: Optional[ts.Node]) -> Optional[str]:
    """Text of a type annotation without its leading colon."""
    if node is None:
        return None
    txt = get_node_text(node).strip()
    if txt.startswith(":"):
        txt = txt[1:]
    return txt.strip() or None


def _quote_literal(node: ts.Node) -> str:
    return json.dumps(string_value(node), ensure_ascii=False)


def _has_substitution(node: ts.Node) -> bool:
    return any(c.type == "template_substitution" for c in node.named_children)


def _number_literal(text: str) -> str:
    """Canonical text of a numeric literal: ``0x10`` -> ``16``, ``1_000`` -> ``1000``."""
    value = _number(text)
    if value is None:
        return text
    if isinstance(value, int) and abs(value) < 10**21:
        return str(value)
    return _EXPONENT_RE.sub(r"e\1\2", repr(float(value)))


# --- expressions ----------------------------------------------------
def infer_expression_type(node: Optional[ts.Node], *, widen: bool) -> str:
    """
    Type of an initializer expression from its literal shape. *widen* turns
    literal types into their primitive (``"a"`` -> ``string``), as for
    mutable bindings.
    """
    if node is None:
        return "any"
    kind = node.type
    if kind == "parenthesized_expression":
        inner = next((c for c in node.named_children if c.type != "comment"), None)
        return infer_expression_type(inner, widen=widen)
    if kind in _WIDENED:
        if widen:
            return _WIDENED[kind]
        if kind == "string":
            return _quote_literal(node)
        if kind == "template_string":
            return "string" if _has_substitution(node) else _quote_literal(node)
        if kind == "number":
            return _number_literal(get_node_text(node))
        return get_node_text(node)
    if kind == "unary_expression":
        op = get_node_text(node.child_by_field_name("operator"))
        arg = node.child_by_field_name("argument")
        if op == "!":
            return "boolean"
        if op == "typeof":
            return "string"
        if op == "-" and arg is not None and arg.type == "number" and not widen:
            return "-" + _number_literal(get_node_text(arg))
        if op in ("-", "+", "~"):
            return "number"
        return "any"
    if kind == "binary_expression":
        op = get_node_text(node.child_by_field_name("operator"))
        if op in _COMPARISON_OPS:
            return "boolean"
        if op in _ARITHMETIC_OPS:
            return "number"
        if op == "+":
            left = infer_expression_type(node.child_by_field_name("left"), widen=True)
            right = infer_expression_type(node.child_by_field_name("right"), widen=True)
            if "string" in (left, right):
                return "string"
            if left == right == "number":
                return "number"
        return "any"
    if kind == "as_expression":
        target = node.children[-1] if node.children else None
        if target is not None and target.type == "const":
            return infer_expression_type(node.named_children[0], widen=False)
        return get_node_text(target) if target is not None else "any"
    if kind == "satisfies_expression":
        return infer_expression_type(node.named_children[0], widen=widen)
    if kind == "new_expression":
        ctor = get_node_text(node.child_by_field_name("constructor"))
        targs = get_node_text(node.child_by_field_name("type_arguments"))
        return f"{ctor}{targs}" if ctor else "any"
    if kind in ("arrow_function", "function_expression", "function"):
        return function_type_text(node)
    if kind == "array":
        element_types: List[str] = []
        for el in node.named_children:
            if el.type == "comment":
                continue
            t = infer_expression_type(el, widen=True)
            if t not in element_types:
                element_types.append(t)
        if not element_types:
            return "any[]"
        if len(element_types) == 1:
            return f"{element_types[0]}[]"
        return f"({' | '.join(element_types)})[]"
    if kind == "object":
        members: List[str] = []
        for pair in node.named_children:
            if pair.type != "pair":
                continue
            key = get_node_text(pair.child_by_field_name("key"))
            val = infer_expression_type(pair.child_by_field_name("value"), widen=True)
            members.append(f"{key}: {val};")
        return f"{{ {' '.join(members)} }}" if members else "{}"
    return "any"


# --- parameters & return types --------------------------------------
def parameter_nodes(fn: ts.Node) -> List[ts.Node]:
    single = fn.child_by_field_name("parameter")
    if single is not None:
        return [single]
    params = fn.child_by_field_name("parameters")
    if params is None:
        return []
    return [c for c in params.named_children if c.type not in ("comment", "decorator")]


def resolve_parameters(
    fn: ts.Node, doc_types: Optional[Dict[str, str]] = None
) -> List[ParsedParameter]:
    out: List[ParsedParameter] = []
    for p in parameter_nodes(fn):
        if p.type in ("required_parameter", "optional_parameter"):
            pattern = p.child_by_field_name("pattern")
            type_node = p.child_by_field_name("type")
            value = p.child_by_field_name("value")
            optional = p.type == "optional_parameter"
        elif p.type == "assignment_pattern":
            pattern = p.child_by_field_name("left")
            type_node = None
            value = p.child_by_field_name("right")
            optional = False
        else:
            pattern, type_node, value, optional = p, None, None, False

        name = get_node_text(pattern) or get_node_text(p)
        is_rest = pattern is not None and pattern.type == "rest_pattern"
        ptype = annotation_text(type_node)
        if ptype is None and doc_types:
            ptype = doc_types.get(name[3:] if is_rest else name)
        if ptype is None:
            if value is not None:
                ptype = infer_expression_type(value, widen=True)
            else:
                ptype = "any[]" if is_rest else "any"

        out.append(
            ParsedParameter(
                name=name,
                type=ptype,
                optional=optional or value is not None or is_rest,
                default=get_node_text(value) if value is not None else None,
            )
        )
    return out


def _returns_value(node: ts.Node) -> bool:
    for ch in node.named_children:
        if ch.type in FUNCTION_LIKE_TYPES:
            continue
        if ch.type == "return_statement":
            if any(c.type != "comment" for c in ch.named_children):
                return True
            continue
        if _returns_value(ch):
            return True
    return False


def resolve_return_type(fn: ts.Node, doc_type: Optional[str] = None) -> str:
    declared = annotation_text(fn.child_by_field_name("return_type"))
    if declared is not None:
        return declared
    if doc_type:
        return doc_type

    body = fn.child_by_field_name("body")
    if body is None:
        inner = "any"
    elif body.type == "statement_block":
        inner = "any" if _returns_value(body) else "void"
    else:
        inner = infer_expression_type(body, widen=True)

    if has_token(fn, "async"):
        return f"Promise<{inner}>"
    return inner


def function_type_text(fn: ts.Node) -> str:
    """Arrow type text, e.g. ``(a: string, b?: number) => void``."""
    params = ", ".join(
        f"{p.name}{'?' if p.optional and not p.is_rest else ''}: {p.type}"
        for p in resolve_parameters(fn)
    )
    return f"({params}) => {resolve_return_type(fn)}"


# --- variables ------------------------------------------------------
def declarator_keyword(declarator: ts.Node) -> str:
    parent = declarator.parent
    if parent is None:
        return "const"
    if parent.type == "variable_declaration":
        return "var"
    kind = parent.child_by_field_name("kind")
    return get_node_text(kind) or "const"


def resolve_variable_type(declarator: ts.Node) -> str:
    declared = annotation_text(declarator.child_by_field_name("type"))
    if declared is not None:
        return declared
    return infer_expression_type(
        declarator.child_by_field_name("value"),
        widen=declarator_keyword(declarator) != "const",
    )


# --- class & member accessors ---------------------------------------
def node_visibility(node: ts.Node) -> Visibility:
    """Visibility from modifiers: accessibility keywords and ``#private`` names."""
    modifier = next((c for c in node.children if c.type == "accessibility_modifier"), None)
    if modifier is not None:
        text = get_node_text(modifier)
        if text == "private":
            return Visibility.PRIVATE
        if text == "protected":
            return Visibility.PROTECTED
    name_node = node.child_by_field_name("name")
    if name_node is not None and name_node.type == "private_property_identifier":
        return Visibility.PRIVATE
    return Visibility.PUBLIC


def is_accessor(node: ts.Node) -> bool:
    return has_token(node, "get") or has_token(node, "set")


def class_heritage(node: ts.Node) -> Tuple[Optional[str], List[str]]:
    """Return the base class name and the implements-clause texts."""
    heritage = next((c for c in node.children if c.type == "class_heritage"), None)
    if heritage is None:
        return None, []

    base: Optional[str] = None
    interfaces: List[str] = []
    for clause in heritage.named_children:
        if clause.type == "extends_clause":
            value = clause.child_by_field_name("value")
            base = get_node_text(value) or None
        elif clause.type == "implements_clause":
            interfaces.extend(
                get_node_text(c) for c in clause.named_children if c.type != "comment"
            )
    return base, interfaces


def property_type(node: ts.Node) -> str:
    declared = annotation_text(node.child_by_field_name("type"))
    if declared is not None:
        return declared
    return infer_expression_type(node.child_by_field_name("value"), widen=True)


# --- enums ----------------------------------------------------------
EnumScalar = Union[int, float, str]


def _number(text: str) -> Optional[EnumScalar]:
    text = text.replace("_", "")
    try:
        if text.lower().startswith(("0x", "0o", "0b")):
            return int(text, 0)
        value = float(text)
    except ValueError:
        return None
    return _normalize(value)


def _normalize(value: float) -> Optional[EnumScalar]:
    if math.isnan(value) or math.isinf(value):
        return None
    if float(value).is_integer():
        return int(value)
    return value


def _to_int32(value: float) -> int:
    v = int(value) & 0xFFFFFFFF
    return v - (1 << 32) if v & 0x80000000 else v


def _evaluate(
    node: Optional[ts.Node], enum_name: str, known: Dict[str, Optional[EnumScalar]]
) -> Optional[EnumScalar]:
    """Evaluate a constant enum member initializer."""
    if node is None:
        return None
    kind = node.type
    if kind == "number":
        return _number(get_node_text(node))
    if kind == "string":
        return string_value(node)
    if kind == "template_string":
        return None if _has_substitution(node) else string_value(node)
    if kind == "parenthesized_expression":
        return _evaluate(node.named_children[0] if node.named_children else None, enum_name, known)
    if kind == "identifier":
        return known.get(get_node_text(node))
    if kind == "member_expression":
        obj = node.child_by_field_name("object")
        prop = node.child_by_field_name("property")
        if get_node_text(obj) == enum_name:
            return known.get(get_node_text(prop))
        return None
    if kind == "unary_expression":
        op = get_node_text(node.child_by_field_name("operator"))
        arg = _evaluate(node.child_by_field_name("argument"), enum_name, known)
        if not isinstance(arg, (int, float)):
            return None
        if op == "-":
            return _normalize(-arg)
        if op == "+":
            return arg
        if op == "~":
            return ~_to_int32(arg)
        return None
    if kind == "binary_expression":
        op = get_node_text(node.child_by_field_name("operator"))
        left = _evaluate(node.child_by_field_name("left"), enum_name, known)
        right = _evaluate(node.child_by_field_name("right"), enum_name, known)
        if left is None or right is None:
            return None
        if op == "+" and (isinstance(left, str) or isinstance(right, str)):
            return f"{left}{right}"
        if isinstance(left, str) or isinstance(right, str):
            return None
        return _binary(op, left, right)
    return None


def _binary(op: str, left: float, right: float) -> Optional[EnumScalar]:
    try:
        if op == "+":
            return _normalize(left + right)
        if op == "-":
            return _normalize(left - right)
        if op == "*":
            return _normalize(float(left) * right)
        if op == "/":
            return _normalize(left / right)
        if op == "%":
            return _normalize(math.fmod(left, right))
        if op == "**":
            # float power so huge exponents overflow instead of hanging
            result = float(left) ** right
            if isinstance(result, complex):
                return None
            return _normalize(result)
        if op == "<<":
            return _to_int32(_to_int32(left) << (int(right) & 31))
        if op == ">>":
            return _to_int32(left) >> (int(right) & 31)
        if op == ">>>":
            return (int(left) & 0xFFFFFFFF) >> (int(right) & 31)
        if op == "&":
            return _to_int32(_to_int32(left) & _to_int32(right))
        if op == "|":
            return _to_int32(_to_int32(left) | _to_int32(right))
        if op == "^":
            return _to_int32(_to_int32(left) ^ _to_int32(right))
    except (ZeroDivisionError, OverflowError, ValueError):
        return None
    return None


def enum_members(node: ts.Node) -> List[Tuple[str, Optional[EnumScalar]]]:
    """
    Enum members in declaration order with their computed values. Members
    without an initializer continue from the previous numeric value; after an
    unresolved member they stay unresolved.
    """
    enum_name = get_node_text(node.child_by_field_name("name"))
    body = node.child_by_field_name("body")
    if body is None:
        return []

    members: List[Tuple[str, Optional[EnumScalar]]] = []
    known: Dict[str, Optional[EnumScalar]] = {}
    previous: Optional[EnumScalar] = -1
    for member in body.named_children:
        if member.type == "comment":
            continue
        if member.type == "enum_assignment":
            name_node = member.child_by_field_name("name")
            value = _evaluate(member.child_by_field_name("value"), enum_name, known)
        else:
            name_node = member
            value = previous + 1 if isinstance(previous, (int, float)) else None
            if isinstance(value, float):
                value = _normalize(value)
        name = string_value(name_node) if name_node.type == "string" else get_node_text(name_node)
        known[name] = value
        members.append((name, value))
        previous = value
    return members

