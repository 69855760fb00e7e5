import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import tree_sitter as ts
import tree_sitter_typescript as tsts

from tsdoc.errors import FileAccessError, ParseError
from tsdoc.logger import logger

TS_LANGUAGE = ts.Language(tsts.language_typescript())
TSX_LANGUAGE = ts.Language(tsts.language_tsx())

# `.ts` cannot use the TSX grammar: `<T>expr` assertions clash with JSX.
_GRAMMARS: Dict[str, ts.Language] = {
    ".ts": TS_LANGUAGE,
    ".tsx": TSX_LANGUAGE,
    ".js": TSX_LANGUAGE,
    ".jsx": TSX_LANGUAGE,
}
JAVASCRIPT_SUFFIXES = (".js", ".jsx")

_parsers: Dict[int, ts.Parser] = {}

# Statement kinds that introduce a named top-level declaration
DECLARATION_TYPES = (
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
    "class_declaration",
    "abstract_class_declaration",
    "interface_declaration",
    "type_alias_declaration",
    "enum_declaration",
    "internal_module",
    "module",
)
VARIABLE_STATEMENT_TYPES = ("lexical_declaration", "variable_declaration")


def _get_parser(language: ts.Language) -> ts.Parser:
    key = id(language)
    parser = _parsers.get(key)
    if parser is None:
        parser = ts.Parser(language)
        _parsers[key] = parser
    return parser


def get_node_text(node: Optional[ts.Node]) -> str:
    """
    Get text of the tree sitter node
    """
    if not node or not node.text:
        return ""

    return node.text.decode("utf-8")


_ESCAPE_RE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-7]{1,3}|\r\n|.)",
    re.DOTALL,
)
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "\n": "",
    "\r": "",
    "\r\n": "",
    "\u2028": "",
    "\u2029": "",
}


def _unescape(match: "re.Match[str]") -> str:
    seq = match.group(1)
    if seq in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[seq]
    if seq.startswith("u{"):
        return chr(int(seq[2:-1], 16))
    if seq[0] in "ux" and len(seq) > 1:
        return chr(int(seq[1:], 16))
    if seq[0] in "01234567":
        return chr(int(seq, 8))
    return seq


def unescape_js(text: str) -> str:
    """Decode JavaScript string escapes (``\\n``, ``\\'``, ``\\u00e9``, ...)."""
    decoded = _ESCAPE_RE.sub(_unescape, text)
    try:
        # join surrogate pairs written as two \u escapes
        return decoded.encode("utf-16", "surrogatepass").decode("utf-16")
    except UnicodeDecodeError:
        return decoded


def string_value(node: Optional[ts.Node]) -> str:
    """Return the decoded contents of a string literal node."""
    text = get_node_text(node)
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'`":
        return unescape_js(text[1:-1])
    return text


def has_token(node: ts.Node, token: str) -> bool:
    """Check whether *node* has an anonymous keyword child such as ``async``."""
    return any(c.type == token for c in node.children)


def leading_comment_nodes(node: ts.Node) -> List[ts.Node]:
    """
    Return comment nodes directly preceding *node*, in source order.

    The run stops at a blank line or at any non-comment sibling. A comment
    sharing a line with the preceding code belongs to that code and is
    dropped.
    """
    cur = node
    sib = node.prev_sibling
    # decorators are part of the member they annotate
    while sib is not None and sib.type == "decorator":
        cur = sib
        sib = sib.prev_sibling

    comments: List[ts.Node] = []
    while sib is not None and sib.type == "comment":
        if cur.start_point[0] - sib.end_point[0] > 1:
            break
        comments.append(sib)
        cur = sib
        sib = sib.prev_sibling

    if (
        comments
        and sib is not None
        and sib.type != "comment"
        and comments[-1].start_point[0] == sib.end_point[0]
    ):
        comments.pop()

    comments.reverse()
    return comments


def declared_name(node: ts.Node) -> Optional[str]:
    """Explicit name of a declaration node, if it has one."""
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    return get_node_text(name_node) or None


@dataclass
class Declaration:
    """
    One exported declaration.

    *node* is the declaration itself; *anchor* is the statement that owns its
    leading comments (the export statement, or the variable statement for the
    first declarator).
    """

    node: ts.Node
    anchor: ts.Node
    export_name: str
    source: "SourceFile"

    @property
    def label(self) -> str:
        return self.node.type

    @property
    def name(self) -> Optional[str]:
        return declared_name(self.node)

    @property
    def text(self) -> str:
        return get_node_text(self.node)


@dataclass
class SourceFile:
    path: Path
    text: bytes
    tree: ts.Tree
    _locals: Optional[Dict[str, List[Tuple[ts.Node, ts.Node]]]] = field(
        default=None, repr=False
    )

    @property
    def root(self) -> ts.Node:
        return self.tree.root_node

    @property
    def is_javascript(self) -> bool:
        return self.path.suffix.lower() in JAVASCRIPT_SUFFIXES

    def end_line_number(self) -> int:
        return self.text.count(b"\n") + 1

    def statements(self, node_type: str) -> List[ts.Node]:
        return [c for c in self.root.named_children if c.type == node_type]

    def has_default_export(self) -> bool:
        for stmt in self.statements("export_statement"):
            if has_token(stmt, "default") or has_token(stmt, "="):
                return True
            clause = next(
                (c for c in stmt.named_children if c.type == "export_clause"), None
            )
            if clause is None:
                continue
            for spec in clause.named_children:
                if spec.type != "export_specifier":
                    continue
                exported = spec.child_by_field_name("alias") or spec.child_by_field_name(
                    "name"
                )
                if get_node_text(exported) == "default":
                    return True
        return False

    # --- exported declarations ---------------------------------------
    def exported_declarations(self) -> List[Tuple[str, List[Declaration]]]:
        """
        Enumerate exported declarations as ``(exported name, declarations)``
        pairs in order of first appearance.
        """
        exports: Dict[str, List[Declaration]] = {}

        def add(name: str, node: ts.Node, anchor: ts.Node) -> None:
            exports.setdefault(name, []).append(
                Declaration(node=node, anchor=anchor, export_name=name, source=self)
            )

        for stmt in self.statements("export_statement"):
            is_default = has_token(stmt, "default")
            decl = stmt.child_by_field_name("declaration")
            value = stmt.child_by_field_name("value")

            if decl is not None:
                for node, anchor in _unwrap_declaration(decl, stmt):
                    add("default" if is_default else (declared_name(node) or "default"), node, anchor)
                continue

            if stmt.child_by_field_name("source") is not None:
                logger.debug(
                    "Re-export is not followed",
                    path=str(self.path),
                    line=stmt.start_point[0] + 1,
                    raw=get_node_text(stmt)[:200],
                )
                continue

            if value is None and has_token(stmt, "="):
                # export = expr
                value = next(
                    (c for c in stmt.named_children if c.type != "comment"), None
                )

            if value is not None:
                if value.type == "identifier":
                    self._add_local(add, "default", get_node_text(value), stmt)
                else:
                    add("default", value, stmt)
                continue

            clause = next(
                (c for c in stmt.named_children if c.type == "export_clause"), None
            )
            if clause is None:
                logger.debug(
                    "Unsupported export statement",
                    path=str(self.path),
                    line=stmt.start_point[0] + 1,
                    raw=get_node_text(stmt)[:200],
                )
                continue
            for spec in clause.named_children:
                if spec.type != "export_specifier":
                    continue
                local = get_node_text(spec.child_by_field_name("name"))
                alias = spec.child_by_field_name("alias")
                exported = get_node_text(alias) if alias is not None else local
                self._add_local(add, exported, local, stmt)

        return list(exports.items())

    def _add_local(self, add, exported: str, local: str, stmt: ts.Node) -> None:
        targets = self._local_declarations().get(local)
        if not targets:
            logger.debug(
                "Exported name has no local declaration",
                path=str(self.path),
                name=local,
                line=stmt.start_point[0] + 1,
            )
            return
        for node, anchor in targets:
            add(exported, node, anchor)

    def _local_declarations(self) -> Dict[str, List[Tuple[ts.Node, ts.Node]]]:
        if self._locals is None:
            index: Dict[str, List[Tuple[ts.Node, ts.Node]]] = {}
            for stmt in self.root.named_children:
                inner = stmt
                if stmt.type == "export_statement":
                    inner = stmt.child_by_field_name("declaration")
                    if inner is None:
                        continue
                for node, anchor in _unwrap_declaration(inner, stmt):
                    name = declared_name(node)
                    if name:
                        index.setdefault(name, []).append((node, anchor))
            self._locals = index
        return self._locals


def _unwrap_declaration(
    decl: ts.Node, anchor: ts.Node
) -> List[Tuple[ts.Node, ts.Node]]:
    """Expand a declaration statement into (declaration, comment anchor) pairs."""
    if decl.type == "ambient_declaration":
        inner = next(
            (
                c
                for c in decl.named_children
                if c.type in DECLARATION_TYPES or c.type in VARIABLE_STATEMENT_TYPES
            ),
            None,
        )
        return _unwrap_declaration(inner, anchor) if inner is not None else []
    if decl.type in VARIABLE_STATEMENT_TYPES:
        out: List[Tuple[ts.Node, ts.Node]] = []
        for ch in decl.named_children:
            if ch.type != "variable_declarator":
                continue
            out.append((ch, anchor if not out else ch))
        return out
    if decl.type in DECLARATION_TYPES or decl.type in ("class", "function_expression"):
        return [(decl, anchor)]
    return []


def load_source(file_path: Union[str, Path]) -> SourceFile:
    """
    Read and parse a source file with the grammar matching its extension.
    """
    path = Path(file_path)
    try:
        with open(path, "rb") as file:
            source_bytes = file.read()
    except OSError as ex:
        raise FileAccessError(str(path), ex.strerror or str(ex)) from ex

    language = _GRAMMARS.get(path.suffix.lower())
    if language is None:
        raise ParseError(
            f"unsupported source file '{path}': expected one of "
            f"{', '.join(sorted(_GRAMMARS))}"
        )

    try:
        source_bytes.decode("utf-8")
    except UnicodeDecodeError as ex:
        raise ParseError(f"'{path}' is not valid UTF-8 text: {ex}") from ex

    tree = _get_parser(language).parse(source_bytes)
    if tree.root_node.has_error:
        logger.warning(
            "Source contains syntax errors; extracting what parsed",
            path=str(path),
        )
    logger.debug("Loaded source file", path=str(path), size=len(source_bytes))
    return SourceFile(path=path, text=source_bytes, tree=tree)
