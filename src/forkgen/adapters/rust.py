"""Rust adapter: maps source text to the declaration model and back.

Parsing uses tree-sitter-languages. Only top-level items become declarations;
comments and attributes are trivia owned by the item that follows them, and a
comment starting on the line an item ends on stays with that item. Rendering
is plain concatenation, so ``render_module(parse_module(src)) == src``.
"""

import logging
from dataclasses import dataclass, replace

from tree_sitter_languages import get_parser

from forkgen.exceptions import ParseFailure
from forkgen.model import Declaration, FunctionDecl, ImportDecl, Module, Opaque

logger = logging.getLogger("forkgen.adapters.rust")

LANGUAGE = "rust"

COMMENT_TYPES = {"line_comment", "block_comment"}
TRIVIA_TYPES = COMMENT_TYPES | {"attribute_item", "inner_attribute_item"}

# Node types that pair a (possibly scoped) name with a `type_arguments` list.
GENERIC_REFERENCE_TYPES = {"generic_type", "generic_function", "generic_type_with_turbofish"}
GENERIC_LIST_TYPES = {"type_parameters", "type_arguments"}
IDENTIFIER_TYPES = {"identifier", "type_identifier"}


@dataclass(frozen=True)
class Edit:
    """Replace ``code[start:end]`` (UTF-8 byte offsets) with ``replacement``."""

    start: int
    end: int
    replacement: str


def node_text(source: bytes, node) -> str:
    """Get text of a tree-sitter node as a string."""
    return source[node.start_byte : node.end_byte].decode("utf-8")


def iter_nodes(node):
    """Yield ``node`` and all of its descendants, depth first."""
    yield node
    for child in node.children:
        yield from iter_nodes(child)


def _first_error(node):
    for candidate in iter_nodes(node):
        if candidate.type == "ERROR" or candidate.is_missing:
            return candidate
    return None


def parse_tree(code: str, label: str = "<source>"):
    """Parse ``code`` and return ``(tree, source_bytes)``.

    Raises ParseFailure if the tree contains an error or missing node.
    """
    source = code.encode("utf-8")
    tree = get_parser(LANGUAGE).parse(source)
    if tree.root_node.has_error:
        error = _first_error(tree.root_node)
        if error is None:
            raise ParseFailure(label)
        row, column = error.start_point
        raise ParseFailure(label, row + 1, column + 1)
    return tree, source


def _normalize_path(text: str) -> str:
    return "".join(text.split())


def _function_decl(node, source: bytes, code: str, trivia: str) -> FunctionDecl:
    generics = node.child_by_field_name("type_parameters")
    body = node.child_by_field_name("body")
    signature_end = body.start_byte if body is not None else node.end_byte
    return FunctionDecl(
        code=code,
        name=node_text(source, node.child_by_field_name("name")),
        generics=node_text(source, generics) if generics is not None else None,
        signature=source[node.start_byte : signature_end].decode("utf-8").strip(),
        body=node_text(source, body) if body is not None else "",
        trivia=trivia,
    )


def _import_decl(node, source: bytes, code: str, trivia: str) -> ImportDecl:
    visibility = ""
    for child in node.children:
        if child.type == "visibility_modifier":
            visibility = node_text(source, child)
    argument = node.child_by_field_name("argument")
    alias = None
    if argument.type == "use_as_clause":
        path = node_text(source, argument.child_by_field_name("path"))
        alias = node_text(source, argument.child_by_field_name("alias"))
    else:
        path = node_text(source, argument)
    return ImportDecl(code=code, path=_normalize_path(path), alias=alias, visibility=visibility, trivia=trivia)


def _declaration(node, source: bytes, start: int, end: int) -> Declaration:
    trivia = source[start : node.start_byte].decode("utf-8")
    code = source[node.start_byte : end].decode("utf-8")
    if node.type == "function_item":
        return _function_decl(node, source, code, trivia)
    if node.type == "use_declaration":
        return _import_decl(node, source, code, trivia)
    return Opaque(code=code, kind=node.type, trivia=trivia)


def parse_module(code: str, label: str = "<source>") -> Module:
    """Split Rust source into top-level declarations."""
    tree, source = parse_tree(code, label)
    children = tree.root_node.children
    declarations = []
    start = 0
    index = 0
    while index < len(children):
        node = children[index]
        index += 1
        if node.type in TRIVIA_TYPES:
            continue
        end = node.end_byte
        # A comment that starts on the line the item ends on belongs to the item
        while (
            index < len(children)
            and children[index].type in COMMENT_TYPES
            and children[index].start_point[0] == node.end_point[0]
        ):
            end = children[index].end_byte
            index += 1
        declarations.append(_declaration(node, source, start, end))
        start = end
    logger.debug(f"Parsed {label}: {len(declarations)} top-level declarations")
    return Module(declarations=tuple(declarations), trailer=source[start:].decode("utf-8"))


def parse_declaration(code: str, trivia: str = "", label: str = "<declaration>") -> Declaration:
    """Parse a snippet holding exactly one declaration and attach ``trivia`` to it."""
    module = parse_module(code, label)
    if len(module.declarations) != 1:
        raise ParseFailure(f"{label} (expected one declaration, found {len(module.declarations)})")
    declaration = module.declarations[0]
    return replace(declaration, trivia=trivia + declaration.trivia)


def render_module(module: Module) -> str:
    return "".join(declaration.text for declaration in module.declarations) + module.trailer


def reference_name(node, source: bytes) -> str:
    """Return the last path segment naming a generic reference node.

    ``spec::BeaconBlock<A>`` gives ``BeaconBlock``; ``state.get::<T>`` gives ``get``.
    """
    name_node = node.child_by_field_name("type")
    if name_node is None:
        name_node = node.child_by_field_name("function")
    if name_node is None:
        return ""
    if name_node.type in ("scoped_type_identifier", "scoped_identifier"):
        name_node = name_node.child_by_field_name("name")
    elif name_node.type == "field_expression":
        name_node = name_node.child_by_field_name("field")
    return node_text(source, name_node) if name_node is not None else ""


def append_argument(arguments, argument: str) -> Edit:
    """Build the edit that appends ``argument`` to a ``type_arguments`` node.

    The new argument goes right after the last existing one, so a trailing
    comma or a multi-line layout is left in place.
    """
    existing = [child for child in arguments.named_children if child.type not in COMMENT_TYPES]
    if not existing:
        position = arguments.start_byte + 1
        return Edit(position, position, argument)
    position = existing[-1].end_byte
    return Edit(position, position, f", {argument}")


def apply_edits(code: str, edits: list[Edit]) -> str:
    """Apply non-overlapping byte edits to ``code``, back to front."""
    source = code.encode("utf-8")
    for edit in sorted(edits, key=lambda e: (e.start, e.end), reverse=True):
        source = source[: edit.start] + edit.replacement.encode("utf-8") + source[edit.end :]
    return source.decode("utf-8")
