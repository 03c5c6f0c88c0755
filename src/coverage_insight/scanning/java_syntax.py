"""Java-specific readers over tree-sitter nodes.

Everything here is a pure function of a node; extractors compose them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

from .treesitter_parser import node_text, walk

if TYPE_CHECKING:
    from .treesitter_parser import Node

# Each occurrence adds one to cyclomatic complexity
BRANCH_NODE_TYPES = frozenset(
    {
        "if_statement",
        "for_statement",
        "enhanced_for_statement",
        "while_statement",
        "do_statement",
        "ternary_expression",
        "catch_clause",
    }
)

# Containers of switch labels; every label inside one is a switch arm
SWITCH_ARM_PARENTS = frozenset({"switch_block_statement_group", "switch_rule"})

_NAME_NODE_TYPES = ("scoped_identifier", "identifier")


@dataclass
class Annotation:
    """An annotation on a declaration."""

    name: str
    arguments: list[str] = field(default_factory=list)

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]


def package_name(root: Node) -> str:
    """Declared package of a compilation unit ('' for the default package)."""
    for child in root.named_children:
        if child.type == "package_declaration":
            for part in child.named_children:
                if part.type in _NAME_NODE_TYPES:
                    return node_text(part)
    return ""


def imports(root: Node) -> list[str]:
    """Imported names in declaration order; wildcard imports end in ``.*``."""
    names: list[str] = []
    for child in root.named_children:
        if child.type != "import_declaration":
            continue
        name = ""
        wildcard = False
        for part in child.named_children:
            if part.type in _NAME_NODE_TYPES:
                name = node_text(part)
            elif part.type == "asterisk":
                wildcard = True
        if name:
            names.append(f"{name}.*" if wildcard else name)
    return names


def modifiers_node(declaration: Node) -> Node | None:
    for child in declaration.children:
        if child.type == "modifiers":
            return child
    return None


def modifier_keywords(declaration: Node) -> set[str]:
    """Keyword modifiers such as ``public`` or ``static``."""
    mods = modifiers_node(declaration)
    if mods is None:
        return set()
    return {
        node_text(child)
        for child in mods.children
        if child.type not in ("marker_annotation", "annotation")
    }


def annotations(declaration: Node) -> list[Annotation]:
    """Annotations attached to a declaration through its modifiers."""
    mods = modifiers_node(declaration)
    if mods is None:
        return []
    found: list[Annotation] = []
    for child in mods.named_children:
        if child.type not in ("marker_annotation", "annotation"):
            continue
        name = node_text(child.child_by_field_name("name"))
        arguments: list[str] = []
        args_node = child.child_by_field_name("arguments")
        if args_node is not None:
            for arg in args_node.named_children:
                if arg.type == "element_value_pair":
                    arguments.append(node_text(arg.child_by_field_name("key")))
        found.append(Annotation(name=name, arguments=arguments))
    return found


def method_declarations(root: Node) -> Iterator[Node]:
    """Every method declaration in source order, nested classes included."""
    for node in walk(root):
        if node.type == "method_declaration":
            yield node


def is_public_method(method: Node) -> bool:
    """Explicitly public, or an interface member (implicitly public)."""
    if "public" in modifier_keywords(method):
        return True
    parent = method.parent
    return parent is not None and parent.type == "interface_body"


def method_name(method: Node) -> str:
    return node_text(method.child_by_field_name("name"))


def return_type(method: Node) -> str:
    type_node = method.child_by_field_name("type")
    return node_text(type_node) or "void"


def parameter_types(method: Node) -> list[str]:
    """Declared parameter types in order; varargs render as ``Type...``."""
    params = method.child_by_field_name("parameters")
    if params is None:
        return []
    types: list[str] = []
    for param in params.named_children:
        if param.type == "formal_parameter":
            text = node_text(param.child_by_field_name("type"))
            dims = param.child_by_field_name("dimensions")
            types.append(text + node_text(dims))
        elif param.type == "spread_parameter":
            for part in param.named_children:
                if part.type not in ("modifiers", "variable_declarator"):
                    types.append(f"{node_text(part)}...")
                    break
    return types


def method_body(method: Node) -> Node | None:
    return method.child_by_field_name("body")


def cyclomatic_complexity(method: Node) -> int:
    """1 + branches, loops, ternaries, catch clauses and switch arms."""
    body = method_body(method)
    if body is None:
        return 1
    complexity = 1
    for node in walk(body):
        if node.type in BRANCH_NODE_TYPES:
            complexity += 1
        elif node.type == "switch_label" and node.parent is not None:
            if node.parent.type in SWITCH_ARM_PARENTS:
                complexity += 1
    return complexity


def invoked_method_names(method: Node) -> Iterator[str]:
    """Names of every method invocation in the body, in source order."""
    body = method_body(method)
    if body is None:
        return
    for node in walk(body):
        if node.type == "method_invocation":
            yield node_text(node.child_by_field_name("name"))
