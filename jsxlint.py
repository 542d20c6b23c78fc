#!/usr/bin/env python3
"""
jsxlint - Semantic checks for JSX component code

High-level goals:
- Parse JavaScript/JSX (via tree-sitter) into a small immutable IR
- Resolve the JSX pragma and the lexical scopes visible at every markup site
- Classify component definitions (plain vs. pure) through base-class chains
- Extract literal text from markup with whitespace normalization
- Emit structured JSON findings for CI / IDEs

The analysis core never parses text itself. Anything that can build a
SyntaxNode tree can drive it; the tree-sitter front end is one such builder.
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Set, Tuple
import argparse
import bisect
import html
import json
import re
import sys
import threading
try:  # Optional dependency; the core still runs without PyYAML.
    import yaml  # type: ignore
except ImportError:  # pragma: no cover - environment without PyYAML
    yaml = None  # type: ignore
try:  # Optional tree-sitter front end.
    import tree_sitter_javascript as ts_javascript  # type: ignore
    from tree_sitter import Language as TSLanguage, Parser as TSParser  # type: ignore
except ImportError:  # pragma: no cover - environment without tree-sitter
    ts_javascript = None  # type: ignore
    TSLanguage = None  # type: ignore
    TSParser = None  # type: ignore


TOOL_NAME = "jsxlint"
TOOL_VERSION = "0.1.0"


class JsxLintError(Exception):
    """Base class for errors raised by jsxlint."""


class ConfigError(JsxLintError):
    """Raised when project configuration or rule options are invalid."""


class ParserUnavailableError(JsxLintError):
    """Raised when source text must be parsed but tree-sitter is not installed."""


# ============================================================
# ===================== SOURCE LOCATION ======================
# ============================================================

@dataclass(frozen=True)
class SourceRange:
    file: str
    start: int  # offset of the first character
    end: int    # offset one past the last character
    line_start: int
    col_start: int
    line_end: int
    col_end: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "line_start": self.line_start,
            "col_start": self.col_start,
            "line_end": self.line_end,
            "col_end": self.col_end,
        }


def merge_ranges(first: Optional[SourceRange], last: Optional[SourceRange]) -> Optional[SourceRange]:
    """Span from the start of `first` to the end of `last`."""
    if first is None or last is None:
        return first or last
    return SourceRange(
        file=first.file,
        start=first.start,
        end=last.end,
        line_start=first.line_start,
        col_start=first.col_start,
        line_end=last.line_end,
        col_end=last.col_end,
    )


# ============================================================
# ======================== SYNTAX IR =========================
# ============================================================

PROGRAM = "program"
ELEMENT = "element-open"
FRAGMENT = "element-fragment"
ATTRIBUTE = "attribute"
SPREAD_ATTRIBUTE = "spread-attribute"
TEXT = "literal-text"
EXPRESSION_CONTAINER = "expression-container"
TEMPLATE_LITERAL = "template-composite"
TEMPLATE_ELEMENT = "template-element"
STRING_LITERAL = "string-literal"
LITERAL = "literal"
BINARY_EXPRESSION = "binary-expression"
CLASS_DEFINITION = "class-definition"
FUNCTION_DEFINITION = "function-definition"
CALL_EXPRESSION = "call-expression"
MEMBER_EXPRESSION = "member-expression"
IDENTIFIER = "identifier"
VARIABLE_DECLARATOR = "variable-declarator"
IMPORT_DECLARATION = "import-declaration"
EXPORT_DECLARATION = "export-declaration"
RETURN_STATEMENT = "return-statement"
OBJECT_EXPRESSION = "object-expression"
PROPERTY = "property"
BLOCK = "block"
COMMENT = "comment"
OTHER = "other"

NODE_KINDS: FrozenSet[str] = frozenset({
    PROGRAM, ELEMENT, FRAGMENT, ATTRIBUTE, SPREAD_ATTRIBUTE, TEXT,
    EXPRESSION_CONTAINER, TEMPLATE_LITERAL, TEMPLATE_ELEMENT, STRING_LITERAL,
    LITERAL, BINARY_EXPRESSION, CLASS_DEFINITION, FUNCTION_DEFINITION,
    CALL_EXPRESSION, MEMBER_EXPRESSION, IDENTIFIER, VARIABLE_DECLARATOR,
    IMPORT_DECLARATION, EXPORT_DECLARATION, RETURN_STATEMENT,
    OBJECT_EXPRESSION, PROPERTY, BLOCK, COMMENT, OTHER,
})

MARKUP_KINDS: FrozenSet[str] = frozenset({ELEMENT, FRAGMENT})


@dataclass(frozen=True, eq=False)
class SyntaxNode:
    """
    One node of an analyzed file. Nodes own their children and never point
    back to their parent; use a TreeIndex for upward navigation.

    `role` names the slot the node fills in its parent ("name", "value",
    "superclass", "body", "left", "right", "object", "property", ...).
    `qualifier` carries the declaration flavour: "var"/"let"/"const" on
    declarators, "declaration"/"expression"/"method"/"arrow" on functions and
    classes, "default" on default exports.
    """
    kind: str
    children: Tuple["SyntaxNode", ...] = ()
    location: Optional[SourceRange] = None
    role: Optional[str] = None
    name: Optional[str] = None
    value: Optional[str] = None  # decoded text for strings, templates and markup text
    raw: Optional[str] = None    # text as written in the source
    operator: Optional[str] = None
    qualifier: Optional[str] = None

    def child(self, role: str) -> Optional["SyntaxNode"]:
        for child in self.children:
            if child.role == role:
                return child
        return None

    def children_of_kind(self, kind: str) -> List["SyntaxNode"]:
        return [child for child in self.children if child.kind == kind]

    @property
    def is_markup(self) -> bool:
        return self.kind in MARKUP_KINDS


class TreeIndex:
    """
    Parent links and pre-order positions for one tree, built once per
    analysis pass so nodes themselves stay free of back-references.
    """

    def __init__(self, root: SyntaxNode) -> None:
        self.root = root
        self._parents: Dict[SyntaxNode, Optional[SyntaxNode]] = {root: None}
        self._positions: Dict[SyntaxNode, int] = {}
        stack = [root]
        while stack:
            node = stack.pop()
            self._positions[node] = len(self._positions)
            for child in reversed(node.children):
                self._parents[child] = node
                stack.append(child)

    def __contains__(self, node: object) -> bool:
        return node in self._positions

    def parent(self, node: SyntaxNode) -> Optional[SyntaxNode]:
        return self._parents.get(node)

    def ancestors(self, node: SyntaxNode) -> Iterator[SyntaxNode]:
        """Yield the ancestors of `node`, nearest first."""
        current = self._parents.get(node)
        while current is not None:
            yield current
            current = self._parents.get(current)

    def position(self, node: SyntaxNode) -> int:
        return self._positions.get(node, -1)


# ============================================================
# ======================= TREE WALKER ========================
# ============================================================

Ancestors = Tuple[SyntaxNode, ...]
Handler = Callable[[SyntaxNode, Ancestors], None]


def walk(
    root: SyntaxNode,
    emitter: Optional["DiagnosticEmitter"] = None,
) -> Iterator[Tuple[SyntaxNode, Ancestors]]:
    """
    Lazily yield (node, ancestors) in depth-first pre-order. `ancestors` runs
    from the root down to the node's parent.

    A node whose kind is not in NODE_KINDS is reported to `emitter` as an
    internal finding and its subtree is skipped; the walk goes on with the
    next sibling.
    """
    stack: List[Tuple[SyntaxNode, Ancestors]] = [(root, ())]
    while stack:
        node, ancestors = stack.pop()
        if node.kind not in NODE_KINDS:
            if emitter is not None:
                emitter.report_internal(MALFORMED_TREE, node, node_kind=str(node.kind))
            continue
        yield node, ancestors
        chain = ancestors + (node,)
        for child in reversed(node.children):
            stack.append((child, chain))


def dispatch(
    root: SyntaxNode,
    handlers: Dict[str, Sequence[Handler]],
    emitter: Optional["DiagnosticEmitter"] = None,
) -> None:
    """Run the handlers registered for each node kind in one pre-order pass."""
    for node, ancestors in walk(root, emitter):
        for handler in handlers.get(node.kind, ()):
            handler(node, ancestors)


# ============================================================
# =================== DIAGNOSTIC EMITTER =====================
# ============================================================

NOT_IN_SCOPE = "notInScope"
NO_SHOULD_COMP_UPDATE = "noShouldCompUpdate"
LITERAL_NOT_IN_JSX_EXPRESSION = "literalNotInJSXExpression"
NO_STRINGS_IN_JSX = "noStringsInJSX"
INVALID_PROP_VALUE = "invalidPropValue"
NO_STRINGS_IN_ATTRIBUTES = "noStringsInAttributes"
MALFORMED_TREE = "malformedTree"
RULE_ERROR = "ruleError"


@dataclass(frozen=True)
class Finding:
    kind: str
    location: Optional[SourceRange]
    message_parameters: Dict[str, str] = field(default_factory=dict)
    rule_id: Optional[str] = None
    internal: bool = False


class DiagnosticEmitter:
    """
    Collects findings for one file. Findings come back ordered by the
    pre-order position of the node that triggered them, so an element's
    attribute findings always precede its body findings.
    """

    def __init__(self, index: Optional[TreeIndex] = None) -> None:
        self._index = index
        self._entries: List[Tuple[int, int, Finding]] = []

    def report(self, kind: str, node: SyntaxNode, rule_id: Optional[str] = None, **params: Any) -> Finding:
        return self._record(kind, node, rule_id, params, internal=False)

    def report_internal(self, kind: str, node: SyntaxNode, **params: Any) -> Finding:
        return self._record(kind, node, None, params, internal=True)

    def findings(self) -> List[Finding]:
        return [finding for _, _, finding in sorted(self._entries, key=lambda entry: entry[:2])]

    def __len__(self) -> int:
        return len(self._entries)

    def _record(
        self,
        kind: str,
        node: SyntaxNode,
        rule_id: Optional[str],
        params: Dict[str, Any],
        *,
        internal: bool,
    ) -> Finding:
        finding = Finding(
            kind=kind,
            location=node.location,
            message_parameters={key: str(value) for key, value in params.items()},
            rule_id=rule_id,
            internal=internal,
        )
        position = self._index.position(node) if self._index is not None else -1
        self._entries.append((position, len(self._entries), finding))
        return finding


# ============================================================
# ====================== CONFIGURATION =======================
# ============================================================

DEFAULT_PRAGMA = "React"
DEFAULT_CREATE_CLASS = "createReactClass"

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][\w$]*$")
DOTTED_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*$")


def _to_str_tuple(value: Any, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if value is None:
        return default
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value if v is not None)
    return (str(value),)


@dataclass(frozen=True)
class AnalysisSettings:
    """
    Project-wide settings shared read-only by every analysis pass.

    `pragma_override` may be a dotted path such as "Foo.Bar"; only its first
    segment has to be in scope at markup sites.
    """
    pragma_override: Optional[str] = None
    create_class: str = DEFAULT_CREATE_CLASS
    component_bases: Tuple[str, ...] = ("Component",)
    pure_component_bases: Tuple[str, ...] = ("PureComponent",)

    def __post_init__(self) -> None:
        if self.pragma_override is not None and not DOTTED_IDENTIFIER_PATTERN.match(self.pragma_override):
            raise ConfigError(f"pragma '{self.pragma_override}' is not a valid identifier path")
        if not IDENTIFIER_PATTERN.match(self.create_class):
            raise ConfigError(f"createClass '{self.create_class}' is not a valid identifier")

    @classmethod
    def from_mapping(cls, raw: Any) -> "AnalysisSettings":
        """
        Accepts either the flat form ({"pragmaOverride": "Foo"}) or the
        nested form ({"react": {"pragma": "Foo", "createClass": ...}}).
        Unrecognized keys are ignored.
        """
        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ConfigError("settings must be a mapping")
        react = raw.get("react") or {}
        if not isinstance(react, dict):
            raise ConfigError("settings.react must be a mapping")

        pragma = raw.get("pragmaOverride", react.get("pragma"))
        return cls(
            pragma_override=str(pragma) if pragma else None,
            create_class=str(react.get("createClass") or DEFAULT_CREATE_CLASS),
            component_bases=_to_str_tuple(react.get("componentBases"), ("Component",)),
            pure_component_bases=_to_str_tuple(react.get("pureComponentBases"), ("PureComponent",)),
        )


DEFAULT_SETTINGS = AnalysisSettings()


# ============================================================
# ======================= SCOPE MODEL ========================
# ============================================================

MODULE_SCOPE = "module"
FUNCTION_SCOPE = "function"
BLOCK_SCOPE = "block"
CLASS_SCOPE = "class"

_SCOPE_OWNERS = {
    PROGRAM: MODULE_SCOPE,
    FUNCTION_DEFINITION: FUNCTION_SCOPE,
    BLOCK: BLOCK_SCOPE,
    CLASS_DEFINITION: CLASS_SCOPE,
}


@dataclass(eq=False)
class Scope:
    kind: str
    node: SyntaxNode
    parent: Optional["Scope"] = None
    bindings: Dict[str, SyntaxNode] = field(default_factory=dict)

    def declare(self, name: str, node: SyntaxNode) -> None:
        # First declaration wins; order inside a scope never shadows.
        self.bindings.setdefault(name, node)

    def function_scope(self) -> "Scope":
        """Nearest enclosing scope that receives `var` declarations."""
        scope: Scope = self
        while scope.kind not in (FUNCTION_SCOPE, MODULE_SCOPE) and scope.parent is not None:
            scope = scope.parent
        return scope


@dataclass(frozen=True)
class Binding:
    name: str
    node: SyntaxNode
    scope: Scope


def binding_names(target: Optional[SyntaxNode]) -> List[str]:
    """
    Names introduced by a binding target: a plain identifier or a
    destructuring pattern. Property keys and default values do not bind.
    """
    names: List[str] = []
    stack = [target] if target is not None else []
    while stack:
        node = stack.pop()
        if node.kind == IDENTIFIER:
            if node.name:
                names.append(node.name)
            continue
        for child in reversed(node.children):
            if child.role not in ("key", "right"):
                stack.append(child)
    return names


def _import_binding_names(node: SyntaxNode) -> List[str]:
    names: List[str] = []
    for child in node.children:
        if child.role == "source":
            continue
        if child.kind == IDENTIFIER:
            if child.role == "name" and node.child("alias") is not None:
                continue
            if child.name:
                names.append(child.name)
            continue
        names.extend(_import_binding_names(child))
    return names


class ScopeModel:
    """
    Read-only lexical scopes of one tree. Every declaration is hoisted into
    its owning scope during a single traversal, before any lookup happens.
    """

    def __init__(self, root: SyntaxNode, index: TreeIndex, scopes: Dict[SyntaxNode, Scope]) -> None:
        self.root = root
        self.index = index
        self._scopes = scopes

    @classmethod
    def build(cls, root: SyntaxNode, index: Optional[TreeIndex] = None) -> "ScopeModel":
        index = index or TreeIndex(root)
        scopes: Dict[SyntaxNode, Scope] = {}
        module = Scope(kind=MODULE_SCOPE, node=root)
        scopes[root] = module

        for node, ancestors in walk(root):
            enclosing = module
            for ancestor in reversed(ancestors):
                if ancestor in scopes:
                    enclosing = scopes[ancestor]
                    break

            own_scope: Optional[Scope] = None
            scope_kind = _SCOPE_OWNERS.get(node.kind)
            if scope_kind is not None and node is not root:
                own_scope = Scope(kind=scope_kind, node=node, parent=enclosing)
                scopes[node] = own_scope

            if node.kind == VARIABLE_DECLARATOR:
                target_scope = enclosing.function_scope() if node.qualifier in (None, "var") else enclosing
                for name in binding_names(node.child("name")):
                    target_scope.declare(name, node)
            elif node.kind == FUNCTION_DEFINITION and own_scope is not None:
                if node.name and node.qualifier == "declaration":
                    enclosing.declare(node.name, node)
                elif node.name and node.qualifier == "expression":
                    own_scope.declare(node.name, node)
                for name in binding_names(node.child("parameters")):
                    own_scope.declare(name, node)
            elif node.kind == CLASS_DEFINITION and own_scope is not None and node.name:
                if node.qualifier == "declaration":
                    enclosing.declare(node.name, node)
                else:
                    own_scope.declare(node.name, node)
            elif node.kind == IMPORT_DECLARATION:
                for name in _import_binding_names(node):
                    module.declare(name, node)

        return cls(root, index, scopes)

    @property
    def module_scope(self) -> Scope:
        return self._scopes[self.root]

    def scope_for(self, node: SyntaxNode) -> Scope:
        """Innermost scope enclosing `node` (the node's own scope if it owns one)."""
        if node in self._scopes:
            return self._scopes[node]
        for ancestor in self.index.ancestors(node):
            if ancestor in self._scopes:
                return self._scopes[ancestor]
        return self.module_scope

    def resolve(self, name: str, from_node: SyntaxNode) -> Optional[Binding]:
        """Nearest binding of `name` visible from `from_node`, or None."""
        scope: Optional[Scope] = self.scope_for(from_node)
        while scope is not None:
            found = scope.bindings.get(name)
            if found is not None:
                return Binding(name=name, node=found, scope=scope)
            scope = scope.parent
        return None


# ============================================================
# ===================== PRAGMA RESOLVER ======================
# ============================================================

JSX_ANNOTATION_PATTERN = re.compile(r"@jsx\s+([A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*)")


@dataclass(frozen=True)
class PragmaDirective:
    raw_expression: str
    base_identifier: str
    source: str  # "comment", "config" or "default"


def _directive(expression: str, source: str) -> PragmaDirective:
    return PragmaDirective(
        raw_expression=expression,
        base_identifier=expression.split(".", 1)[0],
        source=source,
    )


def resolve_factory(comments: Iterable[str], settings: Optional[AnalysisSettings] = None) -> PragmaDirective:
    """
    Effective JSX factory for one file.

    Configuration is the authority: an override in `settings` always wins.
    Otherwise the last `@jsx <path>` directive found in the comments wins,
    and without one the factory is React.
    """
    settings = settings or DEFAULT_SETTINGS
    if settings.pragma_override:
        return _directive(settings.pragma_override, "config")

    expression: Optional[str] = None
    for text in comments:
        for match in JSX_ANNOTATION_PATTERN.finditer(text or ""):
            expression = match.group(1)
    if expression:
        return _directive(expression, "comment")
    return _directive(DEFAULT_PRAGMA, "default")


# ============================================================
# =================== COMPONENT CLASSIFIER ===================
# ============================================================

PLAIN = "plain"
PURE = "pure"
ANONYMOUS = "<anonymous>"


@dataclass(frozen=True)
class ComponentDescriptor:
    definition_node: SyntaxNode
    display_name: str
    tier: str  # PLAIN or PURE
    base_chain: Tuple[str, ...]

    @property
    def is_pure(self) -> bool:
        return self.tier == PURE


def dotted_chain(node: Optional[SyntaxNode]) -> Optional[Tuple[str, ...]]:
    """Identifier segments of `a.b.c`, or None for anything computed."""
    if node is None:
        return None
    if node.kind == IDENTIFIER:
        return (node.name,) if node.name else None
    if node.kind == MEMBER_EXPRESSION:
        base = dotted_chain(node.child("object"))
        prop = node.child("property")
        if base is None or prop is None or prop.kind != IDENTIFIER or not prop.name:
            return None
        return base + (prop.name,)
    return None


def _first_operand(node: Optional[SyntaxNode]) -> Optional[SyntaxNode]:
    if node is None:
        return None
    for child in node.children:
        if child.kind != COMMENT:
            return child
    return None


def _direct_returns(node: Optional[SyntaxNode]) -> Iterator[SyntaxNode]:
    """Return statements of a function body, not of functions nested in it."""
    if node is None:
        return
    stack = [node]
    while stack:
        current = stack.pop()
        if current.kind == RETURN_STATEMENT:
            yield current
            continue
        for child in reversed(current.children):
            if child.kind in (FUNCTION_DEFINITION, CLASS_DEFINITION):
                continue
            stack.append(child)


def class_member_names(node: SyntaxNode) -> List[str]:
    body = node.child("body")
    if body is None:
        return []
    return [
        member.name
        for member in body.children
        if member.kind in (FUNCTION_DEFINITION, PROPERTY) and member.name
    ]


class ComponentClassifier:
    """
    Decides whether a class, a class-returning function or a factory call
    defines a component, and with which tier. Classification has no side
    effects, so classifying a node twice yields equal descriptors.
    """

    def __init__(self, index: TreeIndex, settings: Optional[AnalysisSettings] = None) -> None:
        self.index = index
        self.settings = settings or DEFAULT_SETTINGS

    def classify(self, node: SyntaxNode) -> Optional[ComponentDescriptor]:
        if node.kind == CLASS_DEFINITION:
            return self._classify_class(node)
        if node.kind == CALL_EXPRESSION:
            return self._classify_factory_call(node)
        if node.kind == FUNCTION_DEFINITION:
            return self._classify_class_factory(node)
        return None

    def tier_for_chain(self, chain: Sequence[str]) -> Optional[str]:
        if not chain:
            return None
        terminal = chain[-1]
        if terminal in self.settings.pure_component_bases:
            return PURE
        if terminal in self.settings.component_bases:
            return PLAIN
        return None

    def display_name(self, node: SyntaxNode) -> str:
        """
        Own name when the definition has one, otherwise the nearest
        enclosing binding: a variable declarator, a class field or object
        key, the named function returning it, or a default export.
        """
        if node.kind in (CLASS_DEFINITION, FUNCTION_DEFINITION) and node.name:
            return node.name

        previous = node
        returned = False
        for ancestor in self.index.ancestors(node):
            if ancestor.kind == VARIABLE_DECLARATOR:
                names = binding_names(ancestor.child("name"))
                return names[0] if names else ANONYMOUS
            if ancestor.kind == PROPERTY and ancestor.name:
                return ancestor.name
            if ancestor.kind == EXPORT_DECLARATION:
                return "default" if ancestor.qualifier == "default" else ANONYMOUS
            if ancestor.kind == RETURN_STATEMENT:
                returned = True
            elif ancestor.kind == FUNCTION_DEFINITION:
                expression_body = previous.role == "body" and previous.kind != BLOCK
                if not (returned or expression_body):
                    return ANONYMOUS
                if ancestor.name:
                    return ancestor.name
                returned = False
            elif ancestor.kind == CLASS_DEFINITION:
                return ANONYMOUS
            previous = ancestor
        return ANONYMOUS

    def _classify_class(self, node: SyntaxNode) -> Optional[ComponentDescriptor]:
        chain = dotted_chain(node.child("superclass"))
        if chain is None:
            return None
        tier = self.tier_for_chain(chain)
        if tier is None:
            return None
        return ComponentDescriptor(
            definition_node=node,
            display_name=self.display_name(node),
            tier=tier,
            base_chain=chain,
        )

    def _classify_factory_call(self, node: SyntaxNode) -> Optional[ComponentDescriptor]:
        chain = dotted_chain(node.child("function"))
        if not chain or chain[-1] != self.settings.create_class:
            return None
        definition = _first_operand(node.child("arguments"))
        if definition is None or definition.kind != OBJECT_EXPRESSION:
            return None
        return ComponentDescriptor(
            definition_node=node,
            display_name=self.display_name(node),
            tier=PLAIN,
            base_chain=chain,
        )

    def _classify_class_factory(self, node: SyntaxNode) -> Optional[ComponentDescriptor]:
        body = node.child("body")
        if body is not None and body.kind == CLASS_DEFINITION:
            return self._classify_class(body)
        for statement in _direct_returns(body):
            argument = _first_operand(statement)
            if argument is not None and argument.kind == CLASS_DEFINITION:
                return self._classify_class(argument)
        return None


# ============================================================
# ==================== LITERAL EXTRACTOR =====================
# ============================================================

MARKUP_TEXT_CHILD = "markup-text-child"
STRING_LITERAL_EXPRESSION = "string-literal-expression"
TEMPLATE_LITERAL_EXPRESSION = "template-literal-expression"
TEMPLATE_SUBSTITUTION_BOUNDARY = "template-literal-substitution-boundary"


@dataclass(frozen=True)
class LiteralSegment:
    """
    A run of literal text found in markup.

    `text` is the decoded value before trimming, `raw` the source as written.
    `wrapped` is set for literals inside an expression container and
    `direct` is cleared when the literal is one operand of a concatenation.
    """
    text: str
    raw: str
    trimmed_text: str
    origin: str
    location: Optional[SourceRange]
    node: SyntaxNode
    element: SyntaxNode
    attribute: Optional[SyntaxNode] = None
    wrapped: bool = False
    direct: bool = True

    @property
    def display_text(self) -> str:
        return self.raw.strip()

    @property
    def in_attribute(self) -> bool:
        return self.attribute is not None


@dataclass(frozen=True)
class ExtractOptions:
    include_attributes: bool = True
    split_templates: bool = False


def normalize_text(text: str) -> str:
    """
    Trim `text`. Text spanning several lines is trimmed line by line and the
    non-empty lines are rejoined with a single space.
    """
    if "\n" not in text:
        return text.strip()
    lines = (line.strip() for line in text.splitlines())
    return " ".join(line for line in lines if line)


def is_allowed_literal(segment: LiteralSegment, allowed_strings: Iterable[str]) -> bool:
    """
    Allow-list match on trimmed content; raw spacing never matters. Markup
    text also matches on its source spelling (entities, line breaks);
    quoted string and template sources never do.
    """
    allowed = {str(entry).strip() for entry in allowed_strings}
    if not allowed:
        return False
    candidates = {segment.trimmed_text, segment.text.strip()}
    if segment.origin == MARKUP_TEXT_CHILD:
        candidates.add(segment.display_text)
    return not candidates.isdisjoint(allowed)


def extract_literals(element: SyntaxNode, options: Optional[ExtractOptions] = None) -> Iterator[LiteralSegment]:
    """
    Literal segments of one element or fragment: attribute values first
    (when requested), then body children in source order. Nested elements
    are not entered; each element is extracted on its own.
    """
    options = options or ExtractOptions()
    if element.kind not in MARKUP_KINDS:
        return

    if options.include_attributes:
        for attribute in element.children_of_kind(ATTRIBUTE):
            value = attribute.child("value")
            if value is None:
                continue
            if value.kind == STRING_LITERAL:
                segment = _string_segment(value, element, attribute, wrapped=False, direct=True)
                if segment is not None:
                    yield segment
            elif value.kind == EXPRESSION_CONTAINER:
                yield from _container_segments(value, element, attribute, options)

    run: List[SyntaxNode] = []
    for child in element.children:
        if child.kind == TEXT:
            run.append(child)
            continue
        if child.kind in (ATTRIBUTE, SPREAD_ATTRIBUTE):
            continue
        if run:
            segment = _text_run_segment(run, element)
            if segment is not None:
                yield segment
            run = []
        if child.kind == EXPRESSION_CONTAINER:
            yield from _container_segments(child, element, None, options)
    if run:
        segment = _text_run_segment(run, element)
        if segment is not None:
            yield segment


def _text_run_segment(run: List[SyntaxNode], element: SyntaxNode) -> Optional[LiteralSegment]:
    raw = "".join(node.raw if node.raw is not None else (node.value or "") for node in run)
    text = "".join(node.value if node.value is not None else html.unescape(node.raw or "") for node in run)
    # Whitespace-only runs, &nbsp; included, are layout rather than content.
    if not text.strip():
        return None
    return LiteralSegment(
        text=text,
        raw=raw,
        trimmed_text=normalize_text(text),
        origin=MARKUP_TEXT_CHILD,
        location=merge_ranges(run[0].location, run[-1].location),
        node=run[0],
        element=element,
    )


def _string_segment(
    node: SyntaxNode,
    element: SyntaxNode,
    attribute: Optional[SyntaxNode],
    *,
    wrapped: bool,
    direct: bool,
) -> Optional[LiteralSegment]:
    text = node.value or ""
    if text and not text.strip():
        return None
    return LiteralSegment(
        text=text,
        raw=node.raw if node.raw is not None else f"'{text}'",
        trimmed_text=normalize_text(text),
        origin=STRING_LITERAL_EXPRESSION,
        location=node.location,
        node=node,
        element=element,
        attribute=attribute,
        wrapped=wrapped,
        direct=direct,
    )


def _container_segments(
    container: SyntaxNode,
    element: SyntaxNode,
    attribute: Optional[SyntaxNode],
    options: ExtractOptions,
) -> Iterator[LiteralSegment]:
    expression = _first_operand(container)
    if expression is not None:
        yield from _expression_segments(expression, element, attribute, options, direct=True)


def _expression_segments(
    node: SyntaxNode,
    element: SyntaxNode,
    attribute: Optional[SyntaxNode],
    options: ExtractOptions,
    *,
    direct: bool,
) -> Iterator[LiteralSegment]:
    # Long `a + b + c ...` chains nest to the left; walk them with a stack.
    stack: List[Tuple[SyntaxNode, bool]] = [(node, direct)]
    while stack:
        current, is_direct = stack.pop()
        if current.kind == BINARY_EXPRESSION and current.operator == "+":
            for operand in (current.child("right"), current.child("left")):
                if operand is not None:
                    stack.append((operand, False))
        elif current.kind == STRING_LITERAL:
            segment = _string_segment(current, element, attribute, wrapped=True, direct=is_direct)
            if segment is not None:
                yield segment
        elif current.kind == TEMPLATE_LITERAL:
            yield from _template_segments(current, element, attribute, options, direct=is_direct)


def _template_segments(
    node: SyntaxNode,
    element: SyntaxNode,
    attribute: Optional[SyntaxNode],
    options: ExtractOptions,
    *,
    direct: bool,
) -> Iterator[LiteralSegment]:
    parts = node.children_of_kind(TEMPLATE_ELEMENT)
    has_substitutions = any(child.kind not in (TEMPLATE_ELEMENT, COMMENT) for child in node.children)

    if has_substitutions and options.split_templates:
        for part in parts:
            text = part.value if part.value is not None else (part.raw or "")
            if not text.strip():
                continue
            yield LiteralSegment(
                text=text,
                raw=part.raw if part.raw is not None else text,
                trimmed_text=normalize_text(text),
                origin=TEMPLATE_SUBSTITUTION_BOUNDARY,
                location=part.location,
                node=part,
                element=element,
                attribute=attribute,
                wrapped=True,
                direct=False,
            )
        return

    text = "".join(part.value if part.value is not None else (part.raw or "") for part in parts)
    yield LiteralSegment(
        text=text,
        raw=node.raw if node.raw is not None else f"`{text}`",
        trimmed_text=normalize_text(text),
        origin=TEMPLATE_LITERAL_EXPRESSION,
        location=node.location,
        node=node,
        element=element,
        attribute=attribute,
        wrapped=True,
        direct=direct,
    )


# ============================================================
# ====================== PARSED FILES ========================
# ============================================================

@dataclass
class ParsedFile:
    """One file ready for analysis: its tree plus its raw comment trivia."""
    path: str
    root: SyntaxNode
    comments: List[str] = field(default_factory=list)
    source: Optional[str] = None

    @classmethod
    def from_tree(
        cls,
        root: SyntaxNode,
        path: str = "<memory>",
        comments: Optional[List[str]] = None,
        source: Optional[str] = None,
    ) -> "ParsedFile":
        if comments is None:
            comments = [
                node.value if node.value is not None else (node.raw or "")
                for node, _ in walk(root)
                if node.kind == COMMENT
            ]
        return cls(path=path, root=root, comments=list(comments), source=source)


# ============================================================
# ========================== RULES ===========================
# ============================================================

class AnalysisContext:
    """
    Per-file services handed to rules. The scope model, pragma and
    classifier are built on first use and shared by every rule of the pass.
    """

    def __init__(
        self,
        parsed: ParsedFile,
        settings: AnalysisSettings,
        emitter: DiagnosticEmitter,
        index: TreeIndex,
    ) -> None:
        self.parsed = parsed
        self.settings = settings
        self.emitter = emitter
        self.index = index
        self._scopes: Optional[ScopeModel] = None
        self._pragma: Optional[PragmaDirective] = None
        self._classifier: Optional[ComponentClassifier] = None

    @property
    def scopes(self) -> ScopeModel:
        if self._scopes is None:
            self._scopes = ScopeModel.build(self.parsed.root, self.index)
        return self._scopes

    @property
    def pragma(self) -> PragmaDirective:
        if self._pragma is None:
            self._pragma = resolve_factory(self.parsed.comments, self.settings)
        return self._pragma

    @property
    def classifier(self) -> ComponentClassifier:
        if self._classifier is None:
            self._classifier = ComponentClassifier(self.index, self.settings)
        return self._classifier

    def report(self, rule: "Rule", kind: str, node: SyntaxNode, **params: Any) -> Finding:
        return self.emitter.report(kind, node, rule_id=rule.id, **params)


class Rule:
    """
    Base class for checks run by the RuleEngine. `create` returns the
    handlers to call, keyed by node kind.
    """
    id = ""
    description = ""

    def __init__(self, options: Optional[Dict[str, Any]] = None) -> None:
        if options is not None and not isinstance(options, dict):
            raise ConfigError(f"options for rule '{self.id}' must be a mapping")
        self.options: Dict[str, Any] = dict(options or {})

    def create(self, context: AnalysisContext) -> Dict[str, Handler]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.id!r})"


class ReactInJsxScopeRule(Rule):
    id = "react-in-jsx-scope"
    description = "The JSX factory identifier must be in scope wherever markup is built."

    def create(self, context: AnalysisContext) -> Dict[str, Handler]:
        def check(node: SyntaxNode, ancestors: Ancestors) -> None:
            name = context.pragma.base_identifier
            if context.scopes.resolve(name, node) is None:
                context.report(self, NOT_IN_SCOPE, node, name=name)

        return {ELEMENT: check, FRAGMENT: check}


class NoRedundantShouldComponentUpdateRule(Rule):
    id = "no-redundant-should-component-update"
    description = "Pure components must not define shouldComponentUpdate."

    def create(self, context: AnalysisContext) -> Dict[str, Handler]:
        def check(node: SyntaxNode, ancestors: Ancestors) -> None:
            descriptor = context.classifier.classify(node)
            if descriptor is None or not descriptor.is_pure:
                return
            if "shouldComponentUpdate" in class_member_names(node):
                context.report(self, NO_SHOULD_COMP_UPDATE, node, component=descriptor.display_name)

        return {CLASS_DEFINITION: check}


@dataclass(frozen=True)
class LiteralRuleOptions:
    no_strings: bool = False
    allowed_strings: FrozenSet[str] = frozenset()
    ignore_props: bool = False
    no_attribute_strings: bool = False

    @classmethod
    def from_mapping(cls, raw: Dict[str, Any]) -> "LiteralRuleOptions":
        allowed = raw.get("allowedStrings") or []
        if not isinstance(allowed, (list, tuple, set, frozenset)):
            raise ConfigError("allowedStrings must be a list of strings")
        return cls(
            no_strings=bool(raw.get("noStrings", False)),
            allowed_strings=frozenset(str(entry).strip() for entry in allowed),
            ignore_props=bool(raw.get("ignoreProps", False)),
            no_attribute_strings=bool(raw.get("noAttributeStrings", False)),
        )


class JsxNoLiteralsRule(Rule):
    id = "jsx-no-literals"
    description = "Literal strings in markup must be wrapped, or avoided entirely."

    def __init__(self, options: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(options)
        self.config = LiteralRuleOptions.from_mapping(self.options)

    def create(self, context: AnalysisContext) -> Dict[str, Handler]:
        extract_options = ExtractOptions(include_attributes=True)

        def check(node: SyntaxNode, ancestors: Ancestors) -> None:
            for segment in extract_literals(node, extract_options):
                if is_allowed_literal(segment, self.config.allowed_strings):
                    continue
                for kind, trigger, text in self.verdicts(segment):
                    context.report(self, kind, trigger, text=text)

        return {ELEMENT: check, FRAGMENT: check}

    def verdicts(self, segment: LiteralSegment) -> List[Tuple[str, SyntaxNode, str]]:
        """Finding kinds for one segment; props and body follow separate policies."""
        config = self.config
        if segment.attribute is None:
            if segment.origin == MARKUP_TEXT_CHILD:
                kind = NO_STRINGS_IN_JSX if config.no_strings else LITERAL_NOT_IN_JSX_EXPRESSION
                return [(kind, segment.node, segment.display_text)]
            if config.no_strings:
                return [(NO_STRINGS_IN_JSX, segment.node, segment.display_text)]
            return []

        if config.ignore_props:
            return []
        if not segment.wrapped:
            found: List[Tuple[str, SyntaxNode, str]] = []
            if config.no_strings:
                attribute_text = (segment.attribute.raw or segment.display_text).strip()
                found.append((INVALID_PROP_VALUE, segment.attribute, attribute_text))
            if config.no_attribute_strings:
                found.append((NO_STRINGS_IN_ATTRIBUTES, segment.node, segment.display_text))
            return found
        if config.no_attribute_strings:
            return [(NO_STRINGS_IN_ATTRIBUTES, segment.node, segment.display_text)]
        if config.no_strings:
            return [(NO_STRINGS_IN_JSX, segment.node, segment.display_text)]
        return []


RULES: Dict[str, type] = {
    rule.id: rule
    for rule in (ReactInJsxScopeRule, NoRedundantShouldComponentUpdateRule, JsxNoLiteralsRule)
}


# ============================================================
# ====================== PROJECT CONFIG ======================
# ============================================================

_DISABLED_VALUES = (False, 0, "off", "0")
_ENABLED_VALUES = (True, 1, 2, "on", "warn", "error", "1", "2")


def _normalize_rule_options(name: str, value: Any) -> Optional[Dict[str, Any]]:
    """None means disabled; a mapping holds the rule's options."""
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, list):
        # [level, {options}] as in eslintrc files
        if not value:
            return {}
        if value[0] in _DISABLED_VALUES:
            return None
        for item in value[1:]:
            if isinstance(item, dict):
                return dict(item)
        return {}
    if value in _DISABLED_VALUES:
        return None
    if value in _ENABLED_VALUES:
        return {}
    raise ConfigError(f"unsupported configuration for rule '{name}': {value!r}")


@dataclass(frozen=True)
class ProjectConfig:
    """
    Read-only configuration shared across analysis passes. An empty rule
    table enables every known rule with its default options.
    """
    settings: AnalysisSettings = field(default_factory=AnalysisSettings)
    rules: Dict[str, Optional[Dict[str, Any]]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Any) -> "ProjectConfig":
        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ConfigError("configuration must be a mapping")
        rules_raw = raw.get("rules") or {}
        if not isinstance(rules_raw, dict):
            raise ConfigError("rules must be a mapping of rule id to options")
        return cls(
            settings=AnalysisSettings.from_mapping(raw.get("settings")),
            rules={str(name): _normalize_rule_options(str(name), value) for name, value in rules_raw.items()},
        )

    def build_rules(self) -> List[Rule]:
        if not self.rules:
            return [rule_cls() for rule_cls in RULES.values()]
        rules: List[Rule] = []
        for name, options in self.rules.items():
            if options is None:
                continue
            rule_cls = RULES.get(name)
            if rule_cls is None:
                _warn_unknown_rule(name)
                continue
            rules.append(rule_cls(options))
        return rules


_UNKNOWN_RULES_REPORTED: Set[str] = set()


def _warn_unknown_rule(name: str) -> None:
    if name in _UNKNOWN_RULES_REPORTED:
        return
    sys.stderr.write(f"[jsxlint] Unknown rule '{name}' in configuration; ignoring it.\n")
    _UNKNOWN_RULES_REPORTED.add(name)


def load_config_from_yaml(path: Optional[str]) -> ProjectConfig:
    """
    Load a ProjectConfig from a YAML file. Later documents in the file
    override keys of earlier ones.

    PyYAML stays optional: without it (or without a readable file) a warning
    is written and the default configuration is used.
    """
    if not path:
        return ProjectConfig()

    if yaml is None:
        sys.stderr.write("[jsxlint] PyYAML is not installed; using default configuration.\n")
        return ProjectConfig()

    try:
        with open(path, "r", encoding="utf-8") as handle:
            documents = list(yaml.safe_load_all(handle))
    except FileNotFoundError:
        sys.stderr.write(f"[jsxlint] Config file not found: {path}\n")
        return ProjectConfig()
    except OSError as exc:
        sys.stderr.write(f"[jsxlint] Could not read config file {path}: {exc}\n")
        return ProjectConfig()
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc

    merged: Dict[str, Any] = {}
    for doc_index, doc in enumerate(documents):
        if doc is None:
            continue
        if not isinstance(doc, dict):
            raise ConfigError(f"{path}#doc{doc_index + 1}: configuration must be a mapping")
        merged.update(doc)
    return ProjectConfig.from_mapping(merged)


# ============================================================
# ======================= RULE ENGINE ========================
# ============================================================

class RuleEngine:
    """
    The RuleEngine will:
    - take a ProjectConfig (or an explicit list of rules)
    - build the per-file context for each ParsedFile
    - run every rule's handlers in a single pre-order pass
    - return the file's findings in visit order
    """

    def __init__(self, config: Optional[ProjectConfig] = None, rules: Optional[List[Rule]] = None) -> None:
        self.config = config or ProjectConfig()
        self.rules = rules if rules is not None else self.config.build_rules()
        self._rule_errors_reported: Set[Tuple[str, str]] = set()
        self._lock = threading.Lock()

    def analyze(self, parsed: ParsedFile) -> List[Finding]:
        index = TreeIndex(parsed.root)
        emitter = DiagnosticEmitter(index)
        context = AnalysisContext(parsed, self.config.settings, emitter, index)

        handlers: Dict[str, List[Handler]] = {}
        for rule in self.rules:
            for kind, callback in rule.create(context).items():
                handlers.setdefault(kind, []).append(self._guard(rule, callback, context))

        dispatch(parsed.root, handlers, emitter)
        return emitter.findings()

    def _guard(self, rule: Rule, callback: Handler, context: AnalysisContext) -> Handler:
        def _guarded(node: SyntaxNode, ancestors: Ancestors) -> None:
            try:
                callback(node, ancestors)
            except Exception as exc:  # pragma: no cover - safeguard
                self._report_rule_error(rule, context.parsed.path, exc)
                context.emitter.report_internal(RULE_ERROR, node, rule=rule.id, error=exc)

        return _guarded

    def _report_rule_error(self, rule: Rule, path: str, exc: Exception) -> None:
        key = (rule.id, path)
        with self._lock:
            if key in self._rule_errors_reported:
                return
            self._rule_errors_reported.add(key)
        sys.stderr.write(f"[jsxlint] Rule '{rule.id}' failed on {path}: {exc}\n")


def analyze_paths(
    paths: Sequence[str],
    config: Optional[ProjectConfig] = None,
    jobs: int = 1,
) -> List[Tuple[str, List[Finding]]]:
    """
    Analyze each file independently. With jobs > 1 files are spread over a
    thread pool; results keep the order of `paths`.
    """
    engine = RuleEngine(config)

    def analyze_one(path: str) -> Tuple[str, List[Finding]]:
        parsed = parse_file(path)
        if parsed is None:
            return path, []
        return path, engine.analyze(parsed)

    if jobs <= 1 or len(paths) <= 1:
        return [analyze_one(path) for path in paths]
    with ThreadPoolExecutor(max_workers=jobs) as executor:
        return list(executor.map(analyze_one, paths))


# ============================================================
# ================== TREE-SITTER FRONT END ===================
# ============================================================

_PARSER_MISSING_WARNED = False
_PARSERS = threading.local()

_IDENTIFIER_TYPES = frozenset({
    "identifier", "property_identifier", "shorthand_property_identifier",
    "shorthand_property_identifier_pattern", "private_property_identifier",
    "statement_identifier", "jsx_identifier", "this", "super",
})
_LITERAL_TYPES = frozenset({"number", "true", "false", "null", "undefined", "regex"})
_FIELD_ROLES = {
    "name": "name",
    "value": "value",
    "body": "body",
    "object": "object",
    "property": "property",
    "function": "function",
    "arguments": "arguments",
    "left": "left",
    "right": "right",
    "parameters": "parameters",
    "parameter": "parameters",
    "key": "key",
    "alias": "alias",
    "source": "source",
    "declaration": "declaration",
}

_STRING_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_ESCAPE_PATTERN = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")


def _decode_escapes(text: str) -> str:
    def replace(match: re.Match[str]) -> str:
        token = match.group(1)
        if token.startswith("u{"):
            return chr(int(token[2:-1], 16))
        if len(token) > 1 and token[0] in "ux":
            return chr(int(token[1:], 16))
        if token in ("\n", "\r", "\r\n", "\u2028", "\u2029"):
            return ""  # line continuation
        return _STRING_ESCAPES.get(token, token)

    return _ESCAPE_PATTERN.sub(replace, text)


def _comment_value(text: str) -> str:
    if text.startswith("/*"):
        return text[2:-2] if text.endswith("*/") else text[2:]
    if text.startswith("//"):
        return text[2:]
    return text


def _same_node(a: Any, b: Any) -> bool:
    return (
        a is not None
        and b is not None
        and a.start_byte == b.start_byte
        and a.end_byte == b.end_byte
        and a.type == b.type
    )


class _TreeSitterConverter:
    """
    Turns a tree-sitter JavaScript tree into SyntaxNodes. JSX body text is
    rebuilt from the byte gaps between structural children so that text runs
    keep their exact source spelling, whatever the grammar version does with
    whitespace and entities.
    """

    def __init__(self, source: bytes, path: str) -> None:
        self.source = source
        self.path = path
        self._line_starts = [0] + [match.end() for match in re.finditer(b"\n", source)]

    def text(self, start: int, end: int) -> str:
        return self.source[start:end].decode("utf-8", errors="replace")

    def node_text(self, node: Any) -> str:
        return self.text(node.start_byte, node.end_byte)

    def location(self, start: int, end: int) -> SourceRange:
        line_start = bisect.bisect_right(self._line_starts, start)
        line_end = bisect.bisect_right(self._line_starts, end)
        return SourceRange(
            file=self.path,
            start=start,
            end=end,
            line_start=line_start,
            col_start=start - self._line_starts[line_start - 1] + 1,
            line_end=line_end,
            col_end=end - self._line_starts[line_end - 1] + 1,
        )

    def node_location(self, node: Any) -> SourceRange:
        return self.location(node.start_byte, node.end_byte)

    def convert(self, node: Any, role: Optional[str] = None) -> SyntaxNode:
        if node.type == "ERROR" or node.is_missing:
            # Kind outside NODE_KINDS: the walker reports and skips it.
            return SyntaxNode(kind="ERROR", location=self.node_location(node), role=role, raw=self.node_text(node))
        handler = self._HANDLERS.get(node.type)
        if handler is not None:
            return handler(self, node, role)
        if node.type in _IDENTIFIER_TYPES:
            return self._leaf(node, IDENTIFIER, role, name=self.node_text(node))
        if node.type in _LITERAL_TYPES:
            text = self.node_text(node)
            return self._leaf(node, LITERAL, role, value=text)
        return self._generic(node, OTHER, role)

    def _leaf(self, node: Any, kind: str, role: Optional[str], **attrs: Any) -> SyntaxNode:
        return SyntaxNode(kind=kind, location=self.node_location(node), role=role, raw=self.node_text(node), **attrs)

    def _field_roles(self, node: Any) -> Dict[Tuple[int, int, str], str]:
        roles: Dict[Tuple[int, int, str], str] = {}
        for field_name, role in _FIELD_ROLES.items():
            child = node.child_by_field_name(field_name)
            if child is not None:
                roles.setdefault((child.start_byte, child.end_byte, child.type), role)
        return roles

    def _convert_children(self, node: Any) -> Tuple[SyntaxNode, ...]:
        roles = self._field_roles(node)
        return tuple(
            self.convert(child, roles.get((child.start_byte, child.end_byte, child.type)))
            for child in node.named_children
        )

    def _generic(self, node: Any, kind: str, role: Optional[str], **attrs: Any) -> SyntaxNode:
        return SyntaxNode(
            kind=kind,
            children=self._convert_children(node),
            location=self.node_location(node),
            role=role,
            **attrs,
        )

    def _name_text(self, node: Any, field_name: str = "name") -> Optional[str]:
        name_node = node.child_by_field_name(field_name)
        return self.node_text(name_node) if name_node is not None else None

    # ---- plain JavaScript -------------------------------------------------

    def _program(self, node: Any, role: Optional[str]) -> SyntaxNode:
        return self._generic(node, PROGRAM, role)

    def _comment(self, node: Any, role: Optional[str]) -> SyntaxNode:
        text = self.node_text(node)
        return self._leaf(node, COMMENT, role, value=_comment_value(text))

    def _string(self, node: Any, role: Optional[str]) -> SyntaxNode:
        text = self.node_text(node)
        return self._leaf(node, STRING_LITERAL, role, value=_decode_escapes(text[1:-1]))

    def _template(self, node: Any, role: Optional[str]) -> SyntaxNode:
        children: List[SyntaxNode] = []
        cursor = node.start_byte + 1
        end = node.end_byte - 1
        for child in node.named_children:
            if child.type != "template_substitution":
                continue
            if child.start_byte > cursor:
                children.append(self._template_part(cursor, child.start_byte))
            inner = next((item for item in child.named_children if item.type != "comment"), None)
            if inner is not None:
                children.append(self.convert(inner, "substitution"))
            else:
                children.append(SyntaxNode(kind=OTHER, location=self.node_location(child), role="substitution"))
            cursor = child.end_byte
        if end > cursor:
            children.append(self._template_part(cursor, end))
        return SyntaxNode(
            kind=TEMPLATE_LITERAL,
            children=tuple(children),
            location=self.node_location(node),
            role=role,
            raw=self.node_text(node),
        )

    def _template_part(self, start: int, end: int) -> SyntaxNode:
        raw = self.text(start, end)
        return SyntaxNode(kind=TEMPLATE_ELEMENT, location=self.location(start, end), raw=raw, value=_decode_escapes(raw))

    def _binary(self, node: Any, role: Optional[str]) -> SyntaxNode:
        operator = node.child_by_field_name("operator")
        return self._generic(node, BINARY_EXPRESSION, role, operator=operator.type if operator is not None else None)

    def _member(self, node: Any, role: Optional[str]) -> SyntaxNode:
        return self._generic(node, MEMBER_EXPRESSION, role)

    def _call(self, node: Any, role: Optional[str]) -> SyntaxNode:
        return self._generic(node, CALL_EXPRESSION, role)

    def _parenthesized(self, node: Any, role: Optional[str]) -> SyntaxNode:
        inner = [child for child in node.named_children if child.type != "comment"]
        if len(inner) == 1:
            return self.convert(inner[0], role)
        return self._generic(node, OTHER, role)

    def _class(self, node: Any, role: Optional[str], qualifier: str) -> SyntaxNode:
        name_node = node.child_by_field_name("name")
        children: List[SyntaxNode] = []
        for child in node.named_children:
            if child.type == "class_heritage":
                base = next((item for item in child.named_children if item.type != "comment"), None)
                if base is not None:
                    children.append(self.convert(base, "superclass"))
            elif _same_node(child, name_node):
                children.append(self.convert(child, "name"))
            elif child.type == "class_body":
                children.append(self.convert(child, "body"))
            else:
                children.append(self.convert(child))
        return SyntaxNode(
            kind=CLASS_DEFINITION,
            children=tuple(children),
            location=self.node_location(node),
            role=role,
            name=self.node_text(name_node) if name_node is not None else None,
            qualifier=qualifier,
        )

    def _class_declaration(self, node: Any, role: Optional[str]) -> SyntaxNode:
        return self._class(node, role, "declaration")

    def _class_expression(self, node: Any, role: Optional[str]) -> SyntaxNode:
        return self._class(node, role, "expression")

    def _function(self, node: Any, role: Optional[str], qualifier: str) -> SyntaxNode:
        return self._generic(node, FUNCTION_DEFINITION, role, name=self._name_text(node), qualifier=qualifier)

    def _function_declaration(self, node: Any, role: Optional[str]) -> SyntaxNode:
        return self._function(node, role, "declaration")

    def _function_expression(self, node: Any, role: Optional[str]) -> SyntaxNode:
        return self._function(node, role, "expression")

    def _arrow_function(self, node: Any, role: Optional[str]) -> SyntaxNode:
        return self._function(node, role, "arrow")

    def _method(self, node: Any, role: Optional[str]) -> SyntaxNode:
        return self._function(node, role, "method")

    def _field_definition(self, node: Any, role: Optional[str]) -> SyntaxNode:
        name = self._name_text(node, "property") or self._name_text(node, "name")
        return self._generic(node, PROPERTY, role, name=name)

    def _pair(self, node: Any, role: Optional[str]) -> SyntaxNode:
        key = self._name_text(node, "key")
        if key and key[0] in "'\"":
            key = key[1:-1]
        return self._generic(node, PROPERTY, role, name=key)

    def _object(self, node: Any, role: Optional[str]) -> SyntaxNode:
        return self._generic(node, OBJECT_EXPRESSION, role)

    def _declaration(self, node: Any, role: Optional[str], qualifier: str) -> SyntaxNode:
        roles = self._field_roles(node)
        children: List[SyntaxNode] = []
        for child in node.named_children:
            if child.type == "variable_declarator":
                children.append(self._generic(child, VARIABLE_DECLARATOR, None, qualifier=qualifier))
            else:
                children.append(self.convert(child, roles.get((child.start_byte, child.end_byte, child.type))))
        return SyntaxNode(kind=OTHER, children=tuple(children), location=self.node_location(node), role=role)

    def _variable_declaration(self, node: Any, role: Optional[str]) -> SyntaxNode:
        return self._declaration(node, role, "var")

    def _lexical_declaration(self, node: Any, role: Optional[str]) -> SyntaxNode:
        kind_node = node.child_by_field_name("kind")
        if kind_node is None and node.child_count:
            kind_node = node.children[0]
        qualifier = self.node_text(kind_node) if kind_node is not None else "let"
        return self._declaration(node, role, qualifier)

    def _variable_declarator(self, node: Any, role: Optional[str]) -> SyntaxNode:
        return self._generic(node, VARIABLE_DECLARATOR, role, qualifier="var")

    def _import(self, node: Any, role: Optional[str]) -> SyntaxNode:
        return self._generic(node, IMPORT_DECLARATION, role)

    def _export(self, node: Any, role: Optional[str]) -> SyntaxNode:
        is_default = any(child.type == "default" for child in node.children)
        return self._generic(node, EXPORT_DECLARATION, role, qualifier="default" if is_default else None)

    def _return(self, node: Any, role: Optional[str]) -> SyntaxNode:
        return self._generic(node, RETURN_STATEMENT, role)

    def _block(self, node: Any, role: Optional[str]) -> SyntaxNode:
        return self._generic(node, BLOCK, role)

    # ---- JSX --------------------------------------------------------------

    def _jsx_text(self, start: int, end: int) -> SyntaxNode:
        raw = self.text(start, end)
        return SyntaxNode(kind=TEXT, location=self.location(start, end), raw=raw, value=html.unescape(raw))

    def _jsx_attributes(self, tag: Any, tag_name: Any) -> List[SyntaxNode]:
        attributes: List[SyntaxNode] = []
        for child in tag.named_children:
            if _same_node(child, tag_name):
                continue
            if child.type == "jsx_attribute":
                attributes.append(self._jsx_attribute(child))
            elif child.type == "jsx_expression":
                attributes.append(self._generic(child, SPREAD_ATTRIBUTE, None, raw=self.node_text(child)))
            else:
                attributes.append(self.convert(child))
        return attributes

    def _jsx_attribute(self, node: Any, role: Optional[str] = None) -> SyntaxNode:
        named = [child for child in node.named_children if child.type != "comment"]
        children: List[SyntaxNode] = []
        name = None
        if named:
            name = self.node_text(named[0])
            children.append(self._leaf(named[0], IDENTIFIER, "name", name=name))
        if len(named) > 1:
            value = named[1]
            if value.type in ("string", "jsx_string"):
                raw = self.node_text(value)
                # JSX attribute strings decode entities, not backslash escapes.
                children.append(self._leaf(value, STRING_LITERAL, "value", value=html.unescape(raw[1:-1])))
            else:
                children.append(self.convert(value, "value"))
        return SyntaxNode(
            kind=ATTRIBUTE,
            children=tuple(children),
            location=self.node_location(node),
            role=role,
            name=name,
            raw=self.node_text(node),
        )

    def _jsx_body(self, node: Any, body_start: int, body_end: int, skip: Iterable[Any]) -> List[SyntaxNode]:
        skipped = list(skip)
        children: List[SyntaxNode] = []
        cursor = body_start
        for child in node.named_children:
            if any(_same_node(child, other) for other in skipped):
                continue
            if child.type in ("jsx_text", "html_character_reference", "comment"):
                continue
            if child.start_byte < body_start or child.end_byte > body_end:
                continue
            if child.start_byte > cursor:
                children.append(self._jsx_text(cursor, child.start_byte))
            children.append(self.convert(child))
            cursor = child.end_byte
        if body_end > cursor:
            children.append(self._jsx_text(cursor, body_end))
        return children

    def _jsx_element(self, node: Any, role: Optional[str]) -> SyntaxNode:
        open_tag = node.child_by_field_name("open_tag")
        close_tag = node.child_by_field_name("close_tag")
        if open_tag is None:
            open_tag = next((child for child in node.named_children if child.type == "jsx_opening_element"), None)
        if close_tag is None:
            close_tag = next((child for child in node.named_children if child.type == "jsx_closing_element"), None)
        tag_name = open_tag.child_by_field_name("name") if open_tag is not None else None

        children: List[SyntaxNode] = []
        if open_tag is not None:
            children.extend(self._jsx_attributes(open_tag, tag_name))
        body_start = open_tag.end_byte if open_tag is not None else node.start_byte
        body_end = close_tag.start_byte if close_tag is not None else node.end_byte
        children.extend(self._jsx_body(node, body_start, body_end, (open_tag, close_tag)))

        return SyntaxNode(
            kind=ELEMENT if tag_name is not None else FRAGMENT,
            children=tuple(children),
            location=self.node_location(node),
            role=role,
            name=self.node_text(tag_name) if tag_name is not None else None,
        )

    def _jsx_fragment(self, node: Any, role: Optional[str]) -> SyntaxNode:
        # Older grammars: '<' '>' children... '<' '/' '>'
        tokens = node.children
        body_start = tokens[1].end_byte if len(tokens) >= 2 else node.start_byte
        body_end = tokens[-3].start_byte if len(tokens) >= 5 else node.end_byte
        return SyntaxNode(
            kind=FRAGMENT,
            children=tuple(self._jsx_body(node, body_start, body_end, ())),
            location=self.node_location(node),
            role=role,
        )

    def _jsx_self_closing(self, node: Any, role: Optional[str]) -> SyntaxNode:
        tag_name = node.child_by_field_name("name")
        return SyntaxNode(
            kind=ELEMENT,
            children=tuple(self._jsx_attributes(node, tag_name)),
            location=self.node_location(node),
            role=role,
            name=self.node_text(tag_name) if tag_name is not None else None,
        )

    def _jsx_expression(self, node: Any, role: Optional[str]) -> SyntaxNode:
        return self._generic(node, EXPRESSION_CONTAINER, role, raw=self.node_text(node))

    _HANDLERS: Dict[str, Callable[..., SyntaxNode]] = {
        "program": _program,
        "comment": _comment,
        "string": _string,
        "template_string": _template,
        "binary_expression": _binary,
        "member_expression": _member,
        "call_expression": _call,
        "parenthesized_expression": _parenthesized,
        "class_declaration": _class_declaration,
        "class": _class_expression,
        "function_declaration": _function_declaration,
        "generator_function_declaration": _function_declaration,
        "function_expression": _function_expression,
        "function": _function_expression,
        "generator_function": _function_expression,
        "arrow_function": _arrow_function,
        "method_definition": _method,
        "field_definition": _field_definition,
        "public_field_definition": _field_definition,
        "pair": _pair,
        "object": _object,
        "variable_declaration": _variable_declaration,
        "lexical_declaration": _lexical_declaration,
        "variable_declarator": _variable_declarator,
        "import_statement": _import,
        "export_statement": _export,
        "return_statement": _return,
        "statement_block": _block,
        "class_body": _block,
        "jsx_element": _jsx_element,
        "jsx_fragment": _jsx_fragment,
        "jsx_self_closing_element": _jsx_self_closing,
        "jsx_expression": _jsx_expression,
        "jsx_attribute": _jsx_attribute,
    }


def parser_available() -> bool:
    return TSParser is not None and TSLanguage is not None and ts_javascript is not None


def _javascript_parser() -> Any:
    # tree-sitter parsers are not thread-safe; keep one per worker thread.
    parser = getattr(_PARSERS, "javascript", None)
    if parser is None:
        parser = TSParser(TSLanguage(ts_javascript.language()))
        _PARSERS.javascript = parser
    return parser


def parse_source(source: str, path: str = "<memory>") -> ParsedFile:
    """Parse JavaScript/JSX text into a ParsedFile."""
    if not parser_available():
        raise ParserUnavailableError("tree-sitter and tree-sitter-javascript are required to parse source text")
    data = source.encode("utf-8")
    tree = _javascript_parser().parse(data)
    root = _TreeSitterConverter(data, path).convert(tree.root_node)
    return ParsedFile.from_tree(root, path=path, source=source)


def parse_file(path: str) -> Optional[ParsedFile]:
    """
    Read and parse one file. A file that cannot be read or converted is
    reported on stderr and yields None so other files keep going.
    """
    if not parser_available():
        _warn_once_parser_missing()
        return None
    try:
        with open(path, "r", encoding="utf-8") as handle:
            source = handle.read()
    except FileNotFoundError:
        sys.stderr.write(f"[jsxlint] Input file not found: {path}\n")
        return None
    except (OSError, UnicodeDecodeError) as exc:
        sys.stderr.write(f"[jsxlint] Could not read '{path}': {exc}\n")
        return None
    try:
        return parse_source(source, path)
    except RecursionError:
        sys.stderr.write(f"[jsxlint] Could not convert '{path}': syntax nested too deeply\n")
        return None


def _warn_once_parser_missing() -> None:
    global _PARSER_MISSING_WARNED
    if _PARSER_MISSING_WARNED:
        return
    sys.stderr.write(
        "[jsxlint] tree-sitter-javascript is not available; source files cannot be parsed.\n"
    )
    _PARSER_MISSING_WARNED = True


# ============================================================
# ===================== FINDING OUTPUT =======================
# ============================================================

TEMPLATE_PATTERN = re.compile(r"\{\{\s*([^{}]+?)\s*\}\}")

MESSAGES: Dict[str, str] = {
    NOT_IN_SCOPE: "'{{name}}' must be in scope when using JSX",
    NO_SHOULD_COMP_UPDATE: "{{component}} does not need shouldComponentUpdate when extending React.PureComponent.",
    LITERAL_NOT_IN_JSX_EXPRESSION: 'Missing JSX expression container around literal string: "{{text}}"',
    NO_STRINGS_IN_JSX: 'Strings not allowed in JSX files: "{{text}}"',
    INVALID_PROP_VALUE: 'Invalid prop value: "{{text}}"',
    NO_STRINGS_IN_ATTRIBUTES: 'Strings not allowed in attributes: "{{text}}"',
    MALFORMED_TREE: "Skipped subtree with unrecognized node kind '{{node_kind}}'",
    RULE_ERROR: "Rule '{{rule}}' failed: {{error}}",
}


def format_message(finding: Finding) -> str:
    template = MESSAGES.get(finding.kind, finding.kind)

    def replace(match: re.Match[str]) -> str:
        return finding.message_parameters.get(match.group(1), match.group(0))

    return TEMPLATE_PATTERN.sub(replace, template)


def finding_to_json_obj(finding: Finding, path: Optional[str] = None) -> Dict[str, Any]:
    """
    Convert a Finding into a JSON-friendly dict.
    We keep this explicit so the field order stays stable over time.
    """
    if finding.location is not None:
        location = finding.location.as_dict()
    else:
        location = {"file": path or "<unknown>", "line_start": 0, "col_start": 0, "line_end": 0, "col_end": 0}
    return {
        "rule_id": finding.rule_id,
        "kind": finding.kind,
        "message": format_message(finding),
        "parameters": dict(finding.message_parameters),
        "location": location,
        "internal": finding.internal,
        "tool": TOOL_NAME,
        "version": TOOL_VERSION,
    }


def emit_findings_json(results: Sequence[Tuple[str, List[Finding]]], out: Optional[str] = None) -> None:
    """Serialize all findings to JSON (a flat list of finding objects)."""
    as_json = [finding_to_json_obj(finding, path) for path, findings in results for finding in findings]
    text = json.dumps(as_json, indent=2, sort_keys=False)
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
    else:
        print(text)


# ============================================================
# ============================ CLI ===========================
# ============================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point for jsxlint.
    Intended usage:
      jsxlint analyze --config jsxlint.yaml src/App.jsx src/Button.jsx ...

    Exit status: 0 without user-facing findings, 1 with findings,
    2 for configuration errors.
    """
    parser = argparse.ArgumentParser(
        prog=TOOL_NAME,
        description="jsxlint: semantic checks for JSX component code"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_p = subparsers.add_parser(
        "analyze",
        help="Analyze one or more JavaScript/JSX files and emit JSON findings."
    )
    analyze_p.add_argument(
        "--config",
        metavar="CONFIG_YAML",
        help="YAML configuration file (settings and rule options).",
        required=False,
    )
    analyze_p.add_argument(
        "--out",
        metavar="OUT_JSON",
        help="Write findings to this JSON file instead of stdout.",
        required=False,
    )
    analyze_p.add_argument(
        "--jobs",
        type=int,
        default=1,
        metavar="N",
        help="Number of files to analyze concurrently.",
    )
    analyze_p.add_argument(
        "files",
        nargs="+",
        help="Source files to analyze."
    )

    args = parser.parse_args(argv)

    if args.command == "analyze":
        try:
            config = load_config_from_yaml(args.config)
            config.build_rules()
        except ConfigError as exc:
            sys.stderr.write(f"[jsxlint] Invalid configuration: {exc}\n")
            return 2

        results = analyze_paths(args.files, config, jobs=max(1, args.jobs))
        emit_findings_json(results, out=args.out)
        has_findings = any(not finding.internal for _, findings in results for finding in findings)
        return 1 if has_findings else 0

    # unreachable if parser is correct
    return 1


if __name__ == "__main__":
    sys.exit(main())
