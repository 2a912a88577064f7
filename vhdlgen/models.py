"""Data holders describing a VHDL module and its constructs.

Each construct carries a ``name``, a one-line ``description`` and optional
``remarks`` (see :class:`vhdlgen.formatting.layout.Documented`) and renders its
declaration as a list of :class:`CodeLine` fragments. Nested documented items
(variables, generics, ports) appear as :class:`DocRef` fragments so the
assembler can document them at the right depth.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, Union

from .config import FormattingConfig
from .errors import DuplicateNameError, InvalidArgumentError

DEFAULT_USES: tuple[str, ...] = ("IEEE.STD_LOGIC_1164.all", "IEEE.NUMERIC_STD.all")


class CodeLine(NamedTuple):
    """A line of code, ``depth`` levels deeper than its construct."""

    depth: int
    text: str


class DocRef(NamedTuple):
    """Documentation for a nested item; ``brief`` asks for the one-line form."""

    depth: int
    item: Any
    brief: bool = False


Fragment = Union[CodeLine, DocRef]


class PortDirection(str, Enum):
    IN = "in"
    OUT = "out"
    INOUT = "inout"
    BUFFER = "buffer"


class DeclarationKind(str, Enum):
    CONSTANT = "constant"
    SUBTYPE = "subtype"
    TYPE = "type"


def _require(value: Optional[str], label: str, owner: str = "") -> None:
    if value is None or not str(value).strip():
        where = f" for {owner}" if owner else ""
        raise InvalidArgumentError(f"{label} is required{where}")


def _require_documented(item: Any) -> None:
    _require(item.name, "name", type(item).__name__)
    _require(item.description, "description", item.name)


def _enum(kind: type, value: Any, label: str) -> Any:
    try:
        return kind(value.lower() if isinstance(value, str) else value)
    except ValueError as exc:
        choices = ", ".join(member.value for member in kind)
        raise InvalidArgumentError(f"{label} must be one of {choices}, got {value!r}") from exc


def _names(value: Any, label: str) -> List[str]:
    """A list of names; a lone string is one name, not a sequence of letters."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)):
        raise InvalidArgumentError(f"{label} must be a list of names, got {type(value).__name__}")
    return [str(name) for name in value]


def _default_clause(default: Optional[str]) -> str:
    return f" := {default}" if default is not None and str(default).strip() else ""


def _opening(keyword: str, config: FormattingConfig) -> str:
    return f"{keyword} (" if config.add_space_after_keywords else f"{keyword}("


def _closing(keyword: str, name: str, config: FormattingConfig) -> str:
    parts = ["end"]
    if config.add_optional_type_names:
        parts.append(keyword)
    if config.add_optional_names:
        parts.append(name)
    return " ".join(parts) + ";"


def check_unique(items: Iterable[Any], owner: str) -> None:
    """Reject two items whose names only differ by case."""
    seen: Dict[str, Any] = {}
    for item in items:
        key = item.name.lower()
        if key in seen:
            other = seen[key]
            if other is item:
                raise DuplicateNameError(
                    f"{owner} contains the {type(item).__name__} {item.name!r} twice"
                )
            raise DuplicateNameError(
                f"{owner} contains a {type(other).__name__} and a {type(item).__name__} "
                f"with the same name ({item.name})"
            )
        seen[key] = item


def _documented_block(items: Sequence[Any], depth: int, config: FormattingConfig) -> List[Fragment]:
    fragments: List[Fragment] = []
    for item in items:
        fragments.append(DocRef(depth, item))
        fragments.extend(CodeLine(line.depth + depth, line.text) for line in item.render(config))
    return fragments


def _interface_list(
    keyword: str,
    items: Sequence[Any],
    depth: int,
    config: FormattingConfig,
    *,
    documented: bool,
) -> List[Fragment]:
    fragments: List[Fragment] = [CodeLine(depth, _opening(keyword, config))]
    for index, item in enumerate(items):
        if documented:
            fragments.append(DocRef(depth + 1, item, brief=True))
        ending = ";" if index < len(items) - 1 else ""
        fragments.append(CodeLine(depth + 1, f"{item.declaration()}{ending}"))
    fragments.append(CodeLine(depth, ");"))
    return fragments


@dataclass
class Generic:
    """An entity or component generic."""

    name: str
    type: str
    description: str
    default: Optional[str] = None
    remarks: Optional[str] = None

    def __post_init__(self) -> None:
        _require_documented(self)
        _require(self.type, "type", self.name)

    def declaration(self) -> str:
        return f"{self.name} : {self.type}{_default_clause(self.default)}"


@dataclass
class Port:
    """An entity or component port."""

    name: str
    direction: PortDirection
    type: str
    description: str
    default: Optional[str] = None
    remarks: Optional[str] = None

    def __post_init__(self) -> None:
        _require_documented(self)
        _require(self.type, "type", self.name)
        self.direction = _enum(PortDirection, self.direction, f"direction of port {self.name}")

    def declaration(self) -> str:
        return f"{self.name} : {self.direction.value} {self.type}{_default_clause(self.default)}"


@dataclass
class Entity:
    """The entity (interface) of a module."""

    name: str
    description: str
    remarks: Optional[str] = None
    generics: List[Generic] = field(default_factory=list)
    ports: List[Port] = field(default_factory=list)

    def __post_init__(self) -> None:
        _require_documented(self)
        check_unique(list(self.generics) + list(self.ports), f"entity {self.name}")

    def render(self, config: FormattingConfig) -> List[Fragment]:
        fragments: List[Fragment] = [CodeLine(0, f"entity {self.name} is")]
        if self.generics:
            fragments.extend(_interface_list("generic", self.generics, 1, config, documented=True))
        if self.ports:
            fragments.extend(_interface_list("port", self.ports, 1, config, documented=True))
        fragments.append(CodeLine(0, _closing("entity", self.name, config)))
        return fragments


@dataclass
class Declaration:
    """A constant, subtype or type declared in the architecture.

    ``depends_on`` names other declarations of the same module that must be
    emitted first.
    """

    kind: DeclarationKind
    name: str
    type: str
    description: str
    default: Optional[str] = None
    remarks: Optional[str] = None
    depends_on: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        _require_documented(self)
        _require(self.type, "type", self.name)
        self.kind = _enum(DeclarationKind, self.kind, f"kind of declaration {self.name}")
        if _default_clause(self.default) and self.kind is not DeclarationKind.CONSTANT:
            raise InvalidArgumentError(
                f"Only constants can have default values; {self.kind.value} {self.name} "
                f"was given {self.default!r}"
            )
        self.depends_on = _names(self.depends_on, f"depends_on of {self.name}")

    def render(self, config: FormattingConfig) -> List[CodeLine]:
        if self.kind is DeclarationKind.CONSTANT:
            text = f"constant {self.name} : {self.type}{_default_clause(self.default)};"
        else:
            text = f"{self.kind.value} {self.name} is {self.type};"
        return [CodeLine(0, text)]


@dataclass
class Signal:
    name: str
    type: str
    description: str
    default: Optional[str] = None
    remarks: Optional[str] = None

    def __post_init__(self) -> None:
        _require_documented(self)
        _require(self.type, "type", self.name)

    def render(self, config: FormattingConfig) -> List[CodeLine]:
        return [CodeLine(0, f"signal {self.name} : {self.type}{_default_clause(self.default)};")]


@dataclass
class Variable:
    name: str
    type: str
    description: str
    default: Optional[str] = None
    remarks: Optional[str] = None

    def __post_init__(self) -> None:
        _require_documented(self)
        _require(self.type, "type", self.name)

    def render(self, config: FormattingConfig) -> List[CodeLine]:
        return [CodeLine(0, f"variable {self.name} : {self.type}{_default_clause(self.default)};")]


@dataclass
class Alias:
    """An alias for an existing object; ``type`` is optional."""

    name: str
    target: str
    description: str
    type: Optional[str] = None
    remarks: Optional[str] = None

    def __post_init__(self) -> None:
        _require_documented(self)
        _require(self.target, "target", self.name)

    def render(self, config: FormattingConfig) -> List[CodeLine]:
        subtype = f" : {self.type}" if self.type else ""
        return [CodeLine(0, f"alias {self.name}{subtype} is {self.target};")]


@dataclass
class Parameter:
    """A function parameter."""

    name: str
    type: str
    description: str

    def __post_init__(self) -> None:
        _require_documented(self)
        _require(self.type, "type", self.name)

    def signature(self) -> str:
        return f"{self.name} : {self.type}"

    def documentation(self) -> str:
        return f"{self.name} - {self.description}"


@dataclass
class ProcedureParameter:
    """A procedure parameter with a mode and an optional object class."""

    name: str
    type: str
    description: str
    direction: PortDirection = PortDirection.IN
    object_class: Optional[str] = None

    def __post_init__(self) -> None:
        _require_documented(self)
        _require(self.type, "type", self.name)
        self.direction = _enum(PortDirection, self.direction, f"direction of parameter {self.name}")
        if self.object_class is not None and self.object_class not in {"signal", "variable", "constant", "file"}:
            raise InvalidArgumentError(
                f"object_class of parameter {self.name} must be signal, variable, constant or file"
            )

    def signature(self) -> str:
        prefix = f"{self.object_class} " if self.object_class else ""
        return f"{prefix}{self.name} : {self.direction.value} {self.type}"

    def documentation(self) -> str:
        return f"{self.name} - {self.description}"


@dataclass
class Function:
    name: str
    return_type: str
    description: str
    returns: str
    parameters: List[Parameter] = field(default_factory=list)
    variables: List[Variable] = field(default_factory=list)
    body: List[str] = field(default_factory=list)
    remarks: Optional[str] = None

    def __post_init__(self) -> None:
        _require_documented(self)
        _require(self.return_type, "return_type", self.name)
        _require(self.returns, "returns", self.name)
        if not self.body:
            raise InvalidArgumentError(f"Function {self.name} has no body")
        check_unique(list(self.parameters) + list(self.variables), f"function {self.name}")

    def doc_entries(self) -> Dict[str, List[str]]:
        return {
            "Parameters": [param.documentation() for param in self.parameters],
            "Returns": [self.returns],
        }

    def signature(self) -> str:
        params = "; ".join(param.signature() for param in self.parameters)
        arguments = f"({params})" if params else ""
        return f"function {self.name}{arguments} return {self.return_type} is"

    def render(self, config: FormattingConfig) -> List[Fragment]:
        fragments: List[Fragment] = [CodeLine(0, self.signature())]
        fragments.extend(_documented_block(self.variables, 1, config))
        fragments.append(CodeLine(0, "begin"))
        fragments.extend(CodeLine(1, line) for line in self.body)
        fragments.append(CodeLine(0, _closing("function", self.name, config)))
        return fragments


@dataclass
class Procedure:
    name: str
    description: str
    parameters: List[ProcedureParameter] = field(default_factory=list)
    variables: List[Variable] = field(default_factory=list)
    body: List[str] = field(default_factory=list)
    remarks: Optional[str] = None

    def __post_init__(self) -> None:
        _require_documented(self)
        if not self.body:
            raise InvalidArgumentError(f"Procedure {self.name} has no body")
        check_unique(list(self.parameters) + list(self.variables), f"procedure {self.name}")

    def doc_entries(self) -> Dict[str, List[str]]:
        return {"Parameters": [param.documentation() for param in self.parameters]}

    def signature(self) -> str:
        params = "; ".join(param.signature() for param in self.parameters)
        arguments = f"({params})" if params else ""
        return f"procedure {self.name}{arguments} is"

    def render(self, config: FormattingConfig) -> List[Fragment]:
        fragments: List[Fragment] = [CodeLine(0, self.signature())]
        fragments.extend(_documented_block(self.variables, 1, config))
        fragments.append(CodeLine(0, "begin"))
        fragments.extend(CodeLine(1, line) for line in self.body)
        fragments.append(CodeLine(0, _closing("procedure", self.name, config)))
        return fragments


@dataclass
class Component:
    """Component declaration used to instantiate sub-modules."""

    name: str
    description: str
    generics: List[Generic] = field(default_factory=list)
    ports: List[Port] = field(default_factory=list)
    remarks: Optional[str] = None

    def __post_init__(self) -> None:
        _require_documented(self)
        if not self.generics and not self.ports:
            raise InvalidArgumentError(f"Component {self.name} has neither generics nor ports")
        check_unique(list(self.generics) + list(self.ports), f"component {self.name}")

    @classmethod
    def from_entity(cls, entity: Entity) -> "Component":
        return cls(
            name=entity.name,
            description=entity.description,
            generics=list(entity.generics),
            ports=list(entity.ports),
            remarks=entity.remarks,
        )

    def render(self, config: FormattingConfig) -> List[Fragment]:
        fragments: List[Fragment] = [CodeLine(0, f"component {self.name} is")]
        if self.generics:
            fragments.extend(_interface_list("generic", self.generics, 1, config, documented=False))
        if self.ports:
            fragments.extend(_interface_list("port", self.ports, 1, config, documented=False))
        closing = "end component"
        if config.add_optional_names:
            closing += f" {self.name}"
        fragments.append(CodeLine(0, closing + ";"))
        return fragments


@dataclass
class AttributeDeclaration:
    name: str
    type: str
    description: str
    remarks: Optional[str] = None

    def __post_init__(self) -> None:
        _require_documented(self)
        _require(self.type, "type", self.name)

    def render(self, config: FormattingConfig) -> List[CodeLine]:
        return [CodeLine(0, f"attribute {self.name} : {self.type};")]


@dataclass
class AttributeSpecification:
    """Applies an attribute value to a named item of the module."""

    declaration: AttributeDeclaration
    item: str
    value: str
    description: str
    item_class: str = "signal"
    remarks: Optional[str] = None

    def __post_init__(self) -> None:
        if self.declaration is None:
            raise InvalidArgumentError("declaration is required for an attribute specification")
        _require(self.item, "item", self.declaration.name)
        _require(self.value, "value", self.declaration.name)
        _require(self.item_class, "item_class", self.declaration.name)
        _require(self.description, "description", self.name)

    @property
    def name(self) -> str:
        return f"{self.item}'{self.declaration.name}"

    def render(self, config: FormattingConfig) -> List[CodeLine]:
        return [
            CodeLine(
                0,
                f"attribute {self.declaration.name} of {self.item} : {self.item_class} is {self.value};",
            )
        ]


@dataclass
class Process:
    name: str
    description: str
    sensitivity: List[str] = field(default_factory=list)
    variables: List[Variable] = field(default_factory=list)
    body: List[str] = field(default_factory=list)
    remarks: Optional[str] = None

    def __post_init__(self) -> None:
        _require_documented(self)
        check_unique(self.variables, f"process {self.name}")
        self.sensitivity = _names(self.sensitivity, f"sensitivity of process {self.name}")

    def render(self, config: FormattingConfig) -> List[Fragment]:
        header = f"{self.name}: process"
        if self.sensitivity:
            separator = " " if config.add_space_after_keywords else ""
            header += f"{separator}({', '.join(self.sensitivity)})"
        fragments: List[Fragment] = [CodeLine(0, header)]
        fragments.extend(_documented_block(self.variables, 1, config))
        fragments.append(CodeLine(0, "begin"))
        fragments.extend(CodeLine(1, line) for line in self.body)
        closing = "end process"
        if config.add_optional_names:
            closing += f" {self.name}"
        fragments.append(CodeLine(0, closing + ";"))
        return fragments


@dataclass
class SubModule:
    """An instance of a component with its generic and port associations.

    The maps must associate exactly the generics and ports of the component;
    they are emitted in the component's declaration order.
    """

    name: str
    description: str
    component: Component
    generic_map: Dict[str, str] = field(default_factory=dict)
    port_map: Dict[str, str] = field(default_factory=dict)
    remarks: Optional[str] = None

    def __post_init__(self) -> None:
        _require_documented(self)
        if self.component is None:
            raise InvalidArgumentError(f"Sub-module {self.name} has no component")
        self.generic_map = self._validate_map("generic", self.component.generics, self.generic_map)
        self.port_map = self._validate_map("port", self.component.ports, self.port_map)

    def _validate_map(self, label: str, declared: Sequence[Any], mapping: Dict[str, str]) -> Dict[str, str]:
        by_key = {str(key).lower(): (str(key), value) for key, value in (mapping or {}).items()}
        ordered: Dict[str, str] = {}
        for item in declared:
            entry = by_key.pop(item.name.lower(), None)
            if entry is None or entry[1] is None or not str(entry[1]).strip():
                raise InvalidArgumentError(
                    f"Sub-module {self.name} does not map {label} {item.name} of component {self.component.name}"
                )
            ordered[item.name] = str(entry[1])
        if by_key:
            extra = ", ".join(original for original, _ in by_key.values())
            raise InvalidArgumentError(
                f"Sub-module {self.name} maps unknown {label}s of component {self.component.name}: {extra}"
            )
        return ordered

    def render(self, config: FormattingConfig) -> List[CodeLine]:
        lines = [CodeLine(0, f"{self.name}: {self.component.name}")]
        if self.generic_map:
            lines.append(CodeLine(1, _opening("generic map", config)))
            lines.extend(_associations(self.generic_map))
            lines.append(CodeLine(1, ")" if self.port_map else ");"))
        if self.port_map:
            lines.append(CodeLine(1, _opening("port map", config)))
            lines.extend(_associations(self.port_map))
            lines.append(CodeLine(1, ");"))
        return lines


def _associations(mapping: Dict[str, str]) -> List[CodeLine]:
    items = list(mapping.items())
    return [
        CodeLine(2, f"{formal} => {actual}{',' if index < len(items) - 1 else ''}")
        for index, (formal, actual) in enumerate(items)
    ]


@dataclass
class Generate:
    """A generate block holding concurrent statements, processes and instances."""

    name: str
    description: str
    statement: str
    statements: List[str] = field(default_factory=list)
    processes: List[Process] = field(default_factory=list)
    generates: List["Generate"] = field(default_factory=list)
    sub_modules: List[SubModule] = field(default_factory=list)
    remarks: Optional[str] = None

    def __post_init__(self) -> None:
        _require_documented(self)
        _require(self.statement, "statement", self.name)

    def is_empty(self) -> bool:
        return not (self.statements or self.processes or self.generates or self.sub_modules)

    def children(self) -> List[Any]:
        return list(self.processes) + list(self.generates) + list(self.sub_modules)


@dataclass
class ModuleDescription:
    """An entity with its architecture, ready to be turned into one VHDL file."""

    entity: Entity
    architecture: str = "rtl"
    description: Optional[str] = None
    uses: List[str] = field(default_factory=lambda: list(DEFAULT_USES))
    declarations: List[Declaration] = field(default_factory=list)
    functions: List[Function] = field(default_factory=list)
    procedures: List[Procedure] = field(default_factory=list)
    components: List[Component] = field(default_factory=list)
    signals: List[Signal] = field(default_factory=list)
    aliases: List[Alias] = field(default_factory=list)
    attributes: List[AttributeSpecification] = field(default_factory=list)
    statements: List[str] = field(default_factory=list)
    processes: List[Process] = field(default_factory=list)
    generates: List[Generate] = field(default_factory=list)
    sub_modules: List[SubModule] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.entity is None:
            raise InvalidArgumentError("A module needs an entity")
        _require(self.architecture, "architecture", self.entity.name)
        unique: Dict[str, None] = {}
        for use in _names(self.uses, "uses"):
            _require(use, "use clause", self.entity.name)
            unique.setdefault(use.strip(), None)
        self.uses = list(unique)

    def all_sub_modules(self) -> List[SubModule]:
        """Sub-modules of the architecture and of every nested generate block."""
        found: List[SubModule] = list(self.sub_modules)
        pending = list(self.generates)
        visited: set[int] = set()
        while pending:
            block = pending.pop(0)
            if id(block) in visited:
                continue
            visited.add(id(block))
            found.extend(block.sub_modules)
            pending.extend(block.generates)
        return found

    def unique_components(self) -> List[Component]:
        """Declared components followed by those only referenced by sub-modules."""
        components: List[Component] = []
        names: set[str] = set()
        for component in list(self.components) + [sub.component for sub in self.all_sub_modules()]:
            key = component.name.lower()
            if key in names:
                continue
            names.add(key)
            components.append(component)
        return components

    def attribute_declarations(self) -> List[AttributeDeclaration]:
        declarations: List[AttributeDeclaration] = []
        for spec in self.attributes:
            if not any(existing is spec.declaration for existing in declarations):
                declarations.append(spec.declaration)
        return declarations


__all__ = [
    "Alias",
    "AttributeDeclaration",
    "AttributeSpecification",
    "CodeLine",
    "Component",
    "DEFAULT_USES",
    "Declaration",
    "DeclarationKind",
    "DocRef",
    "Entity",
    "Fragment",
    "Function",
    "Generate",
    "Generic",
    "ModuleDescription",
    "Parameter",
    "Port",
    "PortDirection",
    "Procedure",
    "ProcedureParameter",
    "Process",
    "Signal",
    "SubModule",
    "Variable",
    "check_unique",
]
