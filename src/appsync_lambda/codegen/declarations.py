"""
Declaration builder.

Walks a GraphQL schema document, applies the resolved type and name
overrides, and produces language-level declarations:

- one TypeDeclaration per object type, input type and enum
- one OperationDeclaration per field of the Query, Mutation and Subscription
  root types

Renames only change Python-side names; every declaration keeps its
schema name as ``wire_name``, which is what (de)serialization uses.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from graphql import (
    DocumentNode,
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    FieldDefinitionNode,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InputValueDefinitionNode,
    ListTypeNode,
    NamedTypeNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    SchemaDefinitionNode,
    TypeNode,
)

from ..runtime.events import OperationKind
from ..utils.naming import safe_identifier, to_snake_case, to_upper_snake_case
from .directives import NameOverride, TypeOverride
from .errors import GenerationError, UnknownOverrideTargetError
from .overrides import OptionalParameters


class DeclarationKind(Enum):
    OBJECT = "type"
    INPUT = "input"
    ENUM = "enum"


@dataclass(frozen=True)
class TypeRef:
    """
    Reference to a type, as written in the schema or in a type override.

    Exactly one of ``name`` (named type) and ``of`` (list element) is set.
    ``from_override`` marks references that come from a ``type_override``
    directive, which may name Python objects and not only schema types.
    """

    name: Optional[str] = None
    of: Optional["TypeRef"] = None
    non_null: bool = False
    from_override: bool = False

    @classmethod
    def from_node(cls, node: TypeNode, from_override: bool = False) -> "TypeRef":
        if isinstance(node, NonNullTypeNode):
            inner = cls.from_node(node.type, from_override)
            return cls(inner.name, inner.of, True, from_override)
        if isinstance(node, ListTypeNode):
            return cls(of=cls.from_node(node.type, from_override), from_override=from_override)
        if isinstance(node, NamedTypeNode):
            return cls(name=node.name.value, from_override=from_override)
        raise TypeError(f"Unexpected type node {node!r}")

    @property
    def is_list(self) -> bool:
        return self.of is not None

    @property
    def named(self) -> str:
        """Innermost named type."""
        ref = self
        while ref.of is not None:
            ref = ref.of
        return ref.name or ""

    def __str__(self) -> str:
        inner = f"[{self.of}]" if self.of is not None else str(self.name)
        return f"{inner}!" if self.non_null else inner


@dataclass
class FieldDeclaration:
    name: str
    wire_name: str
    type: TypeRef


@dataclass
class VariantDeclaration:
    name: str
    wire_name: str


@dataclass
class TypeDeclaration:
    """A generated object/input class or enum."""

    kind: DeclarationKind
    name: str
    wire_name: str
    fields: List[FieldDeclaration] = field(default_factory=list)
    variants: List[VariantDeclaration] = field(default_factory=list)
    description: Optional[str] = None


@dataclass
class ArgumentDeclaration:
    name: str
    wire_name: str
    type: TypeRef


@dataclass
class OperationDeclaration:
    """One Query/Mutation/Subscription field, i.e. one Operation variant."""

    kind: OperationKind
    name: str
    wire_name: str
    return_type: TypeRef
    arguments: List[ArgumentDeclaration] = field(default_factory=list)
    description: Optional[str] = None

    @property
    def variant_name(self) -> str:
        """Member name in the generated Operation enum, e.g. QUERY_GAME_STATUS."""
        return f"{self.kind.name}_{to_upper_snake_case(self.name)}"

    @property
    def key(self) -> Tuple[str, str]:
        """(kind, wire field name): the tag carried by AppSync events."""
        return (self.kind.value, self.wire_name)


@dataclass
class DeclarationSet:
    """Output of the builder, consumed by the emitter."""

    types: List[TypeDeclaration]
    operations: List[OperationDeclaration]
    root_types: Dict[OperationKind, str]

    def type_by_wire_name(self, wire_name: str) -> Optional[TypeDeclaration]:
        return next((t for t in self.types if t.wire_name == wire_name), None)


@dataclass
class ResolvedSchema:
    """Schema document plus the overrides that apply to it."""

    document: DocumentNode
    params: OptionalParameters


def _description(node: object) -> Optional[str]:
    description = getattr(node, "description", None)
    return description.value if description is not None else None


class DeclarationBuilder:
    """Builds a DeclarationSet from a ResolvedSchema."""

    def __init__(self, resolved: ResolvedSchema) -> None:
        self.params = resolved.params
        self.objects: Dict[str, List[FieldDefinitionNode]] = {}
        self.inputs: Dict[str, List[InputValueDefinitionNode]] = {}
        self.enums: Dict[str, List[str]] = {}
        self.descriptions: Dict[str, Optional[str]] = {}
        self.order: List[str] = []
        self.root_types: Dict[OperationKind, str] = {}
        self._index(resolved.document)

    def _index(self, document: DocumentNode) -> None:
        explicit_roots = False
        for definition in document.definitions:
            if isinstance(definition, SchemaDefinitionNode):
                explicit_roots = True
                for op_type in definition.operation_types:
                    kind = OperationKind(op_type.operation.value.capitalize())
                    self.root_types[kind] = op_type.type.name.value
            elif isinstance(definition, (ObjectTypeDefinitionNode, ObjectTypeExtensionNode)):
                self._remember(definition)
                self.objects.setdefault(definition.name.value, []).extend(definition.fields or ())
            elif isinstance(definition, (InputObjectTypeDefinitionNode, InputObjectTypeExtensionNode)):
                self._remember(definition)
                self.inputs.setdefault(definition.name.value, []).extend(definition.fields or ())
            elif isinstance(definition, (EnumTypeDefinitionNode, EnumTypeExtensionNode)):
                self._remember(definition)
                self.enums.setdefault(definition.name.value, []).extend(
                    value.name.value for value in definition.values or ()
                )

        if not explicit_roots:
            for kind in OperationKind:
                if kind.value in self.objects:
                    self.root_types[kind] = kind.value

    def _remember(self, definition: object) -> None:
        name = definition.name.value  # type: ignore[attr-defined]
        if name not in self.descriptions:
            self.order.append(name)
            self.descriptions[name] = _description(definition)

    # Override targets

    def root_kind(self, type_name: str) -> Optional[OperationKind]:
        """Operation kind for ``Query``/``Mutation``/``Subscription`` or an actual root type name."""
        for kind, root_name in self.root_types.items():
            if type_name in (kind.value, root_name):
                return kind
        return None

    def _override_keys(self, type_name: str) -> List[str]:
        kind = self.root_kind(type_name)
        if kind is None:
            return [type_name]
        return list(dict.fromkeys([kind.value, self.root_types[kind]]))

    def _type_override(
        self, type_name: str, field_name: str, arg_name: Optional[str] = None
    ) -> Optional[TypeOverride]:
        return self.params.latest(
            self.params.type_override_for(key, field_name, arg_name)
            for key in self._override_keys(type_name)
        )

    def _name_override(self, type_name: str, field_name: Optional[str] = None) -> Optional[str]:
        found = self.params.latest(
            self.params.rename_for(key, field_name) for key in self._override_keys(type_name)
        )
        return found.new_name if found is not None else None

    def validate_overrides(self) -> None:
        """
        Check that every override targets an element of the schema.

        Raises:
            UnknownOverrideTargetError: On the first override with no target
        """
        for type_name, fields in self.params.type_overrides.items():
            kind = self.root_kind(type_name)
            for field_name, entry in fields.items():
                overrides: List[TypeOverride] = [o for o in (entry.field_type, *entry.args.values()) if o]
                location = overrides[0].location if overrides else None
                if kind is not None:
                    members = {f.name.value: f for f in self.objects.get(self.root_types[kind], [])}
                elif type_name in self.objects:
                    members = {f.name.value: f for f in self.objects[type_name]}
                elif type_name in self.inputs:
                    members = {f.name.value: f for f in self.inputs[type_name]}
                else:
                    raise UnknownOverrideTargetError(
                        f"Type `{type_name}` has no fields to override in the schema", location
                    )
                if field_name not in members:
                    raise UnknownOverrideTargetError(
                        f"Type `{type_name}` has no field `{field_name}`", location
                    )
                for arg_name, override in entry.args.items():
                    if kind is None:
                        raise UnknownOverrideTargetError(
                            "Argument type overrides only apply to Query, Mutation and "
                            "Subscription operations",
                            override.location,
                        )
                    arguments = members[field_name].arguments or ()
                    if arg_name not in {a.name.value for a in arguments}:
                        raise UnknownOverrideTargetError(
                            f"Operation `{type_name}.{field_name}` has no argument `{arg_name}`",
                            override.location,
                        )

        for type_name, entry in self.params.name_overrides.items():
            renames: List[NameOverride] = [o for o in (entry.rename, *entry.members.values()) if o]
            location = renames[0].location if renames else None
            kind = self.root_kind(type_name)
            if kind is not None:
                if entry.rename is not None:
                    raise UnknownOverrideTargetError(
                        f"Root operation type `{type_name}` cannot be renamed", entry.rename.location
                    )
                members_names = {f.name.value for f in self.objects.get(self.root_types[kind], [])}
            elif type_name in self.objects:
                members_names = {f.name.value for f in self.objects[type_name]}
            elif type_name in self.inputs:
                members_names = {f.name.value for f in self.inputs[type_name]}
            elif type_name in self.enums:
                members_names = set(self.enums[type_name])
            else:
                raise UnknownOverrideTargetError(f"Unknown type `{type_name}`", location)
            for member, override in entry.members.items():
                if member not in members_names:
                    raise UnknownOverrideTargetError(
                        f"Type `{type_name}` has no field or variant `{member}`", override.location
                    )

    # Declarations

    def _field_type(self, type_name: str, field_name: str, node: TypeNode) -> TypeRef:
        override = self._type_override(type_name, field_name)
        if override is not None:
            return TypeRef.from_node(override.new_type, from_override=True)
        return TypeRef.from_node(node)

    def _member_name(self, type_name: str, wire_name: str, default: str) -> str:
        return self._name_override(type_name, wire_name) or safe_identifier(default)

    def _type_declaration(self, wire_name: str) -> TypeDeclaration:
        name = self._name_override(wire_name) or safe_identifier(wire_name)
        description = self.descriptions.get(wire_name)
        if wire_name in self.enums:
            variants = [
                VariantDeclaration(self._member_name(wire_name, value, value), value)
                for value in self.enums[wire_name]
            ]
            return TypeDeclaration(DeclarationKind.ENUM, name, wire_name, variants=variants, description=description)

        kind = DeclarationKind.OBJECT if wire_name in self.objects else DeclarationKind.INPUT
        nodes: Iterable = self.objects[wire_name] if kind is DeclarationKind.OBJECT else self.inputs[wire_name]
        fields = [
            FieldDeclaration(
                self._member_name(wire_name, node.name.value, to_snake_case(node.name.value)),
                node.name.value,
                self._field_type(wire_name, node.name.value, node.type),
            )
            for node in nodes
        ]
        return TypeDeclaration(kind, name, wire_name, fields=fields, description=description)

    def _operation_declarations(self, kind: OperationKind) -> List[OperationDeclaration]:
        root_name = self.root_types[kind]
        operations = []
        for node in self.objects.get(root_name, ()):
            wire_name = node.name.value
            arguments = []
            for arg in node.arguments or ():
                override = self._type_override(root_name, wire_name, arg.name.value)
                arg_type = (
                    TypeRef.from_node(override.new_type, from_override=True)
                    if override is not None
                    else TypeRef.from_node(arg.type)
                )
                arguments.append(
                    ArgumentDeclaration(
                        safe_identifier(to_snake_case(arg.name.value)), arg.name.value, arg_type
                    )
                )
            operations.append(
                OperationDeclaration(
                    kind=kind,
                    name=self._member_name(root_name, wire_name, to_snake_case(wire_name)),
                    wire_name=wire_name,
                    return_type=self._field_type(root_name, wire_name, node.type),
                    arguments=arguments,
                    description=_description(node),
                )
            )
        return operations

    def build(self) -> DeclarationSet:
        """
        Produce the declaration set.

        Raises:
            UnknownOverrideTargetError: If an override has no target
            GenerationError: If renames make two declarations share a name
        """
        self.validate_overrides()
        roots = set(self.root_types.values())
        types = [self._type_declaration(name) for name in self.order if name not in roots]
        operations = [op for kind in OperationKind if kind in self.root_types for op in self._operation_declarations(kind)]

        _check_unique((t.name for t in types), "type")
        for declaration in types:
            _check_unique((f.name for f in declaration.fields), f"field of `{declaration.wire_name}`")
            _check_unique((v.name for v in declaration.variants), f"variant of `{declaration.wire_name}`")
        _check_unique((op.variant_name for op in operations), "operation")

        return DeclarationSet(types=types, operations=operations, root_types=dict(self.root_types))


def _check_unique(names: Iterable[str], what: str) -> None:
    seen = set()
    for name in names:
        if name in seen:
            raise GenerationError(f"Duplicate {what} name `{name}` after applying name overrides")
        seen.add(name)


def build_declarations(resolved: ResolvedSchema) -> DeclarationSet:
    """Build the declarations for a resolved schema."""
    return DeclarationBuilder(resolved).build()
