"""
Declaration emitter.

Turns a DeclarationSet into live Python objects:

- enums become ``enum.Enum`` subclasses whose values are the schema spellings
- object and input types become keyword-only dataclasses; nullable fields
  default to None and every field records its schema name in
  ``metadata["wire_name"]``
- operations become the ``Operation`` enum, bound to a DispatchTable

Named type references are bound to Python objects in this order:

- schema references: GraphQL/AppSync scalars, generated (or, when types are
  not generated, caller-provided) classes, then ``Any`` for interfaces,
  unions and custom scalars
- override references: scalars, generated Python names, schema names, the
  caller namespace, then builtins
"""

import builtins
import dataclasses
import enum
from typing import Any, Dict, Optional

from ..runtime.codec import FIELDS_ATTR, ResolvedType
from ..runtime.dispatch import ArgumentBinding, DispatchTable, OperationBinding, OperationEnum
from ..runtime.scalars import SCALARS
from ..utils.logging import get_logger
from .declarations import DeclarationKind, DeclarationSet, TypeDeclaration, TypeRef
from .errors import UnresolvedReferenceError

logger = get_logger(__name__)

WIRE_NAME = "wire_name"
OPERATION_ENUM = "Operation"


class NamespaceEmitter:
    """Materializes declarations for one ``appsync_lambda_main`` call."""

    def __init__(self, declarations: DeclarationSet, namespace: Dict[str, Any]) -> None:
        self.declarations = declarations
        self.namespace = namespace
        self.module = namespace.get("__name__", __name__)
        # Generated classes, by schema name and by Python name
        self.by_wire_name: Dict[str, Any] = {}
        self.by_name: Dict[str, Any] = {}

    # Type references

    def _declared(self, wire_name: str) -> Optional[TypeDeclaration]:
        return self.declarations.type_by_wire_name(wire_name)

    def _resolve_schema_name(self, name: str) -> Any:
        if name in SCALARS:
            return SCALARS[name]
        if name in self.by_wire_name:
            return self.by_wire_name[name]
        declaration = self._declared(name)
        if declaration is not None:
            # Types generated elsewhere (exclude_appsync_types) must be in scope
            for candidate in (declaration.name, declaration.wire_name):
                if candidate in self.namespace:
                    return self.namespace[candidate]
            raise UnresolvedReferenceError(
                f"Type `{declaration.name}` is not generated here and is not defined in the caller namespace"
            )
        logger.debug("Schema type mapped to Any", type=name)
        return Any

    def _resolve_override_name(self, name: str) -> Any:
        if name in SCALARS:
            return SCALARS[name]
        if name in self.by_name:
            return self.by_name[name]
        if name in self.by_wire_name:
            return self.by_wire_name[name]
        if self._declared(name) is not None:
            return self._resolve_schema_name(name)
        if name in self.namespace:
            return self.namespace[name]
        if hasattr(builtins, name):
            return getattr(builtins, name)
        raise UnresolvedReferenceError(f"Cannot resolve override type `{name}`")

    def resolve(self, ref: TypeRef) -> ResolvedType:
        """Bind a TypeRef to Python objects."""
        if ref.of is not None:
            return ResolvedType(of=self.resolve(ref.of), non_null=ref.non_null)
        name = ref.name or ""
        py_type = self._resolve_override_name(name) if ref.from_override else self._resolve_schema_name(name)
        return ResolvedType(py_type=py_type, non_null=ref.non_null)

    # Types

    def _emit_enum(self, declaration: TypeDeclaration) -> Any:
        cls = enum.Enum(
            declaration.name,
            [(variant.name, variant.wire_name) for variant in declaration.variants],
            module=self.module,
        )
        if declaration.description:
            cls.__doc__ = declaration.description
        return cls

    def _emit_dataclass(self, declaration: TypeDeclaration) -> Any:
        fields = []
        for decl_field in declaration.fields:
            metadata = {WIRE_NAME: decl_field.wire_name}
            if decl_field.type.non_null:
                spec = dataclasses.field(metadata=metadata)
            else:
                spec = dataclasses.field(default=None, metadata=metadata)
            fields.append((decl_field.name, Any, spec))
        cls = dataclasses.make_dataclass(declaration.name, fields, kw_only=True)
        cls.__module__ = self.module
        cls.__doc__ = declaration.description or f"GraphQL {declaration.kind.value} `{declaration.wire_name}`."
        return cls

    def _bind_fields(self, declaration: TypeDeclaration, cls: Any) -> None:
        bound = []
        annotations = {}
        for decl_field in declaration.fields:
            resolved = self.resolve(decl_field.type)
            annotations[decl_field.name] = resolved.annotation()
            cls.__dataclass_fields__[decl_field.name].type = annotations[decl_field.name]
            bound.append((decl_field.name, decl_field.wire_name, resolved))
        cls.__annotations__ = annotations
        setattr(cls, FIELDS_ATTR, tuple(bound))

    def emit_types(self) -> Dict[str, Any]:
        """
        Create every enum and object/input class.

        Classes are created first and their fields bound afterwards, so types
        can reference each other in any order.

        Returns:
            Generated classes by Python name
        """
        for declaration in self.declarations.types:
            if declaration.kind is DeclarationKind.ENUM:
                cls = self._emit_enum(declaration)
            else:
                cls = self._emit_dataclass(declaration)
            self.by_wire_name[declaration.wire_name] = cls
            self.by_name[declaration.name] = cls

        for declaration in self.declarations.types:
            if declaration.kind is not DeclarationKind.ENUM:
                self._bind_fields(declaration, self.by_wire_name[declaration.wire_name])

        logger.debug("Generated AppSync types", types=sorted(self.by_name))
        return dict(self.by_name)

    # Operations

    def emit_operations(self) -> Dict[str, Any]:
        """
        Create the Operation enum and its dispatch table.

        Returns:
            ``Operation`` and the ``appsync_operation`` decorator
        """
        operations = self.declarations.operations
        operation_enum: Any = OperationEnum(
            OPERATION_ENUM,
            [(op.variant_name, op.key) for op in operations],
            module=self.module,
        )

        table = DispatchTable()
        for op in operations:
            binding = OperationBinding(
                kind=op.kind,
                wire_name=op.wire_name,
                arguments=tuple(
                    ArgumentBinding(arg.name, arg.wire_name, self.resolve(arg.type))
                    for arg in op.arguments
                ),
                return_type=self.resolve(op.return_type),
            )
            table.add(operation_enum(op.key), binding, self.declarations.root_types[op.kind])
        operation_enum.dispatch_table = table

        logger.debug("Generated AppSync operations", operations=[op.variant_name for op in operations])
        return {OPERATION_ENUM: operation_enum, "appsync_operation": operation_enum.appsync_operation}
