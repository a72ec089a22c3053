"""
Override resolution.

Folds parsed directives, left to right, into:

- ``TypeOverrides``: TypeName -> FieldName -> FieldTypeOverride, where a field
  holds at most one field-level override plus any number of per-argument
  overrides (``Type.field.arg``)
- ``NameOverrides``: TypeName -> TypeNameOverride, holding at most one
  type-level rename plus one rename per field or enum variant
- the visibility flags, ``batch`` and ``hook``

Every leaf slot is last-writer-wins; nothing is ever merged.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, TypeVar

from .directives import Directive, FlagDirective, HookDirective, NameOverride, TypeOverride


@dataclass
class FieldTypeOverride:
    """Overrides attached to one field: its own type and its arguments' types."""

    field_type: Optional[TypeOverride] = None
    args: Dict[str, TypeOverride] = field(default_factory=dict)


@dataclass
class TypeNameOverride:
    """Renames attached to one type: the type itself and its fields/variants."""

    rename: Optional[NameOverride] = None
    members: Dict[str, NameOverride] = field(default_factory=dict)


Override = TypeVar("Override", TypeOverride, NameOverride)

TypeOverrides = Dict[str, Dict[str, FieldTypeOverride]]
NameOverrides = Dict[str, TypeNameOverride]


@dataclass
class OptionalParameters:
    """Resolved configuration of one ``appsync_lambda_main`` call."""

    batch: bool = True
    lambda_handler: bool = True
    appsync_types: bool = True
    appsync_operations: bool = True
    hook: Optional[str] = None
    type_overrides: TypeOverrides = field(default_factory=dict)
    name_overrides: NameOverrides = field(default_factory=dict)
    # Fold position of every applied override, keyed by id()
    _applied: Dict[int, int] = field(default_factory=dict, repr=False, compare=False)

    def set(self, directive: Directive) -> None:
        """Apply one directive on top of the current state."""
        if isinstance(directive, (TypeOverride, NameOverride)):
            self._applied[id(directive)] = max(self._applied.values(), default=-1) + 1

        if isinstance(directive, FlagDirective):
            self._set_flag(directive.key, directive.value)
        elif isinstance(directive, HookDirective):
            self.hook = directive.name
        elif isinstance(directive, TypeOverride):
            field_entry = self.type_overrides.setdefault(directive.type_name, {}).setdefault(
                directive.field_name, FieldTypeOverride()
            )
            if directive.arg_name is not None:
                field_entry.args[directive.arg_name] = directive
            else:
                field_entry.field_type = directive
        elif isinstance(directive, NameOverride):
            type_entry = self.name_overrides.setdefault(directive.type_name, TypeNameOverride())
            if directive.field_name is not None:
                type_entry.members[directive.field_name] = directive
            else:
                type_entry.rename = directive
        else:
            raise TypeError(f"Not a directive: {directive!r}")

    def _set_flag(self, key: str, value: bool) -> None:
        if key == "batch":
            self.batch = value
            return
        # A false visibility flag never restores anything
        if not value:
            return
        if key == "exclude_lambda_handler":
            self.lambda_handler = False
        elif key == "only_lambda_handler":
            self.lambda_handler, self.appsync_types, self.appsync_operations = True, False, False
        elif key == "exclude_appsync_types":
            self.appsync_types = False
        elif key == "only_appsync_types":
            self.lambda_handler, self.appsync_types, self.appsync_operations = False, True, False
        elif key == "exclude_appsync_operations":
            self.appsync_operations = False
        elif key == "only_appsync_operations":
            self.lambda_handler, self.appsync_types, self.appsync_operations = False, False, True
        else:
            raise ValueError(f"Unknown flag `{key}`")

    def type_override_for(
        self, type_name: str, field_name: str, arg_name: Optional[str] = None
    ) -> Optional[TypeOverride]:
        """Look up the override of a field type, or of one of its arguments."""
        entry = self.type_overrides.get(type_name, {}).get(field_name)
        if entry is None:
            return None
        return entry.field_type if arg_name is None else entry.args.get(arg_name)

    def rename_for(self, type_name: str, field_name: Optional[str] = None) -> Optional[NameOverride]:
        """Look up the rename directive of a type, or of one of its fields/variants."""
        entry = self.name_overrides.get(type_name)
        if entry is None:
            return None
        return entry.rename if field_name is None else entry.members.get(field_name)

    def name_override_for(self, type_name: str, field_name: Optional[str] = None) -> Optional[str]:
        """Look up the new name of a type, or of one of its fields/variants."""
        override = self.rename_for(type_name, field_name)
        return override.new_name if override is not None else None

    def latest(self, overrides: Iterable[Optional[Override]]) -> Optional[Override]:
        """
        Pick the override applied last among several candidate slots.

        A root operation type can be targeted both by its kind (``Query``) and
        by its declared name; the later directive wins whichever spelling it used.
        """
        present = [o for o in overrides if o is not None]
        return max(present, key=lambda o: self._applied.get(id(o), -1), default=None)


def resolve_overrides(directives: Iterable[Directive]) -> OptionalParameters:
    """Fold directives, in order, into a fresh OptionalParameters."""
    params = OptionalParameters()
    for directive in directives:
        params.set(directive)
    return params
