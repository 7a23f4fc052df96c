"""Structural walker: recursive validation of records and their contents.

The walker visits a record's public fields in declaration order. For each
field it walks a nested record value first, then resolves presence and
runs the field's rules. Containers are descended by shape:

- INDIRECTION: None is vacuously valid; an Optional[...] value is
  validated as its inner type
- SEQUENCE: every element is visited (no short-circuit); record elements
  are walked as records, others get the sequence field's rules
- MAPPING: like SEQUENCE, in sorted key order; keys must be strings
- DYNAMIC: an Any/object field is unwrapped to its runtime shape
- UNSUPPORTED: raises UnsupportedTypeError, aborting the call

Each record is walked once per call. Objects already on the current path
are skipped, so self-referencing data terminates; nesting beyond the
configured max_depth raises RecursionLimitError.
"""

import logging
import types
import typing
from collections.abc import Mapping
from typing import Any, Callable

from fieldrules.config import ValidatorConfig, get_config
from fieldrules.errors import RecursionLimitError, UnsupportedTypeError
from fieldrules.field_validator import FieldValidator, RuleState
from fieldrules.presence import check_presence, unannotated_error
from fieldrules.records import is_record, iter_fields, record_name
from fieldrules.rendering import is_scalar, kind_name
from fieldrules.report import ErrorReport
from fieldrules.tags import parse_tag
from fieldrules.types import FieldSpec, Shape

logger = logging.getLogger(__name__)

# Annotation used once a dynamic value has been unwrapped.
_RUNTIME = object()

Handler = Callable[[Any, Any, RuleState, Any, int], bool]


def _is_optional(annotation: Any) -> bool:
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return type(None) in typing.get_args(annotation)
    return False


def _is_dynamic(annotation: Any) -> bool:
    return annotation is typing.Any or annotation is object


def _strip_optional(annotation: Any) -> Any:
    args = [a for a in typing.get_args(annotation) if a is not type(None)]
    if len(args) == 1:
        return args[0]
    return _RUNTIME


def _element_annotation(annotation: Any, index: int = 0) -> Any:
    """Declared type of a container element (list[X], dict[str, X], tuple[...])."""
    args = typing.get_args(annotation)
    origin = typing.get_origin(annotation)
    if not args:
        return _RUNTIME
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        return args[index] if index < len(args) else _RUNTIME
    if isinstance(origin, type) and issubclass(origin, Mapping):
        return args[-1]
    return args[0]


def classify(value: Any, annotation: Any = _RUNTIME) -> Shape:
    """Determine the structural shape of a value.

    The declared annotation only matters for the two wrapper shapes:
    Optional[...] gives INDIRECTION and Any/object gives DYNAMIC.
    """
    if value is None:
        return Shape.INDIRECTION
    if _is_dynamic(annotation):
        return Shape.DYNAMIC
    if _is_optional(annotation):
        return Shape.INDIRECTION
    if is_record(value):
        return Shape.RECORD
    if is_scalar(value):
        return Shape.SCALAR
    if isinstance(value, Mapping):
        return Shape.MAPPING
    if isinstance(value, (list, tuple)):
        return Shape.SEQUENCE
    return Shape.UNSUPPORTED


class StructuralWalker:
    """Walks one record tree, streaming every error into a report.

    A walker holds per-call state and must not be shared between
    validation calls.
    """

    def __init__(self, report: ErrorReport, config: ValidatorConfig | None = None):
        self.report = report
        self.config = config or get_config()
        self.fields = FieldValidator(report)
        self._active: set[int] = set()
        self._record_results: dict[int, bool] = {}
        self._handlers: dict[Shape, Handler] = {
            Shape.SCALAR: self._walk_scalar,
            Shape.RECORD: self._walk_nested_record,
            Shape.INDIRECTION: self._walk_indirection,
            Shape.SEQUENCE: self._walk_sequence,
            Shape.MAPPING: self._walk_mapping,
            Shape.DYNAMIC: self._walk_dynamic,
            Shape.UNSUPPORTED: self._walk_unsupported,
        }

    # -------------------------------------------------------------------------
    # Records and fields
    # -------------------------------------------------------------------------

    def walk_record(self, record: Any, depth: int = 0) -> bool:
        """Validate every public field of a record; True when all pass."""
        key = id(record)
        if key in self._record_results:
            return self._record_results[key]
        if key in self._active:
            logger.warning("Skipping cyclic reference to %s", record_name(record))
            return True
        self._check_depth(depth, record_name(record))

        self._active.add(key)
        try:
            result = True
            for spec in iter_fields(record, self.config):
                if spec.is_private:
                    continue
                result = self.walk_field(spec, record, depth) and result
        finally:
            self._active.discard(key)

        self._record_results[key] = result
        return result

    def walk_field(self, spec: FieldSpec, owner: Any, depth: int) -> bool:
        """Validate one field of ``owner``."""
        tag = parse_tag(spec.tag)
        if tag.skip:
            return True

        name = spec.report_name
        nested_ok = True
        if is_record(spec.value):
            nested_ok = self.walk_record(spec.value, depth + 1)

        if not tag.raw:
            if self.config.required_by_default:
                self.report.add(unannotated_error(name))
                return False
            return self._walk_untagged(spec.value, depth + 1) and nested_ok

        state = RuleState(tag=tag, name=name)
        ok = self._walk_value(spec.value, spec.annotation, state, owner, depth, root=True)

        if ok and not state.root_empty:
            invalid = self.fields.unconsumed_errors(state)
            if invalid:
                self.report.extend(invalid)
                ok = False

        return ok and nested_ok

    def _walk_untagged(self, value: Any, depth: int) -> bool:
        """Descend into containers of an unannotated field looking for records."""
        if is_record(value):
            return self.walk_record(value, depth)
        if isinstance(value, Mapping):
            items = list(value.values())
        elif isinstance(value, (list, tuple)):
            items = list(value)
        else:
            return True
        if id(value) in self._active:
            return True
        self._check_depth(depth, kind_name(value))
        self._active.add(id(value))
        try:
            result = True
            for item in items:
                result = self._walk_untagged(item, depth + 1) and result
            return result
        finally:
            self._active.discard(id(value))

    def _walk_value(
        self,
        value: Any,
        annotation: Any,
        state: RuleState,
        owner: Any,
        depth: int,
        root: bool = False,
    ) -> bool:
        outcome = check_presence(
            value, state.name, state.tag, self.config.required_by_default
        )
        if outcome.error is not None:
            self.report.add(outcome.error)
            return False
        if outcome.skip_content:
            self.fields.consume_resolvable(state)
            if root:
                state.root_empty = True
            return True

        if root and self.fields.run_custom(value, owner, state):
            return False

        shape = classify(value, annotation)
        return self._handlers[shape](value, annotation, state, owner, depth)

    # -------------------------------------------------------------------------
    # Shape handlers
    # -------------------------------------------------------------------------

    def _walk_scalar(self, value: Any, annotation: Any, state: RuleState, owner: Any, depth: int) -> bool:
        return self.fields.validate_scalar(value, state) is None

    def _walk_nested_record(self, value: Any, annotation: Any, state: RuleState, owner: Any, depth: int) -> bool:
        return self.walk_record(value, depth + 1)

    def _walk_indirection(self, value: Any, annotation: Any, state: RuleState, owner: Any, depth: int) -> bool:
        if value is None:
            return True
        return self._walk_value(value, _strip_optional(annotation), state, owner, depth)

    def _walk_sequence(self, value: Any, annotation: Any, state: RuleState, owner: Any, depth: int) -> bool:
        return self._walk_items(list(enumerate(value)), annotation, value, state, owner, depth)

    def _walk_mapping(self, value: Any, annotation: Any, state: RuleState, owner: Any, depth: int) -> bool:
        bad_keys = {type(k).__name__ for k in value if not isinstance(k, str)}
        if bad_keys:
            key_types = "|".join(sorted(bad_keys))
            raise UnsupportedTypeError(
                f"{kind_name(value)}[{key_types}, ...]", field=state.name
            )
        items = [(key, value[key]) for key in sorted(value)]
        return self._walk_items(items, annotation, value, state, owner, depth)

    def _walk_dynamic(self, value: Any, annotation: Any, state: RuleState, owner: Any, depth: int) -> bool:
        if value is None:
            return True
        return self._walk_value(value, _RUNTIME, state, owner, depth)

    def _walk_unsupported(self, value: Any, annotation: Any, state: RuleState, owner: Any, depth: int) -> bool:
        raise UnsupportedTypeError(kind_name(value), field=state.name)

    def _walk_items(
        self,
        items: list[tuple[Any, Any]],
        annotation: Any,
        container: Any,
        state: RuleState,
        owner: Any,
        depth: int,
    ) -> bool:
        key = id(container)
        if key in self._active:
            logger.warning("Skipping cyclic reference in field %s", state.name)
            return True
        self._check_depth(depth + 1, state.name)

        self._active.add(key)
        try:
            result = True
            for index, (_, item) in enumerate(items):
                if is_record(item):
                    item_ok = self.walk_record(item, depth + 1)
                else:
                    item_ok = self._walk_value(
                        item,
                        _element_annotation(annotation, index),
                        state,
                        owner,
                        depth + 1,
                    )
                result = item_ok and result
            return result
        finally:
            self._active.discard(key)

    def _check_depth(self, depth: int, where: str) -> None:
        if depth > self.config.max_depth:
            raise RecursionLimitError(self.config.max_depth, field=where)
