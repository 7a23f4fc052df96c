"""Record introspection for dataclasses and pydantic models.

A record is any dataclass instance or pydantic model. For each field the
walker needs its value, declared type, rule annotation and external alias:

    @dataclass
    class User:
        name: str = valid_field("required,length(2|20)", json="name")
        email: str = valid_field("email", json="email,omitempty")

    class Signup(BaseModel):
        email: str = Field(json_schema_extra={"valid": "email"}, alias="mail")
"""

import dataclasses
import functools
import typing
from typing import Any, Iterator

from pydantic import BaseModel

from fieldrules.config import ValidatorConfig, get_config
from fieldrules.tags import alias_from_json_tag
from fieldrules.types import FieldSpec


def valid_field(
    rules: str = "",
    *,
    json: str | None = None,
    alias: str | None = None,
    metadata: dict[str, Any] | None = None,
    **kwargs: Any,
) -> Any:
    """dataclasses.field() carrying a rule annotation and optional alias.

    Args:
        rules: Rule annotation, e.g. "optional,email"
        json: json-style name tag, e.g. "email,omitempty" ("-" means no alias)
        alias: Plain external name, used when json is not given
        metadata: Extra field metadata to merge in
        **kwargs: Passed through to dataclasses.field (default, default_factory, ...)
    """
    config = get_config()
    merged: dict[str, Any] = dict(metadata or {})
    if rules:
        merged[config.tag_key] = rules
    if json is not None:
        merged[config.alias_key] = json
    if alias is not None:
        merged["alias"] = alias
    return dataclasses.field(metadata=merged, **kwargs)


def is_record(value: Any) -> bool:
    """True for dataclass instances and pydantic model instances."""
    if isinstance(value, type):
        return False
    return dataclasses.is_dataclass(value) or isinstance(value, BaseModel)


def record_name(record: Any) -> str:
    return type(record).__name__


def iter_fields(record: Any, config: ValidatorConfig | None = None) -> Iterator[FieldSpec]:
    """Yield the fields of a record in declaration order, private ones included."""
    config = config or get_config()
    if isinstance(record, BaseModel):
        yield from _iter_model_fields(record, config)
    elif dataclasses.is_dataclass(record) and not isinstance(record, type):
        yield from _iter_dataclass_fields(record, config)
    else:
        raise TypeError(f"{record_name(record)} is not a dataclass or pydantic model")


def _iter_dataclass_fields(record: Any, config: ValidatorConfig) -> Iterator[FieldSpec]:
    hints = _type_hints(type(record))
    for f in dataclasses.fields(record):
        metadata = f.metadata or {}
        yield FieldSpec(
            name=f.name,
            value=getattr(record, f.name),
            annotation=hints.get(f.name, f.type),
            tag=metadata.get(config.tag_key, "") or "",
            alias=_metadata_alias(metadata, config),
        )


def _iter_model_fields(record: BaseModel, config: ValidatorConfig) -> Iterator[FieldSpec]:
    for name, info in type(record).model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        if config.alias_key in extra:
            alias = alias_from_json_tag(extra[config.alias_key])
        else:
            alias = info.serialization_alias or info.alias
        yield FieldSpec(
            name=name,
            value=getattr(record, name),
            annotation=info.annotation if info.annotation is not None else Any,
            tag=extra.get(config.tag_key, "") or "",
            alias=alias,
        )


def _metadata_alias(metadata: typing.Mapping[str, Any], config: ValidatorConfig) -> str | None:
    if config.alias_key in metadata:
        return alias_from_json_tag(metadata[config.alias_key])
    return metadata.get("alias") or None


@functools.lru_cache(maxsize=256)
def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        # Unresolvable forward references; fall back to raw annotations.
        return {}
