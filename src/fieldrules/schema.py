"""
schema.py — record types declared in YAML.

Lets plain JSON/YAML documents be validated without writing Python
classes. A schema file names one or more records and their fields:

    records:
      Address:
        fields:
          - name: zip
            rules: "numeric,length(5|5)"
      User:
        fields:
          - name: name
            rules: "optional,length(2|20),in(Mick|Michael)"
            json: name
          - name: address
            record: Address
          - name: tags
            type: list
            rules: alpha

The file is checked against ``schemas/record.schema.json`` before any
dataclass is built. ``record`` fields hold a nested record; combined with
``type: list`` or ``type: dict`` they hold a collection of records.
"""
from __future__ import annotations

import dataclasses
import json
import keyword
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError as JSONSchemaError

from fieldrules.config import get_config

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "record.schema.json"

_SCALAR_TYPES: dict[str, Any] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "list": list,
    "dict": dict,
    "any": Any,
}


class SchemaError(ValueError):
    """A record schema file is malformed."""

    def __init__(self, message: str, issues: list[str] | None = None):
        self.issues = issues or []
        detail = "".join(f"\n  - {issue}" for issue in self.issues)
        super().__init__(f"{message}{detail}")


@dataclass(frozen=True)
class FieldDecl:
    """One field declaration from a schema file."""

    name: str
    rules: str = ""
    json: str | None = None
    type: str | None = None
    record: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FieldDecl:
        return cls(
            name=data["name"],
            rules=data.get("rules", ""),
            json=data.get("json"),
            type=data.get("type"),
            record=data.get("record"),
        )

    @property
    def many(self) -> bool:
        return self.record is not None and self.type in ("list", "dict")


def _json_path(error: JSONSchemaError) -> str:
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def _load_json_schema() -> dict[str, Any]:
    with _SCHEMA_PATH.open() as fh:
        return json.load(fh)


def check_schema_document(doc: Any) -> list[str]:
    """Return the JSON Schema violations of a parsed schema document."""
    validator = Draft202012Validator(_load_json_schema())
    issues = []
    for error in sorted(validator.iter_errors(doc), key=lambda e: list(e.path)):
        location = _json_path(error)
        issues.append(f"{location}: {error.message}" if location else error.message)
    return issues


class RecordSchema:
    """Dataclass record types built from a schema document."""

    def __init__(self, declarations: dict[str, list[FieldDecl]]):
        self.declarations = declarations
        self.records: dict[str, type] = {}
        self._build_types()

    @classmethod
    def from_dict(cls, doc: Any) -> RecordSchema:
        issues = check_schema_document(doc)
        if issues:
            raise SchemaError("Invalid record schema", issues)

        declarations = {
            name: [FieldDecl.from_dict(f) for f in body["fields"]]
            for name, body in doc["records"].items()
        }
        return cls(declarations)

    @classmethod
    def from_yaml(cls, path: Path) -> RecordSchema:
        try:
            with path.open() as fh:
                doc = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise SchemaError(f"YAML parse error in {path}: {exc}") from exc
        if doc is None:
            raise SchemaError(f"Schema file {path} is empty")
        return cls.from_dict(doc)

    @property
    def default_record(self) -> str:
        """Name of the first record declared in the file."""
        return next(iter(self.declarations))

    def get(self, name: str) -> type:
        if name not in self.records:
            raise SchemaError(
                f"Record '{name}' is not defined. "
                "Available records: " + ", ".join(sorted(self.records))
            )
        return self.records[name]

    def build(self, name: str, data: Any) -> Any:
        """Instantiate record ``name`` from a plain dict, recursively.

        Missing keys become None; keys the record does not declare are
        ignored.
        """
        cls = self.get(name)
        if not isinstance(data, dict):
            raise SchemaError(f"Record '{name}' expects an object, got {type(data).__name__}")

        declared = {d.name: d for d in self.declarations[name]}
        unknown = sorted(set(data) - set(declared))
        if unknown:
            logger.debug("Ignoring undeclared keys for %s: %s", name, ", ".join(map(str, unknown)))

        values = {}
        for field_name, decl in declared.items():
            values[field_name] = self._convert(decl, data.get(field_name))
        return cls(**values)

    def _convert(self, decl: FieldDecl, value: Any) -> Any:
        if decl.record is None or value is None:
            return value
        if not decl.many:
            return self.build(decl.record, value) if isinstance(value, dict) else value
        if decl.type == "list" and isinstance(value, list):
            return [self.build(decl.record, v) if isinstance(v, dict) else v for v in value]
        if decl.type == "dict" and isinstance(value, dict):
            return {
                k: self.build(decl.record, v) if isinstance(v, dict) else v
                for k, v in value.items()
            }
        return value

    def _build_types(self) -> None:
        config = get_config()
        issues = []
        for name, decls in self.declarations.items():
            for decl in decls:
                if keyword.iskeyword(decl.name):
                    issues.append(f"records/{name}: '{decl.name}' is a reserved word")
                if decl.record is not None and decl.record not in self.declarations:
                    issues.append(f"records/{name}/{decl.name}: unknown record '{decl.record}'")
            names = [d.name for d in decls]
            for dup in sorted({n for n in names if names.count(n) > 1}):
                issues.append(f"records/{name}: duplicate field '{dup}'")
        if issues:
            raise SchemaError("Invalid record schema", issues)

        for name, decls in self.declarations.items():
            fields = []
            for decl in decls:
                metadata: dict[str, Any] = {}
                if decl.rules:
                    metadata[config.tag_key] = decl.rules
                if decl.json is not None:
                    metadata[config.alias_key] = decl.json
                fields.append(
                    (
                        decl.name,
                        self._annotation(decl),
                        dataclasses.field(default=None, metadata=metadata),
                    )
                )
            self.records[name] = dataclasses.make_dataclass(name, fields)
            logger.debug("Built record type %s with %d field(s)", name, len(fields))

    @staticmethod
    def _annotation(decl: FieldDecl) -> Any:
        # Nested records are unwrapped at validation time by their runtime shape.
        if decl.record is not None:
            if decl.type == "list":
                return list[Any]
            if decl.type == "dict":
                return dict[str, Any]
            return Any
        if decl.type is None:
            return Any
        return _SCALAR_TYPES[decl.type]
