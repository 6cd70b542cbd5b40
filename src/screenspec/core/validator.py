"""
Screen spec validation.

Two paths accept the same documents:

- Primary: a JSON Schema document (generated by `build_screen_schema` and
  written to the configured schema path) checked with jsonschema, reporting
  every violation.
- Fallback: when no schema document can be loaded, a hand-written walk over
  the raw document driven by the same prop tables.

Validation is a pure predicate over the raw JSON. It never mutates its
input and collects every issue rather than stopping at the first one.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError
from pydantic import BaseModel, ValidationError

from .errors import ValidationIssue, make_validation_error
from .ir import (
    BUILTIN_TYPES,
    COMPONENT_REF,
    BuiltinType,
    ComponentRefProps,
    DataSource,
    Interactions,
    NodeStyle,
    ResponsiveStyle,
    ScreenSpec,
)
from .prop_schemas import allowed_props, check_props

logger = logging.getLogger(__name__)

SCHEMA_ID = "https://screenspec.dev/schema/screen.schema.json"

SPEC_KEYS = frozenset({"version", "route", "meta", "tree"})
NODE_KEYS = frozenset(
    {"id", "type", "props", "children", "style", "responsive", "interactions", "dataSource"}
)


def format_path(parts: Iterable[str | int], root: str = "") -> str:
    """Render an instance path like `tree.children[0].props.level`."""
    path = root
    for part in parts:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path or "spec"


# =============================================================================
# Schema generation
# =============================================================================


def _model_schema(model: type[BaseModel], defs: dict[str, Any]) -> dict[str, Any]:
    schema = model.model_json_schema(by_alias=True, ref_template="#/$defs/{model}")
    defs.update(schema.pop("$defs", {}))
    return schema


def _props_schema(node_type: BuiltinType) -> dict[str, Any]:
    props = allowed_props(node_type)
    schema: dict[str, Any] = {
        "type": "object",
        "properties": {name: prop.json_schema() for name, prop in props.items()},
        "additionalProperties": False,
    }
    required = [name for name, prop in props.items() if prop.required]
    if required:
        schema["required"] = required
    return schema


def build_screen_schema() -> dict[str, Any]:
    """
    Generate the JSON Schema document for a screen spec.

    The document encodes the same rules as the fallback walk: document
    shape, the modeled style properties, and the allowed-props table for
    every built-in node type.
    """
    defs: dict[str, Any] = {}
    defs["NodeStyle"] = _model_schema(NodeStyle, defs)
    defs["ResponsiveStyle"] = _model_schema(ResponsiveStyle, defs)
    defs["Interactions"] = _model_schema(Interactions, defs)
    defs["DataSource"] = _model_schema(DataSource, defs)

    type_rules: list[dict[str, Any]] = []
    for node_type in BuiltinType:
        defs[f"props.{node_type.value}"] = _props_schema(node_type)
        type_rules.append(
            {
                "if": {"properties": {"type": {"const": node_type.value}}, "required": ["type"]},
                "then": {"properties": {"props": {"$ref": f"#/$defs/props.{node_type.value}"}}},
            }
        )
    type_rules.append(
        {
            "if": {"properties": {"type": {"const": COMPONENT_REF}}, "required": ["type"]},
            "then": {
                "required": ["props"],
                "properties": {
                    "props": {
                        "type": "object",
                        "required": ["ref"],
                        "properties": {
                            "ref": {"type": "string", "minLength": 1},
                            "overrides": {"type": "object"},
                            "styleOverrides": {"type": "object"},
                            "descendants": {"type": "object", "additionalProperties": {"type": "object"}},
                            "slotContent": {
                                "type": "object",
                                "additionalProperties": {"type": "array", "items": {"$ref": "#/$defs/node"}},
                            },
                        },
                    }
                },
            },
        }
    )

    defs["node"] = {
        "type": "object",
        "required": ["id", "type"],
        "properties": {
            "id": {"type": "string", "pattern": r"\S"},
            "type": {"type": "string", "pattern": r"\S"},
            "props": {"type": "object"},
            "children": {"type": "array", "items": {"$ref": "#/$defs/node"}},
            "style": {"$ref": "#/$defs/NodeStyle"},
            "responsive": {"$ref": "#/$defs/ResponsiveStyle"},
            "interactions": {"$ref": "#/$defs/Interactions"},
            "dataSource": {"$ref": "#/$defs/DataSource"},
        },
        "additionalProperties": False,
        "allOf": type_rules,
    }

    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "$id": SCHEMA_ID,
        "title": "ScreenSpec",
        "type": "object",
        "required": ["version", "route", "tree"],
        "properties": {
            "version": {"const": 1},
            "route": {"type": "string", "pattern": "^/"},
            "meta": {"type": "object"},
            "tree": {"$ref": "#/$defs/node"},
        },
        "additionalProperties": False,
        "$defs": defs,
    }


# =============================================================================
# Fallback walk
# =============================================================================


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _check_model(
    model: type[BaseModel], value: Any, path: str, issues: list[ValidationIssue]
) -> None:
    try:
        model.model_validate(value)
    except ValidationError as e:
        for error in e.errors():
            issues.append(ValidationIssue(format_path(error["loc"], path), error["msg"]))


def _validate_node(node: Any, path: str, issues: list[ValidationIssue]) -> None:
    if not isinstance(node, dict):
        issues.append(ValidationIssue(path, "must be an object"))
        return

    for key in sorted(set(node) - NODE_KEYS):
        issues.append(ValidationIssue(f"{path}.{key}", "is not an allowed node field"))

    if not _is_non_empty_string(node.get("id")):
        issues.append(ValidationIssue(f"{path}.id", "must be a non-empty string"))
    node_type = node.get("type")
    if not _is_non_empty_string(node_type):
        issues.append(ValidationIssue(f"{path}.type", "must be a non-empty string"))

    props = node.get("props", {})
    if not isinstance(props, dict):
        issues.append(ValidationIssue(f"{path}.props", "must be an object"))
        props = {}

    if node_type in BUILTIN_TYPES:
        for issue_path, message in check_props(props, allowed_props(BuiltinType(node_type)), path):
            issues.append(ValidationIssue(issue_path, message))
    elif node_type == COMPONENT_REF:
        if not _is_non_empty_string(props.get("ref")):
            issues.append(ValidationIssue(f"{path}.props.ref", "must be a non-empty string"))
        else:
            _check_model(ComponentRefProps, props, f"{path}.props", issues)

    for key, model in (
        ("style", NodeStyle),
        ("responsive", ResponsiveStyle),
        ("interactions", Interactions),
        ("dataSource", DataSource),
    ):
        if key not in node:
            continue
        if not isinstance(node[key], dict):
            issues.append(ValidationIssue(f"{path}.{key}", "must be an object"))
            continue
        _check_model(model, node[key], f"{path}.{key}", issues)

    if "children" in node:
        children = node["children"]
        if not isinstance(children, list):
            issues.append(ValidationIssue(f"{path}.children", "must be an array"))
            return
        for index, child in enumerate(children):
            _validate_node(child, f"{path}.children[{index}]", issues)


def validate_fallback(raw: Any) -> list[ValidationIssue]:
    """Hand-written structural walk used when no schema document is available."""
    issues: list[ValidationIssue] = []
    if not isinstance(raw, dict):
        return [ValidationIssue("spec", "must be an object")]

    for key in sorted(set(raw) - SPEC_KEYS):
        issues.append(ValidationIssue(key, "is not an allowed top-level field"))

    version = raw.get("version")
    if not (isinstance(version, int) and not isinstance(version, bool) and version == 1):
        issues.append(ValidationIssue("version", "must be 1"))

    route = raw.get("route")
    if not (isinstance(route, str) and route.startswith("/")):
        issues.append(ValidationIssue("route", "must be a string starting with '/'"))

    if "meta" in raw and not isinstance(raw["meta"], dict):
        issues.append(ValidationIssue("meta", "must be an object"))

    if "tree" not in raw:
        issues.append(ValidationIssue("tree", "is required"))
    else:
        _validate_node(raw["tree"], "tree", issues)

    return issues


# =============================================================================
# Validator
# =============================================================================


class SpecValidator:
    """
    Validates raw screen documents.

    The schema document is read once, on first use, and cached on the
    instance. A missing or unreadable schema selects the fallback walk.

    Example:
        validator = SpecValidator(root / config.schema_path)
        issues = validator.validate(raw)
    """

    _UNAVAILABLE = object()

    def __init__(self, schema_path: Path | None = None):
        self.schema_path = schema_path
        self._validator: Any = None

    def _load(self) -> Draft202012Validator | None:
        if self._validator is None:
            self._validator = self._build() or self._UNAVAILABLE
        if self._validator is self._UNAVAILABLE:
            return None
        return self._validator

    def _build(self) -> Draft202012Validator | None:
        if self.schema_path is None:
            return None
        try:
            schema = json.loads(self.schema_path.read_text(encoding="utf-8"))
            Draft202012Validator.check_schema(schema)
        except FileNotFoundError:
            logger.debug(f"No schema at {self.schema_path}, using built-in validation")
            return None
        except (OSError, json.JSONDecodeError, SchemaError) as e:
            logger.warning(f"Schema {self.schema_path} unusable ({e}), using built-in validation")
            return None
        logger.debug(f"Loaded screen schema from {self.schema_path}")
        return Draft202012Validator(schema)

    @property
    def uses_schema(self) -> bool:
        """Whether the primary (schema document) path is active."""
        return self._load() is not None

    def validate(self, raw: Any) -> list[ValidationIssue]:
        """
        Collect every violated constraint in a raw document.

        Returns:
            Issues in document order; empty when the document is valid
        """
        validator = self._load()
        if validator is None:
            return validate_fallback(raw)

        errors = sorted(validator.iter_errors(raw), key=lambda e: list(map(str, e.absolute_path)))
        return [ValidationIssue(format_path(error.absolute_path), error.message) for error in errors]

    def ensure_valid(self, raw: Any, name: str, file: Path | None = None) -> ScreenSpec:
        """
        Validate and parse one document.

        Raises:
            SpecValidationError: With every issue found for this screen
        """
        issues = self.validate(raw)
        if not issues:
            try:
                return ScreenSpec.model_validate(raw)
            except ValidationError as e:
                issues = [
                    ValidationIssue(format_path(error["loc"]), error["msg"]) for error in e.errors()
                ]
        raise make_validation_error(name, issues, file)


def validate_spec(raw: Any, schema_path: Path | None = None) -> list[ValidationIssue]:
    """Validate one raw document; see SpecValidator."""
    return SpecValidator(schema_path).validate(raw)


def ensure_valid(raw: Any, name: str, schema_path: Path | None = None) -> ScreenSpec:
    """Validate and parse one raw document, raising SpecValidationError on failure."""
    return SpecValidator(schema_path).ensure_valid(raw, name)


def write_schema(path: Path) -> None:
    """Write the generated schema document."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(build_screen_schema(), indent=2) + "\n", encoding="utf-8")
