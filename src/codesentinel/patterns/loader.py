from __future__ import annotations

import tomllib
from collections.abc import Iterable, Mapping
from dataclasses import MISSING, fields
from pathlib import Path
from typing import Any, cast

from codesentinel.engine.types import CATEGORIES, SEVERITIES, Category, Severity, Verification
from codesentinel.patterns.spec import MATCH_SPEC_TYPES, MatchSpec, RuleDefinition, RuleValidationError

_DEFINITION_KEYS = {"id", "title", "description", "severity", "category", "match", "suggestion", "verification"}
_VERIFICATION_STATUSES = {"confirmed", "needs_verification"}


def _normalize_key(key: str) -> str:
    return key.strip().replace("-", "_")


def _str_tuple(value: Any, *, where: str) -> tuple[str, ...]:
    if not isinstance(value, list) or any(not isinstance(v, str) for v in value):
        raise RuleValidationError([f"{where} must be a list of strings."])
    return tuple(value)


def _coerce_field(annotation: str, value: Any, *, where: str) -> Any:
    # Annotations are strings here (postponed evaluation).
    if annotation.startswith("tuple"):
        return _str_tuple(value, where=where)
    if annotation == "bool":
        if not isinstance(value, bool):
            raise RuleValidationError([f"{where} must be a boolean."])
        return value
    if annotation == "int":
        if isinstance(value, bool) or not isinstance(value, int):
            raise RuleValidationError([f"{where} must be an integer."])
        return value
    if not isinstance(value, str):
        raise RuleValidationError([f"{where} must be a string."])
    return value


def parse_match_spec(data: Any, *, where: str = "match") -> MatchSpec:
    """
    Build a MatchSpec from a table such as `{type = "function_call", names = ["eval"]}`.

    Keys may be written with dashes or underscores.
    """

    if not isinstance(data, Mapping):
        raise RuleValidationError([f"`{where}` must be a table."])

    raw = {_normalize_key(str(k)): v for k, v in data.items()}
    tag = raw.pop("type", None)
    spec_cls = MATCH_SPEC_TYPES.get(tag) if isinstance(tag, str) else None
    if spec_cls is None:
        known = ", ".join(sorted(MATCH_SPEC_TYPES))
        raise RuleValidationError([f"`{where}.type` {tag!r} is not a known match type (expected one of: {known})."])

    spec_fields = {f.name: f for f in fields(cast(Any, spec_cls))}
    kwargs: dict[str, Any] = {}
    for key, value in raw.items():
        field_def = spec_fields.get(key)
        if field_def is None:
            raise RuleValidationError([f"`{where}.{key}` is not a field of {spec_cls.tag}."])
        kwargs[key] = _coerce_field(str(field_def.type), value, where=f"`{where}.{key}`")

    missing = [
        name
        for name, f in spec_fields.items()
        if name not in kwargs and f.default is MISSING and f.default_factory is MISSING
    ]
    if missing:
        raise RuleValidationError([f"`{where}` is missing required field(s): {', '.join(missing)}."])
    return spec_cls(**kwargs)


def parse_verification(data: Any, *, where: str = "verification") -> Verification:
    if not isinstance(data, Mapping):
        raise RuleValidationError([f"`{where}` must be a table."])
    raw = {_normalize_key(str(k)): v for k, v in data.items()}

    status = raw.pop("status", "needs_verification")
    if status not in _VERIFICATION_STATUSES:
        raise RuleValidationError([f"`{where}.status` must be one of: confirmed, needs_verification."])
    commands = _str_tuple(raw.pop("commands", []), where=f"`{where}.commands`")

    text_fields: dict[str, str | None] = {}
    for name in ("assumption", "instruction", "confirm_if", "false_positive_if"):
        value = raw.pop(name, None)
        if value is not None and not isinstance(value, str):
            raise RuleValidationError([f"`{where}.{name}` must be a string."])
        text_fields[name] = value
    if raw:
        raise RuleValidationError([f"`{where}` has unknown key(s): {', '.join(sorted(raw))}."])

    return Verification(status=status, commands=commands, **text_fields)


def parse_definition(data: Any, *, where: str = "rule") -> RuleDefinition:
    if not isinstance(data, Mapping):
        raise RuleValidationError([f"`{where}` must be a table."])

    unknown = sorted(set(data) - _DEFINITION_KEYS)
    if unknown:
        raise RuleValidationError([f"`{where}` has unknown key(s): {', '.join(unknown)}."])

    for key in ("id", "title", "description", "severity", "category"):
        if not isinstance(data.get(key), str) or not data[key].strip():
            raise RuleValidationError([f"`{where}.{key}` must be a non-empty string."])

    rule_id = data["id"].strip()
    where = f"{where} {rule_id}"

    severity = data["severity"].strip().lower()
    if severity not in SEVERITIES:
        raise RuleValidationError([f"`{where}.severity` must be one of: {', '.join(SEVERITIES)}."])
    category = data["category"].strip().lower()
    if category not in CATEGORIES:
        raise RuleValidationError([f"`{where}.category` must be one of: {', '.join(CATEGORIES)}."])

    suggestion = data.get("suggestion")
    if suggestion is not None and not isinstance(suggestion, str):
        raise RuleValidationError([f"`{where}.suggestion` must be a string."])

    if "match" not in data:
        raise RuleValidationError([f"`{where}.match` is required."])

    verification = data.get("verification")
    return RuleDefinition(
        rule_id=rule_id,
        title=data["title"],
        description=data["description"],
        severity=cast(Severity, severity),
        category=cast(Category, category),
        match=parse_match_spec(data["match"], where=f"{where}.match"),
        suggestion=suggestion,
        verification=parse_verification(verification, where=f"{where}.verification")
        if verification is not None
        else None,
    )


def parse_definitions(items: Iterable[Any], *, source: str = "<rules>") -> list[RuleDefinition]:
    return [parse_definition(item, where=f"{source}: rules[{idx}]") for idx, item in enumerate(items)]


def load_rule_file(path: Path | str) -> list[RuleDefinition]:
    """
    Load rule definitions from a TOML file.

    The file holds an array of `[[rules]]` tables, each with a `[rules.match]`
    sub-table tagged by `type` and an optional `[rules.verification]`.
    """

    file_path = Path(path)
    try:
        data = tomllib.loads(file_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RuleValidationError([f"Could not read rule file {file_path}: {exc}"]) from exc
    except tomllib.TOMLDecodeError as exc:
        raise RuleValidationError([f"Invalid TOML in {file_path}: {exc}"]) from exc

    rules = data.get("rules", [])
    if not isinstance(rules, list):
        raise RuleValidationError([f"{file_path}: `rules` must be an array of tables."])
    return parse_definitions(rules, source=str(file_path))


def load_rule_files(paths: Iterable[Path | str]) -> list[RuleDefinition]:
    definitions: list[RuleDefinition] = []
    for path in paths:
        definitions.extend(load_rule_file(path))
    return definitions
