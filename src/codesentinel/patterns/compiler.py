from __future__ import annotations

import logging
import re
import threading
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType

from codesentinel.engine.types import CATEGORIES, SEVERITIES, Category, Severity
from codesentinel.patterns.builders import build
from codesentinel.patterns.spec import CompiledRule, RuleDefinition, RuleValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RuleStats:
    total: int
    by_category: Mapping[Category, int]
    by_severity: Mapping[Severity, int]


def compile_definition(definition: RuleDefinition) -> CompiledRule:
    """
    Compile one rule definition.

    Raises RuleValidationError when the match description cannot be built or
    builds to zero matchers, or when its severity or category is unknown.
    """

    if definition.severity not in SEVERITIES:
        raise RuleValidationError([f"{definition.rule_id}: unknown severity {definition.severity!r}"])
    if definition.category not in CATEGORIES:
        raise RuleValidationError([f"{definition.rule_id}: unknown category {definition.category!r}"])

    try:
        matchers = build(definition.match)
    except RuleValidationError as exc:
        raise RuleValidationError([f"{definition.rule_id}: {err}" for err in exc.errors]) from exc
    except (re.error, ValueError) as exc:
        raise RuleValidationError([f"{definition.rule_id}: failed to compile pattern: {exc}"]) from exc

    if not matchers:
        raise RuleValidationError([f"{definition.rule_id}: match description produced no patterns"])

    return CompiledRule(
        rule_id=definition.rule_id,
        title=definition.title,
        description=definition.description,
        severity=definition.severity,
        category=definition.category,
        matchers=tuple(matchers),
        suggestion=definition.suggestion,
        verification=definition.verification,
    )


def compile_definitions(definitions: Iterable[RuleDefinition]) -> list[CompiledRule]:
    """
    Compile a rule table, rejecting duplicate ids.

    All problems are collected and raised together as one RuleValidationError.
    """

    compiled: list[CompiledRule] = []
    errors: list[str] = []
    seen: set[str] = set()
    for definition in definitions:
        if definition.rule_id in seen:
            errors.append(f"Duplicate rule id: {definition.rule_id}")
            continue
        seen.add(definition.rule_id)
        try:
            compiled.append(compile_definition(definition))
        except RuleValidationError as exc:
            errors.extend(exc.errors)
    if errors:
        raise RuleValidationError(errors)
    return compiled


def validate_definitions(definitions: Iterable[RuleDefinition]) -> list[str]:
    """Return human-readable problems with a rule table (empty when valid)."""

    errors: list[str] = []
    seen: set[str] = set()
    for definition in definitions:
        rule_id = definition.rule_id
        if rule_id in seen:
            errors.append(f"Duplicate rule id: {rule_id}")
        seen.add(rule_id)
        try:
            compile_definition(definition)
        except RuleValidationError as exc:
            errors.extend(exc.errors)
    return errors


def rule_stats(definitions: Sequence[RuleDefinition]) -> RuleStats:
    by_category = Counter(d.category for d in definitions)
    by_severity = Counter(d.severity for d in definitions)
    return RuleStats(
        total=len(definitions),
        by_category=MappingProxyType({c: by_category.get(c, 0) for c in CATEGORIES}),
        by_severity=MappingProxyType({s: by_severity.get(s, 0) for s in SEVERITIES}),
    )


class RuleCompiler:
    """
    Compiled-rule cache over a fixed table of definitions.

    The cache is built on first use, once, under a lock, and is read-only
    afterwards. Compiled rules are immutable and their matchers stateless, so
    the result can be shared freely.
    """

    def __init__(self, definitions: Iterable[RuleDefinition]) -> None:
        self._definitions: tuple[RuleDefinition, ...] = tuple(definitions)
        self._lock = threading.Lock()
        self._cache: Mapping[Category, tuple[CompiledRule, ...]] | None = None

    @property
    def definitions(self) -> tuple[RuleDefinition, ...]:
        return self._definitions

    def get_compiled(self, category: Category | None = None) -> tuple[CompiledRule, ...]:
        cache = self._cache
        if cache is None:
            cache = self._build_cache()
        if category is None:
            return tuple(rule for cat in CATEGORIES for rule in cache[cat])
        return cache.get(category, ())

    def clear_cache(self) -> None:
        with self._lock:
            self._cache = None

    def validate(self) -> list[str]:
        return validate_definitions(self._definitions)

    def stats(self) -> RuleStats:
        return rule_stats(self._definitions)

    def _build_cache(self) -> Mapping[Category, tuple[CompiledRule, ...]]:
        with self._lock:
            if self._cache is not None:
                return self._cache
            by_category: dict[Category, list[CompiledRule]] = {c: [] for c in CATEGORIES}
            for rule in compile_definitions(self._definitions):
                by_category[rule.category].append(rule)
            cache = MappingProxyType({c: tuple(rules) for c, rules in by_category.items()})
            logger.debug("Compiled %d rule(s) into %d categories.", len(self._definitions), len(cache))
            self._cache = cache
            return cache


@lru_cache(maxsize=1)
def default_compiler() -> RuleCompiler:
    """Process-wide compiler over the built-in rule tables."""

    from codesentinel.patterns.definitions import builtin_definitions

    return RuleCompiler(builtin_definitions())
