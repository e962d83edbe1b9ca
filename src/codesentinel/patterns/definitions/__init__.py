from __future__ import annotations

from functools import lru_cache

from codesentinel.patterns.definitions.deceptive import deceptive_definitions
from codesentinel.patterns.definitions.errors import error_definitions
from codesentinel.patterns.definitions.placeholders import placeholder_definitions
from codesentinel.patterns.definitions.security import security_definitions
from codesentinel.patterns.spec import RuleDefinition

__all__ = [
    "builtin_definitions",
    "deceptive_definitions",
    "error_definitions",
    "placeholder_definitions",
    "security_definitions",
]


@lru_cache(maxsize=1)
def builtin_definitions() -> tuple[RuleDefinition, ...]:
    definitions: list[RuleDefinition] = []
    definitions.extend(security_definitions())
    definitions.extend(deceptive_definitions())
    definitions.extend(placeholder_definitions())
    definitions.extend(error_definitions())
    return tuple(definitions)
