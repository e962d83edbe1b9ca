from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar, Literal

from codesentinel.engine.types import Category, Severity, Verification
from codesentinel.patterns.matcher import TextMatcher


class RuleValidationError(ValueError):
    """Raised when rule definitions cannot be compiled into matchers."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors: tuple[str, ...] = tuple(errors)
        super().__init__("; ".join(self.errors) or "Invalid rule definitions.")


BlockConstruct = Literal["catch", "finally", ".catch", ".then", ".finally"]
TextContext = Literal["comment", "single_line_comment", "block_comment", "string", "any"]
FallbackOperator = Literal["||", "??", "&&"]
AssignmentOperator = Literal["=", ":"]
AccessOperator = Literal["?.", "."]
CatchBehavior = Literal["empty", "comment_only", "log_only", "returns_value", "ignores_param"]
PromiseBehavior = Literal["empty", "returns_silent", "ignores_param"]
CommentStyle = Literal["single", "block", "any"]
SecretKind = Literal["generic", "github", "openai", "aws", "stripe", "custom"]
UrlProtocol = Literal["http", "https", "any"]
ComparisonOperator = Literal["==", "!=", "===", "!=="]
LoopKind = Literal["for_in", "while_true", "infinite"]

DEFAULT_SILENT_VALUES: tuple[str, ...] = ("null", "undefined", "false", "true", "''", '""')


class MatchSpec:
    """
    Base class of the closed set of match descriptions.

    Each subclass carries a `tag`, the name used for it in rule files.
    """

    __slots__ = ()
    tag: ClassVar[str] = ""


@dataclass(frozen=True, slots=True)
class EmptyBlock(MatchSpec):
    tag: ClassVar[str] = "empty_block"

    constructs: tuple[BlockConstruct, ...]
    allow_comments: bool = False


@dataclass(frozen=True, slots=True)
class FunctionCall(MatchSpec):
    tag: ClassVar[str] = "function_call"

    names: tuple[str, ...]
    match_method_form: bool = False
    match_constructor_form: bool = False
    case_insensitive: bool = True


@dataclass(frozen=True, slots=True)
class ReturnsOnly(MatchSpec):
    tag: ClassVar[str] = "returns_only"

    literal_values: tuple[str, ...]
    required_trailing_comment_words: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ContainsText(MatchSpec):
    tag: ClassVar[str] = "contains_text"

    terms: tuple[str, ...]
    context: TextContext = "any"
    case_insensitive: bool = True


@dataclass(frozen=True, slots=True)
class FallbackValue(MatchSpec):
    tag: ClassVar[str] = "fallback_value"

    operators: tuple[FallbackOperator, ...]
    fallback_literals: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class AssignmentPattern(MatchSpec):
    tag: ClassVar[str] = "assignment_pattern"

    keys: tuple[str, ...]
    values: tuple[str, ...] = ()
    operators: tuple[AssignmentOperator, ...] = ("=", ":")


@dataclass(frozen=True, slots=True)
class ChainedAccess(MatchSpec):
    tag: ClassVar[str] = "chained_access"

    min_depth: int
    operator: AccessOperator = "?."


@dataclass(frozen=True, slots=True)
class CatchHandlerBehavior(MatchSpec):
    tag: ClassVar[str] = "catch_handler"

    behavior: CatchBehavior


@dataclass(frozen=True, slots=True)
class PromiseCatchBehavior(MatchSpec):
    tag: ClassVar[str] = "promise_catch"

    behavior: PromiseBehavior
    silent_values: tuple[str, ...] = DEFAULT_SILENT_VALUES


@dataclass(frozen=True, slots=True)
class CommentMarker(MatchSpec):
    tag: ClassVar[str] = "comment_marker"

    markers: tuple[str, ...]
    style: CommentStyle = "any"


@dataclass(frozen=True, slots=True)
class StringLiteralContains(MatchSpec):
    tag: ClassVar[str] = "string_literal"

    literals: tuple[str, ...]
    case_insensitive: bool = False


@dataclass(frozen=True, slots=True)
class SecretPattern(MatchSpec):
    tag: ClassVar[str] = "secret_pattern"

    kind: SecretKind
    custom_regex: str | None = None


@dataclass(frozen=True, slots=True)
class UrlPattern(MatchSpec):
    tag: ClassVar[str] = "url_pattern"

    protocol: UrlProtocol = "any"
    exclude_localhost: bool = False


@dataclass(frozen=True, slots=True)
class SuppressionComment(MatchSpec):
    tag: ClassVar[str] = "suppression_comment"

    tool_names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class TypeCast(MatchSpec):
    tag: ClassVar[str] = "type_cast"

    target_type_names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Comparison(MatchSpec):
    tag: ClassVar[str] = "comparison"

    operators: tuple[ComparisonOperator, ...]


@dataclass(frozen=True, slots=True)
class LoopPattern(MatchSpec):
    tag: ClassVar[str] = "loop_pattern"

    kind: LoopKind


@dataclass(frozen=True, slots=True)
class RawPattern(MatchSpec):
    """Escape hatch: a regex source plus flag letters (g, i, m, s, u)."""

    tag: ClassVar[str] = "raw_regex"

    regex_source: str
    flags: str = "g"


MATCH_SPEC_TYPES: dict[str, type[MatchSpec]] = {
    cls.tag: cls
    for cls in (
        EmptyBlock,
        FunctionCall,
        ReturnsOnly,
        ContainsText,
        FallbackValue,
        AssignmentPattern,
        ChainedAccess,
        CatchHandlerBehavior,
        PromiseCatchBehavior,
        CommentMarker,
        StringLiteralContains,
        SecretPattern,
        UrlPattern,
        SuppressionComment,
        TypeCast,
        Comparison,
        LoopPattern,
        RawPattern,
    )
}


@dataclass(frozen=True, slots=True)
class RuleDefinition:
    rule_id: str
    title: str
    description: str
    severity: Severity
    category: Category
    match: MatchSpec
    suggestion: str | None = None
    verification: Verification | None = None


@dataclass(frozen=True, slots=True)
class CompiledRule:
    rule_id: str
    title: str
    description: str
    severity: Severity
    category: Category
    matchers: tuple[TextMatcher, ...]
    suggestion: str | None = None
    verification: Verification | None = None
