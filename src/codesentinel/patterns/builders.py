from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import Any

from codesentinel.patterns.matcher import TextMatcher, matcher, parse_flags
from codesentinel.patterns.spec import (
    AssignmentPattern,
    CatchHandlerBehavior,
    ChainedAccess,
    CommentMarker,
    Comparison,
    ContainsText,
    EmptyBlock,
    FallbackValue,
    FunctionCall,
    LoopPattern,
    MatchSpec,
    PromiseCatchBehavior,
    RawPattern,
    ReturnsOnly,
    RuleValidationError,
    SecretPattern,
    StringLiteralContains,
    SuppressionComment,
    TypeCast,
    UrlPattern,
)

_I = re.IGNORECASE

# Shorthand tokens used in rule tables. Quotes of either kind are treated as
# equivalent for empty strings.
_LITERAL_FRAGMENTS = {
    "[]": r"\[\s*\]",
    "{}": r"\{\s*\}",
    "null": "null",
    "undefined": "undefined",
    "true": "true",
    "false": "false",
    '""': r"[\"']\s*[\"']",
    "''": r"[\"']\s*[\"']",
    "0": "0",
    "-1": "-1",
}

_CATCH_HEAD = r"catch\s*\([^)]*\)\s*"
_QUOTE = "['\"`]"
_NOT_QUOTE = "[^'\"`]"


def literal_fragment(value: str) -> str:
    return _LITERAL_FRAGMENTS.get(value) or re.escape(value)


def _alternation(items: Iterable[str], *, literals: bool = False) -> str:
    convert = literal_fragment if literals else re.escape
    return "|".join(convert(item) for item in items)


def build_empty_block(spec: EmptyBlock) -> list[TextMatcher]:
    out: list[TextMatcher] = []
    for construct in spec.constructs:
        if construct == "catch":
            out.append(matcher(_CATCH_HEAD + r"\{\s*\}"))
            if spec.allow_comments:
                out.append(matcher(_CATCH_HEAD + r"\{\s*//[^\n]*\s*\}"))
                out.append(matcher(_CATCH_HEAD + r"\{\s*/\*[\s\S]*?\*/\s*\}"))
        elif construct == "finally":
            out.append(matcher(r"finally\s*\{\s*\}"))
        elif construct == ".catch":
            out.append(matcher(r"\.catch\s*\(\s*\(\s*\)\s*=>\s*\{\s*\}\s*\)"))
            out.append(matcher(r"\.catch\s*\(\s*\w+\s*=>\s*\{\s*\}\s*\)"))
            out.append(matcher(r"\.catch\s*\(\s*function\s*\([^)]*\)\s*\{\s*\}\s*\)"))
        elif construct == ".then":
            out.append(matcher(r"\.then\s*\(\s*\(\s*\)\s*=>\s*\{\s*\}\s*\)"))
            out.append(matcher(r"\.then\s*\(\s*\w+\s*=>\s*\{\s*\}\s*\)"))
        elif construct == ".finally":
            out.append(matcher(r"\.finally\s*\(\s*\(\s*\)\s*=>\s*\{\s*\}\s*\)"))
    return out


def build_function_call(spec: FunctionCall) -> list[TextMatcher]:
    if not spec.names:
        return []
    names = _alternation(spec.names)
    flags = _I if spec.case_insensitive else 0
    out = [matcher(r"\b(?:" + names + r")\s*\(", flags)]
    if spec.match_method_form:
        out.append(matcher(r"\.(?:" + names + r")\s*\(", flags))
    if spec.match_constructor_form:
        out.append(matcher(r"new\s+(?:" + names + r")\s*\(", flags))
    return out


def build_returns_only(spec: ReturnsOnly) -> list[TextMatcher]:
    if not spec.literal_values:
        return []
    values = _alternation(spec.literal_values, literals=True)
    if spec.required_trailing_comment_words:
        words = _alternation(spec.required_trailing_comment_words)
        return [matcher(r"return\s+(?:" + values + r")\s*;?\s*//\s*.*?(?:" + words + ")", _I)]
    return [matcher(r"return\s+(?:" + values + r")\s*;?", _I)]


def build_contains_text(spec: ContainsText) -> list[TextMatcher]:
    if not spec.terms:
        return []
    terms = _alternation(spec.terms)
    flags = _I if spec.case_insensitive else 0
    context = spec.context
    out: list[TextMatcher] = []
    if context in ("single_line_comment", "comment", "any"):
        out.append(matcher(r"//.*?(?:" + terms + ")", flags))
    if context in ("block_comment", "comment", "any"):
        out.append(matcher(r"/\*[\s\S]*?(?:" + terms + r")[\s\S]*?\*/", flags))
    if context in ("string", "any"):
        out.append(matcher("(" + _QUOTE + ")" + _NOT_QUOTE + "*(?:" + terms + ")" + _NOT_QUOTE + r"*\1", flags))
    return out


def build_fallback_value(spec: FallbackValue) -> list[TextMatcher]:
    if not spec.fallback_literals:
        return []
    values = _alternation(spec.fallback_literals, literals=True)
    return [matcher(re.escape(op) + r"\s*(?:" + values + ")") for op in spec.operators]


def build_assignment_pattern(spec: AssignmentPattern) -> list[TextMatcher]:
    if not spec.keys:
        return []
    keys = _alternation(spec.keys)
    out: list[TextMatcher] = []
    for op in spec.operators:
        head = "(?:" + keys + r")\s*" + re.escape(op) + r"\s*" + _QUOTE
        if spec.values:
            values = _alternation(spec.values)
            body = "(" + _NOT_QUOTE + "*(?:" + values + ")" + _NOT_QUOTE + "*)"
        else:
            body = _NOT_QUOTE + "{8,}"
        out.append(matcher(head + body + _QUOTE, _I))
    return out


def build_chained_access(spec: ChainedAccess) -> list[TextMatcher]:
    op = r"\?\." if spec.operator == "?." else r"\."
    return [matcher("(?:" + op + r"\w+){" + str(max(spec.min_depth, 1)) + ",}")]


def build_catch_handler(spec: CatchHandlerBehavior) -> list[TextMatcher]:
    behavior = spec.behavior
    if behavior == "empty":
        return [matcher(_CATCH_HEAD + r"\{\s*\}")]
    if behavior == "comment_only":
        return [
            matcher(_CATCH_HEAD + r"\{\s*//.*?\s*\}", re.DOTALL),
            matcher(_CATCH_HEAD + r"\{\s*/\*[\s\S]*?\*/\s*\}"),
        ]
    if behavior == "log_only":
        return [matcher(_CATCH_HEAD + r"\{\s*(?:console\.log|print)\s*\([^)]*\)\s*;?\s*\}")]
    if behavior == "returns_value":
        return [
            matcher(
                _CATCH_HEAD + r"\{[^}]*return\s+(?:null|undefined|false|true|''|\"\"|\[\s*\]|\{\s*\})\s*;?\s*\}"
            )
        ]
    if behavior == "ignores_param":
        return [matcher(r"catch\s*\(\s*_\s*\)")]
    return []


def build_promise_catch(spec: PromiseCatchBehavior) -> list[TextMatcher]:
    behavior = spec.behavior
    if behavior == "empty":
        return [
            matcher(r"\.catch\s*\(\s*\(\s*\)\s*=>\s*\{\s*\}\s*\)"),
            matcher(r"\.catch\s*\(\s*\w+\s*=>\s*\{\s*\}\s*\)"),
        ]
    if behavior == "returns_silent":
        if not spec.silent_values:
            return []
        values = _alternation(spec.silent_values, literals=True)
        return [matcher(r"\.catch\s*\(\s*\(\s*\)\s*=>\s*(?:" + values + r")\s*\)")]
    if behavior == "ignores_param":
        return [matcher(r"\.catch\s*\(\s*_\s*=>\s*\{?\s*\}?\s*\)")]
    return []


def build_comment_marker(spec: CommentMarker) -> list[TextMatcher]:
    if not spec.markers:
        return []
    markers = _alternation(spec.markers)
    out: list[TextMatcher] = []
    if spec.style in ("single", "any"):
        out.append(matcher(r"//\s*(?:" + markers + r")(?::|\.|\s).*$", _I | re.MULTILINE))
    if spec.style in ("block", "any"):
        out.append(matcher(r"/\*[\s\S]*?(?:" + markers + r")[\s\S]*?\*/", _I))
    return out


def build_string_literal(spec: StringLiteralContains) -> list[TextMatcher]:
    if not spec.literals:
        return []
    literals = _alternation(spec.literals)
    flags = _I if spec.case_insensitive else 0
    return [matcher(_QUOTE + _NOT_QUOTE + "*(?:" + literals + ")" + _NOT_QUOTE + "*" + _QUOTE, flags)]


_SECRET_SOURCES: dict[str, tuple[tuple[str, int], ...]] = {
    "generic": (
        (
            r"(?:api[_-]?key|apikey|secret|password|passwd|pwd|token|auth[_-]?token|access[_-]?token|private[_-]?key)"
            r"\s*[:=]\s*['\"`][^'\"`]{8,}['\"`]",
            _I,
        ),
    ),
    "github": ((r"(?:ghp|gho|ghu|ghs|ghr)_[A-Za-z0-9_]{36,}", 0),),
    "openai": ((r"sk-[A-Za-z0-9]{48,}", 0),),
    "aws": ((r"AKIA[0-9A-Z]{16}", 0),),
    "stripe": (
        (r"sk_(?:live|test)_[A-Za-z0-9]{24,}", 0),
        (r"pk_(?:live|test)_[A-Za-z0-9]{24,}", 0),
    ),
}


def build_secret_pattern(spec: SecretPattern) -> list[TextMatcher]:
    if spec.kind == "custom":
        return [matcher(spec.custom_regex)] if spec.custom_regex else []
    return [matcher(source, flags) for source, flags in _SECRET_SOURCES.get(spec.kind, ())]


def build_url_pattern(spec: UrlPattern) -> list[TextMatcher]:
    out: list[TextMatcher] = []
    if spec.protocol in ("http", "any"):
        if spec.exclude_localhost:
            out.append(matcher(r"http://(?!localhost|127\.0\.0\.1)[^\s'\"`)]+"))
        else:
            out.append(matcher(r"http://[^\s'\"`)]+"))
    if spec.protocol in ("https", "any"):
        out.append(matcher(r"https://[^\s'\"`)]+"))
    return out


def build_suppression_comment(spec: SuppressionComment) -> list[TextMatcher]:
    if not spec.tool_names:
        return []
    # `#` covers tools such as `# noqa` and `# type: ignore`.
    return [matcher(r"(?://|#)\s*@?(?:" + _alternation(spec.tool_names) + ")")]


def build_type_cast(spec: TypeCast) -> list[TextMatcher]:
    if not spec.target_type_names:
        return []
    return [matcher(r"\bas\s+(?:" + _alternation(spec.target_type_names) + r")(?!\w)")]


_COMPARISON_SOURCES = {
    "==": r"[^!=]==[^=]",
    "!=": r"!=[^=]",
    "===": r"===",
    "!==": r"!==",
}


def build_comparison(spec: Comparison) -> list[TextMatcher]:
    return [matcher(_COMPARISON_SOURCES[op]) for op in spec.operators if op in _COMPARISON_SOURCES]


def build_loop_pattern(spec: LoopPattern) -> list[TextMatcher]:
    if spec.kind == "for_in":
        return [matcher(r"for\s*\(\s*(?:var|let|const)\s+\w+\s+in\s+")]
    if spec.kind == "while_true":
        return [matcher(r"while\s*\(\s*true\s*\)")]
    if spec.kind == "infinite":
        return [matcher(r"while\s*\(\s*true\s*\)"), matcher(r"for\s*\(\s*;\s*;\s*\)")]
    return []


def build_raw_pattern(spec: RawPattern) -> list[TextMatcher]:
    flags, repeat = parse_flags(spec.flags)
    return [matcher(spec.regex_source, flags, repeat=repeat)]


_BUILDERS: dict[type[MatchSpec], Callable[[Any], list[TextMatcher]]] = {
    EmptyBlock: build_empty_block,
    FunctionCall: build_function_call,
    ReturnsOnly: build_returns_only,
    ContainsText: build_contains_text,
    FallbackValue: build_fallback_value,
    AssignmentPattern: build_assignment_pattern,
    ChainedAccess: build_chained_access,
    CatchHandlerBehavior: build_catch_handler,
    PromiseCatchBehavior: build_promise_catch,
    CommentMarker: build_comment_marker,
    StringLiteralContains: build_string_literal,
    SecretPattern: build_secret_pattern,
    UrlPattern: build_url_pattern,
    SuppressionComment: build_suppression_comment,
    TypeCast: build_type_cast,
    Comparison: build_comparison,
    LoopPattern: build_loop_pattern,
    RawPattern: build_raw_pattern,
}


def supported_spec_types() -> frozenset[type[MatchSpec]]:
    return frozenset(_BUILDERS)


def build(spec: MatchSpec) -> list[TextMatcher]:
    """
    Turn a match description into the matchers that implement it.

    Matchers combine with OR semantics: a rule fires once per match of each
    matcher. May raise `re.error` or ValueError for malformed raw patterns;
    the compiler reports those as validation errors.
    """

    builder = _BUILDERS.get(type(spec))
    if builder is None:
        raise RuleValidationError([f"Unknown match type: {type(spec).__name__}"])
    return builder(spec)
