from __future__ import annotations

from codesentinel.patterns.spec import (
    CatchHandlerBehavior,
    ChainedAccess,
    FallbackValue,
    PromiseCatchBehavior,
    RawPattern,
    ReturnsOnly,
    RuleDefinition,
    SuppressionComment,
    TypeCast,
)


def deceptive_definitions() -> list[RuleDefinition]:
    """Code that hides errors or creates false confidence."""

    return [
        RuleDefinition(
            rule_id="CS-DEC001",
            title="Empty Catch Block",
            description="Silently swallowing errors makes debugging impossible.",
            severity="high",
            category="deceptive",
            suggestion="At minimum, log the error. Better: handle it appropriately or rethrow.",
            match=CatchHandlerBehavior(behavior="empty"),
        ),
        RuleDefinition(
            rule_id="CS-DEC002",
            title="Catch Block with Only Comments",
            description="A catch block with only comments still swallows errors.",
            severity="high",
            category="deceptive",
            suggestion="Add actual error handling, not just comments.",
            match=CatchHandlerBehavior(behavior="comment_only"),
        ),
        RuleDefinition(
            rule_id="CS-DEC003",
            title="Catch with Only Console.log",
            description="Logging alone does not handle the error; execution continues as if nothing happened.",
            severity="medium",
            category="deceptive",
            suggestion="Decide: should execution continue? Add recovery logic or rethrow.",
            match=CatchHandlerBehavior(behavior="log_only"),
        ),
        # Silent promise rejections
        RuleDefinition(
            rule_id="CS-DEC010",
            title="Empty Promise Catch",
            description="Silently ignoring promise rejections hides async errors.",
            severity="high",
            category="deceptive",
            suggestion="Handle the rejection or let it propagate for proper error handling.",
            match=PromiseCatchBehavior(behavior="empty"),
        ),
        RuleDefinition(
            rule_id="CS-DEC011",
            title="Promise Catch Returns Silent Value",
            description="Returning a value from catch masks the error. Callers won't know something failed.",
            severity="high",
            category="deceptive",
            suggestion="Return a distinguishable error state or rethrow.",
            match=PromiseCatchBehavior(behavior="returns_silent"),
        ),
        RuleDefinition(
            rule_id="CS-DEC012",
            title="Catch with Ignored Error Parameter",
            description="Using _ for the error parameter signals an intentional ignore. Is it really safe to ignore?",
            severity="medium",
            category="deceptive",
            suggestion="Document why ignoring this error is safe, or handle it.",
            match=PromiseCatchBehavior(behavior="ignores_param"),
        ),
        # Fallback values that mask failures
        RuleDefinition(
            rule_id="CS-DEC020",
            title="Empty Array Fallback",
            description="Falling back to [] can mask failed data fetching; code continues as if data was empty.",
            severity="medium",
            category="deceptive",
            suggestion='Distinguish between "no data" and "failed to fetch". Consider throwing or returning null.',
            match=FallbackValue(operators=("||",), fallback_literals=("[]",)),
        ),
        RuleDefinition(
            rule_id="CS-DEC021",
            title="Empty Object Fallback",
            description="Falling back to {} can hide parsing or fetching failures.",
            severity="medium",
            category="deceptive",
            suggestion="Handle the undefined/null case explicitly rather than masking it.",
            match=FallbackValue(operators=("||",), fallback_literals=("{}",)),
        ),
        RuleDefinition(
            rule_id="CS-DEC022",
            title="Nullish Coalescing to Empty Value",
            description="Defaulting to empty values with ?? can mask null responses that indicate errors.",
            severity="low",
            category="deceptive",
            suggestion='Verify that null/undefined truly means "use default" vs "something went wrong".',
            match=FallbackValue(operators=("??",), fallback_literals=("[]", "{}", "''", '""')),
        ),
        RuleDefinition(
            rule_id="CS-DEC030",
            title="Excessive Optional Chaining",
            description="Deep optional chaining (4+ levels) often masks structural problems or missing validation.",
            severity="medium",
            category="deceptive",
            suggestion="Validate data shape upfront rather than optional-chaining through uncertain structures.",
            match=ChainedAccess(min_depth=4, operator="?."),
        ),
        # Error-hiding returns
        RuleDefinition(
            rule_id="CS-DEC040",
            title="Silent Error Return",
            description="Returning null/false on error with a comment; callers may not check for this.",
            severity="high",
            category="deceptive",
            suggestion="Throw an error or return a Result/Either type that forces handling.",
            match=ReturnsOnly(
                literal_values=("null", "undefined", "false"),
                required_trailing_comment_words=("error", "fail", "todo", "fixme"),
            ),
        ),
        RuleDefinition(
            rule_id="CS-DEC041",
            title="Silent Return on Error",
            description="Returning silently when an error is detected, with no logging and no propagation.",
            severity="high",
            category="deceptive",
            suggestion="Log the error or throw it. Silent returns make debugging a nightmare.",
            match=RawPattern(r"if\s*\([^)]*error[^)]*\)\s*\{\s*return\s*;?\s*\}", flags="gi"),
        ),
        RuleDefinition(
            rule_id="CS-DEC050",
            title="Timeout as Error Workaround",
            description='Using setTimeout to "fix" timing issues often masks race conditions.',
            severity="medium",
            category="deceptive",
            suggestion="Fix the underlying race condition. Use proper async coordination.",
            match=RawPattern(
                r"setTimeout\s*\([^,]+,\s*\d+\s*\)\s*;?\s*//.*?(?:fix|hack|workaround|retry)",
                flags="gi",
            ),
        ),
        # Suppressed warnings/errors
        RuleDefinition(
            rule_id="CS-DEC060",
            title="Linter/Type Check Suppression",
            description="Suppressing type errors or linter warnings may hide real issues.",
            severity="low",
            category="deceptive",
            suggestion="Fix the underlying issue. If suppression is needed, document why.",
            match=SuppressionComment(tool_names=("ts-ignore", "ts-expect-error", "eslint-disable", "noqa")),
        ),
        RuleDefinition(
            rule_id="CS-DEC061",
            title='TypeScript "as any" Cast',
            description="Casting to any defeats TypeScript's type safety.",
            severity="medium",
            category="deceptive",
            suggestion="Use proper type definitions or unknown with type guards.",
            match=TypeCast(target_type_names=("any",)),
        ),
        RuleDefinition(
            rule_id="CS-DEC070",
            title="Fake Success Response",
            description="Returning success without actually doing the work.",
            severity="critical",
            category="deceptive",
            suggestion="Implement the actual functionality or return an honest error.",
            match=RawPattern(
                r"return\s*\{\s*(?:success|ok|status)\s*:\s*true[^}]*\}\s*;?\s*//.*?(?:todo|fixme|hack)",
                flags="gi",
            ),
        ),
        RuleDefinition(
            rule_id="CS-DEC080",
            title="console.error Without Throw",
            description="Logging an error but continuing execution; the error may not be handled.",
            severity="low",
            category="deceptive",
            suggestion="Consider if execution should continue. If not, throw after logging.",
            match=RawPattern(r"console\.error\s*\([^)]+\)(?!\s*;?\s*throw)"),
        ),
    ]
