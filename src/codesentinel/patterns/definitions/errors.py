from __future__ import annotations

from codesentinel.patterns.spec import Comparison, LoopPattern, RawPattern, RuleDefinition


def error_definitions() -> list[RuleDefinition]:
    """Code smells and likely bugs."""

    return [
        RuleDefinition(
            rule_id="CS-ERR020",
            title="Variable Redeclaration with var",
            description="Same variable declared twice with var; potential bug.",
            severity="medium",
            category="error",
            suggestion="Use let/const and avoid redeclaring variables.",
            match=RawPattern(r"var\s+(\w+)[\s\S]*?var\s+\1\s*="),
        ),
        # Comparisons
        RuleDefinition(
            rule_id="CS-ERR030",
            title="Loose Equality (==)",
            description="Loose equality can cause unexpected type coercion.",
            severity="low",
            category="error",
            suggestion="Use strict equality (===) instead.",
            match=Comparison(operators=("==",)),
        ),
        RuleDefinition(
            rule_id="CS-ERR031",
            title="Loose Inequality (!=)",
            description="Loose inequality can cause unexpected type coercion.",
            severity="low",
            category="error",
            suggestion="Use strict inequality (!==) instead.",
            match=Comparison(operators=("!=",)),
        ),
        RuleDefinition(
            rule_id="CS-ERR032",
            title="Assignment in Condition",
            description="Assignment inside an if condition; likely meant to compare.",
            severity="high",
            category="error",
            suggestion="Use === for comparison. If assignment is intentional, wrap in extra parens.",
            match=RawPattern(r"if\s*\(\s*\w+\s*=\s*[^=]"),
        ),
        # Loops
        RuleDefinition(
            rule_id="CS-ERR050",
            title="for...in on Array",
            description="for...in iterates over keys, not values; often wrong for arrays.",
            severity="medium",
            category="error",
            suggestion="Use for...of, forEach(), or traditional for loop for arrays.",
            match=LoopPattern(kind="for_in"),
        ),
        RuleDefinition(
            rule_id="CS-ERR051",
            title="Infinite Loop Pattern",
            description="while(true) requires an explicit break; easy to create an infinite loop.",
            severity="medium",
            category="error",
            suggestion="Ensure there is always a reachable break condition.",
            match=LoopPattern(kind="while_true"),
        ),
        RuleDefinition(
            rule_id="CS-ERR060",
            title="Floating Point Comparison",
            description="Direct comparison of floats (especially money) can fail due to precision.",
            severity="high",
            category="error",
            suggestion="Use epsilon comparison or integer cents for money.",
            match=RawPattern(
                r"(?:\d+\.\d+|\w+)\s*===?\s*(?:\d+\.\d+|\w+).*?(?:price|amount|total|sum|money|currency|rate)",
                flags="gi",
            ),
        ),
        RuleDefinition(
            rule_id="CS-ERR070",
            title="Array Mutation During Iteration",
            description="Modifying an array while iterating can cause skipped elements.",
            severity="high",
            category="error",
            suggestion="Create a new array or iterate backwards when mutating.",
            match=RawPattern(r"\.forEach\s*\([^)]*\)\s*\{[^}]*(?:\.push|\.pop|\.shift|\.splice)"),
        ),
        RuleDefinition(
            rule_id="CS-ERR080",
            title="parseInt Without Radix",
            description="parseInt without radix can give unexpected results.",
            severity="low",
            category="error",
            suggestion="Always specify radix: parseInt(x, 10).",
            match=RawPattern(r"parseInt\s*\(\s*[^,)]+\s*\)(?!\s*,)"),
        ),
        RuleDefinition(
            rule_id="CS-ERR090",
            title="Potentially Unreachable Code",
            description="Code after a return statement will never execute.",
            severity="medium",
            category="error",
            suggestion="Remove unreachable code or fix control flow.",
            match=RawPattern(r"return\s+[^;]+;\s*\n\s*(?![\s}]|case\s|default:)"),
        ),
        RuleDefinition(
            rule_id="CS-ERR100",
            title="delete Operator on Array",
            description="delete leaves holes in arrays; length is unchanged.",
            severity="medium",
            category="error",
            suggestion="Use splice() to remove array elements.",
            match=RawPattern(r"delete\s+\w+\[\w+\]"),
        ),
        RuleDefinition(
            rule_id="CS-ERR110",
            title='Potential "this" Binding Issue',
            description='Using "this" in a setTimeout callback may not refer to the expected context.',
            severity="medium",
            category="error",
            suggestion="Use arrow function or .bind(this).",
            match=RawPattern(r"setTimeout\s*\(\s*(?:this\.\w+|function\s*\([^)]*\)\s*\{[^}]*this\.)"),
        ),
        RuleDefinition(
            rule_id="CS-ERR120",
            title='Constructor Without "new"',
            description="Calling a constructor without new may not work as expected.",
            severity="low",
            category="error",
            suggestion='Use "new" keyword with constructors.',
            match=RawPattern(r"(?:^|[^.])\b(?:Date|Array|Object|Map|Set|Promise)\s*\(\s*\)"),
        ),
        RuleDefinition(
            rule_id="CS-ERR130",
            title="Magic Number",
            description="Hardcoded number without context makes code hard to maintain.",
            severity="low",
            category="error",
            suggestion="Extract magic numbers into named constants.",
            match=RawPattern(
                r"(?:if|while|for|===?|!==?|[<>]=?)\s*\(?\s*(?:\d{3,}|\d+\.\d+)\s*(?!\s*(?:px|em|rem|%|vh|vw|s|ms))"
            ),
        ),
        RuleDefinition(
            rule_id="CS-ERR140",
            title="Await in Constructor",
            description="Constructors cannot be async; await will not work as expected.",
            severity="high",
            category="error",
            suggestion="Use a static factory method for async initialization.",
            match=RawPattern(r"constructor\s*\([^)]*\)\s*\{[^}]*await\s+"),
        ),
    ]
