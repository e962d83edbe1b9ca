from __future__ import annotations

import re
from dataclasses import dataclass

from codesentinel.engine.types import Strength
from codesentinel.patterns.matcher import TextMatcher, matcher

MAX_EXAMPLES = 3


@dataclass(frozen=True, slots=True)
class StrengthCheck:
    strength_id: str
    matcher: TextMatcher
    title: str
    description: str


STRENGTH_CHECKS: tuple[StrengthCheck, ...] = (
    # Typing
    StrengthCheck(
        "CS-STR001",
        matcher(r":\s*(?:string|number|boolean|void|never|unknown|null|undefined|\w+\[\]|Record<|Map<|Set<|Promise<)"),
        "Strong Typing",
        "Explicit type annotations improve code safety and documentation.",
    ),
    StrengthCheck(
        "CS-STR002",
        matcher(r"interface\s+\w+\s*\{"),
        "Interface Definitions",
        "Well-defined interfaces create clear contracts.",
    ),
    StrengthCheck(
        "CS-STR003",
        matcher(r"type\s+\w+\s*=\s*"),
        "Type Aliases",
        "Type aliases improve code readability and reusability.",
    ),
    # Error handling
    StrengthCheck(
        "CS-STR010",
        matcher(r"try\s*\{[\s\S]+?\}\s*catch\s*\([^)]+\)\s*\{[\s\S]+?\}"),
        "Proper Try/Catch",
        "Structured error handling with meaningful catch blocks.",
    ),
    StrengthCheck(
        "CS-STR011",
        matcher(r"\.catch\s*\(\s*(?:error|err|e)\s*=>\s*\{[^}]+\}"),
        "Promise Error Handling",
        "Promise chains have explicit error handling.",
    ),
    StrengthCheck(
        "CS-STR012",
        matcher(r"class\s+\w+Error\s+extends\s+Error"),
        "Custom Error Classes",
        "Custom errors enable better error classification.",
    ),
    # Documentation
    StrengthCheck(
        "CS-STR020",
        matcher(r"/\*\*[\s\S]*?@(?:param|returns?|throws|example)[\s\S]*?\*/"),
        "JSDoc Documentation",
        "Functions have proper JSDoc documentation.",
    ),
    StrengthCheck(
        "CS-STR021",
        matcher(r"//\s+[A-Z][^.!?\n]*[.!?][ \t]*$", re.MULTILINE),
        "Meaningful Comments",
        "Code has explanatory comments in complete sentences.",
    ),
    # Clean code
    StrengthCheck(
        "CS-STR030",
        matcher(r"const\s+\w+\s*="),
        "Immutable Variables",
        "Using const by default prevents accidental reassignment.",
    ),
    StrengthCheck(
        "CS-STR031",
        matcher(r"(?:readonly|Object\.freeze|as\s+const)"),
        "Immutability Patterns",
        "Code uses immutability patterns for data safety.",
    ),
    StrengthCheck(
        "CS-STR032",
        matcher(r"(?:private|protected|#\w+)"),
        "Encapsulation",
        "Proper use of access modifiers for encapsulation.",
    ),
    # Async
    StrengthCheck(
        "CS-STR040",
        matcher(r"async\s+\w+\s*\([^)]*\)\s*(?::\s*Promise<[^>]+>)?"),
        "Async/Await Usage",
        "Modern async/await syntax for readable asynchronous code.",
    ),
    StrengthCheck(
        "CS-STR041",
        matcher(r"Promise\.all\s*\("),
        "Parallel Promise Execution",
        "Using Promise.all for efficient parallel async operations.",
    ),
    StrengthCheck(
        "CS-STR042",
        matcher(r"Promise\.allSettled\s*\("),
        "Resilient Promise Handling",
        "Using allSettled handles both fulfilled and rejected promises.",
    ),
    # Testing
    StrengthCheck(
        "CS-STR050",
        matcher(r"(?:describe|it|test|expect)\s*\("),
        "Test Coverage",
        "Code includes tests with standard testing patterns.",
    ),
    StrengthCheck(
        "CS-STR051",
        matcher(r"\.test\.|\.spec\.|__tests__"),
        "Test Files Present",
        "Dedicated test files follow conventions.",
    ),
    # Validation
    StrengthCheck(
        "CS-STR060",
        matcher(r"(?:z\.|yup\.|joi\.|validator\.)\w+"),
        "Schema Validation",
        "Using validation libraries for input/data validation.",
    ),
    StrengthCheck(
        "CS-STR061",
        matcher(r"if\s*\(\s*!?\w+\s*(?:&&|\|\|)?\s*typeof\s+\w+"),
        "Type Guards",
        "Runtime type checking before operations.",
    ),
    # Modern syntax
    StrengthCheck(
        "CS-STR070",
        matcher(r"(?:\?\.|&&\s*\w+\?\.)"),
        "Optional Chaining",
        "Using ?. for safe property access.",
    ),
    StrengthCheck(
        "CS-STR071",
        matcher(r"\?\?\s*(?![\[{])"),
        "Nullish Coalescing",
        "Using ?? for proper null/undefined handling.",
    ),
    StrengthCheck(
        "CS-STR072",
        matcher(r"\.\.\.\w+"),
        "Spread Operator",
        "Using spread for immutable operations.",
    ),
    StrengthCheck(
        "CS-STR080",
        matcher(r"process\.env\.\w+|import\.meta\.env\.\w+"),
        "Environment Variables",
        "Configuration via environment variables.",
    ),
    StrengthCheck(
        "CS-STR090",
        matcher(r"(?:logger|log)\.\w+\s*\("),
        "Structured Logging",
        "Using a logging library instead of console.log.",
    ),
)


def analyze_strengths(code: str, checks: tuple[StrengthCheck, ...] = STRENGTH_CHECKS) -> list[Strength]:
    """Report each recognized good practice once, with up to three examples."""

    strengths: list[Strength] = []
    for check in checks:
        matches = check.matcher.find_all(code)
        if not matches:
            continue
        strengths.append(
            Strength(
                strength_id=check.strength_id,
                title=check.title,
                description=check.description,
                examples=tuple(m.group(0).strip() for m in matches[:MAX_EXAMPLES]),
            )
        )
    return strengths
