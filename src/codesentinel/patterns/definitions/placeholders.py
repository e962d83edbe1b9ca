from __future__ import annotations

from codesentinel.engine.types import Severity
from codesentinel.patterns.spec import (
    CommentMarker,
    ContainsText,
    RawPattern,
    RuleDefinition,
    StringLiteralContains,
)


def _marker_rule(
    rule_id: str, marker: str, *, title: str, description: str, severity: Severity, suggestion: str
) -> RuleDefinition:
    return RuleDefinition(
        rule_id=rule_id,
        title=title,
        description=description,
        severity=severity,
        category="placeholder",
        suggestion=suggestion,
        match=CommentMarker(markers=(marker,), style="any"),
    )


def placeholder_definitions() -> list[RuleDefinition]:
    """Incomplete code and dummy data."""

    return [
        _marker_rule(
            "CS-PH001",
            "TODO",
            title="TODO Comment Found",
            description="Incomplete work marker found in code.",
            severity="low",
            suggestion="Complete or remove the TODO before shipping.",
        ),
        _marker_rule(
            "CS-PH002",
            "FIXME",
            title="FIXME Comment Found",
            description="Known issue marker found; this should be fixed.",
            severity="medium",
            suggestion="Fix the issue or create a ticket to track it.",
        ),
        _marker_rule(
            "CS-PH003",
            "HACK",
            title="HACK Comment Found",
            description="Workaround marker found; this is technical debt.",
            severity="medium",
            suggestion="Document why the hack exists and plan to remove it.",
        ),
        _marker_rule(
            "CS-PH004",
            "XXX",
            title="XXX Comment Found",
            description="Attention marker found; requires review.",
            severity="low",
            suggestion="Address the flagged issue or remove the marker.",
        ),
        # Dummy text
        RuleDefinition(
            rule_id="CS-PH010",
            title="Lorem Ipsum Placeholder Text",
            description="Placeholder text found; replace with real content.",
            severity="medium",
            category="placeholder",
            suggestion="Replace with actual content before release.",
            match=ContainsText(terms=("lorem ipsum",), context="any"),
        ),
        RuleDefinition(
            rule_id="CS-PH011",
            title="Common Placeholder Value",
            description="Generic placeholder value detected.",
            severity="low",
            category="placeholder",
            suggestion="Replace with meaningful values.",
            match=StringLiteralContains(
                literals=("foo", "bar", "baz", "qux", "test", "dummy", "sample", "example", "placeholder"),
                case_insensitive=True,
            ),
        ),
        # Test data
        RuleDefinition(
            rule_id="CS-PH020",
            title="Test Email Address",
            description="Placeholder email found; may not be intended for production.",
            severity="medium",
            category="placeholder",
            suggestion="Remove or replace with proper configuration.",
            match=RawPattern(r"['\"`]test@(?:test|example|dummy|sample)\.[a-z]+['\"`]", flags="gi"),
        ),
        RuleDefinition(
            rule_id="CS-PH021",
            title="Common Test Password/Value",
            description="Potentially insecure placeholder password or test value.",
            severity="high",
            category="placeholder",
            suggestion="Remove test credentials before deployment.",
            match=StringLiteralContains(
                literals=("123", "1234", "12345", "123456", "password", "admin", "root", "test"),
                case_insensitive=True,
            ),
        ),
        RuleDefinition(
            rule_id="CS-PH022",
            title="Localhost URL in Code",
            description="Hardcoded localhost URL may not work in production.",
            severity="medium",
            category="placeholder",
            suggestion="Use environment variables for URLs.",
            match=RawPattern(r"(?:localhost|127\.0\.0\.1):\d{4,5}"),
        ),
        RuleDefinition(
            rule_id="CS-PH023",
            title="Placeholder String Pattern",
            description="Obvious placeholder pattern detected.",
            severity="low",
            category="placeholder",
            suggestion="Replace with actual values.",
            match=StringLiteralContains(literals=("xxx", "yyy", "zzz", "aaa", "bbb", "ccc"), case_insensitive=True),
        ),
        RuleDefinition(
            rule_id="CS-PH030",
            title="Test Phone Number (555)",
            description="The 555 prefix is reserved for fictional use.",
            severity="low",
            category="placeholder",
            suggestion="Use proper phone number handling or config.",
            match=RawPattern(r"['\"`](?:\+1)?[\s-]?555[\s-]?\d{3}[\s-]?\d{4}['\"`]"),
        ),
        RuleDefinition(
            rule_id="CS-PH031",
            title="Obviously Fake ID Number",
            description="Placeholder ID number pattern detected.",
            severity="medium",
            category="placeholder",
            suggestion="Remove test data before production.",
            match=RawPattern(
                r"['\"`](?:000[-\s]?00[-\s]?0000|111[-\s]?11[-\s]?1111|123[-\s]?45[-\s]?6789)['\"`]"
            ),
        ),
        # Incomplete implementations
        RuleDefinition(
            rule_id="CS-PH040",
            title="Not Implemented Error",
            description="Function explicitly marked as not implemented.",
            severity="high",
            category="placeholder",
            suggestion="Implement the function or remove the dead code.",
            match=ContainsText(terms=("not implemented", "implement me", "coming soon"), context="string"),
        ),
        RuleDefinition(
            rule_id="CS-PH041",
            title="TBD/Placeholder Return Value",
            description="Code returns a placeholder instead of a real value.",
            severity="medium",
            category="placeholder",
            suggestion="Implement actual logic or handle the case properly.",
            match=RawPattern(r"(?:return|=)\s*['\"`](?:TBD|TBA|N/A|pending|placeholder)['\"`]", flags="gi"),
        ),
        # Debug leftovers
        RuleDefinition(
            rule_id="CS-PH050",
            title="Debug Console.log",
            description="Debug logging statement left in code.",
            severity="low",
            category="placeholder",
            suggestion="Remove debug statements or use a proper logger.",
            match=RawPattern(
                r"console\.log\s*\(\s*['\"`](?:debug|test|here|working|checkpoint|\d+)['\"`]\s*\)",
                flags="gi",
            ),
        ),
        RuleDefinition(
            rule_id="CS-PH051",
            title="Debugger Statement",
            description="Debugger statement will pause execution in browser.",
            severity="medium",
            category="placeholder",
            suggestion="Remove debugger statements before committing.",
            match=RawPattern(r"debugger\s*;"),
        ),
        RuleDefinition(
            rule_id="CS-PH052",
            title="Debug Alert",
            description="Debug alert left in code.",
            severity="medium",
            category="placeholder",
            suggestion="Remove debug alerts.",
            match=RawPattern(r"alert\s*\(\s*['\"`](?:test|debug|here|working)['\"`]\s*\)", flags="gi"),
        ),
        RuleDefinition(
            rule_id="CS-PH060",
            title="Commented Out Code",
            description="Code appears to be commented out rather than deleted.",
            severity="low",
            category="placeholder",
            suggestion="Remove dead code; version control can recover it if needed.",
            match=RawPattern(r"//\s*(?:const|let|var|function|class|if|for|while|return)\s+\w+"),
        ),
        RuleDefinition(
            rule_id="CS-PH070",
            title="Test ID in Code",
            description="Hardcoded test ID found.",
            severity="medium",
            category="placeholder",
            suggestion="Use proper ID generation or configuration.",
            match=StringLiteralContains(
                literals=("test-id", "test_id", "testid", "fake-id", "temp-id"),
                case_insensitive=True,
            ),
        ),
    ]
