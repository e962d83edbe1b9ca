from __future__ import annotations

from types import MappingProxyType

from codesentinel.advisory.types import (
    ApproachTemplate,
    CodeChange,
    Concern,
    IdiomRule,
    RemediationPlan,
    SuggestionRule,
    Variant,
)
from codesentinel.patterns.matcher import matcher

IDIOM_RULES: tuple[IdiomRule, ...] = (
    # Architectural
    IdiomRule(
        "CS-ARCH001",
        "Repository Pattern",
        "architectural",
        (
            matcher(r"class\s+\w*Repository"),
            matcher(r"interface\s+I?\w*Repository"),
            matcher(r"(?:find|get|save|delete|update)(?:All|By|One)\s*\("),
        ),
        "Data access abstraction layer separating business logic from data persistence",
    ),
    IdiomRule(
        "CS-ARCH002",
        "Service Layer",
        "architectural",
        (
            matcher(r"class\s+\w*Service"),
            matcher(r"(?:export\s+)?(?:const|function)\s+\w*Service"),
        ),
        "Business logic encapsulation in dedicated service classes/modules",
    ),
    IdiomRule(
        "CS-ARCH003",
        "Controller/Handler Pattern",
        "architectural",
        (
            matcher(r"class\s+\w*Controller"),
            matcher(r"(?:export\s+)?(?:const|function)\s+\w*(?:Controller|Handler)"),
            matcher(r"@(?:Controller|Get|Post|Put|Delete)\s*\("),
        ),
        "HTTP request handling separated from business logic",
    ),
    IdiomRule(
        "CS-ARCH004",
        "Middleware Pattern",
        "architectural",
        (
            matcher(r"(?:app|router)\.use\s*\("),
            matcher(r"export\s+(?:const|function)\s+\w*Middleware"),
            matcher(r"\(req,\s*res,\s*next\)"),
        ),
        "Request/response pipeline with composable handlers",
    ),
    # Design
    IdiomRule(
        "CS-DES001",
        "Factory Pattern",
        "design",
        (
            matcher(r"(?:create|make|build)\w*\s*\([^)]*\)\s*(?::\s*\w+)?\s*(?:=>)?\s*\{?"),
            matcher(r"class\s+\w*Factory"),
            matcher(r"function\s+create\w+"),
        ),
        "Object creation encapsulated in factory functions/classes",
    ),
    IdiomRule(
        "CS-DES002",
        "Singleton Pattern",
        "design",
        (
            matcher(r"static\s+(?:get)?[Ii]nstance"),
            matcher(r"let\s+instance\s*[=:]"),
            matcher(r"export\s+default\s+new\s+\w+\(\)"),
        ),
        "Single instance shared across the application",
    ),
    IdiomRule(
        "CS-DES003",
        "Observer/Event Pattern",
        "design",
        (
            matcher(r"\.on\s*\(\s*['\"`]\w+['\"`]"),
            matcher(r"\.emit\s*\(\s*['\"`]\w+['\"`]"),
            matcher(r"addEventListener\s*\("),
            matcher(r"(?:subscribe|unsubscribe)\s*\("),
            matcher(r"new\s+(?:Event)?Emitter"),
        ),
        "Pub/sub mechanism for loose coupling between components",
    ),
    IdiomRule(
        "CS-DES004",
        "Strategy Pattern",
        "design",
        (
            matcher(r"interface\s+\w*Strategy"),
            matcher(r"type\s+\w*Strategy\s*="),
            matcher(r"strategies\s*(?::\s*(?:Record|Map|\{))?\s*[=:]"),
        ),
        "Interchangeable algorithms selected at runtime",
    ),
    IdiomRule(
        "CS-DES005",
        "Builder Pattern",
        "design",
        (
            matcher(r"class\s+\w*Builder"),
            matcher(r"\.set\w+\([^)]+\)\s*\.\s*set\w+"),
            matcher(r"return\s+this\s*;?\s*\}\s*\w+\s*\("),
        ),
        "Step-by-step object construction with fluent interface",
    ),
    IdiomRule(
        "CS-DES006",
        "Dependency Injection",
        "design",
        (
            matcher(r"constructor\s*\(\s*(?:private|public|readonly)\s+\w+\s*:"),
            matcher(r"@(?:Inject|Injectable|Service)\s*\("),
            matcher(r"\.register\s*\(\s*['\"`]\w+['\"`]"),
        ),
        "Dependencies provided externally rather than created internally",
    ),
    # Implementation
    IdiomRule(
        "CS-IMPL001",
        "Async/Await",
        "implementation",
        (
            matcher(r"async\s+(?:function|\w+\s*=|(?:\w+\s*)?=>)"),
            matcher(r"await\s+"),
        ),
        "Modern asynchronous code handling",
    ),
    IdiomRule(
        "CS-IMPL002",
        "Promise Chains",
        "implementation",
        (
            matcher(r"\.then\s*\(\s*(?:\w+\s*=>|\([^)]*\)\s*=>|function)"),
            matcher(r"\.catch\s*\(\s*(?:\w+\s*=>|\([^)]*\)\s*=>|function)"),
        ),
        "Promise-based asynchronous handling with chaining",
    ),
    IdiomRule(
        "CS-IMPL003",
        "Callback Pattern",
        "implementation",
        (
            matcher(r"function\s*\([^)]*,\s*(?:callback|cb|done|next)\s*\)"),
            matcher(r"\(\s*(?:err|error)\s*,\s*(?:result|data|response)\s*\)"),
        ),
        "Traditional callback-based async handling",
    ),
    IdiomRule(
        "CS-IMPL004",
        "Result/Either Pattern",
        "implementation",
        (
            matcher(r"(?:Result|Either|Ok|Err|Success|Failure)<\w+"),
            matcher(r"return\s+\{\s*(?:success|ok|error|data)\s*:"),
            matcher(r"\.isOk\(\)|\.isErr\(\)|\.unwrap\(\)"),
        ),
        "Explicit success/failure return types instead of exceptions",
    ),
    IdiomRule(
        "CS-IMPL005",
        "Guard Clauses",
        "implementation",
        (
            matcher(r"if\s*\([^)]+\)\s*(?:return|throw)\s*[^{]"),
            matcher(r"if\s*\(\s*!\w+\s*\)\s*(?:return|throw)"),
        ),
        "Early returns for edge cases before main logic",
    ),
    IdiomRule(
        "CS-IMPL006",
        "Null Object Pattern",
        "implementation",
        (
            matcher(r"(?:Null|Empty|Default|Noop)\w+\s*(?:implements|extends|=)"),
            matcher(r"\?\?\s*\{\s*\w+\s*:\s*\(\)\s*=>"),
        ),
        "Default objects instead of null checks",
    ),
)

# Variant order matters: on equal counts the first listed variant is recommended.
CONCERNS: tuple[Concern, ...] = (
    Concern(
        "CS-INC001",
        "Mixed Async Styles",
        "implementation",
        (
            Variant("async/await", matcher(r"async\s+\w|await\s+")),
            Variant("Promise chains", matcher(r"\.then\s*\(")),
            Variant("Callbacks", matcher(r",\s*(?:callback|cb)\s*\)|,\s*\(err,")),
        ),
        "Convert the other async styles so every call site composes the same way.",
    ),
    Concern(
        "CS-INC002",
        "Mixed Error Handling",
        "implementation",
        (
            Variant("try/catch", matcher(r"try\s*\{[\s\S]*?catch")),
            Variant(".catch()", matcher(r"\.catch\s*\(")),
            Variant("Error callbacks", matcher(r"\(\s*err(?:or)?\s*(?:,|\))")),
            Variant("Result types", matcher(r"(?:Result|Either|Ok|Err)<")),
        ),
        "Pick one primary error handling strategy so callers know how failures surface.",
    ),
    Concern(
        "CS-INC003",
        "Mixed Export Styles",
        "implementation",
        (
            Variant("Named exports", matcher(r"export\s+(?:const|function|class|interface|type)\s+\w+")),
            Variant("Default exports", matcher(r"export\s+default")),
            Variant("module.exports", matcher(r"module\.exports\s*=")),
        ),
        "Export every module the same way so imports read uniformly.",
    ),
    Concern(
        "CS-INC004",
        "Mixed Null Handling",
        "implementation",
        (
            Variant("Optional chaining (?.)", matcher(r"\?\.")),
            Variant("Nullish coalescing (??)", matcher(r"\?\?")),
            Variant("Logical OR (||)", matcher(r"\|\|\s*(?:null|undefined|''|\"\"|\[\]|\{\})")),
            Variant("Explicit checks", matcher(r"(?:!==?|===?)\s*(?:null|undefined)")),
        ),
        "Handle missing values one way; note that || also replaces every falsy value.",
    ),
    Concern(
        "CS-INC005",
        "Mixed Function Styles",
        "implementation",
        (
            Variant("Arrow functions", matcher(r"(?:const|let)\s+\w+\s*=\s*(?:\([^)]*\)|[^=])\s*=>")),
            Variant("Function declarations", matcher(r"function\s+\w+\s*\(")),
            Variant("Method shorthand", matcher(r"\w+\s*\([^)]*\)\s*\{")),
        ),
        "Keep one function style for similar roles so the file reads consistently.",
    ),
)

SUGGESTION_RULES: tuple[SuggestionRule, ...] = (
    SuggestionRule(
        suggestion_id="CS-SUG001",
        title="Consider Result Pattern for Error Handling",
        level="implementation",
        detector=matcher(r"return\s+null\s*;|return\s+undefined\s*;"),
        already_adopted=matcher(r"Result<|Either<|Ok\(|Err\("),
        threshold=2,
        approach=ApproachTemplate(
            name="Result/Either Pattern",
            description="Explicit success/failure return types that force callers to handle both cases",
            why='Returning null/undefined on errors makes it impossible to distinguish "not found" from '
            '"operation failed"',
            benefits=(
                "Callers must handle error cases explicitly",
                "Type system catches unhandled errors",
                'Clear distinction between "no data" and "error"',
                "Self-documenting function signatures",
            ),
            tradeoffs=(
                "More verbose return type handling",
                "Requires consistent adoption across codebase",
                "Learning curve for team",
            ),
            example="""\
// Before
function getUser(id: string): User | null {
  if (error) return null;
  return user;
}

// After
type Result<T, E> = { ok: true; value: T } | { ok: false; error: E };

function getUser(id: string): Result<User, 'not_found' | 'db_error'> {
  if (notFound) return { ok: false, error: 'not_found' };
  if (dbError) return { ok: false, error: 'db_error' };
  return { ok: true, value: user };
}""",
        ),
        plan=RemediationPlan(
            kind="consider",
            description="Introduce Result type for functions that can fail",
            steps=(
                "Define a Result<T, E> type in a shared types file",
                "Update function return types to use Result",
                "Replace return null with { ok: false, error: reason }",
                "Update callers to check result.ok before accessing value",
            ),
            code_change=CodeChange(before="return null;", after="return { ok: false, error: 'operation_failed' };"),
        ),
    ),
    SuggestionRule(
        suggestion_id="CS-SUG002",
        title="Extract Factory for Complex Object Creation",
        level="design",
        detector=matcher(r"new\s+\w+\(\s*\{[\s\S]{100,}?\}\s*\)"),
        threshold=2,
        approach=ApproachTemplate(
            name="Factory Pattern",
            description="Encapsulate complex object creation in dedicated factory functions",
            why="Large inline object construction is hard to test and reuse",
            benefits=(
                "Centralized object creation logic",
                "Easier to test with mock factories",
                "Reusable default configurations",
                "Clear creation intent in code",
            ),
            tradeoffs=("Additional indirection", "More files/functions to maintain"),
            example="""\
// Before
const user = new User({
  name: data.name,
  email: data.email,
  role: data.role || 'user',
  createdAt: new Date(),
  // ... many more fields
});

// After
function createUser(data: CreateUserInput): User {
  return new User({
    ...defaultUserConfig,
    ...data,
    createdAt: new Date(),
  });
}

const user = createUser(data);""",
        ),
        plan=RemediationPlan(
            kind="refactor",
            description="Extract factory function for complex object creation",
            steps=(
                "Identify the class being instantiated",
                "Create a createXxx function that encapsulates the construction",
                "Move default values and transformations into the factory",
                "Replace new Xxx({...}) calls with createXxx(...)",
            ),
        ),
    ),
    SuggestionRule(
        suggestion_id="CS-SUG003",
        title="Add Repository Layer for Data Access",
        level="architectural",
        detector=matcher(r"(?:prisma|db|knex|sequelize|mongoose)\.\w+\.\w+"),
        already_adopted=matcher(r"Repository"),
        threshold=3,
        approach=ApproachTemplate(
            name="Repository Pattern",
            description="Abstract data access behind repository interfaces",
            why="Direct ORM/database calls scattered in business logic make testing hard and create tight coupling",
            benefits=(
                "Business logic independent of data layer",
                "Easy to mock for testing",
                "Can swap databases without changing business code",
                "Centralizes query logic",
            ),
            tradeoffs=(
                "Additional abstraction layer",
                "More boilerplate code",
                "Can be overkill for simple CRUD apps",
            ),
            example="""\
// Before (in service)
async function getActiveUsers() {
  return prisma.user.findMany({ where: { active: true } });
}

// After
// userRepository.ts
interface UserRepository {
  findActive(): Promise<User[]>;
}

class PrismaUserRepository implements UserRepository {
  async findActive() {
    return prisma.user.findMany({ where: { active: true } });
  }
}

// userService.ts
class UserService {
  constructor(private userRepo: UserRepository) {}

  async getActiveUsers() {
    return this.userRepo.findActive();
  }
}""",
        ),
        plan=RemediationPlan(
            kind="refactor",
            description="Create repository interfaces and implementations",
            steps=(
                "Identify all direct database calls in services/controllers",
                "Group related queries by entity (User, Order, etc.)",
                "Create a Repository interface for each entity",
                "Implement the interface with your ORM",
                "Inject repositories into services via constructor",
            ),
        ),
    ),
    SuggestionRule(
        suggestion_id="CS-SUG004",
        title="Use Guard Clauses for Cleaner Logic",
        level="implementation",
        detector=matcher(r"if\s*\([^)]+\)\s*\{[^{}]{50,}\}\s*else\s*\{[^{}]{10,}\}"),
        threshold=2,
        approach=ApproachTemplate(
            name="Guard Clauses",
            description="Early returns for edge cases to reduce nesting and clarify happy path",
            why="Deeply nested if-else blocks are hard to follow and maintain",
            benefits=(
                "Reduced cognitive load",
                "Clear separation of edge cases and main logic",
                "Easier to add new conditions",
                "More linear code flow",
            ),
            tradeoffs=(
                "Multiple return points (some style guides discourage)",
                "May not work well with resource cleanup needs",
            ),
            example="""\
// Before
function processOrder(order) {
  if (order) {
    if (order.items.length > 0) {
      if (order.payment) {
        // actual logic here
        return result;
      } else {
        throw new Error('No payment');
      }
    } else {
      throw new Error('Empty order');
    }
  } else {
    throw new Error('No order');
  }
}

// After
function processOrder(order) {
  if (!order) throw new Error('No order');
  if (order.items.length === 0) throw new Error('Empty order');
  if (!order.payment) throw new Error('No payment');

  // actual logic here, no nesting
  return result;
}""",
        ),
        plan=RemediationPlan(
            kind="refactor",
            description="Flatten nested conditionals with early returns",
            steps=(
                "Identify the deepest nested condition (usually the happy path)",
                "Invert outer conditions and return/throw early",
                "Move main logic to the end, unnested",
                "Remove else blocks that are no longer needed",
            ),
        ),
    ),
    SuggestionRule(
        suggestion_id="CS-SUG005",
        title="Consider Strategy Pattern for Conditional Logic",
        level="design",
        # Each repetition stops at the next `case`, so a failed match cannot
        # backtrack through every way of splitting the switch body.
        detector=matcher(r"switch\s*\([^)]+\)\s*\{(?:(?:(?!\bcase\s)[^}])*\bcase\s+['\"`]?\w+['\"`]?\s*:){4,}"),
        approach=ApproachTemplate(
            name="Strategy Pattern",
            description="Replace complex switch/if-else with strategy objects",
            why="Large switch statements violate the Open/Closed principle: adding new cases requires "
            "modifying existing code",
            benefits=(
                "Add new behaviors without changing existing code",
                "Each strategy is independently testable",
                "Strategies can be swapped at runtime",
                "Cleaner separation of concerns",
            ),
            tradeoffs=("More files/classes", "Overhead for simple cases", "Need to manage strategy registration"),
            example="""\
// Before
function calculatePrice(type, amount) {
  switch (type) {
    case 'standard': return amount;
    case 'premium': return amount * 0.9;
    case 'vip': return amount * 0.8;
    case 'enterprise': return amount * 0.7;
    // adding new type = modify this function
  }
}

// After
const pricingStrategies = {
  standard: (amount) => amount,
  premium: (amount) => amount * 0.9,
  vip: (amount) => amount * 0.8,
  enterprise: (amount) => amount * 0.7,
};

function calculatePrice(type, amount) {
  const strategy = pricingStrategies[type];
  if (!strategy) throw new Error('Unknown type');
  return strategy(amount);
}""",
        ),
        plan=RemediationPlan(
            kind="refactor",
            description="Extract switch cases into strategy object",
            steps=(
                "Create a strategies object/map",
                "Move each case logic into a strategy function",
                "Replace switch with strategy lookup and execution",
                "Add error handling for unknown strategies",
            ),
        ),
    ),
)

RELATED_IDIOMS = MappingProxyType(
    {
        "Factory Pattern": ("Builder Pattern", "Singleton Pattern"),
        "Singleton Pattern": ("Factory Pattern", "Dependency Injection"),
        "Observer/Event Pattern": ("Strategy Pattern",),
        "Strategy Pattern": ("Factory Pattern", "Dependency Injection"),
        "Builder Pattern": ("Factory Pattern",),
        "Dependency Injection": ("Factory Pattern", "Strategy Pattern"),
    }
)
