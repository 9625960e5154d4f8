"""Building blocks shared by every pre-flight check.

A check looks at one aspect of an audit file against the project registries
and reports ``ValidationIssue`` values. Checks never raise for bad input and
never modify what they inspect.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from siteaudit.core.config import AuditConfig, ProjectConfig
    from siteaudit.scheduling.registry import Registries


class ValidationSeverity(str, Enum):
    """How much an issue matters for planning.

    ERROR blocks ``siteaudit plan``; WARNING means the audit may cover less
    than intended; INFO only explains a scheduling consequence.
    """

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


SEVERITY_ORDER = {
    severity: rank for rank, severity in enumerate(ValidationSeverity)
}


@dataclass
class ValidationIssue:
    """One finding about an audit file.

    ``line`` points into the audit YAML when the offending value can be
    located; ``metadata`` carries ids for JSON consumers.
    """

    check_id: str
    severity: ValidationSeverity
    message: str
    line: int | None = None
    context: str | None = None
    suggestion: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def location(self) -> str:
        return f"Line {self.line}: " if self.line else ""

    def format_short(self) -> str:
        return f"[{self.check_id}] {self.location}{self.message}"

    def format_full(self) -> str:
        parts = [self.format_short()]
        parts += [
            f"         {label}: {value}"
            for label, value in (("Context", self.context), ("Suggestion", self.suggestion))
            if value
        ]
        return "\n".join(parts)


class ValidationCheck(Protocol):
    """Interface every pre-flight check implements.

    Unknown test ids belong to A003; other checks skip them silently.
    """

    @property
    def check_id(self) -> str: ...

    @property
    def severity(self) -> ValidationSeverity: ...

    @property
    def description(self) -> str: ...

    def check(
        self,
        audit: AuditConfig,
        project: ProjectConfig,
        registries: Registries,
        raw_yaml: str,
    ) -> list[ValidationIssue]:
        """Inspect ``audit``; ``raw_yaml`` is only used to locate lines and may be empty."""
        ...
