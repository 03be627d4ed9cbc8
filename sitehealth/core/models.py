"""Shared data models for the probe engine."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit


# ── Target ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Target:
    """The URL under analysis, resolved once per run."""
    url: str
    resolved_url: str
    hostname: str
    scheme: str
    reachable: bool = True
    netloc: str = ""

    @property
    def origin(self) -> str:
        return f"{self.scheme}://{self.netloc or self.hostname}"

    @property
    def port(self) -> Optional[int]:
        """Explicit port of the resolved URL, None for the scheme default."""
        try:
            return urlsplit(self.resolved_url).port
        except ValueError:
            return None


# ── Evidence ───────────────────────────────────────────────────

@dataclass(frozen=True)
class HeaderEvidence:
    url: str
    status_code: int
    headers: Dict[str, List[str]] = field(default_factory=dict)

    def values(self, name: str) -> List[str]:
        return self.headers.get(name.lower(), [])


@dataclass(frozen=True)
class StatusEvidence:
    url: str
    status_code: int


@dataclass(frozen=True)
class CertEvidence:
    hostname: str
    valid_to: datetime


@dataclass(frozen=True)
class GradeEvidence:
    hostname: str
    grade: str


@dataclass(frozen=True)
class HtmlEvidence:
    url: str
    html: str


@dataclass(frozen=True)
class TextEvidence:
    url: str
    text: str


@dataclass(frozen=True)
class UrlEvidence:
    requested: str
    final_url: str


@dataclass(frozen=True)
class Absent:
    """Acquisition failed; *reason* says why."""
    reason: str = ""


# ── Verdicts ───────────────────────────────────────────────────

class Status(str, Enum):
    PASS = "true"
    FAIL = "false"
    INDETERMINATE = "undecisive"

    @classmethod
    def of(cls, cond: bool) -> "Status":
        return cls.PASS if cond else cls.FAIL


@dataclass
class Verdict:
    """A single diagnostic entry."""
    title: str
    group: str
    status: Status
    description: str
    weight: Optional[int] = None
    raw_value: Any = None

    @property
    def passed(self) -> bool:
        return self.status is Status.PASS

    def __str__(self):
        return f"[{self.status.name}] {self.group} / {self.title}"


@dataclass
class DiagnosticReport:
    passed: List[Verdict] = field(default_factory=list)
    failed: List[Verdict] = field(default_factory=list)
    indeterminate: List[Verdict] = field(default_factory=list)
    score: Optional[int] = None

    @property
    def verdicts(self) -> List[Verdict]:
        return self.passed + self.failed + self.indeterminate
