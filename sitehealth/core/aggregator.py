"""Partition verdicts into reports and render them for the caller."""

from typing import Any, Dict, Iterable, List

from sitehealth.core.models import DiagnosticReport, Status, Verdict


SEO_SECTIONS = ("basic", "advanced")

_GRADES = [
    (95, "A+"), (90, "A"), (85, "A-"),
    (80, "B+"), (75, "B"), (70, "B-"),
    (65, "C+"), (60, "C"), (55, "C-"),
    (50, "D+"), (45, "D"), (40, "D-"),
]


def grade_for(score: int) -> str:
    for threshold, letter in _GRADES:
        if score >= threshold:
            return letter
    return "F"


def rating_for(score: int) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 50:
        return "Good"
    return "Bad"


def aggregate(verdicts: Iterable[Verdict], scored: bool = False) -> DiagnosticReport:
    report = DiagnosticReport()
    for v in verdicts:
        if v.status is Status.PASS:
            report.passed.append(v)
        elif v.status is Status.FAIL:
            report.failed.append(v)
        else:
            report.indeterminate.append(v)
    if scored:
        report.score = sum(v.weight or 0 for v in report.passed)
    return report


def _security_item(v: Verdict) -> Dict[str, Any]:
    return {
        "group": v.group,
        "title": v.title,
        "status": "Excellent" if v.passed else "Needs Attention",
        "description": v.description,
        "weight": v.weight,
        "details": v.raw_value,
    }


def security_dict(report: DiagnosticReport) -> Dict[str, Any]:
    score = report.score or 0
    return {
        "passed": [_security_item(v) for v in report.passed],
        "failed": [_security_item(v) for v in report.failed],
        "score": score,
        "grade": grade_for(score),
        "rating": rating_for(score),
    }


def seo_sections(verdicts: List[Verdict]) -> Dict[str, Dict[str, Dict[str, Any]]]:
    """Render SEO verdicts as {section: {key: {value, message, valid}}}, in input order."""
    out: Dict[str, Dict[str, Dict[str, Any]]] = {name: {} for name in SEO_SECTIONS}
    for v in verdicts:
        out.setdefault(v.group, {})[v.title] = {
            "value": v.raw_value,
            "message": v.description,
            "valid": v.status.value,
        }
    return out
