"""
Runtime configuration for the probe engine.

Defaults can be overridden through SITEHEALTH_* environment variables,
optionally read from a .env file in the working directory.
"""

import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Config:
    # HTTP
    timeout: float = 10.0
    max_redirects: int = 5
    verify_tls: bool = True
    user_agent: str = "Mozilla/5.0 (compatible; SiteHealth/1.0)"

    # TLS handshake + grading service
    tls_port: int = 443
    tls_timeout: float = 10.0
    grading_api_url: str = "https://api.ssllabs.com/api/v3/analyze"
    grade_poll_interval: float = 4.0
    grade_poll_budget: float = 100.0
    passing_grades: tuple = ("A+", "A", "B")

    # Exposure probes
    admin_path: str = "/wp-login.php"
    sensitive_path: str = "/wp-config.php"

    def override(self, **changes) -> "Config":
        """Copy with the non-None *changes* applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()
        base = cls()
        return cls(
            timeout=float(os.getenv("SITEHEALTH_TIMEOUT", base.timeout)),
            max_redirects=int(os.getenv("SITEHEALTH_MAX_REDIRECTS", base.max_redirects)),
            verify_tls=_env_bool("SITEHEALTH_VERIFY_TLS", base.verify_tls),
            user_agent=os.getenv("SITEHEALTH_USER_AGENT", base.user_agent),
            tls_timeout=float(os.getenv("SITEHEALTH_TLS_TIMEOUT", base.tls_timeout)),
            grading_api_url=os.getenv("SITEHEALTH_GRADING_API_URL", base.grading_api_url),
            grade_poll_interval=float(os.getenv("SITEHEALTH_GRADE_POLL_INTERVAL",
                                                base.grade_poll_interval)),
            grade_poll_budget=float(os.getenv("SITEHEALTH_GRADE_POLL_BUDGET",
                                              base.grade_poll_budget)),
            admin_path=os.getenv("SITEHEALTH_ADMIN_PATH", base.admin_path),
            sensitive_path=os.getenv("SITEHEALTH_SENSITIVE_PATH", base.sensitive_path),
        )
