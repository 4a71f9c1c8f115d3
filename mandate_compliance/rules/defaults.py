"""
Built-in rule tables used when no rule file is configured.

Kept as plain dict records so they go through exactly the same parsing and
validation as a JSON rule file.
"""

from __future__ import annotations

from typing import Any

# ── Request classification ───────────────────────────────
# Evaluated in ascending priority; first keyword hit wins.
DEFAULT_CLASSIFICATION_RULES: list[dict[str, Any]] = [
    {
        "category": "SECURITY",
        "priority": 10,
        "keywords": [
            "security",
            "vulnerab",
            "exploit",
            "xss",
            "csrf",
            "sql injection",
            "penetration test",
            "cve-",
        ],
    },
    {
        "category": "DEBUG",
        "priority": 20,
        "keywords": [
            "fix the",
            "fix a ",
            "fixing",
            "bug",
            "debug",
            "error",
            "broken",
            "crash",
            "not working",
            "doesn't work",
            "stack trace",
            "failing",
        ],
    },
    {
        "category": "REFACTOR",
        "priority": 30,
        "keywords": [
            "refactor",
            "clean up",
            "cleanup",
            "restructure",
            "simplify",
            "reorganize",
            "technical debt",
        ],
    },
    {
        "category": "PERFORMANCE",
        "priority": 40,
        "keywords": [
            "slow",
            "performance",
            "optimiz",
            "optimis",
            "speed up",
            "latency",
            "memory leak",
        ],
    },
    {
        "category": "TESTING",
        "priority": 50,
        "keywords": [
            "unit test",
            "integration test",
            "test coverage",
            "write tests",
            "add tests",
            "e2e",
        ],
    },
    {
        "category": "DOCUMENTATION",
        "priority": 60,
        "keywords": ["document", "readme", "docstring", "changelog"],
    },
    # Catch-all: no keywords, always evaluated last
    {"category": "NEW_FEATURE", "priority": 1000, "keywords": []},
]


# ── Mandates ─────────────────────────────────────────────
# Empty trigger_keywords = always on.
DEFAULT_MANDATES: list[dict[str, Any]] = [
    # Always-on
    {
        "id": "no_hardcoded_secrets",
        "description": "Secrets come from environment or a secret manager, never source code.",
        "severity": "CRITICAL",
        "trigger_keywords": [],
        "violation_patterns": [
            "hardcoded api key",
            "hardcode the api key",
            "hardcoded password",
            "hardcode credentials",
            "commit the .env",
            r"re:(api[_-]?key|secret|token)\s*[:=]\s*['\"][a-z0-9_\-]{16,}['\"]",
        ],
        "required_reference_tokens": [],
    },
    {
        "id": "input_validation",
        "description": "All external input is validated before use.",
        "severity": "HIGH",
        "trigger_keywords": [],
        "violation_patterns": [],
        "required_reference_tokens": ["validat", "sanitiz", "schema"],
    },
    {
        "id": "error_handling",
        "description": "Failure paths are handled explicitly.",
        "severity": "MEDIUM",
        "trigger_keywords": [],
        "violation_patterns": ["swallow the error", "ignore all errors", "empty catch block"],
        "required_reference_tokens": [
            "error handling",
            "handle errors",
            "try/catch",
            "try/except",
            "exception",
        ],
    },
    {
        "id": "testing_required",
        "description": "Every change ships with tests.",
        "severity": "MEDIUM",
        "trigger_keywords": [],
        "violation_patterns": ["skip the tests", "no tests needed"],
        "required_reference_tokens": ["test"],
    },
    {
        "id": "documentation_required",
        "description": "Public behaviour is documented.",
        "severity": "LOW",
        "trigger_keywords": [],
        "violation_patterns": [],
        "required_reference_tokens": ["document", "docstring", "readme", "comment"],
    },
    # Authentication
    {
        "id": "password_hashing",
        "description": "Passwords are hashed with bcrypt, argon2 or scrypt.",
        "severity": "CRITICAL",
        "trigger_keywords": ["authenticat", "password", "login", "sign up", "signup", "register"],
        "violation_patterns": [
            "plaintext",
            "plain text password",
            "hash passwords with md5",
            "hash passwords with sha1",
            "base64 encode the password",
        ],
        "required_reference_tokens": ["bcrypt", "argon2", "scrypt"],
    },
    {
        "id": "session_security",
        "description": "Sessions use httpOnly secure cookies with an expiry.",
        "severity": "HIGH",
        "trigger_keywords": ["authenticat", "login", "logout", "session"],
        "violation_patterns": [
            "store the jwt in localstorage",
            "store token in localstorage",
            "sessions never expire",
        ],
        "required_reference_tokens": [
            "httponly",
            "secure cookie",
            "session expiration",
            "session timeout",
            "token expiry",
        ],
    },
    {
        "id": "rate_limiting",
        "description": "Public and authentication endpoints are rate limited.",
        "severity": "HIGH",
        "trigger_keywords": ["authenticat", "login", "password reset", "api endpoint", "rest api", "public api", "endpoint"],
        "violation_patterns": [],
        "required_reference_tokens": ["rate limit", "rate-limit", "throttl"],
    },
    # Data access
    {
        "id": "sql_injection_prevention",
        "description": "Queries are parameterized; user input is never concatenated into SQL.",
        "severity": "CRITICAL",
        "trigger_keywords": ["database", "sql", "query", "postgres", "mysql", "sqlite"],
        "violation_patterns": [
            "concatenate user input",
            "string concatenation in sql",
            r"re:select\s.+\+\s*(req|request|user)",
        ],
        "required_reference_tokens": [
            "parameterized",
            "parametrized",
            "prepared statement",
            "bind parameter",
            "query builder",
        ],
    },
    {
        "id": "data_privacy",
        "description": "Personal data is encrypted and never written to logs.",
        "severity": "HIGH",
        "trigger_keywords": ["personal data", "user data", "pii", "gdpr", "profile"],
        "violation_patterns": ["log the password", "log personal data", "log full credit card"],
        "required_reference_tokens": ["encrypt", "gdpr", "data retention", "anonymi"],
    },
    # Files and payments
    {
        "id": "file_upload_safety",
        "description": "Uploads are checked for type and size.",
        "severity": "HIGH",
        "trigger_keywords": ["upload", "attachment"],
        "violation_patterns": ["accept any file"],
        "required_reference_tokens": ["file type", "mime", "size limit", "max file size"],
    },
    {
        "id": "payment_data_protection",
        "description": "Card data is tokenized by a PCI-compliant provider and never stored.",
        "severity": "CRITICAL",
        "trigger_keywords": ["payment", "checkout", "credit card", "billing", "subscription"],
        "violation_patterns": [
            "store card number",
            "store the card number",
            "store credit card",
            "store cvv",
            "save cvv",
        ],
        "required_reference_tokens": ["stripe", "tokeniz", "pci"],
    },
    # Frontend
    {
        "id": "accessibility",
        "description": "User interfaces meet WCAG accessibility guidelines.",
        "severity": "MEDIUM",
        "trigger_keywords": ["frontend", "user interface", "component", "screen", "modal", "button"],
        "violation_patterns": [],
        "required_reference_tokens": ["aria", "accessib", "a11y", "wcag", "keyboard navigation"],
    },
]
