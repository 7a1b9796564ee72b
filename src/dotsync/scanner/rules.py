"""Built-in detection rules.

The table is evaluated in declaration order. Content rules are matched
against the full file text, path rules against the file's basename.
"""

from __future__ import annotations

from dotsync.scanner.types import DetectionRule, RuleTarget, Severity

BLOCK = Severity.BLOCK
WARN = Severity.WARN

CONTENT_RULES: tuple[DetectionRule, ...] = (
    DetectionRule(
        rule_id="private-key-header",
        category="private-key",
        pattern=r"-----BEGIN (?:[A-Z0-9]+ )*PRIVATE KEY(?: BLOCK)?-----",
        description="PEM/PGP private key header",
    ),
    DetectionRule(
        rule_id="aws-access-key-id",
        category="aws-access-key",
        pattern=r"\bAKIA[0-9A-Z]{16}\b",
        description="AWS access key id",
    ),
    DetectionRule(
        rule_id="aws-secret-access-key",
        category="aws-secret-key",
        pattern=r"aws_?secret_?access_?key\s*[:=]\s*['\"]?[A-Za-z0-9/+=]{40}",
        ignore_case=True,
        description="AWS secret access key assignment",
    ),
    DetectionRule(
        rule_id="api-key-assignment",
        category="api-key",
        pattern=r"(?:api[_-]?key|apikey|access[_-]?token|api[_-]?token)\s*[:=]\s*['\"]?[A-Za-z0-9_\-]{16,}",
        ignore_case=True,
        description="API key or token assigned to a key-like field",
    ),
    DetectionRule(
        rule_id="github-token",
        category="github-token",
        pattern=r"\b(?:gh[pousr]_[A-Za-z0-9]{36,}|github_pat_[A-Za-z0-9_]{22,})",
        description="GitHub personal access or app token",
    ),
    DetectionRule(
        rule_id="slack-token",
        category="slack-token",
        pattern=r"\bxox[abprs]-[A-Za-z0-9-]{10,}",
        description="Slack API token",
    ),
    DetectionRule(
        rule_id="password-assignment",
        category="password",
        pattern=r"(?:password|passwd|pwd)\s*[:=]\s*['\"]?[^'\"\s]{8,}",
        ignore_case=True,
        description="Password value of at least 8 characters",
    ),
    DetectionRule(
        rule_id="database-url-credentials",
        category="database-url",
        pattern=(
            r"(?:mongodb(?:\+srv)?|postgres(?:ql)?|mysql|mariadb|mssql|redis|rediss|amqp)"
            r"://[^\s:/@]{1,256}:[^\s@/]{1,256}@"
        ),
        ignore_case=True,
        description="Database connection string with embedded credentials",
    ),
    DetectionRule(
        rule_id="url-credentials",
        category="url-credentials",
        pattern=r"\b[a-z][a-z0-9+.-]{0,31}://[^\s:/@'\"]{1,256}:[^\s@/'\"]{1,256}@[^\s/'\"]{1,253}",
        ignore_case=True,
        description="URL with user:password in the authority",
    ),
    DetectionRule(
        rule_id="jwt",
        category="jwt",
        pattern=r"\beyJ[A-Za-z0-9_-]{10,512}\.[A-Za-z0-9_-]{10,8192}\.[A-Za-z0-9_-]{10,1024}",
        description="JSON Web Token",
    ),
    DetectionRule(
        rule_id="generic-secret-assignment",
        category="generic-secret",
        pattern=r"\b(?:client_secret|auth_token|secret_key|secret)\s*[:=]\s*['\"]?[A-Za-z0-9_\-/+=.]{8,}",
        ignore_case=True,
        description="secret, client_secret or auth_token key/value pair",
    ),
    DetectionRule(
        rule_id="credit-card-number",
        category="credit-card",
        pattern=r"\b(?:\d{4}[ -]?){3}\d{4}\b",
        description="16-digit card-shaped number",
    ),
    DetectionRule(
        rule_id="email-field",
        category="email",
        pattern=r"\be-?mail\s*[:=]\s*['\"]?[A-Za-z0-9._%+-]{1,64}@[A-Za-z0-9.-]{1,253}\.[A-Za-z]{2,24}",
        severity=WARN,
        ignore_case=True,
        description="Email address assigned to an email field",
    ),
    DetectionRule(
        rule_id="phone-field",
        category="phone",
        pattern=r"\b(?:phone|mobile|tel)\s*[:=]\s*['\"]?\+?\d[\d ().-]{7,24}\d",
        severity=WARN,
        ignore_case=True,
        description="Phone number assigned to a phone field",
    ),
    DetectionRule(
        rule_id="private-ipv4",
        category="internal-ip",
        pattern=(
            r"\b(?:10\.\d{1,3}\.\d{1,3}\.\d{1,3}"
            r"|172\.(?:1[6-9]|2\d|3[01])\.\d{1,3}\.\d{1,3}"
            r"|192\.168\.\d{1,3}\.\d{1,3})\b"
        ),
        severity=WARN,
        description="RFC 1918 private IPv4 address",
    ),
)

PATH_RULES: tuple[DetectionRule, ...] = (
    DetectionRule(
        rule_id="key-material-extension",
        category="sensitive-extension",
        pattern=r"\.(?:pem|key|p12|pfx|jks|keystore|crt|cer|der|p8|ppk|gpg|asc)$",
        severity=WARN,
        target=RuleTarget.PATH,
        ignore_case=True,
        description="Extension used for keys, certificates or keystores",
    ),
    DetectionRule(
        rule_id="private-key-filename",
        category="sensitive-filename",
        pattern=r"^(?:id_(?:rsa|dsa|ecdsa|ed25519)|\.netrc|\.pgpass|\.htpasswd)$",
        severity=WARN,
        target=RuleTarget.PATH,
        description="Well-known private key or credential store filename",
    ),
    DetectionRule(
        rule_id="sensitive-name-keyword",
        category="sensitive-filename",
        pattern=r"(?:secret|password|passwd|credential|token)",
        severity=WARN,
        target=RuleTarget.PATH,
        ignore_case=True,
        description="Filename mentions secrets, passwords, credentials or tokens",
    ),
    DetectionRule(
        rule_id="env-file",
        category="env-file",
        pattern=r"^(?:\.env(?:\.(?!(?:example|sample|template)$)[^/]+)?|[^/]+\.env)$",
        severity=WARN,
        target=RuleTarget.PATH,
        ignore_case=True,
        description="Environment definition file; review manually",
    ),
)

DEFAULT_RULES: tuple[DetectionRule, ...] = CONTENT_RULES + PATH_RULES
