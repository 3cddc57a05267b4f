"""
SY0-701 exam domains.

The five domains are a closed set with fixed exam weights. Sampling targets
for flashcards and questions are derived from those weights, and topic
inference maps free text onto a domain via an ordered keyword rule table.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Domain(str, Enum):
    """Security+ SY0-701 exam domains."""

    GENERAL_CONCEPTS = "1"
    THREATS = "2"
    ARCHITECTURE = "3"
    OPERATIONS = "4"
    GOVERNANCE = "5"


DOMAIN_IDS: tuple[str, ...] = tuple(d.value for d in Domain)

DOMAIN_NAMES: dict[str, str] = {
    "1": "General Security Concepts",
    "2": "Threats, Vulnerabilities, and Mitigations",
    "3": "Security Architecture",
    "4": "Operations and Incident Response",
    "5": "Governance, Risk, and Compliance",
}

# Exam blueprint weights (percent)
EXAM_WEIGHTS: dict[str, int] = {"1": 12, "2": 24, "3": 13, "4": 29, "5": 22}

# Per-domain sample sizes
FLASHCARD_TARGETS: dict[str, int] = {"1": 36, "2": 72, "3": 39, "4": 87, "5": 66}
FLASHCARD_TOTAL = 300
QUESTION_TARGETS: dict[str, int] = {"1": 35, "2": 71, "3": 38, "4": 86, "5": 65}
QUESTION_TOTAL = 295

# Order in which under-filled flashcard quotas are topped up
FLASHCARD_FILL_ORDER: tuple[str, ...] = ("4", "2", "5", "3", "1")

DEFAULT_DOMAIN = Domain.GENERAL_CONCEPTS.value

_DOMAIN_ID = re.compile(r"^[1-5]$")
_FIRST_DIGIT = re.compile(r"(\d)")


@dataclass(frozen=True)
class DomainRule:
    """Keyword rule: text matching ``pattern`` belongs to ``domain``."""

    domain: str
    pattern: re.Pattern

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def _keywords(*terms: str) -> re.Pattern:
    return re.compile(r"\b(" + "|".join(terms) + r")\b", re.IGNORECASE)


# Checked in order: 2, 3, 4, 5, then 1. Domain 1 has the most generic
# vocabulary so it is tried last and is also the default.
DOMAIN_RULES: list[DomainRule] = [
    DomainRule("2", _keywords(
        "phishing", "ransomware", "malware", "trojan", "worm", "virus", "reconnaissance",
        "vulnerability", "exploit", "social engineering", "on-path", "man-in-the-middle",
        "SQL injection", "XSS", "CSRF", "threat actor", "organized crime", "nation-state",
        "brute force", "DDoS", "keylogger", "honeypot", "watering hole", "OSINT",
        "penetration test", "default credentials", "buffer overflow", "replay attack",
        "DNS poisoning", "smishing", "hacktivist", r"side.?loading", "jailbreak",
        "misinformation", "resource consumption", "rogue access", "collision", "enumeration",
        "insecure protocols", "misconfiguration", "open permissions", "partially known",
        "exfiltration", "embedded system", "escape", "end-of-life", "spoofing",
        "credential stuffing", "privilege escalation", "backdoor", "rootkit", "spyware",
        "adware", "botnet", "attack", "attacker", "blocked", "intercept", "impersonation",
        "circumvent", "malicious", "inject", "script",
    )),
    DomainRule("3", _keywords(
        "DMARC", "SPF", "DKIM", "firewall", "network security", "identity", "authentication",
        "federation", "LDAP", "RADIUS", "Kerberos", "MFA", "SSO", "SAML", "VPN", "NAT",
        "segmentation", "VLAN", "SASE", r"802\.1X", "IPsec", "WPA3", "WAF", "load balancer",
        "jump server", "containerization", "blockchain", "digital signature", "OCSP", "HSM",
        "secure enclave", "TPM", "wireless", "biometric", "AAA", "something you know",
        "something you have", "air gap", "fail open", "HTTPS", "COPE", "BYOD", "smart card",
        "development lifecycle", "posture assessment", r"record.?level", "journaling",
        "traffic flow", "port number", "protected segment", "access point",
    )),
    DomainRule("4", _keywords(
        "incident response", "forensics", "SIEM", "SOAR", "monitoring", "recovery", "backup",
        "root cause", "MTBF", "MTTR", "RTO", "RPO", "BIA", "IOC", "containment", "escalation",
        "tabletop exercise", "chain of custody", "alert tuning", "NetFlow", "hardening",
        "patch", "remediation", "onboarding", "offboarding", "MDM", "antivirus", "quarantine",
        "HIPS", "file integrity", "FIM", "DLP", "backout plan", "disconnect", "disabling",
        "account", "false negative", "disaster recovery", "outage", "breach",
        "configuration enforcement", "availability", "system availability", "emergency",
        "dispatching", "continuity", r"alternative.*process", "log entries", "detect",
        "validation", "patching", "vulnerability scan",
    )),
    DomainRule("5", _keywords(
        "policy", "compliance", "governance", "audit", "regulation", "risk management", "MOA",
        "SLA", "NDA", "regulated", "data owner", "data custodian", "due care", "risk appetite",
        "acceptance", "self-assessment", "responsibility matrix", "conflict of interest",
        "data sovereignty", "privacy", "user training", "shadow IT", "SLE", "ALE", "ARO", "EF",
        "exposure factor", "uptime", "automation", "formal document", "partnership",
        "governmental", "disclosure",
    )),
    DomainRule("1", _keywords(
        "CIA", "confidentiality", "integrity", "availability", "security controls", "asset",
        "zero trust", "physical security", "obfuscation", "hashing", "encryption", "symmetric",
        "asymmetric", "PKI", "non-repudiation", "deterrent", "detective", "preventive",
        "corrective", "compensating", "masking", "tokenization", "salting", "least privilege",
        "discretionary", "access control vestibule", "change management", "gap analysis",
        "create hash", "complexity", r"verifies.*file", "mitigate", "race condition",
        "removable media", "trustworthiness",
    )),
]


def as_domain_id(value: Any) -> str | None:
    """Return ``value`` as a domain id ("1".."5") if it is one, else None."""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text if _DOMAIN_ID.match(text) else None


def infer_domain(question: str, answer: str, explicit: Any = None) -> str:
    """
    Assign a domain to a card.

    An explicit domain in 1..5 always wins. Otherwise the first keyword rule
    matching "question answer" decides, defaulting to domain 1.
    """
    domain = as_domain_id(explicit)
    if domain:
        return domain

    text = f"{question or ''} {answer or ''}"
    for rule in DOMAIN_RULES:
        if rule.matches(text):
            return rule.domain
    return DEFAULT_DOMAIN


def domain_from_name(name: Any) -> str | None:
    """Domain id from a display name such as 'Domain 3: Security Architecture'."""
    match = _FIRST_DIGIT.search(str(name or ""))
    return match.group(1) if match else None


def domain_name(domain: str) -> str:
    return DOMAIN_NAMES.get(str(domain), "All Domains")
