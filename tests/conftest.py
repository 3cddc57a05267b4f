"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def rng():
    """Seeded random source so sampling and shuffles are reproducible."""
    return random.Random(1234)


@pytest.fixture
def sample_corpus():
    """Provide a small raw corpus in the domains -> sections -> bullets shape."""
    return {
        "domains": [
            {
                "domain_num": 2,
                "name": "Threats, Vulnerabilities, and Mitigations",
                "sections": [
                    {
                        "section_num": "2.2",
                        "name": "Social Engineering",
                        "bullets": [
                            "Tailgating is following someone through a secure door.",
                            "Phishing - a social engineering attack that is delivered by email or text message.",
                            "Example overview of threats",
                        ],
                    },
                ],
            },
            {
                "domain_num": 1,
                "name": "General Security Concepts",
                "sections": [
                    {
                        "section_num": "1.2",
                        "name": "Zero Trust",
                        "bullets": [
                            "Non-repudiation - the assurance that a party cannot deny having performed an action.",
                            "Firewalls filter traffic between network zones and hosts.",
                        ],
                    },
                ],
            },
        ],
        "practice_questions": {
            "Domain 1: General Security Concepts": [
                {
                    "question": "Which principle prevents a sender from denying a message?",
                    "options": {"A": "Integrity", "B": "Non-repudiation", "C": "Availability", "D": "Obfuscation"},
                    "correct": "B",
                    "explanation": "Non-repudiation provides proof of origin.",
                },
            ],
        },
    }


@pytest.fixture
def sample_cards():
    """Provide a card array in the front/back shape."""
    return [
        {
            "front": "What is phishing?",
            "back": "Phishing is a social engineering attack delivered by email.",
            "tags": ["social-engineering"],
        },
        {
            "front": "What is a firewall?",
            "back": "A firewall filters network traffic according to a rule set.",
            "domain": "3",
        },
        {
            "front": "What is RTO?",
            "back": "Recovery time objective: how long a system may be down after an outage.",
        },
    ]


def make_card(i: int, domain: str) -> dict:
    """Build a distinct flashcard record for domain ``domain``."""
    return {
        "id": f"card-{domain}-{i}",
        "front": f"What is concept {domain}-{i}?",
        "back": f"Concept {domain}-{i} is a distinct definition used for domain {domain} testing.",
        "tags": ["security-plus", "sy0-701"],
        "domain": domain,
    }


@pytest.fixture
def card_pool():
    """Enough explicitly-tagged cards per domain to fill every flashcard quota."""
    counts = {"1": 40, "2": 80, "3": 45, "4": 95, "5": 70}
    return [make_card(i, d) for d, n in counts.items() for i in range(n)]
