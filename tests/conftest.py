"""Pytest configuration and fixtures for specshard tests."""

import pytest

SAMPLE_SPEC = """\
# Payment Service Spec

Overview of the payment service.

## Authentication

- REQ-001: The system MUST authenticate every request.
  Scenario: Valid token
    Given a valid token
    When a request is made
    Then it is accepted

## Payments

- REQ-002: The system SHALL process payments. See the Authentication section.

Scenario: Successful payment
  Given an authenticated user
  When they pay
  Then the payment is recorded

## Reporting

- REQ-003: The system SHOULD export reports for REQ-002 payments.
"""


@pytest.fixture
def sample_spec() -> str:
    """Small spec with sections, requirements and scenarios."""
    return SAMPLE_SPEC


@pytest.fixture
def unstructured_spec() -> str:
    """Spec with no headings, requirements or scenarios (~10,000 tokens)."""
    paragraph = "Lorem ipsum dolor sit amet, consectetur adipiscing elit. " * 7
    return "\n\n".join(paragraph.strip() for _ in range(100))
