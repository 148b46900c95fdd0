"""
Pytest configuration and shared fixtures for mimbook tests

Provides incident, roster and vendor fixtures plus the matching YAML documents.
"""

import pytest

from mimbook.config import MimbookConfig, set_config
from mimbook.models import Incident, Stakeholder, VendorEscalation


def make_incident(**overrides) -> Incident:
    """Incident with realistic defaults; any field can be overridden"""
    fields = {
        "number": "INC0001",
        "title": "Orders database unresponsive",
        "severity": "1 - Critical",
        "priority": "1 - Critical",
        "state": "In Progress",
        "category": "Database",
        "subcategory": "Oracle",
        "affected_service": "Order Management",
        "affected_ci": "db-01",
        "environment": "Production",
        "region": "us-east-1",
        "business_impact": "Customers cannot place orders",
        "opened_at": "2026-03-01T14:05:00Z",
        "detected_at": "2026-03-01T14:02:00Z",
        "assigned_to": "Alice Chen",
        "assignment_group": "DBA On-Call",
        "caller_id": "monitoring",
        "short_description": "Orders DB down",
        "description": "Connection timeouts from all application nodes",
        "change_related": False,
    }
    fields.update(overrides)
    return Incident(**fields)


def make_stakeholder(name: str, role: str, level: int, notify: bool = False, **overrides) -> Stakeholder:
    handle = name.lower().replace(" ", ".")
    fields = {
        "name": name,
        "role": role,
        "title": "Engineer",
        "team": "Operations",
        "email": f"{handle}@example.com",
        "phone": "+1-555-0100",
        "slack": f"@{handle}",
        "escalation_level": level,
        "notify_immediately": notify,
    }
    fields.update(overrides)
    return Stakeholder(**fields)


@pytest.fixture
def incident():
    """Database Sev1 incident INC0001"""
    return make_incident()


@pytest.fixture
def alice():
    return make_stakeholder("Alice", "Incident Commander", 1, notify=True)


@pytest.fixture
def bob():
    return make_stakeholder("Bob", "Technical Lead", 1, notify=True)


@pytest.fixture
def tiered_stakeholders():
    """A: level 1 + notify, B: level 2, C: level 3"""
    return [
        make_stakeholder(
            "Ann",
            "Incident Commander",
            1,
            notify=True,
            bridge_url="https://zoom.example.com/j/123",
            bridge_phone="+1-555-0199",
        ),
        make_stakeholder("Ben", "Communications Lead", 2, team="Communications"),
        make_stakeholder("Cat", "Executive Sponsor", 3, team="Leadership"),
    ]


@pytest.fixture
def vendors():
    return [
        VendorEscalation(
            vendor="Oracle Support",
            account_number="CSI-12345",
            support_url="https://support.oracle.com",
            phone="+1-800-223-1711",
            severity_mapping="Severity 1",
        )
    ]


@pytest.fixture(autouse=True)
def default_config(tmp_path):
    """Isolate every test from any mimbook.yml or .env in the working tree"""
    config = MimbookConfig()
    config.output.directory = str(tmp_path / "output")
    set_config(config)
    yield config
    set_config(None)


INCIDENT_YAML = """\
incident:
  number: INC0078342
  title: Checkout API returning 500s
  severity: 1 - Critical
  priority: 1 - Critical
  state: In Progress
  category: Application
  subcategory: API
  affected_service: Checkout
  affected_ci: checkout-api-prod
  environment: Production
  region: eu-west-1
  business_impact: Customers cannot complete purchases
  opened_at: "2026-03-01T09:00:00Z"
  detected_at: "2026-03-01T08:57:00Z"
  assigned_to: Dana Ruiz
  assignment_group: Checkout SRE
  caller_id: pagerduty
  short_description: Checkout 500s
  description: Error rate above 40% since 08:55 UTC
  change_related: true
"""

STAKEHOLDERS_YAML = """\
stakeholders:
  - name: Dana Ruiz
    role: Incident Commander
    title: SRE Manager
    team: Checkout SRE
    email: dana@example.com
    phone: "+1-555-0101"
    slack: "@dana"
    escalation_level: 1
    notify_immediately: true
    bridge_url: https://zoom.example.com/j/999
    bridge_phone: "+1-555-0999"
  - name: Eli Park
    role: Technical Lead
    title: Staff Engineer
    team: Checkout
    email: eli@example.com
    phone: "+1-555-0102"
    slack: "@eli"
    escalation_level: 1
  - name: Fay Moss
    role: Communications Lead
    title: Comms Manager
    team: Communications
    email: fay@example.com
    phone: "+1-555-0103"
    slack: "@fay"
    escalation_level: 2
vendor_escalations:
  - vendor: Payments Co
    account_number: PC-001
    support_url: https://support.payments.example.com
    phone: "+1-800-555-0000"
    severity_mapping: P1
"""


@pytest.fixture
def incident_yaml():
    return INCIDENT_YAML


@pytest.fixture
def stakeholders_yaml():
    return STAKEHOLDERS_YAML


@pytest.fixture
def input_files(tmp_path):
    """Incident and stakeholders YAML written to disk"""
    incident_file = tmp_path / "incident.yml"
    stakeholders_file = tmp_path / "stakeholders.yml"
    incident_file.write_text(INCIDENT_YAML, encoding="utf-8")
    stakeholders_file.write_text(STAKEHOLDERS_YAML, encoding="utf-8")
    return incident_file, stakeholders_file
