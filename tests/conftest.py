import os

# Settings are read at import time; keep tests off Firestore and the network.
os.environ["USE_MOCK_DB"] = "true"
os.environ["AI_ENABLED"] = "false"
os.environ["SEED_FILE"] = ""
# Above the stock 100 so list limits must follow the setting
os.environ["NOTIFICATION_CAPACITY"] = "150"

import pytest
from fastapi.testclient import TestClient

from civix.models.issue import Issue, IssueCategory, Location, Urgency
from civix.models.technician import Technician, TechnicianStatus
from civix.services.assignment_decider import AssignmentDecider
from civix.services.classification import (
    CategoryClassifier,
    ClassificationProvider,
    ProviderResponse,
)
from civix.services.dispatch_engine import DispatchEngine, set_dispatch_engine
from civix.services.notification_service import (
    NotificationEmitter,
    NotificationInbox,
    set_notification_inbox,
)
from civix.services.store import MemoryDispatchStore, set_dispatch_store
from civix.services.technician_matcher import TechnicianMatcher


class StubProvider(ClassificationProvider):
    """External provider returning a canned answer."""

    def __init__(self, category=None, error=None, raises=None):
        self.category = category
        self.error = error
        self.raises = raises
        self.calls = 0

    def is_enabled(self):
        return True

    def get_model_info(self):
        return {"name": "stub", "version": "0"}

    def get_timeout_seconds(self):
        return 1.0

    def classify(self, title, description):
        self.calls += 1
        if self.raises:
            raise self.raises
        return ProviderResponse(category=self.category, model_name="stub", model_version="0", error=self.error)


def make_technician(tech_id="tech-1", **overrides) -> Technician:
    data = {
        "name": f"Technician {tech_id}",
        "specialization": "Electrical / street lighting",
        "status": TechnicianStatus.ACTIVE,
        "open_tickets": 1,
        "total_resolved": 30,
        "rating": 4.5,
    }
    data.update(overrides)
    return Technician(id=tech_id, **data)


def make_issue(issue_id="issue-1", **overrides) -> Issue:
    data = {
        "title": "Street light not working",
        "description": "light out for 3 days",
        "category": IssueCategory.OTHER,
        "urgency": Urgency.HIGH,
        "location": Location(latitude=18.52, longitude=73.85, address="FC Road"),
    }
    data.update(overrides)
    return Issue(id=issue_id, **data)


@pytest.fixture
def store():
    return MemoryDispatchStore()


@pytest.fixture
def inbox():
    return NotificationInbox(capacity=100, retention_days=30)


@pytest.fixture
def classifier():
    return CategoryClassifier(external_provider=None, keyword_confidence=0.5, external_confidence=0.6)


@pytest.fixture
def emitter(inbox):
    return NotificationEmitter(inbox, notify_on_assignment=False)


@pytest.fixture
def engine(store, classifier, emitter):
    return DispatchEngine(
        store=store,
        classifier=classifier,
        matcher=TechnicianMatcher(store),
        decider=AssignmentDecider(store, confidence_threshold=0.9),
        emitter=emitter,
    )


@pytest.fixture
def client(store, inbox, engine):
    from civix.main import app

    set_dispatch_store(store)
    set_notification_inbox(inbox)
    set_dispatch_engine(engine)
    yield TestClient(app)
    set_dispatch_engine(None)
    set_notification_inbox(None)
    set_dispatch_store(None)
