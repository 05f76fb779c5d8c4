import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure predictable environment variables for tests before importing the app.
BASE_DIR = Path(__file__).resolve().parents[1]

if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

os.environ["FIREBASE_CREDENTIALS_FILE"] = ""
os.environ.setdefault("REQUIRED_APPROVALS", "2")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import alumni_app.main as main  # noqa: E402  (import after env vars are set)
from alumni_app.database import get_member_store  # noqa: E402
from alumni_app.services.email_services import get_mailer  # noqa: E402
from alumni_app.services.firebase_service import get_token_verifier  # noqa: E402
from alumni_app.services.spaces_service import get_document_storage  # noqa: E402
from fakes import InMemoryMemberStore, RecordingMailer, fake_verify_token, make_storage  # noqa: E402


@pytest.fixture()
def store():
    return InMemoryMemberStore()


@pytest.fixture()
def storage():
    return make_storage()


@pytest.fixture()
def mailer():
    return RecordingMailer()


@pytest.fixture()
def client(store, storage, mailer):
    """TestClient wired to in-memory Firestore, storage and SMTP doubles."""
    overrides = {
        get_member_store: lambda: store,
        get_document_storage: lambda: storage,
        get_mailer: lambda: mailer,
        get_token_verifier: lambda: fake_verify_token,
    }
    main.app.dependency_overrides.update(overrides)
    with TestClient(main.app) as test_client:
        yield test_client
    for dependency in overrides:
        main.app.dependency_overrides.pop(dependency, None)
