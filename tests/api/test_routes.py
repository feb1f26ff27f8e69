import uuid
from datetime import datetime, timezone
from urllib.parse import unquote

import httpx
import pytest
from fastapi.testclient import TestClient

from mp3_download_service.app.use_cases.history_service import HistoryService
from mp3_download_service.app.use_cases.submission_service import SubmissionService
from mp3_download_service.app.utils.dependencies import (
    get_current_identity,
    get_file_delivery,
    get_history_service,
    get_submission_service,
    get_user_service,
)
from mp3_download_service.app.utils.file_utils import (
    FileDelivery,
    filename_from_content_disposition,
)
from mp3_download_service.app.utils.jwt_handler import create_access_token
from mp3_download_service.domain.models.download import DownloadRecord
from mp3_download_service.domain.models.identity import Identity
from mp3_download_service.infrastructure.database.session import get_db_session
from mp3_download_service.main import app

VIDEO_URL = "https://youtu.be/dQw4w9WgXcQ"
IDENTITY = Identity(uid=str(uuid.uuid4()), email="u1@example.com")


async def no_db_session():
    yield None


@pytest.fixture
def file_delivery(tmp_path):
    return FileDelivery(directory=str(tmp_path), release_delay=0)


@pytest.fixture
def client():
    app.dependency_overrides[get_db_session] = no_db_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def authenticated(client):
    app.dependency_overrides[get_current_identity] = lambda: IDENTITY
    return client


@pytest.fixture
def use_conversion(conversion_endpoint, download_repository, file_delivery):
    """Route submissions through a mocked conversion endpoint."""

    def _use(response):
        conversion_client, handler = conversion_endpoint(response)
        service = SubmissionService(
            conversion_client=conversion_client,
            download_repository=download_repository,
            file_delivery=file_delivery,
            allowed_hosts=["youtube.com", "youtu.be"],
        )
        app.dependency_overrides[get_submission_service] = lambda: service
        app.dependency_overrides[get_file_delivery] = lambda: file_delivery
        return handler

    return _use


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_download_returns_attachment_and_releases_file(
    authenticated, use_conversion, download_repository, tmp_path
):
    use_conversion(
        httpx.Response(
            200,
            content=b"ID3 audio",
            headers={"Content-Disposition": 'attachment; filename="Song Title.mp3"'},
        )
    )

    response = authenticated.post("/api/downloads", json={"url": VIDEO_URL})

    assert response.status_code == 200
    assert response.content == b"ID3 audio"
    disposition = response.headers["content-disposition"]
    assert disposition.startswith("attachment")
    assert filename_from_content_disposition(disposition) == "Song Title.mp3"
    assert response.headers["content-type"] == "audio/mpeg"
    assert unquote(response.headers["x-download-title"]) == "Song Title"
    assert download_repository.records[0].owner_id == IDENTITY.uid
    # The temporary file is released once the response has been sent
    assert list(tmp_path.iterdir()) == []


def test_download_rejects_foreign_url(authenticated, use_conversion):
    handler = use_conversion(httpx.Response(200, content=b""))

    response = authenticated.post(
        "/api/downloads", json={"url": "https://vimeo.com/76979871"}
    )

    assert response.status_code == 400
    assert handler.requests == []


def test_download_surfaces_remote_detail(authenticated, use_conversion):
    use_conversion(httpx.Response(500, json={"detail": "video unavailable"}))

    response = authenticated.post("/api/downloads", json={"url": VIDEO_URL})

    assert response.status_code == 502
    assert response.json() == {"detail": "video unavailable"}


def test_download_persistence_failure(
    authenticated, use_conversion, download_repository, tmp_path
):
    download_repository.fail = True
    use_conversion(httpx.Response(200, content=b"ID3 audio"))

    response = authenticated.post("/api/downloads", json={"url": VIDEO_URL})

    assert response.status_code == 500
    assert response.json()["detail"] == "Could not save the download to your history."
    assert list(tmp_path.iterdir()) == []


def test_download_requires_authentication(client):
    response = client.post("/api/downloads", json={"url": VIDEO_URL})

    assert response.status_code == 401


def test_history_lists_callers_records(authenticated, download_repository):
    now = datetime.now(timezone.utc)
    download_repository.records = [
        DownloadRecord(
            id=1, source_url=VIDEO_URL, title="mine", owner_id=IDENTITY.uid, created_at=now
        ),
        DownloadRecord(
            id=2, source_url=VIDEO_URL, title="theirs", owner_id="someone", created_at=now
        ),
    ]
    app.dependency_overrides[get_history_service] = lambda: HistoryService(
        download_repository
    )

    response = authenticated.get("/api/history")

    assert response.status_code == 200
    assert [r["title"] for r in response.json()] == ["mine"]


def test_history_failure_is_not_an_empty_list(authenticated, download_repository):
    download_repository.fail = True
    app.dependency_overrides[get_history_service] = lambda: HistoryService(
        download_repository
    )

    response = authenticated.get("/api/history")

    assert response.status_code == 500


def test_sign_up_me_and_sign_out(client, user_service):
    app.dependency_overrides[get_user_service] = lambda: user_service

    signed_up = client.post(
        "/api/auth/signup", json={"email": "new@example.com", "password": "secret1"}
    )
    assert signed_up.status_code == 201
    headers = {"Authorization": f"Bearer {signed_up.json()['access_token']}"}

    me = client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["email"] == "new@example.com"

    assert client.post("/api/auth/logout", headers=headers).status_code == 204
    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_login_with_wrong_password(client, user_service):
    app.dependency_overrides[get_user_service] = lambda: user_service
    client.post(
        "/api/auth/signup", json={"email": "known@example.com", "password": "secret1"}
    )

    response = client.post(
        "/api/auth/login", json={"email": "known@example.com", "password": "wrong-one"}
    )

    assert response.status_code == 401


def test_login_issues_a_usable_token(client, user_service):
    app.dependency_overrides[get_user_service] = lambda: user_service
    client.post(
        "/api/auth/signup", json={"email": "back@example.com", "password": "secret1"}
    )

    response = client.post(
        "/api/auth/login", json={"email": "back@example.com", "password": "secret1"}
    )

    assert response.status_code == 200
    token = response.json()["access_token"]
    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == "back@example.com"


def test_token_for_unknown_user_is_rejected(client, user_service):
    app.dependency_overrides[get_user_service] = lambda: user_service
    token = create_access_token(data={"sub": "ghost@example.com"})

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
