"""
API integration tests using FastAPI TestClient with in-memory DB.
"""
import pytest
from fastapi.testclient import TestClient


def start_session(client: TestClient, lesson_id: str = "lesson-1", token=None) -> dict:
    body = {"position_token": token} if token is not None else {}
    response = client.post(f"/lessons/{lesson_id}/sessions", json=body)
    assert response.status_code == 200, response.text
    return response.json()


def send(client: TestClient, session_id: str, **event) -> dict:
    response = client.post(f"/sessions/{session_id}/events", json=event)
    assert response.status_code == 200, response.text
    return response.json()


def play_lesson(client: TestClient, session_id: str) -> dict:
    """Walk the five-block sample lesson, with one wrong answer on each quiz."""
    send(client, session_id, type="advance")
    data = send(client, session_id, type="advance")
    assert data["current_index"] == 2 and not data["can_advance"]

    wrong = send(client, session_id, type="select_option", option="Cześć")
    assert wrong["feedback"]["correct"] is False
    assert wrong["feedback"]["correct_answer"] == "Dziękuję"
    right = send(client, session_id, type="select_option", option="Dziękuję")
    assert right["can_advance"]

    data = send(client, session_id, type="advance")
    assert data["current_block"]["type"] == "spelling-challenge"
    send(client, session_id, type="select_option", option="Czesc")
    send(client, session_id, type="next_question")
    data = send(client, session_id, type="select_option", option="Dziękuję")
    assert data["current_block_complete"]
    assert data["interaction"]["score"] == 1

    data = send(client, session_id, type="advance")
    assert data["current_index"] == 4
    assert data["advance_label"] == "Finish Lesson"
    return send(client, session_id, type="advance")


@pytest.mark.integration
class TestHealthRoutes:
    def test_root_returns_healthy(self, api_client: TestClient):
        response = api_client.get("/")
        assert response.status_code == 200
        assert "Healthy" in response.json()["message"]

    def test_request_id_echoed(self, api_client: TestClient):
        response = api_client.get("/", headers={"x-request-id": "abc-123"})
        assert response.headers.get("x-request-id") == "abc-123"


@pytest.mark.integration
class TestAuthRoutes:
    def test_register_success(self, api_client: TestClient):
        response = api_client.post(
            "/auth/register",
            json={"email": "newuser@example.com", "password": "securepass123", "confirm_password": "securepass123"},
        )
        assert response.status_code == 200
        assert "access_token" in response.cookies

    def test_register_duplicate_fails(self, api_client: TestClient):
        body = {"email": "dup@example.com", "password": "pass123", "confirm_password": "pass123"}
        api_client.post("/auth/register", json=body)
        response = api_client.post("/auth/register", json=body)
        assert response.status_code == 400

    def test_register_password_mismatch(self, api_client: TestClient):
        response = api_client.post(
            "/auth/register",
            json={"email": "x@example.com", "password": "a", "confirm_password": "b"},
        )
        assert response.status_code == 400

    def test_login_wrong_password_fails(self, api_client: TestClient, catalog):
        response = api_client.post("/auth/login", json={"email": "learner@example.com", "password": "nope"})
        assert response.status_code == 401

    def test_me(self, signed_in_client: TestClient):
        response = signed_in_client.get("/auth/me")
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "learner@example.com"
        assert data["display_name"] == "learner"

    def test_me_requires_auth(self, api_client: TestClient):
        assert api_client.get("/auth/me").status_code == 401

    def test_logout(self, signed_in_client: TestClient):
        response = signed_in_client.post("/auth/logout")
        assert response.status_code == 200
        assert "message" in response.json()

    def test_bad_token_is_unauthorized(self, api_client: TestClient):
        api_client.cookies.set("access_token", "not-a-jwt")
        assert api_client.get("/auth/me").status_code == 401


@pytest.mark.integration
class TestCatalogRoutes:
    def test_featured_most_recent_first(self, api_client: TestClient, catalog):
        response = api_client.get("/courses/featured")
        assert response.status_code == 200
        assert [c["id"] for c in response.json()["courses"]] == ["course-polish", "course-empty"]

    def test_course_and_lessons(self, api_client: TestClient, catalog):
        course = api_client.get("/courses/course-polish").json()
        assert course["level"] == "Beginner"
        lessons = api_client.get("/courses/course-polish/lessons").json()["lessons"]
        assert [lesson["id"] for lesson in lessons] == ["lesson-1", "lesson-2", "lesson-3"]
        assert lessons[0]["block_count"] == 5

    def test_missing_course_404(self, api_client: TestClient, catalog):
        assert api_client.get("/courses/nope").status_code == 404
        assert api_client.get("/courses/nope/lessons").json()["lessons"] == []

    def test_courses_by_ids_skips_missing(self, api_client: TestClient, catalog):
        response = api_client.post("/courses/by-ids", json={"course_ids": ["course-polish", "gone"]})
        assert [c["id"] for c in response.json()["courses"]] == ["course-polish"]

    def test_lesson(self, api_client: TestClient, catalog):
        data = api_client.get("/lessons/lesson-1").json()
        assert data["content"]["type"] == "language-lesson"
        assert len(data["content"]["blocks"]) == 5
        assert api_client.get("/lessons/nope").status_code == 404

    def test_paths(self, api_client: TestClient, catalog):
        paths = api_client.get("/paths").json()["paths"]
        assert [p["id"] for p in paths] == ["path-polish"]
        assert api_client.get("/paths/path-polish").status_code == 200
        assert api_client.get("/paths/nope").status_code == 404

    def test_course_overview_anonymous(self, api_client: TestClient, catalog):
        data = api_client.get("/courses/course-polish/overview").json()
        assert data["status"] == "not_started"
        assert data["next_lesson_id"] == "lesson-1"
        assert data["action_label"] == "Start Course (Preview)"

    def test_course_overview_empty_course(self, api_client: TestClient, catalog):
        data = api_client.get("/courses/course-empty/overview").json()
        assert data["status"] == "loading"
        assert data["next_lesson_id"] is None
        assert data["action_label"] == "No lessons yet"

    def test_path_overview_keeps_path_order(self, api_client: TestClient, catalog):
        data = api_client.get("/paths/path-polish/overview").json()
        assert [(c["position"], c["course"]["id"]) for c in data["courses"]] == [
            (1, "course-empty"),
            (2, "course-polish"),
        ]
        assert data["action_label"] == "Sign in to track progress"


@pytest.mark.integration
class TestProgressRoutes:
    def test_complete_requires_auth(self, api_client: TestClient, catalog):
        response = api_client.post(
            "/progress/lessons/complete",
            json={"lesson_id": "lesson-1", "course_id": "course-polish"},
        )
        assert response.status_code == 401

    def test_complete_and_read_back(self, signed_in_client: TestClient, catalog):
        user_id = signed_in_client.get("/auth/me").json()["id"]
        body = {"lesson_id": "lesson-1", "course_id": "course-polish"}
        first = signed_in_client.post("/progress/lessons/complete", json=body).json()
        second = signed_in_client.post("/progress/lessons/complete", json=body).json()
        assert first == second == {"success": True, "progress": 33}

        record = signed_in_client.get(f"/progress/courses/course-polish?user_id={user_id}").json()
        assert record["completed_lessons"] == ["lesson-1"]
        assert record["progress"] == 33

        overview = signed_in_client.get("/courses/course-polish/overview").json()
        assert overview["status"] == "in_progress"
        assert overview["next_lesson_id"] == "lesson-2"
        assert overview["action_label"] == "Continue Course"
        assert [lesson["completed"] for lesson in overview["lessons"]] == [True, False, False]

    def test_progress_read_is_public_by_user_id(self, signed_in_client: TestClient, catalog):
        user_id = signed_in_client.get("/auth/me").json()["id"]
        signed_in_client.post(
            "/progress/lessons/complete", json={"lesson_id": "lesson-1", "course_id": "course-polish"}
        )
        signed_in_client.cookies.clear()
        record = signed_in_client.get(f"/progress/courses/course-polish?user_id={user_id}")
        assert record.status_code == 200
        assert record.json()["completed_lessons"] == ["lesson-1"]
        assert signed_in_client.get("/progress/courses/course-polish").status_code == 422

    def test_missing_progress_is_null(self, api_client: TestClient, catalog):
        response = api_client.get("/progress/courses/course-polish?user_id=999")
        assert response.status_code == 200
        assert response.json() is None
        assert api_client.get("/progress/paths/path-polish?user_id=999").json() is None


@pytest.mark.integration
class TestLessonSessions:
    def test_start_writes_canonical_position(self, api_client: TestClient, catalog):
        data = start_session(api_client)
        assert data["current_index"] == 0
        assert data["can_advance"] is True
        assert data["advance_label"] == "Continue"
        assert data["effects"] == [
            {"kind": "position_write", "token": "#block=0", "mode": "replace", "lesson_id": None},
        ]

    def test_start_restores_and_clamps(self, api_client: TestClient, catalog):
        assert start_session(api_client, token="#block=3")["current_index"] == 3
        clamped = start_session(api_client, token="#block=9")
        assert clamped["current_index"] == 4
        assert clamped["position_token"] == "#block=4"

    def test_signed_in_play_saves_progress(self, signed_in_client: TestClient, catalog):
        session_id = start_session(signed_in_client)["session_id"]
        done = play_lesson(signed_in_client, session_id)
        assert done["finished"] is True
        assert done["progress"] == 33
        assert done["notifications"] == [{"level": "success", "message": "Lesson completed!"}]
        assert {"kind": "lesson_completed", "token": None, "mode": None, "lesson_id": "lesson-1"} in done["effects"]

        again = send(signed_in_client, session_id, type="advance")
        assert again["effects"] == [] and again["notifications"] == []

    def test_anonymous_play_saves_nothing(self, api_client: TestClient, catalog):
        session_id = start_session(api_client)["session_id"]
        done = play_lesson(api_client, session_id)
        assert done["finished"] is True
        assert done["progress"] is None
        assert done["notifications"][0]["level"] == "info"

        user_id = catalog["user"].id
        assert api_client.get(f"/progress/courses/course-polish?user_id={user_id}").json() is None

    def test_failed_save_keeps_lesson_finished(self, signed_in_client: TestClient, catalog, db_session):
        from api.models.models import Course, LessonSession

        session_id = start_session(signed_in_client, token="#block=4")["session_id"]
        # Course removed mid-lesson: saving the completion fails with a 404.
        db_session.query(Course).filter(Course.id == "course-polish").delete(synchronize_session=False)
        db_session.commit()

        done = send(signed_in_client, session_id, type="advance")
        assert done["finished"] is True
        assert done["progress"] is None
        assert len(done["notifications"]) == 1
        assert done["notifications"][0]["level"] == "error"
        assert done["notifications"][0]["message"].startswith("Error saving progress:")

        view = signed_in_client.get(f"/sessions/{session_id}").json()
        assert view["finished"] is True
        assert view["can_advance"] is False

        db_session.expire_all()
        record = db_session.query(LessonSession).filter(LessonSession.id == session_id).one()
        assert "Course not found" in record.state["persist_error"]

    def test_navigate_back_resets_quiz(self, api_client: TestClient, catalog):
        session_id = start_session(api_client, token="#block=2")["session_id"]
        send(api_client, session_id, type="select_option", option="Dziękuję")
        send(api_client, session_id, type="advance")
        data = send(api_client, session_id, type="navigate", position_token="#block=2")
        assert data["current_index"] == 2
        assert data["current_block_complete"] is False
        assert data["interaction"]["selected"] is None

    def test_rejected_interaction_is_conflict(self, api_client: TestClient, catalog):
        session_id = start_session(api_client, token="#block=2")["session_id"]
        send(api_client, session_id, type="select_option", option="Dziękuję")
        response = api_client.post(
            f"/sessions/{session_id}/events", json={"type": "select_option", "option": "Proszę"}
        )
        assert response.status_code == 409

    def test_missing_option_is_bad_request(self, api_client: TestClient, catalog):
        session_id = start_session(api_client, token="#block=2")["session_id"]
        response = api_client.post(f"/sessions/{session_id}/events", json={"type": "select_option"})
        assert response.status_code == 400

    def test_unknown_event_type_is_validation_error(self, api_client: TestClient, catalog):
        session_id = start_session(api_client)["session_id"]
        response = api_client.post(f"/sessions/{session_id}/events", json={"type": "teleport"})
        assert response.status_code == 422

    def test_stale_completion_ignored(self, api_client: TestClient, catalog):
        session_id = start_session(api_client, token="#block=2")["session_id"]
        send(api_client, session_id, type="select_option", option="Dziękuję")
        send(api_client, session_id, type="advance")
        # Late signal from the multiple-choice block the learner already left.
        data = send(api_client, session_id, type="complete_block", block_id="block_3_choice")
        assert data["current_index"] == 3
        assert data["current_block_complete"] is False

    def test_raw_completion_of_unanswered_quiz_ignored(self, api_client: TestClient, catalog):
        session_id = start_session(api_client, token="#block=2")["session_id"]
        data = send(api_client, session_id, type="complete_block", block_id="block_3_choice")
        assert data["current_block_complete"] is False
        assert data["can_advance"] is False
        assert send(api_client, session_id, type="advance")["current_index"] == 2

        session_id = start_session(api_client, token="#block=3")["session_id"]
        data = send(api_client, session_id, type="complete_block", block_id="block_4_spelling")
        assert data["current_block_complete"] is False

        send(api_client, session_id, type="select_option", option="Cześć")
        data = send(api_client, session_id, type="complete_block", block_id="block_4_spelling")
        assert data["current_block_complete"] is False

    def test_lesson_cannot_be_finished_without_answers(self, signed_in_client: TestClient, catalog):
        session_id = start_session(signed_in_client)["session_id"]
        data = {}
        for _ in range(10):
            current = send(signed_in_client, session_id, type="advance")
            block_id = current["current_block"]["id"]
            data = send(signed_in_client, session_id, type="complete_block", block_id=block_id)
        assert data["finished"] is False
        assert data["current_index"] == 2

        user_id = signed_in_client.get("/auth/me").json()["id"]
        assert signed_in_client.get(f"/progress/courses/course-polish?user_id={user_id}").json() is None

    def test_session_is_private_to_its_user(self, signed_in_client: TestClient, catalog):
        session_id = start_session(signed_in_client)["session_id"]
        assert signed_in_client.get(f"/sessions/{session_id}").status_code == 200
        signed_in_client.cookies.clear()
        assert signed_in_client.get(f"/sessions/{session_id}").status_code == 404

    def test_unknown_lesson_and_session(self, api_client: TestClient, catalog):
        assert api_client.post("/lessons/nope/sessions", json={}).status_code == 404
        assert api_client.get("/sessions/nope").status_code == 404
