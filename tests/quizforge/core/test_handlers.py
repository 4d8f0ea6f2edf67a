from fastapi import FastAPI
from fastapi.testclient import TestClient
from quizforge.core.exceptions import ConfigurationError, QuizGenerationError, RateLimitError
from quizforge.core.handlers import register_exception_handlers
from quizforge.services.quiz_parser import parse_quiz_report


def create_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    def _boom() -> None:
        raise RuntimeError("kaboom")

    @app.get("/config")
    def _config() -> None:
        raise ConfigurationError("missing setting", code="missing_setting")

    @app.get("/rate")
    def _rate() -> None:
        raise RateLimitError("too many requests")

    @app.get("/quiz")
    def _quiz() -> None:
        raise QuizGenerationError.from_report(parse_quiz_report("Sorry, no quiz today."))

    @app.get("/needs-int")
    def _needs_int(x: int) -> dict[str, int]:
        return {"x": x}

    return app


def test_quizforge_exception_handler_shape_and_status():
    client = TestClient(create_app())
    resp = client.get("/config")
    assert resp.status_code == 500
    data = resp.json()
    assert data["error"] == "missing setting"
    assert data["code"] == "missing_setting"
    assert data["type"] == "ConfigurationError"
    assert "details" not in data


def test_rate_limit_error_maps_to_429():
    client = TestClient(create_app())
    resp = client.get("/rate")
    assert resp.status_code == 429
    data = resp.json()
    assert data["code"] == "rate_limited"
    assert data["type"] == "RateLimitError"


def test_quiz_generation_error_exposes_parse_issues():
    client = TestClient(create_app())
    resp = client.get("/quiz")
    assert resp.status_code == 400
    data = resp.json()
    assert data["error"] == "Failed to parse quiz. Please try again."
    assert data["code"] == "no_question_blocks_found"
    assert data["type"] == "QuizGenerationError"
    assert data["details"]["blocks_found"] == 0
    assert data["details"]["issues"][0]["kind"] == "no_question_blocks_found"


def test_validation_errors_are_normalized():
    client = TestClient(create_app())
    resp = client.get("/needs-int")
    assert resp.status_code == 422
    data = resp.json()
    assert data["error"] == "Validation error"
    assert data["code"] == "validation_error"
    assert data["type"] == "RequestValidationError"
    assert isinstance(data["details"], list)


def test_unhandled_exceptions_are_normalized_and_do_not_leak_message():
    client = TestClient(create_app(), raise_server_exceptions=False)
    resp = client.get("/boom")
    assert resp.status_code == 500
    data = resp.json()
    assert data["error"] == "Internal server error"
    assert data["code"] == "internal_error"
    assert data["type"] == "InternalServerError"
