import io
import json
import logging
import pathlib
import sys

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

sys.path.append(str(pathlib.Path(__file__).resolve().parents[2] / "server"))

from ignore_lens.utils.logging import REQUEST_ID_CTX, RequestIdMiddleware, configure_logging


def build_app():
    app = FastAPI()
    app.add_middleware(RequestIdMiddleware)

    @app.get("/echo")
    def echo():
        return {"request_id": REQUEST_ID_CTX.get()}

    @app.get("/fail-http")
    def fail_http():
        raise HTTPException(status_code=418, detail="teapot")

    @app.get("/fail-unhandled")
    def fail_unhandled():
        raise RuntimeError("boom")

    return app


def test_request_id_propagates_from_header():
    client = TestClient(build_app())

    response = client.get("/echo", headers={"X-Request-ID": "custom-id"})

    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "custom-id"
    assert response.json()["request_id"] == "custom-id"


def test_request_id_is_generated_when_missing():
    client = TestClient(build_app())

    response = client.get("/echo")

    assert response.status_code == 200
    generated_id = response.headers["X-Request-ID"]
    assert len(generated_id) == 32
    assert response.json()["request_id"] == generated_id


def test_structured_logging_includes_request_id(capfd):
    configure_logging()
    capfd.readouterr()

    token = REQUEST_ID_CTX.set("req-123")
    try:
        logging.getLogger("ignore_lens.test").info(
            "evaluation_completed", extra={"duration_ms": 4, "pattern_count": 2}
        )
    finally:
        REQUEST_ID_CTX.reset(token)

    captured = capfd.readouterr()
    lines = [line for line in captured.err.splitlines() if line]
    assert lines, "expected at least one log line"

    payload = json.loads(lines[-1])
    assert payload["message"] == "evaluation_completed"
    assert payload["duration_ms"] == 4
    assert payload["pattern_count"] == 2
    assert payload["request_id"] == "req-123"
    assert payload["level"] == "INFO"


def test_exception_is_rendered_into_payload():
    stream = io.StringIO()
    configure_logging(stream=stream)

    try:
        raise ValueError("bad pattern")
    except ValueError:
        logging.getLogger("ignore_lens.test").exception("pattern_rejected")

    payload = json.loads(stream.getvalue().splitlines()[-1])
    assert payload["message"] == "pattern_rejected"
    assert "request_id" not in payload
    assert "ValueError: bad pattern" in payload["exception"]


def test_log_level_filters_debug_records():
    stream = io.StringIO()
    configure_logging(logging.INFO, stream=stream)

    logging.getLogger("ignore_lens.test").debug("evaluation_completed")

    assert stream.getvalue() == ""


def test_request_id_is_attached_to_http_error():
    client = TestClient(build_app())

    response = client.get("/fail-http", headers={"X-Request-ID": "err-req"})

    assert response.status_code == 418
    assert response.headers["X-Request-ID"] == "err-req"
    assert response.json() == {"detail": "teapot"}


def test_request_id_is_attached_to_unhandled_error():
    client = TestClient(build_app())

    response = client.get("/fail-unhandled")

    assert response.status_code == 500
    assert len(response.headers["X-Request-ID"]) == 32
    assert response.json() == {"detail": "Internal Server Error"}
