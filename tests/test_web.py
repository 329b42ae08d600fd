"""Unit tests for the chaptermap JSON API."""

from unittest.mock import patch

import pytest

from chaptermap.config import AlignmentConfig
from chaptermap.models import CombinedResult
from chaptermap.web import create_app


@pytest.fixture
def app():
    app = create_app(AlignmentConfig(overlap_offset_seconds=5))
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


SCENARIO_A = {
    "videoId": "vid",
    "transcript": [
        {"text": "a", "start": 0, "duration": 5},
        {"text": "b", "start": 10, "duration": 5},
        {"text": "c", "start": 30, "duration": 5},
    ],
    "chapters": [
        {"title": "Intro", "startTime": 0, "endTime": 10},
        {"title": "Main", "startTime": 10, "endTime": 30},
        {"title": "End", "startTime": 30, "endTime": None},
    ],
    "options": {"overlap_offset_seconds": 0},
}


class TestChaptersTranscript:
    def test_missing_video_id(self, client):
        resp = client.get("/api/chapters-transcript")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["success"] is False
        assert data["error"]["message"] == "Missing videoId parameter"

    @patch("chaptermap.web.routes.get_chapters_transcript")
    def test_success_envelope(self, mock_get, client):
        mock_get.return_value = CombinedResult.empty("dQw4w9WgXcQ", 10.0)

        resp = client.get(
            "/api/chapters-transcript",
            query_string={"videoId": "https://youtu.be/dQw4w9WgXcQ", "offset": "10"},
        )

        assert resp.status_code == 200
        data = resp.get_json()
        assert data["success"] is True
        assert data["data"]["videoId"] == "dQw4w9WgXcQ"
        video_id, config = mock_get.call_args[0]
        assert video_id == "dQw4w9WgXcQ"
        assert config.overlap_offset_seconds == 10.0

    @patch("chaptermap.web.routes.get_chapters_transcript")
    def test_default_offset_from_app_config(self, mock_get, client):
        mock_get.return_value = CombinedResult.empty("vid", 5.0)
        client.get("/api/chapters-transcript", query_string={"videoId": "vid"})
        _, config = mock_get.call_args[0]
        assert config.overlap_offset_seconds == 5

    @patch("chaptermap.web.routes.get_chapters_transcript")
    def test_strategy_param(self, mock_get, client):
        mock_get.return_value = CombinedResult.empty("vid", 5.0)
        client.get("/api/chapters-transcript", query_string={"videoId": "vid", "strategy": "single"})
        _, config = mock_get.call_args[0]
        assert config.strategy == "single"

    @pytest.mark.parametrize(
        "params",
        [
            {"offset": "abc"},
            {"offset": "-1"},
            {"offset": "nan"},
            {"offset": "inf"},
            {"strategy": "nope"},
        ],
    )
    def test_invalid_params(self, client, params):
        resp = client.get("/api/chapters-transcript", query_string={"videoId": "vid", **params})
        assert resp.status_code == 400
        assert resp.get_json()["success"] is False

    @patch("chaptermap.web.routes.get_chapters_transcript")
    def test_fetch_error_is_reported_in_data(self, mock_get, client):
        mock_get.return_value = CombinedResult.empty("vid", 5.0, error="No transcript")
        resp = client.get("/api/chapters-transcript", query_string={"videoId": "vid"})
        data = resp.get_json()
        assert data["success"] is True
        assert data["data"]["error"] == "No transcript"


class TestAlign:
    def test_scenario_a(self, client):
        resp = client.post("/api/align", json=SCENARIO_A)
        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert [c["content"] for c in data["chapters"]] == ["a", "b", "c"]
        assert data["metadata"]["overlapOffsetSeconds"] == 0
        assert data["chapters"][2]["endTime"] is None

    def test_millisecond_transcript(self, client):
        body = dict(SCENARIO_A)
        body["transcript"] = {
            "unit": "ms",
            "items": [
                {"text": "a", "offset": 0, "duration": 5000},
                {"text": "b", "offset": 10000, "duration": 5000},
                {"text": "c", "offset": 30000, "duration": 5000},
            ],
        }
        resp = client.post("/api/align", json=body)
        data = resp.get_json()["data"]
        assert [c["content"] for c in data["chapters"]] == ["a", "b", "c"]

    def test_filters_apply(self, client):
        body = dict(SCENARIO_A)
        body["chapters"] = [{"title": "Sponsor", "startTime": 0, "endTime": None}]
        resp = client.post("/api/align", json=body)
        data = resp.get_json()["data"]
        assert [c["title"] for c in data["chapters"]] == ["Full Video"]
        assert data["chapters"][0]["content"] == "a b c"

    def test_not_json(self, client):
        resp = client.post("/api/align", data="nope", content_type="text/plain")
        assert resp.status_code == 400

    def test_negative_overlap(self, client):
        body = dict(SCENARIO_A, options={"overlap_offset_seconds": -5})
        resp = client.post("/api/align", json=body)
        assert resp.status_code == 400
        assert "non-negative" in resp.get_json()["error"]["details"]

    def test_unknown_option(self, client):
        body = dict(SCENARIO_A, options={"colour": "blue"})
        resp = client.post("/api/align", json=body)
        assert resp.status_code == 400

    def test_unsorted_chapters(self, client):
        body = dict(SCENARIO_A, chapters=list(reversed(SCENARIO_A["chapters"])))
        resp = client.post("/api/align", json=body)
        assert resp.status_code == 400
        assert "not ordered" in resp.get_json()["error"]["details"]

    def test_bad_timestamp(self, client):
        body = dict(SCENARIO_A, transcript=[{"text": "a", "start": "zero", "duration": 1}])
        resp = client.post("/api/align", json=body)
        assert resp.status_code == 400

    def test_non_string_text(self, client):
        body = dict(SCENARIO_A, transcript=[{"text": 5, "start": 0, "duration": 1}])
        resp = client.post("/api/align", json=body)
        assert resp.status_code == 400
        data = resp.get_json()
        assert data["success"] is False
        assert "string" in data["error"]["details"]

    def test_non_string_title(self, client):
        body = dict(SCENARIO_A, chapters=[{"title": ["Intro"], "startTime": 0}])
        resp = client.post("/api/align", json=body)
        assert resp.status_code == 400
        assert "string" in resp.get_json()["error"]["details"]

    @patch("chaptermap.web.routes.combine_transcript_and_chapters")
    def test_unexpected_error_uses_envelope(self, mock_combine, client):
        mock_combine.side_effect = RuntimeError("boom")
        resp = client.post("/api/align", json=SCENARIO_A)
        assert resp.status_code == 500
        assert resp.get_json() == {
            "success": False,
            "error": {"message": "Internal server error", "details": "boom"},
        }


class TestParseChapters:
    def test_parse(self, client):
        resp = client.post(
            "/api/chapters/parse",
            json={"description": "0:00 Intro\n1:00 Main", "duration": 100},
        )
        assert resp.get_json()["data"] == [
            {"title": "Intro", "startTime": 0.0, "endTime": 60.0},
            {"title": "Main", "startTime": 60.0, "endTime": 100.0},
        ]

    def test_missing_description(self, client):
        resp = client.post("/api/chapters/parse", json={})
        assert resp.status_code == 400


class TestErrors:
    def test_unknown_route_is_json(self, client):
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert resp.get_json()["success"] is False
