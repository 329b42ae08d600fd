"""JSON API routes for chaptermap."""

import dataclasses
import logging

from flask import Blueprint, current_app, jsonify, request

from chaptermap.config import AlignmentConfig, FilterConfig
from chaptermap.engine import combine_transcript_and_chapters, get_chapters_transcript
from chaptermap.filters import apply_filters
from chaptermap.models import InvalidInputError
from chaptermap.sources.chapters import chapter_from_dict, parse_description_chapters
from chaptermap.sources.video_id import extract_video_id
from chaptermap.timebase import normalize_transcript, raw_items_from_dicts

logger = logging.getLogger(__name__)

bp = Blueprint("api", __name__)


def _error(message: str, status: int = 200, details: str | None = None):
    error = {"message": message}
    if details:
        error["details"] = details
    return jsonify({"success": False, "error": error}), status


def _config_with(options: dict) -> AlignmentConfig:
    """The app's config with per-request overrides applied."""
    base: AlignmentConfig = current_app.config["ALIGNMENT"]
    options = dict(options)
    known = {f.name for f in dataclasses.fields(AlignmentConfig)}
    unknown = set(options) - known
    if unknown:
        raise ValueError(f"Unknown options: {', '.join(sorted(unknown))}")
    if isinstance(options.get("filters"), dict):
        options["filters"] = FilterConfig(**options["filters"])
    return dataclasses.replace(base, **options)


@bp.route("/api/chapters-transcript")
def chapters_transcript():
    video_id_or_url = request.args.get("videoId", "").strip()
    if not video_id_or_url:
        return _error("Missing videoId parameter")

    options: dict = {}
    try:
        if "offset" in request.args:
            options["overlap_offset_seconds"] = float(request.args["offset"])
        if "strategy" in request.args:
            options["strategy"] = request.args["strategy"]
        config = _config_with(options)
    except ValueError as e:
        return _error("Invalid parameters", 400, str(e))

    video_id = extract_video_id(video_id_or_url)
    if not video_id:
        return _error("Could not determine a video ID", 400, video_id_or_url)

    result = get_chapters_transcript(video_id, config)
    return jsonify({"success": True, "data": result.to_dict()})


@bp.route("/api/align", methods=["POST"])
def align():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return _error("Request body must be a JSON object", 400)

    transcript_data = body.get("transcript", [])
    if isinstance(transcript_data, dict):
        unit = transcript_data.get("unit", "s")
        rows = transcript_data.get("items", [])
    else:
        unit, rows = "s", transcript_data

    try:
        config = _config_with(body.get("options") or {})
        transcript = normalize_transcript(raw_items_from_dicts(rows, unit))
        chapters = [chapter_from_dict(item) for item in body.get("chapters", [])]
        transcript, chapters = apply_filters(transcript, chapters, config)
        result = combine_transcript_and_chapters(
            transcript, chapters, str(body.get("videoId", "")), config
        )
    except (InvalidInputError, ValueError, TypeError) as e:
        logger.warning(f"Rejected alignment request: {e}")
        return _error("Invalid alignment input", 400, str(e))

    return jsonify({"success": True, "data": result.to_dict()})


@bp.route("/api/chapters/parse", methods=["POST"])
def parse_chapters():
    body = request.get_json(silent=True) or {}
    description = body.get("description")
    if not isinstance(description, str):
        return _error("Missing description", 400)

    chapters = parse_description_chapters(description, body.get("duration"))
    return jsonify({
        "success": True,
        "data": [
            {"title": c.title, "startTime": c.start_time, "endTime": c.end_time}
            for c in chapters
        ],
    })
