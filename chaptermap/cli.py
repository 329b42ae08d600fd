"""Thin CLI entry point — builds an AlignmentConfig and calls the engine."""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

from chaptermap.config import STRATEGIES, AlignmentConfig, load_config
from chaptermap.engine import combine_transcript_and_chapters, get_chapters_transcript
from chaptermap.filters import apply_filters
from chaptermap.models import CombinedResult
from chaptermap.sources.chapters import load_chapters_file, parse_description_chapters
from chaptermap.sources.transcript import load_transcript_file
from chaptermap.sources.video_id import extract_video_id


def _build_config(args: argparse.Namespace) -> AlignmentConfig:
    config = load_config(args.config) if args.config else AlignmentConfig()

    overrides: dict = {}
    if args.offset is not None:
        overrides["overlap_offset_seconds"] = args.offset
    if args.strategy is not None:
        overrides["strategy"] = args.strategy
    if args.chapter_offset is not None:
        overrides["chapter_offset"] = args.chapter_offset
    if args.no_chapter_filter:
        overrides["enable_chapter_filtering"] = False
    if args.no_transcript_filter:
        overrides["enable_transcript_filtering"] = False
    if args.language:
        overrides["languages"] = args.language
    return dataclasses.replace(config, **overrides)


def _print_result(result: CombinedResult, as_text: bool) -> None:
    if not as_text:
        print(json.dumps(result.to_dict(), indent=2))
        return

    for chapter in result.chapters:
        end = "end" if chapter.end_time is None else f"{chapter.end_time:.1f}s"
        print(f"## {chapter.title} [{chapter.start_time:.1f}s - {end}]")
        print(chapter.content)
        print()


def _align(args: argparse.Namespace) -> int:
    try:
        config = _build_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.transcript or args.chapters:
        if not (args.transcript and args.chapters):
            print("Error: --transcript and --chapters must be given together.", file=sys.stderr)
            return 1
        transcript, chapters = apply_filters(
            load_transcript_file(args.transcript),
            load_chapters_file(args.chapters),
            config,
        )
        video_id = extract_video_id(args.video) if args.video else args.transcript.stem
        result = combine_transcript_and_chapters(transcript, chapters, video_id, config)
    elif args.video:
        def on_progress(stage: str, frac: float) -> None:
            print(f"  [{frac:3.0%}] {stage}", file=sys.stderr)

        result = get_chapters_transcript(
            extract_video_id(args.video), config, on_progress=on_progress
        )
    else:
        print("Error: provide a VIDEO argument or --transcript/--chapters.", file=sys.stderr)
        return 1

    _print_result(result, args.text)
    return 1 if result.error else 0


def _chapters(args: argparse.Namespace) -> int:
    description = args.description.read_text(encoding="utf-8")
    chapters = parse_description_chapters(description, args.duration)
    if not chapters:
        print("No chapters found.", file=sys.stderr)
        return 1
    for c in chapters:
        end = "" if c.end_time is None else f" - {c.end_time:.0f}s"
        print(f"{c.start_time:>7.0f}s{end}  {c.title}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="chaptermap",
        description="chaptermap — align YouTube transcripts to chapters for LLM prompts.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    align = sub.add_parser("align", help="Align a video's transcript to its chapters")
    align.add_argument("video", nargs="?", help="Video ID or YouTube URL")
    align.add_argument("--config", "-c", type=Path, help="Path to a JSON config file")
    align.add_argument("--transcript", type=Path, help="Local transcript JSON instead of fetching")
    align.add_argument("--chapters", type=Path, help="Local chapters JSON instead of fetching")
    align.add_argument("--offset", type=float, help="Overlap margin in seconds")
    align.add_argument("--strategy", choices=STRATEGIES, help="Assignment strategy")
    align.add_argument("--chapter-offset", type=float, help="Start pull-back for the single strategy")
    align.add_argument("--language", action="append", help="Preferred transcript language (repeatable)")
    align.add_argument("--no-chapter-filter", action="store_true", help="Keep sponsor chapters")
    align.add_argument("--no-transcript-filter", action="store_true", help="Keep sponsor segments")
    align.add_argument("--text", action="store_true", help="Print chapter text instead of JSON")

    chapters = sub.add_parser("chapters", help="Parse chapters from a description file")
    chapters.add_argument("description", type=Path, help="Text file holding a video description")
    chapters.add_argument("--duration", type=float, help="Video duration in seconds")

    serve = sub.add_parser("serve", help="Launch the JSON API")
    serve.add_argument("--port", type=int, default=8321, help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")
    serve.add_argument("--config", "-c", type=Path, help="Path to a JSON config file")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from chaptermap.web import create_app
        app = create_app(load_config(args.config) if args.config else None)
        print(f"chaptermap API: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)
        return

    if args.command == "chapters":
        sys.exit(_chapters(args))

    sys.exit(_align(args))
