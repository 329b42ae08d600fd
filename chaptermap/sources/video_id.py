"""YouTube video ID helpers."""

from urllib.parse import parse_qs, urlparse


def extract_video_id(value: str) -> str:
    """Return the video ID from a bare ID, a watch URL, or a youtu.be link."""
    value = value.strip()
    if "youtube.com" not in value and "youtu.be" not in value:
        return value

    if "://" not in value:
        value = "https://" + value
    parsed = urlparse(value)

    if parsed.netloc.endswith("youtu.be"):
        return parsed.path.lstrip("/").split("/")[0]

    if parsed.path.startswith(("/embed/", "/shorts/", "/live/")):
        return parsed.path.split("/")[2]

    return parse_qs(parsed.query).get("v", [""])[0]


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"
