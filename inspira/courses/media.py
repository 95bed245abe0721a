import re
from typing import Optional

YOUTUBE_ID_LENGTH = 11

_YOUTUBE_HOSTS = ("youtube.com", "youtu.be")
_VIDEO_ID = re.compile(r"^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")


def is_embeddable_video(url: Optional[str]) -> bool:
    """True for YouTube links, which the player renders in an iframe"""
    if not url:
        return False
    return any(host in url for host in _YOUTUBE_HOSTS)


def normalize_youtube_url(url: Optional[str]) -> Optional[str]:
    """
    Convert any youtube link to embed format
    Non-YouTube links and links without a recognizable 11-character video id are returned untouched
    """
    if not is_embeddable_video(url):
        return url

    # already embed
    if "embed/" in url:
        return url

    match = _VIDEO_ID.match(url)
    if match and len(match.group(2)) == YOUTUBE_ID_LENGTH:
        return f"https://www.youtube.com/embed/{match.group(2)}"

    return url
