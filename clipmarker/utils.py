import math

try:
    import __main__
    DEBUG_UI = __main__.DEBUG if hasattr(__main__, 'DEBUG') else False
except (ImportError, AttributeError):
    DEBUG_UI = False

# Log every poll tick and seek when debugging position synchronization
DEBUG_POSITION_UPDATES = DEBUG_UI

# --- Constants ---
DEFAULT_LINK_HOST = "www.youtube.com"


def format_time(seconds):
    """Format seconds as m:ss, the way the clip list and time display show it."""
    if seconds is None:
        return "--:--"
    seconds = max(0.0, float(seconds))
    mins = math.floor(seconds / 60)
    secs = math.floor(seconds % 60)
    return f"{mins}:{secs:02}"


def clamp(value, lower, upper):
    return max(lower, min(upper, value))


def build_deep_link(video_id, start_time, host=DEFAULT_LINK_HOST):
    """
    Build a shareable watch URL that opens the video at start_time.

    Only the whole start second is encoded; the link is an entry point,
    not a bounded range.
    """
    start = math.floor(start_time)
    return f"https://{host}/watch?v={video_id}&t={start}s"


def build_embed_link(video_id, start_time, end_time, host=DEFAULT_LINK_HOST):
    """Build an embed URL that plays only [start_time, end_time]."""
    start = math.floor(start_time)
    end = math.ceil(end_time)
    return f"https://{host}/embed/{video_id}?start={start}&end={end}"
