def format_duration(seconds: float) -> str:
    """
    Convert a duration in seconds to a human-readable string.

    Args:
        seconds (float): Duration in seconds.

    Returns:
        str: Human-readable duration such as ``"45 secs"``, ``"60 minutes"``
        or ``"2 days"``.
    """
    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds} secs"
    elif seconds < 86400:
        mins = seconds // 60
        return f"{mins} minute{'s' if mins != 1 else ''}"
    else:
        days = seconds // 86400
        return f"{days} day{'s' if days != 1 else ''}"


def format_threshold(action_limit: int, window_seconds: float) -> str:
    """Describe an abuse threshold, e.g. ``"3 per 60 minutes"``."""
    return f"{action_limit} per {format_duration(window_seconds)}"
