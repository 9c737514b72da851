from datetime import datetime, timedelta

PERIODS = ("today", "yesterday", "week", "month")


def period_range(name, now=None):
    """
    Get the start and end of a named period

    Args:
        name (str): One of "today", "yesterday", "week", "month"
        now (datetime): Reference time (defaults to the local current time)

    Returns:
        tuple: (start, end) unix timestamps

    Raises:
        ValueError: For an unknown period name
    """
    now = now or datetime.now()
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if name == "today":
        start = today
        end = now.replace(hour=23, minute=59, second=59, microsecond=0)
    elif name == "yesterday":
        start = today - timedelta(days=1)
        end = today - timedelta(seconds=1)
    elif name == "week":
        # Monday is 0, Sunday is 6
        start = today - timedelta(days=today.weekday())
        end = now
    elif name == "month":
        start = today.replace(day=1)
        if now.month == 12:
            end = datetime(now.year + 1, 1, 1) - timedelta(seconds=1)
        else:
            end = datetime(now.year, now.month + 1, 1) - timedelta(seconds=1)
    else:
        raise ValueError(f"Unknown period: {name}")

    return int(start.timestamp()), int(end.timestamp())


def format_duration(seconds):
    """
    Format duration in seconds to a more readable format

    Args:
        seconds (int): Duration in seconds

    Returns:
        str: Formatted duration
    """
    if seconds < 60:
        return f"{seconds} sec"

    minutes = seconds // 60
    remaining_seconds = seconds % 60

    if minutes < 60:
        return f"{minutes} min {remaining_seconds} sec"

    hours = minutes // 60
    remaining_minutes = minutes % 60

    return f"{hours} hr {remaining_minutes} min {remaining_seconds} sec"


def _party(extension, number):
    if extension and number:
        return f"{number} (ext. {extension})"
    return number or (f"ext. {extension}" if extension else "Unknown")


def format_call_details(call):
    """
    Format a call record as a short plain-text summary

    Args:
        call (CallRecord): Decoded call

    Returns:
        str: Formatted message
    """
    formatted_time = datetime.fromtimestamp(call.start).strftime('%Y-%m-%d %H:%M:%S')
    answered = "Yes" if call.answered else "No"

    return (
        f"Call {call.entry_id}\n"
        f"Time: {formatted_time}\n"
        f"From: {_party(call.from_extension, call.from_number)}\n"
        f"To: {_party(call.to_extension, call.to_number)}\n"
        f"Line: {call.line_number or 'Unknown'}\n"
        f"Location: {call.location or 'Unknown'}\n"
        f"Duration: {format_duration(call.duration)}\n"
        f"Talk Time: {format_duration(call.talk_time)}\n"
        f"Answered: {answered}\n"
        f"Disconnect Reason: {call.disconnect_reason}\n"
        f"Recordings: {len(call.records)}"
    )
