import re

# Schema.org durations: "PT1H30M", "PT45M", "PT2H"
ISO_DURATION_REGEX = re.compile(r'PT(?:(\d+)H)?(?:(\d+)M)?', re.IGNORECASE)


def format_duration(iso: str) -> str:
    """
    Convert an ISO-8601 duration to short human text ("PT1H30M" -> "1h 30m").
    Values that aren't ISO durations are returned unchanged.
    """
    if not iso:
        return ""

    m = ISO_DURATION_REGEX.search(iso)
    if not m:
        return iso

    hours = int(m.group(1) or 0)
    minutes = int(m.group(2) or 0)
    if hours and minutes:
        return f"{hours}h {minutes}m"
    if hours:
        return f"{hours}h"
    if minutes:
        return f"{minutes}m"
    return iso
