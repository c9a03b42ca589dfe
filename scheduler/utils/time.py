from django.utils import timezone

def to_local_iso(dt_utc):
    """Render a UTC datetime in the configured TIME_ZONE."""
    return timezone.localtime(dt_utc).isoformat()
