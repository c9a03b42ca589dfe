from django.conf import settings

BASE_XP = 40                 # every completed session
MISSED_DAY_PENALTY = 10      # per day skipped beyond the first
XP_PER_LEVEL = 100
SESSION_HISTORY_LIMIT = 50


def same_day_xp():
    return getattr(settings, "STUDYTRACK_SAME_DAY_XP", BASE_XP)
