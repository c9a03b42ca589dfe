# Review ladder, indexed by correct_count after the increment
CORRECT_INTERVAL_DAYS = {
    1: 2,
    2: 4,
    3: 7,
}
MAX_INTERVAL_DAYS = 14   # 4th correct answer onwards
RETRY_DAYS = 1           # any incorrect answer
DUE_CARDS_LIMIT = 100
