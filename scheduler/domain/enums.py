from enum import IntEnum

class Outcome(IntEnum):
    INCORRECT = 0
    CORRECT = 1

OUTCOME_LABELS = {
    Outcome.INCORRECT: "incorrect",
    Outcome.CORRECT: "correct",
}
