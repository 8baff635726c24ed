from pydantic import BaseModel


class DeckStats(BaseModel):
    total_cards: int
    due_now: int
    mastered: int        # correct_count >= 3
    linked_to_notes: int
    total_sessions: int
    average_score: int   # over the most recent sessions
    per_difficulty: dict[str, int]
