"""Stats schemas."""

from pydantic import BaseModel


class TopEntry(BaseModel):
    entry_id: int
    tasting_session_id: int
    wine_name: str
    total_score: int


class StatsResponse(BaseModel):
    """Collection summary for charts."""

    total_bottles: int
    bottles_in_cellar: int
    bottles_by_status: dict[str, int]
    bottles_by_country: dict[str, int]
    bottles_by_beverage_type: dict[str, int]
    cellar_value: dict[str, float]
    total_sessions: int
    total_entries: int
    average_score: float | None
    total_drinks: int
    drinks_by_month: dict[str, int]
    top_entries: list[TopEntry]
