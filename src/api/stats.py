"""Collection statistics API endpoints."""

from collections import Counter, defaultdict
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user
from src.database import get_db
from src.models.bottle import Bottle
from src.models.drink_log import DrinkLog
from src.models.enums import BottleStatus
from src.models.tasting import TastingEntry, TastingSession
from src.models.user import User
from src.schemas.stats import StatsResponse, TopEntry

router = APIRouter(prefix="/api/v1/stats", tags=["stats"])

TOP_ENTRY_LIMIT = 5


def _host_entries(db: Session, user_id: int):
    return (
        db.query(TastingEntry)
        .join(TastingSession, TastingEntry.tasting_session_id == TastingSession.id)
        .filter(
            TastingSession.user_id == user_id,
            TastingEntry.guest_id.is_(None),
            TastingEntry.parent_entry_id.is_(None),
        )
    )


@router.get("", response_model=StatsResponse)
def get_stats(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Summarise the user's cellar, tastings and drinking."""
    bottles = db.query(Bottle).filter(Bottle.user_id == current_user.id).all()

    by_status = Counter(bottle.status for bottle in bottles)
    by_country = Counter(bottle.country or "Unknown" for bottle in bottles)
    by_beverage_type = Counter(bottle.beverage_type for bottle in bottles)

    in_cellar = [b for b in bottles if b.status == BottleStatus.IN_CELLAR.value]
    cellar_value: dict[str, float] = defaultdict(float)
    for bottle in in_cellar:
        if bottle.price_amount is not None:
            currency = bottle.price_currency or current_user.default_currency
            cellar_value[currency] += float(bottle.price_amount) * bottle.quantity

    total_sessions = (
        db.query(func.count(TastingSession.id))
        .filter(TastingSession.user_id == current_user.id)
        .scalar()
    )
    entries = _host_entries(db, current_user.id)
    total_entries = entries.count()
    average_score = (
        entries.with_entities(func.avg(TastingEntry.total_score))
        .filter(TastingEntry.total_score.isnot(None))
        .scalar()
    )
    top_entries = (
        entries.filter(TastingEntry.total_score.isnot(None))
        .order_by(TastingEntry.total_score.desc(), TastingEntry.id)
        .limit(TOP_ENTRY_LIMIT)
        .all()
    )

    drank_at = (
        db.query(DrinkLog.drank_at).filter(DrinkLog.user_id == current_user.id).all()
    )
    drinks_by_month = Counter(value.strftime("%Y-%m") for (value,) in drank_at)

    return StatsResponse(
        total_bottles=len(bottles),
        bottles_in_cellar=sum(bottle.quantity for bottle in in_cellar),
        bottles_by_status=dict(by_status),
        bottles_by_country=dict(by_country),
        bottles_by_beverage_type=dict(by_beverage_type),
        cellar_value={currency: round(value, 2) for currency, value in cellar_value.items()},
        total_sessions=total_sessions or 0,
        total_entries=total_entries,
        average_score=round(float(average_score), 1) if average_score is not None else None,
        total_drinks=len(drank_at),
        drinks_by_month=dict(sorted(drinks_by_month.items())),
        top_entries=[
            TopEntry(
                entry_id=entry.id,
                tasting_session_id=entry.tasting_session_id,
                wine_name=entry.display_name,
                total_score=entry.total_score,
            )
            for entry in top_entries
        ],
    )
