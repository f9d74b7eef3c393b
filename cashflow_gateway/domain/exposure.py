"""Weekly exposure aggregation over the obligation calendar"""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping

from cashflow_gateway.domain.models import Obligation, WeeklyExposure

DEFAULT_WEEK_COUNT = 8


def aggregate_weeks(
    calendar: Mapping[date, int],
    today: date,
    week_count: int = DEFAULT_WEEK_COUNT,
    obligations: Iterable[Obligation] = (),
) -> List[WeeklyExposure]:
    """
    Bucket the calendar into consecutive 7-day windows starting today.

    Week 0 covers today..today+6, week 1 today+7..today+13, and so on,
    regardless of where calendar weeks begin. When `obligations` is given,
    each week also carries the individual items dated inside it.
    """
    by_week: Dict[int, List[Obligation]] = {}
    for obligation in obligations:
        offset = (obligation.date - today).days
        if 0 <= offset < week_count * 7:
            by_week.setdefault(offset // 7, []).append(obligation)

    weeks = []
    for index in range(week_count):
        start = today + timedelta(days=index * 7)
        end = start + timedelta(days=6)
        total = sum(amount for day, amount in calendar.items() if start <= day <= end)

        weeks.append(
            WeeklyExposure(
                week_index=index,
                range_start=start,
                range_end=end,
                total_cents=total,
                has_exposure=total > 0,
                obligations=tuple(by_week.get(index, ())),
            )
        )

    return weeks


def forecast_total(weeks: Iterable[WeeklyExposure]) -> int:
    """Total exposure across the forecast horizon"""
    return sum(week.total_cents for week in weeks)
