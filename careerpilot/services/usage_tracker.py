"""Per-user daily quotas for the AI-backed features.

Counters reset lazily on the first read after a UTC calendar-day change. The
check and the increment are separate statements with no lock between them, so
two concurrent requests can both pass the check at ``limit - 1``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Any, Callable, Literal

from careerpilot.core.config import settings
from careerpilot.storage.document_store import AccountPlan, DocumentStore

logger = logging.getLogger(__name__)

Feature = Literal["resume_tailoring", "cover_letter_generation"]
FEATURES: tuple[Feature, ...] = ("resume_tailoring", "cover_letter_generation")


def default_limits() -> dict[AccountPlan, dict[Feature, int]]:
    return {
        "FREE": {
            "resume_tailoring": settings.free_tier_resume_limit,
            "cover_letter_generation": settings.free_tier_cover_letter_limit,
        },
        "PREMIUM": {
            "resume_tailoring": settings.premium_tier_resume_limit,
            "cover_letter_generation": settings.premium_tier_cover_letter_limit,
        },
    }


@dataclass(frozen=True)
class UsageDecision:
    allowed: bool
    limit: int
    current_usage: int
    resets_at: datetime
    reason: str | None = None


class UsageLimitExceeded(Exception):
    def __init__(self, feature: str, decision: UsageDecision):
        super().__init__(decision.reason or f"Daily limit reached for {feature}")
        self.feature = feature
        self.limit = decision.limit
        self.current_usage = decision.current_usage
        self.resets_at = decision.resets_at


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def next_reset_time(now: datetime) -> datetime:
    tomorrow = now.astimezone(timezone.utc).date() + timedelta(days=1)
    return datetime.combine(tomorrow, time.min, tzinfo=timezone.utc)


class UsageTracker:
    def __init__(
        self,
        store: DocumentStore,
        *,
        limits: dict[AccountPlan, dict[Feature, int]] | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._store = store
        self._limits = limits or default_limits()
        self._clock = clock

    def _plan(self, user_id: str) -> AccountPlan:
        return "PREMIUM" if self._store.is_premium(user_id) else "FREE"

    def limit_for(self, user_id: str, feature: Feature) -> int:
        return self._limits[self._plan(user_id)][feature]

    def _current_count(self, user_id: str, feature: Feature, now: datetime) -> int:
        counter = self._store.get_usage_counter(user_id, feature)
        if counter is None:
            return 0
        if counter["last_reset"].astimezone(timezone.utc).date() != now.astimezone(timezone.utc).date():
            self._store.save_usage_counter(
                user_id,
                feature,
                count=0,
                last_reset=now,
                last_used=counter["last_used"],
            )
            logger.info("usage_daily_reset user=%s feature=%s", user_id, feature)
            return 0
        return counter["count"]

    def can_use(self, user_id: str, feature: Feature) -> UsageDecision:
        now = self._clock()
        limit = self.limit_for(user_id, feature)
        current = self._current_count(user_id, feature, now)
        resets_at = next_reset_time(now)
        if current >= limit:
            return UsageDecision(
                allowed=False,
                limit=limit,
                current_usage=current,
                resets_at=resets_at,
                reason=f"Daily limit reached ({limit} {feature} per day)",
            )
        return UsageDecision(allowed=True, limit=limit, current_usage=current, resets_at=resets_at)

    def ensure_can_use(self, user_id: str, feature: Feature) -> UsageDecision:
        decision = self.can_use(user_id, feature)
        logger.info(
            "usage_checked user=%s feature=%s allowed=%s usage=%s/%s",
            user_id,
            feature,
            decision.allowed,
            decision.current_usage,
            decision.limit,
        )
        if not decision.allowed:
            raise UsageLimitExceeded(feature, decision)
        return decision

    def increment(self, user_id: str, feature: Feature) -> int:
        now = self._clock()
        count = self._current_count(user_id, feature, now) + 1
        counter = self._store.get_usage_counter(user_id, feature)
        self._store.save_usage_counter(
            user_id,
            feature,
            count=count,
            last_reset=counter["last_reset"] if counter else now,
            last_used=now,
        )
        logger.info("usage_incremented user=%s feature=%s count=%s", user_id, feature, count)
        return count

    def stats(self, user_id: str) -> dict[str, Any]:
        now = self._clock()
        resets_at = next_reset_time(now)
        plan = self._plan(user_id)
        result: dict[str, Any] = {"subscription_plan": plan}
        for feature in FEATURES:
            limit = self._limits[plan][feature]
            used = self._current_count(user_id, feature, now)
            result[feature] = {
                "used": used,
                "limit": limit,
                "remaining": max(0, limit - used),
                "resets_at": resets_at,
                "can_use": used < limit,
            }
        return result
