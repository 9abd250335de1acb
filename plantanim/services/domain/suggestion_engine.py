"""
Domain service: weather-driven farming suggestions.

Runs every registered rule against a weather snapshot and the farmer's
context, drops outputs superseded by a consolidating rule, and returns the
result ordered by priority. The engine is pure: no I/O, and the reference
time is injectable.
"""
import logging
from datetime import datetime, timedelta, tzinfo
from typing import Iterable, List, Optional, Sequence

from plantanim.domain.models import (
    CropContext,
    FarmTasksContext,
    LocationContext,
    Suggestion,
    WeatherSnapshot,
)
from plantanim.services.domain.suggestion_rules import (
    DEFAULT_RULES,
    RuleContext,
    RuleThresholds,
    SuggestionRule,
)
from plantanim.utils.date_helpers import align_tz, reference_time

logger = logging.getLogger(__name__)

SUGGESTION_DISCLAIMER = (
    "This is a weather-based suggestion. Final decisions remain with the farmer."
)


class SuggestionEngine:
    """
    Domain service turning weather and farm context into suggestions.

    Rules are evaluated in registration order. That order is also the
    tie-break between suggestions of equal priority.
    """

    def __init__(
        self,
        rules: Optional[Sequence[SuggestionRule]] = None,
        thresholds: Optional[RuleThresholds] = None,
        validity_hours: int = 24,
        tz: Optional[tzinfo] = None,
    ):
        """
        Initialize the engine.

        Args:
            rules: Rule registry (defaults to the full built-in catalogue)
            thresholds: Trigger thresholds shared by all rules
            validity_hours: Default lifetime of a suggestion
            tz: Farm timezone in which forecast days and expiries are read
        """
        self.rules = tuple(rules) if rules is not None else DEFAULT_RULES
        self.thresholds = thresholds or RuleThresholds()
        self.validity = timedelta(hours=validity_hours)
        self.tz = tz

    def generate(
        self,
        weather: WeatherSnapshot,
        location: LocationContext,
        crop_context: Optional[CropContext] = None,
        farm_tasks: Optional[FarmTasksContext] = None,
        now: Optional[datetime] = None,
    ) -> List[Suggestion]:
        """
        Generate suggestions sorted HIGH > MEDIUM > LOW.

        Args:
            weather: Current conditions and daily forecast
            location: Farmer location, used in messages
            crop_context: Optional selected crops
            farm_tasks: Optional manually scheduled tasks
            now: Reference time (defaults to the current time)

        Returns:
            Suggestions ordered by priority; empty when weather data is missing
        """
        if not weather.daily_forecast or weather.current_weather is None:
            logger.debug("Weather data incomplete, no suggestions generated")
            return []

        ctx = RuleContext(
            weather=weather,
            location=location,
            now=reference_time(now, self.tz),
            validity=self.validity,
            thresholds=self.thresholds,
            crops=crop_context,
            farm_tasks=farm_tasks,
        )

        fired = []
        for rule in self.rules:
            produced = rule.evaluate(ctx)
            if produced:
                logger.debug(f"Rule {rule.name} produced {len(produced)} suggestion(s)")
                fired.append((rule, produced))

        superseded = {name for rule, _ in fired for name in rule.supersedes}
        suggestions = [
            suggestion
            for rule, produced in fired
            if rule.name not in superseded
            for suggestion in produced
        ]

        # sorted() is stable, so equal priorities keep rule order
        suggestions = sorted(suggestions, key=lambda s: s.priority.weight)
        logger.info(
            f"Generated {len(suggestions)} suggestion(s) for {location.display_name}"
        )
        return suggestions


def filter_visible(
    suggestions: Iterable[Suggestion],
    dismissed_ids: Iterable[str],
    now: Optional[datetime] = None,
) -> List[Suggestion]:
    """
    Drop expired suggestions and dismissible ones the farmer has dismissed.

    Non-dismissible warnings stay visible until they expire.
    """
    now = reference_time(now)
    dismissed = set(dismissed_ids)
    return [
        suggestion
        for suggestion in suggestions
        if align_tz(suggestion.valid_until, now) >= now
        and not (suggestion.dismissible and suggestion.id in dismissed)
    ]


def format_suggestion_for_display(suggestion: Suggestion) -> str:
    return (
        f"{suggestion.title}\n\n{suggestion.message}\n\n"
        f"Why: {suggestion.reason}\n\nAction: {suggestion.recommended_action}"
    )
