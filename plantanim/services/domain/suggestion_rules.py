"""
Weather advisory rules.

Each rule is an independent object that inspects a RuleContext and returns
the suggestions it produces (usually zero or one). Rules never raise on
missing data; absent precipitation or wind readings count as zero.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

from plantanim.config import Settings
from plantanim.domain.crop_registry import get_crop_config
from plantanim.domain.models import (
    CropContext,
    FarmTasksContext,
    ForecastDay,
    LocationContext,
    Suggestion,
    SuggestionPriority,
    SuggestionType,
    WeatherSnapshot,
)
from plantanim.utils.date_helpers import date_key, end_of_day


@dataclass
class RuleThresholds:
    """Trigger thresholds for the advisory rules."""

    heavy_rain_probability: int = 70
    """Today's precipitation probability (%) that counts as heavy rain"""

    heavy_rain_volume_mm: float = 30.0
    """Measured rain volume strictly above which rain counts as heavy"""

    moderate_rain_probability: int = 40
    """Lower bound of the MEDIUM rain advisory; also the continuous-rain day threshold"""

    continuous_rain_days: int = 3
    """Consecutive rainy days needed for the continuous rain advisory"""

    strong_wind_kmh: float = 30.0
    """Wind speed strictly above which spraying is discouraged"""

    heat_stress_temperature: float = 34.0
    """Daily high at or above which heat stress applies"""

    heat_stress_max_precipitation: int = 15
    """Precipitation probability strictly below which heat stress applies"""

    schedule_conflict_probability: int = 60
    """Precipitation probability at which a manual task should be moved"""

    schedule_conflict_high_probability: int = 80
    """Precipitation probability at which the reschedule advice becomes HIGH"""

    @classmethod
    def from_settings(cls, settings: Settings) -> "RuleThresholds":
        return cls(
            heavy_rain_probability=settings.heavy_rain_probability,
            heavy_rain_volume_mm=settings.heavy_rain_volume_mm,
            moderate_rain_probability=settings.moderate_rain_probability,
            continuous_rain_days=settings.continuous_rain_days,
            strong_wind_kmh=settings.strong_wind_kmh,
            heat_stress_temperature=settings.heat_stress_temperature,
            heat_stress_max_precipitation=settings.heat_stress_max_precipitation,
            schedule_conflict_probability=settings.schedule_conflict_probability,
            schedule_conflict_high_probability=settings.schedule_conflict_high_probability,
        )


@dataclass
class RuleContext:
    """Everything a rule may look at for one engine run."""
    weather: WeatherSnapshot
    location: LocationContext
    now: datetime
    validity: timedelta
    thresholds: RuleThresholds = field(default_factory=RuleThresholds)
    crops: Optional[CropContext] = None
    farm_tasks: Optional[FarmTasksContext] = None

    @property
    def today(self) -> ForecastDay:
        return self.weather.daily_forecast[0]

    @property
    def wind_speed(self) -> float:
        current = self.weather.current_weather
        if current is None or current.wind_speed_kmh is None:
            return 0.0
        return current.wind_speed_kmh

    @property
    def rain_volume(self) -> float:
        return self.weather.rain_volume_mm or 0.0

    def valid_until(self, based_on: Optional[date] = None) -> datetime:
        """
        Expiry for a suggestion created now.

        Defaults to now + validity, cut short to the end of ``based_on`` when
        that forecast day ends sooner.
        """
        default = self.now + self.validity
        if based_on is None:
            return default
        return min(default, end_of_day(based_on, tzinfo=self.now.tzinfo))

    def crop_names(self) -> List[str]:
        if not self.crops:
            return []
        names = []
        for crop_id in sorted(self.crops.selected_crop_ids):
            config = get_crop_config(crop_id)
            if config is not None:
                names.append(config.name)
        return names

    def crop_note(self) -> str:
        names = self.crop_names()
        if not names:
            return ""
        return f" This affects your {', '.join(names)}."


# ── Trigger predicates (shared by the single rules and the combination) ─────

def typhoon_triggered(ctx: RuleContext) -> bool:
    return ctx.weather.typhoon_alert


def heavy_rain_triggered(ctx: RuleContext) -> bool:
    return (
        ctx.today.precipitation_or_zero >= ctx.thresholds.heavy_rain_probability
        or ctx.rain_volume > ctx.thresholds.heavy_rain_volume_mm
    )


def moderate_rain_triggered(ctx: RuleContext) -> bool:
    precipitation = ctx.today.precipitation_or_zero
    return (
        ctx.thresholds.moderate_rain_probability
        <= precipitation
        < ctx.thresholds.heavy_rain_probability
    )


def strong_wind_triggered(ctx: RuleContext) -> bool:
    return ctx.wind_speed > ctx.thresholds.strong_wind_kmh


def _format_number(value: float) -> str:
    return f"{value:g}"


# ── Rules ────────────────────────────────────────────────────────────────────

class SuggestionRule(ABC):
    """A single advisory rule."""

    name: str = ""
    supersedes: Sequence[str] = ()

    @abstractmethod
    def evaluate(self, ctx: RuleContext) -> List[Suggestion]:
        """Return the suggestions this rule produces for the context."""

    def suggestion_id(self, *keys: str) -> str:
        return "-".join(("suggestion", self.name, *keys))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class TyphoonAlertRule(SuggestionRule):
    name = "typhoon-alert"

    def evaluate(self, ctx: RuleContext) -> List[Suggestion]:
        if not typhoon_triggered(ctx):
            return []

        return [Suggestion(
            id=self.suggestion_id(date_key(ctx.today.forecast_date)),
            type=SuggestionType.RISK_WARNING,
            priority=SuggestionPriority.HIGH,
            title="Typhoon Alert Active",
            message=(
                f"A typhoon warning is active in {ctx.location.display_name}. "
                f"Winds of {_format_number(ctx.wind_speed)} km/h and a "
                f"{ctx.today.precipitation_or_zero}% chance of heavy rain are expected."
            ),
            reason=(
                "Typhoon alerts indicate severe weather conditions that can cause "
                "significant crop damage and safety risks."
            ),
            recommended_action=(
                "Secure all crops, tools, and equipment. Move seedlings to shelter. "
                "Reinforce structures and clear drainage channels."
            ),
            valid_until=ctx.valid_until(),
            dismissible=False,
        )]


class HeavyRainfallRule(SuggestionRule):
    name = "heavy-rainfall"

    def evaluate(self, ctx: RuleContext) -> List[Suggestion]:
        today = ctx.today
        precipitation = today.precipitation_or_zero

        if heavy_rain_triggered(ctx):
            priority = SuggestionPriority.HIGH
            if ctx.rain_volume > ctx.thresholds.heavy_rain_volume_mm:
                description = f"{_format_number(ctx.rain_volume)}mm of rain"
            else:
                description = f"A {precipitation}% chance of heavy rain"
            title = "Heavy Rain Expected"
            message = (
                f"{description} is forecast for today in {ctx.location.display_name}. "
                "This amount of rain can cause runoff and waterlogging."
            )
            action = (
                "Delay planting new crops and fertilizer application until after "
                "the rain passes. If already applied, consider covering with mulch."
            )
        elif moderate_rain_triggered(ctx):
            priority = SuggestionPriority.MEDIUM
            title = "Rain Likely Today"
            message = (
                f"There is a {precipitation}% chance of rain today in "
                f"{ctx.location.display_name}."
            )
            action = (
                "Consider holding off on fertilizer application and planting until "
                "you see how the day turns out."
            )
        else:
            return []

        return [Suggestion(
            id=self.suggestion_id(priority.value.lower(), date_key(today.forecast_date)),
            type=SuggestionType.FARMING_ADVICE,
            priority=priority,
            title=title,
            message=message + ctx.crop_note(),
            reason=(
                "Heavy rainfall washes away fertilizer and can damage newly planted "
                "crops. Waterlogged soil also prevents proper root development."
            ),
            recommended_action=action,
            valid_until=ctx.valid_until(today.forecast_date),
        )]


class StrongWindRule(SuggestionRule):
    name = "strong-wind"

    def evaluate(self, ctx: RuleContext) -> List[Suggestion]:
        if not strong_wind_triggered(ctx):
            return []

        limit = _format_number(ctx.thresholds.strong_wind_kmh)
        return [Suggestion(
            id=self.suggestion_id(date_key(ctx.today.forecast_date)),
            type=SuggestionType.FARMING_ADVICE,
            priority=SuggestionPriority.MEDIUM,
            title="Strong Wind Conditions",
            message=(
                f"Wind speed is {_format_number(ctx.wind_speed)} km/h in "
                f"{ctx.location.display_name}. This is too strong for safe spraying."
                + ctx.crop_note()
            ),
            reason=(
                f"Wind speeds above {limit} km/h cause pesticide and fertilizer drift, "
                "reducing effectiveness and potentially harming nearby crops or people."
            ),
            recommended_action=(
                "Postpone all spraying activities (pesticides, fertilizers, foliar "
                f"feeds) until wind speed drops below {limit} km/h."
            ),
            valid_until=ctx.valid_until(),
        )]


class ContinuousRainRule(SuggestionRule):
    name = "continuous-rain"

    def find_rainy_run(self, ctx: RuleContext) -> Optional[List[ForecastDay]]:
        """First run of consecutive rainy days long enough to trigger, if any."""
        needed = ctx.thresholds.continuous_rain_days
        run: List[ForecastDay] = []
        for day in ctx.weather.daily_forecast:
            if day.precipitation_or_zero >= ctx.thresholds.moderate_rain_probability:
                run.append(day)
                continue
            if len(run) >= needed:
                return run
            run = []
        return run if len(run) >= needed else None

    def evaluate(self, ctx: RuleContext) -> List[Suggestion]:
        run = self.find_rainy_run(ctx)
        if run is None:
            return []

        first, last = run[0], run[-1]
        return [Suggestion(
            id=self.suggestion_id(date_key(first.forecast_date)),
            type=SuggestionType.FARMING_ADVICE,
            priority=SuggestionPriority.MEDIUM,
            title="Extended Rain Period",
            message=(
                f"Rain is expected for {len(run)} days in a row from {first.label} "
                f"in {ctx.location.display_name}. Continuous rain can cause "
                "waterlogging and drainage issues." + ctx.crop_note()
            ),
            reason=(
                "Several consecutive days of rain can saturate soil, leading to poor "
                "drainage, root rot, and increased disease risk."
            ),
            recommended_action=(
                "Check and clear all drainage channels and field canals. Ensure water "
                "can flow away from crops. Monitor for standing water."
            ),
            valid_until=ctx.valid_until(last.forecast_date),
        )]


class HeatStressRule(SuggestionRule):
    name = "heat-stress"

    def evaluate(self, ctx: RuleContext) -> List[Suggestion]:
        today = ctx.today
        if today.high < ctx.thresholds.heat_stress_temperature:
            return []
        if today.precipitation_or_zero >= ctx.thresholds.heat_stress_max_precipitation:
            return []

        return [Suggestion(
            id=self.suggestion_id(date_key(today.forecast_date)),
            type=SuggestionType.FARMING_ADVICE,
            priority=SuggestionPriority.LOW,
            title="High Temperature Alert",
            message=(
                f"Temperature will reach {_format_number(today.high)}°C today in "
                f"{ctx.location.display_name} with little chance of rain."
                + ctx.crop_note()
            ),
            reason=(
                "High temperatures without rain increase water stress in crops and "
                "can reduce yields. Farmers also need extra hydration."
            ),
            recommended_action=(
                "Increase irrigation frequency, especially in the morning. Stay "
                "hydrated and avoid working during peak heat hours (11 AM - 3 PM)."
            ),
            valid_until=ctx.valid_until(today.forecast_date),
        )]


class ScheduleConflictRule(SuggestionRule):
    name = "schedule-conflict"

    def evaluate(self, ctx: RuleContext) -> List[Suggestion]:
        if not ctx.farm_tasks or not ctx.farm_tasks.tasks:
            return []

        forecast_by_key = {
            date_key(day.forecast_date): day for day in ctx.weather.daily_forecast
        }
        suggestions = []
        for task in ctx.farm_tasks.tasks:
            day = forecast_by_key.get(task.date_key)
            if day is None:
                continue
            precipitation = day.precipitation_or_zero
            if precipitation < ctx.thresholds.schedule_conflict_probability:
                continue

            if precipitation >= ctx.thresholds.schedule_conflict_high_probability:
                priority = SuggestionPriority.HIGH
            else:
                priority = SuggestionPriority.MEDIUM
            task_type = task.task_type or "farm task"
            suggestions.append(Suggestion(
                id=self.suggestion_id(task.id, task.date_key),
                type=SuggestionType.SCHEDULE_SUGGESTION,
                priority=priority,
                title=f"Reschedule: {task.title}",
                message=(
                    f'Your scheduled {task_type.lower()} "{task.title}" is planned for '
                    f"{day.label}, but there's a {precipitation}% chance of rain."
                ),
                reason=(
                    "Rainy conditions make outdoor farming activities less effective "
                    f"and can be unsafe. {task_type} work is best done in dry weather."
                ),
                recommended_action=(
                    "Consider moving this task to a drier day. Check the forecast for "
                    "better weather windows."
                ),
                valid_until=ctx.valid_until(day.forecast_date),
            ))
        return suggestions


class ExtremeCombinationRule(SuggestionRule):
    """Typhoon, heavy rain and strong wind together replace their single warnings."""

    name = "extreme-combination"
    supersedes = (
        TyphoonAlertRule.name,
        HeavyRainfallRule.name,
        StrongWindRule.name,
    )

    def evaluate(self, ctx: RuleContext) -> List[Suggestion]:
        if not (
            typhoon_triggered(ctx)
            and heavy_rain_triggered(ctx)
            and strong_wind_triggered(ctx)
        ):
            return []

        return [Suggestion(
            id=self.suggestion_id(date_key(ctx.today.forecast_date)),
            type=SuggestionType.RISK_WARNING,
            priority=SuggestionPriority.HIGH,
            title="Multiple Weather Risks",
            message=(
                f"{ctx.location.display_name} is experiencing multiple weather risks: "
                f"typhoon, heavy rain ({ctx.today.precipitation_or_zero}% chance) and "
                f"strong winds ({_format_number(ctx.wind_speed)} km/h)."
            ),
            reason=(
                "Combined extreme weather conditions significantly increase the risk "
                "of crop damage, flooding, and safety hazards."
            ),
            recommended_action=(
                "Secure all structures, move valuable crops to shelter, clear all "
                "drainage, and avoid outdoor work. Monitor weather updates closely."
            ),
            valid_until=ctx.valid_until(),
            dismissible=False,
        )]


DEFAULT_RULES: tuple[SuggestionRule, ...] = (
    ExtremeCombinationRule(),
    TyphoonAlertRule(),
    HeavyRainfallRule(),
    StrongWindRule(),
    ContinuousRainRule(),
    HeatStressRule(),
    ScheduleConflictRule(),
)
