"""
Domain service: crop-cycle task generation.

Projects a crop's static task templates onto the calendar, starting from the
planting date and limited to a look-ahead window from today. Output is
recomputed on every call; only task statuses are persisted, keyed by the
deterministic task id, and merged back in with ``merge_statuses``.
"""
import logging
from datetime import date, datetime, tzinfo
from typing import Iterable, List, Mapping, Optional

from plantanim.domain.crop_registry import get_crop_config
from plantanim.domain.models import (
    CropConfig,
    CropPlanting,
    DailyTask,
    TaskStatus,
    TaskTemplate,
)
from plantanim.utils.date_helpers import (
    DateLike,
    cycle_day_to_date,
    date_key,
    day_in_cycle,
    reference_time,
    to_date,
)

logger = logging.getLogger(__name__)


def make_task_id(crop_id: str, planting_date: date, day: int, template: TaskTemplate) -> str:
    """Stable id for a generated task; identical inputs give identical ids."""
    return (
        f"task-{crop_id}-{planting_date.strftime('%Y%m%d')}-{day}-"
        f"{template.task_type.value.lower()}"
    )


class CropCycleTaskGenerator:
    """
    Generates dated DailyTask records from crop templates.

    The generator is single-crop per call and holds no state besides its
    registry lookup and default window.
    """

    def __init__(
        self,
        default_look_ahead_days: int = 30,
        registry=get_crop_config,
        tz: Optional[tzinfo] = None,
    ):
        self.default_look_ahead_days = default_look_ahead_days
        self._lookup = registry
        self.tz = tz

    def generate(
        self,
        crop_id: str,
        planting_date: DateLike,
        now: DateLike,
        look_ahead_days: Optional[int] = None,
    ) -> List[DailyTask]:
        """
        Generate the tasks of one crop falling inside the look-ahead window.

        Args:
            crop_id: Registry id of the crop (e.g. "rice")
            planting_date: Date the crop was planted (cycle day 1)
            now: Reference date or time; a datetime is read in the farm timezone.
                Tasks dated before it are never produced
            look_ahead_days: Window size in days (defaults to the configured value)

        Returns:
            Tasks sorted by date, template order within a date. Empty for
            unknown crops.
        """
        config = self._lookup(crop_id)
        if config is None:
            logger.warning(f"No crop configuration found for: {crop_id}")
            return []

        if look_ahead_days is None:
            look_ahead_days = self.default_look_ahead_days

        planted = to_date(planting_date)
        today = self._local_date(now)
        current_day = day_in_cycle(planted, today)
        max_day = min(current_day + look_ahead_days, config.duration_days)

        tasks = []
        for template in config.task_templates:
            for day in template.occurrence_days():
                if day < current_day or day > max_day:
                    continue
                task_date = cycle_day_to_date(planted, day)
                if task_date < today:
                    continue
                tasks.append(self._materialize(config, planted, template, day, task_date))

        tasks.sort(key=lambda task: task.date)
        logger.debug(
            f"Generated {len(tasks)} task(s) for {crop_id} "
            f"(cycle days {current_day}-{max_day})"
        )
        return tasks

    def generate_for_plantings(
        self,
        plantings: Iterable[CropPlanting],
        now: DateLike,
        look_ahead_days: Optional[int] = None,
    ) -> List[DailyTask]:
        """Concatenate tasks for several plantings, re-sorted by date."""
        tasks: List[DailyTask] = []
        for planting in plantings:
            tasks.extend(
                self.generate(planting.crop_id, planting.planting_date, now, look_ahead_days)
            )
        tasks.sort(key=lambda task: task.date)
        return tasks

    def is_cycle_complete(self, crop_id: str, planting_date: DateLike, now: DateLike) -> bool:
        """Whether the crop's cycle has run past its duration."""
        config = self._lookup(crop_id)
        if config is None:
            return False
        return day_in_cycle(planting_date, self._local_date(now)) > config.duration_days

    def _local_date(self, now: DateLike) -> date:
        if isinstance(now, datetime):
            return reference_time(now, self.tz).date()
        return now

    @staticmethod
    def _materialize(
        config: CropConfig,
        planted: date,
        template: TaskTemplate,
        day: int,
        task_date: date,
    ) -> DailyTask:
        return DailyTask(
            id=make_task_id(config.id, planted, day, template),
            date=date_key(task_date),
            crop_type=config.id,
            crop_name=config.name,
            growth_stage=template.growth_stage,
            day_in_cycle=day,
            task_type=template.task_type,
            title=template.title.replace("{day}", str(day)),
            description=template.description,
            is_weather_sensitive=template.is_weather_sensitive,
            status=TaskStatus.PENDING,
            calendar_color=template.calendar_color,
        )


def merge_statuses(
    tasks: Iterable[DailyTask],
    statuses: Mapping[str, TaskStatus],
) -> List[DailyTask]:
    """Apply persisted statuses to freshly generated tasks."""
    merged = []
    for task in tasks:
        status = statuses.get(task.id)
        if status is not None and status != task.status:
            task = task.model_copy(update={"status": TaskStatus(status)})
        merged.append(task)
    return merged
