"""
Recurring task scheduling.

A `RecurringTask` is a template; the scheduler materializes concrete
`PlannedTask` rows from it. `next_due_date` always holds the due date of the
newest materialized task, so a definition only becomes due again once that
date has arrived. Generation advances strictly past today, which makes a
repeated run on the same day a no-op.

Month and year steps use `relativedelta`, which clamps to the last valid day
of the target month (2024-01-31 + 1 month = 2024-02-29, 2024-02-29 + 1 year =
2025-02-28). Each step starts from the previous due date, so a definition
anchored on the 31st settles on the shortest month-end it has passed through.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Tuple

from dateutil.relativedelta import relativedelta
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from HomeCareAPI.access_service import AccessEvaluator
from HomeCareAPI.constants import DEFAULT_CATEGORY, DEFAULT_PRIORITY, FREQUENCIES, PRIORITIES, Frequency, Role
from HomeCareAPI.errors import InvalidFrequency, NotFound, ValidationFailed
from HomeCareAPI.models import PlannedTask, RecurringTask
from HomeCareAPI.utils import local_today

logger = logging.getLogger(__name__)

FREQUENCY_OFFSETS = {
    Frequency.WEEKLY: relativedelta(days=7),
    Frequency.BIWEEKLY: relativedelta(days=14),
    Frequency.MONTHLY: relativedelta(months=1),
    Frequency.QUARTERLY: relativedelta(months=3),
    Frequency.BIANNUAL: relativedelta(months=6),
    Frequency.ANNUAL: relativedelta(years=1),
}
DEFAULT_OFFSET = relativedelta(months=1)

UPDATABLE_FIELDS = ("title", "description", "frequency", "priority", "estimated_cost", "category", "is_active")


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def compute_next_due_date(frequency, from_date=None) -> date:
    """
    Step a date forward by one recurrence period.

    Args:
        frequency (str): weekly, biweekly, monthly, quarterly, biannual or
            annual. Anything else steps one month.
        from_date (date | datetime | str, optional): Start date; defaults to
            today in the application time zone.

    Returns:
        date: The next due date, without a time component.
    """
    start = local_today() if from_date is None else _as_date(from_date)
    return start + FREQUENCY_OFFSETS.get(frequency, DEFAULT_OFFSET)


def first_due_after(frequency, due_date: date, today: date) -> date:
    """Step `due_date` forward until it lies strictly after `today`."""
    due = _as_date(due_date)
    while due <= today:
        due = compute_next_due_date(frequency, due)
    return due


def validate_frequency(frequency) -> str:
    if frequency not in FREQUENCIES:
        raise InvalidFrequency(f"Invalid frequency; expected one of {', '.join(FREQUENCIES)}")
    return frequency


def validate_priority(priority) -> str:
    if priority not in PRIORITIES:
        raise ValidationFailed(f"Invalid priority; expected one of {', '.join(PRIORITIES)}")
    return priority


@dataclass
class GenerationResult:
    tasks: List[PlannedTask] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)


class RecurringTaskScheduler:
    """Creates recurring task definitions and materializes their planned tasks."""

    def __init__(self, db: Session):
        self.db = db
        self.access = AccessEvaluator(db)

    def list_definitions(self, property_id: int, user_id: int) -> List[RecurringTask]:
        self.access.require_any_access(user_id, property_id)
        return (
            self.db.query(RecurringTask)
            .filter(RecurringTask.property_id == property_id)
            .order_by(RecurringTask.next_due_date.asc())
            .all()
        )

    def get_definition(self, definition_id: int) -> RecurringTask:
        definition = self.db.query(RecurringTask).filter(RecurringTask.id == definition_id).first()
        if not definition:
            raise NotFound("Recurring task not found")
        return definition

    def create_definition(
        self,
        property_id: int,
        user_id: int,
        title: str,
        frequency: str,
        priority: Optional[str] = None,
        estimated_cost: Optional[str] = None,
        category: Optional[str] = None,
        description: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Tuple[RecurringTask, PlannedTask]:
        """
        Create a recurring task and its first planned task together.

        Args:
            property_id (int): The property.
            user_id (int): The caller; needs edit access or better.
            title (str): Task title.
            frequency (str): Recurrence frequency.
            priority (str, optional): Defaults to Medium.
            estimated_cost (str, optional): Free-form estimate.
            category (str, optional): Defaults to General.
            description (str, optional): Free-form description.
            today (date, optional): Override for the current date.

        Returns:
            tuple[RecurringTask, PlannedTask]: The definition and the first task.
        """
        self.access.require_edit_access(user_id, property_id)
        title = (title or "").strip()
        if not title:
            raise ValidationFailed("Title is required")
        validate_frequency(frequency)
        priority = validate_priority(priority or DEFAULT_PRIORITY)

        next_due = compute_next_due_date(frequency, today or local_today())
        definition = RecurringTask(
            property_id=property_id,
            user_id=user_id,
            title=title,
            description=description or None,
            frequency=frequency,
            priority=priority,
            estimated_cost=estimated_cost or None,
            category=category or DEFAULT_CATEGORY,
            next_due_date=next_due,
            last_generated_date=None,
            is_active=True,
        )
        try:
            self.db.add(definition)
            self.db.flush()
            planned = self._instance_for(definition, next_due)
            self.db.add(planned)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to create recurring task on property %s", property_id)
            raise
        self.db.refresh(definition)
        self.db.refresh(planned)

        logger.info("Created recurring task %s (%s), first due %s", definition.id, frequency, next_due)
        return definition, planned

    def update_definition(self, definition_id: int, user_id: int, changes: dict) -> RecurringTask:
        definition = self.get_definition(definition_id)
        self.access.require_edit_access(user_id, definition.property_id)

        if "frequency" in changes and changes["frequency"] is not None:
            validate_frequency(changes["frequency"])
        if "priority" in changes and changes["priority"] is not None:
            validate_priority(changes["priority"])

        for key in UPDATABLE_FIELDS:
            if key not in changes:
                continue
            value = changes[key]
            # only description and estimated_cost may be cleared
            if value is None and key not in ("description", "estimated_cost"):
                continue
            setattr(definition, key, value)

        try:
            self.db.commit()
            self.db.refresh(definition)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to update recurring task %s", definition_id)
            raise
        return definition

    def delete_definition(self, definition_id: int, user_id: int) -> None:
        definition = self.get_definition(definition_id)
        self.access.require_edit_access(user_id, definition.property_id)
        try:
            self.db.delete(definition)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to delete recurring task %s", definition_id)
            raise

    def generate_due_instances(self, user_id: int, today: Optional[date] = None) -> GenerationResult:
        """
        Materialize planned tasks for the caller's due recurring tasks.

        Only active definitions on properties where the caller has edit access
        or better are considered.

        Args:
            user_id (int): The caller.
            today (date, optional): Override for the current date.

        Returns:
            GenerationResult: Created tasks and ids of definitions that failed.
        """
        property_ids = self.access.accessible_property_ids(user_id, Role.EDIT)
        if not property_ids:
            return GenerationResult()
        definitions = (
            self.db.query(RecurringTask)
            .filter(RecurringTask.is_active.is_(True), RecurringTask.property_id.in_(property_ids))
            .order_by(RecurringTask.id.asc())
            .all()
        )
        return self._generate(definitions, today or local_today())

    def generate_all_due(self, today: Optional[date] = None) -> GenerationResult:
        """Run generation across every active definition, for scheduled jobs."""
        definitions = (
            self.db.query(RecurringTask)
            .filter(RecurringTask.is_active.is_(True))
            .order_by(RecurringTask.id.asc())
            .all()
        )
        return self._generate(definitions, today or local_today())

    def _generate(self, definitions: List[RecurringTask], today: date) -> GenerationResult:
        result = GenerationResult()
        definition_ids = [d.id for d in definitions]
        for definition_id, definition in zip(definition_ids, definitions):
            try:
                task = self._generate_one(definition, today)
            except SQLAlchemyError:
                self.db.rollback()
                logger.exception("Failed to generate planned task for recurring task %s", definition_id)
                result.failed.append(definition_id)
                continue
            if task is not None:
                result.tasks.append(task)

        logger.info(
            "Recurring task generation for %s: %d active, %d generated, %d failed",
            today,
            len(definitions),
            len(result.tasks),
            len(result.failed),
        )
        return result

    def _generate_one(self, definition: RecurringTask, today: date) -> Optional[PlannedTask]:
        if definition.next_due_date > today:
            return None

        due = first_due_after(definition.frequency, definition.next_due_date, today)
        already = (
            self.db.query(PlannedTask)
            .filter(PlannedTask.recurring_task_id == definition.id, PlannedTask.due_date == due)
            .first()
        )
        planned = None
        if already is None:
            planned = self._instance_for(definition, due)
            self.db.add(planned)

        definition.next_due_date = due
        definition.last_generated_date = today
        self.db.commit()
        if planned is not None:
            self.db.refresh(planned)
            logger.debug("Recurring task %s generated planned task %s due %s", definition.id, planned.id, due)
        return planned

    def _instance_for(self, definition: RecurringTask, due: date) -> PlannedTask:
        return PlannedTask(
            property_id=definition.property_id,
            user_id=definition.user_id,
            recurring_task_id=definition.id,
            title=f"{definition.title} (Recurring)",
            due_date=due,
            priority=definition.priority,
            estimated_cost=definition.estimated_cost or "0",
            status="pending",
        )
