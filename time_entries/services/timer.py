"""
Timer lifecycle for time entries.

Each user is either idle (no open entry) or running (exactly one open entry).
The one-open-entry rule is checked here before every insert and enforced by
the one_open_time_entry_per_user constraint in the database, so a double
start that races past the check still fails with ConflictError.

Stop and cancel are conditional on end_time still being NULL, so the second
of two terminal operations on the same entry matches nothing and raises
NotFoundError.
"""
import logging
from datetime import timedelta

from django.db import IntegrityError, transaction
from django.utils import timezone

from categories.models import Category
from settings.policy import get_timer_policy
from time_entries.exceptions import ConflictError, InvalidCategoryError, NotFoundError
from time_entries.models import TimeEntry
from time_entries.services import accounting

logger = logging.getLogger(__name__)

AUTO_CLOSED_SUFFIX = ' (auto-closed)'


class TimerService:
    """Start, stop and cancel timers for a single user."""

    def __init__(self, user, policy=None, tz=None):
        self.user = user
        self.policy = policy or get_timer_policy()
        # Local timezone used when evaluating achievements after a stop
        self.tz = tz

    def _open_entries(self):
        return TimeEntry.objects.open().for_user(self.user)

    def get_active_session(self):
        """The user's running entry, or None."""
        return (
            self._open_entries()
            .select_related('category')
            .order_by('-start_time')
            .first()
        )

    def reconcile_stale_sessions(self):
        """
        Close open entries older than the stale threshold.

        The credited duration is capped and the description is marked as
        auto-closed. Failures are logged per entry and do not stop the sweep.
        Returns the number of entries closed.
        """
        now = timezone.now()
        cutoff = now - self.policy.stale_threshold
        stale_entries = list(self._open_entries().filter(start_time__lt=cutoff))

        closed = 0
        for entry in stale_entries:
            try:
                with transaction.atomic():
                    if self._close_stale_entry(entry, now):
                        closed += 1
            except Exception:
                logger.exception("Could not auto-close stale time entry %s for user %s", entry.pk, self.user.pk)

        if closed:
            logger.info("Auto-closed %d stale time entr%s for user %s", closed, 'y' if closed == 1 else 'ies', self.user.pk)
        return closed

    def _close_stale_entry(self, entry, now):
        result = accounting.calculate(entry.start_time, now, cap=self.policy.stale_duration_cap_seconds)
        end_time = entry.start_time + timedelta(seconds=result.duration)
        updated = TimeEntry.objects.filter(pk=entry.pk, end_time__isnull=True).update(
            end_time=end_time,
            duration=result.duration,
            points=result.points,
            description=f"{entry.description or ''}{AUTO_CLOSED_SUFFIX}",
            updated_at=now,
        )
        return updated == 1

    def _get_category(self, category_id):
        if category_id in (None, ''):
            raise InvalidCategoryError("A category is required")
        try:
            return Category.objects.get(pk=category_id, user=self.user)
        except (Category.DoesNotExist, ValueError, TypeError):
            raise InvalidCategoryError("Invalid category selection")

    def start_session(self, category_id, description='', force_close=False):
        """
        Start a timer against category_id.

        Raises ConflictError when a timer is already running, unless
        force_close is set, in which case the running timer is stopped first.
        """
        self.reconcile_stale_sessions()

        # Validate before touching a running timer
        category = self._get_category(category_id)

        active = self.get_active_session()
        if active is not None:
            if not force_close:
                started = active.start_time.astimezone(self.tz) if self.tz else active.start_time
                raise ConflictError(
                    f"A timer is already running: {active.category.name}. "
                    f"Started at {started.strftime('%H:%M:%S')}",
                    active_entry=active,
                )
            self.stop_session(active.pk)

        try:
            with transaction.atomic():
                entry = TimeEntry.objects.create(
                    user=self.user,
                    category=category,
                    start_time=timezone.now(),
                    end_time=None,
                    duration=0,
                    points=0,
                    description=description or '',
                )
        except IntegrityError:
            raise ConflictError("A timer is already running", active_entry=self.get_active_session())

        logger.info("Timer started: entry=%s user=%s category=%s", entry.pk, self.user.pk, category.name)
        return entry

    def stop_session(self, timer_id=None, award_achievements=True):
        """
        Stop the given running timer, or whichever one is running when no id
        is given. Sets end_time, duration and points.
        """
        with transaction.atomic():
            entries = self._open_entries().select_for_update()
            if timer_id is not None:
                try:
                    entry = entries.filter(pk=timer_id).first()
                except (ValueError, TypeError):
                    entry = None
            else:
                entry = entries.order_by('-start_time').first()

            if entry is None:
                raise NotFoundError("No running timer found to stop")

            now = timezone.now()
            result = accounting.calculate(entry.start_time, now)
            updated = TimeEntry.objects.filter(pk=entry.pk, end_time__isnull=True).update(
                end_time=now,
                duration=result.duration,
                points=result.points,
                updated_at=now,
            )
            if not updated:
                raise NotFoundError("No running timer found to stop")

        entry.refresh_from_db()
        logger.info(
            "Timer stopped: entry=%s user=%s duration=%ds points=%d",
            entry.pk, self.user.pk, entry.duration, entry.points,
        )

        entry.unlocked_achievements = []
        if award_achievements:
            entry.unlocked_achievements = self._award_achievements()
        return entry

    def cancel_session(self, timer_id):
        """Delete a running timer outright. No duration or points are kept."""
        if timer_id in (None, ''):
            raise NotFoundError("A timer id is required to cancel")
        try:
            deleted, _ = self._open_entries().filter(pk=timer_id).delete()
        except (ValueError, TypeError):
            deleted = 0
        if not deleted:
            raise NotFoundError("No running timer found to cancel")
        logger.info("Timer cancelled: entry=%s user=%s", timer_id, self.user.pk)

    def force_close_all(self):
        """
        Stop every open entry for the user. One failing entry does not
        prevent the others from closing. Returns the closed entries.
        """
        closed = []
        for entry in list(self._open_entries().order_by('start_time')):
            try:
                closed.append(self.stop_session(entry.pk, award_achievements=False))
            except NotFoundError:
                logger.warning("Time entry %s was closed before the sweep reached it", entry.pk)
            except Exception:
                logger.exception("Could not close time entry %s for user %s", entry.pk, self.user.pk)

        if closed:
            self._award_achievements()
        return closed

    def _award_achievements(self):
        from achievements.services.evaluator import evaluate_achievements_safely
        return evaluate_achievements_safely(self.user, tz=self.tz)


def get_active_session(user):
    return TimerService(user).get_active_session()


def start_session(user, category_id, description='', force_close=False, tz=None):
    return TimerService(user, tz=tz).start_session(category_id, description=description, force_close=force_close)


def stop_session(user, timer_id=None, tz=None):
    return TimerService(user, tz=tz).stop_session(timer_id)


def cancel_session(user, timer_id):
    return TimerService(user).cancel_session(timer_id)


def force_close_all(user, tz=None):
    return TimerService(user, tz=tz).force_close_all()
