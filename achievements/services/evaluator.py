"""
Achievement unlocking.

Every catalog entry is checked against a statistic from the user's
Aggregates. Met conditions produce a UserAchievement row; the unique
(user, achievement) pair makes repeated evaluation a no-op and unlocks
are never revoked.
"""
import logging

from django.db import transaction

from achievements import catalog
from achievements.models import Achievement, UserAchievement
from dashboard.services.aggregates import compute_aggregates

logger = logging.getLogger(__name__)


def sync_catalog():
    """
    Upsert every catalog definition into the Achievement table.
    Returns (created, updated) counts.
    """
    created = updated = 0
    for definition in catalog.ACHIEVEMENTS:
        _, was_created = Achievement.objects.update_or_create(
            achievement_id=definition.achievement_id,
            defaults=definition.as_defaults(),
        )
        if was_created:
            created += 1
        else:
            updated += 1
    return created, updated


def ensure_catalog():
    """Create any catalog rows that are missing. Existing rows are left alone."""
    existing = set(Achievement.objects.values_list('achievement_id', flat=True))
    missing = [d for d in catalog.ACHIEVEMENTS if d.achievement_id not in existing]
    for definition in missing:
        Achievement.objects.get_or_create(
            achievement_id=definition.achievement_id,
            defaults=definition.as_defaults(),
        )
    return len(missing)


def hour_in_range(hour, start, end):
    """True if hour falls in [start, end), wrapping past midnight when end < start."""
    if start <= end:
        return start <= hour < end
    return hour >= start or hour < end


def statistic_for(achievement, aggregates):
    """The aggregate value an achievement's condition is compared against."""
    condition = achievement.condition_type
    if condition == catalog.CONSECUTIVE_DAYS:
        return aggregates.streak
    if condition == catalog.DAILY_MINUTES:
        return aggregates.daily_minutes
    if condition == catalog.GOALS_COMPLETED:
        return aggregates.goals_completed
    if condition == catalog.TOTAL_HOURS:
        return aggregates.total_hours
    if condition == catalog.CATEGORY_HOURS:
        return aggregates.max_category_hours
    if condition == catalog.UNIQUE_CATEGORIES:
        return aggregates.unique_categories
    if condition == catalog.CONTINUOUS_WORK:
        return aggregates.longest_session_minutes
    if condition == catalog.WEEKEND_WORK:
        return aggregates.weekend_sessions
    if condition == catalog.TIME_RANGE_WORK:
        if achievement.time_range_start is None or achievement.time_range_end is None:
            return 0
        return sum(
            1 for hour in aggregates.start_hours
            if hour_in_range(hour, achievement.time_range_start, achievement.time_range_end)
        )
    logger.warning("Unknown achievement condition '%s' on %s", condition, achievement.pk)
    return 0


def is_met(achievement, aggregates):
    return statistic_for(achievement, aggregates) >= achievement.condition_value


def evaluate_achievements(user, aggregates):
    """
    Record every achievement whose condition is met and that the user does
    not hold yet. Returns the newly unlocked Achievement objects.
    """
    ensure_catalog()
    held = set(UserAchievement.objects.filter(user=user).values_list('achievement_id', flat=True))

    newly_unlocked = []
    for achievement in Achievement.objects.all():
        if achievement.pk in held or not is_met(achievement, aggregates):
            continue
        _, created = UserAchievement.objects.get_or_create(user=user, achievement=achievement)
        if created:
            newly_unlocked.append(achievement)

    if newly_unlocked:
        logger.info(
            "User %s unlocked %s",
            user.pk, ', '.join(a.achievement_id for a in newly_unlocked),
        )
    return newly_unlocked


def evaluate_achievements_safely(user, aggregates=None, tz=None):
    """
    Evaluate achievements after a timer change. Failures are logged and
    swallowed so they never undo or block the timer operation itself.
    """
    try:
        with transaction.atomic():
            if aggregates is None:
                aggregates = compute_aggregates(user, tz=tz)
            return evaluate_achievements(user, aggregates)
    except Exception:
        logger.exception("Achievement evaluation failed for user %s", user.pk)
        return []


def serialize_achievement(achievement, unlocked_at=None):
    return {
        'id': achievement.achievement_id,
        'name': achievement.name,
        'description': achievement.description,
        'icon': achievement.icon,
        'category': achievement.category,
        'rarity': achievement.rarity,
        'rarity_name': catalog.RARITY_NAMES.get(achievement.rarity, achievement.rarity),
        'rarity_color': catalog.RARITY_COLORS.get(achievement.rarity),
        'points': achievement.points,
        'condition_type': achievement.condition_type,
        'condition_value': achievement.condition_value,
        'is_unlocked': unlocked_at is not None,
        'unlocked_at': unlocked_at.isoformat() if unlocked_at else None,
    }


def grouped_achievements(user):
    """
    The full catalog grouped by category, each entry marked with whether
    (and when) the user unlocked it.
    """
    ensure_catalog()
    unlocked = dict(
        UserAchievement.objects.filter(user=user).values_list('achievement_id', 'achieved_at')
    )

    groups = {key: [] for key in catalog.CATEGORY_NAMES}
    total_points = 0
    for achievement in Achievement.objects.all():
        unlocked_at = unlocked.get(achievement.pk)
        if unlocked_at is not None:
            total_points += achievement.points
        groups.setdefault(achievement.category, []).append(
            serialize_achievement(achievement, unlocked_at)
        )

    return {
        'groups': [
            {
                'category': key,
                'name': catalog.CATEGORY_NAMES.get(key, key.title()),
                'achievements': items,
            }
            for key, items in groups.items()
            if items
        ],
        'total_points': total_points,
        'unlocked_count': len(unlocked),
        'total_count': sum(len(items) for items in groups.values()),
    }


def summarize_unlocks(achievements):
    """Short form of newly unlocked achievements for timer responses."""
    return [
        {
            'id': a.achievement_id,
            'name': a.name,
            'icon': a.icon,
            'rarity': a.rarity,
            'points': a.points,
        }
        for a in achievements
    ]
