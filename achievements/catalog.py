"""
Static achievement catalog.

Each definition names the statistic it is checked against (condition_type)
and the threshold that statistic must reach (condition_value). The database
rows in achievements.Achievement are synced from this list.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

CONSECUTIVE_DAYS = 'consecutive_days'
DAILY_MINUTES = 'daily_minutes'
GOALS_COMPLETED = 'goals_completed'
TOTAL_HOURS = 'total_hours'
CATEGORY_HOURS = 'category_hours'
UNIQUE_CATEGORIES = 'unique_categories'
CONTINUOUS_WORK = 'continuous_work'
WEEKEND_WORK = 'weekend_work'
TIME_RANGE_WORK = 'time_range_work'

CONDITION_TYPES = (
    CONSECUTIVE_DAYS,
    DAILY_MINUTES,
    GOALS_COMPLETED,
    TOTAL_HOURS,
    CATEGORY_HOURS,
    UNIQUE_CATEGORIES,
    CONTINUOUS_WORK,
    WEEKEND_WORK,
    TIME_RANGE_WORK,
)


@dataclass(frozen=True)
class AchievementDefinition:
    achievement_id: str
    name: str
    description: str
    icon: str
    category: str
    points: int
    rarity: str
    condition_type: str
    condition_value: int
    time_range: Optional[Tuple[int, int]] = None  # local hours, end exclusive

    def as_defaults(self):
        """Field values for Achievement.objects.update_or_create()."""
        start, end = self.time_range or (None, None)
        return {
            'name': self.name,
            'description': self.description,
            'icon': self.icon,
            'category': self.category,
            'points': self.points,
            'rarity': self.rarity,
            'condition_type': self.condition_type,
            'condition_value': self.condition_value,
            'time_range_start': start,
            'time_range_end': end,
        }


ACHIEVEMENTS = [
    # Streaks
    AchievementDefinition('streak_beginner', 'Getting Started', 'Track time 3 days in a row',
                          'Flame', 'streak', 50, 'common', CONSECUTIVE_DAYS, 3),
    AchievementDefinition('streak_warrior', 'Weekly Warrior', 'Track time 7 days in a row',
                          'Sword', 'streak', 150, 'rare', CONSECUTIVE_DAYS, 7),
    AchievementDefinition('streak_king', 'King of the Month', 'Track time 30 days in a row',
                          'Crown', 'streak', 500, 'epic', CONSECUTIVE_DAYS, 30),
    AchievementDefinition('streak_legend', 'Legend', 'Track time 100 days in a row',
                          'Star', 'streak', 1500, 'legendary', CONSECUTIVE_DAYS, 100),
    AchievementDefinition('streak_titan', 'Titan', 'Track time 365 days in a row',
                          'Trophy', 'streak', 5000, 'legendary', CONSECUTIVE_DAYS, 365),

    # Time tracked in a single day
    AchievementDefinition('time_first_step', 'First Step', 'Track your first 30 minutes in a day',
                          'Clock', 'time', 25, 'common', DAILY_MINUTES, 30),
    AchievementDefinition('time_hourly_hero', 'Hourly Hero', 'Track 1 hour in a day',
                          'Clock3', 'time', 100, 'common', DAILY_MINUTES, 60),
    AchievementDefinition('time_marathon', 'Marathon Runner', 'Track 3 hours in a day',
                          'Timer', 'time', 300, 'rare', DAILY_MINUTES, 180),
    AchievementDefinition('time_iron_man', 'Iron Man', 'Track 5 hours in a day',
                          'Shield', 'time', 500, 'epic', DAILY_MINUTES, 300),
    AchievementDefinition('time_super_human', 'Superhuman', 'Track 8 hours in a day',
                          'Zap', 'time', 800, 'legendary', DAILY_MINUTES, 480),

    # Goals
    AchievementDefinition('goal_hunter', 'Goal Hunter', 'Complete your first goal',
                          'Target', 'goal', 75, 'common', GOALS_COMPLETED, 1),
    AchievementDefinition('goal_perfect_shot', 'Bullseye', 'Complete 5 goals',
                          'Crosshair', 'goal', 200, 'rare', GOALS_COMPLETED, 5),
    AchievementDefinition('goal_perfectionist', 'Perfectionist', 'Complete 10 goals',
                          'Award', 'goal', 400, 'epic', GOALS_COMPLETED, 10),

    # Working patterns
    AchievementDefinition('perf_early_bird', 'Early Bird', 'Start a session between 6 and 9 in the morning',
                          'Sunrise', 'performance', 100, 'rare', TIME_RANGE_WORK, 1, (6, 9)),
    AchievementDefinition('perf_night_owl', 'Night Owl', 'Start a session between 10 at night and 2 in the morning',
                          'Moon', 'performance', 100, 'rare', TIME_RANGE_WORK, 1, (22, 2)),
    AchievementDefinition('perf_weekend_warrior', 'Weekend Warrior', 'Track time on a weekend',
                          'Calendar', 'performance', 150, 'rare', WEEKEND_WORK, 1),
    AchievementDefinition('perf_deep_focus', 'Deep Focus', 'Work for 2 hours without stopping',
                          'Focus', 'performance', 200, 'epic', CONTINUOUS_WORK, 120),

    # Lifetime totals
    AchievementDefinition('total_first_10', 'First 10 Hours', 'Track 10 hours in total',
                          'Clock4', 'total', 200, 'common', TOTAL_HOURS, 10),
    AchievementDefinition('total_100_club', '100 Hour Club', 'Track 100 hours in total',
                          'Medal', 'total', 1000, 'rare', TOTAL_HOURS, 100),
    AchievementDefinition('total_500_legend', '500 Hour Legend', 'Track 500 hours in total',
                          'Award', 'total', 3000, 'epic', TOTAL_HOURS, 500),
    AchievementDefinition('total_1000_titan', '1000 Hour Titan', 'Track 1000 hours in total',
                          'Crown', 'total', 10000, 'legendary', TOTAL_HOURS, 1000),

    # Categories
    AchievementDefinition('cat_expert', 'Expert', 'Track 50 hours in one category',
                          'BookOpen', 'category', 500, 'rare', CATEGORY_HOURS, 50),
    AchievementDefinition('cat_master', 'Master', 'Track 100 hours in one category',
                          'GraduationCap', 'category', 1000, 'epic', CATEGORY_HOURS, 100),
    AchievementDefinition('cat_versatile', 'Versatile', 'Track time in 5 different categories',
                          'Shuffle', 'category', 300, 'rare', UNIQUE_CATEGORIES, 5),
]

RARITY_COLORS = {
    'common': '#10B981',
    'rare': '#3B82F6',
    'epic': '#8B5CF6',
    'legendary': '#F59E0B',
}

RARITY_NAMES = {
    'common': 'Common',
    'rare': 'Rare',
    'epic': 'Epic',
    'legendary': 'Legendary',
}

CATEGORY_NAMES = {
    'streak': 'Streak',
    'time': 'Time',
    'goal': 'Goal',
    'performance': 'Performance',
    'total': 'Total',
    'category': 'Category',
}


def get_definition(achievement_id):
    for definition in ACHIEVEMENTS:
        if definition.achievement_id == achievement_id:
            return definition
    return None
