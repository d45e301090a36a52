"""Categories every new user starts with."""

DEFAULT_CATEGORIES = [
    {
        'name': 'Software',
        'description': 'Programming, coding and software development',
        'color': '#10b981',
        'icon': 'Code',
    },
    {
        'name': 'Mathematics',
        'description': 'Math study and problem solving',
        'color': '#3b82f6',
        'icon': 'Calculator',
    },
    {
        'name': 'Reading',
        'description': 'Reading books and research',
        'color': '#8b5cf6',
        'icon': 'BookOpen',
    },
    {
        'name': 'Exercise',
        'description': 'Sports and physical activity',
        'color': '#f97316',
        'icon': 'Dumbbell',
    },
    {
        'name': 'Music',
        'description': 'Music practice and playing instruments',
        'color': '#ec4899',
        'icon': 'Music',
    },
    {
        'name': 'Design',
        'description': 'Graphic design and creative work',
        'color': '#6366f1',
        'icon': 'Palette',
    },
]


def create_default_categories(user):
    """
    Create the default categories for user.
    Safe to call repeatedly; existing names are left untouched.
    """
    from .models import Category

    created = []
    for data in DEFAULT_CATEGORIES:
        category, was_created = Category.objects.get_or_create(
            user=user,
            name=data['name'],
            defaults={
                'description': data['description'],
                'color': data['color'],
                'icon': data['icon'],
                'is_default': True,
            }
        )
        if was_created:
            created.append(category)
    return created
