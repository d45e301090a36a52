from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_GET

from timekeeper.timezone_utils import get_user_timezone
from .services.evaluator import evaluate_achievements_safely, grouped_achievements, summarize_unlocks


@never_cache
@login_required
@require_GET
def achievements_api(request):
    """
    The achievement catalog grouped by category. Conditions are
    re-checked first so badges earned since the last stop show up,
    which means this GET may record new unlocks. Never cached.
    """
    new = evaluate_achievements_safely(request.user, tz=get_user_timezone(request))
    payload = grouped_achievements(request.user)
    return JsonResponse({
        'success': True,
        'new_achievements': summarize_unlocks(new),
        **payload,
    })
