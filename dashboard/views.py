from datetime import datetime

from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from time_entries.exceptions import ValidationError
from timekeeper.timezone_utils import get_user_timezone
from .services.aggregates import WINDOW_CUSTOM, WINDOW_DAY, WINDOW_MONTH, compute_aggregates
from .services.calendar import build_calendar
from .services.summary import build_dashboard


def _parse_date(value):
    if not value:
        return None
    return datetime.strptime(value, '%Y-%m-%d').date()


@login_required
@require_GET
def dashboard_api(request):
    """Dashboard payload in the user's timezone."""
    payload = build_dashboard(request.user, tz=get_user_timezone(request))
    return JsonResponse({'success': True, **payload})


@login_required
@require_GET
def stats_api(request):
    """
    Aggregates for ?window=day|week|month|custom. Custom windows take
    inclusive ?start= and ?end= dates (YYYY-MM-DD).
    """
    window = request.GET.get('window', WINDOW_DAY)
    try:
        start = end = None
        if window == WINDOW_CUSTOM:
            start = _parse_date(request.GET.get('start'))
            end = _parse_date(request.GET.get('end'))
        aggregates = compute_aggregates(request.user, window=window, tz=get_user_timezone(request), start=start, end=end)
    except ValueError:
        return JsonResponse({'success': False, 'error': 'Invalid date, expected YYYY-MM-DD'}, status=400)
    except ValidationError as e:
        return JsonResponse({'success': False, 'error': e.message}, status=400)

    return JsonResponse({'success': True, **aggregates.as_dict()})


@login_required
@require_GET
def calendar_api(request):
    """
    Per-day calendar data, range statistics and streaks.

    ?view=day|week|month|year|trend around ?date= (default today), or an
    explicit inclusive ?start=&end= range.
    """
    view = request.GET.get('view', WINDOW_MONTH)
    try:
        anchor = _parse_date(request.GET.get('date'))
        start = _parse_date(request.GET.get('start'))
        end = _parse_date(request.GET.get('end'))
        payload = build_calendar(
            request.user, view=view, anchor=anchor, start=start, end=end, tz=get_user_timezone(request),
        )
    except ValueError:
        return JsonResponse({'success': False, 'error': 'Invalid date, expected YYYY-MM-DD'}, status=400)
    except ValidationError as e:
        return JsonResponse({'success': False, 'error': e.message}, status=400)

    return JsonResponse({'success': True, **payload})
