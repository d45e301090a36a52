import json
from datetime import datetime

from django.contrib.auth.decorators import login_required
from django.db.models import Count, Sum
from django.db.models.functions import Coalesce
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from achievements.services.evaluator import summarize_unlocks
from timekeeper.timezone_utils import day_bounds, get_user_timezone, local_today
from .exceptions import ConflictError, TimerError
from .models import TimeEntry
from .services.timer import TimerService


def serialize_entry(entry):
    """Serialize a time entry to a dictionary for JSON responses."""
    return {
        'id': entry.id,
        'category_id': entry.category_id,
        'category_name': entry.category.name,
        'category_color': entry.category.color,
        'start_time': entry.start_time.isoformat(),
        'end_time': entry.end_time.isoformat() if entry.end_time else None,
        'duration': entry.duration,
        'points': entry.points,
        'description': entry.description,
        'is_running': entry.is_open,
    }


def _load_json(request):
    """Request body as a dict. An empty body counts as {}."""
    if not request.body:
        return {}
    data = json.loads(request.body)
    if not isinstance(data, dict):
        raise json.JSONDecodeError('Expected a JSON object', request.body.decode(errors='replace'), 0)
    return data


def _as_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


def _error_response(error):
    return JsonResponse({'success': False, 'error': error.message}, status=error.status_code)


@login_required
@require_POST
def start_timer(request):
    """Start a timer via AJAX. A running timer yields 409 unless force_close is set."""
    try:
        data = _load_json(request)
        service = TimerService(request.user, tz=get_user_timezone(request))
        entry = service.start_session(
            data.get('category_id'),
            description=(data.get('description') or '').strip(),
            force_close=_as_bool(data.get('force_close', False)),
        )
        return JsonResponse({
            'success': True,
            'message': f'Timer started for {entry.category.name}',
            'time_entry': serialize_entry(entry),
        })
    except ConflictError as e:
        active = e.active_entry
        return JsonResponse({
            'success': False,
            'error': e.message,
            'requires_confirmation': True,
            'active_timer': serialize_entry(active) if active else None,
        }, status=e.status_code)
    except TimerError as e:
        return _error_response(e)
    except json.JSONDecodeError:
        return JsonResponse({'success': False, 'error': 'Invalid JSON'}, status=400)


@login_required
@require_POST
def stop_timer(request):
    """Stop the running timer (or the one named by timer_id) via AJAX."""
    try:
        data = _load_json(request)
        service = TimerService(request.user, tz=get_user_timezone(request))
        entry = service.stop_session(data.get('timer_id'))
        return JsonResponse({
            'success': True,
            'message': f'Timer stopped: {entry.duration // 60} min, {entry.points} points',
            'time_entry': serialize_entry(entry),
            'new_achievements': summarize_unlocks(entry.unlocked_achievements),
        })
    except TimerError as e:
        return _error_response(e)
    except json.JSONDecodeError:
        return JsonResponse({'success': False, 'error': 'Invalid JSON'}, status=400)


@login_required
@require_POST
def cancel_timer(request):
    """Discard a running timer without recording it."""
    try:
        data = _load_json(request)
        TimerService(request.user).cancel_session(data.get('timer_id'))
        return JsonResponse({'success': True, 'message': 'Timer cancelled'})
    except TimerError as e:
        return _error_response(e)
    except json.JSONDecodeError:
        return JsonResponse({'success': False, 'error': 'Invalid JSON'}, status=400)


@login_required
@require_POST
def force_close_all(request):
    """Stop every open timer for the user."""
    closed = TimerService(request.user, tz=get_user_timezone(request)).force_close_all()
    return JsonResponse({
        'success': True,
        'message': f'Closed {len(closed)} timer(s)',
        'closed': [serialize_entry(entry) for entry in closed],
    })


@login_required
@require_GET
def active_timer(request):
    """The running timer, or null. Clients use this to resync their display."""
    entry = TimerService(request.user).get_active_session()
    return JsonResponse({
        'success': True,
        'active_timer': serialize_entry(entry) if entry else None,
    })


@login_required
@require_GET
def entries_for_date(request):
    """
    Entries started on ?date=YYYY-MM-DD (today by default) in the user's
    timezone, with the day's totals and the active timer.
    """
    user_tz = get_user_timezone(request)
    date_param = request.GET.get('date')
    if date_param:
        try:
            day = datetime.strptime(date_param, '%Y-%m-%d').date()
        except ValueError:
            return JsonResponse({'success': False, 'error': 'Invalid date, expected YYYY-MM-DD'}, status=400)
    else:
        day = local_today(user_tz)

    day_start, day_end = day_bounds(day, user_tz)
    entries = (
        TimeEntry.objects.for_user(request.user)
        .started_between(day_start, day_end)
        .select_related('category')
        .order_by('-start_time')
    )
    stats = entries.completed().aggregate(
        total_duration=Coalesce(Sum('duration'), 0),
        total_points=Coalesce(Sum('points'), 0),
        session_count=Count('id'),
    )
    active = TimerService(request.user).get_active_session()

    return JsonResponse({
        'success': True,
        'date': day.isoformat(),
        'time_entries': [serialize_entry(entry) for entry in entries],
        'active_timer': serialize_entry(active) if active else None,
        'stats': stats,
    })
