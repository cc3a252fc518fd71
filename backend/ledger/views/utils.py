import json
import logging
from datetime import datetime, time
from decimal import Decimal, InvalidOperation
from functools import wraps

from django.core.exceptions import PermissionDenied
from django.http import JsonResponse
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from ledger.exceptions import LedgerError, ValidationError

logger = logging.getLogger(__name__)


def api_response(data=None, message="Success", status=200):
    return JsonResponse({"code": status, "message": message, "data": data}, status=status)


def api_error(status, message):
    return api_response(None, message, status=status)


def ledger_api(view):
    """
    Wrap a JSON view: require a signed-in user and turn ledger errors into
    the response envelope with the matching status code.
    """

    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return api_error(401, "Authentication required.")
        try:
            return view(request, *args, **kwargs)
        except LedgerError as exc:
            logger.info(
                "Request rejected: %s",
                exc.message,
                extra={"user_id": request.user.pk, "path": request.path, "status": exc.status_code},
            )
            return api_error(exc.status_code, exc.message)
        except PermissionDenied as exc:
            return api_error(403, str(exc) or "Permission denied.")

    return wrapper


def with_hx_trigger(request, response, resource):
    """HTMX clients refresh the resource list after a mutation."""
    if getattr(request, "htmx", False):
        response["HX-Trigger"] = json.dumps({f"{resource}:refresh": True})
    return response


def read_json(request):
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise ValidationError("Request body must be valid JSON.")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")
    return payload


def parse_int(value, field, required=False):
    if value is None or value == "":
        if required:
            raise ValidationError(f"{field} is required.")
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer.")
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer.")


def parse_decimal(value, field, required=False):
    if value is None or value == "":
        if required:
            raise ValidationError(f"{field} is required.")
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number.")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field} must be a number.")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number.")
    return amount


def parse_bool(value, field, default=False):
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off"}:
        return False
    raise ValidationError(f"{field} must be true or false.")


def parse_text(value, field):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string.")
    return value


def parse_moment(value, field, required=False, end_of_day=False):
    """
    Parse an ISO-8601 date or datetime into an aware datetime.

    A bare date means the start of that day, or its last moment when
    end_of_day is set (inclusive upper bounds).
    """
    if value is None or value == "":
        if required:
            raise ValidationError(f"{field} is required.")
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be an ISO-8601 date or datetime.")
    value = value.strip()
    try:
        # parse_datetime also accepts bare dates on newer Pythons.
        day = parse_date(value)
        if day is not None:
            moment = datetime.combine(day, time.max if end_of_day else time.min)
        else:
            moment = parse_datetime(value)
            if moment is None:
                raise ValueError(value)
    except ValueError:
        raise ValidationError(f"{field} must be an ISO-8601 date or datetime.")
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def parse_month(value, field="month"):
    """'YYYY-MM' -> (year, month); empty -> (None, None)."""
    if not value:
        return None, None
    try:
        year_text, month_text = value.split("-")
        year, month = int(year_text), int(month_text)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must look like YYYY-MM.")
    if not 1 <= month <= 12 or year < 1:
        raise ValidationError(f"{field} must look like YYYY-MM.")
    return year, month
