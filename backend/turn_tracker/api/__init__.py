from flask import request

from turn_tracker.errors import ValidationError


def json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def int_field(data, field, required=True):
    value = data.get(field)
    if value is None:
        if required:
            raise ValidationError(f'{field} is required', details={'field': field})
        return None
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be an integer', details={'field': field})
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be an integer', details={'field': field})
