"""Result envelope shared by every service operation and HTTP response.

Services return plain dicts shaped as::

    {'success': bool, 'message': str, 'data': ..., 'count': int, 'total': int, 'error_code': int}

and controllers hand them to :func:`send`, which picks the HTTP status.
"""

from flask import jsonify


def success(data=None, message=None, **extra):
    result = {'success': True}
    if message is not None:
        result['message'] = message
    result['data'] = data
    result.update(extra)
    return result


def failure(message, error_code=500, **extra):
    result = {
        'success': False,
        'message': message,
        'error_code': error_code
    }
    result.update(extra)
    return result


def from_error(error):
    """Build a failure envelope from an ApiError"""
    return failure(error.message, error.status_code)


def send(result, success_status=200):
    """Serialize an envelope; failures use their error_code as the HTTP status"""
    if result.get('success'):
        status_code = success_status
    else:
        status_code = result.get('error_code') or 500
    return jsonify(result), status_code
