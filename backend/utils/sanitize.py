"""Pure helpers for cleaning and coercing client-supplied values."""

import re

TAG_RE = re.compile(r"<[^>]+>")

TRUE_VALUES = {'1', 'true', 'on', 'yes'}


def strip_tags(value):
    """Remove markup tags from strings. Non-string values pass through unchanged."""
    if not isinstance(value, str):
        return value
    return TAG_RE.sub('', value)


def sanitize_fields(fields, names):
    """Return a copy of fields with strip_tags applied to each of names"""
    cleaned = dict(fields)
    for name in names:
        if name in cleaned:
            cleaned[name] = strip_tags(cleaned[name])
    return cleaned


def parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in TRUE_VALUES


def parse_int(value, default=None):
    if value is None or value == '':
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def generate_slug(name):
    """Derive a URL-safe slug: 'Modern  Homes!!' -> 'modern-homes'"""
    slug = (name or '').strip().lower()
    slug = re.sub(r'[^a-z0-9-]', '-', slug)
    slug = re.sub(r'-+', '-', slug)
    return slug.strip('-')


def non_text_fields(fields, names):
    """Names whose values are present but not strings (JSON numbers, lists, objects)"""
    return [name for name in names if fields.get(name) is not None and not isinstance(fields[name], str)]
