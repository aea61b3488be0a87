PRIORITY_LABELS = {
    "haute": "High",
    "moyenne": "Medium",
    "basse": "Low",
}

COACH_LEVEL_LABELS = {
    "super_admin": "Super admin",
    "principal": "Principal coach",
    "junior": "Junior coach",
}


def format_date(value, fmt="%d/%m/%Y"):
    """Format a date or datetime, empty string for missing values."""
    if value is None:
        return ""
    return value.strftime(fmt)


def priority_label(value):
    return PRIORITY_LABELS.get(value, value or "")


def coach_level_label(value):
    if not value:
        return "Coach"
    return COACH_LEVEL_LABELS.get(value, value)


def format_measure(value, unit):
    if value is None:
        return "-"
    return f"{value:g} {unit}"


def register_filters(app):
    """Register custom Jinja2 filters."""
    app.jinja_env.filters['format_date'] = format_date
    app.jinja_env.filters['priority_label'] = priority_label
    app.jinja_env.filters['coach_level_label'] = coach_level_label
    app.jinja_env.filters['format_measure'] = format_measure
