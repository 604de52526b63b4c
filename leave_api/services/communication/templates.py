"""
Email templates.

Templates live in memory and render through a shared jinja2 environment
with HTML autoescaping.
"""

from typing import Any, Dict

from jinja2 import DictLoader, Environment, TemplateError, select_autoescape

PENDING_REMINDER_SUBJECT = "You have pending leave requests"
OTP_SUBJECT = "OTP for password reset"

_PENDING_REMINDER_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Pending Leave Requests</title>
    <style>
        body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
        .header { background: #1f4e79; color: white; padding: 20px; text-align: center; }
        .content { padding: 20px; }
        .count { font-size: 28px; font-weight: bold; color: #1f4e79; }
        .button {
            display: inline-block;
            background: #1f4e79;
            color: white;
            padding: 10px 20px;
            text-decoration: none;
            border-radius: 5px;
            margin: 10px 0;
        }
    </style>
</head>
<body>
    <div class="header">
        <h1>Leave Requests Awaiting Review</h1>
    </div>

    <div class="content">
        <p>You have <span class="count">{{ pending_count }}</span> pending leave
        request{% if pending_count != 1 %}s{% endif %} waiting for your decision.</p>

        <a href="{{ leave_management_url }}" class="button">Review Requests</a>
    </div>
</body>
</html>
"""

_PENDING_REMINDER_TEXT = (
    "You have {{ pending_count }} pending leave "
    "request{% if pending_count != 1 %}s{% endif %}. "
    "Review them at {{ leave_management_url }}"
)

_OTP_TEXT = "Your OTP is {{ otp }}"

_env = Environment(
    loader=DictLoader(
        {
            "pending_reminder.html": _PENDING_REMINDER_HTML.strip(),
            "pending_reminder.txt": _PENDING_REMINDER_TEXT,
            "otp.txt": _OTP_TEXT,
        }
    ),
    autoescape=select_autoescape(["html"]),
)


def render_template(template_name: str, variables: Dict[str, Any]) -> str:
    """Render a named template with ``variables``."""
    try:
        return _env.get_template(template_name).render(**variables)
    except TemplateError as e:
        raise ValueError(f"Failed to render template {template_name}: {e}") from e


def render_pending_reminder(pending_count: int, leave_management_url: str) -> Dict[str, str]:
    """Return the text and HTML bodies of the daily pending-requests reminder."""
    variables = {
        "pending_count": pending_count,
        "leave_management_url": leave_management_url,
    }
    return {
        "text": render_template("pending_reminder.txt", variables),
        "html": render_template("pending_reminder.html", variables),
    }


def render_otp(otp: str) -> str:
    return render_template("otp.txt", {"otp": otp})
