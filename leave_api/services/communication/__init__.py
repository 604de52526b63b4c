"""
Communication service layer.

- SMTP email delivery behind the ``Mailer`` protocol
- jinja2 email templates
- Daily pending-request reminder and OTP cleanup sweep
"""

from typing import List

from leave_api.services.communication.email_service import (
    EmailConfig,
    EmailError,
    EmailMessage,
    Mailer,
    SMTPMailer,
)
from leave_api.services.communication.reminder_sweep import ReminderSweep, SweepResult
from leave_api.services.communication.templates import (
    OTP_SUBJECT,
    PENDING_REMINDER_SUBJECT,
    render_otp,
    render_pending_reminder,
)

__all__: List[str] = [
    "EmailConfig",
    "EmailError",
    "EmailMessage",
    "Mailer",
    "SMTPMailer",
    "ReminderSweep",
    "SweepResult",
    "OTP_SUBJECT",
    "PENDING_REMINDER_SUBJECT",
    "render_otp",
    "render_pending_reminder",
]
