"""
Email Service for NexByte
=========================
Handles all transactional email:
- Welcome email for new accounts
- Application received / approved / rejected
- Internship completion reminders and certificate notices

Templates live in the email_templates table and are editable by admins.
Every attempt is recorded in email_logs, including skipped sends when SMTP
is not configured.
"""

import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional, Dict, Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.logging_config import logger
from app.models.email import EmailTemplate, EmailLog


DEFAULT_TEMPLATES: Dict[str, Dict[str, str]] = {
    "welcome": {
        "subject": "Welcome to NexByte",
        "body": """Dear {name},

Your NexByte account has been created.

Login email: {email}
Role: {role}

Best regards,
NexByte Team""",
    },
    "application_received": {
        "subject": "Application Received - NexByte Internship",
        "body": """Dear {name},

Thank you for applying to the NexByte Internship program! We have received your application for the {role} position.

Application Details:
- Name: {name}
- Email: {email}
- Role: {role}
- Date Applied: {date}

Our team will review your application and get back to you within 3-5 business days.

Best regards,
NexByte Team""",
    },
    "application_approved": {
        "subject": "Congratulations! Your Internship Application is Approved - NexByte",
        "body": """Dear {name},

Congratulations! We are pleased to inform you that your application for the {role} position at NexByte has been approved.

Next Steps:
1. You will receive a separate email with internship details
2. Please confirm your availability within 48 hours
3. We will schedule an onboarding call

Best regards,
NexByte Team""",
    },
    "application_rejected": {
        "subject": "Regarding Your Internship Application - NexByte",
        "body": """Dear {name},

Thank you for your interest in the NexByte Internship program.

After careful consideration, we regret to inform you that we are unable to offer you an internship at this time.

We encourage you to apply again in the future.

Best regards,
NexByte Team""",
    },
    "internship_reminder": {
        "subject": "Your NexByte internship ends in {days_left} days",
        "body": """Dear {name},

Your {internship_title} internship is scheduled to end on {end_date}.

Please wrap up your remaining tasks. Your certificate will be issued automatically on completion.

Best regards,
NexByte Team""",
    },
    "internship_completed": {
        "subject": "Internship Completion Certificate - NexByte",
        "body": """Dear {name},

Congratulations on successfully completing your {internship_title} internship at NexByte!

Certificate ID: {certificate_id}
View your certificate: {certificate_url}

Best regards,
NexByte Team""",
    },
}


def render_template(text: str, context: Dict[str, Any]) -> str:
    """Replace {key} placeholders; unknown placeholders are left as-is"""
    for key, value in context.items():
        text = text.replace("{" + key + "}", "" if value is None else str(value))
    return text


class EmailService:
    """Async email service using SMTP"""

    def __init__(self):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = settings.SMTP_PASSWORD
        self.from_email = settings.EMAIL_FROM
        self.from_name = settings.EMAIL_FROM_NAME

    @property
    def is_configured(self) -> bool:
        """Check if email service is properly configured"""
        return bool(self.smtp_user and self.smtp_password)

    async def send_email(
        self,
        to_email: str,
        subject: str,
        text_content: str,
        html_content: Optional[str] = None
    ) -> bool:
        """
        Send an email via SMTP.

        Returns True if successful, False otherwise.
        """
        if not self.is_configured:
            logger.warning("[Email] Email service not configured, skipping email send")
            return False

        try:
            message = MIMEMultipart("alternative")
            message["From"] = f"{self.from_name} <{self.from_email}>"
            message["To"] = to_email
            message["Subject"] = subject

            message.attach(MIMEText(text_content, "plain"))
            if html_content:
                message.attach(MIMEText(html_content, "html"))

            await aiosmtplib.send(
                message,
                hostname=self.smtp_host,
                port=self.smtp_port,
                username=self.smtp_user,
                password=self.smtp_password,
                start_tls=True
            )

            logger.info(f"[Email/SMTP] Successfully sent email to {to_email}: {subject}")
            return True

        except Exception as e:
            logger.error(f"[Email/SMTP] Failed to send email to {to_email}: {e}")
            return False

    async def ensure_default_templates(self, db: AsyncSession) -> int:
        """Insert any default template that is missing. Returns the number created."""
        result = await db.execute(select(EmailTemplate.key))
        existing = set(result.scalars().all())

        created = 0
        for key, template in DEFAULT_TEMPLATES.items():
            if key in existing:
                continue
            db.add(EmailTemplate(key=key, subject=template["subject"], body=template["body"]))
            created += 1

        if created:
            await db.commit()
            logger.info(f"[Email] Seeded {created} default email templates")
        return created

    async def get_template(self, db: AsyncSession, key: str) -> Optional[EmailTemplate]:
        result = await db.execute(select(EmailTemplate).where(EmailTemplate.key == key))
        return result.scalar_one_or_none()

    async def send_template(
        self,
        db: AsyncSession,
        key: str,
        to_email: str,
        context: Dict[str, Any],
    ) -> EmailLog:
        """
        Render a stored template, send it and record the attempt.

        Falls back to the built-in default when the template row is missing.
        A disabled template is logged as skipped and not sent.
        """
        template = await self.get_template(db, key)
        if template is not None:
            subject_tpl, body_tpl, enabled = template.subject, template.body, template.is_enabled
        elif key in DEFAULT_TEMPLATES:
            subject_tpl = DEFAULT_TEMPLATES[key]["subject"]
            body_tpl = DEFAULT_TEMPLATES[key]["body"]
            enabled = True
        else:
            raise KeyError(f"Unknown email template: {key}")

        subject = render_template(subject_tpl, context)
        body = render_template(body_tpl, context)

        error = None
        if not enabled:
            status = "skipped"
            error = "Template disabled"
        elif not self.is_configured:
            status = "skipped"
            error = "SMTP not configured"
        else:
            sent = await self.send_email(to_email, subject, body)
            status = "sent" if sent else "failed"
            if not sent:
                error = "SMTP delivery failed"

        log_entry = EmailLog(
            recipient=to_email,
            subject=subject,
            template_key=key,
            status=status,
            error=error,
        )
        db.add(log_entry)
        await db.flush()
        return log_entry


# Singleton instance
email_service = EmailService()
