"""
Notification Service
====================

Renders email/SMS messages from templates and hands them to the delivery
channel. Real delivery (SMTP, SMS gateway) is an external collaborator; this
service logs what would be sent.
"""

from typing import Any, Dict, List

from jinja2 import Environment, StrictUndefined

from ..base import BaseService

SUPPORTED_CHANNELS = ('email', 'sms')


class NotificationService(BaseService):
    """Service for email and SMS notifications"""

    def __init__(self, storage=None, settings=None):
        super().__init__(storage, settings)
        self.templates = _load_templates()
        self.sent: List[Dict[str, Any]] = []

    async def send_notification(self, notification_type: str, recipients: List[str],
                                context: Dict[str, Any], channel: str = 'email') -> bool:
        """Render a template and dispatch it on the given channel"""
        if channel not in SUPPORTED_CHANNELS:
            raise ValueError(f"Unsupported notification channel: {channel}")

        template = self.templates.get(notification_type)
        if not template:
            raise ValueError(f"Template not found for: {notification_type}")

        subject = template['subject'].render(**context)
        body = template['body'].render(**context)

        message = {
            'type': notification_type,
            'channel': channel,
            'recipients': list(recipients),
            'subject': subject,
            'body': body,
        }
        self.sent.append(message)
        self.logger.info(f"[{channel}] {notification_type} -> {', '.join(recipients)}: {body}")
        return True


def _load_templates() -> Dict[str, Dict[str, Any]]:
    """Message templates; subjects are ignored by SMS."""
    env = Environment(undefined=StrictUndefined, autoescape=False)
    raw = {
        'VERIFICATION_CODE_EMAIL': {
            'subject': 'Your FedExpress verification code',
            'body': 'Your verification code is {{ code }}. It expires in {{ expires_in_minutes }} minutes.',
        },
        'VERIFICATION_CODE_SMS': {
            'subject': '',
            'body': 'FedExpress code: {{ code }} (valid {{ expires_in_minutes }} min)',
        },
        'SUBSCRIPTION_CONFIRMED': {
            'subject': '',
            'body': 'You will receive updates for shipment {{ tracking_number }}. Reply STOP to opt out.',
        },
    }
    return {
        name: {part: env.from_string(text) for part, text in parts.items()}
        for name, parts in raw.items()
    }
