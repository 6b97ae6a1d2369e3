"""
Share links and outbox mail composition.

Produces {to, subject, html} rows for the external mail dispatcher.
"""

from datetime import timedelta
from html import escape
from typing import Optional
from urllib.parse import quote

from config import ApplicationConfig
from src.domain.entities import OutboxMail, ResourceType


def share_url(
    project_id: str,
    token: str,
    resource_type: ResourceType = ResourceType.project,
    resource_id: Optional[str] = None,
    origin: Optional[str] = None,
) -> str:
    base = (origin or ApplicationConfig.PUBLIC_ORIGIN).rstrip("/")
    path = f"{base}/review/{quote(project_id, safe='')}"
    if ResourceType(resource_type) == ResourceType.file and resource_id:
        path += f"/file/{quote(resource_id, safe='')}"
    return f"{path}?token={token}"


def _resource_label(resource_type: ResourceType) -> str:
    return "project" if ResourceType(resource_type) == ResourceType.project else "file"


def _minutes(ttl: timedelta) -> int:
    return int(ttl.total_seconds() // 60)


def invitation_mail(
    email: str, link: str, resource_type: ResourceType, is_private: bool
) -> OutboxMail:
    label = _resource_label(resource_type)
    html = (
        f"<p>You have been invited to review a {label}.</p>"
        f"<p>Open the link below to get started:</p>"
        f'<a href="{escape(link)}">Open {label}</a>'
    )
    if is_private:
        html += (
            "<p>This link is protected and will ask you to verify your device "
            "with a code sent to this address.</p>"
        )
    return OutboxMail(to=email, subject=f"Invitation to review a {label}", html=html)


def access_link_mail(
    email: str, link: str, code: str, resource_type: ResourceType, ttl: timedelta
) -> OutboxMail:
    label = _resource_label(resource_type).capitalize()
    html = (
        "<p>You asked us to resend your access link.</p>"
        f"<p>Your access code is: <strong>{escape(code)}</strong></p>"
        "<p>Or open the link below directly:</p>"
        f'<a href="{escape(link)}">Open now</a>'
        f"<p>The code is valid for {_minutes(ttl)} minutes.</p>"
    )
    return OutboxMail(
        to=email, subject=f"[Code: {code}] Access link for {label}", html=html
    )


def access_code_mail(email: str, code: str, ttl: timedelta) -> OutboxMail:
    html = (
        f"<p>Your verification code is: <strong>{escape(code)}</strong></p>"
        f"<p>The code is valid for {_minutes(ttl)} minutes.</p>"
    )
    return OutboxMail(to=email, subject="Your verification code", html=html)
