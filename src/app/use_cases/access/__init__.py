"""
Access Use Cases

Reviewer-facing token resolution, access codes and device binding.
"""

from .dtos import (
    ProjectAccessResponse,
    RequestAccessCodeResponse,
    ResendAccessLinkResponse,
    ResolvedInvitation,
    VerifyAccessCodeResponse,
)
from .get_access_level_use_case import GetAccessLevelUseCase
from .request_access_code_use_case import RequestAccessCodeUseCase
from .resend_access_link_use_case import ResendAccessLinkUseCase
from .resolve_invitation_use_case import ResolveInvitationUseCase
from .verify_access_code_use_case import VerifyAccessCodeUseCase

__all__ = [
    "GetAccessLevelUseCase",
    "ResolveInvitationUseCase",
    "ResendAccessLinkUseCase",
    "RequestAccessCodeUseCase",
    "VerifyAccessCodeUseCase",
    "ProjectAccessResponse",
    "ResolvedInvitation",
    "ResendAccessLinkResponse",
    "RequestAccessCodeResponse",
    "VerifyAccessCodeResponse",
]
