"""Moderation services."""

from .admin import AdminService, FlaggedContent
from .audit import AuditLog
from .bans import BanUpdate, ensure_not_banned
from .classifier import AutoFlagClassifier, Classification
from .content import ContentService
from .disputes import DisputeService
from .flags import FlagLedger, FlagResult
from .moderation import ModerationQueue, ModerationService
from .revalidation import Revalidator, get_revalidator
from .safety import ContentSafetyChecker, HttpContentSafetyClient, SafetyVerdict, get_safety_client

__all__ = [
    "AdminService", "FlaggedContent",
    "AuditLog",
    "BanUpdate", "ensure_not_banned",
    "AutoFlagClassifier", "Classification",
    "ContentService",
    "DisputeService",
    "FlagLedger", "FlagResult",
    "ModerationQueue", "ModerationService",
    "Revalidator", "get_revalidator",
    "ContentSafetyChecker", "HttpContentSafetyClient", "SafetyVerdict", "get_safety_client",
]
