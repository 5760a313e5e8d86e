"""Notification-related enumerations.

This module contains the enums describing notification content, addressing
and resource linkage, plus the partitions of tenant announcement traffic.
"""

from enum import Enum


class NotificationType(str, Enum):
    """Notification content types.

    Every unread-count-by-type result carries one entry per member.
    """

    ANNOUNCEMENT = "announcement"
    MAINTENANCE = "maintenance"
    PROPERTY = "property"
    MESSAGE = "message"
    COMMENT = "comment"
    PAYMENT = "payment"
    SYSTEM = "system"
    TASK = "task"
    USER = "user"


class RecipientType(str, Enum):
    """Addressing mode of a notification.

    INDIVIDUAL notifications target exactly one user; ANNOUNCEMENT
    notifications target every user of the tenant.
    """

    INDIVIDUAL = "individual"
    ANNOUNCEMENT = "announcement"


class NotificationPriority(str, Enum):
    """Notification priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ResourceContext(str, Enum):
    """Known resource contexts a notification can be linked to."""

    PROPERTY = "property"
    PROPERTY_UNIT = "property_unit"
    LEASE = "lease"
    MAINTENANCE = "maintenance"
    USER_PROFILE = "user_profile"
    VENDOR = "vendor"
    INVITATION = "invitation"
    CLIENT = "client"


class AnnouncementChannel(str, Enum):
    """Partitions of a tenant's announcement traffic."""

    GENERAL = "general"
    URGENT = "urgent"
    SYSTEM = "system"
