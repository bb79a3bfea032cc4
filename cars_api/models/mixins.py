"""Mixins for SQLAlchemy models."""

from sqlalchemy import Column, DateTime, Enum, func

from cars_api.models.enums import UserStatus


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamp columns."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class StatusSoftDeleteMixin:
    """Mixin for records that are deactivated instead of removed."""

    status = Column(
        Enum(UserStatus, name="user_status", native_enum=False, length=16),
        nullable=False,
        default=UserStatus.ACTIVE,
    )

    @property
    def is_deleted(self) -> bool:
        """Check if the record has been soft-deleted."""
        return self.status == UserStatus.INACTIVE

    def soft_delete(self) -> None:
        """Soft delete the record; the row stays in storage."""
        self.status = UserStatus.INACTIVE
