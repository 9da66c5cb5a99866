"""Follows and follow requests."""

from .follow_service import FollowRequestNotFound, FollowService

__all__ = ["FollowRequestNotFound", "FollowService"]
