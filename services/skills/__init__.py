"""Skill catalogue and user skills."""

from .skill_service import SkillService, get_or_create_skill

__all__ = ["SkillService", "get_or_create_skill"]
