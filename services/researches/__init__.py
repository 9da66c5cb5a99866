"""Research projects, research likes and saved researches."""

from .research_service import ResearchService, validate_research

__all__ = ["ResearchService", "validate_research"]
