"""Models for Skill Extraction output."""

from __future__ import annotations

from gapzero.models.base import WireModel


class SkillCategory(WireModel):
    category: str
    skills: list[str] = []
    proficiency_level: str = "intermediate"  # expert | advanced | intermediate | beginner


class EducationItem(WireModel):
    degree: str = ""
    institution: str = ""
    year: str | None = None
    field: str = ""


class ExperienceItem(WireModel):
    title: str
    company: str = ""
    duration: str = ""
    highlights: list[str] = []
    technologies: list[str] = []


class LanguageItem(WireModel):
    language: str
    level: str = ""


class ExtractedProfile(WireModel):
    name: str = "Unknown"
    current_role: str = "Not specified"
    total_years_experience: float = 0
    skills: list[SkillCategory]
    certifications: list[str] = []
    education: list[EducationItem] = []
    experience: list[ExperienceItem]
    languages: list[LanguageItem] = []
    summary: str = ""
