"""Questionnaire and the immutable request handed to the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Literal

from pydantic import Field, StringConstraints

from gapzero.models.base import WireModel

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
WorkPreference = Literal["remote", "hybrid", "onsite", "flexible"]


class Questionnaire(WireModel):
    current_role: RequiredText
    target_role: RequiredText
    years_experience: float = Field(ge=0)
    country: RequiredText
    work_preference: WorkPreference
    target_role2: str | None = None
    target_role3: str | None = None
    current_salary: float | None = None
    target_salary: float | None = None
    job_posting: str | None = None
    job_posting_url: str | None = None
    language: str | None = None
    linked_in_profile: str | None = None

    @property
    def target_roles(self) -> list[str]:
        return [r for r in (self.target_role, self.target_role2, self.target_role3) if r]

    def describe(self) -> str:
        """Questionnaire answers as prompt context, one ``- label: value`` per line."""
        lines = [
            f"- Current Role: {self.current_role}",
            f"- Target Role(s): {', '.join(self.target_roles)}",
            f"- Years of Experience: {self.years_experience:g}",
            f"- Country: {self.country}",
            f"- Work Preference: {self.work_preference}",
        ]
        if self.current_salary:
            lines.append(f"- Current Salary (gross annual): {self.current_salary:g}")
        if self.target_salary:
            lines.append(f"- Target Salary (gross annual): {self.target_salary:g}")
        return "\n".join(lines)


@dataclass(frozen=True)
class UploadedDocument:
    filename: str
    content: bytes
    media_type: str = "application/pdf"

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class AnalysisRequest:
    """One submission. Either ``cv`` (raw upload) or ``cv_text`` must be set."""

    questionnaire: Questionnaire
    cv: UploadedDocument | None = None
    cv_text: str | None = None
    companion: UploadedDocument | None = None
    company_name: str | None = None

    def __post_init__(self) -> None:
        if self.cv is None and not self.cv_text:
            raise ValueError("AnalysisRequest needs either cv or cv_text")

    @property
    def cv_file_name(self) -> str:
        return self.cv.filename if self.cv is not None else "cv.txt"
