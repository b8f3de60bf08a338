"""Structural ATS-compatibility checks over extracted CV text. No AI involved."""

from __future__ import annotations

import re

from gapzero.models.ats import FormatAnalysis, FormatIssue, FormatStats
from gapzero.models.document import ParsedDocument

STANDARD_HEADERS = [
    "experience", "work experience", "professional experience", "employment history",
    "education", "academic background",
    "skills", "technical skills", "core competencies", "key skills",
    "certifications", "certificates", "licenses",
    "projects", "key projects",
    "summary", "professional summary", "objective", "profile",
    "languages", "language skills",
    "publications", "awards", "volunteer", "references",
]

# Creative headers that most parsers fail to map to a section
PROBLEMATIC_HEADERS = [
    "my journey", "about me", "who i am", "my story", "what i do",
    "adventures", "playground", "toolbox", "superpower", "arsenal",
    "what i bring", "my expertise", "passions", "life philosophy",
]

EXPERIENCE_HEADERS = {"experience", "work experience", "professional experience", "employment history"}
EDUCATION_HEADERS = {"education", "academic background"}
SKILLS_HEADERS = {"skills", "technical skills", "core competencies", "key skills"}

EMAIL_RE = re.compile(r"[\w.-]+@[\w.-]+\.\w+")
SPECIAL_CHAR_RE = re.compile(r"[^\x20-\x7E\n\r\t\u00C0-\u024F]")
WIDE_GAP_RE = re.compile(r" {4}|\t{2,}")

MIN_TEXT_CHARS = 100
SHORT_CV_CHARS = 500
LARGE_FILE_BYTES = 2 * 1024 * 1024

# code -> (severity, deduction, description, fix)
CHECKS: dict[str, tuple[str, int, str, str]] = {
    "no_text": (
        "critical", 40,
        "Almost no text could be extracted. The file is probably a scanned image.",
        "Export the CV from a word processor as a text-based PDF.",
    ),
    "too_long": (
        "warning", 10,
        "The CV is longer than 3 pages.",
        "Trim older or less relevant roles to keep it to 2 pages.",
    ),
    "way_too_long": (
        "critical", 20,
        "The CV is longer than 5 pages. Recruiters and parsers rarely read that far.",
        "Cut it down to the last 10 years and the most relevant achievements.",
    ),
    "large_file": (
        "warning", 5,
        "The file is larger than 2 MB, which some ATS uploads reject.",
        "Remove embedded images or compress the PDF.",
    ),
    "multi_column": (
        "warning", 15,
        "The layout looks like it uses multiple columns, which parsers often read out of order.",
        "Use a single-column layout.",
    ),
    "non_standard_headers": (
        "warning", 10,
        "Some section headers are creative rather than standard.",
        "Use headers such as Experience, Skills and Education.",
    ),
    "no_experience": (
        "critical", 15,
        "No Experience section header was found.",
        "Add a clearly labelled 'Experience' or 'Work Experience' section.",
    ),
    "no_skills": (
        "warning", 10,
        "No Skills section header was found.",
        "Add a 'Skills' section listing the tools and technologies you use.",
    ),
    "no_education": (
        "info", 5,
        "No Education section header was found.",
        "Add an 'Education' section, even a short one.",
    ),
    "no_email": (
        "critical", 10,
        "No email address was found.",
        "Put your email address in the header of the CV as plain text.",
    ),
    "special_chars": (
        "warning", 10,
        "More than 5% of the characters are symbols or icons parsers may not read.",
        "Replace icons and decorative symbols with plain text.",
    ),
    "too_short": (
        "warning", 10,
        "The CV has very little text.",
        "Describe your roles and achievements in more detail.",
    ),
    "has_images": (
        "info", 5,
        "The CV contains images or graphics, which parsers ignore.",
        "Make sure no important information lives only inside an image.",
    ),
}


def _issue(code: str) -> FormatIssue:
    severity, deduction, description, fix = CHECKS[code]
    return FormatIssue(
        issue=code, severity=severity, description=description, fix=fix, deduction=deduction
    )


def _has_header(text: str, header: str) -> bool:
    pattern = rf"^{re.escape(header)}\s*(?:$|:)"
    return re.search(pattern, text, re.IGNORECASE | re.MULTILINE) is not None


def estimate_columns(text: str) -> int:
    lines = [line for line in text.split("\n") if line.strip()]
    short = sum(1 for line in lines if len(line.strip()) < 30)
    short_ratio = short / max(len(lines), 1)
    return 2 if short_ratio > 0.4 and WIDE_GAP_RE.search(text) else 1


def analyze_format(
    text: str,
    page_count: int = 1,
    file_size: int = 0,
    image_count: int = 0,
) -> FormatAnalysis:
    """Score the CV layout from 100 down; deductions add up and the floor is 0."""
    issues: list[FormatIssue] = []
    char_count = len(text)
    extractable = char_count > MIN_TEXT_CHARS

    if not extractable:
        issues.append(_issue("no_text"))
    if page_count > 3:
        issues.append(_issue("too_long"))
    if page_count > 5:
        issues.append(_issue("way_too_long"))
    if file_size > LARGE_FILE_BYTES:
        issues.append(_issue("large_file"))

    columns = estimate_columns(text)
    if columns > 1:
        issues.append(_issue("multi_column"))

    lowered = text.lower()
    if any(h in lowered for h in PROBLEMATIC_HEADERS):
        issues.append(_issue("non_standard_headers"))

    found = {h for h in STANDARD_HEADERS if _has_header(text, h)}
    if extractable:
        if not found & EXPERIENCE_HEADERS:
            issues.append(_issue("no_experience"))
        if not found & SKILLS_HEADERS:
            issues.append(_issue("no_skills"))
        if not found & EDUCATION_HEADERS:
            issues.append(_issue("no_education"))

    if not EMAIL_RE.search(text):
        issues.append(_issue("no_email"))

    special = len(SPECIAL_CHAR_RE.findall(text))
    if special / max(char_count, 1) > 0.05:
        issues.append(_issue("special_chars"))

    if MIN_TEXT_CHARS < char_count < SHORT_CV_CHARS:
        issues.append(_issue("too_short"))

    has_images = image_count > 2
    if has_images:
        issues.append(_issue("has_images"))

    deductions = sum(i.deduction for i in issues)
    score = max(0, 100 - min(deductions, 100))

    if not issues:
        issues.append(
            FormatIssue(
                issue="all_good",
                severity="info",
                description="No formatting problems found. The CV should parse cleanly.",
                fix="",
            )
        )

    return FormatAnalysis(
        format_score=score,
        issues=issues,
        stats=FormatStats(
            page_count=page_count,
            char_count=char_count,
            is_text_extractable=extractable,
            has_images=has_images,
            estimated_columns=columns,
            file_size=file_size,
        ),
    )


def analyze_document_format(document: ParsedDocument) -> FormatAnalysis:
    return analyze_format(
        document.text,
        page_count=document.page_count,
        file_size=document.file_size,
        image_count=document.image_count,
    )
