"""Curated table of which ATS product well-known employers use."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from gapzero.models.ats import CompanyATSInfo


@dataclass(frozen=True)
class CompanyATSEntry:
    company: str
    ats_system: str
    tips: tuple[str, ...]
    aliases: tuple[str, ...] = field(default=())

    def names(self) -> list[str]:
        return [self.company.lower(), *(a.lower() for a in self.aliases)]


def _entry(company: str, ats: str, tips: list[str], aliases: list[str] | None = None) -> CompanyATSEntry:
    return CompanyATSEntry(company, ats, tuple(tips), tuple(aliases or ()))


COMPANY_ATS_TABLE: list[CompanyATSEntry] = [
    # Big tech
    _entry("Google", "Custom (Google Hire successor)", [
        "Demonstrated impact matters more than keyword density",
        "Put a metric in every experience bullet",
    ], ["Alphabet", "Google Cloud", "GCP"]),
    _entry("Amazon", "Custom (Amazon Jobs)", [
        "Write bullets in STAR form",
        "Echo the Leadership Principles where they fit naturally",
        "Quantify scale: revenue, traffic, team size",
    ], ["AWS", "Amazon Web Services"]),
    _entry("Meta", "Custom", [
        "Lead with impact and scale",
        "Mention relevant open source work",
    ], ["Facebook", "Instagram", "WhatsApp", "Meta Platforms"]),
    _entry("Apple", "Workday", [
        "Keep to one column, Workday mangles multi-column layouts",
        "Avoid tables, text boxes and graphics",
    ]),
    _entry("Microsoft", "Custom (iCIMS-based)", [
        "List Azure and other cloud certifications prominently",
        "Growth-mindset language fits the culture",
    ], ["MS", "Azure", "Microsoft Azure"]),
    _entry("Netflix", "Greenhouse", [
        "Show senior-level ownership and impact",
        "Keep it to 1-2 pages",
    ]),
    # AI / ML
    _entry("Anthropic", "Greenhouse", [
        "Content matters more than layout here",
        "Show genuine interest in AI safety or alignment",
        "Reference specific research or papers you worked on",
    ], ["Claude"]),
    _entry("OpenAI", "Greenhouse", [
        "Publications and open source work carry weight",
        "Highlight novel technical contributions",
    ], ["ChatGPT"]),
    _entry("DeepMind", "Custom (Google)", [
        "An academic CV format is acceptable",
        "Give publications their own section",
    ], ["Google DeepMind"]),
    _entry("Cohere", "Lever", [
        "Detail NLP and LLM project work",
        "Open source contributions are valued",
    ]),
    _entry("Hugging Face", "Lever", [
        "Open source contributions weigh heavily",
        "Link your GitHub profile and contribution stats",
    ], ["HF"]),
    _entry("Databricks", "Greenhouse", [
        "Put Spark and data engineering work up front",
        "Databricks certifications stand out",
    ]),
    _entry("Dataiku", "Greenhouse", [
        "Highlight enterprise data science work",
        "Include MLOps and deployment experience",
    ]),
    # Automation
    _entry("UiPath", "Greenhouse", [
        "List UiPath certifications",
        "Name the products you used: Orchestrator, AI Center, Document Understanding",
    ]),
    _entry("n8n", "Lever", [
        "Contributions to the n8n repository are a strong signal",
        "Show Node.js and TypeScript prominently",
    ]),
    _entry("Celonis", "Greenhouse", [
        "Process mining experience is highly valued",
        "Mention SAP or other ERP exposure",
    ]),
    _entry("ServiceNow", "Workday", [
        "Use a single-column layout",
        "Include ITSM/ITOM work and ServiceNow certifications",
    ], ["SNOW"]),
    # Enterprise
    _entry("Salesforce", "Workday", [
        "Simple single-column format",
        "List Salesforce certifications and Trailhead badges",
    ], ["SFDC", "Slack"]),
    _entry("SAP", "SuccessFactors", [
        "SAP certifications are close to essential",
        "Name the ERP modules you worked with",
    ]),
    _entry("Oracle", "Taleo", [
        "Very strict parser, use the plainest formatting possible",
        "Stick to Experience, Education and Skills as headers",
    ]),
    _entry("IBM", "Workday", [
        "Include IBM or Red Hat certifications",
        "Open source work counts for Red Hat roles",
    ], ["Red Hat"]),
    _entry("Cisco", "Workday", [
        "List CCNA/CCNP certifications",
        "Quantify network engineering work",
    ]),
    # Consulting
    _entry("Deloitte", "Taleo", [
        "No columns or tables, Taleo is the most restrictive parser",
        "Use exact section headers",
    ], ["Deloitte Digital", "Deloitte Consulting"]),
    _entry("Accenture", "Workday", [
        "Single-column layout",
        "Give client-facing project examples",
    ]),
    _entry("McKinsey", "Custom", [
        "Impact-first bullet points",
        "Education is read closely",
    ], ["McKinsey & Company"]),
    _entry("Capgemini", "Workday", [
        "Domain certifications help",
        "Language skills are valued for EU roles",
    ]),
    # Scale-ups
    _entry("Stripe", "Greenhouse", [
        "Payments or fintech experience helps",
        "The writing quality of the CV itself is noticed",
    ]),
    _entry("Vercel", "Lever", [
        "Put open source contributions up front",
        "Next.js and React expertise should be obvious",
    ]),
    _entry("Figma", "Greenhouse", [
        "A portfolio link is essential for design roles",
    ]),
    _entry("Notion", "Greenhouse", [
        "Clean formatting and clear writing are valued",
    ]),
    _entry("Linear", "Ashby", [
        "Show craft and attention to quality",
        "Mention developer tools experience",
    ]),
    _entry("GitLab", "Greenhouse", [
        "Remote-first experience is a plus",
        "Include CI/CD pipeline work",
    ]),
    _entry("GitHub", "Custom (Microsoft)", [
        "An active GitHub profile is expected",
    ]),
    _entry("Shopify", "Greenhouse", [
        "E-commerce platform experience is valued",
        "Mention Ruby/Rails where it applies",
    ]),
    _entry("Cloudflare", "Greenhouse", [
        "Systems and network engineering work matters",
        "Include performance numbers",
    ]),
    _entry("MongoDB", "Greenhouse", [
        "Show NoSQL expertise and scale",
    ], ["Mongo"]),
    _entry("HashiCorp", "Greenhouse", [
        "Infrastructure-as-code experience is essential",
    ], ["Terraform", "Vault"]),
    _entry("Confluent", "Greenhouse", [
        "Kafka and streaming data work is key",
    ], ["Kafka"]),
    _entry("Snowflake", "Greenhouse", [
        "Data warehouse and SQL expertise is key",
    ]),
    # Europe
    _entry("Spotify", "Greenhouse", [
        "Show data-driven decisions",
        "Agile experience is valued",
    ]),
    _entry("Klarna", "Lever", [
        "Fintech or payments experience is valued",
    ]),
    _entry("Wise", "Greenhouse", [
        "International or multi-currency product work stands out",
    ], ["TransferWise"]),
    _entry("Revolut", "Greenhouse", [
        "Show high-velocity delivery",
        "Mention security or compliance work",
    ]),
    _entry("Adyen", "Workday", [
        "Payments processing experience is key",
        "Keep formatting simple for Workday",
    ]),
]

ATS_SYSTEM_TIPS: dict[str, list[str]] = {
    "Workday": [
        "Use a single-column layout, Workday cannot parse columns",
        "Avoid tables, text boxes, headers and footers",
        'Use standard section headers: "Experience", "Education", "Skills"',
        "Keep bullet points flat and free of special characters",
    ],
    "Greenhouse": [
        "Greenhouse parses most standard formats well, PDF is fine",
        "Put contact details at the top of the first page",
    ],
    "Lever": [
        "Include a Skills section, Lever indexes it for search",
        "Keep job titles and company names clearly separated",
    ],
    "Taleo": [
        "Taleo has the most restrictive parser, use the simplest format",
        "No tables, columns, text boxes, graphics, headers or footers",
        "Use a standard chronological format",
    ],
    "iCIMS": [
        "Prefer a single column",
        "Include a clear skills section for keyword matching",
    ],
    "SuccessFactors": [
        "Use simple formatting and standard section headers",
        "Avoid graphics and complex layouts",
    ],
    "Ashby": [
        "Ashby parses most formats well, focus on content",
    ],
}

DEFAULT_SYSTEM_TIPS = [
    "Use a standard single-column format",
    "Use clear section headers: Experience, Education, Skills",
    "Avoid tables, text boxes and complex graphics",
]

_DOMAIN_RE = re.compile(r"(?:https?://)?(?:www\.)?([^./]+)", re.IGNORECASE)

_POSTING_PATTERNS = [
    re.compile(r"(?:about|join)\s+([A-Z][A-Za-z0-9\s&.]+?)(?:\s+is|\s+-|\s*\n)", re.IGNORECASE),
    re.compile(r"(?:at|@)\s+([A-Z][A-Za-z0-9\s&.]+?)(?:\s+we|\s*,|\s*\n)", re.IGNORECASE),
    re.compile(r"^([A-Z][A-Za-z0-9\s&.]+?)\s+(?:is hiring|is looking|seeks)", re.IGNORECASE | re.MULTILINE),
    re.compile(r"company:\s*([A-Za-z0-9\s&.]+)", re.IGNORECASE),
]


def lookup_company_ats(name_or_url: str) -> CompanyATSEntry | None:
    """Find an employer by exact name/alias, then substring, then URL domain."""
    query = name_or_url.lower().strip()
    if not query:
        return None

    for entry in COMPANY_ATS_TABLE:
        if query in entry.names():
            return entry

    for entry in COMPANY_ATS_TABLE:
        # Two-letter aliases like "MS" would match inside almost anything
        for name in entry.names():
            if len(name) > 2 and (name in query or query in name):
                return entry

    if "." in query:
        m = _DOMAIN_RE.match(query)
        if m:
            domain = m.group(1)
            for entry in COMPANY_ATS_TABLE:
                if any(re.sub(r"\s+", "", n) == domain for n in entry.names()):
                    return entry
    return None


def ats_system_tips(ats_system: str) -> list[str]:
    return ATS_SYSTEM_TIPS.get(ats_system, DEFAULT_SYSTEM_TIPS)


def extract_company_from_posting(text: str) -> str | None:
    """Guess the hiring company from phrasing like 'About X is' or 'X is hiring'."""
    for pattern in _POSTING_PATTERNS:
        m = pattern.search(text)
        if m:
            name = m.group(1).strip()
            if 1 < len(name) < 50:
                return name
    return None


def resolve_company_ats(
    job_posting: str,
    company_name: str | None = None,
    job_url: str | None = None,
) -> CompanyATSInfo | None:
    """Company tips for the posting, or None when the employer is not in the table."""
    entry = None
    search = company_name or job_url or ""
    if search:
        entry = lookup_company_ats(search)
    if entry is None:
        guessed = extract_company_from_posting(job_posting)
        if guessed:
            entry = lookup_company_ats(guessed)
    if entry is None:
        return None
    return CompanyATSInfo(
        company=entry.company,
        ats_system=entry.ats_system,
        tips=[*entry.tips, *ats_system_tips(entry.ats_system)],
    )
