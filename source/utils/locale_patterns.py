"""
Fixed pattern tables used by the scraper.

Each table is grouped by language so a new locale only needs its own tuple
appended to the combined ordering at the bottom of each section.
"""

import re
from types import MappingProxyType

# =============================================================================
# Cookie consent controls
# =============================================================================

EN_CONSENT_SELECTORS = (
    'button:has-text("Accept")',
    'button:has-text("I accept")',
    'button:has-text("Agree")',
    'button:has-text("Allow all")',
    'button:has-text("OK")',
)

DE_CONSENT_SELECTORS = (
    'button:has-text("Akzeptieren")',
    'button:has-text("Alle akzeptieren")',
)

FR_CONSENT_SELECTORS = (
    'button:has-text("Tout accepter")',
)

VENDOR_CONSENT_SELECTORS = (
    "#onetrust-accept-btn-handler",
    "button#onetrust-accept-btn-handler",
    "#didomi-notice-agree-button",
    'button[id="didomi-notice-agree-button"]',
    '[data-testid="uc-accept-all-button"]',
    'button[aria-label*="accept" i]',
)

CONSENT_SELECTORS = (
    EN_CONSENT_SELECTORS
    + DE_CONSENT_SELECTORS
    + FR_CONSENT_SELECTORS
    + VENDOR_CONSENT_SELECTORS
)

# =============================================================================
# "Show more" expanders on detail pages
# =============================================================================

EN_EXPANDER_SELECTORS = ('button:has-text("Show more")',)
DE_EXPANDER_SELECTORS = ('button:has-text("Mehr anzeigen")',)
FR_EXPANDER_SELECTORS = ('button:has-text("Afficher plus")',)
GENERIC_EXPANDER_SELECTORS = (
    'button[aria-expanded="false"]',
    '[data-testid="expand-button"]',
)

EXPANDER_SELECTORS = (
    EN_EXPANDER_SELECTORS
    + DE_EXPANDER_SELECTORS
    + FR_EXPANDER_SELECTORS
    + GENERIC_EXPANDER_SELECTORS
)

# =============================================================================
# Pagination controls
# =============================================================================

REL_NEXT_SELECTOR = 'a[rel="next"]'
LABELED_NEXT_SELECTOR = 'a:has-text("Next")'

# =============================================================================
# Listing cards
# =============================================================================

CARD_LABEL_PLACE_OF_WORK = "Place of work:"
CARD_LABEL_WORKLOAD = "Workload:"
CARD_LABEL_CONTRACT_TYPE = "Contract type:"
CARD_METADATA_LABELS = (
    CARD_LABEL_PLACE_OF_WORK,
    CARD_LABEL_WORKLOAD,
    CARD_LABEL_CONTRACT_TYPE,
)
CARD_METADATA_PATTERN = re.compile(
    "|".join(re.escape(label) for label in CARD_METADATA_LABELS), re.IGNORECASE
)
EASY_APPLY_MARKER = "easy apply"

# Relative posting age ("3 days ago", "Yesterday", "New").
RELATIVE_TIME_PATTERN = re.compile(
    r"\b(weeks?|days?|hours?|minutes?|months?|yesterday|today|new)\b",
    re.IGNORECASE,
)

VACANCY_PATH_PATTERN = re.compile(r"/vacanc", re.IGNORECASE)
LISTING_ANCHOR_SELECTOR = 'main a[href*="/vacanc"]'
FALLBACK_ANCHOR_SELECTOR = 'a[href*="/vacancies/detail/"]'
JOB_ANCHOR_WAIT_SELECTOR = 'a[href*="/vacanc"], a[href*="/vacancies/detail/"]'
CARD_HEADING_SELECTOR = 'h3, h2, [data-testid="job-title"], .job-title'

# =============================================================================
# Detail pages
# =============================================================================

EN_SECTION_HEADINGS = (
    "Introduction",
    "About the job",
    "Responsibilities",
    "Your tasks",
    "Requirements",
    "What we offer",
    "Benefits",
)

DE_SECTION_HEADINGS = (
    "Ihre Aufgaben",
    "Aufgaben",
    "Ihr Profil",
    "Profil",
    "Unser Angebot",
    "Angebot",
)

FR_SECTION_HEADINGS = (
    "Vos tâches",
    "Votre profil",
    "Nous offrons",
    "Notre offre",
    "Avantages",
)

SECTION_HEADING_PATTERN = re.compile(
    "("
    + "|".join(
        re.escape(heading)
        for heading in EN_SECTION_HEADINGS + DE_SECTION_HEADINGS + FR_SECTION_HEADINGS
    )
    + ")",
    re.IGNORECASE,
)

KEY_FACT_SYNONYMS = MappingProxyType({
    "publication_date": ("Publication date", "Published"),
    "workload": ("Workload",),
    "contract_type": ("Contract type", "Employment type", "Contract"),
    "language": ("Language", "Languages"),
    "place_of_work": ("Place of work", "Location", "Place"),
    "company": ("Company", "Employer"),
})

# Label re-stripped from each resolved key-info value.
KEY_FACT_CANONICAL_LABELS = MappingProxyType({
    "publication_date": "Publication date",
    "workload": "Workload",
    "contract_type": "Contract type",
    "language": "Language",
    "place_of_work": "Place of work",
})

COMPANY_SELECTORS = (
    'main [data-testid="company-name"]',
    'main a[href*="/companies/"]',
    'main a[href*="/company/"]',
    'main a[rel="noopener"][target="_blank"]',
)

COMPANY_BOILERPLATE = frozenset({
    "explore companies",
    "find a job",
    "salary estimator",
    "recruiter area",
    "login",
})

COMPANY_MAX_LENGTH = 160
