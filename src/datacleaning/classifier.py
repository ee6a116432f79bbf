"""
classifier.py – keyword decision lists for job level, role and skills.

Rules are plain ordered tables of ``(label, keywords)``; the first label with
any keyword contained in the text wins.  Keywords are matched as substrings,
so trailing/leading spaces inside a keyword are significant.
"""

from typing import Any, Iterable, Optional, Sequence, Tuple

from .cleaning import ABSENT

Rule = Tuple[str, Tuple[str, ...]]

MANAGER = "Manager / Director"
LEAD = "Lead / Principal"
SENIOR = "Senior"
ENTRY = "Entry / junior"
MID_LEVEL = "Mid-Level"

LEVEL_TITLE_RULES: Sequence[Rule] = (
    (MANAGER, ("chief", "executive", "officer", "vp", "head", "director", "manager ")),
    (LEAD, ("lead ", "principal", "staff", "architect", "expert", "technical specialist")),
    (SENIOR, ("senior", "sr", "iii", " iv")),
    (ENTRY, ("intern ", "entry", "junior", "jr", "associate", "early career", "assistant")),
)

LEVEL_DESCRIPTION_RULES: Sequence[Rule] = (
    (MANAGER, ("chief ", "executive ", "officer ", "vp", "head ", "director ", "manager ")),
    (LEAD, ("lead ", "principal ", "staff ", "architect ", "expert ", "technical specialist")),
    (SENIOR, ("senior", "sr ", "iii", " iv")),
    (ENTRY, ("intern ", "entry ", "junior", " jr ", "associate ", "early career", "assistant")),
)

ROLE_RULES: Sequence[Rule] = (
    ("ML / AI Engineer or Scientist / Director", (
        "machine learning", "ml", "ai", "deep learning", "nlp", "computer vision",
        "ml engineer", "ai engineer", "ml scientist")),
    ("Data Scientist / Applied Scientist", (
        "applied data scientist", "applied scientist", "data scientist", "data scienc",
        "predictive", "analytics practitioner", "decision scientist")),
    ("Data Engineer", (
        "data engineer", "data architect", "data integration", "data modeling",
        "data model", "data pipeline", "etl", "database", "engineer")),
    ("Data Analyst", (
        "data analyst", "analytics", " bi", "business intelligence", "reporting",
        "insights")),
    ("Research / Scientific", (
        "research", "scientist", "r&d", "investigator", "biomedical", "clinical",
        "molecular", "statistical")),
    ("Software / Engineering", ("software engineer", "software", "developer")),
    ("Executive / Management", (
        "manager", "director", "vp", "chief", "head", "officer", "executive")),
)

# (tag, keyword) in output order
SKILL_TAGS: Sequence[Tuple[str, str]] = (
    ("python", "python"),
    ("excel", "excel"),
    ("aws", "aws"),
    ("spark", "spark"),
    ("hadoop", "hadoop"),
    ("big-data", "big data"),
    ("tableau", "tableau"),
)
SKILL_SEPARATOR = " - "


def first_match(text: Any, rules: Iterable[Rule]) -> Optional[str]:
    """Label of the first rule with a keyword in *text*, or None."""
    if text is ABSENT or text is None:
        return None
    for label, keywords in rules:
        if any(keyword in text for keyword in keywords):
            return label
    return None


def classify_level(title_cleaned: Any, description: Any) -> str:
    """Seniority from the normalized title, then the description, else Mid-Level."""
    level = first_match(title_cleaned, LEVEL_TITLE_RULES)
    if level is None and description not in (ABSENT, None):
        level = first_match(str(description).lower(), LEVEL_DESCRIPTION_RULES)
    return level or MID_LEVEL


def classify_role(title_cleaned: Any) -> Any:
    """Role family from the normalized title only; ABSENT when nothing matches."""
    role = first_match(title_cleaned, ROLE_RULES)
    return role if role is not None else ABSENT


def extract_skills(description: Any) -> Any:
    """``"python - aws - tableau"`` style tag list, or ABSENT when none match."""
    if description in (ABSENT, None):
        return ABSENT
    text = str(description).lower()
    tags = [tag for tag, keyword in SKILL_TAGS if keyword in text]
    return SKILL_SEPARATOR.join(tags) if tags else ABSENT
