"""Interview practice questions built from a fixed bank.

Questions are templated on the position, the candidate's experience level and
any skills listed. Output is deterministic for a given input so the client can
regenerate the same list.
"""
import re

GENERAL = "General"
TECHNICAL = "Technical"
BEHAVIORAL = "Behavioral"
INDUSTRY = "Industry-Specific"
COMPANY_FIT = "Company Fit"

# (category, question template, tips)
QUESTION_BANK: list[tuple[str, str, str]] = [
    (
        GENERAL,
        "Tell me about yourself and why you are interested in this {position} role.",
        "Keep it under two minutes: current role, one or two relevant achievements, and why this role is the next step.",
    ),
    (
        GENERAL,
        "What do you consider your greatest strength as a {position}?",
        "Pick one strength that matters for the job and back it with a concrete example.",
    ),
    (
        BEHAVIORAL,
        "Describe a time you faced a difficult problem at work. How did you handle it?",
        "Use the STAR method: Situation, Task, Action, Result. Quantify the result if you can.",
    ),
    (
        BEHAVIORAL,
        "Tell me about a time you disagreed with a colleague or manager.",
        "Show that you listened, focused on the shared goal and reached a resolution.",
    ),
    (
        TECHNICAL,
        "Walk me through the tools and methods you rely on most as a {position}.",
        "Name specific tools and explain when you choose each one.",
    ),
    (
        INDUSTRY,
        "Which trends do you think will shape the work of a {position} over the next few years?",
        "Mention one or two trends you have followed and how you are preparing for them.",
    ),
    (
        COMPANY_FIT,
        "Why do you want to work for our company?",
        "Research the company beforehand and connect its mission or products to your own goals.",
    ),
    (
        COMPANY_FIT,
        "What kind of work environment helps you do your best work?",
        "Be honest, but relate your answer to what you know about the team's way of working.",
    ),
    (
        BEHAVIORAL,
        "Describe a project you are proud of. What was your specific contribution?",
        "Separate what the team did from what you did, and finish with the outcome.",
    ),
    (
        GENERAL,
        "Where do you see yourself in five years?",
        "Show ambition that fits the path this role offers.",
    ),
]

SKILL_TEMPLATE = (
    "How have you used {skill} in your work, and what results did it deliver?",
    "Describe a specific project, the problem {skill} solved and what you would do differently now.",
)

SENIOR_QUESTION = (
    BEHAVIORAL,
    "Tell me about a time you mentored someone or led a team as a {position}.",
    "Describe how you adapted your approach to the person and what they achieved afterwards.",
)

JUNIOR_QUESTION = (
    GENERAL,
    "What have you done recently to build your skills for a {position} role?",
    "Courses, side projects and internships all count. Explain what you learned from each.",
)

_SENIOR_WORDS = ("senior", "lead", "principal", "manager", "head", "director")


def parse_skills(skills: str | None) -> list[str]:
    if not skills:
        return []
    seen = []
    for part in re.split(r"[,;\n]", skills):
        skill = part.strip()
        if skill and skill.lower() not in (s.lower() for s in seen):
            seen.append(skill)
    return seen


def _years(experience: str | None) -> int | None:
    if not experience:
        return None
    match = re.search(r"\d+", experience)
    return int(match.group()) if match else None


def _is_senior(position: str, experience: str | None) -> bool:
    years = _years(experience)
    if years is not None and years >= 5:
        return True
    text = f"{position} {experience or ''}".lower()
    return any(word in text for word in _SENIOR_WORDS)


def generate_questions(
    position: str,
    experience: str | None = None,
    skills: str | None = None,
    limit: int = 10,
) -> list[dict]:
    position = position.strip()
    templates: list[tuple[str, str, str]] = []

    for skill in parse_skills(skills)[:3]:
        question, tips = SKILL_TEMPLATE
        templates.append((TECHNICAL, question.replace("{skill}", skill), tips.replace("{skill}", skill)))

    templates.append(SENIOR_QUESTION if _is_senior(position, experience) else JUNIOR_QUESTION)
    templates.extend(QUESTION_BANK)

    # Interleave so the first questions are not all from one category
    ordered: list[tuple[str, str, str]] = []
    buckets: dict[str, list[tuple[str, str, str]]] = {}
    for item in templates:
        buckets.setdefault(item[0], []).append(item)
    while any(buckets.values()):
        for category in list(buckets):
            if buckets[category]:
                ordered.append(buckets[category].pop(0))

    return [
        {
            "id": index,
            "category": category,
            "question": question.replace("{position}", position),
            "tips": tips,
        }
        for index, (category, question, tips) in enumerate(ordered[:limit], start=1)
    ]
