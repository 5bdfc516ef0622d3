from app.utils.normalize import ProficiencyLevel, normalize_level

LEVEL_LABELS: dict[ProficiencyLevel, str] = {
    "A1": "A1 (beginner)",
    "A2": "A2 (elementary)",
    "B1": "B1 (intermediate)",
    "B2": "B2 (upper intermediate)",
    "C1": "C1 (advanced)",
}

_LEVEL_STYLES: dict[ProficiencyLevel, tuple[str, ...]] = {
    "A1": (
        "Use very short sentences (5-8 words) and the 500 most common English words.",
        "Stay in the present simple and present continuous; avoid other tenses.",
        "Do not use idioms or phrasal verbs.",
        "Correct only the most important mistake and explain it in one short sentence.",
    ),
    "A2": (
        "Use short sentences (8-12 words) with everyday vocabulary.",
        "Use present simple, present continuous, past simple and 'going to' future.",
        "Use at most one very common phrasal verb; no idioms.",
        "Correct up to two mistakes with simple explanations and a model sentence.",
    ),
    "B1": (
        "Use clear sentences of 10-15 words; introduce some less frequent vocabulary.",
        "Include present perfect, past continuous, first and second conditionals.",
        "Occasionally use a common idiom or phrasal verb and explain its meaning.",
        "Correct grammar and word choice mistakes; explain the rule briefly.",
    ),
    "B2": (
        "Use natural sentences of varied length with a good range of vocabulary.",
        "Use all common tenses, passive voice, reported speech and third conditional.",
        "Use idioms, phrasal verbs and collocations where natural.",
        "Correct grammar, word choice, collocation and register; suggest more natural alternatives.",
    ),
    "C1": (
        "Use sophisticated, idiomatic English with complex sentence structures.",
        "Use the full tense system, inversion, cleft sentences and mixed conditionals.",
        "Use idioms and nuanced collocations freely.",
        "Correct subtle errors of style, register, cohesion and nuance, not only grammar.",
    ),
}


def level_label(level: ProficiencyLevel) -> str:
    return LEVEL_LABELS[normalize_level(level)]


def style_guidance(level: ProficiencyLevel) -> str:
    directives = _LEVEL_STYLES[normalize_level(level)]
    return "\n".join(f"- {line}" for line in directives)
