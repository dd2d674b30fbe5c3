from __future__ import annotations

COUNT_TOKEN = "{count}"
CONCEPT_TOKEN = "{concept}"


def render_prompt(template: str, count: int, concept: str) -> str:
    # str.format would choke on any other braces in a user template
    return template.replace(COUNT_TOKEN, str(count)).replace(CONCEPT_TOKEN, concept)
