"""Prompt builders for school-appropriateness moderation and goal coaching."""

from __future__ import annotations

from richgoals.services.principles import Principle

DISALLOWED_CATEGORIES: tuple[str, ...] = (
    "profanity",
    "hate/harassment",
    "threats/violence",
    "self-harm",
    "sexual content",
    "illegal activity",
    "bullying",
)

NO_DRAFT_SENTINEL = "Student has not written a draft yet."


def _category_list() -> str:
    return ", ".join(DISALLOWED_CATEGORIES)


def build_username_prompt(username: str) -> str:
    return f"""
Check if this username is school-appropriate for students.
Username: "{username}"

Flag as inappropriate if it contains any of: {_category_list()}.

Return ONLY valid JSON in this exact format:
{{
  "isAppropriate": boolean,
  "message": string
}}

If appropriate: isAppropriate=true, message="Username is available"
If inappropriate: isAppropriate=false, message="Username contains inappropriate content. Please choose a different username."
No extra keys or commentary. Return ONLY JSON.
""".strip()


def build_goal_coaching_prompt(draft: str, principle: Principle | None) -> str:
    """
    Build the goal-coaching instruction.

    An empty draft is replaced by a sentinel line so the model generates
    starter questions instead of judging empty text.
    """
    if draft:
        draft_section = f'Student draft goal:\n"{draft}"'
    else:
        draft_section = NO_DRAFT_SENTINEL

    principle_section = ""
    if principle is not None:
        principle_section = f"RICH Principle: {principle.name}\nMeaning: {principle.context}\n\n"

    return f"""
You are a school goal-writing coach.

{principle_section}{draft_section}

Tasks:
1) If a draft was provided, check if it is school-appropriate.
   Flag if it contains: {_category_list()}.
   If flagged, DO NOT generate coaching questions. Ask the student to rewrite respectfully.
2) If no draft was provided OR the draft is appropriate, generate 5 guiding questions (NOT suggestions).
   Questions should help the student write a specific, measurable goal aligned to the principle.
   Questions must be short and student-friendly.

Output MUST be valid JSON ONLY in this exact shape:
{{
  "isAppropriate": boolean,
  "flags": string[],
  "message": string,
  "questions": string[]
}}

Rules:
- If no draft was provided: isAppropriate=true, flags=[], questions must have 5 items
- If draft is inappropriate: questions must be []
- If draft is appropriate: questions must have 5 items
- No extra keys or commentary. Return ONLY JSON.
""".strip()
