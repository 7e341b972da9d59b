"""Prompt templates and the approximate token guard applied before dispatch."""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from careerhub.errors import ContentTooLarge

CHARS_PER_TOKEN = 4

CAREER_CHAT_PROMPT = "You are a helpful career assistant."

SALARY_COACH_PROMPT = (
    "You are an experienced salary negotiation coach. Help users understand their market "
    "value, provide negotiation strategies, and offer advice on compensation packages "
    "including salary, benefits, equity, and other perks. Use industry data and best "
    "practices to guide your responses."
)

COVER_LETTER_SYSTEM_PROMPT = """You are an expert cover letter writer with years of experience in professional writing and recruitment.
Your task is to create compelling, personalized cover letters that effectively showcase the candidate's relevant experience and skills for the specific job they're applying to.

Guidelines for cover letter generation:
- Keep the tone professional yet engaging
- Highlight specific experiences and skills that match the job requirements
- Show enthusiasm for the role and company
- Maintain a clear structure: opening, body paragraphs, closing
- Keep the length appropriate (around 300-400 words)
- Avoid clichés and generic statements
- Include specific examples where possible
- Ensure proper formatting with paragraphs
- Match the style to the selected template (professional, creative, or technical)"""

COVER_LETTER_TEMPLATE = """Write a {template} style cover letter for a {job_title} at {company_name}.

Job Description:
{job_description}

Key Skills:
{key_skills}

Candidate's Resume:
{resume_content}

{industry_line}
Focus on matching the candidate's most relevant experiences with the job requirements while maintaining a {template} tone."""

INTERVIEWER_PROMPT = (
    "You are an experienced interviewer conducting a job interview for a {role} position. "
    "Ask relevant technical and behavioral questions one at a time, give brief constructive "
    "feedback on each answer, and help the candidate improve their interview skills."
)

INTERVIEW_START_TEMPLATE = (
    "Begin the interview for the {role} role. Introduce yourself in one sentence and ask "
    "your first question."
)

INTERVIEW_ANSWER_TEMPLATE = (
    "Candidate's answer:\n{message}\n\n"
    "Give short feedback on this answer, then ask the next question."
)

TECHNICAL_INTERVIEWER_PROMPT = (
    "You are an experienced technical interviewer. Present coding challenges and problems, "
    "provide hints when needed, evaluate solutions, and offer constructive feedback to help "
    "improve problem-solving skills."
)

# A caller system message replaces the default only when it keeps this role.
TECHNICAL_INTERVIEWER_MARKER = "technical interviewer"

CAREER_PATH_SYSTEM_PROMPT = "You are a career planning assistant. Always answer with a single JSON object."

CAREER_PATH_TEMPLATE = """Generate a detailed career progression path for someone interested in becoming a {career_input}.

For each step in the career path, include:
1. Role title
2. Estimated timeline
3. Required technical and soft skills
4. Recommended certifications or qualifications
5. Key responsibilities

Format the response as a JSON object with a "career_steps" array containing the progression steps.
Each step should have: title, timeline, required_skills (array), certifications (array), and responsibilities (array)."""

COVER_LETTER_DEFAULTS = {
    "template": "professional",
    "job_title": "position",
    "company_name": "the company",
    "key_skills": "Not specified",
}


def compose(template: str, fields: Mapping[str, Any]) -> str:
    """Interpolate fields into a template. Pure; no I/O."""
    return template.format_map(dict(fields))


def estimate_tokens(text: str) -> int:
    """Rough token estimate: one token per four characters, rounded up.

    This approximates the upstream tokenizer and is not exact.
    """
    return math.ceil(len(text or "") / CHARS_PER_TOKEN)


def ensure_within_limit(text: str, ceiling: int) -> int:
    """Raise ContentTooLarge when the estimated prompt size exceeds the ceiling."""
    tokens = estimate_tokens(text)
    if tokens > ceiling:
        raise ContentTooLarge()
    return tokens


def prompt_text(messages: Iterable[Mapping[str, str]]) -> str:
    """Concatenate message contents for size estimation."""
    return "\n".join(message.get("content", "") for message in messages)


def _join_skills(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item).strip() for item in value if str(item).strip())
    return str(value or "").strip()


def cover_letter_messages(
    *,
    job_description: str,
    resume_content: str,
    job_title: Optional[str] = None,
    company_name: Optional[str] = None,
    key_skills: Any = None,
    industry: Optional[str] = None,
    template: Optional[str] = None,
) -> List[Dict[str, str]]:
    fields = {
        "template": (template or "").strip() or COVER_LETTER_DEFAULTS["template"],
        "job_title": (job_title or "").strip() or COVER_LETTER_DEFAULTS["job_title"],
        "company_name": (company_name or "").strip() or COVER_LETTER_DEFAULTS["company_name"],
        "key_skills": _join_skills(key_skills) or COVER_LETTER_DEFAULTS["key_skills"],
        "job_description": job_description.strip(),
        "resume_content": resume_content.strip(),
        "industry_line": f"Industry Context: {industry.strip()}\n" if industry and industry.strip() else "",
    }
    return [
        {"role": "system", "content": COVER_LETTER_SYSTEM_PROMPT},
        {"role": "user", "content": compose(COVER_LETTER_TEMPLATE, fields)},
    ]


def interview_messages(
    role: str,
    *,
    action: Optional[str] = None,
    message: Optional[str] = None,
    history: Sequence[Mapping[str, str]] = (),
) -> List[Dict[str, str]]:
    """Messages for one interview turn; the system prompt is always first."""
    messages = [{"role": "system", "content": compose(INTERVIEWER_PROMPT, {"role": role})}]
    if action == "start":
        messages.append({"role": "user", "content": compose(INTERVIEW_START_TEMPLATE, {"role": role})})
        return messages

    for previous in history:
        if previous.get("role") in ("user", "assistant"):
            messages.append({"role": previous["role"], "content": previous.get("content", "")})
    messages.append({"role": "user", "content": compose(INTERVIEW_ANSWER_TEMPLATE, {"message": message or ""})})
    return messages


def career_path_messages(career_input: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": CAREER_PATH_SYSTEM_PROMPT},
        {"role": "user", "content": compose(CAREER_PATH_TEMPLATE, {"career_input": career_input})},
    ]


def with_system_prompt(
    messages: Sequence[Mapping[str, str]],
    default_prompt: str,
    *,
    allow_override: bool = False,
    override_marker: Optional[str] = None,
) -> List[Dict[str, str]]:
    """Put exactly one system message first, followed by the conversation in order.

    With allow_override the caller's own system message replaces the default;
    override_marker further limits that to system messages containing it.
    """
    system_prompt = default_prompt
    conversation: List[Dict[str, str]] = []
    for message in messages:
        if message["role"] == "system":
            content = message["content"]
            if allow_override and content.strip() and (not override_marker or override_marker in content):
                system_prompt = message["content"]
            continue
        conversation.append({"role": message["role"], "content": message["content"]})
    return [{"role": "system", "content": system_prompt}, *conversation]
