"""Instruction text and tool lists handed to the interview runtime.

Every function here is a pure lookup over module-level tables and never
raises: unknown inputs resolve to a documented fallback entry.
"""

from __future__ import annotations

import re

from mockprep.types import DifficultyLevel, InterviewRoundType, InterviewTool, RoleCategory

ROLE_TOOLS: dict[RoleCategory, tuple[InterviewTool, ...]] = {
    RoleCategory.engineering: (InterviewTool.code_editor, InterviewTool.whiteboard),
    RoleCategory.data_analytics: (InterviewTool.code_editor, InterviewTool.whiteboard),
    RoleCategory.business: (InterviewTool.whiteboard, InterviewTool.file_upload),
    RoleCategory.other: (InterviewTool.whiteboard, InterviewTool.file_upload),
}

ROUND_INSTRUCTIONS: dict[InterviewRoundType, str] = {
    InterviewRoundType.skill_assessment: (
        "This is a skill assessment round. Evaluate the candidate's practical command of the "
        "skills listed in the job description. Start with a short warm-up question, then move "
        "to scenario-based questions that require the candidate to apply those skills. Probe "
        "each answer with one follow-up before moving on, and keep a neutral, encouraging tone."
    ),
    InterviewRoundType.coding: (
        "This is a coding round. Present one or two programming problems of increasing "
        "difficulty and ask the candidate to solve them in the code editor. Ask them to explain "
        "their approach before writing code, then discuss correctness, edge cases and time and "
        "space complexity. Give hints only when the candidate is stuck for a long time."
    ),
    InterviewRoundType.technical: (
        "This is a technical round. Assess depth of knowledge in the core technologies of the "
        "role. Ask conceptual questions first, then questions about trade-offs and real "
        "situations the candidate has handled. Push for specifics when answers stay generic."
    ),
    InterviewRoundType.system_design: (
        "This is a system design round. Give the candidate an open-ended design problem and let "
        "them drive the discussion on the whiteboard. Expect requirement clarification, a "
        "high-level architecture, data modelling and a discussion of scaling and failure modes. "
        "Challenge at least one design decision."
    ),
    InterviewRoundType.behavioral: (
        "This is a behavioral round. Ask about past experiences using situation, task, action "
        "and result framing. Cover collaboration, conflict, ownership and learning from "
        "failure. Follow up to separate the candidate's own contribution from the team's."
    ),
    InterviewRoundType.case_study: (
        "This is a case study round. Present a realistic business problem with enough data to "
        "reason about it. Evaluate how the candidate structures the problem, which assumptions "
        "they state, how they use the numbers and how clearly they present a recommendation."
    ),
    InterviewRoundType.culture_fit: (
        "This is a culture fit round. Explore the candidate's motivation, working style and "
        "values. Ask what environments they do their best work in and how they handle feedback "
        "and ambiguity. Keep the conversation open and respectful."
    ),
}

DIFFICULTY_INSTRUCTIONS: dict[DifficultyLevel, str] = {
    DifficultyLevel.entry: (
        "Difficulty: entry level. Focus on fundamentals and clear reasoning rather than depth. "
        "Be patient, offer hints when the candidate is stuck, and reward a correct approach even "
        "when the final answer is incomplete."
    ),
    DifficultyLevel.mid: (
        "Difficulty: mid level. Expect solid fundamentals and hands-on experience. Ask follow-up "
        "questions on trade-offs and expect the candidate to work through moderately complex "
        "problems with limited guidance."
    ),
    DifficultyLevel.senior: (
        "Difficulty: senior level. Expect depth, independent problem solving and sound judgement "
        "about trade-offs. Probe for ownership of large pieces of work, mentoring and decisions "
        "made under uncertainty. Offer minimal hints."
    ),
    DifficultyLevel.expert: (
        "Difficulty: expert level. Hold the candidate to the standard of a recognised authority "
        "in the field. Ask about edge cases, architecture at scale and strategic impact. Expect "
        "precise, well-argued answers without hints."
    ),
}

GENERIC_JOB_INSTRUCTIONS = (
    "Tailor your questions to the responsibilities in the job description and to the "
    "candidate's stated experience. Balance knowledge questions with practical scenarios."
)

# (pattern, text) pairs; the first matching seniority entry and the first matching domain
# entry are used.
SENIORITY_RULES: tuple[tuple[str, str], ...] = (
    (
        r"lead|principal|staff|head|manager|director",
        "This is a leadership position. Include questions on technical direction, mentoring, "
        "stakeholder management and decisions that affected a whole team.",
    ),
    (
        r"senior|sr",
        "This is a senior position. Expect the candidate to own problems end to end and to "
        "justify trade-offs from experience.",
    ),
    (
        r"intern|junior|jr|entry|graduate|trainee",
        "This is an early-career position. Emphasise fundamentals, learning ability and "
        "potential over years of experience.",
    ),
)

DOMAIN_RULES: tuple[tuple[str, str], ...] = (
    (
        r"full[\s-]?stack",
        "Cover both client and server concerns, including API contracts and how data flows "
        "from the database to the user interface.",
    ),
    (
        r"front[\s-]?end|react|angular|vue|ui",
        "Focus on browser fundamentals, component design, state management, accessibility and "
        "web performance.",
    ),
    (
        r"back[\s-]?end|api|server|java|python|golang|node",
        "Focus on API design, data modelling, concurrency, reliability and performance of "
        "server-side systems.",
    ),
    (
        r"data|analyst|analytics|scientist|machine learning|ml|ai",
        "Focus on data handling, SQL, statistics and turning analysis into decisions. For "
        "modelling roles include feature engineering and model evaluation.",
    ),
    (
        r"devops|sre|cloud|infrastructure|platform|reliability",
        "Focus on automation, CI/CD, observability, incident response and cloud "
        "infrastructure.",
    ),
    (
        r"android|ios|mobile",
        "Focus on mobile platform fundamentals, app lifecycle, offline behaviour and UI "
        "performance on constrained devices.",
    ),
    (
        r"qa|test|testing|quality",
        "Focus on test strategy, automation frameworks, defect triage and how quality is "
        "built into the delivery process.",
    ),
    (
        r"designer|design|ux",
        "Focus on the design process, user research, prototyping and how design decisions are "
        "validated with users.",
    ),
    (
        r"product",
        "Focus on product sense, prioritisation, metrics and working with engineering and "
        "design to ship outcomes.",
    ),
    (
        r"sales|marketing|business|account|finance|operations|consultant",
        "Focus on business acumen, communication, stakeholder handling and measurable results "
        "from previous roles.",
    ),
)


def _matches(pattern: str, text: str) -> bool:
    return re.search(rf"\b(?:{pattern})\b", text) is not None


def tools_for_role(role_category: RoleCategory | str | None) -> list[InterviewTool]:
    role = RoleCategory.parse(role_category, RoleCategory.other)
    return list(ROLE_TOOLS[role])


def round_instructions(round_type: InterviewRoundType | str | None) -> str:
    key = InterviewRoundType.parse(round_type, InterviewRoundType.skill_assessment)
    return ROUND_INSTRUCTIONS[key]


def job_instructions(title: str | None) -> str:
    normalized = " ".join((title or "").lower().split())
    parts: list[str] = []
    for rules in (SENIORITY_RULES, DOMAIN_RULES):
        for pattern, text in rules:
            if _matches(pattern, normalized):
                parts.append(text)
                break

    if not parts:
        return GENERIC_JOB_INSTRUCTIONS
    return " ".join(parts)


def difficulty_instructions(level: DifficultyLevel | str | None) -> str:
    key = DifficultyLevel.parse(level, DifficultyLevel.mid)
    return DIFFICULTY_INSTRUCTIONS[key]
