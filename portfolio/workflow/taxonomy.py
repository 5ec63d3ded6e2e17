from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StepId(str, Enum):
    BASIC_INFO = "basic-info"
    ROLE_ORIGINALITY = "role-originality"
    SKILLS_REFLECTION = "skills-reflection"
    PROCESS_CHALLENGES = "process-challenges"
    REVIEW_SUBMIT = "review-submit"
    ASSIGNMENT_PREVIEW = "assignment-preview"
    TEACHER_FEEDBACK = "teacher-feedback"


class AssignmentStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    NEEDS_REVISION = "NEEDS_REVISION"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class StepConfig:
    id: StepId
    title: str
    header: str
    description: str


STEPS: tuple[StepConfig, ...] = (
    StepConfig(
        id=StepId.BASIC_INFO,
        title="Basic Information",
        header="Basic Information",
        description="Enter the artifact name, type, subject, and date.",
    ),
    StepConfig(
        id=StepId.ROLE_ORIGINALITY,
        title="Your Role & Originality",
        header="Your Role & Originality",
        description="Tell us about your role and what makes this work original.",
    ),
    StepConfig(
        id=StepId.SKILLS_REFLECTION,
        title="Skills & Reflection",
        header="Skills & Reflection",
        description="Choose key skills you used and explain why they matter.",
    ),
    StepConfig(
        id=StepId.PROCESS_CHALLENGES,
        title="Process & Challenges",
        header="Process & Challenges",
        description="Share your creation process and any challenges you faced.",
    ),
    StepConfig(
        id=StepId.REVIEW_SUBMIT,
        title="Review & Submit",
        header="Review Your Work Before Submitting",
        description=(
            "Once submitted, your teacher will review it and provide feedback. "
            "You won't be able to edit after submission unless revisions are requested."
        ),
    ),
    StepConfig(
        id=StepId.ASSIGNMENT_PREVIEW,
        title="Submitted Assignment",
        header="Your Submitted Assignment",
        description="Here's your submitted assignment. Your teacher will review it and provide feedback.",
    ),
    StepConfig(
        id=StepId.TEACHER_FEEDBACK,
        title="Teacher Feedback",
        header="Feedback",
        description="Your teacher will review your artifact and provide feedback here.",
    ),
)

# Steps where the student enters data, in wizard order.
CONTENT_STEPS: tuple[StepId, ...] = (
    StepId.BASIC_INFO,
    StepId.ROLE_ORIGINALITY,
    StepId.SKILLS_REFLECTION,
    StepId.PROCESS_CHALLENGES,
)

ENTRY_STEPS: tuple[StepId, ...] = CONTENT_STEPS + (StepId.REVIEW_SUBMIT,)

_STEPS_BY_ID = {s.id: s for s in STEPS}


def get_step(step_id: StepId | str) -> StepConfig:
    return _STEPS_BY_ID[StepId(step_id)]


def step_index(step_id: StepId | str) -> int:
    return [s.id for s in STEPS].index(StepId(step_id))


STATUS_DISPLAY_NAMES: dict[AssignmentStatus, str] = {
    AssignmentStatus.DRAFT: "Draft",
    AssignmentStatus.SUBMITTED: "Submitted",
    AssignmentStatus.UNDER_REVIEW: "Under Review",
    AssignmentStatus.NEEDS_REVISION: "Needs Revision",
    AssignmentStatus.APPROVED: "Approved",
    AssignmentStatus.REJECTED: "Rejected",
}

# Older rows and clients used several other spellings for the same lifecycle.
_LEGACY_STATUS_ALIASES: dict[str, AssignmentStatus] = {
    "NOT_STARTED": AssignmentStatus.DRAFT,
    "IN_PROGRESS": AssignmentStatus.DRAFT,
    "OVERDUE": AssignmentStatus.DRAFT,
    "VERIFIED": AssignmentStatus.APPROVED,
    "PUBLISHED": AssignmentStatus.APPROVED,
    "COMPLETED": AssignmentStatus.APPROVED,
}


def parse_status(raw: str | AssignmentStatus) -> AssignmentStatus:
    """
    Map any stored status string onto the canonical enum.
    Raises ValueError for strings that were never valid statuses.
    """
    if isinstance(raw, AssignmentStatus):
        return raw
    key = str(raw).strip().upper()
    if key in _LEGACY_STATUS_ALIASES:
        return _LEGACY_STATUS_ALIASES[key]
    return AssignmentStatus(key)


MONTHS: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

MAX_SELECTED_SKILLS = 20

SKILLS: dict[str, str] = {
    "motivation": "Motivation",
    "intellect": "Intellect",
    "diligence": "Diligence",
    "emotionality": "Emotionality",
    "sociability": "Sociability",
    "critical-thinking": "Critical Thinking",
    "creativity": "Creativity",
    "problem-solving": "Problem Solving",
    "communication": "Communication",
    "collaboration": "Collaboration",
    "research": "Research",
    "analysis": "Analysis",
    "planning": "Planning",
    "organization": "Organization",
    "leadership": "Leadership",
    "time-management": "Time Management",
    "adaptability": "Adaptability",
    "innovation": "Innovation",
    "technical-skills": "Technical Skills",
    "presentation": "Presentation",
}

SUBJECTS: dict[str, str] = {
    "math": "Math",
    "sci": "Science",
    "eng": "English",
    "hindi": "Hindi",
    "marathi": "Marathi",
    "gp": "GP",
    "cs": "CS",
    "art": "Art",
    "bee": "BEE",
    "phy": "Physics",
    "chem": "Chemistry",
    "design_tech": "Design and Tech",
    "media_studies": "Media Studies",
    "travel_tourism": "Travel and Tourism",
    "business": "Business",
    "enterprise": "Enterprise",
    "humanities": "Humanities",
    "hist": "History",
    "geo": "Geography",
    "counseling": "Counseling",
    "library": "Library",
    "pe": "Physical Education",
    "selc": "SELC",
}

# question id -> label shown to the student; teacher comments are keyed by these ids
QUESTION_LABELS: dict[str, str] = {
    "title": "What is the name of your work?",
    "artifact_type": "What type of work is this?",
    "subject": "What subject is this for?",
    "month": "Completion Date",
    "files": "Files and Links Upload",
    "is_team_work": "Is this a team project",
    "team_contribution": "Describe your role and experience",
    "is_original_work": "Did you create something new or original?",
    "originality_explanation": "Explain what was new",
    "selected_skills": "What skills did you practice? (Select Top 3)",
    "skills_justification": "Justify the selected skills",
    "pride_reason": "Why are you proud of this artifact?",
    "creation_process": "Describe the process you used to create it",
    "learnings": "Your learnings and future applications",
    "challenges": "Your challenges",
    "improvements": "Your improvements",
    "acknowledgments": "Your gratitude",
}


def get_question_label(question_id: str) -> str:
    if question_id in QUESTION_LABELS:
        return QUESTION_LABELS[question_id]
    return question_id.replace("_", " ").title()
