"""Feature checklist and feature flows.

User stories are grouped into themes by keyword; each theme becomes a
feature whose sub-features are the stories' titles.  Flows are canned
actor/action sequences chosen by the feature's name.
"""

from __future__ import annotations

from src.analyst.models import Priority, UserStory
from src.utils import IdSequence, contains_any

from .models import Feature, FeatureFlow, FlowStep, SubFeature

FALLBACK_THEME = "Core Business Logic"
SECURITY_FEATURE = "Security Controls"

# Checked in order; the first theme with a matching keyword claims the story.
THEME_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Authentication & Authorization": (
        "login", "auth", "password", "mfa", "permission", "role", "access",
    ),
    "User Management": ("user", "profile", "account", "registration", "signup"),
    "Data Management": (
        "data", "record", "store", "database", "crud", "create", "update", "delete",
    ),
    "API & Integration": ("api", "integration", "external", "third-party", "webhook"),
    "Reporting & Analytics": ("report", "analytics", "dashboard", "metric", "statistic"),
    "Notifications": ("notification", "alert", "email", "sms", "push"),
}


# ---------------------------------------------------------------------------
# Feature checklist
# ---------------------------------------------------------------------------

def _theme_for(story: UserStory) -> str:
    text = f"{story.title} {story.i_want} {story.so_that}"
    for theme, keywords in THEME_KEYWORDS.items():
        if contains_any(text, keywords):
            return theme
    return FALLBACK_THEME


def group_stories_by_theme(stories: list[UserStory]) -> dict[str, list[UserStory]]:
    """Themes in order of first appearance, each with its stories."""
    groups: dict[str, list[UserStory]] = {}
    for story in stories:
        groups.setdefault(_theme_for(story), []).append(story)
    return groups


def _feature_priority(stories: list[UserStory]) -> Priority:
    labels = [s.priority.value.lower() for s in stories]
    if any("0" in p or "critical" in p or "high" in p for p in labels):
        return Priority.P0
    if any("1" in p or "medium" in p for p in labels):
        return Priority.P1
    return Priority.P2


def generate_feature_checklist(
    stories: list[UserStory], security_requirements: list[str] | None = None
) -> list[Feature]:
    """Group stories into features, plus a P0 security feature when requirements exist.

    Args:
        stories: User stories from the business-analysis phase.
        security_requirements: Requirement texts; each becomes a sub-feature
            of the ``Security Controls`` feature.
    """
    ids = IdSequence("F")
    features: list[Feature] = []

    for theme, grouped in group_stories_by_theme(stories).items():
        feature_id = ids.next()
        features.append(Feature(
            id=feature_id,
            name=theme,
            priority=_feature_priority(grouped),
            description=f"Feature group: {theme}",
            acceptance_criteria=[c for s in grouped for c in s.acceptance_criteria],
            sub_features=[
                SubFeature(id=f"{feature_id}-{n}", name=s.title, parent_id=feature_id)
                for n, s in enumerate(grouped, start=1)
            ],
        ))

    if security_requirements:
        feature_id = ids.next()
        features.append(Feature(
            id=feature_id,
            name=SECURITY_FEATURE,
            priority=Priority.P0,
            description="Security-related features and controls",
            sub_features=[
                SubFeature(id=f"{feature_id}-{n}", name=text, parent_id=feature_id)
                for n, text in enumerate(security_requirements, start=1)
            ],
        ))

    return features


# ---------------------------------------------------------------------------
# Feature flows
# ---------------------------------------------------------------------------

# (actor, action, notes)
_Step = tuple[str, str, str | None]

AUTH_FLOW: list[_Step] = [
    ("User", "Navigate to login page", None),
    ("System", "Display login form", None),
    ("User", "Enter credentials", None),
    ("System", "Validate input format", "Client-side validation"),
    ("API", "Verify credentials against database", None),
    ("System", "Check if MFA required", "Based on user settings"),
    ("System", "Generate session token", "JWT with expiration"),
    ("System", "Return token to client", None),
    ("System", "Log authentication event", "Audit trail"),
]

USER_FLOW: list[_Step] = [
    ("Admin", "Access user management", None),
    ("System", "Verify admin permissions", "RBAC check"),
    ("System", "Load user list with pagination", None),
    ("Admin", "Select action (create/edit/delete)", None),
    ("System", "Display appropriate form", None),
    ("Admin", "Submit changes", None),
    ("API", "Validate and process request", None),
    ("System", "Update database", None),
    ("System", "Log action for audit", None),
]

DATA_FLOW: list[_Step] = [
    ("User", "Request data access", None),
    ("System", "Authenticate user", None),
    ("System", "Check authorization", "Role-based access"),
    ("API", "Query database", None),
    ("System", "Apply data masking if needed", "For sensitive fields"),
    ("System", "Return data to client", None),
    ("System", "Log data access", "Compliance audit"),
]

SECURITY_FLOW: list[_Step] = [
    ("System", "Initialize security controls", None),
    ("System", "Load security configuration", None),
    ("System", "Apply input validation rules", None),
    ("System", "Enable encryption at rest", None),
    ("System", "Configure TLS for transit", None),
    ("System", "Start audit logging", None),
    ("System", "Initialize rate limiting", None),
]

GENERIC_FLOW: list[_Step] = [
    ("User", "Initiate action", None),
    ("System", "Validate authentication", None),
    ("System", "Check authorization", None),
    ("System", "Validate input data", None),
    ("API", "Process business logic", None),
    ("Database", "Persist changes", None),
    ("System", "Return response", None),
    ("System", "Log action", None),
]

FLOW_RULES: list[tuple[tuple[str, ...], list[_Step]]] = [
    (("auth",), AUTH_FLOW),
    (("user",), USER_FLOW),
    (("data", "record"), DATA_FLOW),
    (("security",), SECURITY_FLOW),
]


def _flow_template(feature_name: str) -> list[_Step]:
    for keywords, template in FLOW_RULES:
        if contains_any(feature_name, keywords):
            return template
    return GENERIC_FLOW


def generate_feature_flows(features: list[Feature]) -> list[FeatureFlow]:
    """One flow per feature."""
    return [
        FeatureFlow(
            feature_id=feature.id,
            steps=[
                FlowStep(order=n, actor=actor, action=action, notes=notes)
                for n, (actor, action, notes) in enumerate(_flow_template(feature.name), start=1)
            ],
        )
        for feature in features
    ]
