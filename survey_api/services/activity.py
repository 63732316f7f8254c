"""Activity feed: a derived, read-only view of recent domain events.

Nothing is persisted. On every request the most recent rows of each source
entity are mapped to feed entries, merged, sorted newest first and truncated.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from survey_api.config import get_settings
from survey_api.models.company import Company
from survey_api.models.database import as_utc
from survey_api.models.response import Response
from survey_api.models.survey import Survey
from survey_api.models.user import User
from survey_api.repositories import Repositories
from survey_api.services.template_renderer import TemplateRenderer, get_template_renderer


@dataclass
class Activity:
    """One feed entry."""
    id: str
    type: str
    message: str
    created_at: datetime


def merge_activities(groups: Iterable[Iterable[Activity]], limit: int) -> list[Activity]:
    """Merge feed entries from several sources, newest first, keeping ``limit``."""
    merged = [activity for group in groups for activity in group]
    merged.sort(key=lambda activity: as_utc(activity.created_at), reverse=True)
    return merged[:limit]


class ActivityFeedService:
    """Builds activity feeds for the three caller tiers."""

    def __init__(self, repos: Repositories, renderer: Optional[TemplateRenderer] = None):
        self.repos = repos
        self.renderer = renderer or get_template_renderer()
        settings = get_settings()
        self.per_source = settings.activity_feed_per_source
        self.limit = settings.activity_feed_limit

    def _survey_activity(self, survey: Survey) -> Activity:
        return Activity(
            id=f"survey-{survey.id}",
            type="survey_created",
            message=self.renderer.render_activity("survey_created", {"title": survey.title}),
            created_at=survey.created_at,
        )

    def _response_activity(self, response: Response) -> Activity:
        return Activity(
            id=f"response-{response.id}",
            type="survey_response",
            message=self.renderer.render_activity("survey_response", {"title": response.survey.title}),
            created_at=response.created_at,
        )

    def _user_activity(self, user: User) -> Activity:
        return Activity(
            id=f"user-{user.id}",
            type="user_created",
            message=self.renderer.render_activity("user_created", {
                "first_name": user.first_name,
                "last_name": user.last_name,
                "role": user.role.value,
            }),
            created_at=user.created_at,
        )

    def _company_activity(self, company: Company) -> Activity:
        return Activity(
            id=f"company-{company.id}",
            type="company_created",
            message=self.renderer.render_activity("company_created", {"name": company.name}),
            created_at=company.created_at,
        )

    def system_feed(self) -> list[Activity]:
        """Global feed for super admins: surveys, responses, users and companies."""
        return merge_activities([
            [self._survey_activity(s) for s in self.repos.surveys.recent(None, self.per_source)],
            [self._response_activity(r) for r in self.repos.responses.recent(None, self.per_source)],
            [self._user_activity(u) for u in self.repos.users.recent(None, self.per_source)],
            [self._company_activity(c) for c in self.repos.companies.recent(self.per_source)],
        ], self.limit)

    def company_feed(self, tenant_id: str) -> list[Activity]:
        """Tenant feed for company admins: surveys, responses and users."""
        return merge_activities([
            [self._survey_activity(s) for s in self.repos.surveys.recent(tenant_id, self.per_source)],
            [self._response_activity(r) for r in self.repos.responses.recent(tenant_id, self.per_source)],
            [self._user_activity(u) for u in self.repos.users.recent(tenant_id, self.per_source)],
        ], self.limit)

    def author_feed(self, creator_id: str, tenant_id: Optional[str]) -> list[Activity]:
        """Feed of one author's surveys and the responses they received."""
        surveys = self.repos.surveys.recent(tenant_id, self.per_source, creator_id=creator_id)
        responses = self.repos.responses.recent(tenant_id, self.per_source, creator_id=creator_id)
        return merge_activities([
            [self._survey_activity(s) for s in surveys],
            [self._response_activity(r) for r in responses],
        ], self.limit)
