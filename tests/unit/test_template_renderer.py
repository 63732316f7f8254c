"""Unit tests for activity message rendering and feed merging."""

from datetime import datetime, timedelta, timezone

import pytest

from survey_api.services.activity import Activity, merge_activities
from survey_api.services.template_renderer import (
    TemplateRenderError,
    TemplateRenderer,
    get_template_renderer,
)


class TestTemplateRenderer:
    """Tests for TemplateRenderer."""

    @pytest.fixture
    def renderer(self):
        return TemplateRenderer()

    def test_render_simple_template(self, renderer):
        assert renderer.render("Hello {{ name }}!", {"name": "Alice"}) == "Hello Alice!"

    def test_render_missing_variable_raises(self, renderer):
        with pytest.raises(TemplateRenderError):
            renderer.render("Hello {{ name }}!", {})

    def test_render_invalid_syntax_raises(self, renderer):
        with pytest.raises(TemplateRenderError):
            renderer.render("Hello {{ name", {"name": "Alice"})

    def test_no_html_escaping(self, renderer):
        assert renderer.render("{{ title }}", {"title": "Q&A <beta>"}) == "Q&A <beta>"

    def test_activity_messages_go_through_render(self, renderer, monkeypatch):
        calls = []
        original = renderer.render

        def spy(template_text, context):
            calls.append(template_text)
            return original(template_text, context)

        monkeypatch.setattr(renderer, "render", spy)

        assert renderer.render_activity("company_created", {"name": "Acme"}) == 'Company "Acme" was registered'
        assert calls == ['Company "{{ name }}" was registered']

    def test_survey_created_message(self, renderer):
        message = renderer.render_activity("survey_created", {"title": "Satisfaction Q1"})

        assert message == 'Survey "Satisfaction Q1" was created'

    def test_survey_response_message(self, renderer):
        message = renderer.render_activity("survey_response", {"title": "Satisfaction Q1"})

        assert message == 'New response received for "Satisfaction Q1"'

    def test_user_created_message_humanizes_role(self, renderer):
        message = renderer.render_activity(
            "user_created",
            {"first_name": "Grace", "last_name": "Admin", "role": "company_admin"},
        )

        assert message == "Grace Admin joined as company admin"

    def test_company_created_message(self, renderer):
        assert renderer.render_activity("company_created", {"name": "Acme"}) == 'Company "Acme" was registered'

    def test_unknown_activity_type(self, renderer):
        with pytest.raises(TemplateRenderError, match="Unknown activity type"):
            renderer.render_activity("survey_deleted", {"title": "x"})

    def test_activity_missing_variable(self, renderer):
        with pytest.raises(TemplateRenderError):
            renderer.render_activity("user_created", {"first_name": "Grace"})

    def test_singleton(self):
        assert get_template_renderer() is get_template_renderer()


class TestMergeActivities:
    """Tests for merge_activities."""

    def test_sorted_newest_first_and_truncated(self):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        surveys = [Activity(f"survey-{i}", "survey_created", "s", base + timedelta(hours=i)) for i in range(5)]
        users = [Activity(f"user-{i}", "user_created", "u", base + timedelta(hours=i, minutes=30)) for i in range(5)]

        merged = merge_activities([surveys, users], limit=4)

        assert [activity.id for activity in merged] == ["user-4", "survey-4", "user-3", "survey-3"]

    def test_mixes_naive_and_aware_timestamps(self):
        aware = Activity("a", "survey_created", "a", datetime(2024, 1, 2, tzinfo=timezone.utc))
        naive = Activity("b", "user_created", "b", datetime(2024, 1, 3))

        merged = merge_activities([[aware], [naive]], limit=10)

        assert [activity.id for activity in merged] == ["b", "a"]

    def test_empty(self):
        assert merge_activities([[], []], limit=10) == []
