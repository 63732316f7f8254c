"""Template rendering service using Jinja2.

This module renders activity feed messages from templates. Templates are
rendered with StrictUndefined to catch missing variables early.
"""

from typing import Optional

from jinja2 import BaseLoader, Environment, StrictUndefined, TemplateError

from survey_api.logging_config import get_logger

logger = get_logger(__name__)


# Activity type -> message template
ACTIVITY_TEMPLATES = {
    "survey_created": 'Survey "{{ title }}" was created',
    "survey_response": 'New response received for "{{ title }}"',
    "user_created": "{{ first_name }} {{ last_name }} joined as {{ role | replace('_', ' ') }}",
    "company_created": 'Company "{{ name }}" was registered',
}


class TemplateRenderError(Exception):
    """Raised when template rendering fails."""
    pass


class TemplateRenderer:
    """Service for rendering Jinja2 templates with a context."""

    def __init__(self):
        """Initialize Jinja2 environment with strict settings."""
        self.env = Environment(
            loader=BaseLoader(),
            autoescape=False,  # Output is JSON, not HTML
            undefined=StrictUndefined,  # Raise error on undefined variables
        )

    def render(self, template_text: str, context: dict) -> str:
        """Render a template string with context variables.

        Args:
            template_text: Template string with Jinja2 syntax
            context: Dictionary of variables for template

        Returns:
            Rendered text

        Raises:
            TemplateRenderError: If template is invalid or variables are missing
        """
        try:
            return self.env.from_string(template_text).render(context)
        except TemplateError as e:
            logger.error(f"Template rendering error: {e}")
            raise TemplateRenderError(f"Failed to render template: {e}")

    def render_activity(self, activity_type: str, context: dict) -> str:
        """Render the message of an activity feed entry.

        Args:
            activity_type: Key of ``ACTIVITY_TEMPLATES``
            context: Variables the template refers to

        Returns:
            Human-readable message

        Raises:
            TemplateRenderError: If the type is unknown or variables are missing

        Example:
            >>> renderer = TemplateRenderer()
            >>> renderer.render_activity("survey_created", {"title": "Q1"})
            'Survey "Q1" was created'
        """
        template_text = ACTIVITY_TEMPLATES.get(activity_type)
        if template_text is None:
            raise TemplateRenderError(f"Unknown activity type: {activity_type}")
        return self.render(template_text, context)


# Global singleton instance
_renderer_instance: Optional[TemplateRenderer] = None


def get_template_renderer() -> TemplateRenderer:
    """Get global TemplateRenderer instance.

    Returns:
        Global TemplateRenderer instance
    """
    global _renderer_instance
    if _renderer_instance is None:
        _renderer_instance = TemplateRenderer()
    return _renderer_instance
