"""Message formatting for formrules.

Renders a rule's default message template by substituting its params.
"""

from collections.abc import Mapping
from typing import Any

from formrules.registry import RuleRegistry
from formrules.values import as_text

FALLBACK_MESSAGE = "Invalid value"


class MessageFormatter:
    """Formats rule messages with parameter values.

    Supports ``{key}`` placeholders only. For each param whose value is not
    None or an empty string, every occurrence of ``{key}`` is replaced with
    the value's text. Placeholders without a matching param are left as-is;
    params without a matching placeholder are ignored.
    """

    def __init__(self, registry: RuleRegistry):
        self.registry = registry

    def format(self, rule_name: str, params: Mapping[str, Any] | None = None) -> str:
        """Render the default message for a rule.

        Args:
            rule_name: Registered rule name; unknown rules use "Invalid value"
            params: Rule params to substitute into the template

        Returns:
            The formatted message
        """
        template = self.registry.get_message(rule_name) or FALLBACK_MESSAGE
        return self.interpolate(template, params)

    def interpolate(self, template: str, params: Mapping[str, Any] | None) -> str:
        """Substitute params into an arbitrary template."""
        if not isinstance(params, Mapping):
            return template

        message = template
        for key, value in params.items():
            if value is None or value == "":
                continue
            message = message.replace("{" + str(key) + "}", as_text(value))
        return message
