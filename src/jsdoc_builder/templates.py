"""Placeholder substitution for comment and prompt templates.

Two placeholder spellings are accepted and bound to the same variables:
``{{name}}`` and ``${name}``. Unknown placeholders are left as written.
"""

import re
from collections.abc import Mapping

PLACEHOLDER_RE = re.compile(r"\{\{\s*(\w+)\s*\}\}|\$\{\s*(\w+)\s*\}")


def render_template(template: str, variables: Mapping[str, object]) -> str:
    """Substitute placeholders in a template string.

    Args:
        template: Template text
        variables: Placeholder values by name

    Returns:
        The rendered text
    """

    def replace(match: re.Match) -> str:
        name = match.group(1) or match.group(2)
        if name not in variables:
            return match.group(0)
        return str(variables[name])

    return PLACEHOLDER_RE.sub(replace, template)
