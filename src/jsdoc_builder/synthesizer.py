"""Building doc comment text for collected targets."""

from jsdoc_builder.ai import DescriptionService
from jsdoc_builder.inference import ANY, VOID
from jsdoc_builder.models import DocumentableTarget, NormalizedConfig
from jsdoc_builder.templates import render_template


class CommentSynthesizer:
    """Renders the configured line templates into a block comment."""

    def __init__(self, config: NormalizedConfig, describer: DescriptionService):
        self.config = config
        self.describer = describer

    async def synthesize(self, target: DocumentableTarget, source: bytes) -> str:
        """Build the comment text to insert before a target's anchor.

        Args:
            target: Target with inferred types
            source: Script source bytes (for indentation and newline style)

        Returns:
            Comment text, ending so the anchor keeps its original column
        """
        description = await self.describer.describe(target)
        lines = self.build_lines(target, description)
        return render_comment(lines, source, target.anchor_offset)

    def build_lines(self, target: DocumentableTarget, description: str) -> list[str]:
        """Render the description, param and returns lines for a target."""
        template = self.config.template
        return_type = target.return_type or VOID
        base = {
            "functionName": target.name,
            "description": description,
            "returnType": return_type,
            "paramsCount": len(target.parameters),
            "name": target.name,
            "type": return_type,
        }

        lines = [render_template(template.description_line, base)]
        for parameter in target.parameters:
            lines.append(render_template(template.param_line, {
                **base,
                "name": parameter.name,
                "type": parameter.type or ANY,
            }))
        if return_type != VOID or self.config.include_returns_when_void:
            lines.append(render_template(template.returns_line, base))
        return lines


def render_comment(lines: list[str], source: bytes, anchor_offset: int) -> str:
    """Wrap lines in ``/** ... */`` laid out for the given insertion point.

    When only whitespace precedes the anchor on its line, the comment takes
    that indentation and the anchor moves to the following line at the same
    column. Otherwise the comment is placed inline, followed by a space.
    Any ``*/`` inside a line is written as ``*\\/``.
    """
    newline = "\r\n" if b"\r\n" in source else "\n"

    line_start = source.rfind(b"\n", 0, anchor_offset) + 1
    prefix = source[line_start:anchor_offset].decode("utf-8", errors="replace")
    leading = prefix[:len(prefix) - len(prefix.lstrip())]

    body = []
    for line in lines:
        # A literal close marker would end the block early
        line = line.replace("*/", "*\\/")
        for part in line.splitlines() or [""]:
            body.append(f"{leading} * {part}".rstrip() if part else f"{leading} *")

    comment = newline.join(["/**", *body, f"{leading} */"])
    if prefix.strip():
        return comment + " "
    return comment + newline + leading
