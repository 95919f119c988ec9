"""Splicing generated comments back into source text."""

from jsdoc_builder.models import ScriptRange


def apply_insertions(source: bytes, insertions: list[tuple[int, str]]) -> str:
    """Insert text at byte offsets of the source.

    Insertions are applied from the highest offset down so pending offsets
    stay valid. No other byte is touched.

    Args:
        source: UTF-8 encoded script text
        insertions: (byte offset, text) pairs

    Returns:
        The patched script text
    """
    patched = source
    for offset, text in sorted(insertions, key=lambda item: item[0], reverse=True):
        patched = patched[:offset] + text.encode("utf-8") + patched[offset:]
    return patched.decode("utf-8")


def reassemble(raw_text: str, script_range: ScriptRange, new_script: str) -> str:
    """Put rewritten script text back into its source unit.

    For container files the wrapper before and after the script block is
    reproduced verbatim, and a leading or trailing newline of the original
    block is restored if the rewrite lost it.

    Args:
        raw_text: Original text of the whole unit
        script_range: Range the script was extracted from
        new_script: Rewritten script text

    Returns:
        Full text of the unit
    """
    if new_script == script_range.script_text:
        return raw_text

    if not script_range.is_container:
        return raw_text[:script_range.start_offset] + new_script + raw_text[script_range.end_offset:]

    original = script_range.script_text
    if original.startswith("\n") and not new_script.startswith("\n"):
        new_script = "\n" + new_script
    if original.endswith("\n") and not new_script.endswith("\n"):
        new_script = new_script + "\n"

    return script_range.wrapper_prefix + new_script + script_range.wrapper_suffix
