"""The annotate-in-place pipeline and its programmatic entry points."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from jsdoc_builder.ai import DescriptionService
from jsdoc_builder.collector import TargetCollector
from jsdoc_builder.config import resolve_config
from jsdoc_builder.extractor import detect_dialect, extract_script, strip_query
from jsdoc_builder.inference import TypeInferenceEngine
from jsdoc_builder.models import SourceUnit
from jsdoc_builder.parsers import OracleFactory, build_syntax_index
from jsdoc_builder.patcher import apply_insertions, reassemble
from jsdoc_builder.synthesizer import CommentSynthesizer

logger = logging.getLogger(__name__)


@dataclass
class GenerateOptions:
    """Options shared by the file and in-memory entry points.

    Attributes:
        config_path: Config file to read instead of ./jsdoc-builder.config.json
        config: Inline config object, same shape as the config file
        no_ai: Disable AI descriptions regardless of configuration
        oracle_factory: Builds a semantic type oracle for a script
        transport: httpx transport used for AI requests
    """
    config_path: Path | None = None
    config: dict[str, Any] | None = None
    no_ai: bool = False
    oracle_factory: OracleFactory | None = None
    transport: httpx.AsyncBaseTransport | None = None


async def generate_jsdoc_from_code(
    identifier: str,
    code: str,
    options: GenerateOptions | None = None,
) -> str:
    """Insert doc comments into in-memory source text.

    Args:
        identifier: File path or virtual id, used to pick the dialect
        code: Source text
        options: Generation options

    Returns:
        The rewritten text, or the input unchanged if nothing was documented
    """
    if options is None:
        options = GenerateOptions()

    config = resolve_config(options.config_path, options.config, disable_ai=options.no_ai)

    unit = SourceUnit(identifier=identifier, text=code, dialect=detect_dialect(identifier))
    script_range = extract_script(unit)
    if script_range is None:
        return code

    index = build_syntax_index(script_range.script_text, script_range.dialect, options.oracle_factory)
    targets = TargetCollector(index).collect()
    if not targets:
        return code

    engine = TypeInferenceEngine.for_index(index)
    synthesizer = CommentSynthesizer(config, DescriptionService(config.ai, transport=options.transport))

    # Comments are keyed by identity so they can be applied in one pass later
    comments: dict[tuple[str, int, int], str] = {}
    for target in targets:
        engine.infer(target)
        comments[target.identity_key] = await synthesizer.synthesize(target, index.source)

    insertions = [(target.anchor_offset, comments[target.identity_key]) for target in targets]
    new_script = apply_insertions(index.source, insertions)

    logger.debug(f"Documented {len(targets)} declaration(s) in {strip_query(identifier)}")
    return reassemble(code, script_range, new_script)


async def generate_jsdoc(file_path: str | Path, options: GenerateOptions | None = None) -> bool:
    """Insert doc comments into a file on disk.

    Args:
        file_path: Path of the file to process
        options: Generation options

    Returns:
        True if the file was rewritten, False if no changes were needed

    Raises:
        OSError: If the file cannot be read or written
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    path = Path(file_path)
    # Bytes round-trip keeps line endings exactly as they are on disk
    code = path.read_bytes().decode("utf-8")

    updated = await generate_jsdoc_from_code(str(path), code, options)
    if updated == code:
        return False

    path.write_bytes(updated.encode("utf-8"))
    return True


async def generate_jsdoc_for_files(
    file_paths: list[str | Path],
    options: GenerateOptions | None = None,
) -> list[bool | BaseException]:
    """Process several files concurrently.

    Returns:
        One entry per path, in order: whether the file was rewritten, or the
        exception that stopped it
    """
    return await asyncio.gather(
        *(generate_jsdoc(path, options) for path in file_paths),
        return_exceptions=True,
    )
