from dataclasses import dataclass, field
from typing import Any


@dataclass
class SourceUnit:
    """A piece of source text together with the dialect derived from its id."""
    identifier: str
    text: str
    dialect: str


@dataclass(frozen=True)
class ScriptRange:
    """The executable script portion of a source unit.

    Offsets are character offsets into the raw text. For plain script files
    the range covers the whole text and both wrapper parts are empty.
    """
    script_text: str
    start_offset: int
    end_offset: int
    wrapper_prefix: str = ""
    wrapper_suffix: str = ""
    dialect: str = "javascript"  # Dialect of the script content itself

    @property
    def is_container(self) -> bool:
        return bool(self.wrapper_prefix or self.wrapper_suffix)


@dataclass
class Parameter:
    """A function parameter as it appears in the generated comment."""
    name: str
    type: str | None = None  # None until declared or inferred
    rest: bool = False
    node: Any = field(default=None, repr=False, compare=False)
    default_node: Any = field(default=None, repr=False, compare=False)


@dataclass
class DocumentableTarget:
    """A declaration that will receive a doc comment."""
    identity_key: tuple[str, int, int]
    name: str
    parameters: list[Parameter]
    return_type: str | None  # Declared annotation, or the inferred type once resolved
    snippet: str
    anchor_offset: int  # Byte offset into the UTF-8 encoded script text
    is_async: bool = False
    return_declared: bool = False  # False means the return type must be inferred
    function_node: Any = field(default=None, repr=False, compare=False)


@dataclass
class TemplateConfig:
    description_line: str
    param_line: str
    returns_line: str


@dataclass
class AIConfig:
    provider: str
    enabled: bool
    model: str
    base_url: str
    timeout_ms: int
    prompt_template: str
    api_key: str | None = None


@dataclass
class NormalizedConfig:
    """Fully resolved configuration for a single run."""
    template: TemplateConfig
    include_returns_when_void: bool
    ai: AIConfig
