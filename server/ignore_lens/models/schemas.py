
from typing import List, Optional

from pydantic import BaseModel, Field

from ignore_lens.config import DecorationStyle

class EvaluateRequest(BaseModel):
    document_id: str = "default"
    content: str
    candidates: List[str] = Field(default_factory=list)
    base_dir: Optional[str] = None
    include_decorations: bool = True

class LineOutcomeModel(BaseModel):
    line_index: int
    pattern: str
    is_negation: bool
    match_count: int
    action_count: int
    no_action_count: int
    blocked_count: int
    set_size_after: int
    is_shadowed: bool = False

class DecorationModel(BaseModel):
    line_index: int
    highlight: bool
    background: bool
    foreground: bool
    label: Optional[str] = None
    hover: str = ""

class EvaluationSummary(BaseModel):
    pattern_lines: int
    total_ignored: int
    total_shadowed: int
    total_blocked: int
    no_match_lines: list[int]
    ignored_dir_prefixes: list[str]

class EvaluateResponse(BaseModel):
    document_id: str
    generation: int
    stale: bool = False
    cache_hit: bool = False
    outcomes: List[LineOutcomeModel]
    summary: EvaluationSummary
    decorations: List[DecorationModel] = Field(default_factory=list)

class ConfigResponse(BaseModel):
    enabled: bool
    decoration_style: DecorationStyle
    show_counts: bool
    scan_debounce_ms: int
