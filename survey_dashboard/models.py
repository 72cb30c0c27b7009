"""Data structures shared by the normalizer, aggregator and synthesizer."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Union

# Rounded aggregate, or "-" when there is nothing to aggregate
Cell = Union[Decimal, str]

IT_LED = "IT"
ADMIN_LED = "Admin"


@dataclass(frozen=True, slots=True)
class Dimension:
    """One learning-outcome construct and the post-test slice behind it."""

    key: str
    name: str
    title: str
    description: str
    gloss: str
    start: int
    stop: int


DIMENSIONS: Tuple[Dimension, ...] = (
    Dimension(
        key="learning_effectiveness",
        name="學習成效",
        title="學習成效 (Learning)",
        description="對應後測 Q1-Q3：國家健康藍圖、AI醫療趨勢、學習型照護的理解程度。",
        gloss="懂不懂？",
        start=0,
        stop=3,
    ),
    Dimension(
        key="self_efficacy",
        name="自我效能",
        title="自我效能 (Self-Efficacy)",
        description="對應後測 Q4-Q5：操作 AI 工具的信心與應用能力。",
        gloss="敢不敢用？",
        start=3,
        stop=5,
    ),
    Dimension(
        key="transformative_learning",
        name="轉化學習",
        title="轉化學習 (Transformative)",
        description="對應後測 Q6-Q7：是否反思舊有模式並產生新觀點。",
        gloss="有無啟發？",
        start=5,
        stop=7,
    ),
    Dimension(
        key="behavioral_intention",
        name="行為意圖",
        title="行為意圖 (Intention)",
        description="對應後測 Q8-Q9：未來實際應用與推廣的意願。",
        gloss="想不想用？",
        start=7,
        stop=9,
    ),
)


@dataclass(frozen=True, slots=True)
class Feedback:
    """Free-text answers of one respondent; absent fields are ``""``."""

    harvest: str = ""
    suggestion: str = ""
    application: str = ""
    link: str = ""


@dataclass(frozen=True, slots=True)
class Respondent:
    """A normalized survey response. Never mutated after creation."""

    id: int
    role: str
    learning_effectiveness: float
    self_efficacy: float
    transformative_learning: float
    behavioral_intention: float
    satisfaction_items: Tuple[float, ...]
    satisfaction_overall: float
    satisfaction_design: float
    feedback: Feedback = field(default_factory=Feedback)
    instructor_type: str = ADMIN_LED

    def score(self, key: str) -> float:
        """Return the numeric attribute named *key* (dimension or satisfaction)."""
        return float(getattr(self, key))


@dataclass(slots=True)
class Kpi:
    count: int
    avg_satisfaction: Decimal
    avg_learning_effectiveness: Decimal
    nps: int


@dataclass(slots=True)
class RadarPoint:
    """One radar axis.

    ``value`` carries the single-series mean (overview mode); ``series`` maps
    role → mean in deep-dive mode.
    """

    key: str
    subject: str
    value: Optional[Decimal] = None
    series: Dict[str, Decimal] = field(default_factory=dict)
    full_mark: int = 5


@dataclass(slots=True)
class SatisfactionBar:
    index: int
    label: str
    value: Decimal
    band: str


@dataclass(slots=True)
class SatisfactionDetail:
    bars: List[SatisfactionBar] = field(default_factory=list)
    highest: Optional[SatisfactionBar] = None
    lowest: Optional[SatisfactionBar] = None


@dataclass(slots=True)
class RoleComparisonRow:
    role: str
    count: int
    satisfaction: Decimal
    design: Decimal
    learning_effectiveness: Decimal


@dataclass(slots=True)
class RoleRow:
    """Heat-matrix row: per-dimension and per-item means for one role."""

    role: str
    count: int
    dimensions: Dict[str, Cell]
    satisfaction: Cell
    items: List[Cell]
    bands: Dict[str, Optional[str]] = field(default_factory=dict)


@dataclass(slots=True)
class InstructorStats:
    instructor_type: str
    count: int
    nps: int
    satisfaction: Decimal
    learning_effectiveness: Decimal
    self_efficacy: Decimal
    difficulty_fit: Decimal


@dataclass(slots=True)
class InstructorComparison:
    it: InstructorStats
    admin: InstructorStats


@dataclass(frozen=True, slots=True)
class FeedbackEntry:
    id: int
    role: str
    text: str


@dataclass(frozen=True, slots=True)
class LinkEntry:
    id: int
    role: str
    url: str


@dataclass(frozen=True, slots=True)
class RankedTheme:
    """A recurring theme and how many times it was mentioned."""

    term: str
    description: str
    count: int


@dataclass(slots=True)
class QualitativeSummary:
    harvest: List[FeedbackEntry] = field(default_factory=list)
    suggestion: List[FeedbackEntry] = field(default_factory=list)
    application: List[FeedbackEntry] = field(default_factory=list)
    links: List[LinkEntry] = field(default_factory=list)
    top_reasons: List[RankedTheme] = field(default_factory=list)
    top_improvements: List[RankedTheme] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class FeedbackCard:
    """Entry of the recent-feedback stream."""

    id: int
    role: str
    stars: int
    text: str


@dataclass(slots=True)
class AggregateView:
    """Everything the presentation layer needs for one (filter, mode) pair."""

    role_filter: str
    view_mode: str
    is_fallback: bool
    kpi: Kpi
    response_rate: Decimal
    radar: List[RadarPoint]
    satisfaction: SatisfactionDetail
    role_comparison: List[RoleComparisonRow]
    role_table: List[RoleRow]
    instructor_comparison: InstructorComparison
    qualitative: QualitativeSummary
    recent_feedback: List[FeedbackCard] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:  # noqa: D401 – simple helper
        """Return a *plain* ``dict`` representation (recursively)."""
        return asdict(self)
