"""
Classifier Models
=================
Pydantic models for the onboarding complexity classifier.

Key principles:
1. Every input variable is normalized to a 0-100 complexity score
2. Variable scores are weighted inside their group (ratio, always 0-100)
3. Group scores are weighted into a total (raw sum, NOT renormalized)
4. The total is mapped to a tier (A1-C1) by an ordered <= cascade
5. Configuration problems are reported as flags, never raised
"""

from pydantic import BaseModel, Field
from typing import List, Dict, Optional, Literal, Union
from enum import Enum


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp value into [low, high]"""
    return max(low, min(high, value))


class GroupKey(str, Enum):
    """The 7 fixed thematic groups"""
    OPERATIONEEL = "operationeel"
    TECHNISCH = "technisch"
    CONFIGURATIE = "configuratie"
    ORGANISATIE = "organisatie"
    PROCESSEN = "processen"
    RAPPORTAGE = "rapportage"
    CONTRACT = "contract"


class TierCode(str, Enum):
    """Classification tiers, lowest complexity first"""
    A1 = "A1"
    A2 = "A2"
    A3 = "A3"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"


class VariableKind(str, Enum):
    LINEAR = "linear"
    CATEGORICAL = "categorical"
    MULTI_SELECT = "multi_select"


# ============== Scales ==============

class LinearScale(BaseModel):
    """
    Linear numeric scale saturating at 100.

    score = clamp((value - offset) / span * 100)

    Example for department count (1 -> 0, 7 -> 100):
      offset = 1, span = 6
    """
    kind: Literal[VariableKind.LINEAR] = VariableKind.LINEAR
    span: float = Field(..., gt=0, description="Distance from offset at which the score saturates")
    offset: float = Field(default=0.0, description="Value that scores 0")

    def score(self, value: Optional[float]) -> float:
        if value is None:
            value = 0.0
        return clamp((float(value) - self.offset) / self.span * 100)


class CategoryTable(BaseModel):
    """
    Lookup table for a dropdown field.
    Unrecognized values score the table's fallback.
    """
    kind: Literal[VariableKind.CATEGORICAL] = VariableKind.CATEGORICAL
    scores: Dict[str, float] = Field(..., description="Option value -> complexity score")
    fallback: float = Field(..., ge=0, le=100, description="Score for unrecognized values")

    @property
    def options(self) -> List[str]:
        return list(self.scores.keys())

    def score(self, value: Optional[str]) -> float:
        if not isinstance(value, str):
            return self.fallback
        return self.scores.get(value, self.fallback)


class MultiSelectScale(BaseModel):
    """
    Fraction of selected options, scaled to 0-100.
    The label set is open: only the selected/total ratio matters.
    Inverted scales count selections as reducing complexity.
    """
    kind: Literal[VariableKind.MULTI_SELECT] = VariableKind.MULTI_SELECT
    inverted: bool = Field(default=False, description="If True, more selections = lower score")
    known_options: List[str] = Field(default_factory=list, description="Default labels shown in the form")

    @staticmethod
    def selected_fraction(options: Optional[Dict[str, bool]]) -> float:
        if not options:
            return 0.0
        selected = sum(1 for value in options.values() if value)
        return selected / len(options)

    def score(self, options: Optional[Dict[str, bool]]) -> float:
        base = clamp(self.selected_fraction(options) * 100)
        if self.inverted:
            return clamp(100 - base)
        return base


Scale = Union[LinearScale, CategoryTable, MultiSelectScale]


class VariableDefinition(BaseModel):
    """One scoreable input field"""
    key: str
    label: str
    group: GroupKey
    scale: Scale = Field(..., discriminator="kind")

    @property
    def kind(self) -> VariableKind:
        return self.scale.kind


class Tier(BaseModel):
    """Fixed tier metadata (not user-editable)"""
    code: TierCode
    lead: str
    color: str


# ============== Inputs ==============

class ClassifierInput(BaseModel):
    """
    Raw questionnaire answers. Every field is required;
    categorical values and multi-select labels may be unrecognized.
    """
    # Linear numeric
    skuCount: float = Field(..., description="Aantal SKU's")
    orderVolume: float = Field(..., description="Ordervolume per maand")
    orderPeak: float = Field(..., description="Orderpiek per maand")
    retourPercentage: float = Field(..., description="Retourpercentage (0-100)")
    aantalAfdelingen: float = Field(..., description="Aantal afdelingen aan klantzijde")

    # Categorical
    skuComplexity: str
    seizoensinvloed: str
    platformType: str
    typeKoppeling: str
    configDoor: str
    mateMaatwerk: str
    mappingComplexiteit: str
    testCapaciteit: str
    voorraadBeheer: str
    replenishment: str
    verzendMethoden: str
    retourProces: str
    dashboardGebruik: str
    rapportageBehoefte: str
    serviceUitbreiding: str
    scopeWijzigingen: str

    # Multi-select (open label sets)
    vasActiviteiten: Dict[str, bool]
    inboundBijzonderheden: Dict[str, bool]
    postnlApis: Dict[str, bool]


class GroupWeights(BaseModel):
    """
    Weight per group. Should sum to 1.0; deviation is only flagged.
    The total score is the raw weighted sum, so a sum above 1.0
    can push the total above 100 before display clamping.
    """
    operationeel: float = Field(default=0.25, ge=0)
    technisch: float = Field(default=0.15, ge=0)
    configuratie: float = Field(default=0.15, ge=0)
    organisatie: float = Field(default=0.14, ge=0)
    processen: float = Field(default=0.11, ge=0)
    rapportage: float = Field(default=0.10, ge=0)
    contract: float = Field(default=0.10, ge=0)

    @property
    def total_weight(self) -> float:
        return sum(self.weight_for(group) for group in GroupKey)

    def weight_for(self, group: GroupKey) -> float:
        return getattr(self, GroupKey(group).value, 0.0)


class VarWeights(BaseModel):
    """Per-variable weights, used only for in-group normalization"""
    # operationeel
    skuCount: float = Field(default=0.25, ge=0)
    orderVolume: float = Field(default=0.20, ge=0)
    orderPeak: float = Field(default=0.10, ge=0)
    retourPercentage: float = Field(default=0.10, ge=0)
    skuComplexity: float = Field(default=0.15, ge=0)
    seizoensinvloed: float = Field(default=0.05, ge=0)
    vasActiviteiten: float = Field(default=0.15, ge=0)
    inboundBijzonderheden: float = Field(default=0.10, ge=0)
    # technisch
    platformType: float = Field(default=0.40, ge=0)
    typeKoppeling: float = Field(default=0.40, ge=0)
    postnlApis: float = Field(default=0.20, ge=0)
    # configuratie
    configDoor: float = Field(default=0.30, ge=0)
    mateMaatwerk: float = Field(default=0.30, ge=0)
    mappingComplexiteit: float = Field(default=0.25, ge=0)
    testCapaciteit: float = Field(default=0.15, ge=0)
    # organisatie
    aantalAfdelingen: float = Field(default=0.50, ge=0)
    scopeWijzigingen: float = Field(default=0.50, ge=0)
    # processen
    voorraadBeheer: float = Field(default=0.35, ge=0)
    replenishment: float = Field(default=0.30, ge=0)
    verzendMethoden: float = Field(default=0.20, ge=0)
    retourProces: float = Field(default=0.15, ge=0)
    # rapportage
    dashboardGebruik: float = Field(default=0.50, ge=0)
    rapportageBehoefte: float = Field(default=0.50, ge=0)
    # contract
    serviceUitbreiding: float = Field(default=1.00, ge=0)

    def weight_for(self, key: str) -> float:
        return getattr(self, key, 0.0)


class Thresholds(BaseModel):
    """
    Inclusive upper bounds per tier, checked in declaration order.
    Monotonicity is NOT enforced here (see check_configuration).
    """
    A1: float = 20
    A2: float = 35
    A3: float = 50
    B1: float = 65
    B2: float = 80
    C1: float = 100

    def bound_for(self, code: TierCode) -> float:
        return getattr(self, TierCode(code).value)

    @property
    def is_monotonic(self) -> bool:
        bounds = [self.bound_for(code) for code in TierCode]
        return all(low <= high for low, high in zip(bounds, bounds[1:]))


class ClassifierRequest(BaseModel):
    """Full snapshot: inputs + weights + thresholds"""
    inputs: ClassifierInput
    gw: GroupWeights = Field(default_factory=GroupWeights)
    vw: VarWeights = Field(default_factory=VarWeights)
    th: Thresholds = Field(default_factory=Thresholds)


class ScenarioSnapshot(ClassifierRequest):
    """Named snapshot used for side-by-side comparison"""
    name: str = Field(default="Scenario A", min_length=1, max_length=255)


class ScenarioCompareRequest(BaseModel):
    a: ScenarioSnapshot
    b: ScenarioSnapshot


# ============== Intermediate results ==============

class Contribution(BaseModel):
    """Variable score times its in-group weight"""
    key: str
    score: float
    weight: float
    contribution: float


class GroupComputation(BaseModel):
    key: GroupKey
    score: float
    contributions: List[Contribution] = Field(default_factory=list)


class RankedContribution(BaseModel):
    """Contribution scaled by the group weight, for explainability"""
    key: str
    group: GroupKey
    score: float
    weight: float
    group_weight: float
    magnitude: float


# ============== Results ==============

class Flag(BaseModel):
    """Warning or info flag for the configuration"""
    type: Literal["warning", "info", "success"] = "info"
    code: str
    message: str


class Classification(BaseModel):
    code: TierCode
    lead: str
    color: str
    label: str


class TopContributor(BaseModel):
    key: str
    title: str
    detail: str


class GroupScoreView(BaseModel):
    key: GroupKey
    title: str
    score_label: str
    progress: float = Field(ge=0, le=100)


class ClassifierResult(BaseModel):
    """Complete classification result for one snapshot"""
    # Raw weighted sum (may exceed 100 if group weights sum > 1)
    total_score: float
    total_score_label: str
    total_score_progress: float = Field(ge=0, le=100)

    classification: Classification
    top_contributors: List[TopContributor] = Field(default_factory=list)
    group_scores: List[GroupScoreView] = Field(default_factory=list)

    # Configuration warnings
    flags: List[Flag] = Field(default_factory=list)


class ScenarioResult(BaseModel):
    name: str
    result: ClassifierResult


class ScenarioComparison(BaseModel):
    """Side-by-side result for two scenarios"""
    a: ScenarioResult
    b: ScenarioResult
    score_delta: float = Field(description="Displayed score of B minus displayed score of A")
    tier_changed: bool
    reasons: List[str] = Field(default_factory=list)
