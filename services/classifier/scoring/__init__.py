# Onboarding Classifier scoring module
# Deterministic complexity score -> tier (A1-C1) + lead time

from .models import (
    GroupKey,
    TierCode,
    VariableKind,
    LinearScale,
    CategoryTable,
    MultiSelectScale,
    VariableDefinition,
    Tier,
    ClassifierInput,
    GroupWeights,
    VarWeights,
    Thresholds,
    ClassifierRequest,
    ScenarioSnapshot,
    ScenarioCompareRequest,
    Contribution,
    GroupComputation,
    RankedContribution,
    Flag,
    Classification,
    TopContributor,
    GroupScoreView,
    ClassifierResult,
    ScenarioResult,
    ScenarioComparison,
    clamp,
)
from .tables import (
    VARIABLES,
    GROUP_VARIABLES,
    GROUP_TITLES,
    TIERS,
    default_inputs,
    default_snapshot,
)
from .engine import (
    score_variable,
    compute_group_score,
    compute_group_scores,
    compute_total_score,
    classify,
    rank_contributions,
    rank_top_contributors,
    check_configuration,
    compute_result,
    compare_scenarios,
)

__all__ = [
    "GroupKey",
    "TierCode",
    "VariableKind",
    "LinearScale",
    "CategoryTable",
    "MultiSelectScale",
    "VariableDefinition",
    "Tier",
    "ClassifierInput",
    "GroupWeights",
    "VarWeights",
    "Thresholds",
    "ClassifierRequest",
    "ScenarioSnapshot",
    "ScenarioCompareRequest",
    "Contribution",
    "GroupComputation",
    "RankedContribution",
    "Flag",
    "Classification",
    "TopContributor",
    "GroupScoreView",
    "ClassifierResult",
    "ScenarioResult",
    "ScenarioComparison",
    "clamp",
    "VARIABLES",
    "GROUP_VARIABLES",
    "GROUP_TITLES",
    "TIERS",
    "default_inputs",
    "default_snapshot",
    "score_variable",
    "compute_group_score",
    "compute_group_scores",
    "compute_total_score",
    "classify",
    "rank_contributions",
    "rank_top_contributors",
    "check_configuration",
    "compute_result",
    "compare_scenarios",
]
