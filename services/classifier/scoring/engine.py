"""
Classifier Engine
=================
Deterministic onboarding complexity scoring.

Pipeline:
1. Variable scores: linear / categorical / multi-select -> 0-100
2. Group scores: weighted average of variable scores inside each group
3. Total score: raw weighted sum of group scores (clamped for display)
4. Classification: ordered <= cascade over the thresholds
5. Top contributors: |score x var weight x group weight|, stable sort

Every function is pure; nothing here raises on odd input.
"""

from typing import List, Optional

from .models import (
    clamp,
    GroupKey,
    TierCode,
    ClassifierInput,
    GroupWeights,
    VarWeights,
    Thresholds,
    Contribution,
    GroupComputation,
    RankedContribution,
    Flag,
    Classification,
    TopContributor,
    GroupScoreView,
    ClassifierResult,
    ScenarioSnapshot,
    ScenarioResult,
    ScenarioComparison,
)
from .tables import VARIABLES, GROUP_VARIABLES, GROUP_TITLES, TIERS, NEUTRAL_SCORE

# Tolerance for the advisory "group weights sum to 1.0" check
WEIGHT_SUM_TOLERANCE = 0.0001

TOP_CONTRIBUTORS = 3


def score_variable(key: str, inputs: ClassifierInput) -> float:
    """Normalized 0-100 complexity score for one input field"""
    definition = VARIABLES.get(key)
    if definition is None:
        return NEUTRAL_SCORE
    return definition.scale.score(getattr(inputs, key, None))


def compute_group_score(
    group: GroupKey, inputs: ClassifierInput, var_weights: VarWeights
) -> GroupComputation:
    """
    Weighted average of the group's variable scores.

    group_score = sum(score * weight) / sum(weight), or 0 when all
    weights in the group are zero. Contributions keep membership order.
    """
    group = GroupKey(group)
    contributions: List[Contribution] = []
    weighted_sum = 0.0
    total_weight = 0.0

    for key in GROUP_VARIABLES[group]:
        score = score_variable(key, inputs)
        weight = var_weights.weight_for(key)
        weighted_sum += score * weight
        total_weight += weight
        contributions.append(Contribution(
            key=key,
            score=score,
            weight=weight,
            contribution=score * weight,
        ))

    group_score = weighted_sum / total_weight if total_weight > 0 else 0.0
    return GroupComputation(key=group, score=group_score, contributions=contributions)


def compute_group_scores(inputs: ClassifierInput, var_weights: VarWeights) -> List[GroupComputation]:
    """All groups, in fixed group order"""
    return [compute_group_score(group, inputs, var_weights) for group in GroupKey]


def compute_total_score(groups: List[GroupComputation], group_weights: GroupWeights) -> float:
    """Raw weighted sum of group scores (not renormalized, not clamped)"""
    return sum(group.score * group_weights.weight_for(group.key) for group in groups)


def classify(score: float, thresholds: Optional[Thresholds] = None) -> Classification:
    """Map a score to a tier; the first bound that is >= the clamped score wins"""
    thresholds = thresholds or Thresholds()
    value = clamp(score)

    code = TierCode.C1
    for candidate in (TierCode.A1, TierCode.A2, TierCode.A3, TierCode.B1, TierCode.B2):
        if value <= thresholds.bound_for(candidate):
            code = candidate
            break

    tier = TIERS[code]
    return Classification(
        code=tier.code,
        lead=tier.lead,
        color=tier.color,
        label=f"{tier.code.value} — {tier.lead}",
    )


def rank_contributions(
    groups: List[GroupComputation], group_weights: GroupWeights
) -> List[RankedContribution]:
    """All contributions, largest magnitude first (ties keep enumeration order)"""
    ranked = []
    for group in groups:
        group_weight = group_weights.weight_for(group.key)
        for item in group.contributions:
            ranked.append(RankedContribution(
                key=item.key,
                group=group.key,
                score=item.score,
                weight=item.weight,
                group_weight=group_weight,
                magnitude=abs(item.score * item.weight * group_weight),
            ))

    # sorted() is stable
    return sorted(ranked, key=lambda r: r.magnitude, reverse=True)


def rank_top_contributors(
    groups: List[GroupComputation],
    group_weights: GroupWeights,
    limit: int = TOP_CONTRIBUTORS,
) -> List[RankedContribution]:
    return rank_contributions(groups, group_weights)[:limit]


def check_configuration(group_weights: GroupWeights, thresholds: Thresholds) -> List[Flag]:
    """Advisory checks on weights and thresholds; never blocks scoring"""
    flags = []

    weight_sum = group_weights.total_weight
    if abs(1 - weight_sum) > WEIGHT_SUM_TOLERANCE:
        flags.append(Flag(
            type="warning",
            code="GROUP_WEIGHTS_SUM",
            message=f"Waarschuwing: som ≠ 1.0 (nu {weight_sum:.2f})"
        ))

    if not thresholds.is_monotonic:
        bounds = ", ".join(f"{code.value}={thresholds.bound_for(code):g}" for code in TierCode)
        flags.append(Flag(
            type="warning",
            code="THRESHOLDS_NOT_MONOTONIC",
            message=f"Drempels niet oplopend ({bounds}) - classificatie kan onverwacht zijn"
        ))

    return flags


def _contributor_detail(item: RankedContribution) -> str:
    return (
        f"Score {item.score:.1f} • gewicht {item.weight:.2f} • "
        f"groep {GROUP_TITLES[item.group]} ({item.group_weight:.2f})"
    )


def compute_result(
    inputs: ClassifierInput,
    group_weights: Optional[GroupWeights] = None,
    var_weights: Optional[VarWeights] = None,
    thresholds: Optional[Thresholds] = None,
) -> ClassifierResult:
    """
    Score one snapshot end to end.

    Example:
        from scoring.engine import compute_result
        from scoring.tables import default_inputs

        result = compute_result(default_inputs())
        print(result.total_score_label, result.classification.label)
    """
    group_weights = group_weights or GroupWeights()
    var_weights = var_weights or VarWeights()
    thresholds = thresholds or Thresholds()

    groups = compute_group_scores(inputs, var_weights)
    total = compute_total_score(groups, group_weights)
    classification = classify(total, thresholds)
    top = rank_top_contributors(groups, group_weights)

    return ClassifierResult(
        total_score=total,
        total_score_label=f"{clamp(total):.1f}",
        total_score_progress=clamp(total),
        classification=classification,
        top_contributors=[
            TopContributor(
                key=item.key,
                title=VARIABLES[item.key].label,
                detail=_contributor_detail(item),
            )
            for item in top
        ],
        group_scores=[
            GroupScoreView(
                key=group.key,
                title=GROUP_TITLES[group.key],
                score_label=f"{group.score:.1f}",
                progress=clamp(group.score),
            )
            for group in groups
        ],
        flags=check_configuration(group_weights, thresholds),
    )


def compare_scenarios(a: ScenarioSnapshot, b: ScenarioSnapshot) -> ScenarioComparison:
    """Score two snapshots independently and describe the difference"""
    result_a = compute_result(a.inputs, a.gw, a.vw, a.th)
    result_b = compute_result(b.inputs, b.gw, b.vw, b.th)

    delta = result_b.total_score_progress - result_a.total_score_progress
    code_a = result_a.classification.code
    code_b = result_b.classification.code

    reasons = []
    if abs(delta) < 0.05:
        reasons.append(f"{b.name} scoort gelijk aan {a.name} ({result_a.total_score_label})")
    elif delta > 0:
        reasons.append(f"{b.name} is complexer (+{delta:.1f} pkt vs {a.name})")
    else:
        reasons.append(f"{b.name} is eenvoudiger ({delta:.1f} pkt vs {a.name})")

    if code_a != code_b:
        reasons.append(
            f"Klasse wijzigt: {code_a.value} → {code_b.value} "
            f"({result_a.classification.lead} → {result_b.classification.lead})"
        )

    # Groups that moved the most
    for view_a, view_b in zip(result_a.group_scores, result_b.group_scores):
        group_delta = view_b.progress - view_a.progress
        if abs(group_delta) >= 10:
            reasons.append(f"Groep {view_a.title}: {view_a.score_label} → {view_b.score_label}")

    return ScenarioComparison(
        a=ScenarioResult(name=a.name, result=result_a),
        b=ScenarioResult(name=b.name, result=result_b),
        score_delta=round(delta, 4),
        tier_changed=code_a != code_b,
        reasons=reasons,
    )
