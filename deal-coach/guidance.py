# deal-coach/guidance.py

"""
Prescriptive deal guidance.

evaluate() turns a deal record and the current time into a GuidanceResult:
MEDDPICC completeness, ordered warnings, at most one stage-health verdict and
exactly one next best action. It is a pure function; the same deal and `now`
always produce the same result.
"""
from datetime import datetime, timezone
from typing import Callable, List, NamedTuple, Optional, Union

import config
from catalog import MEDDPICC_FIELDS, get_stage_definition
from models import (
    Deal,
    DealWarning,
    FieldStatus,
    GuidanceResult,
    NextBestAction,
    Severity,
    Stage,
    StageDefinition,
    StageHealth,
)
from utils import days_between, ensure_timezone_aware, is_filled


class DealFacts(NamedTuple):
    """Everything the rules look at, computed once per evaluation."""
    deal: Deal
    stage: Stage
    days_since_update: int
    completeness_score: int
    filled: frozenset

    def has(self, field_id: str) -> bool:
        return field_id in self.filled

    def at_least(self, stage: Stage) -> bool:
        return self.stage.order >= stage.order


# --- Missing Field Warnings ---
# (gate, field, severity, message, action). Order is the order warnings are emitted in.
FIELD_WARNING_RULES = [
    ("buyer_and_pain", "economic_buyer", Severity.CRITICAL,
     "No Economic Buyer identified",
     'Ask your champion: "Who ultimately signs off on this budget?"'),
    ("buyer_and_pain", "identified_pain", Severity.CRITICAL,
     "Pain not documented",
     "You cannot close a deal without clear pain. Revisit discovery."),
    ("champion_and_criteria", "champion", Severity.HIGH,
     "No Champion identified",
     "Who is selling for you when you are not in the room? Find and develop them."),
    ("champion_and_criteria", "decision_criteria", Severity.HIGH,
     "Decision Criteria unknown",
     'Ask: "What factors will you evaluate when making this decision?"'),
    ("paper_and_metrics", "paper_process", Severity.MEDIUM,
     "Paper Process not mapped",
     'Ask: "What does your organization require to get a contract signed?"'),
    ("paper_and_metrics", "metrics", Severity.MEDIUM,
     "Success metrics not defined",
     "Quantify expected outcomes - this strengthens the business case"),
]


class StageHealthRule(NamedTuple):
    applies: Callable[[DealFacts], bool]
    severity: Severity
    suggested_stage: Optional[Stage]
    reason: str
    explanation: str


# --- Stage Health Rules ---
# First match wins. Only one regression recommendation is surfaced at a time.
STAGE_HEALTH_RULES = [
    StageHealthRule(
        applies=lambda f: f.at_least(Stage.EXPAND) and not f.has("champion"),
        severity=Severity.CRITICAL,
        suggested_stage=Stage.QUALIFY,
        reason="No Champion past Qualify",
        explanation="Expanding a deal requires someone inside selling for you. "
                    "Without a champion this deal is still being qualified.",
    ),
    StageHealthRule(
        applies=lambda f: f.at_least(Stage.QUALIFY) and not f.has("economic_buyer"),
        severity=Severity.HIGH,
        suggested_stage=Stage.TEACH,
        reason="No Economic Buyer identified",
        explanation="A qualified deal has a known budget owner. Until you know who signs, "
                    "you are still teaching, not qualifying.",
    ),
    StageHealthRule(
        applies=lambda f: f.at_least(Stage.PROPOSE) and not f.has("decision_criteria"),
        severity=Severity.HIGH,
        suggested_stage=Stage.QUALIFY,
        reason="Proposing without Decision Criteria",
        explanation="A proposal has to map to how they will decide. "
                    "Go back and confirm their criteria before proposing.",
    ),
    StageHealthRule(
        applies=lambda f: f.at_least(Stage.CLOSE) and not f.has("paper_process"),
        severity=Severity.MEDIUM,
        suggested_stage=Stage.PROPOSE,
        reason="Closing without a Paper Process",
        explanation="You cannot drive to signature without knowing what it takes "
                    "to get a contract signed.",
    ),
    StageHealthRule(
        applies=lambda f: f.days_since_update > config.STALE_REVIEW_DAYS,
        severity=Severity.CRITICAL,
        suggested_stage=None,
        reason=f"No activity in over {config.STALE_REVIEW_DAYS} days",
        explanation="This deal may no longer be active. Review whether it belongs "
                    "in the pipeline at all.",
    ),
    StageHealthRule(
        applies=lambda f: f.at_least(Stage.EXPAND) and f.completeness_score < config.LOW_COMPLETENESS_SCORE,
        severity=Severity.HIGH,
        suggested_stage=Stage.QUALIFY,
        reason=f"MEDDPICC under {config.LOW_COMPLETENESS_SCORE}% complete",
        explanation="Too little is known about this deal for its stage. "
                    "Finish qualifying before expanding.",
    ),
]


def _first_critical(facts: DealFacts, warnings: List[DealWarning], stage_def: StageDefinition):
    for warning in warnings:
        if warning.severity == Severity.CRITICAL:
            return NextBestAction(message=warning.message, action=warning.action)
    return None

def _touchpoint(facts: DealFacts, warnings: List[DealWarning], stage_def: StageDefinition):
    if facts.days_since_update <= config.STALE_HIGH_DAYS:
        return None
    action = facts.deal.next_action if is_filled(facts.deal.next_action) else stage_def.actions[0]
    return NextBestAction(message="Time for a touchpoint", action=action)

def _missing_next_action(facts: DealFacts, warnings: List[DealWarning], stage_def: StageDefinition):
    if is_filled(facts.deal.next_action):
        return None
    return NextBestAction(message="No next action defined", action="Set a specific next action with a date")

def _execute_next_action(facts: DealFacts, warnings: List[DealWarning], stage_def: StageDefinition):
    return NextBestAction(message="Execute your next action", action=facts.deal.next_action)

# --- Next Best Action Chain ---
# Tried in order; _execute_next_action answers when every step declines.
NEXT_ACTION_CHAIN = [
    _first_critical,
    _touchpoint,
    _missing_next_action,
]


def completeness_score(filled_count: int) -> int:
    """Percentage of the 8 MEDDPICC fields filled, halves rounded up."""
    return int(filled_count * 100 / len(MEDDPICC_FIELDS) + 0.5)


def build_field_status(deal: Deal) -> dict:
    return {
        definition.id: FieldStatus(
            **definition.model_dump(),
            filled=is_filled(deal.field_value(definition.id)),
            value=deal.field_value(definition.id),
        )
        for definition in MEDDPICC_FIELDS
    }


def build_warnings(facts: DealFacts) -> List[DealWarning]:
    warnings = []
    days = facts.days_since_update

    if days > config.STALE_CRITICAL_DAYS:
        warnings.append(DealWarning(
            severity=Severity.CRITICAL,
            message=f"No activity in {days} days - deal is going cold",
            action="Reach out TODAY with a value-add touchpoint",
        ))
    elif days > config.STALE_HIGH_DAYS:
        warnings.append(DealWarning(
            severity=Severity.HIGH,
            message=f"{days} days since last update",
            action="Schedule next touchpoint this week",
        ))

    for gate, field_id, severity, message, action in FIELD_WARNING_RULES:
        if facts.stage.value in config.WARNING_GATES[gate] and not facts.has(field_id):
            warnings.append(DealWarning(severity=severity, message=message, action=action))

    return warnings


def assess_stage_health(facts: DealFacts) -> Optional[StageHealth]:
    for rule in STAGE_HEALTH_RULES:
        if rule.applies(facts):
            return StageHealth(
                severity=rule.severity,
                suggested_stage=rule.suggested_stage,
                reason=rule.reason,
                explanation=rule.explanation,
                current_stage=facts.stage,
            )
    return None


def choose_next_best_action(facts: DealFacts, warnings: List[DealWarning], stage_def: StageDefinition) -> NextBestAction:
    for step in NEXT_ACTION_CHAIN:
        action = step(facts, warnings, stage_def)
        if action is not None:
            return action
    return _execute_next_action(facts, warnings, stage_def)


def evaluate(deal: Union[Deal, dict], now: Optional[datetime] = None) -> GuidanceResult:
    """
    Builds the guidance for a single deal.

    `deal` may be a Deal or a raw record (e.g. a database row as a dict).
    `now` defaults to the current UTC time; pass it explicitly for repeatable results.
    """
    if not isinstance(deal, Deal):
        deal = Deal.model_validate(deal)
    now = ensure_timezone_aware(now) if now else datetime.now(timezone.utc)

    filled = frozenset(f.id for f in MEDDPICC_FIELDS if is_filled(deal.field_value(f.id)))
    facts = DealFacts(
        deal=deal,
        stage=deal.resolved_stage,
        days_since_update=days_between(deal.updated_at, now, config.MISSING_TIMESTAMP_DAYS),
        completeness_score=completeness_score(len(filled)),
        filled=filled,
    )
    stage_def = get_stage_definition(facts.stage)
    warnings = build_warnings(facts)

    return GuidanceResult(
        completeness_score=facts.completeness_score,
        days_since_update=facts.days_since_update,
        field_status=build_field_status(deal),
        warnings=warnings,
        stage_health=assess_stage_health(facts),
        stage_guidance=stage_def,
        next_best_action=choose_next_best_action(facts, warnings, stage_def),
    )
