from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Union
from collections import defaultdict

import config
from models import Deal, Nudge, PipelineStats, Severity, Stage, StageTotals
from utils import days_between, ensure_timezone_aware, is_filled


def _as_deals(deals: Iterable[Union[Deal, dict]]) -> List[Deal]:
    return [d if isinstance(d, Deal) else Deal.model_validate(d) for d in deals]

def _is_open(deal: Deal) -> bool:
    return deal.stage not in config.TERMINAL_STAGES


def build_nudges(deals: Iterable[Union[Deal, dict]], now: Optional[datetime] = None) -> List[Nudge]:
    """
    Pipeline-wide reminders, grouped by kind: overdue next actions first,
    then deals sitting too long in one stage, then silent outreach deals.
    """
    now = ensure_timezone_aware(now) if now else datetime.now(timezone.utc)
    deals = _as_deals(deals)
    open_deals = [d for d in deals if _is_open(d)]
    nudges = []

    # --- Overdue next actions ---
    for deal in open_deals:
        if deal.next_action_date and deal.next_action_date < now:
            next_action = deal.next_action if is_filled(deal.next_action) else "next step"
            nudges.append(Nudge(
                priority=Severity.HIGH,
                message=f"Overdue action: {next_action}",
                deal_id=deal.id,
                action_suggestion=f"Contact {deal.organization or 'client'} about: {next_action}",
            ))

    # --- Stale in stage ---
    for deal in open_deals:
        if deal.stage_entered_at and now - deal.stage_entered_at > timedelta(days=config.STAGE_STALE_DAYS):
            nudges.append(Nudge(
                priority=Severity.MEDIUM,
                message=f"{deal.organization or 'Deal'} stale in {deal.stage} for >{config.STAGE_STALE_DAYS} days",
                deal_id=deal.id,
                action_suggestion="Schedule follow-up or move to next stage",
            ))

    # --- Outreach with no interactions ---
    # A deal whose interaction count is unknown is skipped, not nudged.
    for deal in deals:
        if deal.stage == Stage.OUTREACH.value and deal.interaction_count == 0:
            nudges.append(Nudge(
                priority=Severity.MEDIUM,
                message=f"{deal.organization or 'Deal'} in outreach but no interactions logged",
                deal_id=deal.id,
                action_suggestion="Log first contact attempt or meeting",
            ))

    return nudges


def pipeline_stats(deals: Iterable[Union[Deal, dict]], now: Optional[datetime] = None) -> PipelineStats:
    """Count and value per open stage, total pipeline value (lost excluded) and average days in stage."""
    now = ensure_timezone_aware(now) if now else datetime.now(timezone.utc)
    deals = _as_deals(deals)

    by_stage = defaultdict(lambda: {"count": 0, "value": 0.0})
    stage_days = defaultdict(list)
    for deal in deals:
        if not _is_open(deal):
            continue
        by_stage[deal.stage]["count"] += 1
        by_stage[deal.stage]["value"] += deal.deal_value
        stage_days[deal.stage].append(max(days_between(deal.stage_entered_at, now, 0), 0))

    total_value = sum(d.deal_value for d in deals if d.stage != "lost")
    avg_days = {stage: int(sum(days) / len(days) + 0.5) for stage, days in stage_days.items()}

    return PipelineStats(
        by_stage={stage: StageTotals(**totals) for stage, totals in by_stage.items()},
        total_value=total_value,
        avg_days=avg_days,
    )
