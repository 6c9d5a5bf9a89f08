# deal-coach/catalog.py

"""
MEDDPICC field definitions and Challenger stage playbook.
Static coaching content, selected by id and returned verbatim.
"""
from typing import Dict, Optional

import config
from models import FieldDefinition, Stage, StageDefinition

_PRODUCT = config.PRODUCT_NAME

# --- MEDDPICC Fields (display order) ---
MEDDPICC_FIELDS = (
    FieldDefinition(
        id="metrics",
        label="Metrics",
        letter="M",
        question="What quantifiable outcomes will they achieve?",
        examples="Reduce readmissions by 15%, Cut AI pilot-to-production time by 50%",
        coaching='Without clear metrics, the deal lacks urgency. Ask: "What would success look like in numbers?"',
    ),
    FieldDefinition(
        id="economic_buyer",
        label="Economic Buyer",
        letter="E",
        question="Who controls the budget and can sign?",
        examples="CFO, VP Finance, CIO with budget authority",
        coaching="If you do not have access to the economic buyer, you are not in control of this deal.",
    ),
    FieldDefinition(
        id="decision_criteria",
        label="Decision Criteria",
        letter="D",
        question="What factors will they evaluate solutions on?",
        examples="Price, integration ease, compliance, time-to-value, vendor stability",
        coaching=f'You must know their criteria to position {_PRODUCT} correctly. Ask: "What will you be comparing when making this decision?"',
    ),
    FieldDefinition(
        id="decision_process",
        label="Decision Process",
        letter="D",
        question="What steps do they take to make a decision?",
        examples="Committee review → CFO approval → Legal → Procurement",
        coaching="Map every step and stakeholder. Deals stall when you discover new steps late.",
    ),
    FieldDefinition(
        id="paper_process",
        label="Paper Process",
        letter="P",
        question="What is required to get a contract signed?",
        examples="3 quotes required, legal redlines, insurance cert, vendor registration",
        coaching="Start this early. Paper process is where deals go to die.",
    ),
    FieldDefinition(
        id="identified_pain",
        label="Identified Pain",
        letter="I",
        question="What specific problem are we solving?",
        examples="Stuck in pilot purgatory, governance gaps, no AI strategy alignment",
        coaching="No pain = no deal. If they are not actively hurting, this is not a real opportunity.",
    ),
    FieldDefinition(
        id="champion",
        label="Champion",
        letter="C",
        question="Who inside is selling for you when you are not in the room?",
        examples="Dr. Mike Chen (CMO) - personally invested in AI success",
        coaching="A true champion has power, influence, and personal stake in your success.",
    ),
    FieldDefinition(
        id="competition",
        label="Competition",
        letter="C",
        question="Who else are they considering?",
        examples="IBM Watson, Internal IT team, Big 4 consultants, Status quo",
        coaching="Status quo is your biggest competitor. Quantify the cost of doing nothing.",
    ),
)

FIELDS_BY_ID: Dict[str, FieldDefinition] = {f.id: f for f in MEDDPICC_FIELDS}

# --- Challenger Stages (funnel order) ---
CHALLENGER_STAGES = (
    StageDefinition(
        id=Stage.OUTREACH,
        label="Outreach",
        objective="Get their attention and earn a meeting",
        actions=[
            "Research the organization deeply (recent news, strategic initiatives, pain points)",
            "Find a warm connection path (LinkedIn, conferences, mutual contacts)",
            "Lead with insight, not product pitch - teach them something they did not know",
            "Personalize: reference their specific challenges (pilot purgatory, governance gaps)",
        ],
        next_stage_requires="Meeting scheduled with decision-influencer or higher",
    ),
    StageDefinition(
        id=Stage.TEACH,
        label="Teach",
        objective="Reframe their thinking and establish credibility",
        actions=[
            "Deliver commercial insight that challenges their assumptions",
            "Show them a problem they did not know they had (Challenger approach)",
            "Quantify the cost of their current state (pilot purgatory costs)",
            f"Position {_PRODUCT} as uniquely able to solve this newly-revealed problem",
        ],
        next_stage_requires="They acknowledge the problem and want to explore solutions",
    ),
    StageDefinition(
        id=Stage.QUALIFY,
        label="Qualify",
        objective="Determine if this is a real opportunity worth pursuing",
        actions=[
            "Identify the Economic Buyer - who controls budget?",
            "Understand their timeline and urgency",
            "Confirm budget exists or can be created (fiscal year timing)",
            "Map the Decision Process - every step and stakeholder",
        ],
        next_stage_requires="MEDDPICC: M, E, D, P, I fields populated",
    ),
    StageDefinition(
        id=Stage.EXPAND,
        label="Expand",
        objective="Build consensus and expand your influence",
        actions=[
            "Identify and develop a Champion who will sell internally",
            "Map all stakeholders and their individual priorities",
            f"Address competition explicitly - why {_PRODUCT} vs alternatives",
            "Tailor value messaging to each stakeholder role",
        ],
        next_stage_requires="Champion identified, multiple stakeholders engaged",
    ),
    StageDefinition(
        id=Stage.PROPOSE,
        label="Propose",
        objective="Present a solution aligned to their buying criteria",
        actions=[
            "Confirm Decision Criteria are fully understood",
            "Present proposal that maps to their criteria point-by-point",
            "Include clear metrics and success measures",
            "Start Paper Process early - know what they need",
        ],
        next_stage_requires="Proposal delivered, verbal intent to proceed",
    ),
    StageDefinition(
        id=Stage.CLOSE,
        label="Close",
        objective="Navigate to signed contract",
        actions=[
            "Drive Paper Process to completion - remove every obstacle",
            "Handle last-minute objections decisively",
            "Confirm implementation timeline and resources",
            "Get the signature - do not let momentum die",
        ],
        next_stage_requires="Signed contract",
    ),
    StageDefinition(
        id=Stage.WON,
        label="Won",
        objective="Deliver value and build reference",
        actions=[
            "Execute flawlessly on contracted scope",
            "Document wins and build case study",
            "Identify expansion opportunities",
            "Ask for referrals to peer organizations",
        ],
        next_stage_requires="N/A - Celebrate and deliver",
    ),
)

STAGES_BY_ID: Dict[Stage, StageDefinition] = {s.id: s for s in CHALLENGER_STAGES}


def get_field(field_id: str) -> Optional[FieldDefinition]:
    return FIELDS_BY_ID.get(field_id)


def get_stage_definition(stage_id) -> StageDefinition:
    """Playbook entry for a stage id. Unknown, missing and 'lost' ids fall back to Outreach."""
    return STAGES_BY_ID[Stage.resolve(stage_id)]
