# deal-coach/config.py

"""
Central configuration for the Deal Coach.
-- Guidance thresholds, stage gating and environment settings --
"""
import os
from dotenv import load_dotenv

load_dotenv()

# --- Environment ---
PRODUCT_NAME = os.getenv("DEAL_COACH_PRODUCT_NAME") or "FORGE"

# --- Recency Thresholds (days since last update) ---
STALE_HIGH_DAYS = 7
STALE_CRITICAL_DAYS = 14
STALE_REVIEW_DAYS = 30

# A deal with no updated_at is treated as this many days old, never as fresh.
MISSING_TIMESTAMP_DAYS = 999

# --- Stage Health ---
LOW_COMPLETENESS_SCORE = 40

# --- Warning Gates ---
# Stage ids in which each group of missing-field warnings applies.
WARNING_GATES = {
    "buyer_and_pain": {"qualify", "expand", "propose", "close"},
    "champion_and_criteria": {"expand", "propose", "close"},
    "paper_and_metrics": {"propose", "close"},
}

# --- Pipeline Reports ---
STAGE_STALE_DAYS = 14
TERMINAL_STAGES = {"won", "lost"}
