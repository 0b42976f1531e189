"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, graphtoll.toml only contains
overrides. An empty or missing file is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from graphtoll.domain.cost import EDGE_PRICE, NODE_PRICE
from graphtoll.domain.moderation import DEFAULT_ALPHA, DEFAULT_THRESHOLD

# --- graphtoll.toml sections ---


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    db_name: str = "graphtoll.db"
    busy_timeout: float = Field(default=30.0, gt=0)


class PricingConfig(BaseModel):
    """[pricing] section — token prices per source node and per edge."""

    model_config = {"frozen": True}

    node_price: float = Field(default=NODE_PRICE, ge=0)
    edge_price: float = Field(default=EDGE_PRICE, ge=0)


class ModerationConfig(BaseModel):
    """[moderation] section.

    ``alpha`` is the EMA smoothing factor, biased toward the existing
    weight. ``auto_apply_threshold`` is the largest relative deviation
    applied without review.
    """

    model_config = {"frozen": True}

    alpha: float = Field(default=DEFAULT_ALPHA, gt=0, lt=1)
    auto_apply_threshold: float = Field(default=DEFAULT_THRESHOLD, ge=0)


class LedgerConfig(BaseModel):
    """[ledger] section."""

    model_config = {"frozen": True}

    opening_balance: float = Field(default=0.0, ge=0)

