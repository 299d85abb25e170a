"""Market basket analysis: frequent pairs and association rules.

A basket is the set of distinct products sold on the same calendar date.
The order log carries no order id, so same-day sales stand in for a single
purchase event. Callers that do have an order id can pass ``basket_key`` to
group by it instead.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from itertools import combinations
from typing import Callable, Optional

import pandas as pd

from inventory_insights.config import (
    MAX_PAIRS,
    MAX_RULES,
    MIN_BASKETS,
    MIN_CONFIDENCE,
    MIN_SUPPORT,
    STRONG_LIFT,
)
from inventory_insights.analytics.stats import round2, safe_div
from inventory_insights.frames import Records, ensure_orders_frame, inventory_frame, sales_frame
from inventory_insights.models import Record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrequentPair(Record):
    product_a_id: str
    product_a_name: str
    product_b_id: str
    product_b_name: str
    count: int
    support: float


@dataclass(frozen=True)
class AssociationRule(Record):
    antecedent_id: str
    antecedent_name: str
    consequent_id: str
    consequent_name: str
    support: float
    confidence: float
    lift: float
    co_occurrences: int


@dataclass(frozen=True)
class AssociationRulesResult(Record):
    rules: list[AssociationRule]
    frequent_pairs: list[FrequentPair]
    total_orders: int
    insights: list[str]


def build_baskets(
    sales: pd.DataFrame,
    basket_key: Optional[Callable[[pd.DataFrame], pd.Series]] = None,
) -> list[frozenset]:
    """Distinct product sets per basket (same order date unless overridden)."""
    if sales.empty:
        return []
    keys = basket_key(sales) if basket_key else sales["order_date"]
    return [frozenset(group) for _, group in sales.groupby(keys)["product_id"]]


def rule_metrics(co_count: int, freq_antecedent: int, freq_consequent: int, total: int) -> tuple[float, float]:
    """Confidence P(B|A) and lift P(B|A)/P(B) of the rule A -> B."""
    confidence = safe_div(co_count, freq_antecedent)
    lift = safe_div(confidence, safe_div(freq_consequent, total))
    return confidence, lift


def mine_association_rules(
    orders: Records,
    inventory: Records,
    min_support: float = MIN_SUPPORT,
    min_confidence: float = MIN_CONFIDENCE,
    basket_key: Optional[Callable[[pd.DataFrame], pd.Series]] = None,
) -> AssociationRulesResult:
    """Mine pairwise association rules from sale baskets.

    Args:
        orders: Order history; only sales are used.
        inventory: Product snapshots, used for display names.
        min_support: Minimum pair support to keep a frequent pair.
        min_confidence: Minimum rule confidence; rules also need lift > 1.
        basket_key: Optional function mapping the sales frame to basket ids.

    Returns:
        Top rules by lift, top pairs by count and a few plain-language insights.
        Fewer than three baskets yields empty results.
    """
    logger.info("Association rule mining started")
    names = inventory_frame(inventory).set_index("product_id")["product_name"].to_dict()
    baskets = build_baskets(sales_frame(ensure_orders_frame(orders)), basket_key)
    total = len(baskets)
    if total < MIN_BASKETS:
        logger.info("Association rule mining skipped — only %d baskets", total)
        return AssociationRulesResult(rules=[], frequent_pairs=[], total_orders=total, insights=[])

    item_freq = Counter(item for basket in baskets for item in basket)
    pair_freq = Counter(
        pair for basket in baskets for pair in combinations(sorted(basket), 2)
    )

    pairs = []
    for (a, b), count in pair_freq.items():
        support = count / total
        if support >= min_support:
            pairs.append(FrequentPair(
                product_a_id=a,
                product_a_name=names.get(a, a),
                product_b_id=b,
                product_b_name=names.get(b, b),
                count=count,
                support=round2(support),
            ))
    pairs.sort(key=lambda pair: -pair.count)

    rules = []
    for pair in pairs:
        directions = (
            (pair.product_a_id, pair.product_a_name, pair.product_b_id, pair.product_b_name),
            (pair.product_b_id, pair.product_b_name, pair.product_a_id, pair.product_a_name),
        )
        for ante_id, ante_name, cons_id, cons_name in directions:
            confidence, lift = rule_metrics(pair.count, item_freq[ante_id], item_freq[cons_id], total)
            if confidence >= min_confidence and lift > 1:
                rules.append(AssociationRule(
                    antecedent_id=ante_id,
                    antecedent_name=ante_name,
                    consequent_id=cons_id,
                    consequent_name=cons_name,
                    support=pair.support,
                    confidence=round2(confidence),
                    lift=round2(lift),
                    co_occurrences=pair.count,
                ))
    rules.sort(key=lambda rule: -rule.lift)

    insights = build_insights(rules, pairs)
    logger.info("Association rule mining completed — %d baskets, %d pairs, %d rules",
                total, len(pairs), len(rules))
    return AssociationRulesResult(
        rules=rules[:MAX_RULES],
        frequent_pairs=pairs[:MAX_PAIRS],
        total_orders=total,
        insights=insights,
    )


def build_insights(rules: list[AssociationRule], pairs: list[FrequentPair]) -> list[str]:
    insights = []
    if rules:
        top = rules[0]
        insights.append(
            f'Customers buying "{top.antecedent_name}" also buy "{top.consequent_name}" '
            f"{top.confidence * 100:.0f}% of the time (lift {top.lift}x)"
        )
    if pairs:
        top_pair = pairs[0]
        insights.append(
            f'Most frequently sold together: "{top_pair.product_a_name}" + '
            f'"{top_pair.product_b_name}" ({top_pair.count} times)'
        )
    strong = sum(1 for rule in rules if rule.lift >= STRONG_LIFT)
    if strong:
        insights.append(f"{strong} strongly associated pairs with lift >= 2x — consider bundling")
    return insights
