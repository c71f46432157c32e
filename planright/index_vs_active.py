# planright/index_vs_active.py
# Fee drag of active funds vs index funds, with SPIVA underperformance reference data.
from typing import Dict

import pandas as pd

from .formatting import clamp, num, round_half_up

DEFAULT_AMOUNT = 100_000
DEFAULT_YEARS = 30
DEFAULT_ACTIVE_ER = 1.0
DEFAULT_INDEX_ER = 0.03
DEFAULT_RETURN = 7.0

# Percent of active funds trailing their benchmark over 1/5/10/15 years; expense ratios in percent.
SPIVA_DATA = [
    {"category": "U.S. Large Cap", "y1": 60, "y5": 77, "y10": 87, "y15": 92,
     "active_er": 0.68, "index_er": 0.03},
    {"category": "U.S. Mid Cap", "y1": 55, "y5": 73, "y10": 84, "y15": 90,
     "active_er": 0.92, "index_er": 0.04},
    {"category": "U.S. Small Cap", "y1": 48, "y5": 68, "y10": 82, "y15": 89,
     "active_er": 1.05, "index_er": 0.05},
    {"category": "International Developed", "y1": 65, "y5": 80, "y10": 88, "y15": 91,
     "active_er": 0.89, "index_er": 0.06},
    {"category": "Emerging Markets", "y1": 52, "y5": 75, "y10": 85, "y15": 88,
     "active_er": 1.15, "index_er": 0.11},
    {"category": "U.S. Government Bonds", "y1": 58, "y5": 72, "y10": 80, "y15": 85,
     "active_er": 0.55, "index_er": 0.03},
    {"category": "U.S. Investment Grade", "y1": 62, "y5": 78, "y10": 86, "y15": 90,
     "active_er": 0.62, "index_er": 0.04},
]

COST_FACTORS = [
    {
        "name": "Expense Ratio",
        "active_impact": "0.50% - 1.50%",
        "index_impact": "0.03% - 0.10%",
        "explanation": "Annual fee charged by the fund. It comes out of your returns every year.",
        "annual_drag": 0.9,
    },
    {
        "name": "Trading Costs",
        "active_impact": "0.10% - 0.50%",
        "index_impact": "0.01% - 0.02%",
        "explanation": "Active managers trade frequently, paying bid-ask spreads and market impact. "
                       "Index funds rarely trade.",
        "annual_drag": 0.25,
    },
    {
        "name": "Cash Drag",
        "active_impact": "0.10% - 0.30%",
        "index_impact": "Near 0%",
        "explanation": "Active funds hold cash for redemptions and tactical moves. "
                       "Cash earns less than stocks over time.",
        "annual_drag": 0.15,
    },
    {
        "name": "Tax Inefficiency",
        "active_impact": "0.50% - 1.00%",
        "index_impact": "0.05% - 0.20%",
        "explanation": "High turnover triggers capital gains taxes. "
                       "Index funds have minimal turnover and rarely distribute gains.",
        "annual_drag": 0.5,
    },
]

THREE_FUND_PORTFOLIO = [
    {"name": "U.S. Total Stock Market", "ticker": "VTSAX / VTI", "expense_ratio": 0.03, "allocation": 60,
     "description": "Owns every U.S. company. 4,000+ stocks across all sizes and sectors."},
    {"name": "International Total Stock Market", "ticker": "VTIAX / VXUS", "expense_ratio": 0.07, "allocation": 30,
     "description": "Owns every international company. 8,000+ stocks in developed and emerging markets."},
    {"name": "U.S. Total Bond Market", "ticker": "VBTLX / BND", "expense_ratio": 0.03, "allocation": 10,
     "description": "High-quality government and corporate bonds. Provides stability and income."},
]

ACCOUNT_RECOMMENDATIONS = [
    {"account": "Taxable Brokerage", "recommendation": "Total Market Index Funds", "priority": "high",
     "reason": "Tax-efficient, low turnover, qualified dividends. Use tax-loss harvesting for extra savings."},
    {"account": "401(k) with Good Options", "recommendation": "Target Date Index Fund or 3-Fund Portfolio",
     "priority": "high",
     "reason": "Low fees, automatic rebalancing. Check if your plan has institutional share classes."},
    {"account": "401(k) with Bad Options", "recommendation": "Target Date Fund (if available) or Lowest-Cost Option",
     "priority": "medium",
     "reason": "If all options are expensive, pick the least bad one. Supplement with IRA investments."},
    {"account": "Traditional IRA", "recommendation": "Total Market Index Funds", "priority": "high",
     "reason": "No tax advantage to muni bonds here. Use low-cost equity index funds for growth."},
    {"account": "Roth IRA", "recommendation": "Growth-Oriented Index Funds", "priority": "high",
     "reason": "Tax-free growth forever. Tilt toward stocks since gains are never taxed."},
    {"account": "HSA", "recommendation": "Total Market Index Funds", "priority": "high",
     "reason": "Triple tax advantage. Invest for growth if you can cover medical expenses out of pocket."},
]


def total_cost_drag() -> float:
    return sum(f["annual_drag"] for f in COST_FACTORS)


def spiva_table() -> pd.DataFrame:
    df = pd.DataFrame(SPIVA_DATA)
    df["er_gap"] = df["active_er"] - df["index_er"]
    return df


def growth_comparison(amount: float = DEFAULT_AMOUNT, years: int = DEFAULT_YEARS,
                      active_er: float = DEFAULT_ACTIVE_ER, index_er: float = DEFAULT_INDEX_ER,
                      expected_return: float = DEFAULT_RETURN) -> Dict[str, object]:
    """
    Grow the same lump sum at (expected - ER)% for each fund type.
    The table has one row per year 0..years; year 0 is the starting amount.
    percent_difference is measured against the active result.
    """
    amount = clamp(amount)
    years = int(clamp(years, 0, 100, default=DEFAULT_YEARS))
    index_r = (num(expected_return, DEFAULT_RETURN) - num(index_er)) / 100.0
    active_r = (num(expected_return, DEFAULT_RETURN) - num(active_er)) / 100.0

    rows = []
    index_bal, active_bal = amount, amount
    for year in range(years + 1):
        rows.append({"year": year, "index": index_bal, "active": active_bal})
        index_bal *= 1 + index_r
        active_bal *= 1 + active_r

    df = pd.DataFrame(rows)
    df["difference"] = df["index"] - df["active"]

    final_index = float(df["index"].iloc[-1])
    final_active = float(df["active"].iloc[-1])
    diff = final_index - final_active
    return {
        "table": df,
        "final_index": final_index,
        "final_active": final_active,
        "difference": diff,
        "percent_difference": round_half_up(diff / final_active * 100.0, 1) if final_active > 0 else 0.0,
    }
