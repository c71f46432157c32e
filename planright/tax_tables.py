# planright/tax_tables.py
# 2026 federal reference tables shared by every calculator.
# Brackets are (top_of_band, rate) tuples; the last band tops out at inf.

INF = float("inf")

TAX_YEAR = 2026

# -------- Ordinary income --------
STD_DEDUCTION = {"single": 16_100, "married": 32_200}

ORDINARY_BRACKETS = {
    "single": [
        (12_400, 0.10),
        (50_400, 0.12),
        (105_700, 0.22),
        (201_775, 0.24),
        (256_225, 0.32),
        (640_600, 0.35),
        (INF, 0.37),
    ],
    "married": [
        (24_800, 0.10),
        (100_800, 0.12),
        (211_400, 0.22),
        (403_550, 0.24),
        (512_450, 0.32),
        (768_700, 0.35),
        (INF, 0.37),
    ],
}

# -------- Capital gains / NIIT --------
LTCG_BRACKETS = {
    "single": [(49_450, 0.0), (545_500, 0.15), (INF, 0.20)],
    "married": [(98_900, 0.0), (613_700, 0.15), (INF, 0.20)],
}

NIIT_RATE = 0.038
NIIT_THRESHOLD = {"single": 200_000, "married": 250_000}

# -------- Medicare IRMAA (monthly surcharge per person) --------
IRMAA_TIERS = {
    "single": [
        (109_000, 0.00),
        (137_000, 81.20),
        (171_000, 202.90),
        (205_000, 324.60),
        (500_000, 446.30),
        (INF, 487.00),
    ],
    "married": [
        (218_000, 0.00),
        (274_000, 81.20),
        (342_000, 202.90),
        (410_000, 324.60),
        (750_000, 446.30),
        (INF, 487.00),
    ],
}

# -------- Social Security --------
FRA = 67
SS_BEND_POINTS = (1_286, 7_749)
SS_TAX_TIERS = {"single": (25_000, 34_000), "married": (32_000, 44_000)}
SS_EARNINGS_TEST = {
    "annual_exempt": 23_400,
    "fra_year_exempt": 62_160,
    "rate": 0.5,
    "fra_year_rate": 1.0 / 3.0,
}

# -------- Retirement plan limits --------
LIMITS = {
    "401k": 24_000,
    "401k_catchup_50": 8_000,
    "401k_catchup_60_63": 11_250,
    "401k_total_additions": 72_000,
    "ira": 7_500,
    "ira_catchup_50": 1_100,
    "hsa_self": 4_400,
    "hsa_family": 8_750,
    "hsa_catchup_55": 1_000,
}
ROTH_IRA_INCOME_LIMIT = {"single": 161_000, "married": 240_000}

# -------- Estate --------
ESTATE_EXEMPTION = {"single": 15_000_000, "married": 30_000_000}
ESTATE_TAX_RATE = 0.40
ESTATE_INDEX_RATE = 0.026
ESTATE_INDEX_FROM = 2027

# Planning horizon used by the projection (age at end of plan)
LIFE_EXP = 95


def normalize_status(fs: str) -> str:
    """
    Map the many filing-status spellings to the two table keys.
    MFJ / married / joint -> 'married'; everything else -> 'single'.
    """
    fs = (fs or "single").strip().lower()
    if fs in ("married", "mfj", "joint", "married_filing_jointly"):
        return "married"
    return "single"
