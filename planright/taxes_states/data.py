# planright/taxes_states/data.py
# Retirement tax profile for the states in the comparison table.
# Rates are PERCENT values (4.95 for 4.95%); brackets are (limit, rate_pct) tuples.

INF = float("inf")

CA_BRACKETS = [
    (10_412, 1.0),
    (24_684, 2.0),
    (38_959, 4.0),
    (54_081, 6.0),
    (68_350, 8.0),
    (349_137, 9.3),
    (418_961, 10.3),
    (698_271, 11.3),
    (1_000_000, 12.3),
    (INF, 13.3),
]

FIELDS = (
    "code", "name", "income_tax_rate",
    "taxes_retirement_income", "taxes_social_security", "taxes_pension",
    "property_tax_rate", "sales_tax_rate",
    "estate_exemption", "estate_tax_rate", "has_inheritance_tax",
    "cost_of_living_index", "median_home_price", "healthcare_ranking", "notes",
)

# estate_exemption None -> no state estate tax
_ROWS = [
    # No income tax
    ("AK", "Alaska", 0, False, False, False, 1.19, 0, None, None, False, 127, 318_000, 36,
     "Residents receive annual PFD dividend. High COL but no state taxes."),
    ("FL", "Florida", 0, False, False, False, 0.89, 6.0, None, None, False, 100, 407_000, 31,
     "Most popular retirement destination. Homestead exemption available."),
    ("NV", "Nevada", 0, False, False, False, 0.55, 6.85, None, None, False, 104, 425_000, 35,
     "Low property taxes. Popular for CA retirees."),
    ("TX", "Texas", 0, False, False, False, 1.80, 6.25, None, None, False, 92, 301_000, 34,
     "No income tax but high property taxes. Over-65 freeze available."),
    ("WA", "Washington", 0, False, False, False, 0.98, 6.5, 2_193_000, 20, False, 118, 577_000, 7,
     "New 7% capital gains tax on gains over $250k. Estate tax applies."),
    ("WY", "Wyoming", 0, False, False, False, 0.57, 4.0, None, None, False, 92, 340_000, 44,
     "Truly tax-friendly. Lower population density."),
    ("TN", "Tennessee", 0, False, False, False, 0.71, 7.0, None, None, False, 89, 315_000, 41,
     "Hall Tax on interest/dividends eliminated in 2021. High sales tax."),
    ("SD", "South Dakota", 0, False, False, False, 1.28, 4.5, None, None, False, 92, 290_000, 22,
     "Very tax-friendly. Popular for trust/asset protection."),
    ("NH", "New Hampshire", 0, False, False, False, 2.18, 0, None, None, False, 106, 450_000, 6,
     "5% tax on dividends/interest (phasing out by 2027). Very high property tax."),
    # Income tax, retirement income exempt
    ("PA", "Pennsylvania", 3.07, False, False, False, 1.58, 6.0, None, None, True, 99, 265_000, 24,
     "Excludes ALL retirement income including 401k/IRA withdrawals. Inheritance tax 4.5-15%."),
    ("IL", "Illinois", 4.95, False, False, False, 2.27, 6.25, 4_000_000, 16, False, 93, 250_000, 19,
     "All retirement income exempt. Very high property taxes. Estate tax applies."),
    ("MS", "Mississippi", 5.0, False, False, False, 0.81, 7.0, None, None, False, 84, 180_000, 50,
     "Very low COL. All retirement income exempt. Lowest healthcare ranking."),
    # High tax
    ("CA", "California", 13.3, True, False, True, 0.76, 7.25, None, None, False, 142, 793_000, 8,
     "Highest state income tax. Prop 13 limits property tax increases. Great climate/healthcare."),
    ("NY", "New York", 10.9, True, False, True, 1.72, 4.0, 6_940_000, 16, False, 139, 435_000, 12,
     "$20k pension exclusion for govt pensions. NYC adds 3.876% local tax. Estate tax cliff."),
    ("NJ", "New Jersey", 10.75, True, False, True, 2.49, 6.625, 0, 16, True, 115, 495_000, 5,
     "Highest property taxes in US. Both estate AND inheritance tax. $100k retirement exclusion."),
    ("CT", "Connecticut", 6.99, True, True, True, 2.14, 6.35, 13_610_000, 12, False, 111, 405_000, 4,
     "Taxes SS above AGI threshold. High property taxes. Estate tax matches federal exemption."),
    ("MN", "Minnesota", 9.85, True, True, True, 1.12, 6.875, 3_000_000, 16, False, 98, 330_000, 3,
     "Taxes SS above AGI threshold. Estate tax with low exemption. Excellent healthcare."),
    # Moderate
    ("AZ", "Arizona", 2.5, True, False, True, 0.66, 5.6, None, None, False, 103, 435_000, 28,
     "Flat 2.5% tax. $2,500 pension exclusion. Popular retirement destination."),
    ("NC", "North Carolina", 4.5, True, False, True, 0.84, 4.75, None, None, False, 95, 330_000, 33,
     "Flat tax dropping to 3.99% by 2027. SS exempt. Growing retirement destination."),
    ("SC", "South Carolina", 6.4, True, False, True, 0.57, 6.0, None, None, False, 89, 295_000, 42,
     "$10,000 retirement deduction. Very low property taxes."),
    ("GA", "Georgia", 5.75, True, False, True, 0.92, 4.0, None, None, False, 91, 335_000, 38,
     "$65k retirement exclusion (65+). SS fully exempt. Moving to flat tax."),
    ("CO", "Colorado", 4.4, True, True, True, 0.51, 2.9, None, None, False, 105, 535_000, 16,
     "SS exclusion up to $24k (65+). $20k retirement exclusion."),
    ("VA", "Virginia", 5.75, True, False, True, 0.82, 5.3, None, None, False, 104, 380_000, 14,
     "$12k age deduction (65+). Military retirement fully exempt."),
    ("OR", "Oregon", 9.9, True, False, True, 0.97, 0, 1_000_000, 16, False, 113, 495_000, 9,
     "No sales tax. High income tax. Very low estate threshold ($1M)."),
    ("MD", "Maryland", 5.75, True, False, True, 1.09, 6.0, 5_000_000, 16, True, 114, 425_000, 10,
     "Both estate AND inheritance tax. $36k pension exclusion (65+). Local income taxes."),
]

STATE_TAX_DATA = {}
for _row in _ROWS:
    _rec = dict(zip(FIELDS, _row))
    _rec["has_estate_tax"] = _rec["estate_exemption"] is not None
    _rec["income_tax_brackets"] = CA_BRACKETS if _rec["code"] == "CA" else None
    STATE_TAX_DATA[_rec["code"]] = _rec

# Category lists; some codes are not in the comparison table.
NO_INCOME_TAX_STATES = ["AK", "FL", "NV", "NH", "SD", "TN", "TX", "WA", "WY"]
NO_RETIREMENT_TAX_STATES = ["PA", "IL", "MS", "AL", "HI", "IA"]
NO_ESTATE_TAX_STATES = ["FL", "TX", "NV", "AZ", "NC", "TN", "GA", "PA"]
