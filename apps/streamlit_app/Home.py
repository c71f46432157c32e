# apps/streamlit_app/Home.py
import streamlit as st
import pandas as pd

# --- make the project root importable on Streamlit Cloud ---
import sys, os
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)
# -----------------------------------------------------------

from planright.logging_config import setup_logging
from planright.formatting import money, compact_money, pct
from planright.schema import (
    LifeInsuranceInputs, CharitableInputs, ContributionInputs, SSOptimizerInputs,
    RetirementIncomeProfile, EstateChecklist, Profile, Inputs, Assumptions,
)
from planright.life_insurance import analyze_life_insurance
from planright.charitable import recommend_strategy
from planright.contributions import analyze_contributions, default_monthly_budget
from planright.ss_optimizer import optimize_social_security
from planright.taxes_states.data import STATE_TAX_DATA
from planright.taxes_states.comparison import compare_states, retirement_friendly_states
from planright.index_vs_active import (
    growth_comparison, spiva_table, total_cost_drag, COST_FACTORS, THREE_FUND_PORTFOLIO,
)
from planright.estate import (
    ESSENTIAL_DOCUMENTS, CHECKLIST_ITEMS, TRUST_TYPES, PROBATE_AVOIDANCE_STRATEGIES,
    checklist_status, completion, estate_profile, update_checklist,
)
from planright.projection import run, monte_carlo
from planright.generational import simulate_per_beneficiary_payout

logger = setup_logging()

# -------------------------------------------------
# App configuration
# -------------------------------------------------
st.set_page_config(page_title="PlanRight: Personal Finance Calculators", layout="wide")
st.title("PlanRight: Personal Finance Calculators")
st.set_option("client.showErrorDetails", True)

STATE_CODES = sorted(STATE_TAX_DATA)

(tab_life, tab_give, tab_contrib, tab_ss, tab_states,
 tab_index, tab_estate, tab_proj) = st.tabs([
    "Life Insurance", "Charitable", "Contributions", "Social Security",
    "State Taxes", "Index vs Active", "Estate", "Projection",
])

# ===============================
# LIFE INSURANCE TAB
# ===============================
with tab_life:
    st.header("🛡️ Life Insurance Needs (DIME)")
    c1, c2, c3 = st.columns(3)
    with c1:
        li_income = st.number_input("Annual income", value=100_000, step=5_000)
        li_years = st.number_input("Years of income to replace", value=10, min_value=0, max_value=40)
        li_age = st.number_input("Your age", value=35, min_value=18, max_value=80)
    with c2:
        li_cc = st.number_input("Credit card debt", value=0, step=1_000)
        li_car = st.number_input("Car loans", value=0, step=1_000)
        li_student = st.number_input("Student loans", value=0, step=1_000)
        li_mortgage = st.number_input("Mortgage balance", value=0, step=10_000)
    with c3:
        li_kids = st.number_input("Children", value=0, min_value=0, max_value=10)
        li_youngest = st.number_input("Youngest child's age", value=0, min_value=0, max_value=30)
        li_coverage = st.number_input("Current coverage", value=200_000, step=50_000)
        li_health = st.selectbox("Health", ["excellent", "good", "average", "poor"], index=1)
        li_smoker = st.checkbox("Smoker", value=False)

    with st.expander("Spouse", expanded=False):
        li_sp_income = st.number_input("Spouse income", value=0, step=5_000)
        li_sp_cov = st.number_input("Spouse current coverage", value=0, step=50_000)

    try:
        li = analyze_life_insurance(LifeInsuranceInputs(
            annual_income=li_income, income_years=li_years, credit_card_debt=li_cc, car_loans=li_car,
            student_loans=li_student, mortgage_balance=li_mortgage, num_children=li_kids,
            youngest_child_age=li_youngest, current_coverage=li_coverage, age=li_age,
            health=li_health, smoker=li_smoker, spouse_income=li_sp_income,
            spouse_current_coverage=li_sp_cov,
        ))
        b, gap, prem = li["breakdown"], li["gap"], li["premium"]
        m1, m2, m3 = st.columns(3)
        m1.metric("Coverage needed", money(b.total))
        m2.metric("Gap" if not gap.is_overinsured else "Over-insured by", money(abs(gap.gap)))
        m3.metric("20-yr term estimate", f"{money(prem.term_monthly)}/mo")
        st.dataframe(pd.DataFrame([
            {"Need": "Debt", "Amount": b.debt},
            {"Need": "Income", "Amount": b.income},
            {"Need": "Mortgage", "Amount": b.mortgage},
            {"Need": "Education", "Amount": b.education},
        ]), use_container_width=True)
        if li["spouse"]:
            st.caption(f"Spouse needs {money(li['spouse']['breakdown'].total)}; "
                       f"gap {money(li['spouse']['gap'].gap)}.")
        if li["drop_reasons"]:
            st.subheader("You may be able to reduce coverage")
            for r in li["drop_reasons"]:
                st.write(f"- {r}")
    except Exception as e:
        st.error("Life insurance analysis failed. Details below.")
        st.exception(e)

# ===============================
# CHARITABLE TAB
# ===============================
with tab_give:
    st.header("🎁 Charitable Giving")
    c1, c2, c3 = st.columns(3)
    with c1:
        cg_age = st.number_input("Age", value=72.0, step=0.5)
        cg_status = st.selectbox("Filing status", ["single", "married"], index=0)
        cg_ira = st.number_input("IRA balance", value=500_000, step=10_000)
    with c2:
        cg_giving = st.number_input("Annual giving", value=10_000, step=1_000)
        cg_stock = st.number_input("Appreciated stock value", value=50_000, step=5_000)
        cg_basis = st.number_input("Stock cost basis", value=20_000, step=5_000)
    with c3:
        cg_income = st.number_input("Ordinary income", value=80_000, step=5_000)
        cg_state = st.number_input("State rate %", value=5.0, step=0.25)
        cg_years = st.number_input("DAF bunching years", value=3, min_value=1, max_value=10)

    u1, u2, u3 = st.columns(3)
    with u1:
        cg_qcd = st.checkbox("Use QCD", value=True)
    with u2:
        cg_use_stock = st.checkbox("Give appreciated stock", value=False)
    with u3:
        cg_daf = st.checkbox("Use donor-advised fund", value=False)

    try:
        plan = recommend_strategy(CharitableInputs(
            age=cg_age, filing_status=cg_status, ira_balance=cg_ira, annual_giving=cg_giving,
            stock_value=cg_stock, stock_cost_basis=cg_basis, ordinary_income=cg_income,
            state_rate=cg_state / 100.0, bunching_years=cg_years,
            use_qcd=cg_qcd, use_daf=cg_daf, use_stock=cg_use_stock,
        ))
        m1, m2 = st.columns(2)
        m1.metric("Total given", money(plan["total_given"]))
        m2.metric("Estimated tax savings", money(plan["total_tax_savings"]))
        st.dataframe(pd.DataFrame([vars(bk) for bk in plan["buckets"]]), use_container_width=True)
        if plan["daf_contribution"] > 0:
            st.caption(f"DAF contribution this year: {money(plan['daf_contribution'])} "
                       f"({plan['years_of_bunching']} years bunched).")
    except Exception as e:
        st.error("Charitable analysis failed. Details below.")
        st.exception(e)

# ===============================
# CONTRIBUTIONS TAB
# ===============================
with tab_contrib:
    st.header("💵 Contribution Order")
    c1, c2, c3 = st.columns(3)
    with c1:
        co_age = st.number_input("Age ", value=35, min_value=18, max_value=80)
        co_income = st.number_input("Salary", value=100_000, step=5_000)
        co_married = st.checkbox("Married", value=False)
    with c2:
        co_pre = st.number_input("Current pre-tax 401(k) / yr", value=6_000, step=500)
        co_roth = st.number_input("Current Roth / yr", value=0, step=500)
        co_taxable = st.number_input("Current taxable / yr", value=0, step=500)
    with c3:
        co_match_pct = st.number_input("Employer match %", value=100.0, step=25.0)
        co_match_lim = st.number_input("Match limit (% of salary)", value=6.0, step=0.5)
        co_hdhp = st.checkbox("Enrolled in HDHP", value=False)
        co_after_tax = st.checkbox("Plan allows after-tax + in-plan conversion", value=False)

    co_inputs = ContributionInputs(
        age=co_age, income=co_income, is_married=co_married, pre_tax_contrib=co_pre,
        roth_contrib=co_roth, taxable_contrib=co_taxable, has_hdhp=co_hdhp,
        has_after_tax_401k=co_after_tax, has_in_plan_conversion=co_after_tax,
        match_percent=co_match_pct, match_limit=co_match_lim,
    )
    co_budget = st.number_input("Monthly budget", value=default_monthly_budget(co_inputs), step=100)

    try:
        res = analyze_contributions(co_inputs, co_budget)
        st.subheader("Priority stack")
        st.dataframe(pd.DataFrame([vars(p) for p in res["stack"]]), use_container_width=True)
        st.subheader("Optimal allocation (annual)")
        st.dataframe(pd.DataFrame([res["allocation"]]), use_container_width=True)
        imp = res["impact"]
        st.metric("Projected improvement by retirement", compact_money(imp["improvement"]),
                  f"{imp['improvement_pct']:.0f}%")
        for ins in res["insights"]:
            (st.warning if ins.kind == "warning" else st.info)(f"**{ins.title}**: {ins.description}")
        for item in res["actions"]:
            st.write(f"- **{item['account']}**: {item['specific']}")
    except Exception as e:
        st.error("Contribution analysis failed. Details below.")
        st.exception(e)

# ===============================
# SOCIAL SECURITY TAB
# ===============================
with tab_ss:
    st.header("🏛️ Social Security Claiming")
    c1, c2, c3 = st.columns(3)
    with c1:
        ss_age = st.number_input("Current age", value=60, min_value=40, max_value=70)
        ss_gender = st.selectbox("Gender", ["male", "female"], index=0)
        ss_health = st.selectbox("Health ", ["excellent", "good", "fair", "poor"], index=1)
    with c2:
        ss_earn = st.number_input("Average career earnings", value=80_000, step=5_000)
        ss_port = st.number_input("Portfolio", value=500_000, step=25_000)
        ss_spend = st.number_input("Annual spending", value=50_000, step=5_000)
    with c3:
        ss_married = st.checkbox("Married ", value=False)
        ss_sp_age = st.number_input("Spouse age", value=58, min_value=40, max_value=70) if ss_married else None
        ss_sp_gender = st.selectbox("Spouse gender", ["female", "male"]) if ss_married else None
        ss_sp_earn = st.number_input("Spouse earnings", value=40_000, step=5_000) if ss_married else None

    try:
        ss = optimize_social_security(SSOptimizerInputs(
            current_age=ss_age, gender=ss_gender, average_career_earnings=ss_earn, health=ss_health,
            is_married=ss_married, spouse_age=ss_sp_age, spouse_gender=ss_sp_gender,
            spouse_average_career_earnings=ss_sp_earn, portfolio_value=ss_port,
            annual_spending=ss_spend, filing_status="married" if ss_married else "single",
        ))
        rec = ss["recommendation"]
        m1, m2, m3 = st.columns(3)
        m1.metric("Recommended claim age", rec["claim_age"])
        m2.metric("Confidence", rec["confidence"].title())
        m3.metric("Break-even (62 vs 70)", rec["break_even_age"])
        for line in rec["reasoning"]:
            st.write(f"- {line}")
        st.dataframe(ss["table"], use_container_width=True)
        if ss["spousal_strategies"]:
            st.subheader("Couple strategies")
            st.dataframe(pd.DataFrame(ss["spousal_strategies"]).drop(columns=["pros", "cons"]),
                         use_container_width=True)
        for line in ss["insights"]:
            st.info(line)
    except Exception as e:
        st.error("Social Security analysis failed. Details below.")
        st.exception(e)

# ===============================
# STATE TAXES TAB
# ===============================
with tab_states:
    st.header("🗺️ State Tax Comparison")
    c1, c2 = st.columns(2)
    with c1:
        st_current = st.selectbox("Current state", STATE_CODES, index=STATE_CODES.index("CA"))
        st_compare = st.multiselect("Compare with (up to 3)", STATE_CODES, default=["FL", "PA"],
                                    max_selections=3)
    with c2:
        st_ret = st.number_input("Retirement account income", value=60_000, step=5_000)
        st_ss = st.number_input("Social Security income", value=30_000, step=1_000)
        st_pension = st.number_input("Pension income", value=0, step=1_000)
        st_inv = st.number_input("Investment income", value=20_000, step=1_000)
        st_home = st.number_input("Home value", value=400_000, step=25_000)
        st_spend = st.number_input("Annual spending ", value=80_000, step=5_000)

    try:
        cmp = compare_states(st_current, st_compare, RetirementIncomeProfile(
            retirement_income=st_ret, ss_income=st_ss, pension_income=st_pension,
            investment_income=st_inv, home_value=st_home, annual_spending=st_spend,
        ))
        st.metric("Lowest total tax", cmp["lowest_tax_state"])
        st.dataframe(cmp["table"], use_container_width=True)
        with st.expander("Retirement-friendly states", expanded=False):
            st.dataframe(pd.DataFrame(retirement_friendly_states())[["code", "name", "notes"]],
                         use_container_width=True)
    except Exception as e:
        st.error("State comparison failed. Details below.")
        st.exception(e)

# ===============================
# INDEX VS ACTIVE TAB
# ===============================
with tab_index:
    st.header("📈 Index vs Active Funds")
    c1, c2, c3 = st.columns(3)
    with c1:
        ia_amount = st.number_input("Investment", value=100_000, step=10_000)
        ia_years = st.number_input("Years", value=30, min_value=1, max_value=60)
    with c2:
        ia_active = st.number_input("Active expense ratio %", value=1.0, step=0.05)
        ia_index = st.number_input("Index expense ratio %", value=0.03, step=0.01)
    with c3:
        ia_ret = st.number_input("Expected return %", value=7.0, step=0.5)

    try:
        gc = growth_comparison(ia_amount, ia_years, ia_active, ia_index, ia_ret)
        m1, m2, m3 = st.columns(3)
        m1.metric("Index fund", money(gc["final_index"]))
        m2.metric("Active fund", money(gc["final_active"]))
        m3.metric("Fee cost", money(gc["difference"]), f"{gc['percent_difference']}%")
        st.line_chart(gc["table"].set_index("year")[["index", "active"]])
        st.subheader(f"Total hidden cost of active management: ~{total_cost_drag():.1f}%/yr")
        st.dataframe(pd.DataFrame(COST_FACTORS), use_container_width=True)
        st.subheader("Active funds trailing their benchmark (%)")
        st.dataframe(spiva_table(), use_container_width=True)
        st.subheader("Three-fund portfolio")
        st.dataframe(pd.DataFrame(THREE_FUND_PORTFOLIO), use_container_width=True)
    except Exception as e:
        st.error("Fee comparison failed. Details below.")
        st.exception(e)

# ===============================
# ESTATE TAB
# ===============================
with tab_estate:
    st.header("📜 Estate Planning Basics")
    if "estate_checklist" not in st.session_state:
        st.session_state.estate_checklist = EstateChecklist()

    c1, c2 = st.columns(2)
    with c1:
        st.subheader("Checklist")
        for name, label in CHECKLIST_ITEMS:
            checked = st.checkbox(label, value=getattr(st.session_state.estate_checklist, name), key=f"est_{name}")
            if checked != getattr(st.session_state.estate_checklist, name):
                st.session_state.estate_checklist = update_checklist(st.session_state.estate_checklist, name, checked)
        st.progress(completion(st.session_state.estate_checklist) / 100.0)
        st.caption(f"{sum(s['done'] for s in checklist_status(st.session_state.estate_checklist))} "
                   f"of {len(CHECKLIST_ITEMS)} complete")
    with c2:
        es_worth = st.number_input("Net worth", value=750_000, step=50_000)
        es_state = st.selectbox("State ", STATE_CODES, index=STATE_CODES.index("MD"))
        es_re = st.checkbox("Own real estate", value=True)
        es_kids = st.checkbox("Minor children", value=False)
        es_blended = st.checkbox("Blended family", value=False)
        prof = estate_profile(es_worth, es_re, es_kids, es_blended, es_state)
        for key, text in (("needs_trust", "A revocable living trust is worth considering."),
                          ("needs_attorney", "Work with an estate attorney."),
                          ("state_estate_tax", "Your state has its own estate tax."),
                          ("state_inheritance_tax", "Your state has an inheritance tax."),
                          ("community_property_state", "You live in a community property state.")):
            if prof[key]:
                st.info(text)

    for doc in ESSENTIAL_DOCUMENTS:
        with st.expander(f"{doc['name']}: {doc['short']}", expanded=False):
            st.write(doc["full"])
            d1, d2 = st.columns(2)
            d1.markdown("**Does**\n" + "\n".join(f"- {x}" for x in doc["does"]))
            d2.markdown("**Does not**\n" + "\n".join(f"- {x}" for x in doc["does_not"]))
    st.dataframe(pd.DataFrame(TRUST_TYPES), use_container_width=True)
    st.dataframe(pd.DataFrame(PROBATE_AVOIDANCE_STRATEGIES), use_container_width=True)

# ===============================
# PROJECTION TAB
# ===============================
with tab_proj:
    st.header("👤 Profile")
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        filing_status = st.selectbox("Filing Status", ["MFJ", "Single"], index=0)
    with c2:
        age = st.number_input("Your age", value=45, min_value=18, max_value=90)
    with c3:
        spouse_age = st.number_input("Spouse age ", value=43, min_value=18, max_value=90) \
            if filing_status == "MFJ" else None
    with c4:
        retirement_age = st.number_input("Retirement age", value=65, min_value=30, max_value=90)
    state = st.selectbox("State  ", STATE_CODES, index=STATE_CODES.index("MD"))

    st.header("🏦 Accounts")
    a1, a2, a3 = st.columns(3)
    with a1:
        bal_t = st.number_input("Taxable", value=100_000, step=10_000)
        c_t = st.number_input("Taxable contribution / yr", value=5_000, step=1_000)
    with a2:
        bal_p = st.number_input("Pre-tax", value=400_000, step=10_000)
        c_p = st.number_input("Pre-tax contribution / yr", value=20_000, step=1_000)
        c_m = st.number_input("Employer match / yr", value=6_000, step=500)
    with a3:
        bal_r = st.number_input("Roth", value=50_000, step=10_000)
        c_r = st.number_input("Roth contribution / yr", value=7_000, step=500)

    st.header("🧾 Assumptions")
    r1, r2, r3, r4 = st.columns(4)
    with r1:
        return_pct = st.number_input("Return %", value=7.0, step=0.25)
        inflation_pct = st.number_input("Inflation %", value=2.6, step=0.1)
    with r2:
        withdrawal_pct = st.number_input("Withdrawal rate %", value=4.0, step=0.25)
        state_rate_pct = st.number_input("State flat rate % (states not in the table)", value=0.0, step=0.25)
    with r3:
        return_mode = st.selectbox("Returns", ["fixed", "historical", "bootstrap"], index=0)
        hist_start = st.number_input("Historical start year", value=1928, min_value=1928, max_value=2024) \
            if return_mode == "historical" else None
    with r4:
        round_whole = st.checkbox("Round to whole dollars", value=True)
        mc_runs = st.number_input("Monte Carlo runs", value=200, min_value=10, max_value=2000, step=50)

    st.subheader("Social Security / Healthcare / Conversions")
    s1, s2, s3 = st.columns(3)
    with s1:
        ss_on = st.checkbox("Include Social Security", value=True)
        you_claim = st.number_input("Your claim age", value=67, min_value=62, max_value=70)
        sp_claim = st.number_input("Spouse claim age", value=67, min_value=62, max_value=70)
        cola = st.number_input("SS COLA %", value=2.0, step=0.25)
    with s2:
        medicare_on = st.checkbox("Include Medicare + IRMAA", value=True)
        ltc_on = st.checkbox("Include long-term care (expected cost)", value=False)
    with s3:
        conv_on = st.checkbox("Roth conversions before RMD age", value=False)
        conv_bracket = st.selectbox("Fill up to bracket", [0.12, 0.22, 0.24, 0.32], index=2)

    profile = Profile(
        filing_status=filing_status,
        age=int(age),
        spouse_age=int(spouse_age) if spouse_age else None,
        retirement_age=int(retirement_age),
        state=state,
    )
    inputs = Inputs(
        balances={"taxable": float(bal_t), "pre_tax": float(bal_p), "roth": float(bal_r)},
        contributions={
            "primary": {"taxable": float(c_t), "pre_tax": float(c_p), "roth": float(c_r), "match": float(c_m)},
            "spouse": {},
        },
        withdrawal_rate_pct=float(withdrawal_pct),
        social_security={
            "include": ss_on,
            "primary_income": 90_000.0,
            "primary_age": int(you_claim),
            "spouse_income": 50_000.0,
            "spouse_age": int(sp_claim),
            "cola": float(cola) / 100.0 if cola > 1 else float(cola),  # accept 2 or 0.02
        },
        healthcare={"include_medicare": medicare_on, "include_ltc": ltc_on},
        conversions={"enabled": conv_on, "target_bracket": conv_bracket},
    )
    assumptions = Assumptions(
        return_pct=float(return_pct), inflation_pct=float(inflation_pct), state_rate_pct=float(state_rate_pct),
        return_mode=return_mode, historical_start_year=int(hist_start) if hist_start else None,
    )

    with st.expander("Generational legacy inputs", expanded=False):
        g1, g2, g3 = st.columns(3)
        with g1:
            per_ben = st.number_input("Annual payout per heir (today's $)", value=10_000, step=1_000)
        with g2:
            heirs = st.number_input("Starting heirs", value=2, min_value=1, max_value=20)
        with g3:
            tfr = st.number_input("Children per heir", value=2.0, step=0.1)

    st.divider()
    b1, b2 = st.columns(2)
    with b1:
        run_now = st.button("Run Projection", type="primary")
    with b2:
        run_mc = st.button("Run Monte Carlo")

    if run_now:
        with st.spinner("Running projection..."):
            try:
                result = run(profile, inputs, assumptions, round_whole=round_whole)
                s = result["summary"]
                m1, m2, m3, m4 = st.columns(4)
                m1.metric("End of plan (today's $)", compact_money(s["eol_real"]))
                m2.metric("Year-1 after-tax income (today's $)", money(s["y1_after_tax_real"]))
                m3.metric("Years funded", s["survival_years"], "depleted" if s["ruined"] else None)
                m4.metric("Estate tax", money(s["estate_tax"]))
                st.subheader("📊 Projection Results")
                st.dataframe(result["table"], use_container_width=True)
                st.line_chart(result["table"].set_index("Year")[["Total", "Total (Real)"]])

                with st.expander("Generational legacy", expanded=True):
                    legacy = simulate_per_beneficiary_payout(
                        s["eol_nominal"], s["years_to_retirement"] + s["years_in_retirement"],
                        assumptions.return_pct, assumptions.inflation_pct, per_ben, heirs, tfr,
                        initial_ages=[0] * int(heirs),
                    )
                    years = legacy["years"]
                    st.metric("Legacy lasts", "forever" if years == float("inf") else f"{years} years")
            except Exception as e:
                st.error("Projection failed. Details below.")
                st.exception(e)
    elif run_mc:
        with st.spinner("Running Monte Carlo..."):
            try:
                mc = monte_carlo(profile, inputs, assumptions, runs=int(mc_runs))
                m1, m2, m3, m4 = st.columns(4)
                m1.metric("Success rate", pct(mc["success_rate"] / 100.0, 0))
                m2.metric("P10 end of plan", compact_money(mc["eol_p10"]))
                m3.metric("Median end of plan", compact_money(mc["eol_p50"]))
                m4.metric("P90 end of plan", compact_money(mc["eol_p90"]))
                st.line_chart(mc["bands"].set_index("Year")[["P10", "P50", "P90"]])
            except Exception as e:
                st.error("Monte Carlo failed. Details below.")
                st.exception(e)
    else:
        st.caption("Set your inputs, then click **Run Projection**.")
