# ui_panel/schema/columns.py
"""
Centralized column names for the person-year panel.

Monthly employment and UI columns are not listed here; they are generated by
``ui_panel.months.month_index.monthly_columns`` so the month calendar stays
the single source of truth for block/month naming.
"""

# Identity
PERSON_ID = "person_id"
YEAR = "year"
INTERVIEW_MONTH = "interview_month"
STATE = "state"

# Raw monthly prefixes (see month_index.monthly_columns)
EMP_PREFIX = "emp"
UI_PREFIX = "ui"
UI_AMOUNT = "ui_amount"

# Demographics used by the rules and the analysis preparation
AGE = "age"
GENDER = "gender"
RACE = "race"
ETHNICITY = "ethnicity"
NATIVITY = "nativity"
MARITAL_STATUS = "marital_status"
EDUCATION = "education"
EMPLOYMENT_STATUS = "employment_status"
OCCUPATION = "occupation"
LABOR_INCOME = "labor_income"
ANNUAL_HOURS = "annual_hours"
WEEKS_UNEMPLOYED = "weeks_unemployed"
WEEKS_OUT_OF_LABOR_FORCE = "weeks_out_of_labor_force"
FAMILY_INCOME = "family_income"
FAMILY_WEALTH = "family_wealth"
FAMILY_WEALTH_LAG = "family_wealth_lag"
OUTCOME = "outcome"

# Spell reconstruction (Step B-G)
UNEMP_PERIOD_NA = "unemp_status_period_na"
UNEMPLOYED_12MO_LEAD = "unemployed_in_12mo_lead"
FIRST_UNEMPLOYED_OFFSET = "first_unemployed_month_offset"
ALREADY_UNEMPLOYED = "already_unemployed_at_interview"
PRE_EXACT = "months_unemployed_pre_interview_exact"
PRE_MIN = "months_unemployed_pre_interview_min"
PRE_CENSORED = "pre_interview_censored"
POST_EXACT = "months_unemployed_post_interview_exact"
POST_MIN = "months_unemployed_post_interview_min"
POST_CENSORED = "post_interview_censored"
SPELL_DURATION = "total_spell_duration_value"
SPELL_CENSORING = "total_spell_duration_censoring_kind"

SPELL_COLS = [
    UNEMP_PERIOD_NA,
    UNEMPLOYED_12MO_LEAD,
    FIRST_UNEMPLOYED_OFFSET,
    ALREADY_UNEMPLOYED,
    PRE_EXACT,
    PRE_MIN,
    PRE_CENSORED,
    POST_EXACT,
    POST_MIN,
    POST_CENSORED,
    SPELL_DURATION,
    SPELL_CENSORING,
]

# UI receipt window
UI_WINDOW_OBSERVED = "ui_window_fully_observed"
UI_RECEIVED = "ui_received_in_window"
UI_RECEIPT_IMPUTED = "ui_receipt_imputed"
UI_MONTHS_RECEIVED = "ui_months_received"
UI_MONTHLY_AMOUNT = "ui_monthly_amount"

UI_COLS = [
    UI_WINDOW_OBSERVED,
    UI_RECEIVED,
    UI_RECEIPT_IMPUTED,
    UI_MONTHS_RECEIVED,
    UI_MONTHLY_AMOUNT,
]

# External context
REFERENCE_BASIS = "reference_basis"
UI_REF_YEAR = "ui_reference_year"
UI_REF_HALF = "ui_reference_half"
MACRO_REF_YEAR = "macro_reference_year"
MACRO_REF_QUARTER = "macro_reference_quarter"
STATE_MAX_DURATION = "state_max_duration"
STATE_MAX_BENEFIT = "state_max_benefit"
STATE_MIN_BASE_WAGE = "state_min_base_wage"
STATE_MIN_BASE_HOURS = "state_min_base_hours"
STATE_MIN_BASE_WEEKS = "state_min_base_weeks"
UNEMPLOYMENT_RATE = "unemployment_rate"
GSP_PER_CAPITA = "gsp_per_capita"

# Wave tracking
ELIGIBLE = "eligible"
INCLUDED = "included"
LONGEST_RUN_LENGTH = "longest_run_length"

# Outcome alignment
OUTCOME_NOW = "outcome_now"
OUTCOME_NOW_OFFSET = "outcome_now_offset"
OUTCOME_NEXT = "outcome_next"
OUTCOME_NEXT_OFFSET = "outcome_next_offset"
OUTCOME_BASE_FAR = "outcome_base_far"
OUTCOME_BASE_FAR_OFFSET = "outcome_base_far_offset"
OUTCOME_LEAD = "outcome_lead"
OUTCOME_LEAD_OFFSET = "outcome_lead_offset"
OUTCOME_LEAD_YEAR = "outcome_lead_year"
OUTCOME_BASE = "outcome_base"
OUTCOME_BASE_OFFSET = "outcome_base_offset"
OUTCOME_BASE_YEAR = "outcome_base_year"
OUTCOME_LAG1 = "outcome_lag1"
OUTCOME_CHANGE = "outcome_change"
TRANSITION_PATTERN = "employment_transition_pattern"

# Analysis preparation
PREPOST = "prepost"
IMPUTATION_INDEX = "imputation_index"
BASE_OCCUPATION = "base_occupation"
SAME_STATE = "same_state"
SAME_OCCUPATION = "same_occupation"
OUTCOME_STANDARDIZED = "outcome_standardized"

# Moderators
BASELINE_QUARTILE = "baseline_outcome_quartile"
RACE_ETH = "race_eth"
BELOW_MEDIAN_LENGTH = "lessmed_length_unemp"
UI_DUR_BELOW_MEDIAN = "ui_max_dur_less_med"
UI_GEN_BELOW_MEDIAN = "ui_max_gen_less_med"
UI_CAT_DUR = "ui_cat_dur"
UI_CAT_GEN = "ui_cat_gen"

REQUIRED_INPUT_COLS = [PERSON_ID, YEAR, INTERVIEW_MONTH, STATE]
