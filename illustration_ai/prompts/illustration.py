# Stage instructions for life-insurance illustration extraction.
# Each prompt names the exact JSON shape it expects back; replies are parsed
# leniently, so prose around the object is tolerated.

# =============================================================================
# STAGE 1: CARRIER / PRODUCT IDENTIFICATION
# =============================================================================
IDENTIFY_PROMPT = """
Analyze this life insurance illustration PDF to identify:
1. Insurance carrier name (e.g., Prudential, Symetra, Lincoln, Nationwide)
2. Product name (e.g., SVUL Protector, Accumulator VUL)

Return JSON only:
{
    "carrier": "carrier name",
    "product": "product name"
}
"""

# =============================================================================
# STAGE 3: POLICY INFORMATION
# =============================================================================
POLICY_INFO_PROMPT = """
Extract policy information from this life insurance illustration.

Find and extract:
- Insured name (the person being insured, NOT the agent)
- Insured age at issue
- Second insured age (for survivorship policies only)
- Gender
- Risk/underwriting class
- Face amount / Death benefit amount
- Annual premium (ongoing annual premium)
- Year 1 premium (if different due to 1035 exchange)
- 1035 Exchange amount (if any)
- State

Return JSON only:
{
    "insuredName": "name",
    "insuredAge": number,
    "insuredAge2": number or null,
    "insuredGender": "Male" or "Female",
    "riskClass": "class",
    "faceAmount": number,
    "premium": number,
    "premiumYear1": number or null,
    "premiumYear2Plus": number or null,
    "exchange1035": number or null,
    "state": "XX"
}
"""

# =============================================================================
# STAGE 4: YEAR-BY-YEAR PROJECTIONS
# =============================================================================
PROJECTIONS_PROMPT = """
Extract year-by-year projection data from this life insurance illustration.

IMPORTANT:
- For documents showing multiple rate scenarios (0% and 6%), use the NON-ZERO illustrated rate
- Policy Value should be GREATER than Surrender Value
- Extract data for all years shown (typically years 1-30 or more)

For each year extract:
- year: policy year (1, 2, 3...)
- age: insured's age
- premium: annual premium paid
- policyValue: policy/cash/contract value (NOT surrender value)
- surrenderValue: net surrender value
- deathBenefit: death benefit amount

Return JSON only:
{
    "projections": [
        {"year": 1, "age": 45, "premium": 50000, "policyValue": 48000, "surrenderValue": 45000, "deathBenefit": 1000000},
        ...
    ]
}
"""

# =============================================================================
# STAGE 5: ANNUAL EXPENSES / CHARGES
# =============================================================================
EXPENSES_PROMPT = """
Extract annual expense/charges data from this life insurance illustration.

Look for pages showing:
- Premium charges/loads
- Cost of Insurance (COI)
- Administrative fees
- Total policy charges

For each year extract:
- year: policy year
- premiumCharge: premium load/charge
- coi: cost of insurance
- adminCharge: administrative fees
- totalCharges: total charges

Return JSON only:
{
    "expenses": [
        {"year": 1, "premiumCharge": 5000, "coi": 2000, "adminCharge": 500, "totalCharges": 7500},
        ...
    ]
}
"""
