"""
Monthly payment math for finance and lease scenarios.
Pure functions; amounts are in dollars, rates as fractions (0.049 = 4.9%).
"""


def loan_payment(principal: float, annual_rate: float, term_months: int) -> float:
    """Amortizing loan payment (standard annuity formula)."""
    if principal <= 0:
        return 0.0
    if term_months <= 0:
        return float(principal)

    monthly_rate = annual_rate / 12
    if monthly_rate == 0:
        return principal / term_months

    growth = (1 + monthly_rate) ** term_months
    return principal * monthly_rate * growth / (growth - 1)


def lease_payment(msrp: float, residual_fraction: float, term_months: int, money_factor: float) -> float:
    """
    Simplified lease payment before taxes: straight-line depreciation from
    MSRP to residual plus a constant rent charge on (MSRP + residual).
    """
    if term_months <= 0:
        return 0.0

    residual_value = msrp * residual_fraction
    monthly_depreciation = (msrp - residual_value) / term_months
    rent_charge = (msrp + residual_value) * money_factor
    return monthly_depreciation + rent_charge
