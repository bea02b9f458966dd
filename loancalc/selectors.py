"""
DOM contract of the external calculator page.

The element identifiers below belong to the remote site. When the site
changes its markup, update them here and nowhere else.
"""

from .models import DiscountOption, HouseholdType, InputField

CALCULATOR_FORM = "div[class='content_hitelmaximum']"
CALCULATE_BUTTON = "input.btn.btn-orange.mennyit_kaphatok"
RESULTS_SECTION = "#max_eredmeny"
CANNOT_CALCULATE_SECTION = "#nem_tudunk_kalkulalni"
TRY_AGAIN_BUTTON = ".ujrakalkulal"

FIRST_OFFER = "#box_1"
SECOND_OFFER = "#box_2"
OFFER_BOXES = (FIRST_OFFER, SECOND_OFFER)
FIRST_OFFER_LOAN_AMOUNT = "#box_1_max_desktop"
FIRST_OFFER_MONTHLY_REPAYMENT = "#box_1_torleszto"
FIRST_OFFER_APR = "#box_1_thm"
INTERESTED_BUTTON = "#box_1 .js-erdekel"

INPUTS = {
    InputField.AGE: "input#meletkor",
    InputField.PROPERTY_VALUE: "input#ingatlan_erteke",
    InputField.MONTHLY_INCOME: "input#mjovedelem",
    InputField.EXISTING_REPAYMENT: "input#meglevo_torleszto",
}

ERRORS = {
    InputField.AGE: "#eletkor_error",
    InputField.PROPERTY_VALUE: "#ingatlan_erteke_error",
    InputField.MONTHLY_INCOME: "#mjovedelem_error",
    InputField.EXISTING_REPAYMENT: "#meglevo_torleszto_error",
}

HOUSEHOLD_RADIOS = {
    HouseholdType.ALONE: "#egyedul",
    HouseholdType.MULTIPLE: "#tobben",
}

DISCOUNT_CHECKBOXES = {
    DiscountOption.BANK_ACCOUNT_CREDIT: "input#kedvezmeny_jovairasm",
    DiscountOption.BABY_LOAN: "input#kedvezmeny_babavarom",
    DiscountOption.INSURANCE: "input#kedvezmeny_biztositasm",
}
