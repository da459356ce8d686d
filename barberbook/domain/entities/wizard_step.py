from enum import Enum


class WizardStep(str, Enum):
    select_service = "select_service"
    select_date = "select_date"
    select_time = "select_time"
    collect_details = "collect_details"
    confirmed = "confirmed"
