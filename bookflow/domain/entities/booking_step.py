from enum import Enum


class BookingStep(str, Enum):
    branch = "branch"
    service = "service"
    staff = "staff"
    datetime = "datetime"
    info = "info"
    confirmation = "confirmation"
