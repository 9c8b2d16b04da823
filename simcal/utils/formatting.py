import re

_NON_DIGIT = re.compile(r"\D")


def format_phone_number(value: str) -> str:
    """
    Group the digits of a phone number as typed: "555", "555 123",
    "555 123 4567". Anything after the 11th digit is dropped.
    """
    if not value:
        return value
    digits = _NON_DIGIT.sub("", value)
    if len(digits) < 4:
        return digits
    if len(digits) < 7:
        return f"{digits[:3]} {digits[3:]}"
    return f"{digits[:3]} {digits[3:6]} {digits[6:11]}"
