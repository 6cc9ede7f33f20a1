import phonenumbers

from hackorsnooze.core.errors import InvalidPhoneFormat

DEFAULT_REGION = "US"


def format_phone_number(raw: str, region: str = DEFAULT_REGION) -> str:
    """
    Normalize a phone number into E.164 format, e.g. "+14151231234".

    The number must carry the region's country calling code (written or
    implied) and have a possible length for it. Exchange-level validity is
    not checked, so placeholder numbers such as 415-123-1234 are accepted.

    Raises:
        InvalidPhoneFormat: if the number cannot be parsed or does not fit
            the region
    """
    try:
        parsed = phonenumbers.parse(raw, region)
    except phonenumbers.NumberParseException:
        raise InvalidPhoneFormat()

    if parsed.country_code != phonenumbers.country_code_for_region(region):
        raise InvalidPhoneFormat()
    if not phonenumbers.is_possible_number(parsed):
        raise InvalidPhoneFormat()

    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)
