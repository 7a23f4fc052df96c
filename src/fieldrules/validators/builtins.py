"""Built-in zero-parameter rules.

Each rule is a predicate over the rendered string value. Rules documented
as "empty string is valid" accept "" so they compose with presence rules;
in practice empty values never reach content rules.
"""

import base64
import binascii
import ipaddress
import json
import re
import unicodedata
from datetime import datetime
from urllib.parse import urlsplit

from fieldrules.registry import RuleRegistry, StringPredicate

# =============================================================================
# Patterns
# =============================================================================

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*\.[a-zA-Z]{2,}$"
)

URL_HOST_PATTERN = re.compile(
    r"^(?:localhost|(?:[a-zA-Z0-9\u00a1-\uffff](?:[a-zA-Z0-9\u00a1-\uffff_-]{0,62})?\.)+"
    r"[a-zA-Z\u00a1-\uffff]{2,}|\[[0-9a-fA-F:.]+\]|(?:\d{1,3}\.){3}\d{1,3})$"
)

ALPHA_PATTERN = re.compile(r"^[a-zA-Z]+$")
ALPHANUMERIC_PATTERN = re.compile(r"^[a-zA-Z0-9]+$")
NUMERIC_PATTERN = re.compile(r"^[0-9]+$")
INT_PATTERN = re.compile(r"^(?:[-+]?(?:0|[1-9][0-9]*))$")
FLOAT_PATTERN = re.compile(r"^(?:[-+]?(?:[0-9]+))?(?:\.[0-9]*)?(?:[eE][+-]?(?:[0-9]+))?$")
HEXADECIMAL_PATTERN = re.compile(r"^[0-9a-fA-F]+$")
HEXCOLOR_PATTERN = re.compile(r"^#?(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
RGBCOLOR_PATTERN = re.compile(
    r"^rgb\(\s*(?:0|[1-9]\d?|1\d\d?|2[0-4]\d|25[0-5])\s*,"
    r"\s*(?:0|[1-9]\d?|1\d\d?|2[0-4]\d|25[0-5])\s*,"
    r"\s*(?:0|[1-9]\d?|1\d\d?|2[0-4]\d|25[0-5])\s*\)$"
)
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)
UUID3_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-3[0-9a-f]{3}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)
UUID4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE
)
UUID5_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-5[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE
)
CREDIT_CARD_PATTERN = re.compile(
    r"^(?:4[0-9]{12}(?:[0-9]{3})?|5[1-5][0-9]{14}|(222[1-9]|22[3-9][0-9]|2[3-6][0-9]{2}"
    r"|27[01][0-9]|2720)[0-9]{12}|6(?:011|5[0-9][0-9])[0-9]{12}|3[47][0-9]{13}"
    r"|3(?:0[0-5]|[68][0-9])[0-9]{11}|(?:2131|1800|35\d{3})\d{11}|6[27][0-9]{14})$"
)
ISBN10_PATTERN = re.compile(r"^(?:[0-9]{9}X|[0-9]{10})$")
ISBN13_PATTERN = re.compile(r"^(?:[0-9]{13})$")
BASE64_PATTERN = re.compile(
    r"^(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=|[A-Za-z0-9+/]{4})$"
)
DATA_URI_PATTERN = re.compile(r"^data:.+/(.+);base64$")
DNS_NAME_PATTERN = re.compile(
    r"^([a-zA-Z0-9_]{1}[a-zA-Z0-9_-]{0,62}){1}(\.[a-zA-Z0-9_]{1}[a-zA-Z0-9_-]{0,62})*[._]?$"
)
LATITUDE_PATTERN = re.compile(r"^[-+]?([1-8]?\d(\.\d+)?|90(\.0+)?)$")
LONGITUDE_PATTERN = re.compile(r"^[-+]?(180(\.0+)?|((1[0-7]\d)|([1-9]?\d))(\.\d+)?)$")
MAC_PATTERN = re.compile(
    r"^(?:[0-9a-fA-F]{2}([:-]))(?:[0-9a-fA-F]{2}\1){4}[0-9a-fA-F]{2}"
    r"(?:\1[0-9a-fA-F]{2}\1[0-9a-fA-F]{2})?$"
    r"|^(?:[0-9a-fA-F]{4}\.){2}[0-9a-fA-F]{4}(?:\.[0-9a-fA-F]{4})?$"
)
SSN_PATTERN = re.compile(r"^\d{3}[- ]?\d{2}[- ]?\d{4}$")
SEMVER_PATTERN = re.compile(
    r"^v?(?:0|[1-9]\d*)\.(?:0|[1-9]\d*)\.(?:0|[1-9]\d*)"
    r"(-(0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)(\.(0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*)?"
    r"(\+[0-9a-zA-Z-]+(\.[0-9a-zA-Z-]+)*)?$"
)
RFC3339_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:\d{2})$"
)
RFC3339_NO_ZONE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?$")

_NOT_DIGITS = re.compile(r"[^0-9]+")
_SPACES_AND_MINUS = re.compile(r"[\s-]+")
_FRACTION = re.compile(r"\.\d+")

MAX_URL_LENGTH = 2083
MIN_URL_LENGTH = 3


# =============================================================================
# Predicates
# =============================================================================


def is_email(text: str) -> bool:
    return bool(EMAIL_PATTERN.match(text))


def is_url(text: str) -> bool:
    """Check for an absolute or scheme-less URL with a plausible host."""
    if not text or len(text) >= MAX_URL_LENGTH or len(text) <= MIN_URL_LENGTH:
        return False
    if text.startswith(".") or any(c.isspace() for c in text):
        return False
    candidate = text if "://" in text else f"http://{text}"
    try:
        parts = urlsplit(candidate)
        port = parts.port
    except ValueError:
        return False
    if parts.scheme.lower() not in {"http", "https", "ftp", "ftps", "ws", "wss", "irc", "rtmp"}:
        return False
    host = parts.hostname or ""
    if not host or host.startswith("."):
        return False
    if port is not None and not 0 < port < 65536:
        return False
    if ":" in host:
        return is_ipv6(host)
    return bool(URL_HOST_PATTERN.match(host))


def is_request_url(text: str) -> bool:
    """Absolute URL with a scheme, as received in an HTTP request."""
    try:
        parts = urlsplit(text)
    except ValueError:
        return False
    return bool(parts.scheme) and (bool(parts.netloc) or parts.path.startswith("/"))


def is_request_uri(text: str) -> bool:
    """Absolute URI or absolute path."""
    try:
        parts = urlsplit(text)
    except ValueError:
        return False
    return bool(parts.scheme) or text.startswith("/")


def is_alpha(text: str) -> bool:
    return text == "" or bool(ALPHA_PATTERN.match(text))


def is_utf_letter(text: str) -> bool:
    return all(c.isalpha() for c in text)


def is_alphanumeric(text: str) -> bool:
    return text == "" or bool(ALPHANUMERIC_PATTERN.match(text))


def is_utf_letter_numeric(text: str) -> bool:
    return all(c.isalpha() or unicodedata.category(c).startswith("N") for c in text)


def is_numeric(text: str) -> bool:
    return text == "" or bool(NUMERIC_PATTERN.match(text))


def _strip_sign(text: str) -> str | None:
    if any(c in "+-" for c in text[1:]):
        return None
    if len(text) > 1 and text[0] in "+-":
        return text[1:]
    return text


def is_utf_numeric(text: str) -> bool:
    """Unicode numbers of any kind (digits, fractions, roman numerals)."""
    body = _strip_sign(text)
    return body is not None and all(unicodedata.category(c).startswith("N") for c in body)


def is_utf_digit(text: str) -> bool:
    """Unicode radix-10 decimal digits."""
    body = _strip_sign(text)
    return body is not None and all(unicodedata.category(c) == "Nd" for c in body)


def is_hexadecimal(text: str) -> bool:
    return bool(HEXADECIMAL_PATTERN.match(text))


def is_hexcolor(text: str) -> bool:
    return bool(HEXCOLOR_PATTERN.match(text))


def is_rgbcolor(text: str) -> bool:
    return bool(RGBCOLOR_PATTERN.match(text))


def is_lowercase(text: str) -> bool:
    return text == text.lower()


def is_uppercase(text: str) -> bool:
    return text == text.upper()


def is_int(text: str) -> bool:
    return text == "" or bool(INT_PATTERN.match(text))


def is_float(text: str) -> bool:
    return text not in ("", ".", "+", "-") and bool(FLOAT_PATTERN.match(text))


def is_null(text: str) -> bool:
    return len(text) == 0


def is_uuid(text: str) -> bool:
    return bool(UUID_PATTERN.match(text))


def is_uuid_v3(text: str) -> bool:
    return bool(UUID3_PATTERN.match(text))


def is_uuid_v4(text: str) -> bool:
    return bool(UUID4_PATTERN.match(text))


def is_uuid_v5(text: str) -> bool:
    return bool(UUID5_PATTERN.match(text))


def is_credit_card(text: str) -> bool:
    """Known card number layout plus a valid Luhn checksum."""
    digits = _NOT_DIGITS.sub("", text)
    if not CREDIT_CARD_PATTERN.match(digits):
        return False
    total = 0
    double = False
    for char in reversed(digits):
        number = int(char)
        if double:
            number *= 2
            if number >= 10:
                number = number % 10 + 1
        total += number
        double = not double
    return total % 10 == 0


def is_isbn(text: str, version: int = 0) -> bool:
    """ISBN-10 or ISBN-13; version 0 accepts either."""
    digits = _SPACES_AND_MINUS.sub("", text)
    if version == 10:
        if not ISBN10_PATTERN.match(digits):
            return False
        checksum = sum((i + 1) * int(digits[i]) for i in range(9))
        checksum += 10 * (10 if digits[9] == "X" else int(digits[9]))
        return checksum % 11 == 0
    if version == 13:
        if not ISBN13_PATTERN.match(digits):
            return False
        checksum = sum((1, 3)[i % 2] * int(digits[i]) for i in range(12))
        return int(digits[12]) == (10 - checksum % 10) % 10
    return is_isbn(text, 10) or is_isbn(text, 13)


def is_isbn10(text: str) -> bool:
    return is_isbn(text, 10)


def is_isbn13(text: str) -> bool:
    return is_isbn(text, 13)


def is_json(text: str) -> bool:
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def is_multibyte(text: str) -> bool:
    return text == "" or any(ord(c) > 0x7F for c in text)


def is_ascii(text: str) -> bool:
    return all(ord(c) <= 0x7F for c in text)


def is_printable_ascii(text: str) -> bool:
    return all(0x20 <= ord(c) <= 0x7E for c in text)


def _is_full_width_char(char: str) -> bool:
    return unicodedata.east_asian_width(char) in ("F", "W")


def is_full_width(text: str) -> bool:
    return text == "" or any(_is_full_width_char(c) for c in text)


def is_half_width(text: str) -> bool:
    return text == "" or any(not _is_full_width_char(c) for c in text)


def is_variable_width(text: str) -> bool:
    return text == "" or (is_full_width(text) and is_half_width(text))


def is_base64(text: str) -> bool:
    if not BASE64_PATTERN.match(text):
        return False
    try:
        base64.b64decode(text, validate=True)
    except binascii.Error:
        return False
    return True


def is_data_uri(text: str) -> bool:
    header, sep, payload = text.partition(",")
    return bool(sep) and bool(DATA_URI_PATTERN.match(header)) and is_base64(payload)


def is_ip(text: str) -> bool:
    try:
        ipaddress.ip_address(text)
    except ValueError:
        return False
    return True


def is_ipv4(text: str) -> bool:
    try:
        ipaddress.IPv4Address(text)
    except ValueError:
        return False
    return True


def is_ipv6(text: str) -> bool:
    try:
        ipaddress.IPv6Address(text)
    except ValueError:
        return False
    return True


def is_port(text: str) -> bool:
    return text.isascii() and text.isdigit() and 0 < int(text) < 65536


def is_dns_name(text: str) -> bool:
    if not text or len(text.replace(".", "")) > 255:
        return False
    return not is_ip(text) and bool(DNS_NAME_PATTERN.match(text))


def is_host(text: str) -> bool:
    return is_ip(text) or is_dns_name(text)


def is_dial_string(text: str) -> bool:
    """host:port suitable for opening a network connection."""
    if text.startswith("["):
        host, sep, port = text[1:].partition("]:")
    else:
        host, sep, port = text.rpartition(":")
    if not sep or not host or not port:
        return False
    return (is_dns_name(host) or is_ip(host)) and is_port(port)


def is_mac(text: str) -> bool:
    return bool(MAC_PATTERN.match(text))


def is_latitude(text: str) -> bool:
    return bool(LATITUDE_PATTERN.match(text))


def is_longitude(text: str) -> bool:
    return bool(LONGITUDE_PATTERN.match(text))


def is_mongo_id(text: str) -> bool:
    return len(text) == 24 and is_hexadecimal(text)


def is_ssn(text: str) -> bool:
    return len(text) == 11 and bool(SSN_PATTERN.match(text))


def is_semver(text: str) -> bool:
    return bool(SEMVER_PATTERN.match(text))


def _parses_as_datetime(text: str) -> bool:
    # fromisoformat() only accepts 3 or 6 fractional digits before 3.11.
    text = _FRACTION.sub("", text, count=1).replace("Z", "+00:00")
    try:
        datetime.fromisoformat(text)
    except ValueError:
        return False
    return True


def is_rfc3339(text: str) -> bool:
    return bool(RFC3339_PATTERN.match(text)) and _parses_as_datetime(text)


def is_rfc3339_without_zone(text: str) -> bool:
    return bool(RFC3339_NO_ZONE_PATTERN.match(text)) and _parses_as_datetime(text)


# =============================================================================
# Registration
# =============================================================================

BUILTIN_RULES: dict[str, StringPredicate] = {
    "email": is_email,
    "url": is_url,
    "requrl": is_request_url,
    "requri": is_request_uri,
    "alpha": is_alpha,
    "utfletter": is_utf_letter,
    "alphanum": is_alphanumeric,
    "utfletternum": is_utf_letter_numeric,
    "numeric": is_numeric,
    "utfnumeric": is_utf_numeric,
    "utfdigit": is_utf_digit,
    "hexadecimal": is_hexadecimal,
    "hexcolor": is_hexcolor,
    "rgbcolor": is_rgbcolor,
    "lowercase": is_lowercase,
    "uppercase": is_uppercase,
    "int": is_int,
    "float": is_float,
    "null": is_null,
    "uuid": is_uuid,
    "uuidv3": is_uuid_v3,
    "uuidv4": is_uuid_v4,
    "uuidv5": is_uuid_v5,
    "creditcard": is_credit_card,
    "isbn10": is_isbn10,
    "isbn13": is_isbn13,
    "json": is_json,
    "multibyte": is_multibyte,
    "ascii": is_ascii,
    "printableascii": is_printable_ascii,
    "fullwidth": is_full_width,
    "halfwidth": is_half_width,
    "variablewidth": is_variable_width,
    "base64": is_base64,
    "datauri": is_data_uri,
    "ip": is_ip,
    "port": is_port,
    "ipv4": is_ipv4,
    "ipv6": is_ipv6,
    "dns": is_dns_name,
    "host": is_host,
    "mac": is_mac,
    "latitude": is_latitude,
    "longitude": is_longitude,
    "ssn": is_ssn,
    "semver": is_semver,
    "rfc3339": is_rfc3339,
    "rfc3339WithoutZone": is_rfc3339_without_zone,
    "mongoid": is_mongo_id,
    "dialstring": is_dial_string,
}


def register_builtin_rules() -> None:
    """Register every built-in zero-parameter rule."""
    for name, predicate in BUILTIN_RULES.items():
        RuleRegistry.register(name, predicate)
