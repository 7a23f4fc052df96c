"""Parser for the field annotation mini-language.

Grammar (one annotation per field):

    rule1,rule2(param1|param2)~custom message,!rule3

- "," separates rules (commas inside a "(...)" parameter list do not)
- "~" separates a rule token from its custom failure message
- a leading "!" negates a rule
- "(" ... ")" holds "|"-separated parameters
- "-" alone disables validation of the field entirely

Tokens containing characters outside the allowed set are dropped silently,
so unrelated decorations in an annotation never break parsing.
"""

import re
import unicodedata

from fieldrules.types import ParsedTag, RuleInvocation

SKIP_TAG = "-"

# Backslash and quote characters are reserved; any other punctuation listed
# here may appear in a rule token.
_ALLOWED_PUNCTUATION = frozenset("\\'\"!#$%&()*+-./:<=>?@[]^_{|}~ ")

_PARAMS_PATTERN = re.compile(r"^(?P<name>[^(]*)\((?P<params>.*)\)$", re.DOTALL)
_TRAILING_PARAMS = re.compile(r"\(.*\)$", re.DOTALL)


def parse_tag(tag: str | None) -> ParsedTag:
    """Parse one field annotation into an ordered rule list.

    Args:
        tag: The raw annotation; None is treated as absent ("")

    Returns:
        ParsedTag with the rules in declared order. A rule that occurs
        twice is listed twice; its custom message is the last one given.
    """
    raw = tag or ""
    if raw == SKIP_TAG:
        return ParsedTag(raw=raw, skip=True)

    parsed = ParsedTag(raw=raw)
    if not raw:
        return parsed

    tokens: list[str] = []
    for option in split_options(raw):
        token, _, message = option.strip().partition("~")
        if not is_valid_rule_token(token):
            continue
        tokens.append(token)
        parsed.messages[token] = message

    # Every occurrence carries the last message given for its token.
    parsed.rules = [parse_rule(token, parsed.messages[token]) for token in tokens]
    return parsed


def split_options(tag: str) -> list[str]:
    """Split an annotation on its top-level commas.

    Commas inside a parameter group are kept, as is everything after a
    "~" up to the next comma, so messages may contain parentheses.
    """
    options: list[str] = []
    current: list[str] = []
    depth = 0
    in_message = False

    for char in tag:
        if char == "," and (depth == 0 or in_message):
            options.append("".join(current))
            current = []
            depth = 0
            in_message = False
            continue
        if not in_message:
            if char == "~":
                in_message = True
            elif char == "(":
                depth += 1
            elif char == ")" and depth > 0:
                depth -= 1
        current.append(char)

    options.append("".join(current))
    return options


def is_valid_rule_token(token: str) -> bool:
    """Check that a rule token only uses letters, digits and allowed punctuation.

    Commas are allowed inside a parameter group only.
    """
    if not token:
        return False
    depth = 0
    for char in token:
        if char == "(":
            depth += 1
        elif char == ")" and depth > 0:
            depth -= 1
        if char in _ALLOWED_PUNCTUATION or (char == "," and depth > 0):
            continue
        if char.isalpha() or unicodedata.category(char) == "Nd":
            continue
        return False
    return True


def parse_rule(token: str, message: str = "") -> RuleInvocation:
    """Build a RuleInvocation from a single rule token.

    Examples:
        parse_rule("email")          -> name="email"
        parse_rule("!in(a|b)")       -> name="in", params=("a", "b"), negated
        parse_rule("length(2|20)")   -> name="length", params=("2", "20")
    """
    negated = token.startswith("!")
    body = token[1:] if negated else token

    match = _PARAMS_PATTERN.match(body)
    if match:
        name = match.group("name")
        params = tuple(match.group("params").split("|"))
    else:
        name = body
        params = ()

    return RuleInvocation(
        spec=token,
        name=name,
        params=params,
        negated=negated,
        message=message,
    )


def strip_params(token: str) -> str:
    """Remove a trailing "(...)" group: "length(2|20)" -> "length"."""
    return _TRAILING_PARAMS.sub("", token)


def alias_from_json_tag(tag: str | None) -> str | None:
    """Extract the serialization name from a json-style tag.

    The name is the first comma-separated segment ("name,omitempty" ->
    "name"). An empty name or the "-" sentinel means there is no alias.
    """
    if not tag:
        return None
    name = tag.split(",", 1)[0].strip()
    if not name or name == SKIP_TAG:
        return None
    return name
