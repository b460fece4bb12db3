"""
Detection of external contact details in message bodies.

Chat is meant for arranging the video date, so phone numbers and email
addresses are rejected, including spelled-out and obfuscated forms such as
"five five five ..." or "name at domain dot com".
"""

import re

WORD_TO_DIGIT = {
    'zero': '0', 'oh': '0',
    'one': '1', 'won': '1',
    'two': '2', 'too': '2',
    'three': '3', 'tree': '3',
    'four': '4', 'fore': '4',
    'five': '5', 'fiv': '5',
    'six': '6',
    'seven': '7', 'sevn': '7',
    'eight': '8', 'ate': '8',
    'nine': '9', 'niner': '9',
}

_SPELLED_NUMBER_RE = re.compile(r'\b(' + '|'.join(WORD_TO_DIGIT) + r')\b', re.IGNORECASE)
_SPACED_DIGITS_RE = re.compile(r'(\d\s){7,}\d')
_PHONE_SEPARATORS_RE = re.compile(r'[\s\-.()+]')

PHONE_PATTERNS = [
    re.compile(r'\d{3}[\s\-.]?\d{3}[\s\-.]?\d{4}'),
    re.compile(r'\(\d{3}\)[\s\-.]?\d{3}[\s\-.]?\d{4}'),
    re.compile(r'\+\d{1,3}[\s\-.]?\d{1,4}[\s\-.]?\d{1,4}[\s\-.]?\d{1,9}'),
    re.compile(r'\d{5}[\s\-.]\d{6}'),
]

_NUMBER_TOKEN = r"(\d+|zero|one|two|three|four|five|six|seven|eight|nine)"
_DIGIT_LIKE_RE = re.compile(_NUMBER_TOKEN, re.IGNORECASE)
_MIXED_RUN_RE = re.compile(_NUMBER_TOKEN + (r"[\s\-.]?" + _NUMBER_TOKEN) * 2, re.IGNORECASE)

EMAIL_RE = re.compile(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}')
OBFUSCATED_EMAIL_RE = re.compile(r'\b\w+\s+(at|@)\s+\w+\s+(dot|\.)\s+\w+\b', re.IGNORECASE)


def _convert_spelled_numbers(text: str) -> str:
    return _SPELLED_NUMBER_RE.sub(lambda m: WORD_TO_DIGIT[m.group(1).lower()], text)


def _has_phone_length_digits(text: str) -> bool:
    digits = re.sub(r'\D', '', text)
    return len(digits) >= 10 or bool(_SPACED_DIGITS_RE.search(text))


def contains_phone_number(text: str) -> bool:
    if not text:
        return False

    if _has_phone_length_digits(_convert_spelled_numbers(text)):
        return True

    if re.search(r'\d{10,}', _PHONE_SEPARATORS_RE.sub('', text)):
        return True

    if any(pattern.search(text) for pattern in PHONE_PATTERNS):
        return True

    # Mixed digits and number words, e.g. "call 555 one two three four five six"
    if not _MIXED_RUN_RE.search(text):
        return False
    return len(_DIGIT_LIKE_RE.findall(text)) >= 7


def contains_email(text: str) -> bool:
    if not text:
        return False
    return bool(EMAIL_RE.search(text) or OBFUSCATED_EMAIL_RE.search(text))


def contains_external_contact(text: str) -> bool:
    return contains_phone_number(text) or contains_email(text)
