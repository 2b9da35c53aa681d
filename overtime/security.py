from __future__ import annotations

import re
import secrets
import threading
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Optional, Tuple, Union

import structlog

logger = structlog.get_logger(__name__)

MAX_INPUT_LENGTH = 1000
MAX_EMAIL_LENGTH = 254
SUSPICIOUS_INPUT_MESSAGE = "Entrada contém conteúdo suspeito"

_CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F]")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_TIME = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")
_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

XSS_PATTERNS = [
    re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"<iframe[^>]*>.*?</iframe>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<object[^>]*>.*?</object>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<embed[^>]*>", re.IGNORECASE),
    re.compile(r"<link[^>]*>", re.IGNORECASE),
    re.compile(r"<meta[^>]*>", re.IGNORECASE),
    re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL),
]

SQL_INJECTION_PATTERNS = [
    re.compile(r"\b(SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|EXEC|UNION|SCRIPT)\b", re.IGNORECASE),
    re.compile(r"\b(OR|AND)\s+\d+\s*=\s*\d+", re.IGNORECASE),
    re.compile(r"\b(OR|AND)\s+'.*'\s*=\s*'.*'", re.IGNORECASE),
    re.compile(r"UNION\s+SELECT", re.IGNORECASE),
    re.compile(r"DROP\s+TABLE", re.IGNORECASE),
    re.compile(r"INSERT\s+INTO", re.IGNORECASE),
    re.compile(r"DELETE\s+FROM", re.IGNORECASE),
    re.compile(r"UPDATE\s+SET", re.IGNORECASE),
]

PATH_TRAVERSAL_PATTERNS = [
    re.compile(r"\.\./"),
    re.compile(r"\.\.\\"),
    re.compile(r"\.\.%2f", re.IGNORECASE),
    re.compile(r"\.\.%5c", re.IGNORECASE),
    re.compile(r"\.\.%252f", re.IGNORECASE),
    re.compile(r"\.\.%255c", re.IGNORECASE),
]


def sanitize_input(value: Optional[str]) -> str:
    """Trim, drop ASCII control characters and cap the length."""
    if not isinstance(value, str):
        return ""
    return _CONTROL_CHARS.sub("", value.strip())[:MAX_INPUT_LENGTH]


def sanitize_html(value: Optional[str]) -> str:
    if not isinstance(value, str):
        return ""
    cleaned = re.sub(r"[<>]", "", value)
    cleaned = re.sub(r"javascript:", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"on\w+\s*=", "", cleaned, flags=re.IGNORECASE)
    return cleaned.strip()


def is_valid_email(email: Optional[str]) -> bool:
    if not isinstance(email, str):
        return False
    return bool(_EMAIL.match(email)) and len(email) <= MAX_EMAIL_LENGTH


def validate_password(password: Optional[str]) -> Tuple[bool, Optional[str]]:
    if not isinstance(password, str):
        return False, "Senha deve ser uma string"
    if len(password) < 8:
        return False, "Senha deve ter pelo menos 8 caracteres"
    if len(password) > 128:
        return False, "Senha muito longa"
    if re.fullmatch(r"(.)\1+", password, flags=re.DOTALL):
        return False, "Senha não pode ter caracteres repetidos"
    lowered = password.lower()
    if "password" in lowered or "123456" in lowered:
        return False, "Senha muito comum"
    return True, None


def _cpf_check_digit(digits: str) -> int:
    weight = len(digits) + 1
    total = sum(int(d) * (weight - i) for i, d in enumerate(digits))
    remainder = (total * 10) % 11
    return 0 if remainder == 10 else remainder


def is_valid_cpf(cpf: Optional[str]) -> bool:
    """Brazilian taxpayer id: 11 digits with two mod-11 check digits."""
    if not isinstance(cpf, str):
        return False
    digits = re.sub(r"\D", "", cpf)
    if len(digits) != 11 or digits == digits[0] * 11:
        return False
    if _cpf_check_digit(digits[:9]) != int(digits[9]):
        return False
    return _cpf_check_digit(digits[:10]) == int(digits[10])


def normalize_cpf(cpf: str) -> str:
    return re.sub(r"\D", "", cpf)


def is_valid_time(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(_TIME.match(value))


def is_valid_date(value: Optional[str]) -> bool:
    if not isinstance(value, str) or not _DATE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_valid_number(
    value: Union[str, int, float], minimum: Optional[float] = None, maximum: Optional[float] = None
) -> bool:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    if number != number:  # NaN
        return False
    if minimum is not None and number < minimum:
        return False
    if maximum is not None and number > maximum:
        return False
    return True


def detect_xss(value: str) -> bool:
    return any(pattern.search(value) for pattern in XSS_PATTERNS)


def detect_sql_injection(value: str) -> bool:
    return any(pattern.search(value) for pattern in SQL_INJECTION_PATTERNS)


def detect_path_traversal(value: str) -> bool:
    return any(pattern.search(value) for pattern in PATH_TRAVERSAL_PATTERNS)


_THREAT_CHECKS = [
    ("xss_attempt", detect_xss),
    ("sql_injection_attempt", detect_sql_injection),
    ("path_traversal_attempt", detect_path_traversal),
]


def inspect_input(value: Optional[str], field_name: str) -> Tuple[bool, Optional[str]]:
    """Screen free text for injection patterns.

    Empty values pass; required-field checks happen elsewhere.
    """
    if not value or not isinstance(value, str):
        return True, None
    for threat, check in _THREAT_CHECKS:
        if check(value):
            logger.warning("security_event", threat=threat, field=field_name, sample=value[:100])
            return False, SUSPICIOUS_INPUT_MESSAGE
    return True, None


Clock = Callable[[], datetime]


class CSRFTokenStore:
    def __init__(self, lifetime: timedelta = timedelta(minutes=30), clock: Clock = datetime.utcnow) -> None:
        self.lifetime = lifetime
        self._clock = clock
        self._tokens: Dict[str, datetime] = {}
        self._lock = threading.Lock()

    def generate_token(self) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._tokens[token] = self._clock()
        return token

    def validate_token(self, token: Optional[str]) -> bool:
        if not token:
            return False
        with self._lock:
            issued_at = self._tokens.get(token)
            if issued_at is None:
                return False
            if self._clock() - issued_at > self.lifetime:
                del self._tokens[token]
                return False
            return True

    def cleanup(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [t for t, issued in self._tokens.items() if now - issued > self.lifetime]
            for token in expired:
                del self._tokens[token]
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)
