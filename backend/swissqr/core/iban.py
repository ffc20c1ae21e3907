import re


_SWISS_IBAN_RE = re.compile(r"^CH\d{2}\d{5}[A-Z0-9]{12}$")

QR_IID_MIN = 30000
QR_IID_MAX = 31999


def clean_iban(value: str | None) -> str:
    return re.sub(r"\s", "", value or "").upper()


def validate_swiss_iban(iban: str | None) -> bool:
    cleaned = clean_iban(iban)
    if len(cleaned) != 21 or not cleaned.startswith("CH"):
        return False
    return _SWISS_IBAN_RE.match(cleaned) is not None


def _iban_iid(iban: str | None) -> int | None:
    cleaned = clean_iban(iban)
    if len(cleaned) != 21:
        return None
    iid = cleaned[4:9]
    if not iid.isdigit():
        return None
    return int(iid)


def is_qr_iban(iban: str | None) -> bool:
    iid = _iban_iid(iban)
    return iid is not None and QR_IID_MIN <= iid <= QR_IID_MAX


def format_iban(iban: str | None) -> str:
    cleaned = clean_iban(iban)
    return " ".join(cleaned[i:i + 4] for i in range(0, len(cleaned), 4))
