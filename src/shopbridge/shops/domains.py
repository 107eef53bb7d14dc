"""Shop identifier normalization."""

import re

from shopbridge.common.exceptions import InvalidParameterError, MissingParameterError

_SHOP_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9-]*$")


def normalize_shop_domain(raw: str | None, suffix: str) -> str:
    """Turn ``acme``, ``acme.<suffix>`` or ``https://acme.<suffix>/`` into ``acme.<suffix>``.

    Raises MissingParameterError for empty input and InvalidParameterError when
    the shop name carries anything besides lowercase letters, digits and dashes.
    """
    if raw is None or not raw.strip():
        raise MissingParameterError("shop")

    value = raw.strip().lower()
    for scheme in ("https://", "http://"):
        if value.startswith(scheme):
            value = value[len(scheme):]
    value = value.split("/", 1)[0]

    suffix = suffix.lower().lstrip(".")
    if value.endswith(f".{suffix}"):
        value = value[: -len(suffix) - 1]

    if not _SHOP_NAME_RE.match(value):
        raise InvalidParameterError(f"Invalid shop: {raw!r}")
    return f"{value}.{suffix}"
