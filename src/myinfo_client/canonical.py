"""
Canonical query strings for MyInfo requests

The same canonical form is used for URLs sent to MyInfo (values
percent-encoded) and for the base string of the PKI_SIGN signature
(values left as is), so both must be built by the same function.
"""

from typing import Any, Iterable, Mapping, Optional, Union
from urllib.parse import quote

# Characters left unescaped by JavaScript's encodeURIComponent
URI_COMPONENT_SAFE = "-_.!~*'()"


def to_param_value(value: Any) -> str:
    """Coerce a parameter value to its string form (None becomes an empty string)"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(to_param_value(item) for item in value)
    return str(value)


def encode_uri_component(value: str) -> str:
    return quote(value, safe=URI_COMPONENT_SAFE)


def canonical_query_string(params: Optional[Mapping[str, Any]], encode: bool = True) -> str:
    """
    Generate query string from query params

    Args:
        params: Key-value pairs, e.g. {"b": "2 two", "a": 1}
        encode: Whether to percent-encode the values

    Returns:
        Params sorted by key, e.g. "a=1&b=2%20two"
    """
    pairs = []
    for key in sorted((params or {}).keys()):
        value = to_param_value(params[key])
        pairs.append(f"{key}=" + (encode_uri_component(value) if encode else value))
    return "&".join(pairs)


def join_attributes(attributes: Union[str, Iterable[str], None]) -> str:
    """
    Join requested attributes into the comma-separated form MyInfo expects

    Attributes are de-duplicated and sorted so the same request always
    produces the same URL and signature.
    """
    if attributes is None:
        return ""
    if isinstance(attributes, str):
        return attributes
    return ",".join(sorted(set(attributes)))


def build_url(base_url: str, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Build ``{base_url}/{path}`` with a canonical, encoded query string"""
    url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    if params:
        url += "?" + canonical_query_string(params)
    return url
