import random
from typing import Any, Optional
from urllib.parse import quote

from src.adocean.schema import SupplyChain

# Characters encodeURIComponent leaves alone, minus "!" which the
# supply-chain format uses as a node separator.
_COMPONENT_SAFE = "*'()"

SCHAIN_NODE_FIELDS = ("asi", "sid", "hp", "rid", "name", "domain")
# Node extensions are never forwarded
SCHAIN_NO_EXT = "0"


def encode_uri_component(value: Any) -> str:
    """
    Percent-encode a query value the way browsers encode URI components,
    with "!" escaped as well.

    Example:
        encode_uri_component("00001!,2") -> "00001%21%2C2"
    """
    if value is None:
        return ""
    return quote(str(value), safe=_COMPONENT_SAFE)


def serialize_supply_chain(schain: Optional[SupplyChain]) -> str:
    """
    Serialize a supply chain into the compact vendor format:

        {ver},{complete}!{node}!{node}...

    where each node is `asi,sid,hp,rid,name,domain,0`. Missing values are
    left empty; every value is URI-component encoded so that "," and "!"
    never appear unescaped inside a field.
    """
    if schain is None:
        return ""
    header = f"{schain.ver},{schain.complete}!"
    nodes = []
    for node in schain.nodes:
        values = []
        for name in SCHAIN_NODE_FIELDS:
            value = getattr(node, name)
            values.append(encode_uri_component(value) if value not in (None, "") else "")
        values.append(SCHAIN_NO_EXT)
        nodes.append(",".join(values))
    return header + "!".join(nodes)


def random_cache_buster(digits: int = 16) -> str:
    """A random run of decimal digits used to defeat HTTP caching."""
    return "".join(random.choice("0123456789") for _ in range(max(digits, 1)))
