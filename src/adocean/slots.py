"""
Slot identifier conversions.

Every AdOcean slot id (slaveId) starts with the 7-character vendor prefix
"adocean", e.g. "adoceanmyaozpniqismex":

    raw_slave_id      -> "myaozpniqismex"  (prefix stripped, offset 7)
    unique_slave_part -> "zpniqismex"      (last 10 characters)

The raw id keys a slot inside the `aosspsizes` token, the unique part is
what the `slaves` list carries.
"""
from typing import Iterable

from src.adocean.schema import Size

SLAVE_ID_PREFIX = "adocean"
UNIQUE_PART_LENGTH = 10

SIZE_SEPARATOR = "_"
SLOT_SEPARATOR = "-"
SLAVES_SEPARATOR = ","


def raw_slave_id(slave_id: str, prefix: str = SLAVE_ID_PREFIX) -> str:
    """Strip the vendor prefix. Ids without the prefix are returned unchanged."""
    if prefix and slave_id.startswith(prefix):
        return slave_id[len(prefix):]
    return slave_id


def unique_slave_part(
    slave_id: str,
    prefix: str = SLAVE_ID_PREFIX,
    length: int = UNIQUE_PART_LENGTH,
) -> str:
    """The last `length` characters of the raw slave id."""
    return raw_slave_id(slave_id, prefix)[-length:]


def slot_sizes_token(slave_id: str, sizes: Iterable[Size], prefix: str = SLAVE_ID_PREFIX) -> str:
    """Encode one slot as `{raw id}~{WxH}_{WxH}...`."""
    return raw_slave_id(slave_id, prefix) + "~" + SIZE_SEPARATOR.join(s.token for s in sizes)
