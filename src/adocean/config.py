from dataclasses import dataclass


@dataclass(frozen=True)
class AdapterConfig:
    """Master configuration for the AdOcean bid adapter."""
    bidder_code: str = "adocean"

    # Endpoint layout: {scheme}://{emiter}/_{cachebuster}/{path}
    endpoint_scheme: str = "https"
    endpoint_path: str = "ad.json"
    cache_buster_digits: int = 16

    # Slot identifiers
    slave_id_prefix: str = "adocean"
    unique_part_length: int = 10
    # Prefix plus at least one character of the slot id proper
    min_slave_id_length: int = 8

    # "split" opens a new request for a repeated slot, "merge" keeps the last one
    duplicate_slave_policy: str = "split"

    # Response normalization
    default_currency: str = "EUR"
    default_ttl: int = 300
    net_revenue: bool = False

    def __post_init__(self):
        if self.duplicate_slave_policy not in ("split", "merge"):
            raise ValueError(f"Unknown duplicate_slave_policy: {self.duplicate_slave_policy}")


# Default config instance
config = AdapterConfig()
