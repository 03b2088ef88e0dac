import logging
from typing import Any, Optional

from src.adocean.config import AdapterConfig, config

logger = logging.getLogger(__name__)


class Validator:
    """
    Input validation for raw bid requests and vendor response values.
    """

    @staticmethod
    def is_bid_request_valid(bid: Any, conf: AdapterConfig = config) -> bool:
        """
        Check that a raw bid request carries the minimum addressing fields.

        Valid iff params.masterId is truthy and params.slaveId is a string
        long enough to hold the vendor prefix plus a slot id.
        """
        if not isinstance(bid, dict):
            return False
        params = bid.get("params")
        if not isinstance(params, dict):
            return False
        if not params.get("masterId"):
            return False

        slave_id = params.get("slaveId")
        if not slave_id or not isinstance(slave_id, str):
            return False
        return len(slave_id) >= conf.min_slave_id_length

    @staticmethod
    def parse_price(price: Any) -> Optional[float]:
        """
        Parse a vendor price string. Returns None if invalid or missing.
        """
        if price is None or price == "":
            return None
        try:
            return float(price)
        except (ValueError, TypeError):
            return None

    @staticmethod
    def parse_int(value: Any, default: int = 0) -> int:
        """
        Parse integer-like values ("300", 300, "300.0") safely.
        """
        if value is None or value == "":
            return default
        try:
            return int(float(value))
        except (ValueError, TypeError):
            return default
