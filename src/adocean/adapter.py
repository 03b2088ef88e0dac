import logging
from typing import Any, Dict, List, Optional

from src.adocean.builder import RequestBuilder
from src.adocean.config import AdapterConfig, config
from src.adocean.interpreter import ResponseInterpreter
from src.adocean.schema import AuctionContext, BidRequest, NormalizedBid, OutboundRequest
from src.utils.validation import Validator

logger = logging.getLogger(__name__)


class AdoceanAdapter:
    """
    Entry point for the auction orchestrator.

    Responsibilities:
        1. Validation of raw bid requests
        2. Batching requests into vendor GET calls
        3. Interpretation of vendor responses into normalized bids

    The adapter holds only configuration, so one instance can serve any
    number of concurrent auctions.

    Attributes:
        builder (RequestBuilder): Groups and encodes outbound calls.
        interpreter (ResponseInterpreter): Correlates line items to bid ids.
    """

    supported_media_types = ("banner",)

    def __init__(self, conf: AdapterConfig = config):
        self.conf = conf
        self.code = conf.bidder_code
        self.builder = RequestBuilder(conf)
        self.interpreter = ResponseInterpreter(conf)

    def is_bid_request_valid(self, bid: Dict[str, Any]) -> bool:
        return Validator.is_bid_request_valid(bid, self.conf)

    def build_requests(
        self,
        bid_requests: List[Dict[str, Any]],
        bidder_request: Optional[Dict[str, Any]] = None,
    ) -> List[OutboundRequest]:
        """
        Build outbound calls from raw bid requests.

        Invalid requests are dropped individually; they never fail the batch.
        """
        parsed = []
        for raw in bid_requests:
            if not self.is_bid_request_valid(raw):
                logger.warning(f"Dropping invalid bid request {self._bid_id(raw)}")
                continue
            try:
                parsed.append(BidRequest.from_dict(raw))
            except (ValueError, TypeError) as e:
                logger.warning(f"Dropping malformed bid request {self._bid_id(raw)}: {e}")

        return self.builder.build(parsed, AuctionContext.from_dict(bidder_request))

    def interpret_response(
        self, server_response: Any, outbound_request: OutboundRequest
    ) -> List[NormalizedBid]:
        return self.interpreter.interpret(server_response, outbound_request)

    @staticmethod
    def _bid_id(raw: Any) -> str:
        return str(raw.get("bidId")) if isinstance(raw, dict) else "<not a mapping>"
