import json
import logging
from typing import Any, List, Optional
from urllib.parse import unquote

from src.adocean.config import AdapterConfig, config
from src.adocean.schema import NormalizedBid, OutboundRequest, ResponseLineItem
from src.utils.validation import Validator

logger = logging.getLogger(__name__)

# Fires the win notice and the stats pixel before the creative renders.
# [TIMESTAMP] in the stats url is filled in by the browser.
TRACKING_SCRIPT = (
    '<script type="application/javascript">(function(){{'
    "var wu={winurl},su={statsurl}.replace(/\\[TIMESTAMP\\]/,Date.now());"
    'if(wu&&typeof navigator.sendBeacon==="function"){{navigator.sendBeacon(wu);}}'
    "else if(wu){{(new Image()).src=wu;}}"
    "if(su){{(new Image()).src=su;}}"
    "}})();</script>"
)


class ResponseInterpreter:
    """
    Maps vendor line items back to the slots that asked for them.

    Line items flagged with `error` (no-bid), items whose id was not part of
    the outbound request and items without a usable price are dropped.
    """

    def __init__(self, conf: AdapterConfig = config):
        self.conf = conf

    def interpret(self, response: Any, outbound_request: OutboundRequest) -> List[NormalizedBid]:
        """
        Args:
            response: The decoded JSON body, or a mapping holding it under "body".
            outbound_request: The request this response answers.

        Returns:
            List[NormalizedBid]: Possibly empty, never longer than the body.
        """
        body = response.get("body") if isinstance(response, dict) else response
        if not isinstance(body, list):
            logger.debug("Response body is not a list, no bids")
            return []

        bids = []
        for raw in body:
            if not isinstance(raw, dict):
                continue
            bid = self._interpret_item(ResponseLineItem.from_dict(raw), outbound_request)
            if bid is not None:
                bids.append(bid)
        return bids

    def _interpret_item(
        self, item: ResponseLineItem, outbound_request: OutboundRequest
    ) -> Optional[NormalizedBid]:
        if item.is_no_bid:
            logger.debug(f"No bid for slot {item.id}")
            return None

        request_id = outbound_request.bidIdMap.get(item.id)
        if not request_id:
            logger.debug(f"Dropping uncorrelated line item {item.id}")
            return None

        cpm = Validator.parse_price(item.price)
        if cpm is None:
            logger.warning(f"Dropping line item {item.id}: unparseable price {item.price!r}")
            return None

        width, height = self._dimensions(item, outbound_request)
        ttl = Validator.parse_int(item.ttl) or self.conf.default_ttl

        return NormalizedBid(
            requestId=request_id,
            cpm=cpm,
            currency=item.currency or self.conf.default_currency,
            width=width,
            height=height,
            ad=self._ad_markup(item),
            creativeId=item.crid,
            ttl=ttl,
            netRevenue=self.conf.net_revenue,
            meta={"advertiserDomains": self._advertiser_domains(item.adomain)},
        )

    @staticmethod
    def _dimensions(item: ResponseLineItem, outbound_request: OutboundRequest):
        """Returned size, or the first size declared for the slot."""
        width = Validator.parse_int(item.width)
        height = Validator.parse_int(item.height)
        if width and height:
            return width, height

        declared = outbound_request.slotSizes.get(item.id) or []
        if declared:
            return declared[0].width, declared[0].height
        return width, height

    @staticmethod
    def _ad_markup(item: ResponseLineItem) -> str:
        ad = unquote(item.code)
        if item.winurl or item.statsUrl:
            ad = TRACKING_SCRIPT.format(
                winurl=_js_string(item.winurl), statsurl=_js_string(item.statsUrl)
            ) + ad
        return ad

    @staticmethod
    def _advertiser_domains(adomain: Any) -> List[str]:
        if isinstance(adomain, str):
            return [adomain] if adomain else []
        if isinstance(adomain, (list, tuple)):
            return [d for d in adomain if isinstance(d, str)]
        return []


def _js_string(value: str) -> str:
    """A JS string literal that cannot close the surrounding script tag."""
    return json.dumps(value).replace("</", "<\\/")
