import logging
from typing import Dict, List, Optional, Tuple

from src.adocean.config import AdapterConfig, config
from src.adocean.schema import AuctionContext, BidRequest, OutboundRequest
from src.adocean.slots import (
    SLAVES_SEPARATOR,
    SLOT_SEPARATOR,
    slot_sizes_token,
    unique_slave_part,
)
from src.utils.encoding import encode_uri_component, random_cache_buster, serialize_supply_chain

logger = logging.getLogger(__name__)

# Query parameters whose values are encoded piecewise before joining
URL_SAFE_FIELDS = frozenset({"slaves", "schain"})

GroupKey = Tuple[str, str]
# One instance holds at most one request per slaveId, in insertion order
Instance = Dict[str, BidRequest]


class RequestBuilder:
    """
    Turns a batch of slot bid requests into the minimum number of vendor GET calls.

    Requests are grouped by (emiter, masterId). Each group is encoded into one
    URL carrying all its slots:

        https://{emiter}/_{cachebuster}/ad.json?id={masterId}
            &aosspsizes={raw}~{WxH}_{WxH}-{raw}~{WxH}
            &slaves={unique},{unique}
            [&gdpr=1][&gdpr_consent=...][&schain=...]

    A slaveId repeated inside a group is resolved by
    `config.duplicate_slave_policy`: "split" moves the repeat into a second
    call, "merge" keeps only the last request for that slot.
    """

    def __init__(self, conf: AdapterConfig = config):
        self.conf = conf

    def build(
        self,
        bid_requests: List[BidRequest],
        auction_context: Optional[AuctionContext] = None,
    ) -> List[OutboundRequest]:
        context = auction_context or AuctionContext()
        requests = [r for r in bid_requests if self._is_usable(r)]
        if not requests:
            return []

        # Supply chain goes out only if every request in the batch has one
        with_schain = all(r.schain is not None for r in requests)

        outbound = []
        for (emiter, master_id), instances in self._group(requests).items():
            for instance in instances:
                outbound.append(self._build_one(emiter, master_id, instance, context, with_schain))

        logger.info(
            f"Built {len(outbound)} outbound request(s) from {len(requests)} bid request(s)"
        )
        return outbound

    def _is_usable(self, request: BidRequest) -> bool:
        if not request.masterId or not request.slaveId or not request.emiter:
            logger.warning(f"Skipping bid request {request.bidId}: missing addressing fields")
            return False
        return True

    def _group(self, requests: List[BidRequest]) -> Dict[GroupKey, List[Instance]]:
        """Partition requests by (emiter, masterId), keeping first-seen order."""
        groups: Dict[GroupKey, List[Instance]] = {}
        for request in requests:
            instances = groups.setdefault((request.emiter, request.masterId), [{}])

            if self.conf.duplicate_slave_policy == "merge":
                instance = instances[0]
                if request.slaveId in instance:
                    logger.debug(
                        f"Slot {request.slaveId} repeated, bid {request.bidId} replaces "
                        f"{instance[request.slaveId].bidId}"
                    )
                instance[request.slaveId] = request
                continue

            i = 0
            while i < len(instances) and request.slaveId in instances[i]:
                i += 1
            if i == len(instances):
                instances.append({})
            instances[i][request.slaveId] = request
        return groups

    def _build_one(
        self,
        emiter: str,
        master_id: str,
        instance: Instance,
        context: AuctionContext,
        with_schain: bool,
    ) -> OutboundRequest:
        prefix = self.conf.slave_id_prefix
        sizes_tokens = []
        slaves = []
        bid_id_map = {}
        slot_sizes = {}
        for slave_id, request in instance.items():
            sizes_tokens.append(slot_sizes_token(slave_id, request.sizes, prefix))
            slaves.append(encode_uri_component(
                unique_slave_part(slave_id, prefix, self.conf.unique_part_length)
            ))
            bid_id_map[slave_id] = request.bidId
            slot_sizes[slave_id] = list(request.sizes)

        payload = {
            "id": master_id,
            "aosspsizes": SLOT_SEPARATOR.join(sizes_tokens),
            "slaves": SLAVES_SEPARATOR.join(slaves),
        }

        consent = context.gdprConsent
        if consent is not None:
            payload["gdpr"] = 1 if consent.gdprApplies else 0
            if consent.consentString:
                payload["gdpr_consent"] = consent.consentString

        if with_schain:
            first = next(iter(instance.values()))
            payload["schain"] = serialize_supply_chain(first.schain)

        return OutboundRequest(
            method="GET",
            url=self._endpoint_url(emiter, payload),
            bidIdMap=bid_id_map,
            slotSizes=slot_sizes,
        )

    def _endpoint_url(self, emiter: str, payload: Dict[str, object]) -> str:
        query = "&".join(
            f"{k}={v if k in URL_SAFE_FIELDS else encode_uri_component(v)}"
            for k, v in payload.items()
        )
        cache_buster = random_cache_buster(self.conf.cache_buster_digits)
        return (
            f"{self.conf.endpoint_scheme}://{emiter}/_{cache_buster}/"
            f"{self.conf.endpoint_path}?{query}"
        )
