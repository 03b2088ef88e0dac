from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(slots=True)
class Size:
    """A width x height pair as declared by an ad unit."""

    width: int
    height: int

    @property
    def token(self) -> str:
        return f"{self.width}x{self.height}"

    @classmethod
    def parse_list(cls, raw: Any) -> List["Size"]:
        """
        Parse `[[w, h], ...]` or a single `[w, h]` pair into a list of sizes.
        """
        if not raw:
            return []
        if len(raw) == 2 and all(isinstance(v, (int, float, str)) for v in raw):
            raw = [raw]
        sizes = []
        for pair in raw:
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise ValueError(f"Invalid size entry: {pair!r}")
            sizes.append(cls(width=int(pair[0]), height=int(pair[1])))
        return sizes


@dataclass(slots=True)
class SupplyChainNode:
    asi: str
    sid: str
    hp: int
    rid: Optional[str] = None
    name: Optional[str] = None
    domain: Optional[str] = None
    ext: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "SupplyChainNode":
        return cls(
            asi=raw.get("asi"),
            sid=raw.get("sid"),
            hp=raw.get("hp"),
            rid=raw.get("rid"),
            name=raw.get("name"),
            domain=raw.get("domain"),
            ext=raw.get("ext"),
        )


@dataclass(slots=True)
class SupplyChain:
    """Ordered disclosure of the sellers between the publisher and the bidder."""

    ver: str
    complete: int
    nodes: List[SupplyChainNode] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "SupplyChain":
        return cls(
            ver=raw.get("ver"),
            complete=raw.get("complete"),
            nodes=[SupplyChainNode.from_dict(n) for n in raw.get("nodes") or []],
        )


@dataclass(slots=True)
class ConsentData:
    consentString: Optional[str] = None
    gdprApplies: bool = False

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ConsentData":
        return cls(
            consentString=raw.get("consentString") or None,
            gdprApplies=bool(raw.get("gdprApplies")),
        )


@dataclass(slots=True)
class AuctionContext:
    """Auction-wide data shared by every bid request of one bidder call."""

    gdprConsent: Optional[ConsentData] = None

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> "AuctionContext":
        if not raw or not raw.get("gdprConsent"):
            return cls()
        return cls(gdprConsent=ConsentData.from_dict(raw["gdprConsent"]))


@dataclass(slots=True)
class BidRequest:
    """
    One ad slot asking for a bid.
    Built from the loose dictionaries passed around by the auction orchestrator.
    """

    bidId: str
    masterId: str
    slaveId: str
    emiter: str
    sizes: List[Size] = field(default_factory=list)
    schain: Optional[SupplyChain] = None
    adUnitCode: Optional[str] = None
    bidderRequestId: Optional[str] = None
    auctionId: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "BidRequest":
        """
        Parse a raw bid request.

        Raises:
            ValueError: If a required addressing field is missing.
        """
        params = raw.get("params") or {}
        for key in ("masterId", "slaveId", "emiter"):
            if not params.get(key):
                raise ValueError(f"Bid request {raw.get('bidId')} is missing params.{key}")
        if not raw.get("bidId"):
            raise ValueError("Bid request is missing bidId")

        banner = (raw.get("mediaTypes") or {}).get("banner") or {}
        sizes = Size.parse_list(banner.get("sizes") or raw.get("sizes"))
        schain = raw.get("schain")

        return cls(
            bidId=str(raw["bidId"]),
            masterId=str(params["masterId"]),
            slaveId=str(params["slaveId"]),
            emiter=str(params["emiter"]),
            sizes=sizes,
            schain=SupplyChain.from_dict(schain) if schain else None,
            adUnitCode=raw.get("adUnitCode"),
            bidderRequestId=raw.get("bidderRequestId"),
            auctionId=raw.get("auctionId"),
        )


@dataclass(slots=True)
class OutboundRequest:
    """
    One HTTP GET descriptor for the external transport.
    bidIdMap correlates every slot of the call (slaveId) back to its bidId.
    """

    method: str
    url: str
    bidIdMap: Dict[str, str] = field(default_factory=dict)
    slotSizes: Dict[str, List[Size]] = field(default_factory=dict)
    data: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "url": self.url,
            "data": self.data,
            "bidIdMap": dict(self.bidIdMap),
            "slotSizes": {
                k: [[s.width, s.height] for s in v] for k, v in self.slotSizes.items()
            },
        }


@dataclass(slots=True)
class ResponseLineItem:
    id: str
    error: Optional[Any] = None
    price: Optional[str] = None
    currency: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None
    code: str = ""
    crid: Optional[str] = None
    ttl: Optional[str] = None
    adomain: Optional[List[str]] = None
    winurl: str = ""
    statsUrl: str = ""
    minFloorPrice: Optional[str] = None

    @property
    def is_no_bid(self) -> bool:
        return bool(self.error)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ResponseLineItem":
        return cls(
            id=raw.get("id"),
            error=raw.get("error"),
            price=raw.get("price"),
            currency=raw.get("currency"),
            width=raw.get("width"),
            height=raw.get("height"),
            code=raw.get("code") or "",
            crid=raw.get("crid"),
            ttl=raw.get("ttl"),
            adomain=raw.get("adomain"),
            # The vendor has used both spellings for the win notice url
            winurl=raw.get("winurl") or raw.get("winUrl") or "",
            statsUrl=raw.get("statsUrl") or "",
            minFloorPrice=raw.get("minFloorPrice"),
        )


@dataclass(slots=True)
class NormalizedBid:
    """
    A priced bid correlated back to the originating bid request.
    """

    requestId: str
    cpm: float
    currency: str
    width: int
    height: int
    ad: str
    creativeId: Optional[str]
    ttl: int
    netRevenue: bool = False
    meta: Dict[str, Any] = field(default_factory=lambda: {"advertiserDomains": []})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "requestId": self.requestId,
            "cpm": self.cpm,
            "currency": self.currency,
            "width": self.width,
            "height": self.height,
            "ad": self.ad,
            "creativeId": self.creativeId,
            "ttl": self.ttl,
            "netRevenue": self.netRevenue,
            "meta": {"advertiserDomains": list(self.meta.get("advertiserDomains", []))},
        }
