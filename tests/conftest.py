import copy
import pytest

MASTER_ID = "tmYF.DMl7ZBq.Nqt2Bq4FutQTJfTpxCOmtNPZoQUDcL.G7"
CONSENT_STRING = "BOQHk-4OSlWKFBoABBPLBd-AAAAgWAHAACAAsAPQBSACmgFTAOkA"


@pytest.fixture
def raw_bid():
    return {
        "bidder": "adocean",
        "params": {
            "masterId": MASTER_ID,
            "slaveId": "adoceanmyaozpniqismex",
            "emiter": "myao.adocean.pl",
        },
        "adUnitCode": "adunit-code",
        "mediaTypes": {"banner": {"sizes": [[300, 250]]}},
        "bidId": "30b31c1838de1e",
        "bidderRequestId": "22edbae2733bf6",
        "auctionId": "1d1a030790a475",
    }


@pytest.fixture
def raw_bids(raw_bid):
    """Two requests for the same slot with different sizes."""
    first = copy.deepcopy(raw_bid)
    first["mediaTypes"]["banner"]["sizes"] = [[300, 250], [300, 600]]
    second = copy.deepcopy(raw_bid)
    second["mediaTypes"]["banner"]["sizes"] = [[300, 200], [600, 250]]
    second["bidId"] = "30b31c1838de1f"
    return [first, second]


@pytest.fixture
def bidder_request():
    return {"gdprConsent": {"consentString": CONSENT_STRING, "gdprApplies": True}}


@pytest.fixture
def schain():
    return {
        "ver": "1.0",
        "complete": 1,
        "nodes": [{"asi": "directseller.com", "sid": "00001!,2", "rid": "BidRequest1", "hp": 1}],
    }


@pytest.fixture
def line_item():
    return {
        "id": "adoceanmyaozpniqismex",
        "price": "0.019000",
        "winurl": "",
        "statsUrl": "",
        "code": "%3C!--%20Creative%20--%3E",
        "currency": "EUR",
        "minFloorPrice": "0.01",
        "width": "300",
        "height": "250",
        "crid": "0af345b42983cc4bc0",
        "ttl": "300",
        "adomain": ["adocean.pl"],
    }
