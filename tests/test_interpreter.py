from dataclasses import replace

import pytest

from src.adocean.config import config
from src.adocean.interpreter import ResponseInterpreter
from src.adocean.schema import OutboundRequest, Size

EXPECTED = {
    "requestId": "30b31c1838de1e",
    "cpm": 0.019,
    "currency": "EUR",
    "width": 300,
    "height": 250,
    "ad": "<!-- Creative -->",
    "creativeId": "0af345b42983cc4bc0",
    "ttl": 300,
    "netRevenue": False,
    "meta": {"advertiserDomains": ["adocean.pl"]},
}


@pytest.fixture
def interpreter():
    return ResponseInterpreter()


@pytest.fixture
def outbound():
    return OutboundRequest(
        method="GET",
        url="https://myao.adocean.pl/_1/ad.json?id=x",
        bidIdMap={"adoceanmyaozpniqismex": "30b31c1838de1e"},
        slotSizes={"adoceanmyaozpniqismex": [Size(728, 90), Size(300, 250)]},
    )


def test_correct_bid_response(interpreter, outbound, line_item):
    result = interpreter.interpret({"body": [line_item], "headers": {}}, outbound)
    assert len(result) == 1
    assert result[0].to_dict() == EXPECTED


def test_raw_body_accepted(interpreter, outbound, line_item):
    assert len(interpreter.interpret([line_item], outbound)) == 1


def test_no_bid(interpreter, outbound):
    body = [{"id": "adoceanmyaolafpjwftbz", "error": "true"}]
    assert interpreter.interpret({"body": body}, outbound) == []


def test_no_bid_for_correlated_slot(interpreter, outbound):
    body = [{"id": "adoceanmyaozpniqismex", "error": "true"}]
    assert interpreter.interpret({"body": body}, outbound) == []


def test_uncorrelated_item_dropped(interpreter, outbound, line_item):
    line_item["id"] = "adoceanmyaounknown000"
    assert interpreter.interpret({"body": [line_item]}, outbound) == []


def test_non_list_body(interpreter, outbound):
    assert interpreter.interpret({"body": None}, outbound) == []
    assert interpreter.interpret({"body": {"id": "x"}}, outbound) == []
    assert interpreter.interpret("", outbound) == []


def test_unparseable_price_dropped(interpreter, outbound, line_item):
    line_item["price"] = "n/a"
    assert interpreter.interpret([line_item], outbound) == []


def test_defaults(interpreter, outbound, line_item):
    for key in ("currency", "ttl", "adomain", "width", "height"):
        del line_item[key]
    bid = interpreter.interpret([line_item], outbound)[0]
    assert bid.currency == config.default_currency
    assert bid.ttl == config.default_ttl
    assert bid.meta == {"advertiserDomains": []}
    # First declared size of the slot
    assert (bid.width, bid.height) == (728, 90)


def test_zero_ttl_uses_default(outbound, line_item):
    interpreter = ResponseInterpreter(replace(config, default_ttl=60, default_currency="PLN"))
    line_item["ttl"] = "0"
    del line_item["currency"]
    bid = interpreter.interpret([line_item], outbound)[0]
    assert bid.ttl == 60
    assert bid.currency == "PLN"


def test_tracking_script_prepended(interpreter, outbound, line_item):
    line_item["winurl"] = "https://myao.adocean.pl/win?x=1"
    line_item["statsUrl"] = "https://myao.adocean.pl/stats?t=[TIMESTAMP]"
    ad = interpreter.interpret([line_item], outbound)[0].ad
    assert ad.startswith('<script type="application/javascript">')
    assert '"https://myao.adocean.pl/win?x=1"' in ad
    assert "sendBeacon" in ad
    assert ad.endswith("</script><!-- Creative -->")


def test_mixed_body(interpreter, outbound, line_item):
    body = [line_item, {"id": "adoceanmyaozpniqismex", "error": "true"}, "junk"]
    result = interpreter.interpret({"body": body}, outbound)
    assert len(result) == 1


def test_interpret_is_idempotent(interpreter, outbound, line_item):
    first = interpreter.interpret([line_item], outbound)
    second = interpreter.interpret([line_item], outbound)
    assert first == second


def test_plain_string_adomain(interpreter, outbound, line_item):
    line_item["adomain"] = "adocean.pl"
    bid = interpreter.interpret([line_item], outbound)[0]
    assert bid.meta == {"advertiserDomains": ["adocean.pl"]}


def test_unexpected_adomain_type(interpreter, outbound, line_item):
    line_item["adomain"] = {"domain": "adocean.pl"}
    assert interpreter.interpret([line_item], outbound)[0].meta == {"advertiserDomains": []}


def test_tracking_urls_cannot_close_script(interpreter, outbound, line_item):
    line_item["winurl"] = "https://x/</script><script>alert(1)</script>"
    ad = interpreter.interpret([line_item], outbound)[0].ad
    assert ad.count("</script>") == 1
    assert "<\\/script>" in ad
