import logging
import time
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
import uvicorn
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from src.adocean.adapter import AdoceanAdapter
from src.adocean.schema import OutboundRequest, Size

# --- Metrics ---
REQUEST_COUNT = Counter('adocean_requests_total', 'Total adapter calls', ['endpoint'])
LATENCY = Histogram('adocean_latency_seconds', 'Adapter call latency in seconds', ['endpoint'],
                    buckets=[0.0005, 0.001, 0.002, 0.005, 0.010, 0.025, 0.050])
OUTBOUND_COUNT = Counter('adocean_outbound_requests_total', 'Vendor calls produced by /build')
BID_COUNT = Counter('adocean_bids_total', 'Normalized bids produced by /interpret')
ERROR_COUNT = Counter('adocean_errors_total', 'Total errors', ['type'])


class BuildPayload(BaseModel):
    bids: List[Dict[str, Any]]
    gdprConsent: Optional[Dict[str, Any]] = None


class OriginatingRequest(BaseModel):
    bidIdMap: Dict[str, str]
    slotSizes: Dict[str, List[List[int]]] = Field(default_factory=dict)


class InterpretPayload(BaseModel):
    body: Any = None
    request: OriginatingRequest


# Initialize App & Adapter
app = FastAPI(title="AdOcean Bid Adapter", version="1.0.0")
adapter = AdoceanAdapter()


@app.on_event("startup")
async def startup_event():
    logging.info("Starting up AdOcean Bid Adapter...")


@app.get("/metrics")
async def metrics():
    """Expose Prometheus metrics."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/health")
async def health_check():
    """Health check endpoint for k8s/LB."""
    return {"status": "healthy", "service": "adocean-adapter", "bidder": adapter.code}


@app.post("/validate")
async def validate(bid: Dict[str, Any]):
    REQUEST_COUNT.labels(endpoint="validate").inc()
    return {"valid": adapter.is_bid_request_valid(bid)}


@app.post("/build")
async def build(payload: BuildPayload):
    """
    Group raw bid requests into vendor GET calls.
    """
    start_time = time.perf_counter()
    REQUEST_COUNT.labels(endpoint="build").inc()

    bidder_request = {"gdprConsent": payload.gdprConsent} if payload.gdprConsent else None
    try:
        requests = adapter.build_requests(payload.bids, bidder_request)
    except Exception as e:
        ERROR_COUNT.labels(type="build").inc()
        logging.error(f"Build error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="internal_error")

    LATENCY.labels(endpoint="build").observe(time.perf_counter() - start_time)
    OUTBOUND_COUNT.inc(len(requests))
    return [r.to_dict() for r in requests]


@app.post("/interpret")
async def interpret(payload: InterpretPayload):
    """
    Turn a vendor response into normalized bids for the originating request.
    """
    start_time = time.perf_counter()
    REQUEST_COUNT.labels(endpoint="interpret").inc()

    try:
        outbound = OutboundRequest(
            method="GET",
            url="",
            bidIdMap=payload.request.bidIdMap,
            slotSizes={k: Size.parse_list(v) for k, v in payload.request.slotSizes.items()},
        )
        bids = adapter.interpret_response(payload.body, outbound)
    except Exception as e:
        ERROR_COUNT.labels(type="interpret").inc()
        logging.error(f"Interpret error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="internal_error")

    LATENCY.labels(endpoint="interpret").observe(time.perf_counter() - start_time)
    BID_COUNT.inc(len(bids))
    return [b.to_dict() for b in bids]


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
