from fastapi import APIRouter, Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

# HTTP
REQUESTS = Counter("http_requests_total", "HTTP requests", ["path", "method", "status"])
LATENCY  = Histogram(
    "http_request_duration_seconds", "HTTP request duration (s)", ["path", "method"],
    buckets=(0.05,0.1,0.2,0.5,1,2,5,10)
)

# Domínio
UPLOAD_BYTES = Counter("video_upload_bytes_total", "Total bytes received in uploads")
S3_OPS = Counter("s3_operations_total", "S3 operations", ["op","status"])                 # op: put, delete
MONGO_OPS = Counter("mongodb_operations_total", "MongoDB operations", ["op","status"])    # op: aggregate,insert,find,update,exists
LISTING_RESULTS = Histogram(
    "video_listing_page_size", "Videos returned per listing page",
    buckets=(0,1,5,10,20,50,100)
)

router_metrics = APIRouter()
@router_metrics.get("/metrics", include_in_schema=False)
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
