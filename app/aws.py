import boto3
from botocore.config import Config
from .config import settings

_session = boto3.session.Session(region_name=settings.aws_region)

s3 = _session.client(
    "s3",
    endpoint_url=settings.aws_endpoint_url,
    config=Config(s3={"addressing_style": "path"}),  # evita issues de virtual-host no LocalStack
)
