"""
stagedeploy.state_bucket — S3 bucket holding the Pulumi backend state.

Checked on every bootstrap run, created at most once, never deleted here.
"""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = frozenset({"404", "NoSuchBucket", "NotFound"})


def make_s3_client(region: str) -> Any:
    return boto3.client("s3", region_name=region)


def bucket_exists(s3_client: Any, bucket: str) -> bool:
    """HeadBucket probe; errors other than not-found propagate."""
    try:
        s3_client.head_bucket(Bucket=bucket)
    except ClientError as exc:
        code = exc.response.get("Error", {}).get("Code", "")
        if code in _NOT_FOUND_CODES:
            return False
        raise
    return True


def create_bucket(s3_client: Any, bucket: str, region: str) -> None:
    create_args: dict[str, Any] = {"Bucket": bucket}
    if region != "us-east-1":
        create_args["CreateBucketConfiguration"] = {"LocationConstraint": region}
    s3_client.create_bucket(**create_args)


def enable_versioning(s3_client: Any, bucket: str) -> None:
    s3_client.put_bucket_versioning(
        Bucket=bucket,
        VersioningConfiguration={"Status": "Enabled"},
    )


def ensure_state_bucket(s3_client: Any, bucket: str, region: str) -> bool:
    """Create the state bucket if missing and enable versioning.

    Versioning is (re)applied on every call, including when the bucket
    already existed. Returns True when the bucket was created by this call.
    """
    created = False
    if bucket_exists(s3_client, bucket):
        logger.info("S3 bucket already exists: %s", bucket)
    else:
        create_bucket(s3_client, bucket, region)
        created = True
        logger.info("Created S3 bucket: %s", bucket)

    enable_versioning(s3_client, bucket)
    logger.info("Versioning enabled on %s", bucket)
    return created
