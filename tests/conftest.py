"""Pytest fixtures: preview config, fake encoder reset, moto-backed AWS resources."""

import os

import pytest

from hls_preview.config import PreviewConfig

from helpers import CDN_BASE, FakeEncoder


@pytest.fixture
def preview_config() -> PreviewConfig:
    return PreviewConfig(cdn_base=CDN_BASE, duration_sec=10.0, sample_count=5, max_samples=6)


@pytest.fixture(autouse=True)
def reset_fake_encoders():
    FakeEncoder.instances.clear()
    yield
    FakeEncoder.instances.clear()


@pytest.fixture(scope="function")
def aws_credentials():
    """Set fake AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def moto_aws(aws_credentials):
    """Enable moto mock for S3 and DynamoDB."""
    from moto import mock_aws

    with mock_aws():
        yield


@pytest.fixture
def previews_bucket(moto_aws):
    import boto3

    client = boto3.client("s3", region_name="us-east-1")
    client.create_bucket(Bucket="test-previews")
    return "test-previews"


@pytest.fixture
def videos_table(moto_aws):
    """Create Videos DynamoDB table keyed by video_id."""
    import boto3

    client = boto3.client("dynamodb", region_name="us-east-1")
    client.create_table(
        TableName="test-videos",
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "video_id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "video_id", "AttributeType": "S"}],
    )
    return "test-videos"
