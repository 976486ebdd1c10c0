import os
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from file_gateway.core.config import get_settings
from file_gateway.services.storage import StorageService

from tests.fake_s3 import FakeS3Client

TEST_BUCKET = "test-bucket"


@pytest.fixture(scope="session", autouse=True)
def configure_environment():
    os.environ["ENV"] = "test"
    os.environ["AWS_ACCESS_KEY_ID"] = "test"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "test"
    os.environ["AWS_REGION"] = "us-east-1"
    os.environ["S3_BUCKET_NAME"] = TEST_BUCKET
    os.environ["LOG_LEVEL"] = "WARNING"
    get_settings.cache_clear()


@pytest.fixture
def settings(configure_environment):
    return get_settings()


@pytest.fixture
def fake_s3() -> FakeS3Client:
    return FakeS3Client(buckets={TEST_BUCKET: {}})


@pytest.fixture
def storage(settings, fake_s3) -> StorageService:
    return StorageService(settings, client=fake_s3)


@pytest.fixture
def app_instance(settings, storage):
    from file_gateway.main import create_app

    return create_app(settings=settings, storage=storage)


@pytest_asyncio.fixture
async def client(app_instance):
    transport = ASGITransport(app=app_instance)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
