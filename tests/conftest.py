from io import BytesIO

import pytest
from PIL import Image

from api.gateway import Gateway


class FakeReplicate:
    """Stands in for ReplicateClient; records calls and replays canned bodies."""

    def __init__(self, create_body=None, get_body=None, error=None):
        self.create_body = create_body or {"id": "job-1", "status": "starting"}
        self.get_body = get_body or {"id": "job-1", "status": "processing"}
        self.error = error
        self.created = []
        self.fetched = []

    def create_prediction(self, payload):
        self.created.append(payload)
        if self.error:
            raise self.error
        return self.create_body

    def get_prediction(self, prediction_id):
        self.fetched.append(prediction_id)
        if self.error:
            raise self.error
        return self.get_body


@pytest.fixture
def fake_replicate():
    return FakeReplicate()


@pytest.fixture
def gateway(fake_replicate):
    return Gateway(fake_replicate, webhook_host=None)


@pytest.fixture
def png_bytes():
    buf = BytesIO()
    Image.new("RGB", (4, 4), color=(200, 10, 10)).save(buf, format="PNG")
    return buf.getvalue()
