import pytest
import requests

from client.submit import EXIT_JOB_FAILED, EXIT_OK, EXIT_REJECTED, GatewayClient, main, run


class FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self.body = body

    def json(self):
        return self.body


class FakeSession:
    def __init__(self, post_response, get_responses):
        self.post_response = post_response
        self.get_responses = list(get_responses)
        self.posted = []
        self.gets = []

    def post(self, url, json=None, timeout=None):
        self.posted.append((url, json))
        return self.post_response

    def get(self, url, timeout=None):
        self.gets.append(url)
        response = self.get_responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def image_file(tmp_path, png_bytes):
    path = tmp_path / "cat.png"
    path.write_bytes(png_bytes)
    return path


@pytest.mark.asyncio
async def test_succeeded_job_prints_output(image_file, capsys):
    session = FakeSession(
        FakeResponse(201, {"id": "job-1", "status": "starting"}),
        [
            FakeResponse(200, {"id": "job-1", "status": "processing"}),
            FakeResponse(200, {"id": "job-1", "status": "succeeded", "output": ["https://cdn.test/a.png"]}),
        ],
    )
    client = GatewayClient("http://gw.test", session=session)

    code = await run(image_file, "enhance", "sharper", client, interval=0)

    assert code == EXIT_OK
    url, body = session.posted[0]
    assert url == "http://gw.test/api/predictions"
    assert body["model"] == "enhance"
    assert body["image"].startswith("data:image/png;base64,")
    assert session.gets == ["http://gw.test/api/predictions/job-1"] * 2
    out = capsys.readouterr().out
    assert "job-1: starting" in out
    assert "https://cdn.test/a.png" in out


@pytest.mark.asyncio
async def test_rejected_submission(image_file):
    session = FakeSession(FakeResponse(400, {"detail": "Invalid model specified"}), [])
    code = await run(image_file, "enhance", "", GatewayClient("http://gw.test", session=session), interval=0)
    assert code == EXIT_REJECTED


@pytest.mark.asyncio
async def test_connection_lost_while_polling(image_file):
    session = FakeSession(
        FakeResponse(201, {"id": "job-1", "status": "starting"}),
        [requests.ConnectionError("refused")],
    )
    code = await run(image_file, "kling", "", GatewayClient("http://gw.test", session=session), interval=0)
    assert code == EXIT_JOB_FAILED
    assert "start_image" in session.posted[0][1]


@pytest.mark.asyncio
async def test_failed_job(image_file):
    session = FakeSession(
        FakeResponse(201, {"id": "job-1", "status": "starting"}),
        [FakeResponse(200, {"id": "job-1", "status": "failed"})],
    )
    code = await run(image_file, "enhance", "", GatewayClient("http://gw.test", session=session), interval=0)
    assert code == EXIT_JOB_FAILED


def test_missing_file(tmp_path):
    assert main([str(tmp_path / "missing.png")]) == EXIT_REJECTED


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code,body", [
    (500, ["unexpected"]),
    (201, "not a job"),
])
async def test_non_object_submission_body(image_file, status_code, body):
    session = FakeSession(FakeResponse(status_code, body), [])
    code = await run(image_file, "enhance", "", GatewayClient("http://gw.test", session=session), interval=0)
    assert code == EXIT_REJECTED
    assert session.gets == []
