import logging

import httpx
import pytest

from .conftest import TEST_API_KEY

ROUTES = [
    ("/openai-proxy", {"path": "chat/completions"}),
    ("/oai", {}),
]


def _ok(upstream):
    upstream.respond_with(200, json={"output_text": "ok"})


def _upstream_failure(upstream):
    upstream.respond_with(401, text="invalid api key")


def _transport_failure(upstream):
    upstream.fail_with(lambda request: httpx.ConnectError("connection refused", request=request))


def _non_json(upstream):
    upstream.respond_with(502, text="<html>bad gateway</html>")


@pytest.mark.parametrize("route, params", ROUTES)
@pytest.mark.parametrize("scenario", [_ok, _upstream_failure, _transport_failure, _non_json])
def test_credential_never_logged(client, upstream, caplog, route, params, scenario):
    caplog.set_level(logging.DEBUG)
    scenario(upstream)

    client.post(route, params=params, json={"prompt": "hi", "model": "gpt-4o"})

    assert len(upstream.requests) == 1
    assert caplog.records
    assert TEST_API_KEY not in caplog.text
    for record in caplog.records:
        assert TEST_API_KEY not in str(record.__dict__)
