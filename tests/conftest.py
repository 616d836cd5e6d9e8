import json
from typing import Any, Dict, List, Union
from unittest.mock import MagicMock

import pytest
import requests

from app.config import ClientSession, Config
from app.context import CallContext
from app.etherscan_client import EtherscanClient
from app.retry import RetryPolicy
from app.service import TransactionService

TX_HASH = "0xe16e8b72443aaee9c3d4ec42ecd973dc7faf583475f66d5a7ac9ebcce72b32c8"

Body = Union[str, Dict[str, Any], Exception]


def make_response(body: Body, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Server Error")
    else:
        response.raise_for_status.return_value = None
    text = body if isinstance(body, str) else json.dumps(body)
    response.text = text
    response.json.side_effect = lambda: json.loads(text)
    return response


class FakeHttp:
    """
    Stand-in for requests.Session. Routes on the `action` query parameter;
    each route holds a list of bodies served in order (the last one repeats).
    """

    def __init__(self, routes: Dict[str, Union[Body, List[Body]]]) -> None:
        self.routes = {
            action: list(bodies) if isinstance(bodies, list) else [bodies]
            for action, bodies in routes.items()
        }
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, params: Dict[str, Any], timeout: float) -> MagicMock:
        self.calls.append({"url": url, "params": dict(params), "timeout": timeout})
        action = params.get("action")
        if action not in self.routes:
            raise AssertionError(f"unexpected action {action}")
        bodies = self.routes[action]
        body = bodies.pop(0) if len(bodies) > 1 else bodies[0]
        if isinstance(body, Exception):
            raise body
        return make_response(body)

    def actions(self) -> List[str]:
        return [call["params"]["action"] for call in self.calls]


def rpc(result: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": 1, "result": result}


def rpc_error(message: str, code: int = -32000) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": 1, "error": {"code": code, "message": message}}


@pytest.fixture
def session() -> ClientSession:
    return ClientSession(api_key="test-api-key", base_url="https://example.test/v2/api")


@pytest.fixture
def ctx() -> CallContext:
    return CallContext.background()


@pytest.fixture
def make_service(session):
    def build(routes: Dict[str, Union[Body, List[Body]]], max_attempts: int = 3):
        http = FakeHttp(routes)
        config = Config(api_key=session.api_key, base_url=session.base_url)
        client = EtherscanClient(session, http=http)
        service = TransactionService(
            config,
            session=session,
            client=client,
            retry_policy=RetryPolicy(max_attempts=max_attempts, backoff_seconds=0),
        )
        return service, http

    return build
