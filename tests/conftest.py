from unittest.mock import Mock

import pytest
from nacl.signing import SigningKey

from config import Credential
from exchanges.orderly import OrderlyClient
from keys import orderly_key_from_private_key
from models import ApiResponse

WALLET_KEY = "0x" + "11" * 32
SEED = bytes(range(32))

ENV_VARS = (
    "ORDERLY_API_URL", "CHAIN_ID", "BROKER_ID", "REQUEST_TIMEOUT", "LOG_LEVEL",
    "ACCOUNT_ID", "ORDERLY_ACCOUNT_ID", "ORDERLY_KEY", "ORDERLY_PRIVATE_KEY",
    "PRIVATE_KEY", "RPC_URL", "ORDERLY_VAULT", "ENV_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def seed():
    return SEED


@pytest.fixture
def verify_key(seed):
    return SigningKey(seed).verify_key


@pytest.fixture
def credential(seed):
    return Credential(
        account_id="0xabc123",
        orderly_key=orderly_key_from_private_key(seed),
        private_key=seed,
    )


@pytest.fixture
def client(credential):
    return OrderlyClient("https://api.example.org", credential)


@pytest.fixture
def mock_client():
    return Mock(spec=OrderlyClient)


def api_ok(data=None, **extra):
    return ApiResponse(success=True, data=data, **extra)


def http_response(payload, status=200):
    r = Mock()
    r.status_code = status
    r.ok = 200 <= status < 400
    if isinstance(payload, Exception):
        r.json.side_effect = payload
        r.text = "<html>oops</html>"
    else:
        r.json.return_value = payload
        r.text = ""
    return r
