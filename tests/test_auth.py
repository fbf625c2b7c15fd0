"""
Tests for Bearer token origin resolution and the origin gate.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from unittest.mock import patch

import pytest
from fastapi import FastAPI, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi.testclient import TestClient

from device_ledger.auth.bearer import (
    BearerAuth,
    parse_admin_tokens,
    parse_device_tokens,
    verify_bearer_token,
)
from device_ledger.auth.origin import (
    Administrator,
    BadOrigin,
    IdentifiedCaller,
    Origin,
    ensure_root,
    ensure_signed,
)

ADMINS = ["root-token"]
DEVICES = {"tokenA": "device-1", "tokenB": "device-2"}


def _make_test_app(admins: list[str], devices: dict[str, str]) -> FastAPI:
    """Create a minimal app whose endpoint echoes the resolved origin."""
    test_app = FastAPI()
    auth = BearerAuth(admins, devices)
    scheme = HTTPBearer(auto_error=False)

    @test_app.get("/whoami")
    async def whoami(
        credentials: HTTPAuthorizationCredentials | None = Security(scheme),
    ) -> dict:
        origin: Origin = await auth.verify(credentials)
        if isinstance(origin, Administrator):
            return {"origin": "administrator"}
        return {"origin": "device", "identity": origin.identity}

    return test_app


# ---------------------------------------------------------------------------
# Token parsing
# ---------------------------------------------------------------------------


class TestParseTokens:
    """Tests for the ADMIN_TOKENS / DEVICE_TOKENS parsers."""

    def test_admin_tokens_split_and_stripped(self) -> None:
        assert parse_admin_tokens(" a , b ,, ") == ["a", "b"]

    def test_admin_tokens_empty(self) -> None:
        assert parse_admin_tokens("") == []

    def test_device_tokens_multiple(self) -> None:
        result = parse_device_tokens("tokenA:device-1,tokenB:device-2")
        assert result == {"tokenA": "device-1", "tokenB": "device-2"}

    def test_device_tokens_whitespace_stripped(self) -> None:
        result = parse_device_tokens(" tokenA : device-1 , tokenB : device-2 ")
        assert result == {"tokenA": "device-1", "tokenB": "device-2"}

    def test_identity_may_contain_colons(self) -> None:
        """Only the first colon separates token from identity."""
        assert parse_device_tokens("t:urn:meter:7") == {"t": "urn:meter:7"}

    def test_malformed_entries_skipped(self) -> None:
        result = parse_device_tokens("tokenA:device-1,badentry,:x,y:,tokenB:device-2")
        assert result == {"tokenA": "device-1", "tokenB": "device-2"}


# ---------------------------------------------------------------------------
# verify_bearer_token
# ---------------------------------------------------------------------------


class TestVerifyBearerToken:
    """Tests for the standalone token resolver."""

    def test_admin_token_resolves_administrator(self) -> None:
        assert verify_bearer_token("root-token", ADMINS, DEVICES) == Administrator()

    def test_device_token_resolves_identified_caller(self) -> None:
        assert verify_bearer_token("tokenB", ADMINS, DEVICES) == IdentifiedCaller("device-2")

    def test_unknown_token_returns_none(self) -> None:
        assert verify_bearer_token("nope", ADMINS, DEVICES) is None

    def test_empty_token_returns_none(self) -> None:
        assert verify_bearer_token("", ADMINS, DEVICES) is None

    def test_admin_wins_when_token_in_both_tables(self) -> None:
        assert verify_bearer_token("dual", ["dual"], {"dual": "d"}) == Administrator()

    def test_uses_compare_digest(self) -> None:
        with patch(
            "device_ledger.auth.bearer.secrets.compare_digest", return_value=False,
        ) as mock_cmp:
            verify_bearer_token("tokenA", ADMINS, DEVICES)

        assert mock_cmp.call_count == len(ADMINS) + len(DEVICES)


# ---------------------------------------------------------------------------
# BearerAuth.verify
# ---------------------------------------------------------------------------


class TestBearerAuthVerify:
    """Tests for BearerAuth.verify, directly and behind an HTTPBearer scheme."""

    def test_admin_token(self) -> None:
        client = TestClient(_make_test_app(ADMINS, DEVICES))

        response = client.get("/whoami", headers={"Authorization": "Bearer root-token"})

        assert response.json() == {"origin": "administrator"}

    def test_device_token(self) -> None:
        client = TestClient(_make_test_app(ADMINS, DEVICES))

        response = client.get("/whoami", headers={"Authorization": "Bearer tokenA"})

        assert response.json() == {"origin": "device", "identity": "device-1"}

    def test_missing_header_returns_401(self) -> None:
        client = TestClient(_make_test_app(ADMINS, DEVICES))
        assert client.get("/whoami").status_code == 401

    def test_basic_scheme_returns_401(self) -> None:
        client = TestClient(_make_test_app(ADMINS, DEVICES))

        response = client.get("/whoami", headers={"Authorization": "Basic tokenA"})

        assert response.status_code == 401

    def test_invalid_token_returns_401_with_detail(self) -> None:
        client = TestClient(_make_test_app(ADMINS, DEVICES))

        response = client.get("/whoami", headers={"Authorization": "Bearer wrong"})

        assert response.status_code == 401
        assert "detail" in response.json()

    @pytest.mark.asyncio()
    async def test_verify_without_credentials_raises_401(self) -> None:
        auth = BearerAuth(ADMINS, DEVICES)

        with pytest.raises(HTTPException) as exc_info:
            await auth.verify(None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    @pytest.mark.asyncio()
    async def test_verify_resolves_credentials(self) -> None:
        auth = BearerAuth(ADMINS, DEVICES)
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="tokenB")

        assert await auth.verify(credentials) == IdentifiedCaller("device-2")


# ---------------------------------------------------------------------------
# Origin gate
# ---------------------------------------------------------------------------


class TestOriginGate:
    """Tests for ensure_root / ensure_signed."""

    def test_ensure_root_accepts_administrator(self) -> None:
        ensure_root(Administrator())

    def test_ensure_root_rejects_identified_caller(self) -> None:
        with pytest.raises(BadOrigin) as exc_info:
            ensure_root(IdentifiedCaller("device-1"))
        assert exc_info.value.required == "administrator"

    def test_ensure_signed_returns_own_identity(self) -> None:
        assert ensure_signed(IdentifiedCaller("device-1")) == "device-1"

    def test_ensure_signed_rejects_administrator(self) -> None:
        with pytest.raises(BadOrigin):
            ensure_signed(Administrator())
