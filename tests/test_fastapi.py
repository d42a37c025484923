"""TypeIDs crossing an HTTP boundary: path parameters, JSON bodies and error bodies."""

from __future__ import annotations

import re
from typing import Annotated, Any

import pytest
from fastapi import Depends, FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field

from typeid32 import TypeID, parser

from .conftest import (
    SOME_SUFFIX,
    SOME_UUID,
    ApiKeyId,
    ApiKeyIdFactory,
    UserId,
    UserIdFactory,
    load_fixtures,
)


VALID = load_fixtures("valid.yml")
INVALID = load_fixtures("invalid.yml")
USER_ID_PATTERN = re.compile(r"user_[0-7][0-9a-hjkmnp-tv-z]{25}")

parse_user_id = parser(UserId)


# Parameter name must match the route parameter
def user_id_from_path(user_id: str) -> UserId:
    try:
        return parse_user_id(user_id)
    except ValueError as e:
        raise HTTPException(422, str(e)) from None


class User(BaseModel):
    id: UserId = Field(default_factory=UserIdFactory)
    name: str


class ApiKey(BaseModel):
    id: ApiKeyId = Field(default_factory=ApiKeyIdFactory)
    owner: UserId


class Event(BaseModel):
    subject: TypeID


app = FastAPI()
users: dict[TypeID, User] = {}


@app.post("/users")
def create_user(user: User) -> User:
    users[user.id] = user
    return user


@app.get("/users/{user_id}")
def get_user(user_id: Annotated[UserId, Depends(user_id_from_path)]) -> User:
    if user_id not in users:
        raise HTTPException(404, "User not found")
    return users[user_id]


@app.post("/keys")
def create_key(key: ApiKey) -> ApiKey:
    return key


@app.post("/events")
def echo_event(event: Event) -> Event:
    return event


client = TestClient(app)


def _case_ids(cases: list[dict[str, Any]]) -> list[str]:
    return [case["name"] for case in cases]


class TestTextRoundtrip:
    def setup_method(self) -> None:
        users.clear()

    def test_generated_id_is_canonical_text(self) -> None:
        response = client.post("/users", json={"name": "Alice"})
        assert response.status_code == 200

        created = response.json()["id"]
        assert USER_ID_PATTERN.fullmatch(created)
        assert TypeID.parse(created).uuid.version == 7

        fetched = client.get(f"/users/{created}")
        assert fetched.status_code == 200
        assert fetched.json()["id"] == created

    def test_known_suffix_decodes_to_known_uuid(self) -> None:
        text = f"user_{SOME_SUFFIX}"
        client.post("/users", json={"id": text, "name": "Bob"})

        assert next(iter(users)).uuid == SOME_UUID
        assert client.get(f"/users/{text}").json() == {"id": text, "name": "Bob"}

    def test_unknown_but_valid_id_returns_404(self) -> None:
        response = client.get(f"/users/{UserIdFactory()}")
        assert response.status_code == 404

    @pytest.mark.parametrize("case", VALID, ids=_case_ids(VALID))
    def test_any_prefix_field_echoes_canonical_text(self, case: dict[str, Any]) -> None:
        response = client.post("/events", json={"subject": case["typeid"]})
        assert response.status_code == 200
        assert response.json() == {"subject": case["typeid"]}


class TestErrorMessages:
    @pytest.mark.parametrize(
        ("text", "message"),
        [
            (
                "user_8zzzzzzzzzzzzzzzzzzzzzzzzz",
                "illegal leftmost suffix character, must be one of [0-7]",
            ),
            (
                "user_01h455vb4pex5vsknk084sn0iq",
                "illegal character in suffix, must be one of [0123456789abcdefghjkmnpqrstvwxyz]",
            ),
            ("user_01h455vb4pex5vsknk084sn02", "illegal length, must be 26"),
            ("org_01h455vb4pex5vsknk084sn02q", "Expected prefix 'user', got 'org'"),
        ],
    )
    def test_path_errors_carry_exact_message(self, text: str, message: str) -> None:
        response = client.get(f"/users/{text}")
        assert response.status_code == 422
        assert response.json() == {"detail": message}

    @pytest.mark.parametrize("case", INVALID, ids=_case_ids(INVALID))
    def test_body_errors_carry_exact_message(self, case: dict[str, Any]) -> None:
        response = client.post("/events", json={"subject": case["typeid"]})
        assert response.status_code == 422
        [error] = response.json()["detail"]
        assert error["loc"] == ["body", "subject"]
        assert error["msg"].endswith(case["error"])


class TestUnderscorePrefix:
    def test_separator_is_the_last_underscore(self) -> None:
        owner = UserIdFactory()
        response = client.post("/keys", json={"owner": str(owner)})
        assert response.status_code == 200

        key_id = response.json()["id"]
        assert key_id.rfind("_") == len("api_key")
        assert TypeID.parse(key_id).prefix == "api_key"
        assert response.json()["owner"] == str(owner)

    def test_owner_with_key_prefix_is_rejected(self) -> None:
        response = client.post("/keys", json={"owner": str(ApiKeyIdFactory())})
        assert response.status_code == 422
        assert "Expected prefix 'user', got 'api_key'" in response.text
