from __future__ import annotations

import pytest

from todofetch.config import FetchConfig


@pytest.fixture
def config() -> FetchConfig:
    return FetchConfig.from_payload(
        {
            "accessToken": "abc",
            "apiBase": "https://api.x.com",
            "apiVersion": "v9",
            "todoistEndpoint": "sync",
            "todoistResourceType": "items",
        }
    )
