import pytest

from backend.app.access_log import client_address


@pytest.mark.parametrize(
    "forwarded_for,peer_host,expected",
    [
        ("203.0.113.5, 10.0.0.1", "10.0.0.2", "203.0.113.5"),
        ("203.0.113.5", None, "203.0.113.5"),
        (None, "10.0.0.2", "10.0.0.2"),
        ("", "10.0.0.2", "10.0.0.2"),
        (" , 10.0.0.1", "10.0.0.2", "10.0.0.2"),
        (None, None, None),
    ],
)
def test_client_address(forwarded_for, peer_host, expected):
    assert client_address(forwarded_for, peer_host) == expected
