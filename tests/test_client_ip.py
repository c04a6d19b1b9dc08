"""Tests for client IP extraction from proxy headers."""

import pytest

from payroll_auth.client_ip import extract_client_ip


@pytest.mark.parametrize(
    "headers, expected",
    [
        ({"x-forwarded-for": "::1"}, "127.0.0.1"),
        ({"x-forwarded-for": "::ffff:203.0.113.5"}, "203.0.113.5"),
        ({"x-forwarded-for": "203.0.113.5:443"}, "203.0.113.5"),
        ({"x-forwarded-for": " 198.51.100.7 , 10.0.0.1"}, "198.51.100.7"),
        ({"x-real-ip": "192.0.2.10"}, "192.0.2.10"),
        ({"x-forwarded-for": "198.51.100.7", "x-real-ip": "192.0.2.10"}, "198.51.100.7"),
        ({"x-forwarded-for": "2001:db8::1"}, "2001:db8::1"),
        ({}, None),
        ({"x-forwarded-for": "  "}, None),
    ],
)
def test_extract_client_ip(headers, expected):
    assert extract_client_ip(headers) == expected
