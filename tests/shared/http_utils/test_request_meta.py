# -*- coding: utf-8 -*-
"""
Tests de extracción de IP del cliente y allow-list.
"""

from unittest.mock import Mock

from waterbilling.shared.http_utils.request_meta import get_client_ip, ip_allowed


def _request(headers=None, host="10.1.1.1"):
    request = Mock()
    request.headers = headers or {}
    request.client = Mock(host=host) if host else None
    return request


def test_client_ip_ignores_proxy_headers_by_default():
    request = _request({"x-forwarded-for": "1.2.3.4"})
    assert get_client_ip(request) == "10.1.1.1"


def test_client_ip_trusts_forwarded_for():
    request = _request({"x-forwarded-for": "1.2.3.4, 10.0.0.1"})
    assert get_client_ip(request, trust_proxy_headers=True) == "1.2.3.4"


def test_client_ip_falls_back_to_real_ip():
    request = _request({"x-real-ip": " 5.6.7.8 "})
    assert get_client_ip(request, trust_proxy_headers=True) == "5.6.7.8"


def test_client_ip_unknown_without_client():
    assert get_client_ip(_request(host=None)) == "unknown"


def test_empty_allow_list_allows_all():
    assert ip_allowed("8.8.8.8", [])
    assert ip_allowed("unknown", [""])


def test_allow_list_single_ip_and_cidr():
    allowed = ["196.201.214.200", "10.0.0.0/8"]
    assert ip_allowed("196.201.214.200", allowed)
    assert ip_allowed("10.20.30.40", allowed)
    assert not ip_allowed("8.8.8.8", allowed)


def test_allow_list_rejects_unparseable_ip():
    assert not ip_allowed("testclient", ["10.0.0.0/8"])


def test_allow_list_skips_invalid_entries():
    assert ip_allowed("10.0.0.1", ["not-a-network", "10.0.0.1"])
