"""Tests for the standalone keyword echo function."""

import json

import pytest

from order_api.echo import handler


@pytest.mark.parametrize(
    "event, expected",
    [
        ({"queryStringParameters": {"keyword": "hello"}}, "Tanvi says hello"),
        ({"queryStringParameters": {"keyword": ""}}, "Tanvi says no keyword provided"),
        ({"queryStringParameters": {}}, "Tanvi says no keyword provided"),
        ({"queryStringParameters": None}, "Tanvi says no keyword provided"),
        ({}, "Tanvi says no keyword provided"),
    ],
)
def test_handler_greeting(event, expected):
    response = handler(event)

    assert response["statusCode"] == 200
    assert json.loads(response["body"]) == {"message": expected}
