"""
Keyword echo function.

A standalone serverless-style handler, deployed separately from the HTTP
service and sharing nothing with it. It takes a gateway event and answers
with a fixed greeting that embeds the ``keyword`` query parameter.
"""

import json
from typing import Any, Dict, Mapping

DEFAULT_KEYWORD = "no keyword provided"


def handler(event: Mapping[str, Any], context: Any = None) -> Dict[str, Any]:
    params = event.get("queryStringParameters") or {}
    keyword = params.get("keyword") or DEFAULT_KEYWORD
    return {
        "statusCode": 200,
        "body": json.dumps({"message": f"Tanvi says {keyword}"}),
    }
