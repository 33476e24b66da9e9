import time

import httpx


def wsgi_client(flask_app) -> httpx.Client:
    """httpx client that calls the Flask app in-process (no server needed)."""
    return httpx.Client(transport=httpx.WSGITransport(app=flask_app), base_url="http://testserver")


def make_request(client, method, url, headers=None, params=None, json=None, max_retries=3):
    """
    Send one request through `client`, retrying only on transport errors.

    Status codes are never raised here; tests assert on them.
    """
    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            return client.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json,
                timeout=10,
            )
        except httpx.RequestError as e:
            print(f"Attempt {attempt}: Request error with {method.upper()}: {e}")
            last_error = e

        if attempt < max_retries:
            time.sleep(0.5)

    raise last_error
