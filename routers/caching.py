from fastapi import Response

def set_freshness_headers(response: Response, max_age: int):
    # Lets an HTTP cache in front of the service serve the same freshness window
    response.headers["Cache-Control"] = f"public, s-maxage={max_age}"
