"""
Request controllers for the editorial API.

Controllers accept request data and the agents responsible for the request,
and return a tuple of (response body, status code, response headers). They
raise :class:`werkzeug.exceptions.HTTPException` subclasses when the request
cannot be fulfilled.
"""
