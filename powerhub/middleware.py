"""
Middleware
----------
"""
from http import HTTPStatus

from aiohttp import web
from aiohttp.abc import Request
from aiohttp.web_middlewares import middleware

from powerhub import logger
from powerhub.serializer import JSendStatus, JSendSchema

response_schema = JSendSchema()


@middleware
async def error_middleware(request: Request, handler):
    """
    Turns any error that escapes a route into a JSend error,
    so that the client always gets JSON back.
    """
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception as error:
        logger.exception("Unhandled error on %s %s", request.method, request.rel_url)
        return web.json_response(response_schema.dump({
            "status": JSendStatus.ERROR,
            "message": "Something went wrong on our end.",
            "data": {"errors": [str(error)]}
        }), status=HTTPStatus.INTERNAL_SERVER_ERROR)
