"""
Decorators
-------------------------
"""
from functools import wraps
from inspect import isawaitable
from typing import Union, Any, Dict, Tuple

from aiohttp import web
from aiohttp.web_request import Request
from aiohttp.web_urldispatcher import View

from powerhub.serializer import JSendStatus, JSendSchema


class Query:
    """Signify the match map entry is taken from the query string."""

    def __init__(self, name: str, type_=str):
        self.name = name
        self.type = type_


def resolve_match_map(request: Request, match_map) -> Dict[str, Any]:
    resolved_matches = {}
    errors = []

    for key, value in match_map.items():

        if isinstance(value, str):
            value = (value, int)

        if isinstance(value, tuple):
            param = request.match_info.get(value[0])
            try:
                resolved_matches[key] = value[1](param)
            except (ValueError, TypeError):
                errors.append(f'Could not convert url parameter "{param}" to expected type {value[1].__name__}.')
        elif isinstance(value, Query):
            param = request.query.get(value.name)
            if not param:
                errors.append(f'Missing query parameter "{value.name}".')
                continue
            try:
                resolved_matches[key] = value.type(param)
            except ValueError:
                errors.append(f'Could not convert query parameter "{param}" to expected type {value.type.__name__}.')
        else:
            raise TypeError(f"match_getter incorrectly configured (doesn't support {type(value)})")

    if errors:
        raise ValueError(*errors)
    return resolved_matches


def match_getter(getter_function, *injection_parameters: str, **match_map: Union[str, Query, Tuple[str, type]]):
    """
    Automatically fetches and includes an item, or 404's if it doesn't exist.

    .. code-block:: python

        # example usage
        @match_getter(get_user, 'user', user_id=Query('userId'))
        async def get(self, user: User)
            return web.json_response(data=user.serialize())

    :param getter_function: The function to fetch the item from.
    :param injection_parameters: The name of the parameter to pass the object as.
    :param match_map: Associates a kwarg on the ``getter_function`` to a url variable or query parameter.
    :return: A decorator that wraps the response and passes in the object.
    """

    def attach_instance(original_function):

        @wraps(original_function)
        async def new_func(self: View, **kwargs):
            try:
                params = resolve_match_map(self.request, match_map)
            except ValueError as error:
                response = {
                    "status": JSendStatus.FAIL,
                    "data": {
                        "message": "Errors with your request.",
                        "errors": list(error.args)
                    }
                }
                raise web.HTTPBadRequest(text=JSendSchema().dumps(response), content_type='application/json')

            item = getter_function(**params)
            if isawaitable(item):
                item = await item

            if item is None:
                response = {
                    "status": JSendStatus.FAIL,
                    "data": {
                        "message": f'Could not find {", ".join(injection_parameters)} with the given params.',
                        "params": params
                    }
                }
                raise web.HTTPNotFound(text=JSendSchema().dumps(response), content_type='application/json')

            # if the getter function returns multiple items,
            # and there are multiple parameter names,
            # then set those keys in the decorated function
            if len(injection_parameters) > 1 and isinstance(item, tuple) and len(injection_parameters) == len(item):
                injected_kwargs = dict(zip(injection_parameters, item))
            else:
                injected_kwargs = {injection_parameters[0]: item}

            return await original_function(self, **kwargs, **injected_kwargs)

        return new_func

    return attach_instance
