import importlib
import inspect

from fastapi import Body, Depends, Request, Response


async def _run(handler_fn, args):
    """
    Helper to run a handler function, sync or async, with an ordered argument list.
    """
    result = handler_fn(*args)
    if inspect.isawaitable(result):
        return await result
    return result


def _respond(route, result):
    # handlers returning nothing answer with an empty body (204 on delete)
    if result is None:
        return Response(status_code=route.status_code)
    return result


def resolve_handler(handler_path: str):
    """
    Resolve a handler function from a string path, e.g. "recipe_api.recipes.crud.get_recipe".
    """
    module_name, func_name = handler_path.rsplit(".", 1)
    module = importlib.import_module(module_name)
    return getattr(module, func_name)


def build_body_handler(route, handler_fn, get_store):
    """
    Helper to build an endpoint for routes that expect a request body.
    The handler is called with path params first, then the parsed body,
    then the store.
    """
    request_model = route.request_model

    async def endpoint(
        request: Request,
        data: request_model = Body(..., embed=False),
        store=Depends(get_store),
    ):
        args = list(request.path_params.values())
        args.append(data)
        args.append(store)
        return _respond(route, await _run(handler_fn, args))

    return endpoint


def build_param_handler(route, handler_fn, get_store):
    """
    Helper to build an endpoint for routes that do not expect a request body.
    The handler is called with path params, then the store.
    """

    async def endpoint(request: Request, store=Depends(get_store)):
        args = list(request.path_params.values())
        args.append(store)
        return _respond(route, await _run(handler_fn, args))

    return endpoint


def make_endpoint(route, handler_fn, get_store):
    """
    Helper to build an endpoint for a given route.
    """
    if route.request_model:
        endpoint = build_body_handler(route, handler_fn, get_store)
    else:
        endpoint = build_param_handler(route, handler_fn, get_store)

    endpoint.__name__ = handler_fn.__name__
    return endpoint
