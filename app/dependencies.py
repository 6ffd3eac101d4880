from fastapi import Request

from core.app_context import AppContext


def get_context(request: Request) -> AppContext:
    return request.app.state.context
