from fastapi import Request

from neowatch.session import DashboardSession


def get_session(request: Request) -> DashboardSession:
    return request.app.state.session
