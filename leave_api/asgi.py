"""
ASGI entry point.

    uvicorn leave_api.asgi:app
"""

from leave_api.main import create_app

app = create_app()
