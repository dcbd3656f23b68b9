"""
FastAPI routers grouped by area (auth, user storefront, admin).

Each module exposes an APIRouter included by ``storefront.app``. Services
and templates are looked up on ``request.app.state`` so that every app
instance built by ``create_app`` carries its own data files.
"""
