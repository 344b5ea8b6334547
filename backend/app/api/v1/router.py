# backend/app/api/v1/router.py
from fastapi import APIRouter
from backend.app.api.v1.endpoints import auth, categories, thoughts, users

api_router = APIRouter()
api_router.include_router(thoughts.router, prefix="/thoughts", tags=["thoughts"])
api_router.include_router(categories.router, prefix="/categories", tags=["thoughts"])
# Registration (POST /users) and login (POST /sessions)
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
