from fastapi import APIRouter

from config import EMAIL_SERVICE_NAME

# Create a default router for api landing page
DefaultRouter = APIRouter()


@DefaultRouter.get("/")
async def helloWorld():
    return f"Welcome to the {EMAIL_SERVICE_NAME} pickup API"
