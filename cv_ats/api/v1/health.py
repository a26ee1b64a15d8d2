from fastapi import APIRouter

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check that the analysis service is up.")
async def health_check():
    return {"status": "healthy"}
