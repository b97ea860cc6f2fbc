from fastapi import APIRouter, Depends

from flowblog.services.db_service import get_migration_service
from flowblog.services.migration_service import MigrationService

router = APIRouter()


@router.post("/run")
async def run_migration(service: MigrationService = Depends(get_migration_service)):
    return await service.migrate_if_needed()
