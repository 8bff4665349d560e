from fastapi import FastAPI
from contextlib import asynccontextmanager
from app.core.config import settings
from app.core.logging import setup_logging
from app.db import mongodb
from app.db.database import Base, engine
from app.models import user as user_model  # noqa: F401
from app.api.endpoints import readings, refills, genset, tank_levels, dashboard, settings as settings_endpoints, users
from fastapi.middleware.cors import CORSMiddleware

setup_logging()

# Evento de ciclo de vida para conectar y desconectar MongoDB al iniciar/apagar
@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    await mongodb.connect_to_mongo()
    await mongodb.ensure_indexes(mongodb.db_station)
    yield
    await mongodb.close_mongo_connection()

app = FastAPI(
    title="API de Estación de Combustible",
    description="Lecturas de surtidores y tanques, recepciones, generador y configuración de la estación.",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Incluir los routers
app.include_router(readings.router, prefix="/api", tags=["Readings"])
app.include_router(refills.router, prefix="/api", tags=["Tank Refills"])
app.include_router(genset.router, prefix="/api", tags=["Genset"])
app.include_router(tank_levels.router, prefix="/api", tags=["Tank Levels"])
app.include_router(dashboard.router, prefix="/api", tags=["Dashboard"])
app.include_router(settings_endpoints.router, prefix="/api", tags=["Settings"])
app.include_router(users.router, prefix="/api", tags=["Users"])

@app.get("/api/health")
def health_check():
    return {"status": "ok"}
